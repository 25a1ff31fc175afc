"""Navigation manifest loading.

The manifest is a JSON document describing the site's page hierarchy:

    {
      "name": "Acme API",
      "colors": {"primary": "#16A34A"},
      "navigation": {
        "tabs": [
          {"tab": "API", "groups": [{"group": "Auth", "pages": ["auth/login"]}]}
        ]
      }
    }

Group ``pages`` entries are page paths (no extension) or nested group objects.
"""

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path

from docsite.core.types import PagePath
from docsite.exceptions import ManifestError

logger = logging.getLogger(__name__)

DEFAULT_SITE_NAME = "Documentation"
DEFAULT_PRIMARY_COLOR = "#16A34A"


@dataclass(frozen=True)
class Group:
    """Named group of pages; entries are page paths or nested groups."""

    name: str
    entries: tuple["PagePath | Group", ...] = ()

    def iter_pages(self) -> list[PagePath]:
        """Flatten page paths in declaration order, descending into subgroups."""
        pages: list[PagePath] = []
        for entry in self.entries:
            if isinstance(entry, Group):
                pages.extend(entry.iter_pages())
            else:
                pages.append(entry)
        return pages


@dataclass(frozen=True)
class Tab:
    """Top-level navigation tab."""

    name: str
    groups: tuple[Group, ...] = ()


@dataclass(frozen=True)
class Manifest:
    """Parsed navigation manifest."""

    name: str = DEFAULT_SITE_NAME
    primary_color: str = DEFAULT_PRIMARY_COLOR
    description: str | None = None
    tabs: tuple[Tab, ...] = ()
    path: Path | None = field(default=None, compare=False)

    def page_paths(self) -> list[PagePath]:
        """All page paths in manifest order, duplicates removed."""
        seen: set[str] = set()
        pages: list[PagePath] = []
        for tab in self.tabs:
            for group in tab.groups:
                for page in group.iter_pages():
                    if page not in seen:
                        seen.add(page)
                        pages.append(page)
        return pages


def load_manifest(path: Path) -> Manifest:
    """Load and validate a navigation manifest.

    Args:
        path: Path to the JSON manifest file

    Returns:
        Parsed Manifest

    Raises:
        ManifestError: If the file is missing, not valid JSON, or malformed
    """
    if not path.is_file():
        raise ManifestError(f"Manifest not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ManifestError(f"Invalid JSON in manifest {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"Cannot read manifest {path}: {e}") from e

    manifest = parse_manifest(data)
    logger.debug(f"Loaded manifest {path}: {len(manifest.page_paths())} pages")
    return replace(manifest, path=path)


def parse_manifest(data: object) -> Manifest:
    """Build a Manifest from decoded JSON.

    A document whose top level is itself a navigation object
    (``{"tabs": [...]}``) is accepted as well.

    Raises:
        ManifestError: If the structure is not a valid manifest
    """
    if not isinstance(data, dict):
        raise ManifestError("Manifest must be a JSON object")

    if "navigation" in data:
        navigation = data["navigation"]
        if not isinstance(navigation, dict):
            raise ManifestError("navigation must be an object")
    else:
        navigation = data

    name = data.get("name", DEFAULT_SITE_NAME)
    if not isinstance(name, str):
        raise ManifestError("name must be a string")

    description = data.get("description")
    if description is not None and not isinstance(description, str):
        raise ManifestError("description must be a string")

    primary = DEFAULT_PRIMARY_COLOR
    colors = data.get("colors")
    if colors is not None:
        if not isinstance(colors, dict):
            raise ManifestError("colors must be an object")
        primary = colors.get("primary", DEFAULT_PRIMARY_COLOR)
        if not isinstance(primary, str):
            raise ManifestError("colors.primary must be a string")

    raw_tabs = navigation.get("tabs", [])
    if not isinstance(raw_tabs, list):
        raise ManifestError("navigation.tabs must be an array")

    tabs = tuple(_parse_tab(raw, i) for i, raw in enumerate(raw_tabs))
    return Manifest(
        name=name,
        primary_color=primary,
        description=description,
        tabs=tabs,
    )


def _parse_tab(data: object, index: int) -> Tab:
    where = f"navigation.tabs[{index}]"
    if not isinstance(data, dict):
        raise ManifestError(f"{where} must be an object")

    name = data.get("tab")
    if not isinstance(name, str):
        raise ManifestError(f"{where}.tab must be a string")

    raw_groups = data.get("groups", [])
    if not isinstance(raw_groups, list):
        raise ManifestError(f"{where}.groups must be an array")

    groups = tuple(
        _parse_group(raw, f"{where}.groups[{i}]") for i, raw in enumerate(raw_groups)
    )
    return Tab(name=name, groups=groups)


def _parse_group(data: object, where: str) -> Group:
    if not isinstance(data, dict):
        raise ManifestError(f"{where} must be an object")

    name = data.get("group")
    if not isinstance(name, str):
        raise ManifestError(f"{where}.group must be a string")

    raw_pages = data.get("pages", [])
    if not isinstance(raw_pages, list):
        raise ManifestError(f"{where}.pages must be an array")

    entries: list[PagePath | Group] = []
    for i, raw in enumerate(raw_pages):
        if isinstance(raw, str):
            entries.append(_parse_page_path(raw, f"{where}.pages[{i}]"))
        elif isinstance(raw, dict):
            entries.append(_parse_group(raw, f"{where}.pages[{i}]"))
        else:
            raise ManifestError(f"{where}.pages[{i}] must be a string or group object")

    return Group(name=name, entries=tuple(entries))


def _parse_page_path(raw: str, where: str) -> PagePath:
    page = raw.strip().strip("/")
    for suffix in (".mdx", ".md"):
        if page.endswith(suffix):
            page = page[: -len(suffix)]
    if not page:
        raise ManifestError(f"{where} is empty")
    if ".." in page.split("/"):
        raise ManifestError(f"{where} escapes the source directory: {raw}")
    return PagePath(page)
