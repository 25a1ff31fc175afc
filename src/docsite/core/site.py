"""Site structure resolved from the navigation manifest.

The manifest names pages; the site binds each page path to its content file
and front-matter. Resolution happens once at build start and fails fast on
any page path without a content file.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from docsite.core.endpoints import Endpoint, parse_endpoint
from docsite.core.frontmatter import parse_front_matter
from docsite.core.manifest import Manifest, load_manifest
from docsite.core.types import PagePath
from docsite.exceptions import ContentError, MissingPagesError

logger = logging.getLogger(__name__)

CONTENT_SUFFIXES = (".mdx", ".md")
INDEX_PAGE = PagePath("index")
_SKIP_DIRS = {"node_modules"}


@dataclass(frozen=True)
class Page:
    """Document page data."""

    path: PagePath
    source_path: Path
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def title(self) -> str:
        """Front-matter title, or the last path segment."""
        title = self.metadata.get("title")
        return str(title) if title else self.path.rsplit("/", 1)[-1]

    @property
    def nav_title(self) -> str:
        """Title shown in the sidebar."""
        sidebar_title = self.metadata.get("sidebarTitle")
        return str(sidebar_title) if sidebar_title else self.title

    @property
    def endpoint(self) -> Endpoint | None:
        value = self.metadata.get("api")
        if value is None:
            return None
        try:
            return parse_endpoint(value)
        except ValueError as e:
            raise ContentError(self.source_path, str(e)) from e

    @property
    def output_path(self) -> Path:
        """Output file relative to the build directory."""
        return Path(f"{self.path}.html")

    @property
    def depth(self) -> int:
        """Number of directories between the build root and the output file."""
        return self.path.count("/")


class Site:
    """Resolved site: manifest plus one Page per distinct manifest entry."""

    __slots__ = ("_index", "_manifest", "_pages", "_source_dir")

    def __init__(self, manifest: Manifest, source_dir: Path, pages: list[Page]) -> None:
        self._manifest = manifest
        self._source_dir = source_dir
        self._pages = pages
        self._index = {page.path: i for i, page in enumerate(pages)}

    @property
    def manifest(self) -> Manifest:
        return self._manifest

    @property
    def source_dir(self) -> Path:
        return self._source_dir

    @property
    def pages(self) -> list[Page]:
        """Pages in manifest order."""
        return list(self._pages)

    @property
    def has_index_page(self) -> bool:
        """Whether the manifest itself provides the ``index`` page."""
        return INDEX_PAGE in self._index

    def get_page(self, path: str) -> Page | None:
        """Get page by path.

        Args:
            path: Page path with or without leading slash or ``.html`` suffix

        Returns:
            Page if found, None otherwise
        """
        idx = self._index.get(_normalize(path))
        if idx is None:
            return None
        return self._pages[idx]

    def get_neighbors(self, path: str) -> tuple[Page | None, Page | None]:
        """Previous and next pages in manifest order."""
        idx = self._index.get(_normalize(path))
        if idx is None:
            return None, None
        previous = self._pages[idx - 1] if idx > 0 else None
        following = self._pages[idx + 1] if idx + 1 < len(self._pages) else None
        return previous, following


class SiteLoader:
    """Loads the manifest and binds every page to its content file."""

    def __init__(
        self,
        source_dir: Path,
        manifest_path: Path,
        *,
        exclude_dirs: list[Path] | None = None,
    ) -> None:
        """Initialize loader.

        Args:
            source_dir: Root directory containing content files
            manifest_path: Path to the JSON navigation manifest
            exclude_dirs: Directories ignored when looking for unlisted content
        """
        self._source_dir = source_dir
        self._manifest_path = manifest_path
        self._exclude_dirs = [d.resolve() for d in exclude_dirs or []]

    @property
    def source_dir(self) -> Path:
        return self._source_dir

    def load(self) -> Site:
        """Resolve the manifest against the source directory.

        Returns:
            Site with one page per distinct manifest entry

        Raises:
            ManifestError: If the manifest is missing or malformed
            MissingPagesError: If any manifest page has no content file
            ContentError: If a content file has invalid front-matter
        """
        manifest = load_manifest(self._manifest_path)

        resolved: list[tuple[PagePath, Path]] = []
        missing: list[str] = []
        for page_path in manifest.page_paths():
            source_path = self.resolve_source_path(page_path)
            if source_path is None:
                missing.append(page_path)
            else:
                resolved.append((page_path, source_path))

        if missing:
            raise MissingPagesError(missing)

        pages = [
            Page(path=page_path, source_path=source_path, metadata=_read_metadata(source_path))
            for page_path, source_path in resolved
        ]

        listed = {page.source_path.resolve() for page in pages}
        for unlisted in self._find_content_files():
            if unlisted.resolve() not in listed:
                logger.warning(
                    f"Content file not in manifest, skipped: "
                    f"{unlisted.relative_to(self._source_dir)}"
                )

        logger.debug(f"Resolved {len(pages)} pages from {self._manifest_path}")
        return Site(manifest, self._source_dir, pages)

    def resolve_source_path(self, page_path: str) -> Path | None:
        """Find the content file for a page path.

        Tries ``<path>.mdx``, ``<path>.md``, then ``<path>/index.mdx`` and
        ``<path>/index.md``.

        Returns:
            Path to the content file or None if none exists
        """
        base = self._source_dir / page_path
        candidates = [base.with_name(base.name + suffix) for suffix in CONTENT_SUFFIXES]
        candidates += [base / f"index{suffix}" for suffix in CONTENT_SUFFIXES]
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        return None

    def _find_content_files(self) -> list[Path]:
        found: list[Path] = []
        for suffix in CONTENT_SUFFIXES:
            for path in self._source_dir.rglob(f"*{suffix}"):
                relative = path.relative_to(self._source_dir)
                if any(part.startswith(".") or part in _SKIP_DIRS for part in relative.parts[:-1]):
                    continue
                resolved = path.resolve()
                if any(resolved.is_relative_to(d) for d in self._exclude_dirs):
                    continue
                found.append(path)
        return sorted(found)


def _read_metadata(source_path: Path) -> dict[str, Any]:
    try:
        text = source_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ContentError(source_path, f"not valid UTF-8: {e}") from e
    metadata, _ = parse_front_matter(text, source_path)
    return metadata


def _normalize(path: str) -> str:
    normalized = path.strip("/")
    if normalized.endswith(".html"):
        normalized = normalized[: -len(".html")]
    return normalized
