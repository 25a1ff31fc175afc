"""Sidebar navigation builder.

Builds the sidebar tree from a Site for one page being rendered. Navigation
is a view layer over the manifest: links are relative to the current page so
the exported site works from any directory or ``file://`` URL.
"""

from dataclasses import dataclass, field
from typing import TypedDict

from docsite.core.endpoints import MethodBadge, infer_badge
from docsite.core.manifest import Group
from docsite.core.site import Page, Site
from docsite.core.types import PagePath


class NavLinkDict(TypedDict, total=False):
    """Dictionary representation of a sidebar link."""

    title: str
    path: str
    href: str
    active: bool
    method: str


class NavGroupDict(TypedDict):
    """Dictionary representation of a sidebar group."""

    title: str
    items: list["NavLinkDict | NavGroupDict"]


class NavTabDict(TypedDict):
    """Dictionary representation of a sidebar tab."""

    title: str
    active: bool
    groups: list[NavGroupDict]


@dataclass
class NavLink:
    """Sidebar entry for a single page."""

    title: str
    path: PagePath
    href: str
    active: bool = False
    badge: MethodBadge | None = None

    def to_dict(self) -> NavLinkDict:
        """Convert to dictionary for JSON serialization."""
        result: NavLinkDict = {
            "title": self.title,
            "path": self.path,
            "href": self.href,
            "active": self.active,
        }
        if self.badge is not None:
            result["method"] = self.badge.method
        return result


@dataclass
class NavGroup:
    """Sidebar group; items are links or nested groups."""

    title: str
    items: list["NavLink | NavGroup"] = field(default_factory=list)

    @property
    def active(self) -> bool:
        return any(item.active for item in self.items)

    def to_dict(self) -> NavGroupDict:
        return {"title": self.title, "items": [item.to_dict() for item in self.items]}


@dataclass
class NavTab:
    """Sidebar tab section."""

    title: str
    groups: list[NavGroup] = field(default_factory=list)

    @property
    def active(self) -> bool:
        return any(group.active for group in self.groups)

    def to_dict(self) -> NavTabDict:
        return {
            "title": self.title,
            "active": self.active,
            "groups": [group.to_dict() for group in self.groups],
        }


@dataclass
class Sidebar:
    """Complete sidebar for one rendered page."""

    site_name: str
    home_href: str
    tabs: list[NavTab] = field(default_factory=list)

    def links(self) -> list[NavLink]:
        """All links in display order."""
        result: list[NavLink] = []

        def walk(items: list[NavLink | NavGroup]) -> None:
            for item in items:
                if isinstance(item, NavGroup):
                    walk(item.items)
                else:
                    result.append(item)

        for tab in self.tabs:
            for group in tab.groups:
                walk(group.items)
        return result

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.site_name,
            "home": self.home_href,
            "tabs": [tab.to_dict() for tab in self.tabs],
        }


def relative_prefix(current: str | None) -> str:
    """Prefix that leads from the current page's directory to the build root."""
    if not current:
        return ""
    return "../" * current.strip("/").count("/")


def page_href(target: str, current: str | None) -> str:
    """Relative link from the current page to a target page's HTML file."""
    return f"{relative_prefix(current)}{target}.html"


def build_navigation(site: Site, current: str | None = None) -> Sidebar:
    """Build the sidebar for a page.

    Args:
        site: Resolved site structure
        current: Page path being rendered, or None for the landing page

    Returns:
        Sidebar with relative links and the current page marked active
    """
    prefix = relative_prefix(current)
    tabs = [
        NavTab(
            title=tab.name,
            groups=[_build_group(site, group, current) for group in tab.groups],
        )
        for tab in site.manifest.tabs
    ]
    return Sidebar(
        site_name=site.manifest.name,
        home_href=f"{prefix}index.html",
        tabs=tabs,
    )


def _build_group(site: Site, group: Group, current: str | None) -> NavGroup:
    items: list[NavLink | NavGroup] = []
    for entry in group.entries:
        if isinstance(entry, Group):
            items.append(_build_group(site, entry, current))
            continue
        page = site.get_page(entry)
        items.append(_build_link(entry, page, current))
    return NavGroup(title=group.name, items=items)


def _build_link(path: PagePath, page: Page | None, current: str | None) -> NavLink:
    title = page.nav_title if page is not None else path.rsplit("/", 1)[-1]
    endpoint = page.endpoint if page is not None else None
    return NavLink(
        title=title,
        path=path,
        href=page_href(path, current),
        active=current is not None and current.strip("/") == path,
        badge=infer_badge(path, endpoint),
    )
