"""HTML layout for exported pages.

Wraps rendered page bodies in full HTML documents using the Jinja2 templates
bundled in ``docsite/templates``. All context is passed explicitly: the Site,
the playground settings and the page being rendered.
"""

import json
from dataclasses import dataclass
from typing import Any

from jinja2 import Environment, PackageLoader, select_autoescape
from pygments.formatters import HtmlFormatter

from docsite.config import PlaygroundConfig
from docsite.core.navigation import Sidebar, build_navigation, page_href, relative_prefix
from docsite.core.renderer import RenderResult
from docsite.core.site import Page, Site
from docsite.exceptions import ContentError
from docsite.playground.request import RequestDescriptor
from docsite.playground.snippets import LANGUAGES, generate_snippets, language_label


@dataclass(frozen=True)
class PageLink:
    """Previous/next link at the bottom of a page."""

    title: str
    href: str


@dataclass(frozen=True)
class NavigationContext:
    """Where a page sits in the site: sidebar, link prefix and neighbors."""

    sidebar: Sidebar
    prefix: str
    previous: PageLink | None = None
    next: PageLink | None = None


def create_environment() -> Environment:
    """Jinja2 environment over the bundled templates, HTML auto-escaped."""
    return Environment(
        loader=PackageLoader("docsite", "templates"),
        autoescape=select_autoescape(),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


class Layout:
    """Renders page documents, the landing page and the stylesheet."""

    def __init__(
        self,
        site: Site,
        *,
        playground: PlaygroundConfig | None = None,
        formatter: HtmlFormatter | None = None,
        live_reload: bool = False,
        lang: str = "en",
    ) -> None:
        """Initialize layout.

        Args:
            site: Resolved site structure
            playground: Base URL and default headers for API page consoles
            formatter: Pygments formatter whose styles go into styles.css
            live_reload: Embed the live reload client script in pages
            lang: Value of the ``<html lang>`` attribute
        """
        self._site = site
        self._playground = playground or PlaygroundConfig()
        self._formatter = formatter or HtmlFormatter(cssclass="highlight")
        self._live_reload = live_reload
        self._lang = lang
        self._env = create_environment()

    def navigation_context(self, page: Page | None) -> NavigationContext:
        """Sidebar and neighbor links for a page (None for the landing page)."""
        current = page.path if page is not None else None
        sidebar = build_navigation(self._site, current)
        if page is None:
            return NavigationContext(sidebar=sidebar, prefix="")

        previous, following = self._site.get_neighbors(page.path)
        return NavigationContext(
            sidebar=sidebar,
            prefix=relative_prefix(current),
            previous=_page_link(previous, current),
            next=_page_link(following, current),
        )

    def render_page(self, page: Page, result: RenderResult) -> str:
        """Full HTML document for one rendered page."""
        navigation = self.navigation_context(page)
        template = self._env.get_template("page.html")
        return template.render(
            **self._common_context(navigation),
            page=page,
            title=result.title,
            description=result.description or self._site.manifest.description,
            content=result.html,
            toc=result.toc,
            playground=self.playground_context(page, result),
        )

    def render_index(self) -> str:
        """Generated landing page listing every tab and group."""
        navigation = self.navigation_context(None)
        template = self._env.get_template("index.html")
        return template.render(
            **self._common_context(navigation),
            title=self._site.manifest.name,
            description=self._site.manifest.description,
        )

    def render_stylesheet(self) -> str:
        """styles.css with the manifest's primary color and Pygments styles."""
        template = self._env.get_template("styles.css")
        return template.render(
            primary_color=self._site.manifest.primary_color,
            highlight_css=self._formatter.get_style_defs(".highlight"),
        )

    def playground_context(self, page: Page, result: RenderResult) -> dict[str, Any] | None:
        """Seed request and snippets for an API page, None for other pages."""
        endpoint = result.endpoint
        if endpoint is None:
            return None

        request = RequestDescriptor.for_endpoint(
            endpoint.method,
            endpoint.url(self._playground.base_url),
            headers=self._playground.headers,
            body=_example_body(page, result.metadata.get("playground_body")),
        )
        snippets = generate_snippets(request)
        return {
            "method": request.method,
            "url": request.url,
            "request": request.to_dict(),
            "snippets": [
                {"language": language, "label": language_label(language), "code": snippets[language]}
                for language in LANGUAGES
            ],
        }

    def _common_context(self, navigation: NavigationContext) -> dict[str, Any]:
        manifest = self._site.manifest
        return {
            "lang": self._lang,
            "site_name": manifest.name,
            "sidebar": navigation.sidebar,
            "prefix": navigation.prefix,
            "previous": navigation.previous,
            "next": navigation.next,
            "live_reload": self._live_reload,
        }


def _page_link(page: Page | None, current: str | None) -> PageLink | None:
    if page is None:
        return None
    return PageLink(title=page.nav_title, href=page_href(page.path, current))


def _example_body(page: Page, value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, dict | list):
        return json.dumps(value, indent=2, ensure_ascii=False)
    raise ContentError(page.source_path, "playground_body must be a string, mapping or list")
