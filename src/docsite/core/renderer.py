"""Markdown/MDX rendering.

Converts content files to HTML with heading anchors, a table of contents and
Pygments syntax highlighting.
"""

import html
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import mistune
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from docsite.core.endpoints import Endpoint, parse_endpoint
from docsite.core.frontmatter import parse_front_matter
from docsite.core.slugs import SlugRegistry
from docsite.exceptions import ContentError

logger = logging.getLogger(__name__)

MARKDOWN_PLUGINS = ["table", "strikethrough", "task_lists", "url"]
TOC_LEVELS = (2, 3)

_TAG_RE = re.compile(r"<[^>]+>")
_MDX_STATEMENT_RE = re.compile(r"^(?:import|export)\s")
_MDX_COMMENT_RE = re.compile(r"\{/\*.*?\*/\}", re.DOTALL)
_FENCE_RE = re.compile(r"^\s{0,3}(`{3,}|~{3,})")


@dataclass(frozen=True)
class TocEntry:
    """Table of contents entry."""

    level: int
    title: str
    id: str

    def to_dict(self) -> dict[str, str | int]:
        """Convert to dictionary for JSON serialization."""
        return {"level": self.level, "title": self.title, "id": self.id}


@dataclass
class RenderResult:
    """Result of rendering a content document."""

    html: str
    title: str
    description: str | None
    toc: list[TocEntry]
    headings: list[TocEntry]
    metadata: dict[str, Any]
    endpoint: Endpoint | None
    source_path: Path
    warnings: list[str] = field(default_factory=list)


class _DocsHtmlRenderer(mistune.HTMLRenderer):
    """HTML renderer that records headings and highlights code blocks.

    Holds per-document state, so a fresh instance is needed for each render.
    """

    def __init__(self, formatter: HtmlFormatter) -> None:
        # Raw HTML must pass through for MDX component tags
        super().__init__(escape=False)
        self._formatter = formatter
        self._slugs = SlugRegistry()
        self.headings: list[TocEntry] = []
        self.warnings: list[str] = []

    def heading(self, text: str, level: int, **attrs: Any) -> str:
        title = _plain_text(text)
        if not title:
            self._slugs.skip()
            return super().heading(text, level, **attrs)

        anchor = self._slugs.assign(title)
        self.headings.append(TocEntry(level=level, title=title, id=anchor))
        return f'<h{level} id="{anchor}">{text}</h{level}>\n'

    def block_code(self, code: str, info: str | None = None) -> str:
        language = info.split(None, 1)[0] if info and info.strip() else None
        if language is None:
            return super().block_code(code, info)

        try:
            lexer = get_lexer_by_name(language, stripall=False)
        except ClassNotFound:
            self.warnings.append(f"Unknown code block language: {language}")
            return super().block_code(code, info)

        highlighted = highlight(code, lexer, self._formatter)
        return f'<div class="code-block" data-language="{html.escape(language)}">{highlighted}</div>\n'


class PageRenderer:
    """Renders content files to HTML fragments."""

    def __init__(self, source_dir: Path) -> None:
        """Initialize renderer.

        Args:
            source_dir: Root directory containing content sources
        """
        self._source_dir = source_dir
        self._formatter = HtmlFormatter(cssclass="highlight")

    @property
    def source_dir(self) -> Path:
        """Root directory containing content sources."""
        return self._source_dir

    @property
    def formatter(self) -> HtmlFormatter:
        """Pygments formatter shared by all renders (for stylesheet generation)."""
        return self._formatter

    def render(self, source_path: Path, fallback_title: str = "") -> RenderResult:
        """Render a content file.

        Args:
            source_path: Markdown or MDX file
            fallback_title: Title used when neither front-matter nor an H1 gives one

        Returns:
            RenderResult with HTML, title, ToC and front-matter

        Raises:
            FileNotFoundError: If source file doesn't exist
            ContentError: If the file cannot be decoded or has invalid front-matter
        """
        if not source_path.is_file():
            raise FileNotFoundError(f"Source file not found: {source_path}")

        try:
            text = source_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ContentError(source_path, f"not valid UTF-8: {e}") from e

        return self.render_text(text, source_path, fallback_title)

    def render_text(
        self,
        text: str,
        source_path: Path,
        fallback_title: str = "",
    ) -> RenderResult:
        """Render content text that has already been read from source_path."""
        metadata, body = parse_front_matter(text, source_path)

        endpoint = None
        if "api" in metadata:
            try:
                endpoint = parse_endpoint(metadata["api"])
            except ValueError as e:
                raise ContentError(source_path, str(e)) from e

        renderer = _DocsHtmlRenderer(self._formatter)
        markdown = mistune.create_markdown(renderer=renderer, plugins=MARKDOWN_PLUGINS)
        body_html = markdown(strip_mdx_statements(body))
        if not isinstance(body_html, str):
            raise ContentError(source_path, "renderer produced no HTML")

        for warning in renderer.warnings:
            logger.warning(f"{source_path}: {warning}")

        description = metadata.get("description")
        return RenderResult(
            html=body_html,
            title=_resolve_title(metadata, renderer.headings, fallback_title),
            description=str(description) if description is not None else None,
            toc=[entry for entry in renderer.headings if entry.level in TOC_LEVELS],
            headings=list(renderer.headings),
            metadata=metadata,
            endpoint=endpoint,
            source_path=source_path,
            warnings=list(renderer.warnings),
        )


def strip_mdx_statements(body: str) -> str:
    """Drop top-level MDX import/export lines and ``{/* */}`` comments.

    Lines inside fenced code blocks are left untouched.
    """
    lines: list[str] = []
    fence: str | None = None
    for line in body.splitlines(keepends=True):
        match = _FENCE_RE.match(line)
        if match:
            marker = match.group(1)
            if fence is None:
                fence = marker
            elif marker[0] == fence[0] and len(marker) >= len(fence):
                fence = None
            lines.append(line)
            continue

        if fence is None:
            if _MDX_STATEMENT_RE.match(line):
                continue
            line = _MDX_COMMENT_RE.sub("", line)
        lines.append(line)
    return "".join(lines)


def _plain_text(fragment: str) -> str:
    return html.unescape(_TAG_RE.sub("", fragment)).strip()


def _resolve_title(
    metadata: dict[str, Any],
    headings: list[TocEntry],
    fallback: str,
) -> str:
    title = metadata.get("title")
    if title:
        return str(title)
    for entry in headings:
        if entry.level == 1:
            return entry.title
    return fallback
