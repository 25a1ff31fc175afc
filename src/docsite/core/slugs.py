"""Heading anchor ids."""

import re

# ASCII word characters only; \s keeps matching Unicode whitespace
_STRIP_RE = re.compile(r"[^A-Za-z0-9_\s\u4e00-\u9fff]")
_SPACE_RE = re.compile(r"\s+")


def slugify(text: str) -> str:
    """Convert heading text to an id-safe slug.

    Keeps ASCII word characters and CJK ideographs, replaces whitespace runs
    with hyphens and trims hyphens from both ends. May return an empty string.
    """
    slug = _STRIP_RE.sub("", text.lower())
    slug = _SPACE_RE.sub("-", slug.strip())
    return slug.strip("-")


class SlugRegistry:
    """Assigns unique heading ids within one page.

    Repeated slugs get ``-1``, ``-2``, ... suffixes. Headings whose text yields
    an empty slug fall back to ``heading-<n>`` where n is the heading position.
    """

    def __init__(self) -> None:
        self._used: set[str] = set()
        self._count = 0

    def assign(self, text: str) -> str:
        self._count += 1
        base = slugify(text) or f"heading-{self._count}"
        slug = base
        counter = 1
        while slug in self._used:
            slug = f"{base}-{counter}"
            counter += 1
        self._used.add(slug)
        return slug

    def skip(self) -> None:
        """Count a heading that gets no id (one without text)."""
        self._count += 1
