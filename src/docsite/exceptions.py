"""Exceptions raised while building a documentation site."""

from pathlib import Path


class DocsiteError(Exception):
    """Base class for all docsite errors."""


class ManifestError(DocsiteError):
    """Navigation manifest is missing or malformed."""


class MissingPagesError(ManifestError):
    """Manifest references pages that have no content file."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        listed = ", ".join(missing)
        super().__init__(f"No content file for {len(missing)} manifest page(s): {listed}")


class ContentError(DocsiteError):
    """Content file could not be read or parsed."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")


class BuildError(DocsiteError):
    """Build precondition failed."""
