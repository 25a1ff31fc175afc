"""Front-matter parsing for content files."""

import re
from pathlib import Path
from typing import Any

import yaml

from docsite.exceptions import ContentError

FRONT_MATTER_RE = re.compile(
    r"\A(?:\ufeff)?---[ \t]*\r?\n(.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


def parse_front_matter(text: str, path: Path | None = None) -> tuple[dict[str, Any], str]:
    """Split a content document into metadata and body.

    Args:
        text: Full document text
        path: Source path, used for error messages

    Returns:
        Tuple of (metadata, body). Metadata is empty when the document has no
        leading ``---`` block.

    Raises:
        ContentError: If the front-matter is not valid YAML or not a mapping
    """
    match = FRONT_MATTER_RE.match(text)
    if match is None:
        return {}, text

    source = path or Path("<string>")
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        raise ContentError(source, f"invalid front-matter: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ContentError(source, "front-matter must be a mapping")

    return {str(key): value for key, value in data.items()}, text[match.end():]
