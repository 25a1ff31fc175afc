"""API endpoint metadata for reference pages.

Pages declare their endpoint in front-matter as ``api: "POST /v1/login"``.
Pages without one get a method badge guessed from their file name.
"""

from dataclasses import dataclass

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")

# Exact page names first, then substring rules in order
_EXACT_BADGES = {
    "get": "GET",
    "list": "GET",
    "profile": "GET",
    "create": "POST",
    "send": "POST",
    "login": "POST",
    "register": "POST",
    "delete": "DELETE",
    "webhook": "HOOK",
}
_SUBSTRING_BADGES = (
    (("get", "list", "query"), "GET"),
    (("create", "send", "login", "register"), "POST"),
    (("update", "edit"), "PUT"),
    (("delete", "remove"), "DELETE"),
)
_BADGE_LABELS = {"DELETE": "DEL"}


@dataclass(frozen=True)
class Endpoint:
    """HTTP method and path (or absolute URL) of a documented endpoint."""

    method: str
    path: str

    def url(self, base_url: str) -> str:
        """Absolute URL for this endpoint against the playground base URL."""
        if self.path.startswith(("http://", "https://")):
            return self.path
        return f"{base_url.rstrip('/')}/{self.path.lstrip('/')}"


@dataclass(frozen=True)
class MethodBadge:
    """Sidebar badge for an API page."""

    method: str

    @property
    def label(self) -> str:
        return _BADGE_LABELS.get(self.method, self.method)

    @property
    def css_class(self) -> str:
        return self.label.lower()


def parse_endpoint(value: object) -> Endpoint:
    """Parse an ``api`` front-matter value such as ``"POST /v1/login"``.

    Raises:
        ValueError: If the value is not ``"<METHOD> <path>"`` with a known method
    """
    if not isinstance(value, str):
        raise ValueError("api must be a string like 'GET /v1/ping'")

    parts = value.split(None, 1)
    if len(parts) != 2:
        raise ValueError(f"api must be '<METHOD> <path>', got {value!r}")

    method = parts[0].upper()
    if method not in HTTP_METHODS:
        raise ValueError(f"Unsupported HTTP method in api: {parts[0]}")

    return Endpoint(method=method, path=parts[1].strip())


def infer_badge(page: str, endpoint: Endpoint | None = None) -> MethodBadge | None:
    """Choose the sidebar method badge for a page.

    Args:
        page: Manifest page path (e.g., "api/user/create")
        endpoint: Endpoint declared in front-matter, if any

    Returns:
        MethodBadge, or None when nothing suggests an HTTP method
    """
    if endpoint is not None:
        return MethodBadge(endpoint.method)

    base = page.rsplit("/", 1)[-1].lower()
    exact = _EXACT_BADGES.get(base)
    if exact is not None:
        return MethodBadge(exact)

    for needles, method in _SUBSTRING_BADGES:
        if any(needle in base for needle in needles):
            return MethodBadge(method)
    return None
