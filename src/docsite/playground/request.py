"""Request descriptors for the API playground."""

import json
from dataclasses import dataclass, field

from docsite.core.endpoints import HTTP_METHODS

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Authorization": "Bearer YOUR_API_KEY",
}
DEFAULT_BODY = json.dumps({}, indent=2)


@dataclass
class RequestDescriptor:
    """Editable state of one playground request."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""

    def __post_init__(self) -> None:
        self.method = self.method.upper()
        if self.method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {self.method}")
        if not self.url:
            raise ValueError("Request URL is required")

    @classmethod
    def for_endpoint(
        cls,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        body: str | None = None,
    ) -> "RequestDescriptor":
        """Create a descriptor pre-seeded for a documented endpoint.

        Args:
            method: HTTP method
            url: Absolute endpoint URL
            headers: Extra or overriding headers merged over the defaults
            body: Example payload; non-GET methods default to an empty JSON object

        Returns:
            New RequestDescriptor
        """
        merged = {**DEFAULT_HEADERS, **(headers or {})}
        if body is None:
            body = "" if method.upper() == "GET" else DEFAULT_BODY
        return cls(method=method, url=url, headers=merged, body=body)

    @classmethod
    def from_dict(cls, data: object) -> "RequestDescriptor":
        """Build a descriptor from decoded JSON.

        Raises:
            ValueError: If fields are missing or have the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError("Request must be a JSON object")

        method = data.get("method", "GET")
        url = data.get("url")
        headers = data.get("headers") or {}
        body = data.get("body") or ""

        if not isinstance(method, str):
            raise ValueError("method must be a string")
        if not isinstance(url, str):
            raise ValueError("url must be a string")
        if not isinstance(headers, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in headers.items()
        ):
            raise ValueError("headers must be an object of strings")
        for name, value in headers.items():
            if not (name.isascii() and value.isascii()):
                raise ValueError(f"header {name!r} must contain only ASCII characters")
        if not isinstance(body, str):
            raise ValueError("body must be a string")

        return cls(method=method, url=url, headers=dict(headers), body=body)

    def to_dict(self) -> dict[str, object]:
        return {
            "method": self.method,
            "url": self.url,
            "headers": dict(self.headers),
            "body": self.body,
        }

    def outgoing_headers(self) -> dict[str, str]:
        """Headers that are actually sent; blank values are dropped."""
        return {key: value for key, value in self.headers.items() if value and value.strip()}

    def outgoing_body(self) -> str | None:
        """Body that is actually sent. GET requests never carry a body."""
        if self.method == "GET" or not self.body:
            return None
        return self.body
