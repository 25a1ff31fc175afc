"""HTTP side of the API playground.

Sends a RequestDescriptor with httpx and records the response. Failures never
propagate: they become a synthetic zero-status "Network Error" response.
"""

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from docsite.playground.request import RequestDescriptor

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
NETWORK_ERROR_STATUS = 0
NETWORK_ERROR_TEXT = "Network Error"


@dataclass
class PlaygroundResponse:
    """Recorded outcome of one playground request."""

    status: int
    status_text: str
    data: Any
    headers: dict[str, str] = field(default_factory=dict)
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_network_error(self) -> bool:
        return self.status == NETWORK_ERROR_STATUS

    def format_data(self) -> str:
        """Response body for display: JSON pretty-printed, text verbatim."""
        if isinstance(self.data, str):
            return self.data
        return json.dumps(self.data, indent=2, ensure_ascii=False)

    def format_headers(self) -> str:
        return json.dumps(self.headers, indent=2, ensure_ascii=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "status": self.status,
            "statusText": self.status_text,
            "headers": self.headers,
            "data": self.data,
            "elapsedMs": round(self.elapsed_ms, 1),
        }

    @classmethod
    def network_error(cls, error: Exception, elapsed_ms: float = 0.0) -> "PlaygroundResponse":
        return cls(
            status=NETWORK_ERROR_STATUS,
            status_text=NETWORK_ERROR_TEXT,
            data={"error": str(error) or type(error).__name__},
            headers={},
            elapsed_ms=elapsed_ms,
        )


async def send_request(
    request: RequestDescriptor,
    client: httpx.AsyncClient,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> PlaygroundResponse:
    """Issue exactly one HTTP request for a descriptor.

    Args:
        request: Request to send
        client: httpx client used for the request
        timeout: Request timeout in seconds

    Returns:
        PlaygroundResponse; network failures yield a zero-status response
    """
    body = request.outgoing_body()
    started = time.perf_counter()
    logger.info(f"Playground request: {request.method} {request.url}")
    try:
        response = await client.request(
            request.method,
            request.url,
            headers=request.outgoing_headers(),
            content=body.encode("utf-8") if body is not None else None,
            timeout=timeout,
        )
    except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as e:
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.warning(f"Playground request failed: {request.method} {request.url}: {e}")
        return PlaygroundResponse.network_error(e, elapsed_ms)

    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(f"Playground response: {response.status_code} {response.reason_phrase}")
    return PlaygroundResponse(
        status=response.status_code,
        status_text=response.reason_phrase,
        data=_decode_body(response),
        headers=dict(response.headers),
        elapsed_ms=elapsed_ms,
    )


def _decode_body(response: httpx.Response) -> Any:
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return response.json()
        except ValueError:
            logger.debug("Response declared JSON but did not parse, keeping text")
    return response.text


class Playground:
    """Interactive request console state for one documented endpoint.

    Holds the editable request and the most recent response. When submissions
    overlap, only the latest one may record its response.
    """

    def __init__(
        self,
        request: RequestDescriptor,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize playground.

        Args:
            request: Initial request state
            client: httpx client to reuse; a short-lived one is created per
                submission when omitted
            timeout: Request timeout in seconds
        """
        self.request = request
        self._client = client
        self._timeout = timeout
        self._response: PlaygroundResponse | None = None
        self._submission = 0
        self._in_flight = 0

    @property
    def response(self) -> PlaygroundResponse | None:
        """Response of the latest completed submission."""
        return self._response

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    def set_url(self, url: str) -> None:
        self.request.url = url

    def set_header(self, name: str, value: str) -> None:
        self.request.headers[name] = value

    def set_body(self, body: str) -> None:
        self.request.body = body

    async def submit(self) -> PlaygroundResponse:
        """Send the current request and record its response.

        Returns:
            The response for this submission, even if a newer submission
            has since replaced it as the recorded response
        """
        self._submission += 1
        submission = self._submission
        self._response = None
        self._in_flight += 1
        snapshot = RequestDescriptor(
            method=self.request.method,
            url=self.request.url,
            headers=dict(self.request.headers),
            body=self.request.body,
        )
        try:
            if self._client is not None:
                response = await send_request(snapshot, self._client, timeout=self._timeout)
            else:
                async with httpx.AsyncClient() as client:
                    response = await send_request(snapshot, client, timeout=self._timeout)
        finally:
            self._in_flight -= 1

        if submission == self._submission:
            self._response = response
        else:
            logger.debug(f"Discarding stale playground response #{submission}")
        return response
