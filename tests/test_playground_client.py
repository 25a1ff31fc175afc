"""Tests for sending playground requests."""

import asyncio
import json

import httpx
import pytest
from docsite.playground.client import Playground, PlaygroundResponse, send_request
from docsite.playground.request import RequestDescriptor


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestSendRequest:
    """Tests for send_request()."""

    @pytest.mark.asyncio
    async def test__get_json__records_parsed_response(self) -> None:
        """A GET without body returns parsed JSON that pretty-prints."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        descriptor = RequestDescriptor.for_endpoint("GET", "https://api.example.com/v1/ping")
        async with _client(handler) as client:
            response = await send_request(descriptor, client)

        assert seen[0].method == "GET"
        assert seen[0].content == b""
        assert response.status == 200
        assert response.status_text == "OK"
        assert response.ok
        assert response.data == {"ok": True}
        assert response.format_data() == '{\n  "ok": true\n}'

    @pytest.mark.asyncio
    async def test__post__sends_body_and_headers(self) -> None:
        """Body and non-blank headers go out unchanged."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, text="created", headers={"X-Request-Id": "r1"})

        descriptor = RequestDescriptor(
            method="POST",
            url="https://api.example.com/v1/users",
            headers={"Content-Type": "application/json", "Authorization": ""},
            body='{"name": "Ada"}',
        )
        async with _client(handler) as client:
            response = await send_request(descriptor, client)

        assert json.loads(seen[0].content) == {"name": "Ada"}
        assert seen[0].headers["content-type"] == "application/json"
        assert "authorization" not in seen[0].headers
        assert response.status == 201
        assert response.data == "created"
        assert response.format_data() == "created"
        assert response.headers["x-request-id"] == "r1"

    @pytest.mark.asyncio
    async def test__broken_json__falls_back_to_text(self) -> None:
        """A JSON content type with an unparsable body keeps the text."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, content=b"{oops", headers={"Content-Type": "application/json"})

        descriptor = RequestDescriptor(method="GET", url="https://api.example.com")
        async with _client(handler) as client:
            response = await send_request(descriptor, client)

        assert response.data == "{oops"
        assert not response.ok

    @pytest.mark.asyncio
    async def test__connection_error__becomes_network_error(self) -> None:
        """Transport failures yield status 0 and the error message."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        descriptor = RequestDescriptor(method="GET", url="https://api.example.com")
        async with _client(handler) as client:
            response = await send_request(descriptor, client)

        assert response.status == 0
        assert response.status_text == "Network Error"
        assert response.data == {"error": "connection refused"}
        assert response.headers == {}
        assert response.is_network_error

    @pytest.mark.asyncio
    async def test__non_ascii_header__becomes_network_error(self) -> None:
        """Header values httpx cannot encode are reported, not raised."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        descriptor = RequestDescriptor.for_endpoint(
            "GET",
            "https://api.example.com/v1/ping",
            headers={"Authorization": "Bearer 令牌"},
        )
        async with _client(handler) as client:
            response = await send_request(descriptor, client)

        assert seen == []
        assert response.status == 0
        assert response.status_text == "Network Error"
        assert "error" in response.data


class TestPlaygroundResponse:
    """Tests for PlaygroundResponse."""

    def test__to_dict__uses_camel_case_keys(self) -> None:
        """Serialized responses match the browser console's shape."""
        response = PlaygroundResponse(200, "OK", {"ok": True}, {"a": "b"}, 12.345)

        assert response.to_dict() == {
            "status": 200,
            "statusText": "OK",
            "headers": {"a": "b"},
            "data": {"ok": True},
            "elapsedMs": 12.3,
        }

    def test__format_headers__pretty_prints(self) -> None:
        """Headers format as indented JSON."""
        response = PlaygroundResponse(200, "OK", "", {"a": "b"})

        assert response.format_headers() == '{\n  "a": "b"\n}'


class TestPlayground:
    """Tests for Playground state."""

    @pytest.mark.asyncio
    async def test__submit__records_response(self) -> None:
        """A submission stores its response and clears loading."""
        descriptor = RequestDescriptor.for_endpoint("GET", "https://api.example.com/v1/ping")
        async with _client(lambda request: httpx.Response(200, json={"ok": True})) as client:
            playground = Playground(descriptor, client=client)
            response = await playground.submit()

        assert playground.response is response
        assert not playground.loading

    @pytest.mark.asyncio
    async def test__edits__apply_to_next_submission(self) -> None:
        """URL, header and body edits are used by the next submission."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        descriptor = RequestDescriptor.for_endpoint("POST", "https://api.example.com/v1/a")
        async with _client(handler) as client:
            playground = Playground(descriptor, client=client)
            playground.set_url("https://api.example.com/v1/b")
            playground.set_header("Authorization", "Bearer token")
            playground.set_body('{"x": 1}')
            await playground.submit()

        assert str(seen[0].url) == "https://api.example.com/v1/b"
        assert seen[0].headers["authorization"] == "Bearer token"
        assert seen[0].content == b'{"x": 1}'

    @pytest.mark.asyncio
    async def test__overlapping_submissions__keep_latest_response(self) -> None:
        """A slow earlier response never overwrites a newer one."""
        release_first = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/slow":
                await release_first.wait()
                return httpx.Response(200, text="slow")
            return httpx.Response(200, text="fast")

        descriptor = RequestDescriptor(method="GET", url="https://api.example.com/slow")
        async with _client(handler) as client:
            playground = Playground(descriptor, client=client)
            first = asyncio.create_task(playground.submit())
            await asyncio.sleep(0)
            playground.set_url("https://api.example.com/fast")
            second = await playground.submit()
            assert playground.loading
            release_first.set()
            stale = await first

        assert second.data == "fast"
        assert stale.data == "slow"
        assert playground.response is second
        assert not playground.loading
