"""Playground API endpoints.

Lets the browser console send requests through the preview server, which
avoids cross-origin restrictions on the documented API.
"""

import json
import logging

from aiohttp import web

from docsite.app_keys import config_key, http_client_key
from docsite.playground.client import send_request
from docsite.playground.request import RequestDescriptor
from docsite.playground.snippets import generate_snippets

logger = logging.getLogger(__name__)


def create_playground_routes() -> list[web.RouteDef]:
    """Create routes for the playground API.

    Returns:
        List of route definitions
    """
    return [
        web.post("/api/playground", send_playground_request),
        web.post("/api/snippets", get_snippets),
    ]


async def send_playground_request(request: web.Request) -> web.Response:
    """Send a request descriptor and return the recorded response.

    Network failures are reported in the body (status 0), not as HTTP errors.
    """
    descriptor = await _read_descriptor(request)
    config = request.app[config_key]
    client = request.app[http_client_key]
    response = await send_request(descriptor, client, timeout=config.playground.timeout)
    return web.json_response(response.to_dict())


async def get_snippets(request: web.Request) -> web.Response:
    """Render a request descriptor in every snippet language."""
    descriptor = await _read_descriptor(request)
    return web.json_response({"snippets": generate_snippets(descriptor)})


async def _read_descriptor(request: web.Request) -> RequestDescriptor:
    try:
        data = await request.json()
    except json.JSONDecodeError as e:
        raise _bad_request(f"Invalid JSON: {e}") from e

    try:
        return RequestDescriptor.from_dict(data)
    except ValueError as e:
        raise _bad_request(str(e)) from e


def _bad_request(message: str) -> web.HTTPBadRequest:
    logger.debug(f"Rejected playground request: {message}")
    return web.HTTPBadRequest(
        text=json.dumps({"error": message}),
        content_type="application/json",
    )
