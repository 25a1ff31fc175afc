"""Runtime settings exposed to the browser."""

from aiohttp import web

from docsite.app_keys import config_key, live_reload_enabled_key


def create_config_routes() -> list[web.RouteDef]:
    """Create routes for the config API.

    Returns:
        List of route definitions
    """
    return [web.get("/api/config", get_config)]


async def get_config(request: web.Request) -> web.Response:
    """Report whether live reload is active and where the playground points."""
    playground = request.app[config_key].playground
    return web.json_response(
        {
            "liveReloadEnabled": request.app[live_reload_enabled_key],
            "playground": {
                "baseUrl": playground.base_url,
                "timeout": playground.timeout,
            },
        }
    )
