"""aiohttp preview server for Docsite.

Application factory and route registration. The server serves a built site
from the output directory, proxies playground requests and, when enabled,
rebuilds on source changes and pushes reload events to open pages.
"""

import logging
from pathlib import Path

import httpx
from aiohttp import web

from docsite.api.config import create_config_routes
from docsite.api.playground import create_playground_routes
from docsite.app_keys import (
    config_key,
    http_client_key,
    live_reload_enabled_key,
    live_reload_manager_key,
)
from docsite.config import Config
from docsite.core.builder import SiteBuilder
from docsite.live.reload import LiveReloadManager, create_live_reload_routes

logger = logging.getLogger(__name__)


async def serve_output(request: web.Request) -> web.FileResponse:
    """Serve a file from the build output.

    ``/`` maps to ``index.html`` and extensionless page URLs such as
    ``/auth/login`` map to ``auth/login.html``.
    """
    output_dir = request.app[config_key].site.output_dir.resolve()
    path = request.match_info["path"].strip("/")

    target = resolve_output_file(output_dir, path)
    if target is None:
        raise web.HTTPNotFound()
    return web.FileResponse(target)


def resolve_output_file(output_dir: Path, path: str) -> Path | None:
    """Find the output file for a URL path, refusing paths outside output_dir."""
    candidates = [output_dir / "index.html"] if not path else []
    if path:
        base = output_dir / path
        candidates += [base, base.with_name(base.name + ".html"), base / "index.html"]

    for candidate in candidates:
        resolved = candidate.resolve()
        if not resolved.is_relative_to(output_dir):
            return None
        if resolved.is_file():
            return resolved
    return None


def create_app(config: Config) -> web.Application:
    """Create aiohttp application.

    The site is expected to be built already; see run_server.

    Args:
        config: Application configuration

    Returns:
        Configured aiohttp application
    """
    app = web.Application()
    app[config_key] = config
    app[live_reload_enabled_key] = config.live_reload.enabled

    app.cleanup_ctx.append(_http_client_ctx)

    # API routes (must be registered first to take precedence over static files)
    app.router.add_routes(create_playground_routes())
    app.router.add_routes(create_config_routes())

    if config.live_reload.enabled:
        builder = SiteBuilder(config, live_reload=True)
        manager = LiveReloadManager(
            config.site.source_dir,
            watch_patterns=config.live_reload.watch_patterns,
            rebuild=builder.build,
            ignore_dirs=[config.site.output_dir],
        )
        app[live_reload_manager_key] = manager
        app.router.add_routes(create_live_reload_routes(manager))
        app.on_startup.append(_start_live_reload)
        app.on_cleanup.append(_stop_live_reload)

    # Built site - must be last to catch all remaining routes
    app.router.add_get("/{path:.*}", serve_output)

    return app


async def _http_client_ctx(app: web.Application):
    """Share one httpx client for playground requests over the app lifetime."""
    async with httpx.AsyncClient() as client:
        app[http_client_key] = client
        yield


async def _start_live_reload(app: web.Application) -> None:
    await app[live_reload_manager_key].start()


async def _stop_live_reload(app: web.Application) -> None:
    await app[live_reload_manager_key].stop()


def run_server(config: Config) -> None:
    """Build the site once, then serve it.

    Args:
        config: Application configuration

    Raises:
        DocsiteError: If the initial build fails
    """
    SiteBuilder(config, live_reload=config.live_reload.enabled).build()
    app = create_app(config)
    logger.info(f"Serving {config.site.output_dir} at http://{config.server.host}:{config.server.port}")
    web.run_app(app, host=config.server.host, port=config.server.port, print=None)
