"""Application keys for type-safe app configuration access."""

import httpx
from aiohttp import web

from docsite.config import Config
from docsite.live.reload import LiveReloadManager

config_key = web.AppKey("config", Config)
http_client_key = web.AppKey("http_client", httpx.AsyncClient)
live_reload_enabled_key = web.AppKey("live_reload_enabled", bool)
live_reload_manager_key = web.AppKey("live_reload_manager", LiveReloadManager)
