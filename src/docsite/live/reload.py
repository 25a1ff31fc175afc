"""Rebuild-and-reload loop for the preview server.

Watches the content directory with watchfiles, rebuilds the site when a
watched file changes and tells every open page over a WebSocket to reload.
"""

import asyncio
import json
import logging
from collections.abc import Callable
from pathlib import Path

from aiohttp import WSCloseCode, WSMsgType, web
from watchfiles import Change, awatch

from docsite.exceptions import DocsiteError

logger = logging.getLogger(__name__)

DEFAULT_WATCH_PATTERNS = ["**/*.md", "**/*.mdx", "**/*.json"]


class LiveReloadManager:
    """Owns the file watcher task and the set of connected pages.

    Rebuilds run in a worker thread, one at a time; changes that arrive during
    a rebuild are picked up by the next one.
    """

    def __init__(
        self,
        source_dir: Path,
        watch_patterns: list[str] | None = None,
        *,
        rebuild: Callable[[], object] | None = None,
        ignore_dirs: list[Path] | None = None,
    ) -> None:
        """Initialize the live reload manager.

        Args:
            source_dir: Content directory to watch
            watch_patterns: Glob patterns relative to source_dir
                (default: Markdown, MDX and JSON files at any depth)
            rebuild: Blocking callable that rebuilds the site
            ignore_dirs: Directories whose changes are ignored (the build output)
        """
        self._source_dir = source_dir.resolve()
        self._watch_patterns = watch_patterns or DEFAULT_WATCH_PATTERNS
        self._rebuild = rebuild
        self._ignore_dirs = [d.resolve() for d in ignore_dirs or []]
        self._clients: set[web.WebSocketResponse] = set()
        self._stop_event = asyncio.Event()
        self._watcher: asyncio.Task[None] | None = None
        self._lock = asyncio.Lock()

    @property
    def client_count(self) -> int:
        return len(self._clients)

    async def start(self) -> None:
        if self._watcher is None:
            self._stop_event.clear()
            self._watcher = asyncio.create_task(self._watch())

    async def stop(self) -> None:
        """Stop watching and disconnect every page."""
        if self._watcher is not None:
            self._stop_event.set()
            await self._watcher
            self._watcher = None

        clients, self._clients = list(self._clients), set()
        for ws in clients:
            await ws.close(code=WSCloseCode.GOING_AWAY, message=b"Server shutdown")

    async def handle_websocket(self, request: web.Request) -> web.WebSocketResponse:
        """Keep a page connected until it goes away."""
        ws = web.WebSocketResponse(heartbeat=30.0)
        await ws.prepare(request)
        self._clients.add(ws)
        logger.debug(f"Live reload client connected ({len(self._clients)} open)")

        try:
            async for msg in ws:
                if msg.type == WSMsgType.ERROR:
                    logger.debug(f"Live reload connection error: {ws.exception()}")
        finally:
            self._clients.discard(ws)

        return ws

    async def handle_changes(self, paths: list[Path]) -> bool:
        """Rebuild and notify clients for a batch of changed files.

        Args:
            paths: Changed file paths

        Returns:
            True if a reload was broadcast
        """
        relevant = [path for path in paths if self._matches_patterns(path)]
        if not relevant:
            return False

        async with self._lock:
            if self._rebuild is not None:
                logger.info(f"Rebuilding after change to {relevant[0]}")
                try:
                    await asyncio.to_thread(self._rebuild)
                except (DocsiteError, OSError) as e:
                    logger.error(f"Rebuild failed: {e}")
                    return False
                except Exception:
                    # Keep watching after unexpected failures
                    logger.exception("Rebuild failed unexpectedly")
                    return False
            await self._notify(self._to_page_path(relevant[0]))
        return True

    async def _watch(self) -> None:
        async for changes in awatch(
            self._source_dir,
            watch_filter=self._watch_filter,
            stop_event=self._stop_event,
        ):
            await self.handle_changes([Path(path) for _, path in changes])

    def _watch_filter(self, change: Change, path: str) -> bool:
        return self._matches_patterns(Path(path))

    def _matches_patterns(self, path: Path) -> bool:
        """Whether a path lies in the watched tree and matches a pattern."""
        resolved = path.resolve()
        if not resolved.is_relative_to(self._source_dir):
            return False
        if any(resolved.is_relative_to(d) for d in self._ignore_dirs):
            return False

        relative = resolved.relative_to(self._source_dir)
        return any(_glob_match(relative, pattern) for pattern in self._watch_patterns)

    def _to_page_path(self, file_path: Path) -> str:
        """URL path of the page a changed file belongs to ("/" for the root index)."""
        parts = list(file_path.resolve().relative_to(self._source_dir).with_suffix("").parts)
        if parts and parts[-1] == "index":
            parts.pop()
        return "/" + "/".join(parts)

    async def _notify(self, path: str) -> None:
        clients = [ws for ws in self._clients if not ws.closed]
        if not clients:
            return

        message = json.dumps({"type": "reload", "path": path})
        results = await asyncio.gather(
            *(ws.send_str(message) for ws in clients),
            return_exceptions=True,
        )
        failed = sum(isinstance(result, Exception) for result in results)
        if failed:
            logger.debug(f"Reload not delivered to {failed} disconnected client(s)")


def _glob_match(relative: Path, pattern: str) -> bool:
    # Path.match treats a leading "**/" as exactly one directory level
    if relative.match(pattern):
        return True
    return pattern.startswith("**/") and relative.match(pattern[3:])


def create_live_reload_routes(manager: LiveReloadManager) -> list[web.RouteDef]:
    """Create the live reload WebSocket route.

    Args:
        manager: Manager that tracks connected pages

    Returns:
        List of route definitions
    """
    return [web.get("/ws/live-reload", manager.handle_websocket)]
