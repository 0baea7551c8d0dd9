"""Test helpers shared across the scraper tests."""

import asyncio
import socket
import threading
import time
from contextlib import closing
from typing import Dict, List, Optional

from aiohttp import web

from scraper.crawler.fetcher import FetchResult
from scraper.errors import FetchError


class FakeFetcher:
    """In-memory stand-in for WebFetcher.

    Serves ``pages`` by URL, sleeping ``delays[url]`` seconds first. Unknown
    URLs raise FetchError. Every requested URL is appended to ``calls``.
    """

    def __init__(self, pages: Dict[str, str], delays: Optional[Dict[str, float]] = None):
        self.pages = dict(pages)
        self.delays = dict(delays or {})
        self.calls: List[str] = []
        self.completed: List[str] = []
        self.started = False
        self.closed = False

    async def start(self) -> None:
        self.started = True

    async def close(self) -> None:
        self.closed = True

    async def fetch(self, url: str) -> FetchResult:
        self.calls.append(url)
        delay = self.delays.get(url, 0.0)
        if delay:
            await asyncio.sleep(delay)
        if url not in self.pages:
            raise FetchError(url, "HTTP 404", status_code=404)
        self.completed.append(url)
        return FetchResult(url=url, status_code=200, content=self.pages[url])

    def get_stats(self) -> Dict[str, int]:
        return {"total_requests": len(self.calls)}


def find_free_port() -> int:
    """Find a free port on localhost."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(("", 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


class AioHttpTestServer:
    """Wrapper to run an aiohttp app in a background thread."""

    def __init__(self, app: web.Application, port: int) -> None:
        self.app = app
        self.port = port
        self.host = "127.0.0.1"
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._runner: Optional[web.AppRunner] = None
        self._thread: Optional[threading.Thread] = None
        self._ready = threading.Event()

    @property
    def url(self) -> str:
        """Base URL of the server."""
        return f"http://{self.host}:{self.port}"

    def start(self) -> None:
        """Start the server and wait until it accepts connections."""
        self._thread = threading.Thread(target=self._run_server, daemon=True)
        self._thread.start()
        self._ready.wait(timeout=5.0)

    def _run_server(self) -> None:
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)

        async def start() -> None:
            self._runner = web.AppRunner(self.app)
            await self._runner.setup()
            site = web.TCPSite(self._runner, self.host, self.port)
            await site.start()

        self._loop.run_until_complete(start())
        self._ready.set()
        self._loop.run_forever()

    def stop(self) -> None:
        """Stop the server and release its port."""
        if self._loop and self._runner:
            future = asyncio.run_coroutine_threadsafe(self._runner.cleanup(), self._loop)
            future.result(timeout=5.0)

        if self._loop:
            self._loop.call_soon_threadsafe(self._loop.stop)

        if self._thread:
            self._thread.join(timeout=5.0)
        time.sleep(0.01)
