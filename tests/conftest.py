"""Shared fixtures for the scraper tests."""

import logging
from collections.abc import Generator
from typing import List

import pytest

from tests.mock_site import STATES, create_app
from tests.utils import AioHttpTestServer, find_free_port


@pytest.fixture
def mock_site_server() -> Generator[AioHttpTestServer, None, None]:
    """Start the mock wiki site on a random local port."""
    server = AioHttpTestServer(create_app(STATES), find_free_port())
    server.start()
    yield server
    server.stop()


@pytest.fixture
def site_url(mock_site_server: AioHttpTestServer) -> str:
    """Base URL of the mock wiki site."""
    return mock_site_server.url


@pytest.fixture
def serve_site():
    """Factory fixture that starts a mock site for a custom list of states."""
    servers: List[AioHttpTestServer] = []

    def _serve(states) -> AioHttpTestServer:
        server = AioHttpTestServer(create_app(states), find_free_port())
        server.start()
        servers.append(server)
        return server

    yield _serve

    for server in servers:
        server.stop()


@pytest.fixture
def restore_logging():
    """Restore root logger handlers and level after a test reconfigures them."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level

    yield

    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
