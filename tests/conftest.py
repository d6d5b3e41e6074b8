"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import asyncio
import socket
from typing import Awaitable, Callable

import pytest

from checkmate.config import Settings

TCPHandler = Callable[[asyncio.StreamReader, asyncio.StreamWriter], Awaitable[None]]


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing."""
    return Settings(
        # === Application ===
        APP_NAME="Checkmate (Test)",
        APP_VERSION="0.1.0",
        DEBUG=True,
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Checks ===
        FILEPATH_ENV_VAR="CHECKMATE_FILEPATH",
        TCP_READ_BUFFER_SIZE=1024,

        # === Monitoring ===
        PROMETHEUS_ENABLED=False,
    )


@pytest.fixture
async def tcp_server():
    """Factory starting loopback TCP servers; returns the bound port.

    Usage:
        async def test_something(tcp_server):
            port = await tcp_server(handler)
    """
    servers: list[asyncio.AbstractServer] = []

    async def start(handler: TCPHandler) -> int:
        server = await asyncio.start_server(handler, "127.0.0.1", 0)
        servers.append(server)
        return server.sockets[0].getsockname()[1]

    yield start

    for server in servers:
        server.close()
        await server.wait_closed()


@pytest.fixture
def unused_port() -> int:
    """A loopback port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]
