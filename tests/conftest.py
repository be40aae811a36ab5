#!/usr/bin/env python3
# Copyright (c) 2025 Scott Wilcox
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Pytest configuration for MCP session server tests.
"""

import asyncio
import contextlib
from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest

from mcp_session_server.dispatcher import Dispatcher
from mcp_session_server.registry import ToolRegistry, default_registry
from mcp_session_server.server import MCPServer, ServerConfig
from mcp_session_server.tools import Tool, ToolProperty
from mcp_session_server.common import ToolExecutionError


def pytest_configure(config):
    """Register custom markers for MCP session server tests."""
    config.addinivalue_line("markers",
                           "live_server: mark test as running against a server bound to a local port")


class FailingTool(Tool):
    """Tool whose execution always fails."""

    name = "explode"
    description = "Always fails"

    def properties(self) -> List[ToolProperty]:
        return []

    def execute(self, arguments: Dict[str, Any]) -> Any:
        raise RuntimeError("kaboom")


class StrictTool(Tool):
    """Tool rejecting arguments it cannot use."""

    name = "shout"
    description = "Upper-cases text"

    def properties(self) -> List[ToolProperty]:
        return [
            ToolProperty("text", "string", "Text to shout", required=True),
            ToolProperty("times", "integer", "How often to repeat it"),
        ]

    def execute(self, arguments: Dict[str, Any]) -> Any:
        if not isinstance(arguments.get("text"), str):
            raise ToolExecutionError("text must be a string")
        return self.text_content(arguments["text"].upper() * arguments.get("times", 1))


@pytest.fixture
def registry() -> ToolRegistry:
    """A registry with the echo tool only."""
    return default_registry()


@pytest.fixture
def full_registry() -> ToolRegistry:
    """A registry with the echo tool plus test tools."""
    registry = default_registry()
    registry.register(FailingTool())
    registry.register(StrictTool())
    return registry


@pytest.fixture
def dispatcher(full_registry) -> Dispatcher:
    return Dispatcher(full_registry)


@pytest.fixture
def mock_writer() -> MagicMock:
    """A StreamWriter stand-in recording everything written to it."""
    writer = MagicMock(spec=asyncio.StreamWriter)
    writer.is_closing.return_value = False
    writer.drain = AsyncMock()
    writer.wait_closed = AsyncMock()
    writer.get_extra_info.return_value = ("127.0.0.1", 50000)
    return writer


def written(writer: MagicMock) -> bytes:
    """All bytes passed to a mock writer's write()."""
    return b"".join(call.args[0] for call in writer.write.call_args_list)


@contextlib.asynccontextmanager
async def running_server(registry: Optional[ToolRegistry] = None,
                         heartbeat_interval: float = 30.0):
    """Run a server on an ephemeral localhost port for the duration of the block."""
    config = ServerConfig(host="127.0.0.1", port=0, heartbeat_interval=heartbeat_interval)
    server = MCPServer(registry, config)
    await server.start()
    try:
        yield server
    finally:
        await server.stop()


async def raw_exchange(port: int, data: bytes, chunks: Tuple[bytes, ...] = ()) -> bytes:
    """Send raw bytes to the server and read until it closes the connection."""
    reader, writer = await asyncio.open_connection("127.0.0.1", port)
    try:
        writer.write(data)
        await writer.drain()
        for chunk in chunks:
            await asyncio.sleep(0.05)
            writer.write(chunk)
            await writer.drain()
        return await asyncio.wait_for(reader.read(), timeout=5)
    finally:
        writer.close()


def split_response(raw: bytes) -> Tuple[int, Dict[str, str], bytes]:
    """Split a raw HTTP response into status, lowercased headers and body."""
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("latin-1").split("\r\n")
    status = int(lines[0].split()[1])
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(":")
        headers[name.strip().lower()] = value.strip()
    return status, headers, body


@pytest.fixture
def written_bytes():
    return written


@pytest.fixture
def live_server():
    return running_server


@pytest.fixture
def http_exchange():
    return raw_exchange


@pytest.fixture
def parse_http():
    return split_response
