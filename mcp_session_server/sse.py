# Copyright (c) 2025 Scott Wilcox
# SPDX-License-Identifier: AGPL-3.0-or-later
"""
SSE Emitter for the MCP session server.

Turns an accepted GET connection into a one-way Server-Sent Events stream:
a handshake announcing the message endpoint, then periodic keepalive
comments until a write fails.
"""

import asyncio
import json
import logging
from enum import Enum
from typing import Any, Dict

from .common import make_notification
from .framing import build_head

logger = logging.getLogger('MCPSessionServer.SSE')

DEFAULT_HEARTBEAT_INTERVAL = 30.0
MESSAGE_ENDPOINT = "/message"
KEEPALIVE = b": keepalive\n\n"

SSE_HEADERS = (
    ("Content-Type", "text/event-stream"),
    ("Cache-Control", "no-cache"),
    ("Connection", "keep-alive"),
    ("Access-Control-Allow-Origin", "*"),
)


class SSEState(Enum):
    HANDSHAKE = "handshake"
    STREAMING = "streaming"
    CLOSED = "closed"


def format_event(data: Dict[str, Any]) -> bytes:
    """Frame a JSON payload as a single SSE ``data:`` event."""
    return f"data: {json.dumps(data, separators=(',', ':'))}\n\n".encode("utf-8")


def endpoint_event(endpoint: str = MESSAGE_ENDPOINT) -> Dict[str, Any]:
    """The notification telling the client where to POST JSON-RPC messages."""
    return make_notification("endpoint", {"endpoint": endpoint})


class SSEEmitter:
    """
    One SSE stream on one connection.

    The stream carries no events after the handshake other than keepalive
    comments. It ends when a write fails or the task running it is cancelled;
    there is no unsubscribe message.
    """

    def __init__(self, writer: asyncio.StreamWriter,
                 heartbeat_interval: float = DEFAULT_HEARTBEAT_INTERVAL,
                 endpoint: str = MESSAGE_ENDPOINT):
        self.writer = writer
        self.heartbeat_interval = heartbeat_interval
        self.endpoint = endpoint
        self.state = SSEState.HANDSHAKE
        self.heartbeats_sent = 0

    async def run(self) -> None:
        """Send the handshake, then heartbeats until the stream closes."""
        try:
            if not await self._write(build_head(200, SSE_HEADERS) + format_event(endpoint_event(self.endpoint))):
                return
            logger.info("SSE stream established")
            self.state = SSEState.STREAMING

            while self.state is SSEState.STREAMING:
                await asyncio.sleep(self.heartbeat_interval)
                if await self._write(KEEPALIVE):
                    self.heartbeats_sent += 1
        finally:
            self.state = SSEState.CLOSED

    async def _write(self, data: bytes) -> bool:
        if self.writer.is_closing():
            logger.debug("SSE connection already closing")
            self.state = SSEState.CLOSED
            return False
        try:
            self.writer.write(data)
            await self.writer.drain()
            return True
        except (BrokenPipeError, ConnectionResetError) as e:
            logger.warning(f"Connection broken while sending SSE data: {str(e)}")
        except OSError as e:
            logger.error(f"Error sending SSE data: {str(e)}")
        self.state = SSEState.CLOSED
        return False
