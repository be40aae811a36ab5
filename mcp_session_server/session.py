# Copyright (c) 2025 Scott Wilcox
# SPDX-License-Identifier: AGPL-3.0-or-later
"""
Per-connection session for the MCP session server.

A session frames one HTTP request from its connection, routes it by method
and path, writes the response and closes the connection. A GET on the SSE
path instead keeps the connection open for an SSE stream.
"""

import asyncio
import json
import logging
from typing import Any, Dict

from .common import HTTPError
from .dispatcher import Dispatcher
from .framing import CORS_HEADERS, HTTPRequest, build_response, read_body, read_request
from .sse import DEFAULT_HEARTBEAT_INTERVAL, MESSAGE_ENDPOINT, SSEEmitter

logger = logging.getLogger('MCPSessionServer.Session')

SSE_PATHS = ("/", "/sse")
MESSAGE_PATHS = ("/", MESSAGE_ENDPOINT)


class Session:
    """Handles the single exchange carried by one accepted connection."""

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter,
                 dispatcher: Dispatcher,
                 heartbeat_interval: float = DEFAULT_HEARTBEAT_INTERVAL):
        self.reader = reader
        self.writer = writer
        self.dispatcher = dispatcher
        self.heartbeat_interval = heartbeat_interval
        self.peer = writer.get_extra_info('peername')

    async def run(self) -> None:
        """Serve the connection until its exchange is complete, then close it."""
        try:
            request = await read_request(self.reader)
            if request is None:
                logger.debug(f"{self.peer} closed without sending a request")
                return
            await self.route(request)
        except HTTPError as e:
            logger.info(f"{self.peer} - {e.status} {e.reason}")
            await self.send_status(e.status)
        except (BrokenPipeError, ConnectionResetError) as e:
            logger.debug(f"Client {self.peer} disconnected: {str(e)}")
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(f"Error handling connection from {self.peer}")
        finally:
            await self.close()

    async def route(self, request: HTTPRequest) -> None:
        """Dispatch a request by HTTP method and path."""
        logger.info(f"Request: {request.method} {request.path}")
        if logger.isEnabledFor(logging.DEBUG):
            for name, value in request.headers.items():
                logger.debug(f"  {name}: {value}")

        if request.method == "GET":
            if request.path in SSE_PATHS:
                await self.handle_sse()
            else:
                await self.send_status(404)
        elif request.method == "POST":
            if request.path in MESSAGE_PATHS:
                await self.handle_message(request)
            else:
                await self.send_status(404)
        elif request.method == "OPTIONS":
            await self.send_cors_preflight()
        else:
            await self.send_status(404)

    async def handle_sse(self) -> None:
        logger.info("SSE connection requested")
        await SSEEmitter(self.writer, self.heartbeat_interval).run()

    async def handle_message(self, request: HTTPRequest) -> None:
        """Read a JSON-RPC message body, dispatch it and send the response."""
        body = await read_body(self.reader, request)
        logger.debug(f"Body: {body!r}")
        response = self.dispatcher.dispatch(body)
        await self.send_json(response)

    async def send_json(self, payload: Dict[str, Any], status: int = 200) -> None:
        body = json.dumps(payload).encode("utf-8")
        headers = [
            ("Content-Type", "application/json"),
            ("Content-Length", str(len(body))),
        ]
        headers.extend(CORS_HEADERS)
        headers.append(("Connection", "close"))
        await self._write(build_response(status, headers, body))

    async def send_cors_preflight(self) -> None:
        headers = list(CORS_HEADERS)
        headers.append(("Connection", "close"))
        await self._write(build_response(204, headers))

    async def send_status(self, status: int) -> None:
        """Send a bodiless response carrying only a status."""
        await self._write(build_response(status, [
            ("Content-Length", "0"),
            ("Connection", "close"),
        ]))

    async def _write(self, data: bytes) -> None:
        if self.writer.is_closing():
            return
        try:
            self.writer.write(data)
            await self.writer.drain()
        except (BrokenPipeError, ConnectionResetError) as e:
            logger.warning(f"Error writing response to {self.peer}: {str(e)}")

    async def close(self) -> None:
        if self.writer.is_closing():
            return
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except (BrokenPipeError, ConnectionResetError) as e:
            logger.debug(f"Error closing connection to {self.peer}: {str(e)}")
