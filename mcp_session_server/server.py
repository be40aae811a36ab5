# Copyright (c) 2025 Scott Wilcox
# SPDX-License-Identifier: AGPL-3.0-or-later
"""
MCP Session Server

Accept loop, configuration and command line entry point. Each accepted
connection is served by its own Session task; the tool registry is the only
state the tasks share.
"""

import argparse
import asyncio
import logging
import os
import sys
from dataclasses import dataclass
from typing import List, Optional, Set

from .dispatcher import Dispatcher
from .registry import ToolRegistry, default_registry
from .session import Session
from .sse import DEFAULT_HEARTBEAT_INTERVAL

logger = logging.getLogger('MCPSessionServer')

DEFAULT_HOST = '0.0.0.0'
DEFAULT_PORT = 3000
DEFAULT_MAX_HEADER_SIZE = 64 * 1024
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


@dataclass
class ServerConfig:
    """Runtime settings of the server."""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    heartbeat_interval: float = DEFAULT_HEARTBEAT_INTERVAL
    max_header_size: int = DEFAULT_MAX_HEADER_SIZE
    debug: bool = False
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls, port: int = DEFAULT_PORT) -> "ServerConfig":
        """
        Build a configuration from MCP_* environment variables.

        The port is not read from the environment; it comes from the command line.
        """
        return cls(
            host=os.environ.get("MCP_HOST", DEFAULT_HOST),
            port=port,
            heartbeat_interval=float(os.environ.get("MCP_HEARTBEAT_INTERVAL", DEFAULT_HEARTBEAT_INTERVAL)),
            debug=_env_flag("MCP_DEBUG"),
            log_file=os.environ.get("MCP_LOG_FILE") or None,
        )


def setup_logging(debug: bool = False, log_file: Optional[str] = None) -> None:
    """
    Set up logging configuration.

    Args:
        debug: Whether to enable debug logging.
        log_file: The log file to write to.
    """
    level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            logging.getLogger().addHandler(file_handler)
        except OSError as e:
            logging.error(f"Error setting up log file {log_file}: {str(e)}")


class MCPServer:
    """Listens for connections and runs one Session per connection."""

    def __init__(self, registry: Optional[ToolRegistry] = None,
                 config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.registry = registry if registry is not None else default_registry()
        self.dispatcher = Dispatcher(self.registry)
        self._server: Optional[asyncio.AbstractServer] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def port(self) -> Optional[int]:
        """The bound port; differs from the configured one when that was 0."""
        if self._server is None or not self._server.sockets:
            return None
        return self._server.sockets[0].getsockname()[1]

    async def start(self) -> None:
        """
        Bind the listening socket and start accepting connections.

        Raises:
            OSError: If the address cannot be bound.
        """
        self._server = await asyncio.start_server(
            self._handle_connection,
            self.config.host,
            self.config.port,
            limit=self.config.max_header_size,
        )
        logger.info(f"MCP Server running on port {self.port}")
        logger.info(f"Registered {len(self.registry)} tool(s)")

    async def serve_forever(self) -> None:
        if self._server is None:
            await self.start()
        await self._server.serve_forever()

    async def stop(self) -> None:
        """Stop accepting connections and cancel the running sessions."""
        server, self._server = self._server, None
        if server is not None:
            server.close()
        # SSE sessions never finish on their own; wait_closed() waits for them
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        if server is not None:
            await server.wait_closed()

    async def _handle_connection(self, reader: asyncio.StreamReader,
                                 writer: asyncio.StreamWriter) -> None:
        logger.info(f"New connection accepted from {writer.get_extra_info('peername')}")
        task = asyncio.current_task()
        self._tasks.add(task)
        try:
            session = Session(reader, writer, self.dispatcher, self.config.heartbeat_interval)
            await session.run()
        finally:
            self._tasks.discard(task)

    async def __aenter__(self) -> "MCPServer":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()


async def run_server(config: ServerConfig, registry: Optional[ToolRegistry] = None) -> None:
    """Run a server until cancelled."""
    server = MCPServer(registry, config)
    await server.start()
    try:
        await server.serve_forever()
    finally:
        await server.stop()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the MCP session server")
    parser.add_argument("port", nargs="?", type=int, default=DEFAULT_PORT,
                        help=f"Port to listen on (default: {DEFAULT_PORT})")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Command line entry point."""
    args = parse_args(argv)

    try:
        config = ServerConfig.from_env(args.port)
        setup_logging(config.debug, config.log_file)
        asyncio.run(run_server(config))
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except Exception as e:
        print(f"Exception: {str(e)}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
