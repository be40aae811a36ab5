#!/usr/bin/env python3
# Copyright (c) 2025 Scott Wilcox
# SPDX-License-Identifier: AGPL-3.0-or-later
"""
MCP Session Server package.

A minimal Model Context Protocol server speaking JSON-RPC 2.0 over raw HTTP,
with an SSE channel announcing the message endpoint.
"""

# Version of the package
__version__ = "1.0.0"

from mcp_session_server.tools import Tool, ToolProperty, ToolSpec, EchoTool
from mcp_session_server.registry import ToolRegistry, default_registry
from mcp_session_server.dispatcher import Dispatcher, PROTOCOL_VERSION
from mcp_session_server.server import (
    MCPServer, ServerConfig, run_server, main, DEFAULT_HOST, DEFAULT_PORT
)

__all__ = [
    'Tool',
    'ToolProperty',
    'ToolSpec',
    'EchoTool',
    'ToolRegistry',
    'default_registry',
    'Dispatcher',
    'PROTOCOL_VERSION',
    'MCPServer',
    'ServerConfig',
    'run_server',
    'main',
    'DEFAULT_HOST',
    'DEFAULT_PORT',
]
