# Copyright (c) 2025 Scott Wilcox
# SPDX-License-Identifier: AGPL-3.0-or-later
"""
JSON-RPC Dispatcher for the MCP session server.

Decodes one JSON-RPC message, routes it by method to initialize, tools/list
or tools/call, and always produces a response object. Every failure is
turned into a JSON-RPC error here; nothing propagates to the session.
"""

import json
import logging
from typing import Any, Callable, Dict, Optional, Union

from . import __version__
from .common import (
    MCPError, InternalError, InvalidParams, MethodNotFound, ToolExecutionError,
    decode_request, validate_request, format_response, get_request_id
)
from .registry import ToolRegistry

logger = logging.getLogger('MCPSessionServer.Dispatcher')

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "mcp-session-server"


class Dispatcher:
    """Routes JSON-RPC requests to protocol operations."""

    def __init__(self, registry: ToolRegistry, server_name: str = SERVER_NAME,
                 server_version: str = __version__):
        self.registry = registry
        self.server_name = server_name
        self.server_version = server_version
        self._handlers: Dict[str, Callable[[Any], Any]] = {
            "initialize": self.handle_initialize,
            "tools/list": self.handle_tools_list,
            "tools/call": self.handle_tools_call,
        }

    def get_handler(self, method: str) -> Optional[Callable[[Any], Any]]:
        """Get handler for method if it exists"""
        return self._handlers.get(method)

    def dispatch(self, body: Union[str, bytes]) -> Dict[str, Any]:
        """
        Handle one raw JSON-RPC message.

        Args:
            body: The HTTP request body.

        Returns:
            Dict[str, Any]: The JSON-RPC response. Its id is the request's id,
            or None when the request has no id or could not be parsed.
        """
        request_id = None
        try:
            request = decode_request(body)
            request_id = get_request_id(request)
            validate_request(request)

            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(f"Received: {json.dumps(request, indent=2)}")

            method = request["method"]
            handler = self.get_handler(method) if isinstance(method, str) else None
            if handler is None:
                raise MethodNotFound()

            result = handler(request.get("params"))
            return format_response(result=result, request_id=request_id)
        except MCPError as e:
            return format_response(error=e, request_id=request_id)
        except Exception as e:
            logger.exception("Unexpected error while dispatching request")
            return format_response(error=InternalError(f"Internal error: {str(e)}"), request_id=request_id)

    def handle_initialize(self, params: Any) -> Dict[str, Any]:
        """Handle initialize method"""
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "serverInfo": {
                "name": self.server_name,
                "version": self.server_version
            },
            "capabilities": {
                "tools": {}
            }
        }

    def handle_tools_list(self, params: Any) -> Dict[str, Any]:
        """Handle tools/list method"""
        return {"tools": self.registry.tools_list()}

    def handle_tools_call(self, params: Any) -> Any:
        """
        Handle tools/call method.

        Raises:
            InvalidParams: If params carry no tool name or the tool is not registered.
            ToolExecutionError: If the tool fails.
        """
        if not isinstance(params, dict) or not isinstance(params.get("name"), str):
            raise InvalidParams()

        tool_name = params["name"]
        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}

        tool = self.registry.get(tool_name)
        if tool is None:
            raise InvalidParams(f"Unknown tool: {tool_name}")

        try:
            result = tool.execute(arguments)
            json.dumps(result)
            return result
        except ToolExecutionError as e:
            logger.warning(f"Tool {tool_name} rejected its arguments: {e.message}")
            raise ToolExecutionError(f"Tool execution error: {e.message}", e.data)
        except Exception as e:
            logger.exception(f"Tool {tool_name} failed")
            raise ToolExecutionError(f"Tool execution error: {str(e)}")
