# Copyright (c) 2025 Scott Wilcox
# SPDX-License-Identifier: AGPL-3.0-or-later
"""Error handling for the MCP session server."""

from enum import IntEnum
from typing import Any, Dict, Optional


class ErrorCodes(IntEnum):
    """JSON-RPC 2.0 error codes."""
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class MCPError(Exception):
    """Base class for MCP protocol errors."""
    def __init__(self, message: str, code: int = ErrorCodes.INTERNAL_ERROR, data: Any = None):
        super().__init__(message)
        self.code = int(code)
        self.message = message
        self.data = data

    def to_response(self, request_id: Any = None) -> Dict[str, Any]:
        """Convert error to JSON-RPC response format"""
        response = {
            "jsonrpc": "2.0",
            "error": {
                "code": self.code,
                "message": self.message
            },
            "id": request_id
        }
        if self.data is not None:
            response["error"]["data"] = self.data
        return response

class ParseError(MCPError):
    def __init__(self, message: str = "Parse error", data: Optional[Any] = None):
        super().__init__(message, ErrorCodes.PARSE_ERROR, data)

class InvalidRequest(MCPError):
    def __init__(self, message: str = "Invalid Request", data: Optional[Any] = None):
        super().__init__(message, ErrorCodes.INVALID_REQUEST, data)

class MethodNotFound(MCPError):
    def __init__(self, message: str = "Method not found", data: Optional[Any] = None):
        super().__init__(message, ErrorCodes.METHOD_NOT_FOUND, data)

class InvalidParams(MCPError):
    def __init__(self, message: str = "Invalid params", data: Optional[Any] = None):
        super().__init__(message, ErrorCodes.INVALID_PARAMS, data)

class InternalError(MCPError):
    def __init__(self, message: str = "Internal error", data: Optional[Any] = None):
        super().__init__(message, ErrorCodes.INTERNAL_ERROR, data)

class ToolExecutionError(MCPError):
    """Raised by a tool when it cannot handle the arguments it was given."""
    def __init__(self, message: str = "Tool execution failed", data: Optional[Any] = None):
        super().__init__(message, ErrorCodes.INTERNAL_ERROR, data)


class HTTPError(Exception):
    """Transport-level failure answered with a bare HTTP status, no JSON-RPC envelope."""
    def __init__(self, status: int, reason: str = ""):
        super().__init__(reason or str(status))
        self.status = status
        self.reason = reason
