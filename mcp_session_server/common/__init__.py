# Copyright (c) 2025 Scott Wilcox
# SPDX-License-Identifier: AGPL-3.0-or-later
"""Common error types and JSON-RPC helpers for the MCP session server."""

from .errors import (
    ErrorCodes, MCPError, ParseError, InvalidRequest, MethodNotFound,
    InvalidParams, InternalError, ToolExecutionError, HTTPError
)
from .utils import (
    decode_request, validate_request, format_response, get_request_id, make_notification
)

__all__ = [
    'ErrorCodes', 'MCPError', 'ParseError', 'InvalidRequest', 'MethodNotFound',
    'InvalidParams', 'InternalError', 'ToolExecutionError', 'HTTPError',
    'decode_request', 'validate_request', 'format_response', 'get_request_id', 'make_notification',
]
