# Copyright (c) 2025 Scott Wilcox
# SPDX-License-Identifier: AGPL-3.0-or-later
"""JSON-RPC envelope utilities for the MCP session server."""

import json
from typing import Any, Dict, Optional, Union

from .errors import MCPError, ParseError, InvalidRequest


def decode_request(request_data: Union[str, bytes]) -> Any:
    """Decode a raw JSON-RPC message body.

    Args:
        request_data: The raw request body

    Returns:
        The decoded JSON value

    Raises:
        ParseError: If the body is not valid JSON
    """
    try:
        return json.loads(request_data)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
        raise ParseError()


def validate_request(request: Any) -> Dict[str, Any]:
    """Check that a decoded message is a JSON-RPC request object.

    Raises:
        InvalidRequest: If the message is not an object carrying a method
    """
    if not isinstance(request, dict) or 'method' not in request:
        raise InvalidRequest()
    return request


def get_request_id(request: Any) -> Any:
    """Return the request id, or None when the request has none."""
    if isinstance(request, dict):
        return request.get('id')
    return None


def format_response(result: Any = None, error: Optional[MCPError] = None,
                   request_id: Any = None) -> Dict[str, Any]:
    """Format a JSON-RPC response.

    Args:
        result: The result of the method call
        error: Optional error that occurred
        request_id: The ID from the request

    Returns:
        Dict containing the formatted response
    """
    if error is not None:
        return error.to_response(request_id)

    return {
        'jsonrpc': '2.0',
        'id': request_id,
        'result': result
    }


def make_notification(method: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build a JSON-RPC notification (a request without an id)."""
    notification = {
        'jsonrpc': '2.0',
        'method': method
    }
    if params is not None:
        notification['params'] = params
    return notification
