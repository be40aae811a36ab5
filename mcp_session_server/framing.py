# Copyright (c) 2025 Scott Wilcox
# SPDX-License-Identifier: AGPL-3.0-or-later
"""
HTTP Framing Layer for the MCP session server.

Recovers exactly one HTTP/1.1 request from a connection's byte stream and
serializes responses. Chunked transfer-encoding and pipelining are not
supported: a body is delimited by Content-Length only, and every connection
carries a single request.
"""

import asyncio
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Dict, Iterable, Optional, Tuple, Union

from .common import HTTPError

HEADER_TERMINATOR = b"\r\n\r\n"

CORS_HEADERS = (
    ("Access-Control-Allow-Origin", "*"),
    ("Access-Control-Allow-Methods", "POST, OPTIONS"),
    ("Access-Control-Allow-Headers", "Content-Type"),
)

HeaderItems = Union[Dict[str, str], Iterable[Tuple[str, str]]]


@dataclass
class HTTPRequest:
    """Request line and headers of one HTTP request."""
    method: str
    path: str
    version: str
    headers: Dict[str, str] = field(default_factory=dict)

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)


def parse_headers(lines: Iterable[str]) -> Dict[str, str]:
    """
    Parse header lines into a dict keyed by lowercased header name.

    Lines without a colon are skipped.
    """
    headers = {}
    for line in lines:
        key, sep, value = line.partition(":")
        if not sep:
            continue
        headers[key.strip().lower()] = value.rstrip("\r").strip()
    return headers


def parse_request_head(head: bytes) -> HTTPRequest:
    """
    Parse a header block (request line plus headers) into an HTTPRequest.

    Raises:
        HTTPError: If the request line is empty.
    """
    text = head.decode("latin-1")
    lines = text.split("\n")
    parts = lines[0].strip().split()
    if not parts:
        raise HTTPError(400, "Empty request line")

    method = parts[0]
    path = parts[1] if len(parts) > 1 else ""
    version = parts[2] if len(parts) > 2 else ""
    return HTTPRequest(method, path, version, parse_headers(lines[1:]))


async def read_request(reader: asyncio.StreamReader) -> Optional[HTTPRequest]:
    """
    Read one request head from the stream.

    Consumes bytes up to and including the blank line ending the headers.
    Anything received past it stays buffered in the reader for read_body().

    Returns:
        The parsed request, or None if the peer closed before sending anything.

    Raises:
        HTTPError: If the header block is truncated or larger than the reader's limit.
    """
    try:
        head = await reader.readuntil(HEADER_TERMINATOR)
    except asyncio.IncompleteReadError as e:
        if not e.partial:
            return None
        raise HTTPError(400, "Incomplete request head")
    except asyncio.LimitOverrunError:
        raise HTTPError(400, "Request head too large")

    return parse_request_head(head[:-len(HEADER_TERMINATOR)])


def content_length(request: HTTPRequest) -> int:
    """
    Get the declared body length.

    Raises:
        HTTPError: If Content-Length is missing or not a non-negative integer.
    """
    value = request.header("content-length")
    if value is None:
        raise HTTPError(400, "Missing Content-Length")
    if not (value.isascii() and value.isdigit()):
        raise HTTPError(400, f"Invalid Content-Length: {value}")
    return int(value)


async def read_body(reader: asyncio.StreamReader, request: HTTPRequest) -> bytes:
    """
    Read exactly Content-Length body bytes.

    Bytes already buffered by the head read are consumed first; only the
    remainder is read from the network.

    Raises:
        HTTPError: If Content-Length is missing or invalid, or the body is truncated.
    """
    length = content_length(request)
    try:
        return await reader.readexactly(length)
    except asyncio.IncompleteReadError as e:
        raise HTTPError(400, f"Body truncated after {len(e.partial)} of {length} bytes")


def status_line(status: int) -> str:
    try:
        reason = HTTPStatus(status).phrase
    except ValueError:
        reason = ""
    return f"HTTP/1.1 {status} {reason}".rstrip()


def build_head(status: int, headers: HeaderItems = ()) -> bytes:
    """Serialize a status line and headers, including the terminating blank line."""
    if isinstance(headers, dict):
        headers = headers.items()
    lines = [status_line(status)]
    lines.extend(f"{name}: {value}" for name, value in headers)
    return ("\r\n".join(lines) + "\r\n\r\n").encode("latin-1")


def build_response(status: int, headers: HeaderItems = (), body: bytes = b"") -> bytes:
    """Serialize a complete HTTP response."""
    return build_head(status, headers) + body
