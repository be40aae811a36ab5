#!/usr/bin/env python3
# Copyright (c) 2025 Scott Wilcox
# SPDX-License-Identifier: AGPL-3.0-or-later
"""
Simple check script to test if an MCP session server is responding correctly.

Opens the SSE stream to learn the message endpoint, then sends initialize and
tools/list to that endpoint.
"""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

import requests

DEFAULT_URL = "http://localhost:3000"


def read_endpoint(base_url: str, timeout: float = 10.0) -> str:
    """
    Open the SSE stream and return the endpoint announced in its first event.

    Raises:
        requests.RequestException: If the stream cannot be opened.
        ValueError: If the stream does not start with an endpoint event.
    """
    with requests.get(urljoin(base_url, "/sse"), stream=True, timeout=timeout,
                      headers={"Accept": "text/event-stream"}) as response:
        response.raise_for_status()
        content_type = response.headers.get("Content-Type", "")
        if not content_type.startswith("text/event-stream"):
            raise ValueError(f"Unexpected Content-Type: {content_type}")

        for line in response.iter_lines(chunk_size=1, decode_unicode=True):
            if not line or line.startswith(":"):
                continue
            if line.startswith("data:"):
                event = json.loads(line[len("data:"):].strip())
                if event.get("method") == "endpoint":
                    return event["params"]["endpoint"]
            raise ValueError(f"Unexpected SSE line: {line}")

    raise ValueError("SSE stream closed before the endpoint event")


def call(url: str, method: str, params: Optional[Dict[str, Any]] = None,
         request_id: int = 1, timeout: float = 10.0) -> Dict[str, Any]:
    """POST one JSON-RPC request and return the decoded response."""
    request = {
        "jsonrpc": "2.0",
        "id": request_id,
        "method": method
    }
    if params is not None:
        request["params"] = params

    response = requests.post(url, json=request, timeout=timeout,
                             headers={"Content-Type": "application/json"})
    response.raise_for_status()
    return response.json()


def check_server(base_url: str) -> int:
    """Run the checks against a server and print what they return."""
    print(f"Checking server at {base_url}")

    try:
        endpoint = read_endpoint(base_url)
        print(f"SSE endpoint event: {endpoint}")
        message_url = urljoin(base_url, endpoint)

        init = call(message_url, "initialize", {
            "protocolVersion": "2024-11-05",
            "clientInfo": {"name": "mcp-session-check", "version": "1.0.0"},
            "capabilities": {}
        }, request_id=1)
        print(f"initialize: {json.dumps(init, indent=2)}")
        if "error" in init:
            print("ERROR: initialize failed")
            return 1

        tools = call(message_url, "tools/list", request_id=2)
        if "error" in tools:
            print(f"ERROR: tools/list failed: {tools['error']}")
            return 1
        names = [tool["name"] for tool in tools["result"]["tools"]]
        print(f"tools/list: {', '.join(names) or '(none)'}")

        print("SUCCESS: Server responded correctly!")
        return 0

    except (requests.RequestException, ValueError, KeyError) as e:
        print(f"ERROR: {str(e)}")
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Check that an MCP session server responds")
    parser.add_argument("url", nargs="?", default=DEFAULT_URL,
                        help=f"Base URL of the server (default: {DEFAULT_URL})")
    args = parser.parse_args(argv)
    return check_server(args.url)


if __name__ == "__main__":
    sys.exit(main())
