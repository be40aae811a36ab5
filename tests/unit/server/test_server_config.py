#!/usr/bin/env python3
# Copyright (c) 2025 Scott Wilcox
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Unit tests for server configuration, logging setup and the command line.
"""

import logging
from unittest.mock import patch

import pytest

from mcp_session_server import server
from mcp_session_server.registry import ToolRegistry
from mcp_session_server.server import (
    DEFAULT_HOST, DEFAULT_PORT, MCPServer, ServerConfig, main, parse_args, setup_logging
)


def test_config_defaults():
    config = ServerConfig()
    assert config.host == DEFAULT_HOST
    assert config.port == DEFAULT_PORT == 3000
    assert config.heartbeat_interval == 30.0
    assert config.debug is False
    assert config.log_file is None


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("MCP_HOST", "127.0.0.1")
    monkeypatch.setenv("MCP_DEBUG", "true")
    monkeypatch.setenv("MCP_HEARTBEAT_INTERVAL", "5")
    monkeypatch.setenv("MCP_LOG_FILE", "/tmp/mcp.log")
    monkeypatch.setenv("MCP_PORT", "1234")

    config = ServerConfig.from_env(8080)
    assert config.host == "127.0.0.1"
    assert config.port == 8080
    assert config.debug is True
    assert config.heartbeat_interval == 5.0
    assert config.log_file == "/tmp/mcp.log"


@pytest.mark.parametrize("value, expected", [("1", True), ("YES", True), ("0", False), ("", False)])
def test_config_debug_flag(monkeypatch, value, expected):
    monkeypatch.setenv("MCP_DEBUG", value)
    assert ServerConfig.from_env().debug is expected


def test_parse_args_default_port():
    assert parse_args([]).port == 3000


def test_parse_args_positional_port():
    assert parse_args(["8123"]).port == 8123


def test_parse_args_rejects_flags():
    with pytest.raises(SystemExit):
        parse_args(["--port", "8123"])


def test_server_uses_default_registry():
    mcp_server = MCPServer()
    assert "echo" in mcp_server.registry
    assert mcp_server.dispatcher.registry is mcp_server.registry
    assert mcp_server.port is None


def test_server_keeps_injected_empty_registry():
    registry = ToolRegistry()
    assert MCPServer(registry).registry is registry


def test_setup_logging_with_file(tmp_path):
    log_file = tmp_path / "server.log"
    root = logging.getLogger()
    before = list(root.handlers)
    try:
        setup_logging(debug=True, log_file=str(log_file))
        added = [h for h in root.handlers if h not in before]
        assert any(isinstance(h, logging.FileHandler) for h in added)
    finally:
        for handler in root.handlers:
            if handler not in before:
                root.removeHandler(handler)
                handler.close()


def test_main_returns_1_on_startup_failure(capsys):
    with patch.object(server, "run_server", side_effect=OSError("address already in use")):
        assert main(["3000"]) == 1
    assert "Exception: address already in use" in capsys.readouterr().err


def test_main_returns_0_on_interrupt():
    def interrupted(coro):
        coro.close()
        raise KeyboardInterrupt

    with patch.object(server.asyncio, "run", side_effect=interrupted):
        assert main([]) == 0


def test_main_returns_1_on_bad_heartbeat_interval(monkeypatch, capsys):
    monkeypatch.setenv("MCP_HEARTBEAT_INTERVAL", "soon")
    with patch.object(server, "run_server") as mock_run:
        assert main([]) == 1
    mock_run.assert_not_called()
    assert "Exception:" in capsys.readouterr().err
