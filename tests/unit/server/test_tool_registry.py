#!/usr/bin/env python3
# Copyright (c) 2025 Scott Wilcox
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Unit tests for the tool registry.
"""

import logging

import jsonschema
import pytest

from mcp_session_server.registry import ToolRegistry, default_registry
from mcp_session_server.tools import Tool, ToolProperty, EchoTool


class GreetTool(Tool):
    description = "Greets someone"

    def __init__(self, name="greet", param_type="string"):
        self._name = name
        self._param_type = param_type

    @property
    def name(self):
        return self._name

    def properties(self):
        return [ToolProperty("who", self._param_type, "Who to greet", required=True)]

    def execute(self, arguments):
        return self.text_content(f"Hello, {arguments.get('who', 'world')}")


def test_empty_registry():
    registry = ToolRegistry()
    assert len(registry) == 0
    assert registry.list() == []
    assert registry.tools_list() == []
    assert registry.get("echo") is None


def test_default_registry_holds_echo():
    registry = default_registry()
    assert len(registry) == 1
    assert "echo" in registry
    assert isinstance(registry.get("echo"), EchoTool)


def test_register_and_lookup():
    registry = ToolRegistry()
    tool = registry.register(GreetTool())
    assert registry.get("greet") is tool
    assert registry.has("greet")
    assert not registry.has("nope")


def test_register_class_constructs_tool():
    registry = ToolRegistry()
    tool = registry.register_class(GreetTool, name="hello")
    assert registry.get("hello") is tool


def test_last_registration_wins():
    registry = ToolRegistry()
    registry.register(GreetTool())
    second = registry.register(GreetTool())
    assert len(registry) == 1
    assert registry.get("greet") is second


def test_tools_list_matches_declared_parameters():
    registry = ToolRegistry()
    registry.register(EchoTool())
    registry.register(GreetTool())

    schemas = {entry["name"]: entry for entry in registry.tools_list()}
    assert len(schemas) == len(registry)
    assert schemas["greet"]["inputSchema"]["properties"]["who"] == {
        "type": "string", "description": "Who to greet"
    }
    assert schemas["greet"]["inputSchema"]["required"] == ["who"]


def test_listed_schemas_are_valid_json_schemas():
    for entry in default_registry().tools_list():
        jsonschema.Draft7Validator.check_schema(entry["inputSchema"])


def test_register_rejects_unknown_type():
    registry = ToolRegistry()
    with pytest.raises(jsonschema.SchemaError):
        registry.register(GreetTool(param_type="text"))
    assert "greet" not in registry


def test_register_logs_tool_name(caplog):
    with caplog.at_level(logging.INFO, logger="MCPSessionServer.Registry"):
        ToolRegistry().register(EchoTool())
    assert "Registered tool: echo" in caplog.text
