# Copyright (c) 2025 Scott Wilcox
# SPDX-License-Identifier: AGPL-3.0-or-later
"""
Tool Registry for the MCP session server.

The registry maps tool names to Tool instances. It is built once before the
server starts accepting connections and handed to the dispatcher; it is only
read after that.
"""

import logging
from typing import Any, Dict, List, Optional, Type

from jsonschema import Draft7Validator

from .tools import Tool, EchoTool

logger = logging.getLogger('MCPSessionServer.Registry')


class ToolRegistry:
    """Catalog of the tools a server exposes."""

    def __init__(self):
        self._tools: Dict[str, Tool] = {}

    def register(self, tool: Tool) -> Tool:
        """
        Register a tool, replacing any tool already registered under its name.

        Args:
            tool: The tool to register.

        Returns:
            Tool: The registered tool.

        Raises:
            jsonschema.SchemaError: If the tool's input schema is not a valid JSON schema.
        """
        Draft7Validator.check_schema(tool.spec.input_schema())
        self._tools[tool.name] = tool
        logger.info(f"Registered tool: {tool.name}")
        return tool

    def register_class(self, tool_class: Type[Tool], *args: Any, **kwargs: Any) -> Tool:
        """Construct a tool from its class and register it."""
        return self.register(tool_class(*args, **kwargs))

    def get(self, name: str) -> Optional[Tool]:
        """Get a tool by name, or None if no such tool is registered."""
        return self._tools.get(name)

    def has(self, name: str) -> bool:
        return name in self._tools

    def list(self) -> List[Tool]:
        """All registered tools."""
        return list(self._tools.values())

    def tools_list(self) -> List[Dict[str, Any]]:
        """The schemas of all registered tools, as returned by ``tools/list``."""
        return [tool.schema() for tool in self._tools.values()]

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __len__(self) -> int:
        return len(self._tools)


def default_registry() -> ToolRegistry:
    """Create a registry holding the built-in tools."""
    registry = ToolRegistry()
    registry.register_class(EchoTool)
    return registry
