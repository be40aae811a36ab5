# Copyright (c) 2025 Scott Wilcox
# SPDX-License-Identifier: AGPL-3.0-or-later
"""
Tool Capability for the MCP session server.

A tool is a named, schema-described operation exposed to clients through
``tools/list`` and ``tools/call``. New tools subclass :class:`Tool` and
implement ``name``, ``description``, ``properties()`` and ``execute()``.
"""

import abc
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class ToolProperty:
    """A single parameter in a tool's input schema."""
    name: str
    type: str
    description: str
    required: bool = False


@dataclass(frozen=True)
class ToolSpec:
    """Name, description and ordered parameters of a tool."""
    name: str
    description: str
    parameters: List[ToolProperty] = field(default_factory=list)

    def input_schema(self) -> Dict[str, Any]:
        """Build the JSON schema object advertised as ``inputSchema``."""
        properties = {}
        required = []
        for prop in self.parameters:
            properties[prop.name] = {
                "type": prop.type,
                "description": prop.description
            }
            if prop.required:
                required.append(prop.name)

        return {
            "type": "object",
            "properties": properties,
            "required": required
        }


class Tool(abc.ABC):
    """
    Abstract base class for MCP tools.

    Subclasses raise ToolExecutionError (or any exception) from execute()
    when the arguments cannot be handled; the dispatcher turns that into a
    JSON-RPC error response.
    """

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """The unique name of the tool."""
        pass

    @property
    @abc.abstractmethod
    def description(self) -> str:
        """What the tool does."""
        pass

    @abc.abstractmethod
    def properties(self) -> List[ToolProperty]:
        """The input schema properties of the tool, in declaration order."""
        pass

    @abc.abstractmethod
    def execute(self, arguments: Dict[str, Any]) -> Any:
        """
        Execute the tool.

        Args:
            arguments: The ``arguments`` object of the ``tools/call`` request.

        Returns:
            The JSON result sent back to the client.
        """
        pass

    @property
    def spec(self) -> ToolSpec:
        return ToolSpec(self.name, self.description, list(self.properties()))

    def schema(self) -> Dict[str, Any]:
        """Generate the entry for the ``tools/list`` response."""
        spec = self.spec
        return {
            "name": spec.name,
            "description": spec.description,
            "inputSchema": spec.input_schema()
        }

    @staticmethod
    def text_content(text: str) -> Dict[str, Any]:
        """Wrap text as a tool result."""
        return {
            "content": [
                {"type": "text", "text": text}
            ]
        }

    @staticmethod
    def error_content(message: str) -> Dict[str, Any]:
        """Wrap an error message as a tool result flagged with ``isError``."""
        return {
            "content": [
                {"type": "text", "text": f"Error: {message}"}
            ],
            "isError": True
        }


class EchoTool(Tool):
    """Echoes back the input text."""

    name = "echo"
    description = "Echoes back the input text"

    def properties(self) -> List[ToolProperty]:
        return [ToolProperty("text", "string", "Text to echo back", required=True)]

    def execute(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        # required is advertised only; a missing text echoes an empty string
        text = arguments.get("text", "")
        return self.text_content(f"Echo: {text}")
