"""MCP server exposing the configurator tools over stdio.

Run with ``python -m auth_service.configurator.server``.
"""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Any
from typing import Optional

from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from auth_service.configurator.session import SECTIONS
from auth_service.configurator.tools import ConfiguratorTools
from auth_service.utils.logging import configure_logging
from auth_service.utils.logging import get_logger

logger = get_logger(__name__)

SERVER_NAME = "cognito-config-mcp"

_SESSION_ID_PROPERTY = {
    "type": "string",
    "description": "Configuration session to act on (defaults to 'default')",
}


def tool_definitions() -> list[types.Tool]:
    """Tools advertised to MCP clients."""
    return [
        types.Tool(
            name="save_config",
            description="Save a configuration section for the Cognito User Pool",
            inputSchema={
                "type": "object",
                "properties": {
                    "section": {
                        "type": "string",
                        "enum": list(SECTIONS),
                        "description": "Configuration section to save",
                    },
                    "data": {
                        "description": "Configuration data for the section",
                    },
                    "session_id": _SESSION_ID_PROPERTY,
                },
                "required": ["section", "data"],
            },
        ),
        types.Tool(
            name="get_config",
            description="Retrieve current configuration state",
            inputSchema={
                "type": "object",
                "properties": {
                    "section": {
                        "type": "string",
                        "description": "Specific section to retrieve, or omit for all",
                    },
                    "session_id": _SESSION_ID_PROPERTY,
                },
            },
        ),
        types.Tool(
            name="generate_cloudformation",
            description="Generate CloudFormation template from current configuration",
            inputSchema={
                "type": "object",
                "properties": {
                    "stackName": {
                        "type": "string",
                        "description": "Name for the CloudFormation stack",
                    },
                    "session_id": _SESSION_ID_PROPERTY,
                },
                "required": ["stackName"],
            },
        ),
        types.Tool(
            name="reset_config",
            description="Reset configuration state to start over",
            inputSchema={
                "type": "object",
                "properties": {"session_id": _SESSION_ID_PROPERTY},
            },
        ),
        types.Tool(
            name="validate_config",
            description="Validate current configuration for completeness and correctness",
            inputSchema={
                "type": "object",
                "properties": {"session_id": _SESSION_ID_PROPERTY},
            },
        ),
    ]


class ConfiguratorMCPServer:
    """Wires ConfiguratorTools into an MCP ``Server``."""

    def __init__(self, tools: Optional[ConfiguratorTools] = None):
        self.tools = tools or ConfiguratorTools()
        self.server = Server(SERVER_NAME)
        self._register_handlers()

    def _register_handlers(self) -> None:
        @self.server.list_tools()
        async def list_tools() -> list[types.Tool]:
            return tool_definitions()

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
            # Errors raised here are reported to the client with isError set.
            result = self.tools.call(name, arguments or {})
            return [types.TextContent(type="text", text=json.dumps(result, indent=2))]

    async def run(self) -> None:
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


def main() -> None:
    # stdout carries the MCP protocol.
    configure_logging(stream=sys.stderr)
    logger.info("Cognito configuration MCP server running on stdio")
    asyncio.run(ConfiguratorMCPServer().run())


if __name__ == "__main__":
    main()
