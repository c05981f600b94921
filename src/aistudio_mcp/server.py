"""MCP server exposing Gemini content generation as tools.

The protocol layer only routes: ``list_tools`` advertises the registry and
``call_tool`` parses arguments, runs the executor and maps every failure to
an error result. No exception escapes a tool call.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from aistudio_mcp import __version__
from aistudio_mcp.constants import SERVER_NAME
from aistudio_mcp.core.exceptions import AIStudioError
from aistudio_mcp.executor import ToolExecutor
from aistudio_mcp.tools import list_tool_definitions, parse_tool_call

if TYPE_CHECKING:
    from aistudio_mcp.config import FrozenConfig

logger = logging.getLogger(__name__)


def error_result(message: str) -> types.CallToolResult:
    """Build the error response returned for any failed tool call."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=f"Error: {message}")],
        isError=True,
    )


def text_result(text: str) -> types.CallToolResult:
    return types.CallToolResult(content=[types.TextContent(type="text", text=text)])


class AIStudioServer:
    """Binds the tool registry and executor to an MCP ``Server``."""

    def __init__(self, config: FrozenConfig, executor: ToolExecutor | None = None):
        """Create the server; the default executor talks to the Gemini API."""
        self.config = config
        self.executor = executor or ToolExecutor(config)
        self.server: Server[Any, Any] = Server(SERVER_NAME, version=__version__)
        self.server.list_tools()(self.list_tools)
        # Argument validation happens in parse_tool_call so errors keep our format
        self.server.call_tool(validate_input=False)(self.call_tool)

    async def list_tools(self) -> list[types.Tool]:
        return list_tool_definitions(self.config)

    async def call_tool(
        self, name: str, arguments: dict[str, Any] | None
    ) -> types.CallToolResult:
        """Run one tool call and return its text or an error result."""
        try:
            command = parse_tool_call(name, arguments, self.config)
            result = await self.executor.execute(command)
        except AIStudioError as e:
            logger.info("Tool '%s' failed: %s", name, e)
            return error_result(str(e))
        except Exception as e:
            logger.exception("Unexpected error in tool '%s'", name)
            return error_result(str(e))

        logger.debug("Tool '%s' returned %d characters", name, len(result.text))
        return text_result(result.text)

    async def run_stdio(self) -> None:
        """Serve over stdin/stdout until the client disconnects."""
        async with stdio_server() as (read_stream, write_stream):
            logger.info("AI Studio MCP Server running on stdio")
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )
