"""Tools exposed by the server."""

from .arguments import (
    ConvertPdfArguments,
    FileArgument,
    GenerateContentArguments,
    ToolArguments,
)
from .registry import TOOLS, ToolSpec, list_tool_definitions, parse_tool_call

__all__ = [
    "TOOLS",
    "ConvertPdfArguments",
    "FileArgument",
    "GenerateContentArguments",
    "ToolArguments",
    "ToolSpec",
    "list_tool_definitions",
    "parse_tool_call",
]
