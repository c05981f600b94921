"""Tool registry: definitions advertised to clients and argument parsing."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any

from mcp import types
from pydantic import ValidationError as PydanticValidationError

from aistudio_mcp.constants import DEFAULT_PDF_PROMPT
from aistudio_mcp.core.exceptions import UnknownToolError, ValidationError

from .arguments import ConvertPdfArguments, GenerateContentArguments, ToolArguments

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from aistudio_mcp.config import FrozenConfig
    from aistudio_mcp.core.types import ToolCommand

_GENERATE_CONTENT_DESCRIPTION = """\
Generate content using Gemini with optional file inputs. Supports multiple files \
of various types (images, audio, video, PDFs, documents). MIME type is \
auto-detected from file extension.

Example usage:
```json
{
  "prompt": "Analyze this image",
  "files": [{"path": "/path/to/image.jpg"}]
}
```

Multiple files example:
```json
{
  "prompt": "Compare these documents",
  "files": [{"path": "/doc.pdf"}, {"content": "base64content", "type": "image/png"}]
}
```"""

_CONVERT_PDF_DESCRIPTION = """\
Convert PDF files to Markdown using Gemini Vision. Supports single or multiple \
PDF files. MIME type is auto-detected from file extension.

Example usage:
```json
{
  "files": [{"path": "/path/to/document.pdf"}],
  "prompt": "Convert to Markdown format"
}
```"""


def _file_items_schema(what: str) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "path": {"type": "string", "description": f"Path to {what}"},
            "content": {
                "type": "string",
                "description": f"Base64 encoded {what} content (alternative to path)",
            },
            "name": {
                "type": "string",
                "description": "Display name for inline content (optional)",
            },
            "type": {
                "type": "string",
                "description": "MIME type of the file (optional, auto-detected "
                "from file extension if path provided)",
            },
        },
        "oneOf": [{"required": ["path"]}, {"required": ["content"]}],
    }


def _generate_content_schema(config: FrozenConfig) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "prompt": {"type": "string", "description": "Text prompt for generation"},
            "system_prompt": {
                "type": "string",
                "description": "System instruction guiding the model (optional)",
            },
            "files": {
                "type": "array",
                "description": "Files to include in generation (optional). "
                "Supports images, audio, video, PDFs, documents, etc.",
                "items": _file_items_schema("file"),
                "maxItems": config.max_files,
            },
            "model": {
                "type": "string",
                "description": "Gemini model to use (optional)",
                "default": config.model,
            },
            "temperature": {
                "type": "number",
                "description": "Sampling temperature (optional)",
                "minimum": 0,
                "maximum": 2,
                "default": config.temperature,
            },
        },
        "required": ["prompt"],
    }


def _convert_pdf_schema(config: FrozenConfig) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "files": {
                "type": "array",
                "description": "PDF files to convert. Each file needs either "
                "path or content.",
                "items": _file_items_schema("PDF file"),
                "minItems": 1,
                "maxItems": config.max_files,
            },
            "prompt": {
                "type": "string",
                "description": "Additional instructions for conversion (optional)",
                "default": DEFAULT_PDF_PROMPT,
            },
            "model": {
                "type": "string",
                "description": "Gemini model to use (optional)",
                "default": config.model,
            },
        },
        "required": ["files"],
    }


@dataclasses.dataclass(frozen=True, slots=True)
class ToolSpec:
    """A tool the server exposes: its arguments model and JSON schema."""

    name: str
    description: str
    arguments: type[ToolArguments]
    schema_builder: Callable[[FrozenConfig], dict[str, Any]]

    def definition(self, config: FrozenConfig) -> types.Tool:
        """Return the MCP tool definition for ``list_tools``."""
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.schema_builder(config),
        )


TOOLS: Mapping[str, ToolSpec] = {
    spec.name: spec
    for spec in (
        ToolSpec(
            name=ConvertPdfArguments.tool_name,
            description=_CONVERT_PDF_DESCRIPTION,
            arguments=ConvertPdfArguments,
            schema_builder=_convert_pdf_schema,
        ),
        ToolSpec(
            name=GenerateContentArguments.tool_name,
            description=_GENERATE_CONTENT_DESCRIPTION,
            arguments=GenerateContentArguments,
            schema_builder=_generate_content_schema,
        ),
    )
}


def list_tool_definitions(config: FrozenConfig) -> list[types.Tool]:
    """Return definitions for every registered tool."""
    return [spec.definition(config) for spec in TOOLS.values()]


def _format_validation_error(error: PydanticValidationError) -> str:
    problems = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"]) or "arguments"
        problems.append(f"{location}: {err['msg']}")
    return "; ".join(problems)


def parse_tool_call(
    name: str, arguments: Mapping[str, Any] | None, config: FrozenConfig
) -> ToolCommand:
    """Validate raw call arguments and build the tool's command.

    Raises:
        UnknownToolError: If ``name`` is not a registered tool.
        ValidationError: If the arguments do not match the tool's model.
    """
    spec = TOOLS.get(name)
    if spec is None:
        raise UnknownToolError(f"Unknown tool: {name}")
    try:
        parsed = spec.arguments.model_validate(dict(arguments or {}))
        return parsed.to_command(config)
    except PydanticValidationError as e:
        raise ValidationError(
            f"Invalid arguments for {name}: {_format_validation_error(e)}"
        ) from e
