"""Tool argument models.

Loosely-typed MCP argument objects are validated here, at the boundary, and
converted into typed `ToolCommand` values. Each file entry becomes one variant
of `FileDescriptor`; entries naming neither ``path`` nor ``content`` become
`MalformedFile` so the ingestor reports them in order with the other files.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from aistudio_mcp.constants import DEFAULT_PDF_PROMPT
from aistudio_mcp.core.types import (
    FileDescriptor,
    InlineFile,
    MalformedFile,
    PathFile,
    ToolCommand,
)
from aistudio_mcp.pipeline.ingestor import MISSING_SOURCE_REASON

if TYPE_CHECKING:
    from aistudio_mcp.config import FrozenConfig


class FileArgument(BaseModel):
    """One entry of a tool call's ``files`` array."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    path: str | None = None
    content: str | None = None
    name: str | None = None
    type: str | None = None

    def to_descriptor(self) -> FileDescriptor:
        """Classify the entry; inline content wins when both are given."""
        mime_type = self.type or None
        if self.content:
            return InlineFile(content=self.content, name=self.name, mime_type=mime_type)
        if self.path:
            return PathFile(path=self.path, mime_type=mime_type)
        return MalformedFile(reason=MISSING_SOURCE_REASON, name=self.name)


class ToolArguments(BaseModel, abc.ABC):
    """Base class for the argument model of one tool."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    tool_name: ClassVar[str]

    @abc.abstractmethod
    def to_command(self, config: FrozenConfig) -> ToolCommand:
        """Build the pipeline command for these arguments."""


class GenerateContentArguments(ToolArguments):
    """Arguments of the ``generate_content`` tool."""

    tool_name: ClassVar[str] = "generate_content"

    prompt: str
    system_prompt: str | None = None
    files: list[FileArgument] | None = None
    model: str | None = None
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)

    def to_command(self, config: FrozenConfig) -> ToolCommand:
        return ToolCommand(
            tool_name=self.tool_name,
            prompt=self.prompt,
            config=config,
            files=tuple(f.to_descriptor() for f in self.files or ()),
            system_prompt=self.system_prompt or None,
            model=self.model or None,
            temperature=self.temperature,
        )


class ConvertPdfArguments(ToolArguments):
    """Arguments of the ``convert_pdf_to_markdown`` tool."""

    tool_name: ClassVar[str] = "convert_pdf_to_markdown"

    files: list[FileArgument] = Field(min_length=1)
    prompt: str | None = None
    model: str | None = None

    def to_command(self, config: FrozenConfig) -> ToolCommand:
        return ToolCommand(
            tool_name=self.tool_name,
            prompt=self.prompt or DEFAULT_PDF_PROMPT,
            config=config,
            files=tuple(f.to_descriptor() for f in self.files),
            model=self.model or None,
            require_files=True,
            annotate_multiple_files=True,
        )
