"""Exception hierarchy for the AI Studio MCP server."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aistudio_mcp.core.types import IngestFailure


class AIStudioError(Exception):
    """Base exception for all server errors."""


class ConfigurationError(AIStudioError):
    """Raised when configuration values are invalid."""


class MissingKeyError(ConfigurationError):
    """Raised when the Gemini API key is not configured."""


class ValidationError(AIStudioError):
    """Raised when tool arguments fail validation."""


class UnknownToolError(AIStudioError):
    """Raised when a tool call names a tool the server does not expose."""


class FileCountError(AIStudioError):
    """Raised when a call carries more files than allowed."""


class FileProcessingError(AIStudioError):
    """Raised when one or more files in a call could not be ingested.

    Carries the individual failures so callers can inspect them.
    """

    def __init__(
        self, message: str, failures: tuple[IngestFailure, ...] = ()
    ) -> None:
        """Store the aggregated message and the per-file failures."""
        super().__init__(message)
        self.failures = failures


class APIError(AIStudioError):
    """Raised when the Gemini backend call fails or times out."""


class InvariantViolationError(AIStudioError):
    """Raised when a pipeline stage breaks the handler contract."""

    def __init__(self, message: str, stage_name: str | None = None) -> None:
        """Record the offending stage alongside the message."""
        super().__init__(message)
        self.stage_name = stage_name
