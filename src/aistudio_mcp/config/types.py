"""Resolved, immutable configuration passed through the pipeline."""

from __future__ import annotations

import dataclasses
from typing import Any

from aistudio_mcp.core.exceptions import MissingKeyError
from aistudio_mcp.core.types import IngestLimits

_MB = 1024 * 1024


@dataclasses.dataclass(frozen=True, slots=True)
class FrozenConfig:
    """Process-wide configuration, fixed at startup and read-only thereafter."""

    api_key: str | None
    model: str
    timeout_ms: int
    max_output_tokens: int
    max_files: int
    max_total_file_size: int
    temperature: float
    count_inline_size: bool = True
    log_level: str = "INFO"

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    def ingest_limits(self) -> IngestLimits:
        """Limits applied to each tool call's file batch."""
        return IngestLimits(
            max_count=self.max_files,
            max_total_bytes=self.max_total_file_size,
            count_inline_bytes=self.count_inline_size,
        )

    def require_api_key(self) -> str:
        """Return the API key or raise `MissingKeyError`."""
        if not self.api_key:
            raise MissingKeyError("GEMINI_API_KEY environment variable is required")
        return self.api_key

    def summary(self) -> dict[str, Any]:
        """Redacted, human-oriented view of the configuration."""
        return {
            "api_key": "<redacted>" if self.api_key else None,
            "model": self.model,
            "timeout": f"{self.timeout_ms}ms ({self.timeout_seconds:g}s)",
            "max_output_tokens": self.max_output_tokens,
            "max_files": self.max_files,
            "max_total_file_size": f"{round(self.max_total_file_size / _MB)}MB",
            "temperature": self.temperature,
            "count_inline_size": self.count_inline_size,
        }
