"""Configuration schema and validation using Pydantic.

Validates and coerces ``GEMINI_*`` environment variables and programmatic
overrides into typed settings with documented defaults.
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from aistudio_mcp.constants import (
    DEFAULT_MAX_FILES,
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_MAX_TOTAL_FILE_SIZE,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    DEFAULT_TIMEOUT_MS,
)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ServerSettings(BaseSettings):
    """Pydantic settings schema for the server.

    Every field maps to ``GEMINI_<FIELD>`` in the environment.
    """

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=None,  # .env loading is explicit, see resolve_config()
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(
        default=None,
        description="Google Gemini API key",
    )

    model: str = Field(
        default=DEFAULT_MODEL,
        description="Default Gemini model identifier",
        min_length=1,
    )

    timeout: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        description="Backend request timeout in milliseconds",
        ge=1,
    )

    max_output_tokens: int = Field(
        default=DEFAULT_MAX_OUTPUT_TOKENS,
        description="Output token ceiling for each generation",
        ge=1,
    )

    max_files: int = Field(
        default=DEFAULT_MAX_FILES,
        description="Maximum number of files per tool call",
        ge=1,
    )

    max_total_file_size: int = Field(
        default=DEFAULT_MAX_TOTAL_FILE_SIZE,
        description="Cumulative byte ceiling for the files of one tool call",
        ge=1,
    )

    temperature: float = Field(
        default=DEFAULT_TEMPERATURE,
        description="Default sampling temperature",
        ge=0.0,
        le=2.0,
    )

    count_inline_size: bool = Field(
        default=True,
        description="Count decoded inline content toward the size ceiling",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level for the server process",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_log_level(cls, v: Any) -> str:
        """Normalize and check the log level name."""
        if isinstance(v, str) and v.upper() in _LOG_LEVELS:
            return v.upper()
        raise ValueError(
            f"Invalid log level: {v}. Must be one of: {', '.join(_LOG_LEVELS)}"
        )
