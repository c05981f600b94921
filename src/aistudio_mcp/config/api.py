"""Configuration entry points."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError as PydanticValidationError

from aistudio_mcp.core.exceptions import ConfigurationError

from .schema import ServerSettings
from .types import FrozenConfig

log = logging.getLogger(__name__)


def resolve_config(
    overrides: dict[str, Any] | None = None,
    *,
    env_file: str | Path | None = None,
) -> FrozenConfig:
    """Resolve configuration once and freeze it.

    Precedence: ``overrides`` > environment (``GEMINI_*``) > defaults. When
    ``env_file`` is given its values are loaded first without replacing
    variables that are already set.

    Raises:
        ConfigurationError: If the env file is missing or a value is invalid.
    """
    if env_file is not None:
        env_path = Path(env_file)
        if not env_path.is_file():
            raise ConfigurationError(f"Environment file not found: {env_path}")
        load_dotenv(env_path, override=False)

    try:
        settings = ServerSettings(**(overrides or {}))
    except PydanticValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        env_vars = [
            f"GEMINI_{name.upper()}={os.environ[f'GEMINI_{name.upper()}']}"
            for name in fields
            if f"GEMINI_{name.upper()}" in os.environ
        ]
        detail = f" ({', '.join(env_vars)})" if env_vars else ""
        raise ConfigurationError(
            f"Invalid configuration for {', '.join(fields) or 'settings'}{detail}. "
            f"Error: {e}"
        ) from e

    config = FrozenConfig(
        api_key=settings.api_key,
        model=settings.model,
        timeout_ms=settings.timeout,
        max_output_tokens=settings.max_output_tokens,
        max_files=settings.max_files,
        max_total_file_size=settings.max_total_file_size,
        temperature=settings.temperature,
        count_inline_size=settings.count_inline_size,
        log_level=settings.log_level,
    )
    log.debug("Resolved configuration: %s", config.summary())
    return config
