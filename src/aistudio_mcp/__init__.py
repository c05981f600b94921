"""AI Studio MCP server: Gemini content generation exposed as MCP tools."""

import importlib.metadata
import logging

# Version handling
try:
    __version__ = importlib.metadata.version("aistudio-mcp")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

from aistudio_mcp.config import FrozenConfig, resolve_config  # noqa: E402
from aistudio_mcp.core.exceptions import (  # noqa: E402
    AIStudioError,
    APIError,
    ConfigurationError,
    FileCountError,
    FileProcessingError,
    MissingKeyError,
    UnknownToolError,
    ValidationError,
)
from aistudio_mcp.core.types import (  # noqa: E402
    GenerationRequest,
    GenerationResult,
    IngestLimits,
    IngestResult,
    InlineFile,
    NormalizedFile,
    PathFile,
    ToolCommand,
)
from aistudio_mcp.executor import ToolExecutor, create_executor  # noqa: E402
from aistudio_mcp.pipeline.composer import compose_request  # noqa: E402
from aistudio_mcp.pipeline.ingestor import FileIngestor  # noqa: E402
from aistudio_mcp.telemetry import TelemetryContext, TelemetryReporter  # noqa: E402

# Library logging stays silent until the application configures handlers
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Public API
__all__ = [  # noqa: RUF022
    # Executor
    "ToolExecutor",
    "create_executor",
    # Pipeline components
    "FileIngestor",
    "compose_request",
    # Configuration
    "FrozenConfig",
    "resolve_config",
    # Telemetry
    "TelemetryContext",
    "TelemetryReporter",
    # Core types
    "GenerationRequest",
    "GenerationResult",
    "IngestLimits",
    "IngestResult",
    "InlineFile",
    "NormalizedFile",
    "PathFile",
    "ToolCommand",
    # Exceptions
    "AIStudioError",
    "APIError",
    "ConfigurationError",
    "FileCountError",
    "FileProcessingError",
    "MissingKeyError",
    "UnknownToolError",
    "ValidationError",
]
