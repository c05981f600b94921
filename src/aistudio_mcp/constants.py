"""
Project-wide constants for the AI Studio MCP server
"""  # noqa: D200, D212, D415

# ==============================================================================
# Server identity
# ==============================================================================

SERVER_NAME = "aistudio-mcp-server"

# ==============================================================================
# Configuration defaults (overridable through GEMINI_* variables)
# ==============================================================================

_MB = 1024 * 1024

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TIMEOUT_MS = 300_000  # 5 minutes
DEFAULT_MAX_OUTPUT_TOKENS = 8192
DEFAULT_MAX_FILES = 10
DEFAULT_MAX_TOTAL_FILE_SIZE = 50 * _MB
DEFAULT_TEMPERATURE = 0.2

# ==============================================================================
# Tool defaults
# ==============================================================================

DEFAULT_PDF_PROMPT = (
    "Convert this PDF to well-formatted Markdown, preserving structure and "
    "formatting. Return only the Markdown content without any additional text."
)
