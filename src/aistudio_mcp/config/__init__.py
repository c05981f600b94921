"""Configuration management for the AI Studio MCP server.

Resolve-once, freeze-then-flow: `resolve_config` reads ``GEMINI_*`` settings
and returns an immutable `FrozenConfig` shared by every tool call.
"""

from .api import resolve_config
from .schema import ServerSettings
from .types import FrozenConfig

__all__ = ["FrozenConfig", "ServerSettings", "resolve_config"]
