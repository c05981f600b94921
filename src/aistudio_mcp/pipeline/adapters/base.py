"""Adapter protocol consumed by the API handler."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from aistudio_mcp.core.types import GenerationRequest


@runtime_checkable
class GenerationAdapter(Protocol):
    """A backend that turns an assembled request into text.

    Implementations raise on any provider failure; they do not retry.
    """

    async def generate(self, request: GenerationRequest) -> str | None:
        """Run one generation call and return its text (``None`` if empty)."""
        ...
