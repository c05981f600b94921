"""API handling stage of the pipeline.

Executes the composed request against the injected provider adapter with the
configured timeout. No retry or fallback: a failure or timeout surfaces to
the caller as a single `APIError`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Final

from aistudio_mcp.core.exceptions import APIError
from aistudio_mcp.core.types import (
    ComposedCommand,
    Failure,
    GenerationResult,
    Result,
    Success,
)
from aistudio_mcp.pipeline.base import BaseAsyncHandler
from aistudio_mcp.telemetry import TelemetryContext

if TYPE_CHECKING:
    from aistudio_mcp.pipeline.adapters.base import GenerationAdapter
    from aistudio_mcp.telemetry import TelemetryContextProtocol

logger = logging.getLogger(__name__)

NO_CONTENT_SENTINEL: Final = "No content generated"


class APIHandler(BaseAsyncHandler[ComposedCommand, GenerationResult, APIError]):
    """Sends the generation request and normalizes the outcome."""

    def __init__(
        self,
        adapter: GenerationAdapter,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        """Initialize with a provider adapter and optional telemetry."""
        self._adapter = adapter
        self._telemetry: TelemetryContextProtocol = telemetry or TelemetryContext()

    async def handle(
        self, command: ComposedCommand
    ) -> Result[GenerationResult, APIError]:
        """Call the backend once; wrap any failure as ``Gemini API error``."""
        request = command.request
        timeout_s = command.ingested.initial.config.timeout_seconds
        try:
            with self._telemetry("generate", model=request.model):
                text = await asyncio.wait_for(
                    self._adapter.generate(request), timeout=timeout_s
                )
        except TimeoutError:
            logger.error(
                "Gemini call for model '%s' timed out after %.1fs",
                request.model,
                timeout_s,
            )
            return Failure(
                APIError(f"Gemini API error: request timed out after {timeout_s:g}s")
            )
        except Exception as e:
            logger.error("Gemini call for model '%s' failed: %s", request.model, e)
            return Failure(APIError(f"Gemini API error: {e}"))

        return Success(
            GenerationResult(text=text or NO_CONTENT_SENTINEL, model=request.model)
        )
