"""The entry point that runs a tool call through the pipeline.

Stages run strictly in order; the first `Failure` stops the call and its
error is raised to the caller (the MCP server), which turns it into an error
response. No request reaches the backend unless every earlier stage succeeded.
"""

from __future__ import annotations

import logging
from time import perf_counter
from typing import TYPE_CHECKING, Any

from aistudio_mcp.config import FrozenConfig, resolve_config
from aistudio_mcp.core.exceptions import AIStudioError, InvariantViolationError
from aistudio_mcp.core.types import (
    Failure,
    GenerationResult,
    Result,
    Success,
    ToolCommand,
)
from aistudio_mcp.pipeline.api_handler import APIHandler
from aistudio_mcp.pipeline.composer import RequestComposer
from aistudio_mcp.pipeline.ingestor import FileIngestor
from aistudio_mcp.telemetry import TelemetryContext

if TYPE_CHECKING:
    from collections.abc import Iterable

    from aistudio_mcp.pipeline.adapters.base import GenerationAdapter
    from aistudio_mcp.pipeline.base import BaseAsyncHandler
    from aistudio_mcp.telemetry import TelemetryContextProtocol

logger = logging.getLogger(__name__)


class ToolExecutor:
    """Executes tool commands through a pipeline of handlers.

    The default pipeline is ``FileIngestor -> RequestComposer -> APIHandler``.
    Tests and embedders may pass their own handlers or a fake adapter.
    """

    def __init__(
        self,
        config: FrozenConfig,
        adapter: GenerationAdapter | None = None,
        pipeline_handlers: Iterable[BaseAsyncHandler[Any, Any, AIStudioError]]
        | None = None,
        *,
        telemetry: TelemetryContextProtocol | None = None,
    ):
        """Initialize the executor.

        Args:
            config: Resolved configuration shared by every call.
            adapter: Backend adapter; defaults to the Google GenAI adapter,
                which requires an API key.
            pipeline_handlers: Optional handlers replacing the default pipeline.
            telemetry: Optional telemetry context.
        """
        self.config = config
        self._telemetry: TelemetryContextProtocol = telemetry or TelemetryContext()
        handlers = list(pipeline_handlers or self._build_default_pipeline(adapter))
        if not handlers:
            raise ValueError("Pipeline may not be empty; provide at least one handler.")
        self._pipeline = handlers

    def _build_default_pipeline(
        self, adapter: GenerationAdapter | None
    ) -> list[BaseAsyncHandler[Any, Any, AIStudioError]]:
        if adapter is None:
            # Defer the SDK import until a real backend is needed
            from aistudio_mcp.pipeline.adapters.gemini import GoogleGenAIAdapter

            adapter = GoogleGenAIAdapter(
                self.config.require_api_key(), timeout_ms=self.config.timeout_ms
            )
        return [
            FileIngestor(telemetry=self._telemetry),
            RequestComposer(),
            APIHandler(adapter, telemetry=self._telemetry),
        ]

    async def execute(self, command: ToolCommand) -> GenerationResult:
        """Run ``command`` through every stage.

        Raises:
            AIStudioError: The error of the first stage that failed.
        """
        current: Any = command
        ctx = self._telemetry
        for handler in self._pipeline:
            stage_name = type(handler).__name__
            with ctx("tool.stage", stage=stage_name, tool=command.tool_name):
                start = perf_counter()
                result: Result[Any, AIStudioError] = await handler.handle(current)
                duration = perf_counter() - start

            if not isinstance(result, Success | Failure):
                ctx.count("tool.invariant_violation", stage=stage_name)
                raise InvariantViolationError(
                    "Handler returned a non-Result value; expected Success|Failure.",
                    stage_name=stage_name,
                )
            if isinstance(result, Failure):
                ctx.count("tool.error", stage=stage_name)
                logger.debug("Stage %s failed after %.3fs", stage_name, duration)
                raise result.error
            logger.debug("Stage %s finished in %.3fs", stage_name, duration)
            current = result.value

        if not isinstance(current, GenerationResult):
            raise InvariantViolationError(
                "Pipeline ended without a GenerationResult.",
                stage_name=type(self._pipeline[-1]).__name__,
            )
        return current

    @property
    def stage_names(self) -> tuple[str, ...]:
        """Return the pipeline's stage names in execution order."""
        return tuple(type(h).__name__ for h in self._pipeline)


def create_executor(
    config: FrozenConfig | None = None,
    adapter: GenerationAdapter | None = None,
) -> ToolExecutor:
    """Create an executor, resolving configuration from the environment if needed."""
    return ToolExecutor(config if config is not None else resolve_config(), adapter)
