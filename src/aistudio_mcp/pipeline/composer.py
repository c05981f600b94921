"""Request composition stage of the pipeline.

Assembles the prompt, optional system instruction, ingested files and
generation parameters into a single `GenerationRequest`.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import Final

from aistudio_mcp.core.exceptions import ValidationError
from aistudio_mcp.core.types import (
    ComposedCommand,
    Failure,
    GenerationConfig,
    GenerationRequest,
    IngestedCommand,
    InlineDataPart,
    NormalizedFile,
    Part,
    Result,
    Success,
    TextPart,
    Turn,
)
from aistudio_mcp.pipeline.base import BaseAsyncHandler

logger = logging.getLogger(__name__)

MULTI_FILE_NOTE: Final = (
    "\n\nProcessing {count} files. Please provide the converted Markdown for each "
    "file with clear section headers indicating the source file name."
)


def compose_request(
    user_prompt: str,
    system_prompt: str | None,
    files: Sequence[NormalizedFile],
    model: str,
    temperature: float,
    max_output_tokens: int,
) -> GenerationRequest:
    """Build a single-turn generation request.

    The turn's first part is always the prompt text, followed by one inline
    data part per file in the given order. The prompt is passed through
    unvalidated; an empty ``system_prompt`` counts as absent.
    """
    parts: list[Part] = [TextPart(text=user_prompt)]
    parts.extend(
        InlineDataPart(mime_type=f.mime_type, data=f.content) for f in files
    )
    return GenerationRequest(
        model=model,
        conversation=(Turn(parts=tuple(parts)),),
        generation_config=GenerationConfig(
            max_output_tokens=max_output_tokens, temperature=temperature
        ),
        system_instruction=system_prompt or None,
    )


class RequestComposer(BaseAsyncHandler[IngestedCommand, ComposedCommand, ValidationError]):
    """Resolves per-call parameters against configuration and composes."""

    async def handle(
        self, command: IngestedCommand
    ) -> Result[ComposedCommand, ValidationError]:
        """Compose the generation request for an ingested command."""
        initial = command.initial
        config = initial.config
        prompt = initial.prompt
        if initial.annotate_multiple_files and len(command.files) > 1:
            prompt += MULTI_FILE_NOTE.format(count=len(command.files))

        try:
            request = compose_request(
                user_prompt=prompt,
                system_prompt=initial.system_prompt,
                files=command.files,
                model=initial.model or config.model,
                temperature=(
                    initial.temperature
                    if initial.temperature is not None
                    else config.temperature
                ),
                max_output_tokens=config.max_output_tokens,
            )
        except (TypeError, ValueError) as e:
            return Failure(ValidationError(f"Invalid generation request: {e}"))

        logger.debug(
            "Composed request for model %s with %d file part(s)",
            request.model,
            len(command.files),
        )
        return Success(ComposedCommand(ingested=command, request=request))
