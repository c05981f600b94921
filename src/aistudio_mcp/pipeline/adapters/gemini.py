"""Google GenAI SDK adapter.

Translates library-owned request types into ``google.genai.types`` at the
provider seam so the rest of the pipeline stays SDK-agnostic.
"""

from __future__ import annotations

import base64
import logging
from typing import TYPE_CHECKING

from google import genai
from google.genai import types

from aistudio_mcp.core.types import TextPart

if TYPE_CHECKING:
    from aistudio_mcp.core.types import GenerationRequest, Part

log = logging.getLogger(__name__)


def _to_sdk_part(part: Part) -> types.Part:
    if isinstance(part, TextPart):
        return types.Part(text=part.text)
    return types.Part(
        inline_data=types.Blob(
            mime_type=part.mime_type, data=base64.b64decode(part.data)
        )
    )


def to_sdk_request(
    request: GenerationRequest,
) -> tuple[list[types.Content], types.GenerateContentConfig]:
    """Return the ``contents`` and ``config`` arguments for ``generate_content``."""
    contents = [
        types.Content(role=turn.role, parts=[_to_sdk_part(p) for p in turn.parts])
        for turn in request.conversation
    ]
    config = types.GenerateContentConfig(
        max_output_tokens=request.generation_config.max_output_tokens,
        temperature=request.generation_config.temperature,
    )
    if request.system_instruction is not None:
        config.system_instruction = request.system_instruction
    return contents, config


class GoogleGenAIAdapter:
    """`GenerationAdapter` backed by ``google.genai.Client``."""

    def __init__(
        self,
        api_key: str,
        *,
        timeout_ms: int | None = None,
        client: genai.Client | None = None,
    ) -> None:
        """Create the SDK client; ``timeout_ms`` applies to each HTTP request."""
        if client is None:
            http_options = (
                types.HttpOptions(timeout=timeout_ms) if timeout_ms else None
            )
            client = genai.Client(api_key=api_key, http_options=http_options)
        self._client = client

    async def generate(self, request: GenerationRequest) -> str | None:
        """Call ``models.generate_content`` on the async client."""
        contents, config = to_sdk_request(request)
        log.debug("Calling Gemini model '%s'", request.model)
        response = await self._client.aio.models.generate_content(
            model=request.model,
            contents=contents,
            config=config,
        )
        return response.text
