"""The Google GenAI adapter converts neutral requests into SDK types."""

from types import SimpleNamespace

from google.genai import types
import pytest

from aistudio_mcp.core.types import NormalizedFile
from aistudio_mcp.pipeline.adapters import GenerationAdapter, GoogleGenAIAdapter
from aistudio_mcp.pipeline.adapters.gemini import to_sdk_request
from aistudio_mcp.pipeline.composer import compose_request

pytestmark = pytest.mark.unit


def _request(system_prompt=None):
    files = [NormalizedFile(content="aGVsbG8=", mime_type="text/plain")]
    return compose_request("summarize", system_prompt, files, "gemini-2.5-flash", 0.3, 128)


class _FakeModels:
    def __init__(self, text):
        self.text = text
        self.calls = []

    async def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        return SimpleNamespace(text=self.text)


def _fake_client(text="answer"):
    models = _FakeModels(text)
    return SimpleNamespace(aio=SimpleNamespace(models=models)), models


def test_request_parts_become_sdk_parts():
    contents, _ = to_sdk_request(_request())

    (content,) = contents
    assert content.role == "user"
    assert content.parts[0].text == "summarize"
    blob = content.parts[1].inline_data
    assert blob.mime_type == "text/plain"
    assert blob.data == b"hello"


def test_generation_config_carries_parameters():
    _, config = to_sdk_request(_request())

    assert isinstance(config, types.GenerateContentConfig)
    assert config.max_output_tokens == 128
    assert config.temperature == 0.3
    assert config.system_instruction is None


def test_system_instruction_is_forwarded():
    _, config = to_sdk_request(_request(system_prompt="Reply in French."))

    assert config.system_instruction == "Reply in French."


@pytest.mark.asyncio
async def test_generate_calls_async_client_once():
    client, models = _fake_client("bonjour")
    adapter = GoogleGenAIAdapter("key", client=client)

    text = await adapter.generate(_request())

    assert text == "bonjour"
    assert len(models.calls) == 1
    assert models.calls[0]["model"] == "gemini-2.5-flash"


def test_adapter_satisfies_protocol():
    client, _ = _fake_client()

    assert isinstance(GoogleGenAIAdapter("key", client=client), GenerationAdapter)
