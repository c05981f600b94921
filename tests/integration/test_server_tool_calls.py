"""End-to-end tool calls through the MCP server with a fake backend."""

import base64

from mcp import types
import pytest

from aistudio_mcp.config import resolve_config
from aistudio_mcp.executor import ToolExecutor
from aistudio_mcp.server import AIStudioServer

pytestmark = pytest.mark.integration


def _server(config, adapter) -> AIStudioServer:
    return AIStudioServer(config, executor=ToolExecutor(config, adapter=adapter))


def _text(result) -> str:
    (content,) = result.content
    return content.text


@pytest.mark.asyncio
async def test_generate_content_with_inline_file(config, fake_adapter):
    result = await _server(config, fake_adapter).call_tool(
        "generate_content",
        {"prompt": "summarize", "files": [{"content": "aGVsbG8=", "type": "text/plain"}]},
    )

    assert not result.isError
    assert _text(result) == "generated text"
    payload = fake_adapter.requests[0].to_dict()
    assert payload["conversation"][0]["parts"] == [
        {"text": "summarize"},
        {"inlineData": {"mimeType": "text/plain", "data": "aGVsbG8="}},
    ]


@pytest.mark.asyncio
async def test_too_many_files_is_rejected_before_backend(
    mock_api_key, fake_adapter, make_file
):
    config = resolve_config(overrides={"api_key": mock_api_key, "max_files": 1})

    result = await _server(config, fake_adapter).call_tool(
        "generate_content",
        {"prompt": "p", "files": [{"path": make_file("a.txt")}, {"path": make_file("b.txt")}]},
    )

    assert result.isError
    assert _text(result) == "Error: Too many files: 2. Maximum allowed: 1"
    assert fake_adapter.requests == []


@pytest.mark.asyncio
async def test_one_unreadable_file_fails_the_whole_call(
    config, fake_adapter, make_file, missing_path
):
    files = [
        {"path": make_file("a.pdf")},
        {"path": missing_path},
        {"path": make_file("b.pdf")},
    ]

    result = await _server(config, fake_adapter).call_tool(
        "convert_pdf_to_markdown", {"files": files}
    )

    assert result.isError
    text = _text(result)
    assert text.startswith("Error: File processing errors:\n")
    assert missing_path in text
    assert "a.pdf" not in text.replace(missing_path, "")
    assert fake_adapter.requests == []


@pytest.mark.asyncio
async def test_pdf_conversion_of_several_files(config, fake_adapter, make_file):
    files = [{"path": make_file("a.pdf", b"%PDF-a")}, {"path": make_file("b.pdf", b"%PDF-b")}]

    result = await _server(config, fake_adapter).call_tool(
        "convert_pdf_to_markdown", {"files": files, "prompt": "Convert"}
    )

    assert not result.isError
    parts = fake_adapter.requests[0].conversation[0].parts
    assert "Processing 2 files." in parts[0].text
    assert [p.mime_type for p in parts[1:]] == ["application/pdf", "application/pdf"]
    assert parts[1].data == base64.b64encode(b"%PDF-a").decode()


@pytest.mark.asyncio
async def test_unknown_tool_returns_error_result(config, fake_adapter):
    result = await _server(config, fake_adapter).call_tool("translate", {})

    assert result.isError
    assert _text(result) == "Error: Unknown tool: translate"


@pytest.mark.asyncio
async def test_backend_failure_returns_error_result(config, adapter_factory):
    adapter = adapter_factory(error=RuntimeError("503 unavailable"))

    result = await _server(config, adapter).call_tool("generate_content", {"prompt": "p"})

    assert result.isError
    assert _text(result) == "Error: Gemini API error: 503 unavailable"


@pytest.mark.asyncio
async def test_unexpected_error_never_escapes(config, fake_adapter):
    server = _server(config, fake_adapter)

    async def explode(command):
        raise KeyError("boom")

    server.executor.execute = explode

    result = await server.call_tool("generate_content", {"prompt": "p"})

    assert result.isError
    assert _text(result).startswith("Error: ")


@pytest.mark.asyncio
async def test_list_tools_advertises_both_tools(config, fake_adapter):
    tools = await _server(config, fake_adapter).list_tools()

    assert sorted(t.name for t in tools) == ["convert_pdf_to_markdown", "generate_content"]


# --- Through the registered MCP request handlers ---


async def _dispatch_call(server: AIStudioServer, name: str, arguments: dict):
    handler = server.server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )
    response = await handler(request)
    return response.root


@pytest.mark.asyncio
async def test_protocol_call_returns_tool_result(config, fake_adapter):
    result = await _dispatch_call(
        _server(config, fake_adapter), "generate_content", {"prompt": "hi"}
    )

    assert isinstance(result, types.CallToolResult)
    assert not result.isError
    assert _text(result) == "generated text"


@pytest.mark.asyncio
async def test_protocol_call_keeps_our_error_format(config, fake_adapter):
    server = _server(config, fake_adapter)

    unknown = await _dispatch_call(server, "nope", {})
    # Schema-invalid arguments reach parse_tool_call rather than the SDK validator
    invalid = await _dispatch_call(server, "generate_content", {"temperature": 1})

    assert unknown.isError
    assert _text(unknown) == "Error: Unknown tool: nope"
    assert invalid.isError
    assert _text(invalid).startswith("Error: Invalid arguments for generate_content: ")
    assert fake_adapter.requests == []


@pytest.mark.asyncio
async def test_protocol_list_tools(config, fake_adapter):
    handler = _server(config, fake_adapter).server.request_handlers[types.ListToolsRequest]

    response = await handler(types.ListToolsRequest(method="tools/list"))

    assert sorted(t.name for t in response.root.tools) == [
        "convert_pdf_to_markdown",
        "generate_content",
    ]
