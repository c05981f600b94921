"""
Global test configuration: environment isolation, markers and fakes.
"""

from contextlib import suppress
import logging
import os
from pathlib import Path

import pytest

from aistudio_mcp.config import FrozenConfig, resolve_config
from aistudio_mcp.core.types import GenerationRequest
from aistudio_mcp.executor import ToolExecutor


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading .env files during tests.

    Opt-in escape hatch: mark a test with @pytest.mark.allow_dotenv
    to permit .env loading for that specific test.
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "aistudio_mcp.config.api.load_dotenv",
            lambda *_args, **_kwargs: False,
        )


@pytest.fixture(autouse=True)
def isolate_gemini_env(request, monkeypatch):
    """Ensure a clean GEMINI_* environment for each test.

    Escape hatches:
      - @pytest.mark.allow_env_pollution: keep current env unchanged
      - tests marked with @pytest.mark.api bypass isolation so the real
        environment can be used when explicitly running API tests.
    """
    if request.node.get_closest_marker("allow_env_pollution") or (
        "api" in request.node.keywords
    ):
        return

    for key in list(os.environ.keys()):
        if key.startswith("GEMINI_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("DEBUG", raising=False)


# --- Logging Fixtures ---
@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Sets the log level for noisy external libraries to WARNING."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("google_genai").setLevel(logging.WARNING)


# --- Test Environment Markers ---
def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Component integration tests with a fake backend",
        "contract: Protocol and invariant conformance tests",
        "api: Real API integration tests (requires API key)",
        "allow_dotenv: Permit .env loading in this test",
        "allow_env_pollution: Keep the caller's GEMINI_* environment",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


def pytest_collection_modifyitems(config, items):  # noqa: ARG001
    """Automatically skip API tests when API key is unavailable."""
    if not (os.getenv("GEMINI_API_KEY") and os.getenv("ENABLE_API_TESTS")):
        skip_api = pytest.mark.skip(
            reason="API tests require GEMINI_API_KEY and ENABLE_API_TESTS=1",
        )
        for item in items:
            if "api" in item.keywords:
                item.add_marker(skip_api)


# --- Core Fixtures ---


@pytest.fixture
def mock_api_key():
    """Provide a consistent, fake API key for tests."""
    return "test_api_key_12345_67890_abcdef_ghijkl"


@pytest.fixture
def config(mock_api_key) -> FrozenConfig:
    """Configuration with documented defaults and a fake key."""
    return resolve_config(overrides={"api_key": mock_api_key})


class FakeAdapter:
    """Records generation requests and returns a canned answer (or raises)."""

    def __init__(self, text: str | None = "generated text", error: Exception | None = None):
        self.text = text
        self.error = error
        self.requests: list[GenerationRequest] = []

    async def generate(self, request: GenerationRequest) -> str | None:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def fake_adapter() -> FakeAdapter:
    return FakeAdapter()


@pytest.fixture
def executor(config, fake_adapter) -> ToolExecutor:
    return ToolExecutor(config, adapter=fake_adapter)


@pytest.fixture
def make_file(tmp_path):
    """Write a file under tmp_path and return its path as a string."""

    def _make(name: str, data: bytes = b"data") -> str:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return str(path)

    return _make


@pytest.fixture
def missing_path(tmp_path) -> str:
    return str(Path(tmp_path) / "does-not-exist.pdf")


@pytest.fixture
def adapter_factory():
    """Build `FakeAdapter` instances with custom text or error."""
    return FakeAdapter
