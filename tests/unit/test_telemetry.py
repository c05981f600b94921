import pytest

from aistudio_mcp import telemetry
from aistudio_mcp.core.types import InlineFile, ToolCommand
from aistudio_mcp.executor import ToolExecutor
from aistudio_mcp.telemetry import InMemoryReporter, TelemetryContext

pytestmark = pytest.mark.unit


@pytest.fixture
def telemetry_enabled(monkeypatch):
    monkeypatch.setattr(telemetry, "_TELEMETRY_ENABLED", True)


def test_disabled_context_is_shared_noop(monkeypatch):
    monkeypatch.setattr(telemetry, "_TELEMETRY_ENABLED", False)

    ctx = TelemetryContext(InMemoryReporter())

    assert ctx is TelemetryContext()
    with ctx("anything") as scoped:
        scoped.count("ignored")


@pytest.mark.usefixtures("telemetry_enabled")
def test_enabled_context_without_reporters_is_noop():
    assert TelemetryContext() is TelemetryContext()


@pytest.mark.usefixtures("telemetry_enabled")
def test_nested_scopes_build_dotted_paths():
    reporter = InMemoryReporter()
    ctx = TelemetryContext(reporter)

    with ctx("outer"), ctx("inner", detail="x"):
        ctx.gauge("size", 3)

    assert set(reporter.timings) == {"outer", "outer.inner"}
    _, metadata = reporter.timings["outer.inner"][0]
    assert metadata["parent_scope"] == "outer"
    assert metadata["detail"] == "x"
    assert reporter.metrics["outer.inner.size"][0][0] == 3


@pytest.mark.usefixtures("telemetry_enabled")
def test_failing_reporter_does_not_break_scope(caplog):
    class Broken:
        def record_timing(self, scope, duration, **metadata):
            raise RuntimeError("boom")

        def record_metric(self, scope, value, **metadata):
            raise RuntimeError("boom")

    ctx = TelemetryContext(Broken())
    with ctx("scope"):
        ctx.count("n")

    assert "Telemetry reporter 'Broken' failed" in caplog.text


@pytest.mark.asyncio
@pytest.mark.usefixtures("telemetry_enabled")
async def test_tool_call_records_stage_timings(config, fake_adapter):
    reporter = InMemoryReporter()
    executor = ToolExecutor(
        config, adapter=fake_adapter, telemetry=TelemetryContext(reporter)
    )
    command = ToolCommand(
        tool_name="generate_content",
        prompt="p",
        config=config,
        files=(InlineFile(content="aGVsbG8="),),
    )

    await executor.execute(command)

    assert len(reporter.timings["tool.stage"]) == 3
    assert "tool.stage.ingest" in reporter.timings
    assert "tool.stage.generate" in reporter.timings
    files_ok = [k for k in reporter.metrics if k.endswith("ingest.files_ok")]
    assert files_ok
    assert reporter.metrics[files_ok[0]][0][0] == 1
    assert "Telemetry Report" in reporter.get_report()
