"""Tests for the command line interface."""
import json

import pytest
from typer.testing import CliRunner

from aquanet.cli import app as cli_app
from aquanet.cli.console import LogLevel, console_debug_callback
from aquanet.config import GatewayConfig
from aquanet.conversation import ConversationController

from conftest import FakeStreamingGateway

runner = CliRunner()


@pytest.fixture
def fake_backend(monkeypatch):
    """Replace configuration and controller creation with fakes."""
    gateway = FakeStreamingGateway(chunks=["All ", "good"], final="All good.")
    monkeypatch.setattr(cli_app, "get_config", lambda console, **kw: GatewayConfig(api_key="k"))
    monkeypatch.setattr(cli_app, "build_controller", lambda config: ConversationController(gateway))
    return gateway


class TestTasksCommand:
    def test_lists_every_task(self):
        result = runner.invoke(cli_app.app, ["tasks"])

        assert result.exit_code == 0
        assert "water_quality_analysis" in result.output
        assert "environmental_impact" in result.output


class TestPromptCommand:
    def test_prints_prompt_with_sample_readings(self):
        result = runner.invoke(cli_app.app, ["prompt", "--task", "water_quality_analysis"])

        assert result.exit_code == 0
        assert "7.5" in result.output
        assert "5.2" in result.output

    def test_uses_input_file(self, tmp_path):
        path = tmp_path / "pond.json"
        path.write_text(json.dumps({
            "environmentalData": {"waterQuality": {"temperature": 31, "pH": 8.4}},
            "biologicalData": {"species": "tilapia", "stage": "adult"},
        }))

        result = runner.invoke(cli_app.app, ["prompt", "-t", "disease_diagnosis", "-i", str(path)])

        assert result.exit_code == 0
        assert "tilapia" in result.output
        assert "8.4" in result.output

    def test_invalid_input_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        result = runner.invoke(cli_app.app, ["prompt", "-i", str(path)])

        assert result.exit_code == 1

    def test_unknown_task_rejected(self):
        result = runner.invoke(cli_app.app, ["prompt", "--task", "astrology"])

        assert result.exit_code != 0


class TestAskCommand:
    def test_streams_answer(self, fake_backend):
        result = runner.invoke(cli_app.app, ["ask", "Is my pond ok?"])

        assert result.exit_code == 0
        assert "All good." in result.output
        assert "Response time" in result.output
        assert fake_backend.closed

    def test_exports_history(self, fake_backend, tmp_path):
        result = runner.invoke(
            cli_app.app, ["ask", "--task", "water_quality_analysis", "--export", str(tmp_path)]
        )

        assert result.exit_code == 0
        files = list(tmp_path.glob("chat-history-*.json"))
        assert len(files) == 1
        entries = json.loads(files[0].read_text(encoding="utf-8"))
        assert [e["role"] for e in entries] == ["user", "assistant"]
        assert entries[1]["content"] == "All good."

    def test_backend_failure_exits_nonzero(self, fake_backend):
        fake_backend.error = RuntimeError("service unavailable")

        result = runner.invoke(cli_app.app, ["ask", "hello"])

        assert result.exit_code == 1
        assert "service unavailable" in result.output

    def test_requires_question_or_task(self, fake_backend):
        result = runner.invoke(cli_app.app, ["ask"])

        assert result.exit_code == 1
        assert fake_backend.payloads == []


class TestConsoleCallback:
    def test_filters_below_level(self):
        from io import StringIO

        from rich.console import Console

        buffer = StringIO()
        callback = console_debug_callback(Console(file=buffer, width=120), LogLevel.WARNING)

        callback("info", "Controller", "hidden")
        callback("error", "Controller", "shown [with brackets]")

        output = buffer.getvalue()
        assert "hidden" not in output
        assert "shown [with brackets]" in output

    def test_level_from_string(self):
        assert LogLevel.from_string("ERROR") == LogLevel.ERROR
        assert LogLevel.from_string("bogus") == LogLevel.DEBUG
