"""Tests for the uxassert run CLI command.

get_adapter and extract_frames are patched, so no API key, network or
ffmpeg is needed.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from uxassert import __version__
from uxassert.adapters.base import (
    AdapterConfig,
    AdapterTurnResult,
    BaseAdapter,
    Message,
    TextBlock,
    ToolUseBlock,
    TransportError,
)
from uxassert.cli.main import app
from uxassert.models.frame import Frame
from uxassert.video.frames import ExtractedVideo, FrameExtractionError

runner = CliRunner()


class CLIMockAdapter(BaseAdapter):
    """Mock adapter for CLI testing that returns configurable responses."""

    def __init__(self, responses: list[AdapterTurnResult | Exception]) -> None:
        self._responses = list(responses)

    async def send_turn(
        self,
        messages: list[Message],
        tools: list[dict[str, Any]] | None = None,
        config: AdapterConfig | None = None,
    ) -> AdapterTurnResult:
        if not self._responses:
            raise RuntimeError("CLIMockAdapter exhausted responses")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _text(body: Any) -> AdapterTurnResult:
    text = body if isinstance(body, str) else json.dumps(body)
    return AdapterTurnResult(content=[TextBlock(text=text)], stop_reason="end_turn")


TIMELINE = {"timeline": [{"timestampSeconds": 0.0, "description": "Login screen"}]}
EVALUATIONS = {
    "evaluations": [
        {"assertionId": "a1", "verdict": "pass", "confidence": 0.9, "explanation": "Visible"},
    ]
}


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
    for name in ("UXASSERT_FPS", "UXASSERT_PERSONA", "UXASSERT_STRATEGY", "UXASSERT_MODEL"):
        monkeypatch.delenv(name, raising=False)

    (tmp_path / "demo.mp4").write_bytes(b"video")
    (tmp_path / "assertions.json").write_text(
        json.dumps([
            {"id": "a1", "text": "Login button is visible", "testStepId": "login"},
            {"id": "a2", "text": "Error toast appears", "testStepId": "login"},
        ]),
        encoding="utf-8",
    )
    return tmp_path


def _extracted(tmp_path: Path, count: int = 2) -> ExtractedVideo:
    frames = []
    for i in range(count):
        path = tmp_path / f"frame_{i + 1:04d}.png"
        path.write_bytes(b"png")
        frames.append(Frame(path=path, timestamp_seconds=float(i), frame_index=i))
    return ExtractedVideo(duration_seconds=float(count), frames=frames)


def _invoke(*extra: str):
    return runner.invoke(
        app, ["run", "--video", "demo.mp4", "--assertions", "assertions.json", *extra]
    )


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_two_pass_writes_report(workspace):
    adapter = CLIMockAdapter([_text(TIMELINE), _text(EVALUATIONS)])
    with patch("uxassert.cli.run_cmd.get_adapter", return_value=adapter), patch(
        "uxassert.cli.run_cmd.extract_frames", return_value=_extracted(workspace)
    ):
        result = _invoke("--output", "out/result.json")

    assert result.exit_code == 0, result.output
    report = json.loads((workspace / "out" / "result.json").read_text(encoding="utf-8"))
    assert report["run"]["strategy"] == "two-pass"
    assert report["videoMetadata"]["frameSampling"]["frameCount"] == 2
    assert report["timeline"][0]["description"] == "Login screen"
    steps = report["testSteps"]
    assert [s["id"] for s in steps] == ["login"]
    verdicts = {a["id"]: a["verdict"] for a in steps[0]["assertions"]}
    assert verdicts == {"a1": "pass", "a2": "uncertain"}


def test_agentic_strategy(workspace):
    adapter = CLIMockAdapter([
        AdapterTurnResult(
            content=[ToolUseBlock(id="t1", name="describe_timeline", input={})],
            stop_reason="tool_use",
        ),
        _text(TIMELINE),
        AdapterTurnResult(
            content=[
                ToolUseBlock(id="t2", name="evaluate_assertions", input=TIMELINE),
            ],
            stop_reason="tool_use",
        ),
        _text(EVALUATIONS),
        _text("Done."),
    ])
    with patch("uxassert.cli.run_cmd.get_adapter", return_value=adapter), patch(
        "uxassert.cli.run_cmd.extract_frames", return_value=_extracted(workspace)
    ):
        result = _invoke("--strategy", "agentic", "--output", "result.json")

    assert result.exit_code == 0, result.output
    report = json.loads((workspace / "result.json").read_text(encoding="utf-8"))
    assert report["run"]["strategy"] == "agentic"
    assert report["testSteps"][0]["assertions"][0]["verdict"] == "pass"


def test_csv_log_appended(workspace):
    adapter = CLIMockAdapter([_text(EVALUATIONS)])
    with patch("uxassert.cli.run_cmd.get_adapter", return_value=adapter), patch(
        "uxassert.cli.run_cmd.extract_frames", return_value=_extracted(workspace)
    ):
        result = _invoke("--strategy", "batch", "--output", "r.json", "--csv", "log.csv")

    assert result.exit_code == 0, result.output
    with (workspace / "log.csv").open(encoding="utf-8", newline="") as fh:
        rows = list(csv.DictReader(fh))
    assert [r["text"] for r in rows] == ["Login button is visible", "Error toast appears"]
    assert rows[0]["strategy"] == "batch"
    assert json.loads(rows[0]["resultJson"])["run"]["strategy"] == "batch"


def test_missing_api_key(workspace, monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY")
    with patch("uxassert.cli.run_cmd.load_dotenv"):
        result = _invoke()
    assert result.exit_code == 1


def test_transport_error_exits_3(workspace):
    adapter = CLIMockAdapter([TransportError("overloaded")])
    with patch("uxassert.cli.run_cmd.get_adapter", return_value=adapter), patch(
        "uxassert.cli.run_cmd.extract_frames", return_value=_extracted(workspace)
    ):
        result = _invoke("--output", "result.json")
    assert result.exit_code == 3
    assert not (workspace / "result.json").exists()


def test_frame_extraction_error_exits_1(workspace):
    with patch("uxassert.cli.run_cmd.get_adapter", return_value=CLIMockAdapter([])), patch(
        "uxassert.cli.run_cmd.extract_frames", side_effect=FrameExtractionError("ffmpeg not found on PATH")
    ):
        result = _invoke()
    assert result.exit_code == 1


def test_no_frames_exits_1(workspace):
    with patch("uxassert.cli.run_cmd.get_adapter", return_value=CLIMockAdapter([])), patch(
        "uxassert.cli.run_cmd.extract_frames", return_value=ExtractedVideo(duration_seconds=0.0)
    ):
        result = _invoke()
    assert result.exit_code == 1


def test_empty_assertions_exits_1(workspace):
    (workspace / "assertions.json").write_text("[]", encoding="utf-8")
    with patch("uxassert.cli.run_cmd.get_adapter", return_value=CLIMockAdapter([])):
        result = _invoke()
    assert result.exit_code == 1


def test_invalid_strategy_exits_1(workspace):
    result = _invoke("--strategy", "parallel")
    assert result.exit_code == 1


def test_missing_config_file_exits_1(workspace):
    result = _invoke("--config", "nope.yaml")
    assert result.exit_code == 1


def test_frames_dir_removed_unless_kept(workspace):
    def fake_extract(video_path, fps, out_dir):
        out_dir.mkdir(parents=True)
        return _extracted(out_dir, 1)

    adapter = CLIMockAdapter([_text(EVALUATIONS)])
    with patch("uxassert.cli.run_cmd.get_adapter", return_value=adapter), patch(
        "uxassert.cli.run_cmd.extract_frames", side_effect=fake_extract
    ):
        result = _invoke("--strategy", "batch", "--output", "r.json")

    assert result.exit_code == 0, result.output
    assert list((workspace / "tmp").iterdir()) == []
