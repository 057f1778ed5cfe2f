"""Tests for uxassert.report.aggregate."""

from __future__ import annotations

from uxassert.models.assertion import Assertion
from uxassert.models.config import ValidatorConfig
from uxassert.models.evaluation import (
    Evaluation,
    Evidence,
    PipelineResult,
    TimelineEntry,
    Verdict,
)
from uxassert.report.aggregate import build_report, group_by_test_step, summarize_verdicts

ASSERTIONS = [
    Assertion(id="a1", text="Login shows", test_step_id="login", test_step_description="Log in"),
    Assertion(id="a2", text="Cart badge", test_step_id="cart", test_step_description="Add item"),
    Assertion(id="a3", text="Error toast", test_step_id="login", test_step_description="ignored"),
    Assertion(id="a4", text="No step"),
]


def test_group_by_test_step_keeps_first_seen_order():
    groups = group_by_test_step(ASSERTIONS)
    assert [g.id for g in groups] == ["login", "cart", "default"]
    assert groups[0].description == "Log in"
    assert [a.id for a in groups[0].assertions] == ["a1", "a3"]


def _report(result: PipelineResult):
    return build_report(
        video_path="/videos/run.mp4",
        duration_seconds=12.0,
        frame_count=12,
        settings=ValidatorConfig(strategy="batch", persona="none"),
        assertions=ASSERTIONS,
        result=result,
        elapsed_seconds=3.5,
    )


def test_build_report_fills_missing_evaluations():
    result = PipelineResult(
        timeline=[TimelineEntry(timestamp_seconds=1.0, description="Login screen")],
        evaluations={
            "a1": Evaluation(
                assertion_id="a1",
                verdict=Verdict.pass_,
                confidence=0.95,
                explanation="Visible",
                evidence=[Evidence(timestamp_seconds=1.0, frame_index=1, description="Button")],
            ),
            "a2": Evaluation(assertion_id="a2", verdict=Verdict.fail, confidence=0.6),
        },
    )
    report = _report(result)

    reported = {a.id: a for step in report.test_steps for a in step.assertions}
    assert set(reported) == {"a1", "a2", "a3", "a4"}
    assert reported["a1"].verdict is Verdict.pass_
    assert reported["a1"].evidence[0].frame_index == 1
    assert reported["a3"].verdict is Verdict.uncertain
    assert reported["a3"].confidence == 0.0
    assert report.video_metadata.frame_sampling.frame_count == 12
    assert report.run.strategy == "batch"
    assert report.timeline[0].description == "Login screen"


def test_report_dumps_camel_case():
    data = _report(PipelineResult()).model_dump(mode="json", by_alias=True)
    assert set(data) == {"videoMetadata", "run", "timeline", "testSteps"}
    assert data["videoMetadata"]["frameSampling"] == {"mode": "uniform", "fps": 1.0, "frameCount": 12}
    assert data["run"]["elapsedSeconds"] == 3.5
    assert data["testSteps"][0]["assertions"][0]["verdict"] == "uncertain"


def test_summarize_verdicts():
    result = PipelineResult(
        evaluations={"a1": Evaluation(assertion_id="a1", verdict=Verdict.fail, confidence=1.0)}
    )
    assert summarize_verdicts(_report(result)) == {"pass": 0, "fail": 1, "uncertain": 3}
