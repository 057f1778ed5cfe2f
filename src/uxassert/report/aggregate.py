"""Result aggregation: map evaluations onto assertions grouped by test step."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from uxassert.models.assertion import Assertion
from uxassert.models.config import ValidatorConfig
from uxassert.models.evaluation import Evaluation, PipelineResult, Verdict
from uxassert.models.report import (
    AssertionReport,
    FrameSampling,
    RunInfo,
    StepReport,
    ValidationReport,
    VideoMetadata,
)

DEFAULT_STEP_ID = "default"


@dataclass
class StepGroup:
    """Assertions sharing one test step, in input order."""

    id: str
    description: str
    assertions: list[Assertion] = field(default_factory=list)


def group_by_test_step(assertions: list[Assertion]) -> list[StepGroup]:
    """Group assertions by test step id, keeping first-seen step order.

    The step description is taken from the first assertion of the step.
    """
    groups: dict[str, StepGroup] = {}
    for assertion in assertions:
        step_id = assertion.test_step_id or DEFAULT_STEP_ID
        if step_id not in groups:
            groups[step_id] = StepGroup(
                id=step_id, description=assertion.test_step_description or ""
            )
        groups[step_id].assertions.append(assertion)
    return list(groups.values())


def assertion_report(assertion: Assertion, evaluation: Evaluation | None) -> AssertionReport:
    if evaluation is None:
        return AssertionReport(id=assertion.id, text=assertion.text)
    return AssertionReport(
        id=assertion.id,
        text=assertion.text,
        verdict=evaluation.verdict,
        confidence=evaluation.confidence,
        evidence=list(evaluation.evidence),
        explanation=evaluation.explanation,
    )


def build_report(
    *,
    video_path: str,
    duration_seconds: float,
    frame_count: int,
    settings: ValidatorConfig,
    assertions: list[Assertion],
    result: PipelineResult,
    elapsed_seconds: float | None = None,
) -> ValidationReport:
    """Assemble the validation report.

    Every input assertion appears exactly once under its step;
    assertions the pipeline did not evaluate are reported as uncertain
    with zero confidence.
    """
    steps = [
        StepReport(
            id=group.id,
            description=group.description,
            assertions=[
                assertion_report(a, result.evaluations.get(a.id)) for a in group.assertions
            ],
        )
        for group in group_by_test_step(assertions)
    ]

    return ValidationReport(
        video_metadata=VideoMetadata(
            path=video_path,
            duration_seconds=duration_seconds,
            frame_sampling=FrameSampling(
                mode="uniform", fps=settings.fps, frame_count=frame_count
            ),
        ),
        run=RunInfo(
            strategy=settings.strategy,
            persona=settings.persona,
            model=settings.model,
            elapsed_seconds=elapsed_seconds,
        ),
        timeline=list(result.timeline),
        test_steps=steps,
    )


def summarize_verdicts(report: ValidationReport) -> dict[str, int]:
    """Count assertions per verdict value (pass, fail, uncertain)."""
    counts: Counter[str] = Counter({v.value: 0 for v in Verdict})
    for step in report.test_steps:
        for assertion in step.assertions:
            counts[assertion.verdict.value] += 1
    return dict(counts)
