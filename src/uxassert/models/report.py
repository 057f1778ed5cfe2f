"""Report models for the validation output file.

These models encode the JSON contract written by `uxassert run`:
video metadata, run settings, the timeline, and per-step assertion
verdicts.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from uxassert.models.evaluation import Evidence, TimelineEntry, Verdict

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrameSampling(BaseModel):
    """How frames were sampled from the video (fixed-rate, uniform)."""

    model_config = _CAMEL

    mode: str = "uniform"
    fps: float
    frame_count: int


class VideoMetadata(BaseModel):
    """The analyzed recording: path, probed duration and sampling."""

    model_config = _CAMEL

    path: str
    duration_seconds: float
    frame_sampling: FrameSampling


class RunInfo(BaseModel):
    """Settings the run was performed with."""

    model_config = _CAMEL

    strategy: str
    persona: str
    model: str
    elapsed_seconds: float | None = None


class AssertionReport(BaseModel):
    """One assertion with its final verdict."""

    model_config = _CAMEL

    id: str
    text: str
    verdict: Verdict = Verdict.uncertain
    confidence: float = 0.0
    evidence: list[Evidence] = Field(default_factory=list)
    explanation: str = ""


class StepReport(BaseModel):
    """Assertions grouped under one test step."""

    model_config = _CAMEL

    id: str
    description: str = ""
    assertions: list[AssertionReport] = Field(default_factory=list)


class ValidationReport(BaseModel):
    """Complete output of a validation run."""

    model_config = _CAMEL

    video_metadata: VideoMetadata
    run: RunInfo
    timeline: list[TimelineEntry] = Field(default_factory=list)
    test_steps: list[StepReport] = Field(default_factory=list)
