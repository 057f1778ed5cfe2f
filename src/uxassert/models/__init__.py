"""uxassert data models - re-exports all public model classes."""

from uxassert.models.assertion import Assertion
from uxassert.models.config import ValidatorConfig, load_config
from uxassert.models.evaluation import (
    Evaluation,
    Evidence,
    PipelineResult,
    TimelineEntry,
    Verdict,
)
from uxassert.models.frame import Frame
from uxassert.models.report import (
    AssertionReport,
    FrameSampling,
    RunInfo,
    StepReport,
    ValidationReport,
    VideoMetadata,
)

__all__ = [
    "Assertion",
    "AssertionReport",
    "Evaluation",
    "Evidence",
    "Frame",
    "FrameSampling",
    "PipelineResult",
    "RunInfo",
    "StepReport",
    "TimelineEntry",
    "ValidationReport",
    "ValidatorConfig",
    "Verdict",
    "VideoMetadata",
    "load_config",
]
