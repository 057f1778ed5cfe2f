"""Evaluation result models shared by every strategy and the agent loop.

TimelineEntry, Evidence and Evaluation travel as camelCase JSON
(timestampSeconds, frameIndex, assertionId) both in model output and in
the final report, so they use a camelCase alias generator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Verdict(str, Enum):
    """Verdict assigned to an assertion."""

    pass_ = "pass"
    fail = "fail"
    uncertain = "uncertain"


class TimelineEntry(BaseModel):
    """One moment in the model's narrative of the recording.

    Entries are best-effort: ordering by timestamp is not guaranteed.
    """

    model_config = _CAMEL

    timestamp_seconds: float
    description: str


class Evidence(BaseModel):
    """A cited moment supporting a verdict."""

    model_config = _CAMEL

    timestamp_seconds: float
    frame_index: int | None = None
    description: str


class Evaluation(BaseModel):
    """Verdict for a single assertion, keyed by assertion_id."""

    model_config = _CAMEL

    assertion_id: str
    verdict: Verdict
    confidence: float = Field(ge=0.0, le=1.0)
    explanation: str = ""
    evidence: list[Evidence] = Field(default_factory=list)


@dataclass
class PipelineResult:
    """The single return contract of every strategy and the agent loop.

    evaluations holds at most one Evaluation per assertion id. warnings
    collects notes about degraded model calls; it never affects the
    timeline or evaluations.
    """

    timeline: list[TimelineEntry] = field(default_factory=list)
    evaluations: dict[str, Evaluation] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
