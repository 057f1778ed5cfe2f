"""Accumulator for results harvested from successful tool calls."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from uxassert.agent.tools import DESCRIBE_TIMELINE, EVALUATE_ASSERTIONS, ToolResultEnvelope
from uxassert.evaluation.normalizer import (
    coerce_evaluations,
    coerce_timeline,
    index_evaluations,
)
from uxassert.models.evaluation import Evaluation, PipelineResult, TimelineEntry


@dataclass
class HarvestAccumulator:
    """Running {timeline, evaluations} built from tool results.

    A successful describe_timeline replaces the timeline (only the
    latest is kept). A successful evaluate_assertions overwrites
    evaluations by id; ids outside known_ids are ignored. Error
    envelopes are ignored.
    """

    known_ids: frozenset[str]
    timeline: list[TimelineEntry] = field(default_factory=list)
    evaluations: dict[str, Evaluation] = field(default_factory=dict)

    def absorb(self, tool_name: str, envelope: ToolResultEnvelope) -> None:
        """Fold one tool result into the accumulator.

        Args:
            tool_name: The tool that produced the envelope.
            envelope: Its result; error envelopes and content that is not
                a JSON object leave the state unchanged.
        """
        if envelope.is_error:
            return
        try:
            payload = json.loads(envelope.content)
        except (json.JSONDecodeError, ValueError):
            return
        if not isinstance(payload, dict):
            return

        if tool_name == DESCRIBE_TIMELINE:
            raw_timeline = payload.get("timeline")
            if isinstance(raw_timeline, list):
                self.timeline = coerce_timeline(raw_timeline)
        elif tool_name == EVALUATE_ASSERTIONS:
            index_evaluations(
                coerce_evaluations(payload.get("evaluations")),
                self.known_ids,
                into=self.evaluations,
            )

    def to_result(self, warnings: list[str] | None = None) -> PipelineResult:
        """Snapshot the harvested state as a PipelineResult."""
        return PipelineResult(
            timeline=list(self.timeline),
            evaluations=dict(self.evaluations),
            warnings=list(warnings or []),
        )
