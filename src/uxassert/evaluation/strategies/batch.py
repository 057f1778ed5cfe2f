"""Batch strategy: all frames and all assertions in one call."""

from __future__ import annotations

from collections.abc import Sequence

from uxassert.evaluation.content import build_batch_content
from uxassert.evaluation.extraction import MalformedOutputError
from uxassert.evaluation.normalizer import coerce_evaluations, index_evaluations
from uxassert.evaluation.primitives import ask_json
from uxassert.evaluation.prompts import build_batch_system_prompt
from uxassert.evaluation.strategies.base import BaseStrategy
from uxassert.models.assertion import Assertion
from uxassert.models.evaluation import Evaluation, TimelineEntry
from uxassert.models.frame import Frame


class BatchStrategy(BaseStrategy):
    """Minimal call count; produces no timeline."""

    name = "batch"

    async def produce_timeline(
        self, frames: Sequence[Frame], warnings: list[str]
    ) -> list[TimelineEntry]:
        return []

    async def produce_evaluations(
        self,
        frames: Sequence[Frame],
        timeline: list[TimelineEntry],
        assertions: list[Assertion],
        warnings: list[str],
    ) -> dict[str, Evaluation]:
        content = build_batch_content(
            frames, assertions, self.settings.max_frames_per_request
        )
        try:
            parsed = await ask_json(
                self.adapter,
                self.settings,
                build_batch_system_prompt(self.settings.persona),
                content,
            )
        except MalformedOutputError as exc:
            warnings.append(f"Batch evaluation returned malformed output: {exc}")
            return {}
        return index_evaluations(
            coerce_evaluations(parsed.get("evaluations")),
            (a.id for a in assertions),
        )
