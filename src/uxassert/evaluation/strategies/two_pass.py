"""Two-pass strategy: describe the frames, then evaluate the description."""

from __future__ import annotations

from collections.abc import Sequence

from uxassert.evaluation.extraction import MalformedOutputError
from uxassert.evaluation.normalizer import index_evaluations
from uxassert.evaluation.primitives import describe_timeline, evaluate_timeline
from uxassert.evaluation.strategies.base import BaseStrategy
from uxassert.models.assertion import Assertion
from uxassert.models.evaluation import Evaluation, TimelineEntry
from uxassert.models.frame import Frame


class TwoPassStrategy(BaseStrategy):
    """One image call for the timeline, one text-only call for all assertions.

    Image tokens are paid once; the second call reasons over the
    timeline text only.
    """

    name = "two-pass"

    async def produce_timeline(
        self, frames: Sequence[Frame], warnings: list[str]
    ) -> list[TimelineEntry]:
        try:
            return await describe_timeline(self.adapter, self.settings, frames)
        except MalformedOutputError as exc:
            warnings.append(f"Timeline pass returned malformed output: {exc}")
            return []

    async def produce_evaluations(
        self,
        frames: Sequence[Frame],
        timeline: list[TimelineEntry],
        assertions: list[Assertion],
        warnings: list[str],
    ) -> dict[str, Evaluation]:
        try:
            evaluations = await evaluate_timeline(
                self.adapter, self.settings, timeline, assertions
            )
        except MalformedOutputError as exc:
            warnings.append(f"Evaluation pass returned malformed output: {exc}")
            return {}
        return index_evaluations(evaluations, (a.id for a in assertions))
