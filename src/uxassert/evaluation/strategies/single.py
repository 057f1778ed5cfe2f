"""Single strategy: one call per assertion, each with the full frame set."""

from __future__ import annotations

from collections.abc import Sequence

from uxassert.evaluation.content import build_single_content
from uxassert.evaluation.extraction import MalformedOutputError
from uxassert.evaluation.normalizer import coerce_evaluation, fallback_evaluation
from uxassert.evaluation.primitives import ask_json
from uxassert.evaluation.prompts import build_single_system_prompt
from uxassert.evaluation.strategies.base import BaseStrategy
from uxassert.models.assertion import Assertion
from uxassert.models.evaluation import Evaluation, TimelineEntry
from uxassert.models.frame import Frame


class SingleStrategy(BaseStrategy):
    """Evaluates assertions one at a time, in input order.

    Every input assertion ends up in the result: when a call yields no
    usable evaluation the assertion gets an uncertain fallback. The
    evaluation is always stored under the requested assertion's id.
    """

    name = "single"

    async def produce_timeline(
        self, frames: Sequence[Frame], warnings: list[str]
    ) -> list[TimelineEntry]:
        return []

    async def _evaluate_one(
        self, frames: Sequence[Frame], assertion: Assertion, warnings: list[str]
    ) -> Evaluation:
        content = build_single_content(
            frames, assertion, self.settings.max_frames_per_request
        )
        try:
            parsed = await ask_json(
                self.adapter,
                self.settings,
                build_single_system_prompt(self.settings.persona),
                content,
            )
        except MalformedOutputError as exc:
            warnings.append(f"Assertion {assertion.id} returned malformed output: {exc}")
            return fallback_evaluation(assertion.id)

        raw_list = parsed.get("evaluations")
        first = raw_list[0] if isinstance(raw_list, list) and raw_list else None
        evaluation = coerce_evaluation(first, assertion_id=assertion.id)
        if evaluation is None:
            warnings.append(f"Assertion {assertion.id} returned no evaluation")
            return fallback_evaluation(assertion.id)
        return evaluation

    async def produce_evaluations(
        self,
        frames: Sequence[Frame],
        timeline: list[TimelineEntry],
        assertions: list[Assertion],
        warnings: list[str],
    ) -> dict[str, Evaluation]:
        evaluations: dict[str, Evaluation] = {}
        total = len(assertions)
        for done, assertion in enumerate(assertions, 1):
            evaluations[assertion.id] = await self._evaluate_one(frames, assertion, warnings)
            if self.progress_callback is not None:
                self.progress_callback(done, total)
        return evaluations
