"""Base class for the fixed evaluation strategies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence

from uxassert.adapters.base import BaseAdapter
from uxassert.models.assertion import Assertion
from uxassert.models.config import ValidatorConfig
from uxassert.models.evaluation import Evaluation, PipelineResult, TimelineEntry
from uxassert.models.frame import Frame

ProgressCallback = Callable[[int, int], None]


class BaseStrategy(ABC):
    """A loop-free pipeline of model calls producing a PipelineResult.

    Each strategy implements two capabilities: produce_timeline and
    produce_evaluations. run() calls them in that order, feeding the
    timeline into the evaluation step. Calls are issued sequentially.
    Malformed model output is absorbed and reported in warnings;
    transport errors propagate.
    """

    name: str = ""

    def __init__(
        self,
        adapter: BaseAdapter,
        settings: ValidatorConfig,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        self.adapter = adapter
        self.settings = settings
        self.progress_callback = progress_callback

    @abstractmethod
    async def produce_timeline(
        self, frames: Sequence[Frame], warnings: list[str]
    ) -> list[TimelineEntry]:
        """Return the timeline for the frames (may be empty)."""

    @abstractmethod
    async def produce_evaluations(
        self,
        frames: Sequence[Frame],
        timeline: list[TimelineEntry],
        assertions: list[Assertion],
        warnings: list[str],
    ) -> dict[str, Evaluation]:
        """Return evaluations keyed by assertion id."""

    async def run(
        self, frames: Sequence[Frame], assertions: list[Assertion]
    ) -> PipelineResult:
        warnings: list[str] = []
        timeline = await self.produce_timeline(frames, warnings)
        evaluations = await self.produce_evaluations(frames, timeline, assertions, warnings)
        return PipelineResult(timeline=timeline, evaluations=evaluations, warnings=warnings)
