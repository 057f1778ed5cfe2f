"""Top-level dispatch: the agent loop or exactly one fixed strategy."""

from __future__ import annotations

from collections.abc import Sequence

from uxassert.adapters.base import BaseAdapter
from uxassert.agent.orchestrator import AgentOrchestrator, ToolCallback
from uxassert.evaluation.strategies import ProgressCallback, get_strategy
from uxassert.models.assertion import Assertion
from uxassert.models.config import ValidatorConfig
from uxassert.models.evaluation import PipelineResult
from uxassert.models.frame import Frame

AGENTIC = "agentic"


async def run_pipeline(
    adapter: BaseAdapter,
    settings: ValidatorConfig,
    frames: Sequence[Frame],
    assertions: list[Assertion],
    progress_callback: ProgressCallback | None = None,
    tool_callback: ToolCallback | None = None,
) -> PipelineResult:
    """Evaluate assertions with the path named by settings.strategy.

    "agentic" runs the tool-use loop; any other name runs that fixed
    strategy. The two paths never compose.
    """
    if settings.strategy == AGENTIC:
        orchestrator = AgentOrchestrator(adapter, settings, tool_callback=tool_callback)
        return await orchestrator.run(frames, assertions)

    strategy = get_strategy(
        settings.strategy, adapter, settings, progress_callback=progress_callback
    )
    return await strategy.run(frames, assertions)
