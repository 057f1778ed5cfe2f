"""AgentOrchestrator: bounded tool-use loop over the model gateway.

The model decides when to call describe_timeline and
evaluate_assertions. The orchestrator executes whatever it asks for,
relays the results, and harvests {timeline, evaluations} from the
successful tool results until the model finishes or the turn budget
runs out.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from uxassert.adapters.base import BaseAdapter, ContentBlock, Message, ToolResultBlock
from uxassert.agent.harvest import HarvestAccumulator
from uxassert.agent.prompts import (
    build_orchestrator_system_prompt,
    build_orchestrator_user_prompt,
)
from uxassert.agent.tools import TOOL_DEFINITIONS, ToolContext, execute_tool
from uxassert.evaluation.primitives import build_adapter_config
from uxassert.models.assertion import Assertion
from uxassert.models.config import ValidatorConfig
from uxassert.models.evaluation import PipelineResult
from uxassert.models.frame import Frame

ToolCallback = Callable[[str], None]


class AgentOrchestrator:
    """Drives the tool-use conversation for one validation run.

    Each turn sends the full history, appends the assistant response
    (all blocks, text included), executes every requested tool in
    response order, and sends all tool results back as one user turn.
    Tool failures are relayed to the model as error results; the loop
    itself never retries. Exhausting the turn budget is not an error.
    """

    def __init__(
        self,
        adapter: BaseAdapter,
        settings: ValidatorConfig,
        tool_callback: ToolCallback | None = None,
    ) -> None:
        self.adapter = adapter
        self.settings = settings
        self.tool_callback = tool_callback
        self.turn_count = 0

    async def run(
        self, frames: Sequence[Frame], assertions: list[Assertion]
    ) -> PipelineResult:
        """Run the loop and return whatever was harvested.

        Raises:
            TransportError: Propagated from the adapter.
        """
        max_turns = self.settings.max_agent_turns
        messages: list[Message] = [
            Message(role="system", content=build_orchestrator_system_prompt(self.settings.persona)),
            Message(role="user", content=build_orchestrator_user_prompt(assertions)),
        ]
        config = build_adapter_config(self.settings, tool_choice={"type": "auto"})
        context = ToolContext(
            adapter=self.adapter,
            settings=self.settings,
            frames=frames,
            assertions=assertions,
        )
        accumulator = HarvestAccumulator(known_ids=frozenset(a.id for a in assertions))

        self.turn_count = 0
        finished = False

        for _ in range(max_turns):
            self.turn_count += 1

            result = await self.adapter.send_turn(messages, TOOL_DEFINITIONS, config)
            messages.append(Message(role="assistant", content=list(result.content)))

            tool_uses = result.tool_uses
            if result.stop_reason != "tool_use" or not tool_uses:
                finished = True
                break

            tool_results: list[ContentBlock] = []
            for block in tool_uses:
                if self.tool_callback is not None:
                    self.tool_callback(block.name)
                envelope = await execute_tool(block.name, block.input, context)
                tool_results.append(
                    ToolResultBlock(
                        tool_use_id=block.id,
                        content=envelope.content,
                        is_error=envelope.is_error,
                    )
                )
                accumulator.absorb(block.name, envelope)

            messages.append(Message(role="user", content=tool_results))

        warnings: list[str] = []
        if not finished:
            warnings.append(
                f"Agent did not finish within {max_turns} turns; "
                "returning the results harvested so far"
            )
        return accumulator.to_result(warnings)
