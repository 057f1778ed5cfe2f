"""Tests for AgentOrchestrator with a scripted adapter.

The adapter serves two kinds of calls: orchestrator turns (sent with
tool definitions) and the tool backends' single-shot calls (sent
without). Each kind pops from its own reply list.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import pytest

from uxassert.adapters.base import (
    AdapterConfig,
    AdapterTurnResult,
    BaseAdapter,
    Message,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
    TransportError,
)
from uxassert.agent.orchestrator import AgentOrchestrator
from uxassert.models.assertion import Assertion
from uxassert.models.config import ValidatorConfig
from uxassert.models.evaluation import Verdict
from uxassert.models.frame import Frame


class AgentMockAdapter(BaseAdapter):
    def __init__(
        self,
        agent_turns: list[AdapterTurnResult | Exception],
        backend_replies: list[str] | None = None,
    ) -> None:
        self._agent_turns = list(agent_turns)
        self._backend_replies = list(backend_replies or [])
        self.agent_calls: list[list[Message]] = []
        self.agent_configs: list[AdapterConfig | None] = []
        self.backend_calls = 0

    async def send_turn(
        self,
        messages: list[Message],
        tools: list[dict[str, Any]] | None = None,
        config: AdapterConfig | None = None,
    ) -> AdapterTurnResult:
        if tools is None:
            self.backend_calls += 1
            if not self._backend_replies:
                raise RuntimeError("AgentMockAdapter exhausted backend replies")
            return AdapterTurnResult(
                content=[TextBlock(text=self._backend_replies.pop(0))], stop_reason="end_turn"
            )

        self.agent_calls.append(copy.deepcopy(messages))
        self.agent_configs.append(config)
        if not self._agent_turns:
            raise RuntimeError("AgentMockAdapter exhausted agent turns")
        turn = self._agent_turns.pop(0)
        if isinstance(turn, Exception):
            raise turn
        return turn


def _tool_turn(*calls: tuple[str, str, dict[str, Any]], text: str | None = None) -> AdapterTurnResult:
    content: list[Any] = [TextBlock(text=text)] if text else []
    content.extend(ToolUseBlock(id=cid, name=name, input=inp) for cid, name, inp in calls)
    return AdapterTurnResult(content=content, stop_reason="tool_use")


def _final_turn(text: str = "All assertions evaluated.") -> AdapterTurnResult:
    return AdapterTurnResult(content=[TextBlock(text=text)], stop_reason="end_turn")


TIMELINE = [{"timestampSeconds": 0.0, "description": "Login screen"}]
TIMELINE_REPLY = json.dumps({"timeline": TIMELINE})
EVAL_REPLY = json.dumps({
    "evaluations": [{"assertionId": "a1", "verdict": "pass", "confidence": 0.9}]
})

ASSERTIONS = [Assertion(id="a1", text="Login button is visible")]


@pytest.fixture
def frames(tmp_path: Path) -> list[Frame]:
    path = tmp_path / "frame_0001.png"
    path.write_bytes(b"png")
    return [Frame(path=path, timestamp_seconds=0.0, frame_index=0)]


@pytest.mark.asyncio
async def test_no_tool_use_on_first_turn(frames):
    adapter = AgentMockAdapter([_final_turn("Nothing to do.")])
    orchestrator = AgentOrchestrator(adapter, ValidatorConfig(strategy="agentic"))

    result = await orchestrator.run(frames, ASSERTIONS)

    assert result.timeline == []
    assert result.evaluations == {}
    assert result.warnings == []
    assert orchestrator.turn_count == 1


@pytest.mark.asyncio
async def test_describe_then_evaluate(frames):
    adapter = AgentMockAdapter(
        [
            _tool_turn(("toolu_1", "describe_timeline", {}), text="Starting."),
            _tool_turn(("toolu_2", "evaluate_assertions", {"timeline": TIMELINE})),
            _final_turn(),
        ],
        backend_replies=[TIMELINE_REPLY, EVAL_REPLY],
    )
    tools_seen: list[str] = []
    orchestrator = AgentOrchestrator(
        adapter, ValidatorConfig(strategy="agentic"), tool_callback=tools_seen.append
    )

    result = await orchestrator.run(frames, ASSERTIONS)

    assert [e.description for e in result.timeline] == ["Login screen"]
    assert result.evaluations["a1"].verdict is Verdict.pass_
    assert tools_seen == ["describe_timeline", "evaluate_assertions"]
    assert orchestrator.turn_count == 3
    assert adapter.backend_calls == 2
    assert adapter.agent_configs[0].extras == {"tool_choice": {"type": "auto"}}

    # Second request carries the assistant turn (text included) and the tool result.
    second = adapter.agent_calls[1]
    assert [m.role for m in second] == ["system", "user", "assistant", "user"]
    assert isinstance(second[2].content[0], TextBlock)
    assert second[3].content[0].tool_use_id == "toolu_1"


@pytest.mark.asyncio
async def test_same_turn_tool_results_batched_in_one_message(frames):
    adapter = AgentMockAdapter(
        [
            _tool_turn(
                ("toolu_a", "describe_timeline", {}),
                ("toolu_b", "evaluate_assertions", {"timeline": TIMELINE}),
            ),
            _final_turn(),
        ],
        backend_replies=[TIMELINE_REPLY, EVAL_REPLY],
    )
    result = await AgentOrchestrator(adapter, ValidatorConfig()).run(frames, ASSERTIONS)

    relay = adapter.agent_calls[1][-1]
    assert relay.role == "user"
    assert all(isinstance(b, ToolResultBlock) for b in relay.content)
    assert [b.tool_use_id for b in relay.content] == ["toolu_a", "toolu_b"]
    assert set(result.evaluations) == {"a1"}


@pytest.mark.asyncio
async def test_unknown_tool_relayed_as_error(frames):
    adapter = AgentMockAdapter(
        [_tool_turn(("toolu_x", "crop_frame", {"index": 2})), _final_turn()]
    )
    result = await AgentOrchestrator(adapter, ValidatorConfig()).run(frames, ASSERTIONS)

    relay = adapter.agent_calls[1][-1].content[0]
    assert relay.is_error is True
    assert json.loads(relay.content) == {"error": "Unknown tool: crop_frame"}
    assert result.evaluations == {}
    assert adapter.backend_calls == 0


@pytest.mark.asyncio
async def test_failed_tool_does_not_clear_harvest(frames):
    adapter = AgentMockAdapter(
        [
            _tool_turn(("t1", "describe_timeline", {})),
            _tool_turn(("t2", "describe_timeline", {})),
            _final_turn(),
        ],
        backend_replies=[TIMELINE_REPLY, "no json here"],
    )
    result = await AgentOrchestrator(adapter, ValidatorConfig()).run(frames, ASSERTIONS)
    assert [e.description for e in result.timeline] == ["Login screen"]
    assert adapter.agent_calls[2][-1].content[0].is_error is True


@pytest.mark.asyncio
async def test_turn_budget_exhausted_returns_partial(frames):
    turns = [_tool_turn((f"t{i}", "describe_timeline", {})) for i in range(10)]
    adapter = AgentMockAdapter(turns, backend_replies=[TIMELINE_REPLY] * 10)
    orchestrator = AgentOrchestrator(adapter, ValidatorConfig())

    result = await orchestrator.run(frames, ASSERTIONS)

    assert orchestrator.turn_count == 10
    assert len(adapter.agent_calls) == 10
    assert len(result.timeline) == 1
    assert result.evaluations == {}
    assert len(result.warnings) == 1
    assert "10 turns" in result.warnings[0]


@pytest.mark.asyncio
async def test_custom_turn_budget(frames):
    turns = [_tool_turn((f"t{i}", "describe_timeline", {})) for i in range(2)]
    adapter = AgentMockAdapter(turns, backend_replies=[TIMELINE_REPLY] * 2)
    orchestrator = AgentOrchestrator(adapter, ValidatorConfig(max_agent_turns=2))
    result = await orchestrator.run(frames, ASSERTIONS)
    assert orchestrator.turn_count == 2
    assert result.warnings


@pytest.mark.asyncio
async def test_tool_use_stop_without_blocks_finishes(frames):
    adapter = AgentMockAdapter(
        [AdapterTurnResult(content=[TextBlock(text="hm")], stop_reason="tool_use")]
    )
    orchestrator = AgentOrchestrator(adapter, ValidatorConfig())
    result = await orchestrator.run(frames, ASSERTIONS)
    assert orchestrator.turn_count == 1
    assert result.warnings == []


@pytest.mark.asyncio
async def test_transport_error_propagates(frames):
    adapter = AgentMockAdapter([TransportError("rate limited")])
    with pytest.raises(TransportError):
        await AgentOrchestrator(adapter, ValidatorConfig()).run(frames, ASSERTIONS)
