"""Agent tools: definitions exposed to the model and their executor.

The executor never raises: every path, including unknown tool names
and failures inside the backend call, returns a ToolResultEnvelope.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from uxassert.adapters.base import BaseAdapter
from uxassert.evaluation.normalizer import coerce_timeline
from uxassert.evaluation.primitives import describe_timeline, evaluate_timeline
from uxassert.models.assertion import Assertion
from uxassert.models.config import ValidatorConfig
from uxassert.models.frame import Frame

DESCRIBE_TIMELINE = "describe_timeline"
EVALUATE_ASSERTIONS = "evaluate_assertions"

TOOL_DEFINITIONS: list[dict[str, Any]] = [
    {
        "name": DESCRIBE_TIMELINE,
        "description": (
            "Analyze the extracted video frames and produce a structured timeline of what "
            "happens in the recording. Call this first to get a timeline of key moments "
            "(screens, taps, transitions, feedback) with timestamps. Returns JSON: "
            '{ "timeline": [ { "timestampSeconds": number, "description": string } ] }.'
        ),
        "parameters": {
            "type": "object",
            "properties": {},
            "required": [],
        },
    },
    {
        "name": EVALUATE_ASSERTIONS,
        "description": (
            "Evaluate all UX assertions against a timeline. Call this after "
            "describe_timeline. Pass the timeline you received from describe_timeline as "
            'the "timeline" parameter. Returns JSON: { "evaluations": [ { "assertionId": '
            'string, "verdict": "pass"|"fail"|"uncertain", "confidence": number, '
            '"explanation": string, "evidence": array } ] }.'
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "timeline": {
                    "type": "array",
                    "description": (
                        "The timeline array from describe_timeline (each item: "
                        "{ timestampSeconds: number, description: string })"
                    ),
                    "items": {
                        "type": "object",
                        "properties": {
                            "timestampSeconds": {"type": "number"},
                            "description": {"type": "string"},
                        },
                        "required": ["timestampSeconds", "description"],
                    },
                },
            },
            "required": ["timeline"],
        },
    },
]


class UnknownToolError(Exception):
    """Raised when the model requests a tool that does not exist."""

    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(f"Unknown tool: {tool_name}")


@dataclass
class ToolResultEnvelope:
    """JSON-encoded tool output plus an error flag."""

    content: str
    is_error: bool = False

    @classmethod
    def ok(cls, payload: dict[str, Any]) -> ToolResultEnvelope:
        return cls(content=json.dumps(payload, ensure_ascii=False))

    @classmethod
    def error(cls, message: str) -> ToolResultEnvelope:
        return cls(content=json.dumps({"error": message}, ensure_ascii=False), is_error=True)


@dataclass
class ToolContext:
    """Everything a tool needs besides its input."""

    adapter: BaseAdapter
    settings: ValidatorConfig
    frames: Sequence[Frame]
    assertions: list[Assertion]


async def _dispatch(
    tool_name: str, tool_input: dict[str, Any], context: ToolContext
) -> ToolResultEnvelope:
    if tool_name == DESCRIBE_TIMELINE:
        timeline = await describe_timeline(context.adapter, context.settings, context.frames)
        return ToolResultEnvelope.ok(
            {"timeline": [entry.model_dump(by_alias=True) for entry in timeline]}
        )

    if tool_name == EVALUATE_ASSERTIONS:
        timeline = coerce_timeline(tool_input.get("timeline"))
        evaluations = await evaluate_timeline(
            context.adapter, context.settings, timeline, context.assertions
        )
        return ToolResultEnvelope.ok(
            {"evaluations": [e.model_dump(mode="json", by_alias=True) for e in evaluations]}
        )

    raise UnknownToolError(tool_name)


async def execute_tool(
    tool_name: str,
    tool_input: Any,
    context: ToolContext,
) -> ToolResultEnvelope:
    """Run one tool invocation and wrap its outcome.

    Args:
        tool_name: Tool requested by the model.
        tool_input: The model-supplied input; anything that is not an
            object is treated as empty.
        context: Shared tool context.

    Returns:
        A success envelope with the tool's JSON payload, or an error
        envelope {"error": message} with is_error=True.
    """
    if not isinstance(tool_input, dict):
        tool_input = {}
    try:
        return await _dispatch(tool_name, tool_input, context)
    except Exception as exc:
        return ToolResultEnvelope.error(str(exc) or type(exc).__name__)
