"""The two model-backed primitives: describe a timeline, evaluate assertions.

Both are single request/response exchanges. Malformed model output
raises MalformedOutputError; callers decide how to degrade.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from uxassert.adapters.base import AdapterConfig, BaseAdapter, ContentBlock, Message
from uxassert.evaluation.content import build_timeline_content, serialize_timeline
from uxassert.evaluation.extraction import parse_json
from uxassert.evaluation.normalizer import coerce_evaluations, coerce_timeline
from uxassert.evaluation.prompts import (
    build_evaluation_system_prompt,
    build_evaluation_user_prompt,
    build_timeline_system_prompt,
)
from uxassert.models.assertion import Assertion
from uxassert.models.config import ValidatorConfig
from uxassert.models.evaluation import Evaluation, TimelineEntry
from uxassert.models.frame import Frame


def build_adapter_config(settings: ValidatorConfig, **extras: Any) -> AdapterConfig:
    """Build the per-call adapter config from the run settings.

    Args:
        settings: Resolved validator configuration (model, max_tokens,
            temperature).
        **extras: Provider-specific request fields, e.g. tool_choice.

    Returns:
        AdapterConfig for a single send_turn call.
    """
    return AdapterConfig(
        model=settings.model,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
        extras=extras,
    )


async def ask_json(
    adapter: BaseAdapter,
    settings: ValidatorConfig,
    system_prompt: str,
    content: str | list[ContentBlock],
) -> dict[str, Any]:
    """Send one system + user exchange and parse the JSON reply.

    A reply without any text block is treated as an empty object.

    Raises:
        MalformedOutputError: If the reply text is not a JSON object.
        TransportError: Propagated from the adapter.
    """
    messages = [
        Message(role="system", content=system_prompt),
        Message(role="user", content=content),
    ]
    result = await adapter.send_turn(messages, config=build_adapter_config(settings))
    return parse_json(result.text or "{}")


async def describe_timeline(
    adapter: BaseAdapter,
    settings: ValidatorConfig,
    frames: Sequence[Frame],
) -> list[TimelineEntry]:
    """Ask the model for a timeline of the sampled frames."""
    parsed = await ask_json(
        adapter,
        settings,
        build_timeline_system_prompt(settings.persona),
        build_timeline_content(frames, settings.max_frames_per_request),
    )
    return coerce_timeline(parsed.get("timeline"))


async def evaluate_timeline(
    adapter: BaseAdapter,
    settings: ValidatorConfig,
    timeline: Sequence[TimelineEntry],
    assertions: list[Assertion],
) -> list[Evaluation]:
    """Evaluate all assertions against a timeline. Text only, no images."""
    parsed = await ask_json(
        adapter,
        settings,
        build_evaluation_system_prompt(settings.persona),
        build_evaluation_user_prompt(serialize_timeline(timeline), assertions),
    )
    return coerce_evaluations(parsed.get("evaluations"))
