"""Prompts for the tool-using orchestrator."""

from __future__ import annotations

from uxassert.evaluation.prompts import format_assertion_list
from uxassert.models.assertion import Assertion

PERSONA_HINTS: dict[str, str] = {
    "ux-designer": (
        "Evaluate from a senior UX designer perspective "
        "(flow, feedback, affordances, clarity)."
    ),
    "qa-engineer": (
        "Evaluate with QA rigor: precise timestamps, observable UI state, "
        "test-report style."
    ),
}

ORCHESTRATOR_SYSTEM_TEMPLATE = """You are an AI orchestrator for validating UX assertions against a screen recording.

Your task: given a list of natural-language UX assertions and access to video frames (via tools), produce pass/fail/uncertain verdicts with confidence and evidence for each assertion.

Persona: {persona_hint}

You have two tools:
1. describe_timeline -- Call this first. It analyzes the video frames and returns a timeline of key moments (screens, taps, transitions, feedback) with timestamps.
2. evaluate_assertions -- Call this second. Pass it the timeline you received from describe_timeline. It returns evaluations (verdict, confidence, explanation, evidence) for each assertion.

Workflow:
- Call describe_timeline() with no arguments.
- When you receive the timeline, call evaluate_assertions with that timeline as the "timeline" parameter.
- After you receive the evaluations, you may summarize or report completion. Do not invent or modify the tool results; the final evaluations are the output of evaluate_assertions.

Use the tools in order. Do not skip describe_timeline. Do not call evaluate_assertions without first obtaining the timeline from describe_timeline."""

ORCHESTRATOR_USER_TEMPLATE = """Validate the following UX assertions against the video (frames are already extracted and will be used by the tools).

## Assertions to validate

{assertion_list}

First call describe_timeline, then call evaluate_assertions with the returned timeline. Report when done."""


def build_orchestrator_system_prompt(persona: str) -> str:
    hint = PERSONA_HINTS.get(persona, "Evaluate as a neutral observer.")
    return ORCHESTRATOR_SYSTEM_TEMPLATE.format(persona_hint=hint)


def build_orchestrator_user_prompt(assertions: list[Assertion]) -> str:
    return ORCHESTRATOR_USER_TEMPLATE.format(
        assertion_list=format_assertion_list(assertions)
    )
