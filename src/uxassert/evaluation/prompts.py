"""Prompt builders for the timeline, evaluation, batch and single passes.

Every system prompt starts with an optional persona block. The user
prompts describe the expected JSON shape; frames and assertion lists
are appended by the request builders in uxassert.evaluation.content.
"""

from __future__ import annotations

from collections.abc import Iterable

from uxassert.models.assertion import Assertion

PERSONA_BLOCKS: dict[str, str] = {
    "ux-designer": (
        "You are a senior UX designer reviewing a build. Focus on user flow, "
        "clarity of feedback, and whether interactions feel intentional and forgiving."
    ),
    "qa-engineer": (
        "You are a QA engineer evaluating test assertions against a screen recording. "
        "Be precise about what is visible and when; cite timestamps and frame indices."
    ),
}

TIMELINE_MOMENTS: dict[str, str] = {
    "ux-designer": (
        "Order by timestamp. Include only moments that matter for UX "
        "(screens, taps, transitions, CTAs, selections, feedback)."
    ),
    "qa-engineer": (
        "Order by timestamp. Include only moments relevant to test verification "
        "(screens, taps, state changes, CTAs, selections, feedback, visible UI state)."
    ),
}

DEFAULT_TIMELINE_MOMENTS = (
    "Include only moments that matter generally "
    "(screens, taps, transitions, CTAs, selections, feedback)."
)

TIMELINE_SHAPE = '{ "timeline": [ { "timestampSeconds": number, "description": string } ] }'

EVALUATIONS_SHAPE = (
    '{ "evaluations": [ { "assertionId": string, "verdict": "pass"|"fail"|"uncertain", '
    '"confidence": number, "explanation": string, "evidence": [ { "timestampSeconds": number, '
    '"frameIndex": number (optional), "description": string } ] } ] }'
)

TIMELINE_USER_PROMPT = f"""Below are frames from the video with their timestamps (in seconds).
Frames are in order. Format for each: "Frame N (t=Xs)" then the image.

Describe what happens in the video as a timeline. Output valid JSON only:
{TIMELINE_SHAPE}"""

BATCH_USER_INTRO = """Below are frames from the video (in order, with timestamps in seconds). After the frames you will see the list of assertions to evaluate.

Evaluate each assertion based on what you see in the frames. Output only valid JSON with an "evaluations" array (one object per assertion with assertionId, verdict, confidence, explanation, evidence)."""

SINGLE_USER_INTRO = """Below are frames from the video (in order, with timestamps in seconds). After the frames you will see the single assertion to evaluate.

Evaluate this assertion based on what you see in the frames. Output only valid JSON with an "evaluations" array containing exactly one object (assertionId, verdict, confidence, explanation, evidence)."""


def _join(lines: Iterable[str]) -> str:
    return "\n".join(line for line in lines if line)


def persona_block(persona: str) -> str:
    """Return the persona preamble, or "" for the neutral persona."""
    return PERSONA_BLOCKS.get(persona, "")


def format_assertion_line(assertion: Assertion) -> str:
    """Format one assertion as a bullet: - [id] text (testStepId: step)."""
    step = assertion.test_step_id or "unknown"
    return f"- [{assertion.id}] {assertion.text} (testStepId: {step})"


def format_assertion_list(assertions: Iterable[Assertion]) -> str:
    return "\n".join(format_assertion_line(a) for a in assertions)


def build_timeline_system_prompt(persona: str) -> str:
    return _join([
        persona_block(persona),
        "You are analyzing a sequence of frames from a mobile app screen recording.",
        "For each relevant moment (or grouped moments), provide a short description "
        "and the approximate timestamp in seconds.",
        f"Output a structured timeline as JSON: {TIMELINE_SHAPE}.",
        TIMELINE_MOMENTS.get(persona, DEFAULT_TIMELINE_MOMENTS),
    ])


def build_evaluation_system_prompt(persona: str) -> str:
    return _join([
        persona_block(persona),
        "You evaluate natural-language UX assertions against a timeline description "
        "of a mobile app video.",
        "For each assertion, output: verdict (pass | fail | uncertain), confidence (0-1), "
        "explanation, and evidence (array of { timestampSeconds, frameIndex?, description }).",
        "Output valid JSON only, no markdown code fences.",
    ])


def build_evaluation_user_prompt(timeline_json: str, assertions: list[Assertion]) -> str:
    """Build the text-only evaluation prompt: timeline JSON plus assertion list."""
    return "\n".join([
        "## Timeline from the video",
        "```json",
        timeline_json,
        "```",
        "",
        "## Assertions to evaluate",
        format_assertion_list(assertions),
        "",
        "For each assertion, produce a single JSON object with this shape "
        "(one entry per assertion):",
        EVALUATIONS_SHAPE,
        "Output only valid JSON, no extra text.",
    ])


def build_batch_system_prompt(persona: str) -> str:
    return _join([
        persona_block(persona),
        "You are evaluating natural-language UX assertions against a sequence of frames "
        "from a mobile app screen recording.",
        "Watch the frames in order (each has a timestamp). For each assertion, decide "
        "pass/fail/uncertain, give confidence (0-1), a brief explanation, and evidence "
        "(timestamp and description of the relevant moment).",
        f"Output valid JSON only, no markdown code fences: {EVALUATIONS_SHAPE}.",
    ])


def build_single_system_prompt(persona: str) -> str:
    return _join([
        persona_block(persona),
        "You are evaluating one natural-language UX assertion against a sequence of "
        "frames from a mobile app screen recording.",
        "Watch the frames in order (each has a timestamp). Decide pass/fail/uncertain "
        "for this assertion, give confidence (0-1), a brief explanation, and evidence "
        "(timestamp and description of the relevant moment).",
        f"Output valid JSON only, no markdown code fences: {EVALUATIONS_SHAPE}. "
        "Exactly one object in the evaluations array.",
    ])


def build_batch_assertions_block(assertions: list[Assertion]) -> str:
    return (
        "\n## Assertions to evaluate\n"
        + format_assertion_list(assertions)
        + '\n\nOutput only valid JSON with an "evaluations" array '
        "(assertionId, verdict, confidence, explanation, evidence)."
    )


def build_single_assertion_block(assertion: Assertion) -> str:
    step = assertion.test_step_id or "unknown"
    return (
        "\n## Assertion to evaluate\n"
        f"[{assertion.id}] {assertion.text} (testStepId: {step})\n\n"
        'Output only valid JSON with an "evaluations" array containing exactly one '
        f'object (assertionId: "{assertion.id}", verdict, confidence, explanation, evidence).'
    )
