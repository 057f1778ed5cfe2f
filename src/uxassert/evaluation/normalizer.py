"""Coercion of loosely-shaped model JSON into typed results.

Model output is best-effort: fields may be missing, mistyped or out of
range. Everything here degrades field by field instead of rejecting
the whole payload.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any

from uxassert.models.evaluation import Evaluation, Evidence, TimelineEntry, Verdict

_VERDICTS = {v.value: v for v in Verdict}


def _as_float(value: Any, default: float = 0.0) -> float:
    """Return value as a finite float, or default.

    Booleans, non-numbers, NaN, infinities and integers too large for a
    float all yield default. json.loads accepts NaN and Infinity.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    try:
        number = float(value)
    except OverflowError:
        return default
    if not math.isfinite(number):
        return default
    return number


def _as_str(value: Any) -> str:
    """Return value if it is a string, otherwise ""."""
    return value if isinstance(value, str) else ""


def coerce_timeline(raw: Any) -> list[TimelineEntry]:
    """Coerce a raw timeline array; non-list input yields an empty list."""
    if not isinstance(raw, list):
        return []
    return [
        TimelineEntry(
            timestamp_seconds=_as_float(item.get("timestampSeconds")),
            description=_as_str(item.get("description")),
        )
        for item in raw
        if isinstance(item, dict)
    ]


def coerce_evidence(raw: Any) -> list[Evidence]:
    """Coerce a raw evidence array.

    Non-object items are skipped. frameIndex survives only as a real
    integer; anything else becomes None.

    Returns:
        The coerced Evidence list (empty for non-list input).
    """
    if not isinstance(raw, list):
        return []
    evidence: list[Evidence] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        frame_index = item.get("frameIndex")
        if isinstance(frame_index, bool) or not isinstance(frame_index, int):
            frame_index = None
        evidence.append(
            Evidence(
                timestamp_seconds=_as_float(item.get("timestampSeconds")),
                frame_index=frame_index,
                description=_as_str(item.get("description")),
            )
        )
    return evidence


def coerce_evaluation(raw: Any, assertion_id: str | None = None) -> Evaluation | None:
    """Coerce one raw evaluation object.

    The id comes from assertion_id when given, otherwise from the raw
    "assertionId" (falling back to "id"). Unknown verdicts become
    uncertain and confidence is clamped to [0, 1].

    Returns:
        The Evaluation, or None if raw is not an object or has no id.
    """
    if not isinstance(raw, dict):
        return None

    eval_id = assertion_id or raw.get("assertionId") or raw.get("id")
    if not isinstance(eval_id, str) or not eval_id:
        return None

    verdict_raw = raw.get("verdict")
    verdict = Verdict.uncertain
    if isinstance(verdict_raw, str):
        verdict = _VERDICTS.get(verdict_raw.strip().lower(), Verdict.uncertain)

    return Evaluation(
        assertion_id=eval_id,
        verdict=verdict,
        confidence=max(0.0, min(1.0, _as_float(raw.get("confidence")))),
        explanation=_as_str(raw.get("explanation")),
        evidence=coerce_evidence(raw.get("evidence")),
    )


def coerce_evaluations(raw: Any) -> list[Evaluation]:
    """Coerce a raw evaluations array, dropping entries without an id."""
    if not isinstance(raw, list):
        return []
    evaluations = []
    for item in raw:
        evaluation = coerce_evaluation(item)
        if evaluation is not None:
            evaluations.append(evaluation)
    return evaluations


def index_evaluations(
    evaluations: Iterable[Evaluation],
    known_ids: Iterable[str],
    into: dict[str, Evaluation] | None = None,
) -> dict[str, Evaluation]:
    """Key evaluations by assertion id.

    Ids outside known_ids are dropped. A later evaluation for the same
    id overwrites an earlier one (last write wins, no merging).

    Args:
        evaluations: Evaluations in processing order.
        known_ids: The input assertion ids.
        into: Existing map to update in place; a new dict if None.

    Returns:
        The updated map.
    """
    allowed = set(known_ids)
    result = into if into is not None else {}
    for evaluation in evaluations:
        if evaluation.assertion_id in allowed:
            result[evaluation.assertion_id] = evaluation
    return result


def fallback_evaluation(assertion_id: str) -> Evaluation:
    """The evaluation recorded when the model returned nothing usable."""
    return Evaluation(
        assertion_id=assertion_id,
        verdict=Verdict.uncertain,
        confidence=0.0,
        explanation="No evaluation returned.",
        evidence=[],
    )
