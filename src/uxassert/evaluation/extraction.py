"""JSON payload extraction from free-form model text."""

from __future__ import annotations

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


class MalformedOutputError(ValueError):
    """Raised when model text does not contain a JSON object.

    Attributes:
        text: The raw text that failed to parse.
    """

    def __init__(self, message: str, text: str) -> None:
        self.text = text
        super().__init__(message)


def strip_code_fence(text: str) -> str:
    """Return the body of the first ``` fenced block, or the trimmed text."""
    raw = (text or "").strip()
    match = _FENCE_RE.search(raw)
    if match:
        return match.group(1).strip()
    return raw


def parse_json(text: str) -> dict[str, Any]:
    """Parse a JSON object from model output.

    Strips one optional fenced code block (``` or ```json) before
    parsing. Never falls back to a default value.

    Raises:
        MalformedOutputError: If the payload is not valid JSON or is
            not a JSON object.
    """
    raw = strip_code_fence(text)
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, ValueError) as exc:
        raise MalformedOutputError(f"Model output is not valid JSON: {exc}", text) from exc
    if not isinstance(parsed, dict):
        raise MalformedOutputError(
            f"Expected a JSON object, got {type(parsed).__name__}", text
        )
    return parsed
