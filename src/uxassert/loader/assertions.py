"""Load and normalize assertions from a JSON file.

Accepted shapes: a JSON array of items, or an object holding the array
under "assertions" or "items". Items may use a few alternate key names
(assertion/description for text, stepId/stepDescription for steps).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from uxassert.models.assertion import Assertion

ASSERTION_TYPES = ("concrete", "subjective", "behavioral")


class AssertionsFileError(Exception):
    """Raised when an assertions file is missing or cannot be used.

    Attributes:
        path: The offending file.
    """

    def __init__(self, message: str, path: Path) -> None:
        self.path = path
        super().__init__(message)


def _first_present(item: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if item.get(key) is not None:
            return item[key]
    return None


def normalize_assertion_item(item: Any, position: int) -> Assertion:
    """Normalize one raw item; position is 1-based and seeds default ids."""
    if not isinstance(item, dict):
        return Assertion(
            id=f"assertion-{position}",
            text=str(item),
            type="concrete",
            test_step_id=f"step-{position}",
            test_step_description="",
        )

    text = item.get("text")
    if not isinstance(text, str):
        text = _first_present(item, "assertion", "description")
        text = text if isinstance(text, str) else str(item)

    raw_type = item.get("type")
    assertion_type = raw_type if raw_type in ASSERTION_TYPES else "concrete"

    step_id = _first_present(item, "testStepId", "stepId")
    step_description = _first_present(item, "testStepDescription", "stepDescription")

    return Assertion(
        id=str(item.get("id") or f"assertion-{position}"),
        text=text,
        type=assertion_type,
        test_step_id=str(step_id) if step_id is not None else f"step-{position}",
        test_step_description=str(step_description) if step_description is not None else "",
    )


def load_assertions(path: Path) -> list[Assertion]:
    """Load assertions from a JSON file.

    Raises:
        AssertionsFileError: If the file is missing, is not valid JSON,
            or contains duplicate assertion ids.
    """
    resolved = Path(path).resolve()
    if not resolved.exists():
        raise AssertionsFileError(f"Assertions file not found: {resolved}", resolved)

    try:
        data = json.loads(resolved.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise AssertionsFileError(
            f"Invalid JSON in assertions file: {exc}", resolved
        ) from exc

    if isinstance(data, list):
        items = data
    elif isinstance(data, dict):
        items = data.get("assertions") or data.get("items") or []
    else:
        items = []
    if not isinstance(items, list):
        raise AssertionsFileError(
            "Assertions must be a JSON array (or an object with an 'assertions' array)",
            resolved,
        )

    try:
        assertions = [
            normalize_assertion_item(item, position)
            for position, item in enumerate(items, 1)
        ]
    except ValidationError as exc:
        raise AssertionsFileError(f"Invalid assertion: {exc}", resolved) from exc

    seen: set[str] = set()
    for assertion in assertions:
        if assertion.id in seen:
            raise AssertionsFileError(
                f"Duplicate assertion id '{assertion.id}'", resolved
            )
        seen.add(assertion.id)

    return assertions
