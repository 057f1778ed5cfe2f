"""Assertion input model."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

AssertionType = Literal["concrete", "subjective", "behavioral"]


class Assertion(BaseModel):
    """A natural-language UX assertion to validate against a recording.

    Ids are unique within a run. Serialized with camelCase keys
    (testStepId, testStepDescription).
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    id: str
    text: str
    type: AssertionType | None = None
    test_step_id: str | None = None
    test_step_description: str | None = None
