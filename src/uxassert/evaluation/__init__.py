"""Evaluation package: output parsing, prompts, primitives and strategies."""

from __future__ import annotations

from uxassert.evaluation.extraction import MalformedOutputError, parse_json
from uxassert.evaluation.primitives import describe_timeline, evaluate_timeline
from uxassert.evaluation.strategies import get_strategy

__all__ = [
    "MalformedOutputError",
    "describe_timeline",
    "evaluate_timeline",
    "get_strategy",
    "parse_json",
]
