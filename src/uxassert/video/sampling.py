"""Even-stride frame sampling to bound per-request image payloads."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def sample_indices(count: int, max_frames: int) -> list[int]:
    """Pick at most max_frames indices from range(count) by even stride.

    When count exceeds max_frames the first and last index are always
    included and index i is round(i * (count - 1) / (max_frames - 1)),
    rounding halves up. The result is strictly increasing.

    Raises:
        ValueError: If max_frames is less than 1.
    """
    if max_frames < 1:
        raise ValueError(f"max_frames must be >= 1, got {max_frames}")
    if count <= max_frames:
        return list(range(count))
    if max_frames == 1:
        return [0]

    step = (count - 1) / (max_frames - 1)
    indices: list[int] = []
    for i in range(max_frames):
        idx = min(max(int(math.floor(i * step + 0.5)), 0), count - 1)
        if not indices or idx != indices[-1]:
            indices.append(idx)
    return indices


def sample_frames_evenly(frames: Sequence[T], max_frames: int) -> list[T]:
    """Reduce an ordered frame sequence to at most max_frames items.

    Deterministic and idempotent: a sequence already within the cap is
    returned unchanged (as a list).
    """
    return [frames[i] for i in sample_indices(len(frames), max_frames)]
