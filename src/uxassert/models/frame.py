"""Frame reference produced by the frame extractor."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Frame:
    """One extracted frame on disk.

    Frames are ordered by frame_index, which is monotonic with
    timestamp_seconds. The pipeline only ever reads the file.
    """

    path: Path
    timestamp_seconds: float
    frame_index: int
