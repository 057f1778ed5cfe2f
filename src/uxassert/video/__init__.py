"""Frame extraction and sampling."""

from uxassert.video.frames import (
    ExtractedVideo,
    FrameExtractionError,
    extract_frames,
    read_frame_base64,
)
from uxassert.video.sampling import sample_frames_evenly, sample_indices

__all__ = [
    "ExtractedVideo",
    "FrameExtractionError",
    "extract_frames",
    "read_frame_base64",
    "sample_frames_evenly",
    "sample_indices",
]
