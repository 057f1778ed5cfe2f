"""Request content builders.

Frame bytes are read and base64-encoded here, at request-build time,
once per frame per request. There is no cache: a frame sent in two
requests is read twice.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from uxassert.adapters.base import ContentBlock, ImageBlock, TextBlock
from uxassert.evaluation.prompts import (
    BATCH_USER_INTRO,
    SINGLE_USER_INTRO,
    TIMELINE_USER_PROMPT,
    build_batch_assertions_block,
    build_single_assertion_block,
)
from uxassert.models.assertion import Assertion
from uxassert.models.evaluation import TimelineEntry
from uxassert.models.frame import Frame
from uxassert.video.frames import media_type_for, read_frame_base64
from uxassert.video.sampling import sample_frames_evenly


def frame_caption(frame: Frame) -> str:
    """Caption preceding each image, e.g. "Frame 3 (t=1.5s)"."""
    return f"Frame {frame.frame_index} (t={frame.timestamp_seconds:.1f}s)"


def build_frame_blocks(frames: Sequence[Frame], max_frames: int) -> list[ContentBlock]:
    """Caption and image blocks for the evenly sampled frames, in order."""
    blocks: list[ContentBlock] = []
    for frame in sample_frames_evenly(frames, max_frames):
        blocks.append(TextBlock(text=frame_caption(frame)))
        blocks.append(
            ImageBlock(
                data=read_frame_base64(frame.path),
                media_type=media_type_for(frame.path),
            )
        )
    return blocks


def build_timeline_content(frames: Sequence[Frame], max_frames: int) -> list[ContentBlock]:
    """User content for the timeline pass: instructions, then the frames."""
    return [TextBlock(text=TIMELINE_USER_PROMPT), *build_frame_blocks(frames, max_frames)]


def build_batch_content(
    frames: Sequence[Frame], assertions: list[Assertion], max_frames: int
) -> list[ContentBlock]:
    """User content for the batch strategy.

    Args:
        frames: All extracted frames; sampled down to max_frames.
        assertions: Every assertion to evaluate in this request.
        max_frames: Cap on images per request.

    Returns:
        Intro text, caption and image blocks, then the assertion list.
    """
    return [
        TextBlock(text=BATCH_USER_INTRO),
        *build_frame_blocks(frames, max_frames),
        TextBlock(text=build_batch_assertions_block(assertions)),
    ]


def build_single_content(
    frames: Sequence[Frame], assertion: Assertion, max_frames: int
) -> list[ContentBlock]:
    """User content for one assertion in the single strategy (full frame set)."""
    return [
        TextBlock(text=SINGLE_USER_INTRO),
        *build_frame_blocks(frames, max_frames),
        TextBlock(text=build_single_assertion_block(assertion)),
    ]


def serialize_timeline(timeline: Sequence[TimelineEntry]) -> str:
    """Render the timeline as the indented JSON document the evaluator reads."""
    payload = {"timeline": [entry.model_dump(by_alias=True) for entry in timeline]}
    return json.dumps(payload, indent=2, ensure_ascii=False)
