"""Frame extraction from screen recordings using ffmpeg.

Frames are written as PNG files with a predictable name so their
position maps directly to a timestamp (index / fps).
"""

from __future__ import annotations

import base64
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from uxassert.models.frame import Frame

FRAME_PATTERN = "frame_%04d.png"

_MEDIA_TYPES: dict[str, str] = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".gif": "image/gif",
}


class FrameExtractionError(Exception):
    """Raised when frames cannot be extracted from a video."""


@dataclass
class ExtractedVideo:
    """Frames extracted from one video plus its probed duration."""

    duration_seconds: float
    frames: list[Frame] = field(default_factory=list)


def probe_duration(video_path: Path) -> float:
    """Return the video duration in seconds via ffprobe, or 0.0 if unknown."""
    try:
        result = subprocess.run(
            [
                "ffprobe",
                "-v",
                "error",
                "-show_entries",
                "format=duration",
                "-of",
                "default=noprint_wrappers=1:nokey=1",
                str(video_path),
            ],
            check=True,
            capture_output=True,
            text=True,
        )
    except (subprocess.CalledProcessError, FileNotFoundError):
        return 0.0
    try:
        return float(result.stdout.strip())
    except ValueError:
        return 0.0


def _frame_number(path: Path) -> int:
    """Sequence number ffmpeg wrote into a frame file name (frame_0042.png -> 42)."""
    return int(path.stem.rsplit("_", 1)[1])


def extract_frames(video_path: Path, fps: float, out_dir: Path) -> ExtractedVideo:
    """Sample frames from a video at a fixed rate.

    Args:
        video_path: Path to the recording (any container ffmpeg reads).
        fps: Frames per second to sample (e.g. 1 = one frame per second).
        out_dir: Directory for the frame PNGs (created if needed).

    Returns:
        ExtractedVideo with frames ordered by index.

    Raises:
        FrameExtractionError: If the video is missing, ffmpeg is not
            installed, or ffmpeg exits with an error.
    """
    if fps <= 0:
        raise FrameExtractionError(f"fps must be positive, got {fps}")
    if not video_path.exists():
        raise FrameExtractionError(f"Video file not found: {video_path}")

    out_dir.mkdir(parents=True, exist_ok=True)

    try:
        subprocess.run(
            [
                "ffmpeg",
                "-y",
                "-i",
                str(video_path),
                "-vf",
                f"fps={fps}",
                "-vsync",
                "cfr",
                str(out_dir / FRAME_PATTERN),
            ],
            check=True,
            capture_output=True,
        )
    except FileNotFoundError as exc:
        raise FrameExtractionError("ffmpeg not found on PATH") from exc
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or b"").decode("utf-8", errors="replace").strip()
        tail = stderr.splitlines()[-1] if stderr else f"exit code {exc.returncode}"
        raise FrameExtractionError(f"ffmpeg failed for {video_path}: {tail}") from exc

    # frame_%04d widens past 9999, so order by number rather than by name
    frame_files = sorted(out_dir.glob("frame_*.png"), key=_frame_number)
    frames = [
        Frame(path=path, timestamp_seconds=index / fps, frame_index=index)
        for index, path in enumerate(frame_files)
    ]

    return ExtractedVideo(duration_seconds=probe_duration(video_path), frames=frames)


def media_type_for(path: Path) -> str:
    """Guess the image media type from the file suffix (PNG by default)."""
    return _MEDIA_TYPES.get(path.suffix.lower(), "image/png")


def read_frame_base64(path: Path) -> str:
    """Read a frame file and return its base64 encoding."""
    return base64.b64encode(Path(path).read_bytes()).decode("ascii")
