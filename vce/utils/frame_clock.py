"""Seconds/frame conversion shared by every timed component.

All window comparisons in the engine go through ``to_frame`` so independently
computed boundaries can never drift apart by a rounding frame.
"""

from __future__ import annotations

import math


def to_frame(seconds: float, fps: float) -> int:
    """Converts seconds to the nearest frame index, rounding halves up.

    No clamping is applied; callers own their bounds.
    """
    return math.floor(seconds * fps + 0.5)


def to_seconds(frame: float, fps: float) -> float:
    """Converts a frame index to seconds."""
    return frame / fps


def format_timecode(frame: int, fps: float) -> str:
    """Formats a frame index as ``HH:MM:SS:FF``."""
    sign = "-" if frame < 0 else ""
    frame = abs(frame)
    whole_fps = max(1, int(round(fps)))
    total_seconds, frames = divmod(frame, whole_fps)
    minutes, seconds = divmod(total_seconds, 60)
    hours, minutes = divmod(minutes, 60)
    return f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}:{frames:02d}"
