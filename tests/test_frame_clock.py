"""Tests for seconds/frame conversion and timecodes."""

import pytest

from vce.utils.frame_clock import format_timecode, to_frame, to_seconds


@pytest.mark.parametrize(
    ("seconds", "fps", "expected"),
    [
        (0.0, 30.0, 0),
        (1.0, 30.0, 30),
        (0.28, 30.0, 8),
        (0.32, 30.0, 10),
        (0.5, 1.0, 1),
        (2.5, 1.0, 3),
        (-0.5, 1.0, 0),
    ],
)
def test_to_frame_rounds_half_up(seconds: float, fps: float, expected: int) -> None:
    """Conversion should round to nearest with halves going up."""
    assert to_frame(seconds, fps) == expected


def test_to_frame_does_not_clamp() -> None:
    assert to_frame(-2.0, 30.0) == -60
    assert to_frame(1_000.0, 30.0) == 30_000


def test_to_seconds_is_inverse_on_frame_grid() -> None:
    assert to_seconds(45, 30.0) == pytest.approx(1.5)
    assert to_frame(to_seconds(123, 24.0), 24.0) == 123


def test_format_timecode_splits_hours_minutes_seconds_frames() -> None:
    frame = (3600 + 2 * 60 + 5) * 30 + 7

    assert format_timecode(frame, 30.0) == "01:02:05:07"
    assert format_timecode(0, 30.0) == "00:00:00:00"
