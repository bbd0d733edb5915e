"""Karaoke word timing derived from caption segments."""

from __future__ import annotations

from collections.abc import Sequence

from vce.config import CAPTION_CONFIG
from vce.domain import Segment, WordTiming
from vce.utils.frame_clock import to_frame


def split_word_timings(
    segment: Segment,
    fps: float,
    *,
    lead_seconds: float = CAPTION_CONFIG.lead_seconds,
) -> list[WordTiming]:
    """Splits a segment's duration evenly across its words.

    Each word's highlight starts ``lead_seconds`` before its slot and ends
    half a lead after it, so the highlight pops slightly ahead of the voice.
    Starts are clamped to the segment start and ends to the segment end.

    Args:
        segment: Caption segment to split.
        fps: Frames per second of the composition.
        lead_seconds: Perceptual lead applied to every word.

    Returns:
        One ``WordTiming`` per whitespace-delimited word, in spoken order.
        An empty or whitespace-only text yields an empty list.
    """
    words = segment.text.split()
    if not words:
        return []

    slot = (segment.end_time - segment.start_time) / len(words)
    timings: list[WordTiming] = []
    for index, word in enumerate(words):
        slot_start = segment.start_time + index * slot
        slot_end = segment.start_time + (index + 1) * slot
        start = max(segment.start_time, slot_start - lead_seconds)
        end = min(segment.end_time, slot_end + lead_seconds / 2.0)
        if index == len(words) - 1:
            end = segment.end_time
        timings.append(
            WordTiming(
                word=word,
                start_frame=to_frame(start, fps),
                end_frame=to_frame(end, fps),
            )
        )
    return timings


def active_word_index(timings: Sequence[WordTiming], frame: int) -> int | None:
    """Returns the index of the highlighted word at ``frame``.

    Highlight windows overlap by design; the later word wins once it starts.
    """
    active: int | None = None
    for index, timing in enumerate(timings):
        if timing.start_frame <= frame < timing.end_frame:
            active = index
    return active
