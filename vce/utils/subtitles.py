"""Caption export to SRT, WebVTT and ASS (karaoke) subtitle files."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import NamedTuple

from vce.domain import Segment, WordTiming
from vce.timeline.word_timing import split_word_timings
from vce.utils.frame_clock import to_frame, to_seconds
from vce.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)


class SubtitleCue(NamedTuple):
    """One caption line with its frame-snapped timing and word timings."""

    start: float
    end: float
    text: str
    words: tuple[WordTiming, ...]


def segments_to_cues(segments: Sequence[Segment], fps: float) -> list[SubtitleCue]:
    """Converts caption segments to cues snapped to the frame grid.

    Cues are ordered by start time. Segments without words are skipped.
    """
    cues: list[SubtitleCue] = []
    for segment in sorted(segments, key=lambda item: (item.start_time, item.end_time)):
        text = " ".join(segment.text.split())
        if not text:
            logger.debug("Skipping empty caption segment at %s", segment.start_time)
            continue
        cues.append(
            SubtitleCue(
                start=to_seconds(to_frame(segment.start_time, fps), fps),
                end=to_seconds(to_frame(segment.end_time, fps), fps),
                text=text,
                words=tuple(split_word_timings(segment, fps)),
            )
        )
    return cues


class SubtitleFormatter(ABC):
    """Abstract base class for subtitle formatters."""

    @abstractmethod
    def format_time(self, seconds: float) -> str:
        """Convert time in seconds to formatted time string."""

    @abstractmethod
    def generate_entry(self, index: int, cue: SubtitleCue, fps: float) -> str:
        """Generate a single subtitle entry."""

    def header(self) -> str:
        return ""

    def render(self, cues: Sequence[SubtitleCue], fps: float) -> str:
        """Renders every cue into one subtitle document."""
        entries = [self.generate_entry(index, cue, fps) for index, cue in enumerate(cues, 1)]
        return self.header() + "".join(entry + "\n" for entry in entries)

    def generate_file(
        self, cues: Sequence[SubtitleCue], fps: float, output_file: Path
    ) -> Path:
        """Writes ``cues`` to ``output_file`` and returns its path."""
        logger.info("Generating %s file: %s", type(self).__name__, output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        with open(output_file, "w", encoding="utf-8") as file:
            file.write(self.render(cues, fps))
        logger.info("Subtitle file generated successfully: %s", output_file)
        return output_file


def _split_clock(seconds: float, fraction_digits: int) -> tuple[int, int, int, int]:
    scale = 10**fraction_digits
    total = int(round(max(0.0, seconds) * scale))
    whole, fraction = divmod(total, scale)
    minutes, secs = divmod(whole, 60)
    hours, minutes = divmod(minutes, 60)
    return hours, minutes, secs, fraction


class SRTFormatter(SubtitleFormatter):
    """Formatter for SRT subtitles."""

    def format_time(self, seconds: float) -> str:
        hours, minutes, secs, millis = _split_clock(seconds, 3)
        return f"{hours:02d}:{minutes:02d}:{secs:02d},{millis:03d}"

    def generate_entry(self, index: int, cue: SubtitleCue, fps: float) -> str:
        start_time = self.format_time(cue.start)
        end_time = self.format_time(cue.end)
        logger.debug("SRT Entry: Start %s, End %s, Text %s", start_time, end_time, cue.text)
        return f"{index}\n{start_time} --> {end_time}\n{cue.text}\n"


class VTTFormatter(SubtitleFormatter):
    """Formatter for WebVTT subtitles."""

    def format_time(self, seconds: float) -> str:
        hours, minutes, secs, millis = _split_clock(seconds, 3)
        return f"{hours:02d}:{minutes:02d}:{secs:02d}.{millis:03d}"

    def header(self) -> str:
        return "WEBVTT\n\n"

    def generate_entry(self, index: int, cue: SubtitleCue, fps: float) -> str:
        start_time = self.format_time(cue.start)
        end_time = self.format_time(cue.end)
        logger.debug("VTT Entry: Start %s, End %s, Text %s", start_time, end_time, cue.text)
        return f"{start_time} --> {end_time}\n{cue.text}\n"


class ASSFormatter(SubtitleFormatter):
    """Formatter for ASS subtitles with per-word karaoke timing.

    Each word gets a ``{\\k<cs>}`` tag lasting until the next word's highlight
    starts, so players sweep the highlight the same way the caption track does.
    """

    ASS_HEADER: str = """[Script Info]
Title: Generated Captions
ScriptType: v4.00+
Collisions: Normal
PlayDepth: 0

[V4+ Styles]
Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding
Style: Default,Arial,64,&H00FFFFFF,&H0097ED3D,&H00000000,&H64000000,-1,0,0,0,100,100,0,0.00,1,2.00,0.00,2,10,10,10,1

[Events]
Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text
"""

    def format_time(self, seconds: float) -> str:
        hours, minutes, secs, centis = _split_clock(seconds, 2)
        return f"{hours:01d}:{minutes:02d}:{secs:02d}.{centis:02d}"

    def header(self) -> str:
        return self.ASS_HEADER

    def karaoke_text(self, cue: SubtitleCue, fps: float) -> str:
        """Returns the cue text with ``\\k`` durations in centiseconds."""
        if not cue.words:
            return cue.text
        end_frame = to_frame(cue.end, fps)
        parts: list[str] = []
        cursor = to_frame(cue.start, fps)
        for index, word in enumerate(cue.words):
            next_start = (
                cue.words[index + 1].start_frame if index + 1 < len(cue.words) else end_frame
            )
            lead_in = max(0, word.start_frame - cursor)
            if lead_in:
                parts.append(f"{{\\k{int(round(to_seconds(lead_in, fps) * 100))}}}")
            span = max(0, next_start - max(cursor, word.start_frame))
            parts.append(f"{{\\k{int(round(to_seconds(span, fps) * 100))}}}{word.word}")
            cursor = max(cursor, next_start)
        return " ".join(parts)

    def generate_entry(self, index: int, cue: SubtitleCue, fps: float) -> str:
        start_time = self.format_time(cue.start)
        end_time = self.format_time(cue.end)
        text = self.karaoke_text(cue, fps)
        logger.debug("ASS Entry: Start %s, End %s, Text %s", start_time, end_time, text)
        return f"Dialogue: 0,{start_time},{end_time},Default,,0,0,0,karaoke,{text}"


FORMATTERS: dict[str, SubtitleFormatter] = {
    "ass": ASSFormatter(),
    "srt": SRTFormatter(),
    "vtt": VTTFormatter(),
}


def infer_subtitle_format(output_path: Path) -> str | None:
    suffix = output_path.suffix.lower().lstrip(".")
    return suffix if suffix in FORMATTERS else None


def export_captions(
    segments: Sequence[Segment],
    fps: float,
    output_file: Path,
    subtitle_format: str | None = None,
) -> Path:
    """Exports caption segments as a subtitle file.

    Raises:
        ValueError: If the format is unknown or cannot be inferred from
            ``output_file``.
    """
    resolved = subtitle_format or infer_subtitle_format(output_file)
    if resolved not in FORMATTERS:
        raise ValueError(
            f"Unknown subtitle format {subtitle_format or output_file.suffix!r}; "
            f"expected one of {', '.join(sorted(FORMATTERS))}."
        )
    cues = segments_to_cues(segments, fps)
    if not cues:
        logger.warning("Scene did not produce any caption entries to export.")
    return FORMATTERS[resolved].generate_file(cues, fps, output_file)
