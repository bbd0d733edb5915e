"""Domain data structures for timeline entities.

Every record is immutable and self-contained. A rendering job constructs them
once from upstream content data and the frame evaluator only ever reads them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, NamedTuple, TypeAlias

from vce.config import COLORS

OverlayStyleName: TypeAlias = Literal["hook", "cta", "stamp", "chapter"]
BackgroundAnimation: TypeAlias = Literal["starfield", "none"]

OVERLAY_STYLE_NAMES: frozenset[str] = frozenset({"hook", "cta", "stamp", "chapter"})
BACKGROUND_ANIMATIONS: frozenset[str] = frozenset({"starfield", "none"})


@dataclass(frozen=True)
class Segment:
    """A time-bounded unit of spoken/captioned content."""

    text: str
    start_time: float
    end_time: float
    topic: str | None = None


@dataclass(frozen=True)
class ZoomPoint:
    """A zoom window with a fixed scale target and anchor."""

    start_time: float
    end_time: float
    scale: float
    anchor_x: float = 0.5
    anchor_y: float = 0.5


@dataclass(frozen=True)
class TapPoint:
    """A touch position that spawns one independent ripple."""

    time: float
    x: float
    y: float
    color: str | None = None


@dataclass(frozen=True)
class Overlay:
    """A styled text overlay shown over a time window."""

    text: str
    start_time: float
    end_time: float
    style: OverlayStyleName


@dataclass(frozen=True)
class AudioTrack:
    """An independently timed audio track handed to the external muxer."""

    name: str
    src: str
    start_offset: float = 0.0
    volume: float = 1.0
    duration: float | None = None


@dataclass(frozen=True)
class BackgroundSpec:
    """Procedural background settings for a scene."""

    animation: BackgroundAnimation = "starfield"
    show_stars: bool = True
    overlay_mode: bool = False
    background_color: str = COLORS["cosmic_black"]
    gradient_end_color: str = COLORS["deep_purple"]
    tint_color: str | None = None


class WordTiming(NamedTuple):
    """A caption word with its highlight window in frames."""

    word: str
    start_frame: int
    end_frame: int
