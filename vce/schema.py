"""Versioned per-frame output schema handed to the host renderer."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Literal, TypeAlias

OUTPUT_SCHEMA_VERSION = "v1"

ZoomPhase: TypeAlias = Literal["identity", "spring-in", "hold", "ease-out"]
WordState: TypeAlias = Literal["spoken", "active", "upcoming"]
SymbolLayout: TypeAlias = Literal["single", "row", "grid"]
SymbolSource: TypeAlias = Literal["topic", "content"]


@dataclass(frozen=True)
class ZoomState:
    """Scale and transform origin of the main content layer."""

    scale: float
    anchor_x_percent: float
    anchor_y_percent: float
    phase: ZoomPhase

    @property
    def is_identity(self) -> bool:
        return self.phase == "identity"


IDENTITY_ZOOM = ZoomState(
    scale=1.0, anchor_x_percent=50.0, anchor_y_percent=50.0, phase="identity"
)


@dataclass(frozen=True)
class CaptionWordState:
    word: str
    start_frame: int
    end_frame: int
    state: WordState


@dataclass(frozen=True)
class CaptionState:
    """Active caption line with karaoke word states."""

    text: str
    words: tuple[CaptionWordState, ...]
    active_word_index: int | None
    font_size: int
    vertical_anchor_percent: float


@dataclass(frozen=True)
class OverlayState:
    text: str
    style: str
    font_size: int
    vertical_anchor_percent: float
    opacity: float
    scale: float


@dataclass(frozen=True)
class RippleState:
    x_percent: float
    y_percent: float
    radius_px: float
    opacity: float
    dot_scale: float
    color: str
    progress: float


@dataclass(frozen=True)
class StarState:
    x_percent: float
    y_percent: float
    size_px: float
    opacity: float
    glow_radius_px: float


@dataclass(frozen=True)
class ShootingStarState:
    head_x_percent: float
    head_y_percent: float
    tail_x_percent: float
    tail_y_percent: float
    thickness_px: float
    intensity: float
    head_color: str
    tail_color: str
    show_head: bool


@dataclass(frozen=True)
class BackgroundState:
    animation: str
    overlay_mode: bool
    gradient_position_percent: float
    background_color: str
    gradient_end_color: str
    stars: tuple[StarState, ...] = ()
    shooting_stars: tuple[ShootingStarState, ...] = ()


@dataclass(frozen=True)
class SymbolOverlayState:
    """Large pulsing glyph(s), number or moon-phase icon.

    ``source`` is ``"topic"`` when the symbols follow the classified topic and
    ``"content"`` when they come from the scene's symbol content, which is
    drawn regardless of the topic.
    """

    kind: str
    source: SymbolSource
    items: tuple[str, ...]
    resolved_assets: tuple[str, ...]
    size_px: int
    layout: SymbolLayout
    gap_px: int
    opacity: float
    scale: float
    color: str


@dataclass(frozen=True)
class AudioTrackState:
    name: str
    src: str
    resolved_src: str | None
    active: bool
    playhead_seconds: float
    volume: float


@dataclass(frozen=True)
class FrameState:
    """Complete visual/audio state of one frame."""

    schema_version: str
    frame: int
    time_seconds: float
    timecode: str
    background: BackgroundState
    zoom: ZoomState
    caption: CaptionState | None
    overlays: tuple[OverlayState, ...]
    ripples: tuple[RippleState, ...]
    topic: str | None
    topic_kind: str | None
    symbol: SymbolOverlayState | None
    cta_active: bool
    audio: tuple[AudioTrackState, ...]

    def to_dict(self) -> dict[str, Any]:
        """Returns a JSON-serializable representation."""
        return asdict(self)
