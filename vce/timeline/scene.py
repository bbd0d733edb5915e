"""Scene description: construction, validation and loading from upstream data.

A ``Scene`` is validated exactly once, when it is constructed. Invalid timing
data is a caller error and fails fast with ``SceneValidationError``; nothing
is silently reinterpreted.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, cast

from vce.animation.prng import hex_to_rgb
from vce.config import AUDIO_CONFIG, CONTEXT_CONFIG
from vce.domain import (
    BACKGROUND_ANIMATIONS,
    OVERLAY_STYLE_NAMES,
    AudioTrack,
    BackgroundAnimation,
    BackgroundSpec,
    Overlay,
    OverlayStyleName,
    Segment,
    TapPoint,
    ZoomPoint,
)
from vce.utils.frame_clock import to_frame
from vce.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)


class SceneValidationError(ValueError):
    """Raised when a scene description contains invalid or ambiguous timing."""


def _require_finite(value: float, label: str) -> None:
    if not math.isfinite(value):
        raise SceneValidationError(f"{label} must be a finite number, got {value!r}.")


def _require_window(start_time: float, end_time: float, label: str) -> None:
    _require_finite(start_time, f"{label}.start_time")
    _require_finite(end_time, f"{label}.end_time")
    if not start_time < end_time:
        raise SceneValidationError(
            f"{label} must satisfy start_time < end_time "
            f"(got start_time={start_time}, end_time={end_time})."
        )


def _require_unit(value: float, label: str) -> None:
    _require_finite(value, label)
    if not 0.0 <= value <= 1.0:
        raise SceneValidationError(f"{label} must lie in [0, 1], got {value}.")


def _require_color(value: str, label: str) -> None:
    try:
        hex_to_rgb(value)
    except ValueError as err:
        raise SceneValidationError(f"{label}: {err}") from err


@dataclass(frozen=True)
class Scene:
    """Immutable, validated description of one rendering job."""

    fps: float
    duration_in_frames: int
    width: int = 1080
    height: int = 1920
    seed: str = "default"
    segments: tuple[Segment, ...] = ()
    zoom_points: tuple[ZoomPoint, ...] = ()
    tap_points: tuple[TapPoint, ...] = ()
    overlays: tuple[Overlay, ...] = ()
    audio_tracks: tuple[AudioTrack, ...] = ()
    background: BackgroundSpec = field(default_factory=BackgroundSpec)
    symbol_content: str | None = None
    brand: str = CONTEXT_CONFIG.default_brand

    def __post_init__(self) -> None:
        for name in ("segments", "zoom_points", "tap_points", "overlays", "audio_tracks"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        self.validate()

    @property
    def duration_seconds(self) -> float:
        return self.duration_in_frames / self.fps

    def validate(self) -> None:
        """Checks every timing invariant of the scene.

        Raises:
            SceneValidationError: On the first violated invariant.
        """
        _require_finite(self.fps, "fps")
        if self.fps <= 0:
            raise SceneValidationError(f"fps must be positive, got {self.fps}.")
        if self.duration_in_frames <= 0:
            raise SceneValidationError(
                f"duration_in_frames must be positive, got {self.duration_in_frames}."
            )
        if self.width <= 0 or self.height <= 0:
            raise SceneValidationError(
                f"Scene dimensions must be positive, got {self.width}x{self.height}."
            )
        if self.background.animation not in BACKGROUND_ANIMATIONS:
            raise SceneValidationError(
                f"Unknown background animation {self.background.animation!r}."
            )
        if not self.brand.strip():
            raise SceneValidationError("brand must be a non-empty name.")
        _require_color(self.background.background_color, "background.background_color")
        _require_color(self.background.gradient_end_color, "background.gradient_end_color")
        if self.background.tint_color is not None:
            _require_color(self.background.tint_color, "background.tint_color")

        for index, segment in enumerate(self.segments):
            _require_window(segment.start_time, segment.end_time, f"segments[{index}]")

        for index, zoom in enumerate(self.zoom_points):
            label = f"zoom_points[{index}]"
            _require_window(zoom.start_time, zoom.end_time, label)
            _require_finite(zoom.scale, f"{label}.scale")
            if zoom.scale < 1.0:
                raise SceneValidationError(f"{label}.scale must be >= 1, got {zoom.scale}.")
            _require_unit(zoom.anchor_x, f"{label}.anchor_x")
            _require_unit(zoom.anchor_y, f"{label}.anchor_y")
        self._validate_zoom_overlap()

        for index, tap in enumerate(self.tap_points):
            label = f"tap_points[{index}]"
            _require_finite(tap.time, f"{label}.time")
            _require_unit(tap.x, f"{label}.x")
            _require_unit(tap.y, f"{label}.y")
            if tap.color is not None:
                _require_color(tap.color, f"{label}.color")

        for index, overlay in enumerate(self.overlays):
            label = f"overlays[{index}]"
            _require_window(overlay.start_time, overlay.end_time, label)
            if overlay.style not in OVERLAY_STYLE_NAMES:
                raise SceneValidationError(
                    f"{label}.style must be one of {sorted(OVERLAY_STYLE_NAMES)}, "
                    f"got {overlay.style!r}."
                )

        for index, track in enumerate(self.audio_tracks):
            label = f"audio_tracks[{index}]"
            if not track.src.strip():
                raise SceneValidationError(f"{label}.src must be non-empty.")
            _require_finite(track.start_offset, f"{label}.start_offset")
            if track.start_offset < 0.0:
                raise SceneValidationError(f"{label}.start_offset cannot be negative.")
            _require_unit(track.volume, f"{label}.volume")
            if track.duration is not None:
                _require_finite(track.duration, f"{label}.duration")
                if track.duration <= 0.0:
                    raise SceneValidationError(f"{label}.duration must be positive.")

    def _validate_zoom_overlap(self) -> None:
        ordered = sorted(
            enumerate(self.zoom_points), key=lambda item: item[1].start_time
        )
        for (prev_index, previous), (next_index, current) in zip(ordered, ordered[1:]):
            if to_frame(current.start_time, self.fps) < to_frame(previous.end_time, self.fps):
                raise SceneValidationError(
                    f"zoom_points[{prev_index}] and zoom_points[{next_index}] overlap "
                    f"([{previous.start_time}, {previous.end_time}) vs "
                    f"[{current.start_time}, {current.end_time})); "
                    "zoom windows must not overlap."
                )

    @staticmethod
    def from_dict(record: Mapping[str, Any]) -> Scene:
        """Builds a validated scene from upstream JSON data.

        Keys may be camelCase (``startTime``) or snake_case (``start_time``).
        ``durationInFrames`` may be replaced by ``durationSeconds``; when both
        are missing the duration covers the last timed element.

        Raises:
            SceneValidationError: If required fields are missing or malformed,
                or if any timing invariant is violated.
        """
        fps = _read_number(record, "scene", "fps", default=30.0)
        if not math.isfinite(fps) or fps <= 0:
            raise SceneValidationError(f"fps must be a positive finite number, got {fps}.")
        segments = tuple(
            Segment(
                text=_read_text(item, label, "text"),
                start_time=_read_number(item, label, "startTime", "start_time"),
                end_time=_read_number(item, label, "endTime", "end_time"),
                topic=_read_optional_text(item, "topic"),
            )
            for label, item in _records(record, "segments")
        )
        zoom_points = tuple(
            ZoomPoint(
                start_time=_read_number(item, label, "startTime", "start_time"),
                end_time=_read_number(item, label, "endTime", "end_time"),
                scale=_read_number(item, label, "scale"),
                anchor_x=_read_number(item, label, "anchorX", "anchor_x", default=0.5),
                anchor_y=_read_number(item, label, "anchorY", "anchor_y", default=0.5),
            )
            for label, item in _records(record, "zoomPoints", "zoom_points")
        )
        tap_points = tuple(
            TapPoint(
                time=_read_number(item, label, "time"),
                x=_read_number(item, label, "x"),
                y=_read_number(item, label, "y"),
                color=_read_optional_text(item, "color"),
            )
            for label, item in _records(record, "tapPoints", "tap_points")
        )
        overlays = tuple(
            Overlay(
                text=_read_text(item, label, "text"),
                start_time=_read_number(item, label, "startTime", "start_time"),
                end_time=_read_number(item, label, "endTime", "end_time"),
                style=cast(OverlayStyleName, _read_text(item, label, "style")),
            )
            for label, item in _records(record, "overlays")
        )
        audio_tracks = _read_audio_tracks(record)
        background = _read_background(record)

        duration_in_frames = _read_duration(
            record, fps, (*segments, *zoom_points, *overlays), tap_points
        )
        scene = Scene(
            fps=fps,
            duration_in_frames=duration_in_frames,
            width=int(_read_number(record, "scene", "width", default=1080)),
            height=int(_read_number(record, "scene", "height", default=1920)),
            seed=_read_optional_text(record, "seed") or "default",
            segments=segments,
            zoom_points=zoom_points,
            tap_points=tap_points,
            overlays=overlays,
            audio_tracks=audio_tracks,
            background=background,
            symbol_content=_read_optional_text(record, "symbolContent", "symbol_content"),
            brand=(_read_optional_text(record, "brand") or CONTEXT_CONFIG.default_brand)
            .strip()
            .lower(),
        )
        logger.info(
            "Scene validated: %s frames @ %s fps, %s segments, %s zoom windows, "
            "%s taps, %s overlays.",
            scene.duration_in_frames,
            scene.fps,
            len(scene.segments),
            len(scene.zoom_points),
            len(scene.tap_points),
            len(scene.overlays),
        )
        return scene


def _lookup(record: Mapping[str, Any], names: Sequence[str]) -> Any:
    for name in names:
        if name in record and record[name] is not None:
            return record[name]
    return None


def _read_number(
    record: Mapping[str, Any],
    label: str,
    *names: str,
    default: float | None = None,
) -> float:
    raw = _lookup(record, names)
    if raw is None:
        if default is not None:
            return float(default)
        raise SceneValidationError(f"{label} is missing required field {names[0]!r}.")
    if isinstance(raw, bool) or not isinstance(raw, int | float):
        raise SceneValidationError(
            f"{label}.{names[0]} must be a number, got {type(raw).__name__}."
        )
    return float(raw)


def _read_text(record: Mapping[str, Any], label: str, *names: str) -> str:
    raw = _lookup(record, names)
    if not isinstance(raw, str):
        raise SceneValidationError(f"{label} is missing required text field {names[0]!r}.")
    return raw


def _read_optional_text(record: Mapping[str, Any], *names: str) -> str | None:
    raw = _lookup(record, names)
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return None


def _records(
    record: Mapping[str, Any], *names: str
) -> Iterable[tuple[str, Mapping[str, Any]]]:
    raw = _lookup(record, names)
    if raw is None:
        return []
    if not isinstance(raw, list | tuple):
        raise SceneValidationError(f"{names[0]} must be a list.")
    items: list[tuple[str, Mapping[str, Any]]] = []
    for index, item in enumerate(raw):
        label = f"{names[0]}[{index}]"
        if not isinstance(item, Mapping):
            raise SceneValidationError(f"{label} must be an object.")
        items.append((label, item))
    return items


def _read_audio_tracks(record: Mapping[str, Any]) -> tuple[AudioTrack, ...]:
    tracks: list[AudioTrack] = []
    voice = _lookup(record, ("voiceTrack", "voice_track"))
    if isinstance(voice, Mapping):
        duration = _lookup(voice, ("duration",))
        tracks.append(
            AudioTrack(
                name="voice",
                src=_read_text(voice, "voiceTrack", "src"),
                start_offset=_read_number(
                    voice, "voiceTrack", "startOffset", "start_offset", default=0.0
                ),
                volume=AUDIO_CONFIG.voice_volume,
                duration=None if duration is None else _read_number(voice, "voiceTrack", "duration"),
            )
        )
    music = _lookup(record, ("musicTrack", "music_track"))
    if isinstance(music, Mapping):
        tracks.append(
            AudioTrack(
                name="music",
                src=_read_text(music, "musicTrack", "src"),
                volume=AUDIO_CONFIG.music_volume,
            )
        )
    return tuple(tracks)


def _read_background(record: Mapping[str, Any]) -> BackgroundSpec:
    raw = _lookup(record, ("background",))
    if raw is None:
        return BackgroundSpec()
    if not isinstance(raw, Mapping):
        raise SceneValidationError("background must be an object.")
    defaults = BackgroundSpec()
    animation = _read_optional_text(raw, "animationType", "animation") or defaults.animation
    if animation not in BACKGROUND_ANIMATIONS:
        raise SceneValidationError(f"Unknown background animation {animation!r}.")
    show_stars = _lookup(raw, ("showStars", "show_stars"))
    gradient = _lookup(raw, ("gradientColors", "gradient_colors"))
    background_color = _read_optional_text(raw, "backgroundColor", "background_color")
    gradient_end = _read_optional_text(raw, "gradientEndColor", "gradient_end_color")
    if isinstance(gradient, list | tuple) and gradient:
        background_color = str(gradient[0])
        if len(gradient) > 1:
            gradient_end = str(gradient[1])
    return BackgroundSpec(
        animation=cast(BackgroundAnimation, animation),
        show_stars=defaults.show_stars if show_stars is None else bool(show_stars),
        overlay_mode=bool(_lookup(raw, ("overlayMode", "overlay_mode")) or False),
        background_color=background_color or defaults.background_color,
        gradient_end_color=gradient_end or defaults.gradient_end_color,
        tint_color=_read_optional_text(raw, "particleTintColor", "tint_color"),
    )


def _read_duration(
    record: Mapping[str, Any],
    fps: float,
    windows: Sequence[Segment | ZoomPoint | Overlay],
    taps: Sequence[TapPoint],
) -> int:
    frames = _lookup(record, ("durationInFrames", "duration_in_frames"))
    if frames is not None:
        return int(_read_number(record, "scene", "durationInFrames", "duration_in_frames"))
    seconds = _lookup(record, ("durationSeconds", "duration_seconds"))
    if seconds is not None:
        return to_frame(
            _read_number(record, "scene", "durationSeconds", "duration_seconds"), fps
        )
    ends = [window.end_time for window in windows] + [tap.time for tap in taps]
    if not ends:
        raise SceneValidationError(
            "scene needs durationInFrames, durationSeconds, or at least one timed element."
        )
    return max(1, int(math.ceil(max(ends) * fps)))
