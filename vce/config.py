"""Engine constants and environment-backed application settings.

Engine constants are frozen dataclass instances: they define the animation
contract every worker must reproduce, so nothing here is mutated at runtime.
Application settings (asset root, worker count, output folder) come from the
environment and are only consumed by the CLI and batch layer, never by the
frame evaluator itself.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Final


@dataclass(frozen=True)
class SpringConfig:
    """Physical parameters of a damped spring."""

    damping: float = 10.0
    stiffness: float = 100.0
    mass: float = 1.0


@dataclass(frozen=True)
class ZoomConfig:
    """Three-phase zoom window shape (spring-in, hold, ease-out)."""

    spring_in_seconds: float = 0.28
    ease_out_seconds: float = 0.32
    spring: SpringConfig = SpringConfig(damping=14.0, stiffness=170.0, mass=0.8)


@dataclass(frozen=True)
class CaptionConfig:
    """Karaoke word highlighting controls."""

    lead_seconds: float = 0.1
    font_size: int = 64
    vertical_anchor_percent: float = 70.0
    max_words_per_line: int = 4


@dataclass(frozen=True)
class RippleConfig:
    """Tap ripple animation controls."""

    duration_seconds: float = 0.55
    max_radius_px: float = 120.0
    peak_opacity: float = 0.6
    default_color: str = "#FFFFFF"
    dot_spring: SpringConfig = SpringConfig(damping=12.0, stiffness=200.0, mass=0.5)


@dataclass(frozen=True)
class ContextWindowConfig:
    """Time windows used by the topic classifier and outro detector."""

    topic_window_seconds: float = 5.0
    outro_window_seconds: float = 2.0
    default_brand: str = "lunary"


@dataclass(frozen=True)
class AudioConfig:
    """Relative volumes of the handed-off audio tracks."""

    voice_volume: float = 1.0
    music_volume: float = 0.15


@dataclass(frozen=True)
class OverlayFadeConfig:
    """Fade and pop timing shared by text overlays."""

    fade_in_seconds: float = 0.3
    fade_out_seconds: float = 0.3
    pop_spring: SpringConfig = SpringConfig(damping=12.0, stiffness=180.0, mass=0.7)


@dataclass(frozen=True)
class BackgroundConfig:
    """Procedural background controls."""

    star_count: int = 60
    gradient_drift_frames: int = 900
    gradient_drift_from_percent: float = 50.0
    gradient_drift_to_percent: float = 55.0
    color_cycle_seconds: float = 30.0
    pulse_cycle_seconds: float = 12.0
    symbol_fade_in_frames: int = 30
    symbol_opacity: float = 0.25


@dataclass(frozen=True)
class OverlayStyle:
    """Fixed typography for one overlay style."""

    font_size: int
    vertical_anchor_percent: float
    pops_in: bool = False


ZOOM_CONFIG: Final[ZoomConfig] = ZoomConfig()
CAPTION_CONFIG: Final[CaptionConfig] = CaptionConfig()
RIPPLE_CONFIG: Final[RippleConfig] = RippleConfig()
CONTEXT_CONFIG: Final[ContextWindowConfig] = ContextWindowConfig()
AUDIO_CONFIG: Final[AudioConfig] = AudioConfig()
OVERLAY_FADE_CONFIG: Final[OverlayFadeConfig] = OverlayFadeConfig()
BACKGROUND_CONFIG: Final[BackgroundConfig] = BackgroundConfig()

OVERLAY_STYLES: Final[Mapping[str, OverlayStyle]] = {
    "hook": OverlayStyle(font_size=72, vertical_anchor_percent=18.0),
    "cta": OverlayStyle(font_size=64, vertical_anchor_percent=78.0),
    "stamp": OverlayStyle(font_size=56, vertical_anchor_percent=50.0, pops_in=True),
    "chapter": OverlayStyle(font_size=48, vertical_anchor_percent=12.0),
}

# Brand palette
COLORS: Final[Mapping[str, str]] = {
    "cosmic_black": "#0A0A0F",
    "deep_purple": "#1A1033",
}

AURORA_PALETTE: Final[tuple[str, ...]] = (
    "#3DED97",
    "#00E5CC",
    "#4DA6FF",
    "#8458D8",
    "#C77DFF",
    "#EE789E",
)


@dataclass(frozen=True)
class AppConfig:
    """Environment-derived settings for CLI and batch rendering."""

    asset_root: Path
    output_folder: Path
    max_workers: int
    brand: str
    default_composition: str


def _read_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _load_settings() -> AppConfig:
    return AppConfig(
        asset_root=Path(os.getenv("VCE_ASSET_ROOT", "public")),
        output_folder=Path(os.getenv("VCE_OUTPUT_FOLDER", "renders")),
        max_workers=_read_int_env("VCE_WORKERS", os.cpu_count() or 1),
        brand=os.getenv("VCE_BRAND", CONTEXT_CONFIG.default_brand).strip().lower()
        or CONTEXT_CONFIG.default_brand,
        default_composition=os.getenv("VCE_COMPOSITION", "short-form"),
    )


_SETTINGS: AppConfig = _load_settings()


def get_settings() -> AppConfig:
    """Returns the currently loaded application settings."""
    return _SETTINGS


def reload_settings() -> AppConfig:
    """Re-reads settings from the environment and returns them."""
    global _SETTINGS
    _SETTINGS = _load_settings()
    return _SETTINGS
