"""Touch ripples: each tap owns a fixed-length, stateless animation."""

from __future__ import annotations

from collections.abc import Sequence

from vce.animation.easing import interpolate, spring
from vce.config import RIPPLE_CONFIG, RippleConfig
from vce.domain import TapPoint
from vce.schema import RippleState
from vce.utils.frame_clock import to_frame


def ripple_state(
    tap: TapPoint,
    frame: int,
    fps: float,
    config: RippleConfig = RIPPLE_CONFIG,
) -> RippleState | None:
    """Returns the ripple drawn for ``tap`` at ``frame``, or ``None`` if idle."""
    start_frame = to_frame(tap.time, fps)
    duration_frames = max(1, to_frame(config.duration_seconds, fps))
    local_frame = frame - start_frame
    if local_frame < 0 or local_frame >= duration_frames:
        return None

    progress = local_frame / duration_frames
    radius = interpolate(
        progress, [0.0, 1.0], [0.0, config.max_radius_px], easing="cubic-out"
    )
    opacity = interpolate(
        progress,
        [0.0, 0.15, 1.0],
        [0.0, config.peak_opacity, 0.0],
        clamp_left=True,
        clamp_right=True,
    )
    dot_scale = spring(local_frame, fps, config.dot_spring, from_value=0.0, to_value=1.0)
    dot_scale *= interpolate(
        progress, [0.6, 1.0], [1.0, 0.0], clamp_left=True, clamp_right=True
    )
    return RippleState(
        x_percent=tap.x * 100.0,
        y_percent=tap.y * 100.0,
        radius_px=radius,
        opacity=opacity,
        dot_scale=dot_scale,
        color=tap.color or config.default_color,
        progress=progress,
    )


def ripple_states(
    taps: Sequence[TapPoint],
    frame: int,
    fps: float,
    config: RippleConfig = RIPPLE_CONFIG,
) -> tuple[RippleState, ...]:
    """Evaluates every tap independently; overlapping ripples are all drawn."""
    states = (ripple_state(tap, frame, fps, config) for tap in taps)
    return tuple(state for state in states if state is not None)
