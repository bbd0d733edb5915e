"""Zoom/pan scheduling: spring-in, hold, eased-out windows.

For a window ``[start, end)`` the scale springs from 1 to the target over the
first ``spring_in_seconds``, holds, then eases back to 1 with a cubic ease-out
over the final ``ease_out_seconds``. The anchor is fixed for the whole window.
"""

from __future__ import annotations

from collections.abc import Sequence

from vce.animation.easing import cubic_out, interpolate, spring
from vce.config import ZOOM_CONFIG, ZoomConfig
from vce.domain import ZoomPoint
from vce.schema import IDENTITY_ZOOM, ZoomPhase, ZoomState
from vce.utils.frame_clock import to_frame


def active_zoom_point(
    zoom_points: Sequence[ZoomPoint], frame: int, fps: float
) -> ZoomPoint | None:
    """Returns the first zoom point whose window contains ``frame``."""
    for zoom in zoom_points:
        if to_frame(zoom.start_time, fps) <= frame < to_frame(zoom.end_time, fps):
            return zoom
    return None


def zoom_state(
    zoom_points: Sequence[ZoomPoint],
    frame: int,
    fps: float,
    config: ZoomConfig = ZOOM_CONFIG,
) -> ZoomState:
    """Computes the zoom transform at ``frame``; identity outside every window."""
    zoom = active_zoom_point(zoom_points, frame, fps)
    if zoom is None:
        return IDENTITY_ZOOM

    start_frame = to_frame(zoom.start_time, fps)
    end_frame = to_frame(zoom.end_time, fps)
    local_frame = frame - start_frame
    in_frames = max(1, to_frame(config.spring_in_seconds, fps))
    out_frames = max(1, to_frame(config.ease_out_seconds, fps))
    out_start = end_frame - out_frames

    phase: ZoomPhase = "hold"
    scale = zoom.scale
    if local_frame < in_frames:
        phase = "spring-in"
        scale = spring(
            local_frame,
            fps,
            config.spring,
            from_value=1.0,
            to_value=zoom.scale,
            duration_in_frames=in_frames,
        )
    if frame >= out_start:
        # The ease-out releases from whatever the spring-in has reached.
        phase = "ease-out"
        released = interpolate(
            frame,
            [out_start, end_frame],
            [0.0, 1.0],
            clamp_left=True,
            clamp_right=True,
            easing=cubic_out,
        )
        scale = scale + (1.0 - scale) * released

    return ZoomState(
        scale=scale,
        anchor_x_percent=zoom.anchor_x * 100.0,
        anchor_y_percent=zoom.anchor_y * 100.0,
        phase=phase,
    )
