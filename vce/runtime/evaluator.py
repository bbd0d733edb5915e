"""Frame evaluator: the composition root of the engine.

``evaluate_frame`` is a pure function of ``(frame, scene, assets)``. It reads
no settings, keeps no state between calls and never looks at neighbouring
frames, so frames can be evaluated in any order on any worker.
"""

from __future__ import annotations

import logging

from vce.assets import AssetTable
from vce.domain import AudioTrack
from vce.effects.background import background_state
from vce.effects.overlays import caption_state, overlay_states, symbol_overlay_state
from vce.effects.ripple import ripple_states
from vce.effects.zoom import zoom_state
from vce.schema import OUTPUT_SCHEMA_VERSION, AudioTrackState, FrameState, SymbolSource
from vce.timeline.scene import Scene
from vce.timeline.symbols import symbols_for_content, symbols_for_topic
from vce.timeline.topics import classify_topic, detect_outro
from vce.utils.frame_clock import format_timecode, to_frame, to_seconds
from vce.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)


def audio_track_state(
    track: AudioTrack,
    frame: int,
    fps: float,
    assets: AssetTable | None = None,
) -> AudioTrackState:
    """Reports whether ``track`` is audible at ``frame`` and where its playhead is."""
    start_frame = to_frame(track.start_offset, fps)
    playhead = to_seconds(frame - start_frame, fps)
    active = frame >= start_frame
    if track.duration is not None and playhead >= track.duration:
        active = False
    return AudioTrackState(
        name=track.name,
        src=track.src,
        resolved_src=assets.resolve(track.src) if assets is not None else None,
        active=active,
        playhead_seconds=max(0.0, playhead),
        volume=track.volume,
    )


def evaluate_frame(
    frame: int,
    scene: Scene,
    assets: AssetTable | None = None,
) -> FrameState:
    """Reconstructs the complete visual and audio state of ``frame``.

    Args:
        frame: Absolute frame index in ``[0, scene.duration_in_frames)``.
        scene: Validated scene description.
        assets: Optional asset table. When given, every referenced font,
            icon and audio file is resolved and a missing one fails the frame.

    Returns:
        The frame state in output schema ``v1``.

    Raises:
        ValueError: If ``frame`` is outside the composition.
        MissingAssetError: If a referenced asset is absent from ``assets``.
    """
    if not 0 <= frame < scene.duration_in_frames:
        raise ValueError(
            f"Frame {frame} is outside the composition "
            f"[0, {scene.duration_in_frames})."
        )
    fps = scene.fps
    logger.debug("Evaluating frame %s at %s fps.", frame, fps)

    topic = classify_topic(scene.segments, frame, fps)
    symbols = symbols_for_topic(topic) if topic is not None else None
    source: SymbolSource = "topic"
    if symbols is None and scene.symbol_content:
        symbols = symbols_for_content(scene.symbol_content)
        source = "content"
    symbol = (
        symbol_overlay_state(symbols, frame, fps, assets, source=source)
        if symbols is not None and symbols.items
        else None
    )

    return FrameState(
        schema_version=OUTPUT_SCHEMA_VERSION,
        frame=frame,
        time_seconds=to_seconds(frame, fps),
        timecode=format_timecode(frame, fps),
        background=background_state(
            scene.background, frame, fps, scene.duration_in_frames, scene.seed
        ),
        zoom=zoom_state(scene.zoom_points, frame, fps),
        caption=caption_state(scene.segments, frame, fps),
        overlays=overlay_states(scene.overlays, frame, fps),
        ripples=ripple_states(scene.tap_points, frame, fps),
        topic=topic.label if topic is not None else None,
        topic_kind=topic.kind.value if topic is not None else None,
        symbol=symbol,
        cta_active=detect_outro(scene.segments, frame, fps, brand=scene.brand),
        audio=tuple(
            audio_track_state(track, frame, fps, assets) for track in scene.audio_tracks
        ),
    )
