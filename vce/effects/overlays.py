"""Text overlays, karaoke captions and the topic symbol overlay."""

from __future__ import annotations

from collections.abc import Sequence

from vce.animation.easing import interpolate, spring
from vce.animation.prng import cycle_color
from vce.assets import AssetTable
from vce.config import (
    AURORA_PALETTE,
    BACKGROUND_CONFIG,
    CAPTION_CONFIG,
    OVERLAY_FADE_CONFIG,
    OVERLAY_STYLES,
    BackgroundConfig,
    CaptionConfig,
    OverlayFadeConfig,
)
from vce.domain import Overlay, Segment, WordTiming
from vce.schema import (
    CaptionState,
    CaptionWordState,
    OverlayState,
    SymbolLayout,
    SymbolOverlayState,
    SymbolSource,
    WordState,
)
from vce.timeline.symbols import SymbolSet
from vce.timeline.word_timing import active_word_index, split_word_timings
from vce.utils.frame_clock import to_frame

GLYPH_BASE_SIZE_PX = 600
ICON_BASE_SIZE_PX = 400
NUMBER_BASE_SIZE_PX = 400
STAMP_POP_FROM_SCALE = 0.6


def overlay_state(
    overlay: Overlay,
    frame: int,
    fps: float,
    config: OverlayFadeConfig = OVERLAY_FADE_CONFIG,
) -> OverlayState | None:
    """Returns the drawn state of ``overlay``, or ``None`` outside its window."""
    start_frame = to_frame(overlay.start_time, fps)
    end_frame = to_frame(overlay.end_time, fps)
    if not start_frame <= frame < end_frame:
        return None

    style = OVERLAY_STYLES[overlay.style]
    fade_in = max(1, to_frame(config.fade_in_seconds, fps))
    fade_out = max(1, to_frame(config.fade_out_seconds, fps))
    opacity = interpolate(
        frame,
        [start_frame, start_frame + fade_in],
        [0.0, 1.0],
        clamp_left=True,
        clamp_right=True,
    ) * interpolate(
        frame,
        [end_frame - fade_out, end_frame],
        [1.0, 0.0],
        clamp_left=True,
        clamp_right=True,
    )
    scale = 1.0
    if style.pops_in:
        scale = spring(
            frame - start_frame,
            fps,
            config.pop_spring,
            from_value=STAMP_POP_FROM_SCALE,
            to_value=1.0,
        )
    return OverlayState(
        text=overlay.text,
        style=overlay.style,
        font_size=style.font_size,
        vertical_anchor_percent=style.vertical_anchor_percent,
        opacity=opacity,
        scale=scale,
    )


def overlay_states(
    overlays: Sequence[Overlay], frame: int, fps: float
) -> tuple[OverlayState, ...]:
    states = (overlay_state(overlay, frame, fps) for overlay in overlays)
    return tuple(state for state in states if state is not None)


def active_segment(
    segments: Sequence[Segment], frame: int, fps: float
) -> Segment | None:
    """Returns the caption segment shown at ``frame``.

    When segments overlap, the most recently started one wins.
    """
    current: Segment | None = None
    current_start = -1
    for segment in segments:
        start_frame = to_frame(segment.start_time, fps)
        if start_frame <= frame < to_frame(segment.end_time, fps):
            if current is None or start_frame >= current_start:
                current, current_start = segment, start_frame
    return current


def _visible_page(
    timings: Sequence[WordTiming], frame: int, active: int | None, page_size: int
) -> int:
    if active is not None:
        return active // page_size
    started = [index for index, timing in enumerate(timings) if timing.start_frame <= frame]
    return started[-1] // page_size if started else 0


def _word_state(index: int, timing: WordTiming, active: int | None, frame: int) -> WordState:
    if index == active:
        return "active"
    if timing.end_frame <= frame or (active is not None and index < active):
        return "spoken"
    return "upcoming"


def caption_state(
    segments: Sequence[Segment],
    frame: int,
    fps: float,
    config: CaptionConfig = CAPTION_CONFIG,
) -> CaptionState | None:
    """Builds the karaoke caption line for ``frame``.

    Long segments are paged ``max_words_per_line`` words at a time; the page
    holding the highlighted word is shown.
    """
    segment = active_segment(segments, frame, fps)
    if segment is None:
        return None
    timings = split_word_timings(segment, fps, lead_seconds=config.lead_seconds)
    if not timings:
        return None

    active = active_word_index(timings, frame)
    page_size = max(1, config.max_words_per_line)
    page = _visible_page(timings, frame, active, page_size)
    first = page * page_size
    visible = timings[first : first + page_size]
    words = tuple(
        CaptionWordState(
            word=timing.word,
            start_frame=timing.start_frame,
            end_frame=timing.end_frame,
            state=_word_state(first + offset, timing, active, frame),
        )
        for offset, timing in enumerate(visible)
    )
    return CaptionState(
        text=" ".join(word.word for word in words),
        words=words,
        active_word_index=None if active is None else active - first,
        font_size=config.font_size,
        vertical_anchor_percent=config.vertical_anchor_percent,
    )


def _symbol_size(kind: str, count: int) -> int:
    if kind == "moon-icon":
        factors = (1.0, 0.6, 0.4)
        base = ICON_BASE_SIZE_PX
    else:
        factors = (1.0, 0.5, 0.35)
        base = NUMBER_BASE_SIZE_PX if kind == "number" else GLYPH_BASE_SIZE_PX
    if count <= 1:
        return base
    if count <= 3:
        return int(round(base * factors[1]))
    return int(round(base * factors[2]))


def _symbol_layout(count: int) -> tuple[SymbolLayout, int]:
    if count <= 1:
        return "single", 0
    if count <= 3:
        return "row", 20
    return "grid", 10


def symbol_overlay_state(
    symbols: SymbolSet,
    frame: int,
    fps: float,
    assets: AssetTable | None = None,
    config: BackgroundConfig = BACKGROUND_CONFIG,
    *,
    source: SymbolSource = "topic",
) -> SymbolOverlayState:
    """Computes the pulsing, colour-cycling symbol overlay at ``frame``.

    Args:
        symbols: Glyphs or icons to draw.
        frame: Absolute frame index; fade, pulse and colour are keyed to it.
        fps: Frames per second of the composition.
        assets: Asset table used to resolve the font or icon files. When
            omitted, nothing is resolved.
        config: Fade, pulse and colour cycle timings.
        source: Whether the symbols follow the classified topic or the
            scene's symbol content.

    Raises:
        MissingAssetError: If a referenced font or icon is not in ``assets``.
    """
    resolved: tuple[str, ...] = ()
    if assets is not None:
        resolved = tuple(assets.resolve(ref) for ref in symbols.asset_refs)

    fade_in = interpolate(
        frame,
        [0.0, float(config.symbol_fade_in_frames)],
        [0.0, 1.0],
        clamp_left=True,
        clamp_right=True,
        easing="ease-in-out",
    )
    pulse_frames = max(1, to_frame(config.pulse_cycle_seconds, fps))
    pulse_progress = (frame % pulse_frames) / pulse_frames
    scale = interpolate(
        pulse_progress, [0.0, 0.5, 1.0], [0.98, 1.02, 0.98], easing="sine-in-out"
    )
    red, green, blue = cycle_color(
        frame, fps, AURORA_PALETTE, config.color_cycle_seconds
    )

    count = len(symbols.items)
    layout, gap = _symbol_layout(count)
    return SymbolOverlayState(
        kind=symbols.kind,
        source=source,
        items=symbols.items,
        resolved_assets=resolved,
        size_px=_symbol_size(symbols.kind, count),
        layout=layout,
        gap_px=gap,
        opacity=config.symbol_opacity * fade_in,
        scale=scale,
        color=f"rgb({red}, {green}, {blue})",
    )
