"""Procedural background: drifting gradient, twinkling stars and meteors.

Every star and meteor is derived from ``seeded_random`` by index, so the
layout depends only on ``(seed, duration, fps)`` and any worker rebuilds it
identically. The layouts are cached per key; the cache is a pure
memoization and never changes what a frame looks like.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Final

from vce.animation.easing import interpolate
from vce.animation.prng import seed_hash, seeded_random
from vce.config import BACKGROUND_CONFIG, BackgroundConfig
from vce.domain import BackgroundSpec
from vce.schema import BackgroundState, ShootingStarState, StarState

# (head, tail) colours of burning meteors.
METEOR_COLORS: Final[tuple[tuple[str, str], ...]] = (
    ("#fff4e0", "rgba(255, 200, 120, 0.4)"),
    ("#e8f4ff", "rgba(180, 210, 255, 0.4)"),
    ("#ffe8d0", "rgba(255, 180, 100, 0.35)"),
    ("#f0e8ff", "rgba(200, 170, 255, 0.35)"),
    ("#ffe0d8", "rgba(255, 160, 130, 0.35)"),
    ("#ffffff", "rgba(255, 255, 255, 0.4)"),
    ("#ffffff", "rgba(255, 255, 255, 0.35)"),
)

STAR_SEED_STRIDE: Final[int] = 5
METEOR_SEED_STRIDE: Final[int] = 9


@dataclass(frozen=True)
class StarSpec:
    x_percent: float
    y_percent: float
    base_size_px: float
    delay_frames: int
    twinkle_hz: float


@dataclass(frozen=True)
class MeteorSpec:
    start_x_percent: float
    start_y_percent: float
    angle_degrees: float
    speed: float
    thickness_px: float
    trail_multiplier: float
    color_index: int
    start_frame: int
    duration_frames: int


@lru_cache(maxsize=64)
def star_layout(seed: str, count: int) -> tuple[StarSpec, ...]:
    """Returns the fixed star positions for ``seed``."""
    hashed = seed_hash(seed)
    stars = []
    for index in range(count):
        base = hashed + index * STAR_SEED_STRIDE
        stars.append(
            StarSpec(
                x_percent=seeded_random(base) * 100.0,
                y_percent=seeded_random(base + 1) * 100.0,
                base_size_px=2.0 + seeded_random(base + 2) * 2.0,
                delay_frames=math.floor(seeded_random(base + 3) * 100),
                twinkle_hz=0.08 + seeded_random(base + 4) * 0.12,
            )
        )
    return tuple(stars)


def _meteor_entry(base: int) -> tuple[float, float, float]:
    entry = math.floor(seeded_random(base + 1) * 3)
    if entry == 0:
        # From the top edge, heading down-right or down-left.
        x = 5.0 + seeded_random(base + 2) * 90.0
        y = -2.0 + seeded_random(base + 3) * 15.0
        spread = seeded_random(base + 5) * 40.0
        angle = 25.0 + spread if seeded_random(base + 4) > 0.5 else 115.0 + spread
    elif entry == 1:
        x = -2.0 + seeded_random(base + 2) * 10.0
        y = 10.0 + seeded_random(base + 3) * 50.0
        angle = -15.0 + seeded_random(base + 5) * 50.0
    else:
        x = 92.0 + seeded_random(base + 2) * 10.0
        y = 5.0 + seeded_random(base + 3) * 40.0
        angle = 145.0 + seeded_random(base + 5) * 30.0
    return x, y, angle


@lru_cache(maxsize=64)
def meteor_schedule(
    seed: str, duration_in_frames: int, fps: float
) -> tuple[MeteorSpec, ...]:
    """Schedules meteors every 3-6 seconds, starting 1-2 seconds in.

    The last second of the timeline never starts a meteor.
    """
    hashed = seed_hash(seed)
    duration_seconds = duration_in_frames / fps
    current = 1.0 + seeded_random(hashed + 1)
    meteors = []
    index = 0
    while current < duration_seconds - 1.0:
        base = hashed + index * METEOR_SEED_STRIDE
        x, y, angle = _meteor_entry(base)
        thickness = 0.8 + seeded_random(base + 6) * 1.8
        # Thick meteors are fast and short-lived, thin ones linger.
        weight = (thickness - 0.8) / 1.8
        base_duration = 0.2 + (1.0 - weight) * 0.35
        meteors.append(
            MeteorSpec(
                start_x_percent=x,
                start_y_percent=y,
                angle_degrees=angle,
                speed=2.0 + weight * 2.5 + seeded_random(base + 8) * 0.5,
                thickness_px=thickness,
                trail_multiplier=0.6 + seeded_random(base + 7) * 0.8,
                color_index=math.floor(seeded_random(base) * len(METEOR_COLORS)),
                start_frame=math.floor(current * fps),
                duration_frames=math.floor(
                    (base_duration + seeded_random(base + 9) * 0.1) * fps
                ),
            )
        )
        current += 3.0 + seeded_random(base + 10) * 3.0
        index += 1
    return tuple(meteors)


def star_state(star: StarSpec, frame: int, duration_in_frames: int) -> StarState:
    """Twinkles ``star`` on a cycle aligned to the timeline length so it loops."""
    base_cycle = max(1, math.floor(30 / star.twinkle_hz))
    cycles = max(1, math.floor(duration_in_frames / base_cycle + 0.5))
    cycle_length = max(1, duration_in_frames // cycles)
    progress = ((frame + star.delay_frames) % cycle_length) / cycle_length

    opacity = interpolate(
        progress, [0.0, 0.5, 1.0], [0.3, 0.8, 0.3], clamp_left=True, clamp_right=True
    )
    size = star.base_size_px * interpolate(
        progress, [0.0, 0.5, 1.0], [0.8, 1.2, 0.8], clamp_left=True, clamp_right=True
    )
    return StarState(
        x_percent=star.x_percent,
        y_percent=star.y_percent,
        size_px=size,
        opacity=opacity,
        glow_radius_px=size * 2.0 if opacity > 0.5 else 0.0,
    )


def shooting_star_state(meteor: MeteorSpec, frame: int) -> ShootingStarState | None:
    """Returns the meteor streak at ``frame``, or ``None`` outside its flight."""
    local_frame = frame - meteor.start_frame
    if local_frame < 0 or local_frame > meteor.duration_frames:
        return None

    progress = local_frame / meteor.duration_frames if meteor.duration_frames else 1.0
    head_color, tail_color = METEOR_COLORS[meteor.color_index]
    radians = math.radians(meteor.angle_degrees)
    distance = progress * meteor.speed * meteor.duration_frames
    head_x = meteor.start_x_percent + distance * math.cos(radians)
    head_y = meteor.start_y_percent + distance * math.sin(radians)

    base_trail = 6.0 + meteor.trail_multiplier * 4.0
    trail = interpolate(
        progress,
        [0.0, 0.2, 0.8, 1.0],
        [base_trail * 0.3, base_trail, base_trail, base_trail * 0.3],
        clamp_left=True,
        clamp_right=True,
    )
    # Dim on entry, brightest mid-flight, then burns out.
    intensity = interpolate(
        progress,
        [0.0, 0.15, 0.5, 0.75, 1.0],
        [0.3, 0.7, 1.0, 0.9, 0.0],
        clamp_left=True,
        clamp_right=True,
    )
    return ShootingStarState(
        head_x_percent=head_x,
        head_y_percent=head_y,
        tail_x_percent=head_x - trail * math.cos(radians),
        tail_y_percent=head_y - trail * math.sin(radians),
        thickness_px=meteor.thickness_px,
        intensity=intensity,
        head_color=head_color,
        tail_color=tail_color,
        show_head=intensity > 0.5,
    )


def background_state(
    spec: BackgroundSpec,
    frame: int,
    fps: float,
    duration_in_frames: int,
    seed: str,
    config: BackgroundConfig = BACKGROUND_CONFIG,
) -> BackgroundState:
    """Computes the background layer of ``frame``."""
    gradient_position = interpolate(
        frame,
        [0.0, float(config.gradient_drift_frames)],
        [config.gradient_drift_from_percent, config.gradient_drift_to_percent],
        clamp_left=True,
    )
    stars: tuple[StarState, ...] = ()
    shooting_stars: tuple[ShootingStarState, ...] = ()
    if spec.show_stars and spec.animation == "starfield":
        stars = tuple(
            star_state(star, frame, duration_in_frames)
            for star in star_layout(seed, config.star_count)
        )
        meteors = (
            shooting_star_state(meteor, frame)
            for meteor in meteor_schedule(seed, duration_in_frames, fps)
        )
        shooting_stars = tuple(meteor for meteor in meteors if meteor is not None)

    return BackgroundState(
        animation=spec.animation,
        overlay_mode=spec.overlay_mode,
        gradient_position_percent=gradient_position,
        background_color=spec.background_color,
        gradient_end_color=spec.gradient_end_color,
        stars=stars,
        shooting_stars=shooting_stars,
    )
