"""Deterministic pseudo-random values derived from string seeds.

The formulas below are part of the rendering contract: any worker, in any
process, must derive identical star layouts and colour cycles from the same
seed. Do not swap them for ``random`` or numpy generators.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Final

from vce.animation.easing import interpolate

PRNG_ANGLE_SCALE: Final[float] = 9999.0
PRNG_MAGNITUDE: Final[float] = 10000.0


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def seed_hash(seed: str) -> int:
    """Hashes a string to a non-negative integer (31-multiplier, 32-bit wrap).

    Code units are UTF-16, so seeds with astral-plane characters hash the
    same way a UTF-16 string runtime would.
    """
    encoded = seed.encode("utf-16-le")
    hashed = 0
    for offset in range(0, len(encoded), 2):
        code_unit = encoded[offset] | (encoded[offset + 1] << 8)
        hashed = _to_int32((hashed << 5) - hashed + code_unit)
    return abs(hashed)


def seeded_random(value: float) -> float:
    """Sine hash of a numeric seed, in ``[0, 1)``."""
    x = math.sin(value * PRNG_ANGLE_SCALE) * PRNG_MAGNITUDE
    return x - math.floor(x)


def prng(seed: str, index: int) -> float:
    """Returns the deterministic value in ``[0, 1)`` for ``(seed, index)``."""
    return seeded_random(seed_hash(seed) + index)


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    """Parses ``#RRGGBB`` into an RGB triple."""
    value = color.strip().lstrip("#")
    if len(value) != 6:
        raise ValueError(f"Expected a #RRGGBB colour, got {color!r}.")
    return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))


def cycle_color(
    frame: int,
    fps: float,
    palette: Sequence[str],
    period_seconds: float,
) -> tuple[int, int, int]:
    """Blends slowly around ``palette``, one full loop per ``period_seconds``.

    Each hop between neighbouring colours is eased with a sine in-out curve.
    """
    if not palette:
        raise ValueError("palette must contain at least one colour.")
    period_frames = max(1, int(round(period_seconds * fps)))
    progress = (frame % period_frames) / period_frames
    position = progress * len(palette)
    index = int(math.floor(position)) % len(palette)
    next_index = (index + 1) % len(palette)
    blend = interpolate(
        position - math.floor(position), [0.0, 1.0], [0.0, 1.0], easing="sine-in-out"
    )

    current = hex_to_rgb(palette[index])
    upcoming = hex_to_rgb(palette[next_index])
    red, green, blue = (
        int(math.floor(a + (b - a) * blend + 0.5)) for a, b in zip(current, upcoming)
    )
    return (red, green, blue)
