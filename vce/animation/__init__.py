"""Pure animation primitives: easing, springs and seeded randomness."""

from .easing import EASINGS, interpolate, measure_spring, resolve_easing, spring
from .prng import cycle_color, hex_to_rgb, prng, seed_hash, seeded_random

__all__ = [
    "EASINGS",
    "cycle_color",
    "hex_to_rgb",
    "interpolate",
    "measure_spring",
    "prng",
    "resolve_easing",
    "seed_hash",
    "seeded_random",
    "spring",
]
