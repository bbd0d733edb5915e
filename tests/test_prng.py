"""Tests for seeded procedural values and colour cycling."""

import pytest

from vce.animation.prng import (
    cycle_color,
    hex_to_rgb,
    prng,
    seed_hash,
    seeded_random,
)
from vce.config import AURORA_PALETTE


def test_seed_hash_matches_31_multiplier_hash() -> None:
    assert seed_hash("") == 0
    assert seed_hash("a") == 97
    assert seed_hash("ab") == 97 * 31 + 98
    assert seed_hash("hello") == 99162322


def test_seed_hash_wraps_to_32_bits_and_stays_non_negative() -> None:
    value = seed_hash("a much longer seed string that overflows 32 bits")

    assert 0 <= value <= 2**31


def test_prng_is_deterministic_and_in_unit_interval() -> None:
    first = [prng("video-42", index) for index in range(100)]
    second = [prng("video-42", index) for index in range(100)]

    assert first == second
    assert all(0.0 <= value < 1.0 for value in first)


def test_prng_depends_on_seed_and_index() -> None:
    assert prng("a", 0) == seeded_random(97)
    assert prng("a", 1) == seeded_random(98)
    assert prng("a", 0) != prng("b", 0)


def test_hex_to_rgb_parses_and_rejects() -> None:
    assert hex_to_rgb("#0A0A0F") == (10, 10, 15)
    with pytest.raises(ValueError):
        hex_to_rgb("#FFF")


def test_cycle_color_starts_on_first_palette_colour() -> None:
    assert cycle_color(0, 30.0, AURORA_PALETTE, 30.0) == hex_to_rgb(AURORA_PALETTE[0])


def test_cycle_color_loops_every_period() -> None:
    period = 30 * 30

    assert cycle_color(period + 17, 30.0, AURORA_PALETTE, 30.0) == cycle_color(
        17, 30.0, AURORA_PALETTE, 30.0
    )


def test_cycle_color_rejects_empty_palette() -> None:
    with pytest.raises(ValueError):
        cycle_color(0, 30.0, (), 30.0)
