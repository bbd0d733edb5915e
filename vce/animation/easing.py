"""Clamped interpolation, named easing curves and closed-form spring physics.

Every function here is pure: the same arguments always produce the same
float, which is what lets frames be evaluated on any worker in any order.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping, Sequence
from typing import Final, TypeAlias

from vce.config import SpringConfig

EasingFunction: TypeAlias = Callable[[float], float]

SPRING_SETTLE_THRESHOLD: Final[float] = 0.005
_MAX_SPRING_SECONDS: Final[float] = 60.0


def linear(t: float) -> float:
    return t


def quad_in(t: float) -> float:
    return t * t


def quad_out(t: float) -> float:
    return t * (2.0 - t)


def cubic_in(t: float) -> float:
    return t * t * t


def cubic_out(t: float) -> float:
    inverse = 1.0 - t
    return 1.0 - inverse * inverse * inverse


def cubic_in_out(t: float) -> float:
    if t < 0.5:
        return 4.0 * t * t * t
    tail = -2.0 * t + 2.0
    return 1.0 - (tail * tail * tail) / 2.0


def sine_in_out(t: float) -> float:
    return -(math.cos(math.pi * t) - 1.0) / 2.0


def cubic_bezier(x1: float, y1: float, x2: float, y2: float) -> EasingFunction:
    """Builds a CSS-style cubic bezier curve through (0, 0) and (1, 1).

    The curve parameter for ``t`` is found by Newton iteration, falling back
    to bisection where the slope is too flat.

    Raises:
        ValueError: If either x control point lies outside [0, 1].
    """
    if not (0.0 <= x1 <= 1.0 and 0.0 <= x2 <= 1.0):
        raise ValueError(f"Bezier x control points must lie in [0, 1], got {x1}, {x2}.")

    def _axis(p1: float, p2: float, s: float) -> float:
        return ((1.0 - 3.0 * p2 + 3.0 * p1) * s + (3.0 * p2 - 6.0 * p1)) * s * s + 3.0 * p1 * s

    def _slope(p1: float, p2: float, s: float) -> float:
        cubic = 1.0 - 3.0 * p2 + 3.0 * p1
        return 3.0 * cubic * s * s + 2.0 * (3.0 * p2 - 6.0 * p1) * s + 3.0 * p1

    def _solve(t: float) -> float:
        s = t
        for _ in range(8):
            error = _axis(x1, x2, s) - t
            if abs(error) < 1e-7:
                return s
            slope = _slope(x1, x2, s)
            if abs(slope) < 1e-6:
                break
            s -= error / slope
        low, high = 0.0, 1.0
        s = t
        for _ in range(50):
            error = _axis(x1, x2, s) - t
            if abs(error) < 1e-7:
                break
            if error > 0.0:
                high = s
            else:
                low = s
            s = (low + high) / 2.0
        return s

    def _curve(t: float) -> float:
        if t <= 0.0 or t >= 1.0:
            return t
        return _axis(y1, y2, _solve(t))

    return _curve


def in_out(easing: EasingFunction) -> EasingFunction:
    """Mirrors an ease-in curve so it eases both in and out."""

    def _curve(t: float) -> float:
        if t < 0.5:
            return easing(2.0 * t) / 2.0
        return 1.0 - easing(2.0 * (1.0 - t)) / 2.0

    return _curve


ease: Final[EasingFunction] = cubic_bezier(0.42, 0.0, 1.0, 1.0)
ease_in_out: Final[EasingFunction] = in_out(ease)


EASINGS: Final[Mapping[str, EasingFunction]] = {
    "linear": linear,
    "quad-in": quad_in,
    "quad-out": quad_out,
    "cubic-in": cubic_in,
    "cubic-out": cubic_out,
    "cubic-in-out": cubic_in_out,
    "sine-in-out": sine_in_out,
    "ease": ease,
    "ease-in-out": ease_in_out,
}


def resolve_easing(easing: str | EasingFunction | None) -> EasingFunction:
    """Returns an easing callable for a curve name, callable, or ``None``."""
    if easing is None:
        return linear
    if callable(easing):
        return easing
    try:
        return EASINGS[easing]
    except KeyError as err:
        known = ", ".join(sorted(EASINGS))
        raise ValueError(f"Unknown easing {easing!r}; expected one of: {known}.") from err


def _validate_ranges(
    input_range: Sequence[float], output_range: Sequence[float]
) -> None:
    if len(input_range) < 2:
        raise ValueError("input_range must contain at least two values.")
    if len(input_range) != len(output_range):
        raise ValueError(
            "input_range and output_range must have the same length "
            f"({len(input_range)} != {len(output_range)})."
        )
    for previous, current in zip(input_range, input_range[1:]):
        if not current > previous:
            raise ValueError(
                f"input_range must be strictly increasing, got {list(input_range)}."
            )


def _segment_index(x: float, input_range: Sequence[float]) -> int:
    index = 1
    while index < len(input_range) - 1:
        if input_range[index] >= x:
            break
        index += 1
    return index - 1


def interpolate(
    x: float,
    input_range: Sequence[float],
    output_range: Sequence[float],
    *,
    clamp_left: bool = False,
    clamp_right: bool = False,
    easing: str | EasingFunction | None = None,
) -> float:
    """Maps ``x`` piecewise-linearly from ``input_range`` onto ``output_range``.

    Args:
        x: Value to map, typically a frame index or a normalised progress.
        input_range: Strictly increasing breakpoints (two or more).
        output_range: Output values for each breakpoint.
        clamp_left: Hold ``output_range[0]`` below the first breakpoint
            instead of extrapolating.
        clamp_right: Hold ``output_range[-1]`` above the last breakpoint
            instead of extrapolating.
        easing: Curve name from ``EASINGS`` or a callable applied to the
            normalised fraction of the active segment.

    Returns:
        The mapped value.

    Raises:
        ValueError: If ranges are malformed or the easing name is unknown.
    """
    _validate_ranges(input_range, output_range)
    ease = resolve_easing(easing)

    if x <= input_range[0] and clamp_left:
        return float(output_range[0])
    if x >= input_range[-1] and clamp_right:
        return float(output_range[-1])

    index = _segment_index(x, input_range)
    in_min = float(input_range[index])
    in_max = float(input_range[index + 1])
    out_min = float(output_range[index])
    out_max = float(output_range[index + 1])

    fraction = ease((x - in_min) / (in_max - in_min))
    return out_min + fraction * (out_max - out_min)


def _validate_spring(config: SpringConfig) -> None:
    if config.mass <= 0.0:
        raise ValueError("Spring mass must be positive.")
    if config.stiffness <= 0.0:
        raise ValueError("Spring stiffness must be positive.")
    if config.damping < 0.0:
        raise ValueError("Spring damping cannot be negative.")


def _spring_displacement(t: float, delta: float, config: SpringConfig) -> float:
    """Displacement from rest at ``t`` seconds for a spring released at rest."""
    omega = math.sqrt(config.stiffness / config.mass)
    zeta = config.damping / (2.0 * math.sqrt(config.stiffness * config.mass))

    if math.isclose(zeta, 1.0):
        return math.exp(-omega * t) * (delta + omega * delta * t)

    if zeta < 1.0:
        damped_omega = omega * math.sqrt(1.0 - zeta * zeta)
        envelope = math.exp(-zeta * omega * t)
        return envelope * (
            delta * math.cos(damped_omega * t)
            + (zeta * omega * delta / damped_omega) * math.sin(damped_omega * t)
        )

    root = math.sqrt(zeta * zeta - 1.0)
    slow_rate = -omega * (zeta - root)
    fast_rate = -omega * (zeta + root)
    slow_weight = delta * fast_rate / (fast_rate - slow_rate)
    fast_weight = -delta * slow_rate / (fast_rate - slow_rate)
    return slow_weight * math.exp(slow_rate * t) + fast_weight * math.exp(fast_rate * t)


def _settle_bound(t: float, config: SpringConfig) -> float:
    """Upper bound on the relative displacement at ``t`` seconds."""
    omega = math.sqrt(config.stiffness / config.mass)
    zeta = config.damping / (2.0 * math.sqrt(config.stiffness * config.mass))
    if zeta < 1.0 and not math.isclose(zeta, 1.0):
        damped_omega = omega * math.sqrt(1.0 - zeta * zeta)
        amplitude = math.sqrt(1.0 + (zeta * omega / damped_omega) ** 2)
        return amplitude * math.exp(-zeta * omega * t)
    return abs(_spring_displacement(t, 1.0, config))


def measure_spring(
    fps: float,
    config: SpringConfig = SpringConfig(),
    *,
    threshold: float = SPRING_SETTLE_THRESHOLD,
) -> int:
    """Returns the first frame after which the spring stays within ``threshold``.

    The threshold is relative to the travel distance, so the result does not
    depend on ``from``/``to`` values.
    """
    _validate_spring(config)
    if fps <= 0:
        raise ValueError("fps must be positive.")
    max_frames = int(math.ceil(_MAX_SPRING_SECONDS * fps))
    for frame in range(1, max_frames + 1):
        if _settle_bound(frame / fps, config) < threshold:
            return frame
    return max_frames


def spring(
    frame: float,
    fps: float,
    config: SpringConfig = SpringConfig(),
    from_value: float = 0.0,
    to_value: float = 1.0,
    *,
    duration_in_frames: float | None = None,
) -> float:
    """Evaluates a damped spring released at rest from ``from_value``.

    ``frame`` must already be relative to the moment the spring starts;
    frames at or before zero return ``from_value``. With
    ``duration_in_frames`` the spring's time axis is stretched so that it
    settles exactly at that frame.
    """
    _validate_spring(config)
    if fps <= 0:
        raise ValueError("fps must be positive.")
    if frame <= 0:
        return float(from_value)

    effective_frame = float(frame)
    if duration_in_frames is not None:
        if duration_in_frames <= 0:
            raise ValueError("duration_in_frames must be positive.")
        natural = measure_spring(fps, config)
        effective_frame = frame * natural / duration_in_frames

    delta = float(from_value) - float(to_value)
    return float(to_value) + _spring_displacement(effective_frame / fps, delta, config)
