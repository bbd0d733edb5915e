"""Phase-oriented timing and logging helpers for batch rendering."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from time import perf_counter
from typing import Final

PHASE_RENDER_TOTAL: Final[str] = "render_total"
PHASE_ASSET_INDEX: Final[str] = "asset_index"
PHASE_FRAME_EVALUATION: Final[str] = "frame_evaluation"
PHASE_STATE_OUTPUT: Final[str] = "state_output"

PHASE_LABELS: Final[Mapping[str, str]] = {
    PHASE_RENDER_TOTAL: "Render job",
    PHASE_ASSET_INDEX: "Asset indexing",
    PHASE_FRAME_EVALUATION: "Frame evaluation",
    PHASE_STATE_OUTPUT: "Frame state output",
}


def phase_label(phase_name: str) -> str:
    """Returns a human-readable label for one phase identifier."""
    label = PHASE_LABELS.get(phase_name)
    if label is not None:
        return label
    fallback = phase_name.strip().replace("_", " ")
    if not fallback:
        return "Render step"
    return fallback[0].upper() + fallback[1:]


def format_duration(duration_seconds: float) -> str:
    """Formats duration in a human-readable style for CLI logs."""
    total_milliseconds = max(0, int(round(duration_seconds * 1000.0)))
    if total_milliseconds <= 0:
        return "<1ms"

    total_seconds, milliseconds = divmod(total_milliseconds, 1000)
    minutes, seconds = divmod(total_seconds, 60)
    parts: list[str] = []
    if minutes > 0:
        parts.append(f"{minutes}m")
    if seconds > 0 or minutes > 0:
        parts.append(f"{seconds}s")
    if milliseconds > 0:
        parts.append(f"{milliseconds}ms")
    return ", ".join(parts)


def log_phase_started(logger: logging.Logger, *, phase_name: str) -> float:
    """Logs phase start and returns monotonic start timestamp."""
    logger.info("%s started.", phase_label(phase_name))
    return perf_counter()


def log_phase_completed(
    logger: logging.Logger,
    *,
    phase_name: str,
    started_at: float,
    level: int = logging.INFO,
) -> float:
    """Logs phase completion and returns elapsed duration in seconds."""
    elapsed_seconds = perf_counter() - started_at
    logger.log(
        level,
        "%s completed in %s.",
        phase_label(phase_name),
        format_duration(elapsed_seconds),
    )
    return elapsed_seconds


def log_phase_failed(
    logger: logging.Logger,
    *,
    phase_name: str,
    started_at: float,
    level: int = logging.WARNING,
) -> float:
    """Logs phase failure duration and returns elapsed duration in seconds."""
    elapsed_seconds = perf_counter() - started_at
    logger.log(
        level,
        "%s failed after %s.",
        phase_label(phase_name),
        format_duration(elapsed_seconds),
    )
    return elapsed_seconds
