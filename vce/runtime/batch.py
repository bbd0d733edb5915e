"""Parallel batch rendering of frame states over worker processes."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ProcessPoolExecutor
from pathlib import Path

import numpy as np
from halo import Halo

from vce.assets import AssetTable
from vce.runtime.evaluator import evaluate_frame
from vce.runtime.phase_timing import (
    PHASE_FRAME_EVALUATION,
    PHASE_STATE_OUTPUT,
    log_phase_completed,
    log_phase_failed,
    log_phase_started,
)
from vce.schema import FrameState
from vce.timeline.scene import Scene
from vce.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)

FRAMES_PER_CHUNK_HINT = 64


def _evaluate_chunk(
    scene: Scene, frames: Sequence[int], assets: AssetTable | None
) -> list[FrameState]:
    return [evaluate_frame(frame, scene, assets) for frame in frames]


def plan_chunks(frames: Iterable[int], workers: int) -> list[list[int]]:
    """Splits a frame set into contiguous, ordered chunks for ``workers``.

    Duplicate indices are evaluated once. Empty input yields no chunks.
    """
    ordered = np.unique(np.fromiter(frames, dtype=np.int64))
    if ordered.size == 0:
        return []
    chunk_count = max(
        1, min(ordered.size, max(workers, ordered.size // FRAMES_PER_CHUNK_HINT))
    )
    return [
        [int(frame) for frame in chunk]
        for chunk in np.array_split(ordered, chunk_count)
        if chunk.size
    ]


def render_frames(
    scene: Scene,
    frames: Iterable[int],
    *,
    workers: int = 1,
    assets: AssetTable | None = None,
    show_spinner: bool = False,
) -> list[FrameState]:
    """Evaluates ``frames`` of ``scene``, in parallel when ``workers > 1``.

    Frames are independent, so chunks may finish in any order; the result is
    always returned sorted by frame index.

    Args:
        scene: Validated scene shipped to every worker.
        frames: Frame indices to evaluate, in any order.
        workers: Number of worker processes. ``1`` evaluates in-process.
        assets: Optional asset table shipped to every worker.
        show_spinner: Whether to show a terminal spinner while rendering.

    Returns:
        One frame state per distinct requested frame, in frame order.

    Raises:
        ValueError: If a frame index is outside the composition.
        MissingAssetError: If a frame references an asset absent from ``assets``.
    """
    chunks = plan_chunks(frames, workers)
    total = sum(len(chunk) for chunk in chunks)
    started_at = log_phase_started(logger, phase_name=PHASE_FRAME_EVALUATION)
    spinner = Halo(
        text=f"Rendering {total} frames on {workers} worker(s)",
        spinner="dots",
        text_color="green",
        enabled=show_spinner,
    )
    spinner.start()
    try:
        if workers <= 1 or len(chunks) <= 1:
            results = [
                state for chunk in chunks for state in _evaluate_chunk(scene, chunk, assets)
            ]
        else:
            with ProcessPoolExecutor(max_workers=workers) as pool:
                futures = [
                    pool.submit(_evaluate_chunk, scene, chunk, assets) for chunk in chunks
                ]
                results = [state for future in futures for state in future.result()]
    except Exception:
        spinner.fail("Rendering failed")
        log_phase_failed(logger, phase_name=PHASE_FRAME_EVALUATION, started_at=started_at)
        raise
    spinner.succeed(f"Rendered {total} frames")
    log_phase_completed(logger, phase_name=PHASE_FRAME_EVALUATION, started_at=started_at)

    results.sort(key=lambda state: state.frame)
    logger.info("Evaluated %s frames in %s chunk(s).", len(results), len(chunks))
    return results


def write_frame_states_jsonl(states: Sequence[FrameState], path: Path) -> Path:
    """Writes one JSON object per frame state, in the given order."""
    started_at = log_phase_started(logger, phase_name=PHASE_STATE_OUTPUT)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, mode="w", encoding="utf-8") as file:
        for state in states:
            file.write(json.dumps(state.to_dict(), ensure_ascii=False))
            file.write("\n")
    log_phase_completed(logger, phase_name=PHASE_STATE_OUTPUT, started_at=started_at)
    logger.info("Frame states saved to %s", path)
    return path
