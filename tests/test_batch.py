"""Tests for parallel batch rendering."""

import json
from pathlib import Path

import pytest

from vce.runtime.batch import plan_chunks, render_frames, write_frame_states_jsonl
from vce.runtime.evaluator import evaluate_frame


def test_plan_chunks_deduplicates_and_orders() -> None:
    assert plan_chunks([5, 1, 3, 3], 2) == [[1, 3], [5]]
    assert plan_chunks([], 4) == []
    assert plan_chunks(range(10), 1) == [list(range(10))]


def test_render_frames_returns_frame_order(sample_scene) -> None:
    states = render_frames(sample_scene, [9, 2, 5, 2])

    assert [state.frame for state in states] == [2, 5, 9]
    assert states[1] == evaluate_frame(5, sample_scene)


def test_parallel_render_matches_serial_render(sample_scene) -> None:
    frames = list(range(0, sample_scene.duration_in_frames, 3))

    parallel = render_frames(sample_scene, reversed(frames), workers=2)
    serial = [evaluate_frame(frame, sample_scene) for frame in frames]

    assert parallel == serial


def test_render_frames_propagates_frame_errors(sample_scene) -> None:
    with pytest.raises(ValueError):
        render_frames(sample_scene, [0, sample_scene.duration_in_frames])


def test_render_frames_logs_phase_timing(sample_scene, caplog_info) -> None:
    render_frames(sample_scene, range(3))

    assert "Frame evaluation started." in caplog_info.text
    assert "Frame evaluation completed in" in caplog_info.text


def test_write_frame_states_jsonl(sample_scene, tmp_path: Path) -> None:
    states = render_frames(sample_scene, range(4))
    output = tmp_path / "nested" / "states.jsonl"

    write_frame_states_jsonl(states, output)

    lines = output.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["frame"] for line in lines] == [0, 1, 2, 3]
