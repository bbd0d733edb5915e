"""Behavior tests for CLI argument dispatch and exit semantics."""

import json
from pathlib import Path
from typing import Any

import pytest

import vce.__main__ as cli


@pytest.fixture
def scene_file(tmp_path: Path, scene_record: dict[str, Any]) -> Path:
    path = tmp_path / "scene.json"
    path.write_text(json.dumps(scene_record), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def cli_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> list[str | int | None]:
    """Keeps CLI runs away from the working tree and records the log level."""
    monkeypatch.setenv("VCE_ASSET_ROOT", str(tmp_path / "no-assets"))
    monkeypatch.setenv("VCE_OUTPUT_FOLDER", str(tmp_path / "renders"))
    monkeypatch.delenv("VCE_COMPOSITION", raising=False)
    configured_levels: list[str | int | None] = []

    def _capture_log_level(level: str | int | None = None) -> int:
        configured_levels.append(level)
        return 0

    monkeypatch.setattr(cli, "configure_logging", _capture_log_level)
    return configured_levels


def test_lists_compositions(run_cli) -> None:
    code, output = run_cli(["compositions"])

    assert code == 0
    assert "short-form: 1080x1920 @ 30 fps, 900 frames" in output
    assert "landscape: 1920x1080 @ 30 fps, 1800 frames" in output


def test_log_level_flag_is_forwarded(run_cli, cli_env) -> None:
    run_cli(["compositions", "--log-level", "DEBUG"])

    assert cli_env[-1] == "DEBUG"


def test_frame_prints_json_state(run_cli, scene_file: Path, asset_root: Path) -> None:
    code, output = run_cli(
        ["frame", "--scene", str(scene_file), "--frame", "45", "--asset-root", str(asset_root)]
    )

    assert code == 0
    payload = json.loads(output)
    assert payload["frame"] == 45
    assert payload["schema_version"] == "v1"
    assert payload["audio"][0]["resolved_src"] == (asset_root / "audio/voice.mp3").as_posix()


def test_frame_without_asset_root_skips_resolution(run_cli, scene_file: Path) -> None:
    code, output = run_cli(["frame", "--scene", str(scene_file), "--frame", "0"])

    assert code == 0
    assert json.loads(output)["audio"][0]["resolved_src"] is None


def test_frame_out_of_range_exits_with_error(run_cli, scene_file: Path) -> None:
    code, _ = run_cli(["frame", "--scene", str(scene_file), "--frame", "180"])

    assert code == 1


def test_invalid_scene_exits_with_error(run_cli, tmp_path: Path, scene_record) -> None:
    scene_record["segments"][0]["endTime"] = -1.0
    path = tmp_path / "broken.json"
    path.write_text(json.dumps(scene_record), encoding="utf-8")

    code, _ = run_cli(["frame", "--scene", str(path), "--frame", "0"])

    assert code == 1


def test_missing_scene_file_exits_with_error(run_cli, tmp_path: Path) -> None:
    code, _ = run_cli(["frame", "--scene", str(tmp_path / "missing.json"), "--frame", "0"])

    assert code == 1


def test_missing_explicit_asset_root_exits_with_error(
    run_cli, scene_file: Path, tmp_path: Path
) -> None:
    code, _ = run_cli(
        [
            "frame",
            "--scene",
            str(scene_file),
            "--frame",
            "0",
            "--asset-root",
            str(tmp_path / "nowhere"),
        ]
    )

    assert code == 1


def test_props_file_goes_through_composition(run_cli, tmp_path: Path, scene_record) -> None:
    del scene_record["fps"]
    path = tmp_path / "props.json"
    path.write_text(json.dumps(scene_record), encoding="utf-8")

    code, output = run_cli(
        ["frame", "--scene", str(path), "--composition", "landscape", "--frame", "0"]
    )

    assert code == 0
    assert json.loads(output)["time_seconds"] == 0.0


def test_unknown_composition_exits_with_error(run_cli, scene_file: Path) -> None:
    code, _ = run_cli(
        ["frame", "--scene", str(scene_file), "--composition", "square", "--frame", "0"]
    )

    assert code == 1


def test_render_writes_states_and_csv(run_cli, scene_file: Path, tmp_path: Path) -> None:
    output = tmp_path / "out" / "states.jsonl"
    summary = tmp_path / "out" / "summary.csv"

    code, stdout = run_cli(
        [
            "render",
            "--scene",
            str(scene_file),
            "--start",
            "0",
            "--end",
            "10",
            "--workers",
            "1",
            "--output",
            str(output),
            "--csv",
            str(summary),
            "--no-table",
        ]
    )

    assert code == 0
    assert stdout == ""
    frames = [json.loads(line)["frame"] for line in output.read_text().splitlines()]
    assert frames == list(range(10))
    assert len(summary.read_text().splitlines()) == 11


def test_render_defaults_to_output_folder_and_prints_table(
    run_cli, scene_file: Path, tmp_path: Path
) -> None:
    code, stdout = run_cli(
        ["render", "--scene", str(scene_file), "--end", "3", "--workers", "1"]
    )

    assert code == 0
    assert (tmp_path / "renders" / "scene.jsonl").is_file()
    assert "Timecode" in stdout


def test_render_rejects_range_outside_composition(run_cli, scene_file: Path) -> None:
    code, _ = run_cli(["render", "--scene", str(scene_file), "--end", "500"])

    assert code == 1


def test_captions_export(run_cli, scene_file: Path, tmp_path: Path) -> None:
    output = tmp_path / "captions.srt"

    code, _ = run_cli(["captions", "--scene", str(scene_file), "--output", str(output)])

    assert code == 0
    assert output.read_text(encoding="utf-8").startswith("1\n00:00:00,000 --> 00:00:02,500\n")


def test_captions_unknown_format_exits_with_error(run_cli, scene_file: Path, tmp_path: Path) -> None:
    code, _ = run_cli(
        ["captions", "--scene", str(scene_file), "--output", str(tmp_path / "captions.txt")]
    )

    assert code == 1
