"""
Video Composition Engine (VCE) command line.

Usage:
    vce compositions
    vce frame --scene scene.json --frame 42
    vce render --scene scene.json [--start 0 --end 300] [--workers 4]
        [--output states.jsonl] [--csv summary.csv]
    vce captions --scene scene.json --output captions.srt [--format srt]

A scene file is either a complete scene (it declares ``fps``) or a set of
props for a registered composition, selected with ``--composition`` or the
``VCE_COMPOSITION`` environment variable.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from vce.assets import AssetTable, MissingAssetError
from vce.config import AppConfig, reload_settings
from vce.runtime.batch import render_frames, write_frame_states_jsonl
from vce.runtime.evaluator import evaluate_frame
from vce.runtime.phase_timing import (
    PHASE_RENDER_TOTAL,
    log_phase_completed,
    log_phase_failed,
    log_phase_started,
)
from vce.runtime.registry import UnknownCompositionError, default_registry
from vce.runtime.resource_pool import ResourcePool
from vce.timeline.scene import Scene, SceneValidationError
from vce.utils.logger import configure_logging, get_logger
from vce.utils.subtitles import FORMATTERS, export_captions
from vce.utils.timeline_utils import (
    build_frame_table,
    print_frame_table,
    save_frame_table_to_csv,
)

logger: logging.Logger = get_logger("vce")


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (overrides LOG_LEVEL)",
    )


def _add_scene_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--scene", type=Path, required=True, help="Scene JSON file")
    parser.add_argument(
        "--composition",
        type=str,
        default=None,
        help="Treat the scene file as props for this registered composition",
    )
    parser.add_argument(
        "--asset-root",
        type=Path,
        default=None,
        help="Static asset folder (defaults to VCE_ASSET_ROOT)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vce", description="Frame-deterministic video composition engine"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    compositions = commands.add_parser("compositions", help="List registered compositions")
    _add_common_arguments(compositions)

    frame = commands.add_parser("frame", help="Print the state of one frame as JSON")
    _add_scene_arguments(frame)
    frame.add_argument("--frame", type=int, required=True, help="Frame index")
    _add_common_arguments(frame)

    render = commands.add_parser("render", help="Render a range of frame states")
    _add_scene_arguments(render)
    render.add_argument("--start", type=int, default=0, help="First frame (inclusive)")
    render.add_argument("--end", type=int, default=None, help="Last frame (exclusive)")
    render.add_argument("--workers", type=int, default=None, help="Worker processes")
    render.add_argument("--output", type=Path, default=None, help="JSONL output file")
    render.add_argument("--csv", type=Path, default=None, help="CSV summary file")
    render.add_argument(
        "--no-table",
        action="store_true",
        help="Do not print the frame summary table",
    )
    _add_common_arguments(render)

    captions = commands.add_parser("captions", help="Export captions as subtitles")
    _add_scene_arguments(captions)
    captions.add_argument("--output", type=Path, required=True, help="Subtitle file")
    captions.add_argument(
        "--format",
        dest="subtitle_format",
        choices=tuple(FORMATTERS.keys()),
        default=None,
        help="Subtitle format; inferred from --output when omitted",
    )
    _add_common_arguments(captions)
    return parser


def load_scene(args: argparse.Namespace, settings: AppConfig) -> Scene:
    """Reads the scene file, going through the registry when it holds props."""
    with open(args.scene, encoding="utf-8") as file:
        record: Any = json.load(file)
    if not isinstance(record, dict):
        raise SceneValidationError(f"{args.scene} must contain a JSON object.")
    if args.composition is None and "fps" in record:
        return Scene.from_dict(record)
    composition_id = args.composition or settings.default_composition
    logger.info("Building scene from composition %s.", composition_id)
    return default_registry().build_scene(composition_id, record)


@contextmanager
def _asset_table(
    args: argparse.Namespace, settings: AppConfig, pool: ResourcePool
) -> Iterator[AssetTable | None]:
    root: Path | None = args.asset_root
    if root is None:
        if not settings.asset_root.is_dir():
            logger.warning(
                "Asset root %s not found; asset references will not be resolved.",
                settings.asset_root,
            )
            yield None
            return
        root = settings.asset_root
    with pool.lease(root) as table:
        yield table


def _list_compositions() -> None:
    for composition in default_registry():
        print(
            f"{composition.id}: {composition.width}x{composition.height} "
            f"@ {composition.fps:g} fps, {composition.duration_in_frames} frames"
        )


def _print_frame(args: argparse.Namespace, settings: AppConfig, pool: ResourcePool) -> None:
    scene = load_scene(args, settings)
    with _asset_table(args, settings, pool) as assets:
        state = evaluate_frame(args.frame, scene, assets)
    print(json.dumps(state.to_dict(), indent=2, ensure_ascii=False))


def _render(args: argparse.Namespace, settings: AppConfig, pool: ResourcePool) -> None:
    scene = load_scene(args, settings)
    end = scene.duration_in_frames if args.end is None else args.end
    if not 0 <= args.start < end <= scene.duration_in_frames:
        raise ValueError(
            f"Frame range [{args.start}, {end}) is outside the composition "
            f"[0, {scene.duration_in_frames})."
        )
    workers = args.workers or settings.max_workers
    started_at = log_phase_started(logger, phase_name=PHASE_RENDER_TOTAL)
    try:
        with _asset_table(args, settings, pool) as assets:
            states = render_frames(
                scene, range(args.start, end), workers=workers, assets=assets, show_spinner=True
            )
        output = args.output or settings.output_folder / f"{args.scene.stem}.jsonl"
        write_frame_states_jsonl(states, output)
    except Exception:
        log_phase_failed(logger, phase_name=PHASE_RENDER_TOTAL, started_at=started_at)
        raise
    log_phase_completed(logger, phase_name=PHASE_RENDER_TOTAL, started_at=started_at)

    rows = build_frame_table(states)
    if not args.no_table:
        print_frame_table(rows)
    if args.csv is not None:
        save_frame_table_to_csv(rows, args.csv)


def _export_captions(args: argparse.Namespace, settings: AppConfig) -> None:
    scene = load_scene(args, settings)
    export_captions(scene.segments, scene.fps, args.output, args.subtitle_format)


def main(argv: Sequence[str] | None = None) -> None:
    """
    Main function to handle the command line interface logic.
    """
    load_dotenv()
    args: argparse.Namespace = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    settings = reload_settings()

    if args.command == "compositions":
        _list_compositions()
        return

    try:
        with ResourcePool() as pool:
            if args.command == "frame":
                _print_frame(args, settings, pool)
            elif args.command == "render":
                _render(args, settings, pool)
            else:
                _export_captions(args, settings)
    except (SceneValidationError, UnknownCompositionError, MissingAssetError) as err:
        logger.error("%s", err)
        sys.exit(1)
    except (OSError, ValueError) as err:
        logger.error("%s", err, exc_info=logger.isEnabledFor(logging.DEBUG))
        sys.exit(1)


if __name__ == "__main__":
    main()
