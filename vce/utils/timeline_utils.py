"""
Frame-state table helpers for the command line.

This module condenses rendered frame states into one summary row per frame,
prints them as a colored terminal table, and saves them to CSV.

Functions:
    - build_frame_table: Builds summary rows from frame states.
    - print_frame_table: Prints the summary rows as a table.
    - save_frame_table_to_csv: Saves the summary rows to a CSV file.
    - color_txt: Colorizes a string.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import NamedTuple

from colored import attr, bg, fg
from halo import Halo

from vce.schema import FrameState
from vce.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)

CSV_HEADER: tuple[str, ...] = (
    "Frame",
    "Timecode",
    "Zoom",
    "Caption",
    "Active Word",
    "Topic",
    "Overlays",
    "Ripples",
    "CTA",
)


class FrameSummary(NamedTuple):
    frame: int
    timecode: str
    zoom: str
    caption: str
    active_word: str
    topic: str
    overlays: str
    ripples: int
    cta: bool


def summarize_frame(state: FrameState) -> FrameSummary:
    """Condenses one frame state into a printable row."""
    caption = state.caption
    active_word = ""
    if caption is not None and caption.active_word_index is not None:
        active_word = caption.words[caption.active_word_index].word
    return FrameSummary(
        frame=state.frame,
        timecode=state.timecode,
        zoom=f"{state.zoom.scale:.3f}",
        caption=caption.text if caption is not None else "",
        active_word=active_word,
        topic=state.topic or "",
        overlays=", ".join(overlay.style for overlay in state.overlays),
        ripples=len(state.ripples),
        cta=state.cta_active,
    )


def build_frame_table(states: Sequence[FrameState]) -> list[FrameSummary]:
    logger.debug("Building frame table from %s states.", len(states))
    return [summarize_frame(state) for state in states]


def color_txt(string: str, fg_color: str, bg_color: str, padding: int = 0) -> str:
    """
    Colorizes a string.

    Arguments:
        string (str): String to be colorized.
        fg_color (str): Foreground color.
        bg_color (str): Background color.
        padding (int): Minimum width the string is padded to.

    Returns:
        str: Colorized string.
    """
    if padding:
        string = string.ljust(padding)

    return f"{fg(fg_color)}{bg(bg_color)}{string}{attr('reset')}"


def print_frame_table(rows: Sequence[FrameSummary]) -> None:
    """Prints summary rows with a colored header."""
    if not rows:
        logger.info("No frames to print.")
        return

    columns = list(zip(*((str(value) for value in row) for row in rows)))
    widths = [
        max(len(header), *(len(value) for value in column))
        for header, column in zip(CSV_HEADER, columns)
    ]
    header_colors = ("green", "green", "yellow", "blue", "blue", "magenta", "cyan", "cyan", "red")

    for header, width, color in zip(CSV_HEADER, widths, header_colors):
        print(color_txt(header, "black", color, width + 1), end="")
    print()
    for row in rows:
        print(
            " ".join(str(value).ljust(width) for value, width in zip(row, widths)).rstrip()
        )


def save_frame_table_to_csv(rows: Sequence[FrameSummary], file_name: Path) -> Path:
    """
    Saves the summary rows to a CSV file.

    Arguments:
        rows (Sequence[FrameSummary]): Rows to save.
        file_name (Path): Destination file; parent folders are created.

    Returns:
        Path: The path to the saved CSV file.
    """
    logger.info("Starting to save frame table to CSV.")
    file_name.parent.mkdir(parents=True, exist_ok=True)

    with Halo(text=f"Saving frame table to {file_name}", spinner="dots", text_color="green"):
        with open(file_name, mode="w", newline="", encoding="utf-8") as file:
            writer = csv.writer(file)
            writer.writerow(CSV_HEADER)
            for row in rows:
                writer.writerow(row)

    logger.info("Frame table successfully saved to %s", file_name)
    return file_name
