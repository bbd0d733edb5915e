"""Tests for zoom window scheduling."""

import math

import pytest

from vce.domain import ZoomPoint
from vce.effects.zoom import active_zoom_point, zoom_state
from vce.schema import IDENTITY_ZOOM

FPS = 30.0
ZOOM = ZoomPoint(start_time=0.0, end_time=2.0, scale=1.25, anchor_x=0.5, anchor_y=0.4)


def test_zoom_starts_at_identity_scale() -> None:
    state = zoom_state([ZOOM], 0, FPS)

    assert state.scale == pytest.approx(1.0)
    assert state.phase == "spring-in"


def test_zoom_holds_target_between_phases() -> None:
    state = zoom_state([ZOOM], 15, FPS)

    assert state.scale == pytest.approx(1.25)
    assert state.phase == "hold"
    assert state.anchor_x_percent == pytest.approx(50.0)
    assert state.anchor_y_percent == pytest.approx(40.0)


def test_spring_in_reaches_target_at_its_last_frame() -> None:
    assert zoom_state([ZOOM], 8, FPS).scale == pytest.approx(1.25, abs=0.25 * 0.005)


def test_zoom_eases_back_to_identity_by_last_frame() -> None:
    state = zoom_state([ZOOM], 59, FPS)

    assert state.phase == "ease-out"
    assert state.scale == pytest.approx(1.0, abs=1e-3)


def test_ease_out_decreases_monotonically() -> None:
    scales = [zoom_state([ZOOM], frame, FPS).scale for frame in range(50, 60)]

    assert scales == sorted(scales, reverse=True)


def test_end_frame_is_exclusive() -> None:
    assert zoom_state([ZOOM], 60, FPS) == IDENTITY_ZOOM
    assert zoom_state([ZOOM], 60, FPS).is_identity


def test_short_window_ease_out_releases_spring_in_value() -> None:
    short = ZoomPoint(start_time=0.0, end_time=0.4, scale=1.5)

    middle = zoom_state([short], 5, FPS)
    last = zoom_state([short], 11, FPS)

    assert middle.phase == "ease-out"
    assert math.isfinite(middle.scale)
    assert last.scale == pytest.approx(1.0, abs=0.01)


def test_active_zoom_point_picks_containing_window() -> None:
    later = ZoomPoint(start_time=3.0, end_time=4.0, scale=1.1)

    assert active_zoom_point([ZOOM, later], 95, FPS) == later
    assert active_zoom_point([ZOOM, later], 70, FPS) is None
