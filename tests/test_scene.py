"""Tests for scene validation and loading."""

import pickle

import pytest

from vce.config import COLORS
from vce.domain import BackgroundSpec, Overlay, Segment, TapPoint, ZoomPoint
from vce.timeline.scene import Scene, SceneValidationError


def _scene(**kwargs) -> Scene:
    return Scene(fps=30.0, duration_in_frames=300, **kwargs)


def test_valid_scene_is_frozen_and_picklable() -> None:
    scene = _scene(segments=[Segment("hello", 0.0, 1.0)])

    assert isinstance(scene.segments, tuple)
    assert scene.duration_seconds == pytest.approx(10.0)
    assert pickle.loads(pickle.dumps(scene)) == scene
    with pytest.raises(AttributeError):
        scene.fps = 60.0


def test_segment_with_end_before_start_is_rejected() -> None:
    with pytest.raises(SceneValidationError, match=r"segments\[0\]"):
        _scene(segments=[Segment("bad", 5.0, 3.0)])


def test_zero_length_window_is_rejected() -> None:
    with pytest.raises(SceneValidationError):
        _scene(overlays=[Overlay("x", 1.0, 1.0, "hook")])


@pytest.mark.parametrize(
    "zoom",
    [
        ZoomPoint(0.0, 1.0, 0.5),
        ZoomPoint(0.0, 1.0, 1.2, anchor_x=1.5),
        ZoomPoint(0.0, 1.0, 1.2, anchor_y=-0.1),
        ZoomPoint(0.0, float("nan"), 1.2),
    ],
)
def test_invalid_zoom_points_are_rejected(zoom: ZoomPoint) -> None:
    with pytest.raises(SceneValidationError):
        _scene(zoom_points=[zoom])


def test_overlapping_zoom_points_are_rejected() -> None:
    with pytest.raises(SceneValidationError, match="overlap"):
        _scene(zoom_points=[ZoomPoint(0.0, 2.0, 1.2), ZoomPoint(1.5, 3.0, 1.2)])


def test_adjacent_zoom_points_are_accepted() -> None:
    scene = _scene(zoom_points=[ZoomPoint(0.0, 2.0, 1.2), ZoomPoint(2.0, 3.0, 1.1)])

    assert len(scene.zoom_points) == 2


def test_tap_outside_unit_square_is_rejected() -> None:
    with pytest.raises(SceneValidationError, match=r"tap_points\[0\]\.x"):
        _scene(tap_points=[TapPoint(1.0, 1.2, 0.5)])


def test_unknown_overlay_style_is_rejected() -> None:
    with pytest.raises(SceneValidationError, match="style"):
        _scene(overlays=[Overlay("x", 0.0, 1.0, "banner")])


@pytest.mark.parametrize("fps", [0.0, -30.0, float("inf")])
def test_non_positive_fps_is_rejected(fps: float) -> None:
    with pytest.raises(SceneValidationError):
        Scene(fps=fps, duration_in_frames=30)


def test_from_dict_reads_camel_case_record(scene_record) -> None:
    scene = Scene.from_dict(scene_record)

    assert scene.fps == 30.0
    assert scene.duration_in_frames == 180
    assert scene.segments[0] == Segment("Saturn enters Aries this week", 0.0, 2.5)
    assert scene.zoom_points[0].anchor_y == pytest.approx(0.4)
    assert [track.name for track in scene.audio_tracks] == ["voice", "music"]
    assert scene.audio_tracks[0].start_offset == pytest.approx(0.2)
    assert scene.audio_tracks[1].volume == pytest.approx(0.15)
    assert scene.brand == "lunary"


def test_from_dict_reads_snake_case_record() -> None:
    scene = Scene.from_dict(
        {
            "fps": 24,
            "duration_in_frames": 48,
            "segments": [{"text": "hi", "start_time": 0.0, "end_time": 1.0}],
            "background": {"animation": "none", "overlay_mode": True},
        }
    )

    assert scene.duration_in_frames == 48
    assert scene.background.animation == "none"
    assert scene.background.overlay_mode is True


def test_from_dict_derives_duration_from_last_element() -> None:
    scene = Scene.from_dict(
        {"fps": 30, "segments": [{"text": "hi", "startTime": 0.0, "endTime": 2.5}]}
    )

    assert scene.duration_in_frames == 75


def test_from_dict_uses_gradient_colors() -> None:
    scene = Scene.from_dict(
        {
            "fps": 30,
            "durationInFrames": 30,
            "background": {"gradientColors": ["#101010", "#202020", "#303030"]},
        }
    )

    assert scene.background.background_color == "#101010"
    assert scene.background.gradient_end_color == "#202020"


def test_from_dict_reports_missing_fields() -> None:
    with pytest.raises(SceneValidationError, match="startTime"):
        Scene.from_dict({"fps": 30, "segments": [{"text": "hi", "endTime": 1.0}]})


def test_from_dict_rejects_unknown_background_animation() -> None:
    with pytest.raises(SceneValidationError, match="animation"):
        Scene.from_dict(
            {"fps": 30, "durationInFrames": 30, "background": {"animationType": "aurora"}}
        )


def test_from_dict_logs_validation_summary(scene_record, caplog_info) -> None:
    Scene.from_dict(scene_record)

    assert "Scene validated: 180 frames" in caplog_info.text


@pytest.mark.parametrize("brand", ["", "   "])
def test_blank_brand_is_rejected(brand: str) -> None:
    with pytest.raises(SceneValidationError, match="brand"):
        _scene(brand=brand)


def test_background_defaults_use_brand_palette() -> None:
    spec = BackgroundSpec()

    assert spec.background_color == COLORS["cosmic_black"]
    assert spec.gradient_end_color == COLORS["deep_purple"]
