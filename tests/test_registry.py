"""Tests for composition registration and rendering."""

import pytest

from vce.runtime.registry import (
    Composition,
    CompositionRegistry,
    UnknownCompositionError,
    default_registry,
    render,
)


def test_default_registry_ships_portrait_and_landscape() -> None:
    registry = default_registry()

    assert registry.ids() == ("landscape", "short-form")
    short_form = registry.get("short-form")
    assert (short_form.width, short_form.height, short_form.fps) == (1080, 1920, 30.0)
    assert (registry.get("landscape").width, registry.get("landscape").height) == (1920, 1080)


def test_unknown_composition_is_reported() -> None:
    with pytest.raises(UnknownCompositionError, match="nope"):
        default_registry().get("nope")
    assert issubclass(UnknownCompositionError, KeyError)


def test_duplicate_registration_is_rejected() -> None:
    registry = CompositionRegistry()
    registry.register(Composition("a", 100, 100, 24.0, 48))

    with pytest.raises(ValueError, match="already registered"):
        registry.register(Composition("a", 100, 100, 24.0, 48))


def test_build_scene_uses_composition_canvas_and_default_length() -> None:
    registry = CompositionRegistry()
    registry.register(
        Composition("clip", 640, 360, 24.0, 96, default_props={"seed": "base"})
    )

    scene = registry.build_scene(
        "clip", {"fps": 60, "segments": [{"text": "hi", "startTime": 0, "endTime": 1}]}
    )

    assert scene.fps == 24.0
    assert (scene.width, scene.height) == (640, 360)
    assert scene.duration_in_frames == 96
    assert scene.seed == "base"


def test_build_scene_keeps_prop_duration(scene_record) -> None:
    scene = default_registry().build_scene("short-form", scene_record)

    assert scene.duration_in_frames == 180


def test_default_props_are_read_only() -> None:
    composition = Composition("x", 10, 10, 30.0, 30, default_props={"seed": "a"})

    with pytest.raises(TypeError):
        composition.default_props["seed"] = "b"


def test_render_evaluates_one_frame(scene_record) -> None:
    state = render("short-form", 12, scene_record)

    assert state.frame == 12
    assert state.caption is not None
