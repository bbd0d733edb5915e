"""Composition registry: named canvases that turn props into scenes."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from vce.assets import AssetTable
from vce.runtime.evaluator import evaluate_frame
from vce.schema import FrameState
from vce.timeline.scene import Scene

_DURATION_KEYS: tuple[str, ...] = (
    "durationInFrames",
    "duration_in_frames",
    "durationSeconds",
    "duration_seconds",
)


class UnknownCompositionError(KeyError):
    """Raised when a composition id has not been registered."""


@dataclass(frozen=True)
class Composition:
    """A registered canvas: dimensions, fps, default length and default props."""

    id: str
    width: int
    height: int
    fps: float
    duration_in_frames: int
    default_props: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "default_props", MappingProxyType(dict(self.default_props))
        )


class CompositionRegistry:
    """Holds compositions by id; populated once at start-up, then read-only."""

    def __init__(self) -> None:
        self._compositions: dict[str, Composition] = {}

    def register(self, composition: Composition) -> Composition:
        """Adds ``composition``.

        Raises:
            ValueError: If the id is already registered.
        """
        if composition.id in self._compositions:
            raise ValueError(f"Composition {composition.id!r} is already registered.")
        self._compositions[composition.id] = composition
        return composition

    def get(self, composition_id: str) -> Composition:
        try:
            return self._compositions[composition_id]
        except KeyError as err:
            known = ", ".join(self.ids()) or "none"
            raise UnknownCompositionError(
                f"Unknown composition {composition_id!r} (registered: {known})."
            ) from err

    def ids(self) -> tuple[str, ...]:
        return tuple(sorted(self._compositions))

    def __contains__(self, composition_id: object) -> bool:
        return composition_id in self._compositions

    def __iter__(self) -> Iterator[Composition]:
        return iter(self._compositions[key] for key in self.ids())

    def __len__(self) -> int:
        return len(self._compositions)

    def build_scene(
        self, composition_id: str, props: Mapping[str, Any] | None = None
    ) -> Scene:
        """Merges ``props`` over the composition defaults and validates the result.

        The composition owns fps and canvas size. Props may set their own
        duration; otherwise the composition's default length is used.

        Raises:
            UnknownCompositionError: If ``composition_id`` is not registered.
            SceneValidationError: If the merged props describe an invalid scene.
        """
        composition = self.get(composition_id)
        record: dict[str, Any] = {**composition.default_props, **(props or {})}
        record.update(
            fps=composition.fps,
            width=composition.width,
            height=composition.height,
        )
        if not any(record.get(key) is not None for key in _DURATION_KEYS):
            record["durationInFrames"] = composition.duration_in_frames
        return Scene.from_dict(record)


def default_registry() -> CompositionRegistry:
    """Returns a fresh registry holding the stock portrait and landscape canvases."""
    registry = CompositionRegistry()
    registry.register(
        Composition(
            id="short-form",
            width=1080,
            height=1920,
            fps=30.0,
            duration_in_frames=30 * 30,
            default_props={"background": {"animationType": "starfield", "showStars": True}},
        )
    )
    registry.register(
        Composition(
            id="landscape",
            width=1920,
            height=1080,
            fps=30.0,
            duration_in_frames=30 * 60,
            default_props={"background": {"animationType": "starfield", "showStars": True}},
        )
    )
    return registry


def render(
    composition_id: str,
    frame: int,
    props: Mapping[str, Any] | None = None,
    *,
    registry: CompositionRegistry | None = None,
    assets: AssetTable | None = None,
) -> FrameState:
    """Builds the scene for ``composition_id`` and evaluates one frame of it."""
    registry = registry if registry is not None else default_registry()
    scene = registry.build_scene(composition_id, props)
    return evaluate_frame(frame, scene, assets)
