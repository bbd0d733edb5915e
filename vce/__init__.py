"""Frame-deterministic video composition engine."""

from .runtime import (
    Composition,
    CompositionRegistry,
    default_registry,
    evaluate_frame,
    render,
    render_frames,
)
from .timeline import Scene, SceneValidationError

__version__ = "1.0.0"

__all__ = [
    "Composition",
    "CompositionRegistry",
    "Scene",
    "SceneValidationError",
    "default_registry",
    "evaluate_frame",
    "render",
    "render_frames",
]
