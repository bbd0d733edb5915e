"""Runtime helpers for frame evaluation, compositions and batch rendering."""

from .batch import plan_chunks, render_frames, write_frame_states_jsonl
from .evaluator import audio_track_state, evaluate_frame
from .registry import (
    Composition,
    CompositionRegistry,
    UnknownCompositionError,
    default_registry,
    render,
)
from .resource_pool import ResourcePool, ResourcePoolClosedError

__all__ = [
    "Composition",
    "CompositionRegistry",
    "ResourcePool",
    "ResourcePoolClosedError",
    "UnknownCompositionError",
    "audio_track_state",
    "default_registry",
    "evaluate_frame",
    "plan_chunks",
    "render",
    "render_frames",
    "write_frame_states_jsonl",
]
