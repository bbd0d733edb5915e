from .background import background_state
from .overlays import caption_state, overlay_states, symbol_overlay_state
from .ripple import ripple_states
from .zoom import zoom_state

__all__ = [
    "background_state",
    "caption_state",
    "overlay_states",
    "ripple_states",
    "symbol_overlay_state",
    "zoom_state",
]
