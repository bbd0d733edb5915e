from .frame_clock import format_timecode, to_frame, to_seconds
from .logger import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "format_timecode",
    "get_logger",
    "to_frame",
    "to_seconds",
]
