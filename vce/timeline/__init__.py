from .scene import Scene, SceneValidationError
from .symbols import SymbolSet, symbols_for_content, symbols_for_topic
from .topics import Topic, TopicKind, classify_text, classify_topic, detect_outro
from .word_timing import active_word_index, split_word_timings

__all__ = [
    "Scene",
    "SceneValidationError",
    "SymbolSet",
    "Topic",
    "TopicKind",
    "active_word_index",
    "classify_text",
    "classify_topic",
    "detect_outro",
    "split_word_timings",
    "symbols_for_content",
    "symbols_for_topic",
]
