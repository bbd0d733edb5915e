"""Tests for topic classification, outro detection and symbol mapping."""

import pytest

from vce.domain import Segment
from vce.timeline.symbols import (
    ASTRONOMICON_FONT,
    symbols_for_content,
    symbols_for_topic,
)
from vce.timeline.topics import (
    TopicKind,
    classify_text,
    classify_topic,
    detect_outro,
)

FPS = 30.0


@pytest.mark.parametrize(
    ("text", "kind", "label"),
    [
        ("saturn enters aries this week", TopicKind.INGRESS, "saturn enters aries"),
        ("Mars squares Venus tonight", TopicKind.ASPECT, "mars square venus"),
        ("jupiter trines saturn", TopicKind.ASPECT, "jupiter trine saturn"),
        ("the full moon in leo", TopicKind.MOON_PHASE, "full moon in leo"),
        ("a waning crescent rises", TopicKind.MOON_PHASE, "waning crescent"),
        ("venus is bright", TopicKind.PLANET, "venus"),
        ("happy leo season", TopicKind.SIGN, "leo"),
    ],
)
def test_classify_text_labels(text: str, kind: TopicKind, label: str) -> None:
    topic = classify_text(text)

    assert topic is not None
    assert topic.kind is kind
    assert topic.label == label


def test_classify_text_returns_none_without_match() -> None:
    assert classify_text("hello world") is None


def test_earlier_rule_wins_over_earlier_position() -> None:
    topic = classify_text("leo fans, saturn enters aries")

    assert topic is not None
    assert topic.label == "saturn enters aries"


def test_words_only_match_on_boundaries() -> None:
    assert classify_text("marshmallow leopard") is None


def test_classify_topic_uses_context_window() -> None:
    segments = [
        Segment("Saturn enters Aries", 0.0, 2.0),
        Segment("Mars", 20.0, 22.0),
    ]

    assert classify_topic(segments, 30, FPS).label == "saturn enters aries"
    assert classify_topic(segments, 12 * 30, FPS) is None
    assert classify_topic(segments, 21 * 30, FPS).label == "mars"


def test_explicit_segment_topic_is_preferred() -> None:
    segments = [Segment("nothing astrological here", 0.0, 2.0, topic="Venus")]

    topic = classify_topic(segments, 10, FPS)

    assert topic is not None
    assert topic.kind is TopicKind.PLANET
    assert topic.label == "venus"


def test_detect_outro_finds_keywords_in_backward_window() -> None:
    segments = [
        Segment("Saturn enters Aries", 0.0, 2.0),
        Segment("Follow for more", 4.5, 6.0),
    ]

    assert detect_outro(segments, 165, FPS) is True
    assert detect_outro(segments, 30, FPS) is False
    assert detect_outro(segments, 120, FPS) is False


def test_detect_outro_uses_brand() -> None:
    segments = [Segment("Visit Lunary for your chart", 0.0, 2.0)]

    assert detect_outro(segments, 30, FPS, brand="lunary") is True
    assert detect_outro(segments, 30, FPS, brand="other") is False


def test_blank_brand_does_not_match_any_visit() -> None:
    segments = [Segment("Go visit my page now", 0.0, 2.0)]

    assert detect_outro(segments, 30, FPS, brand="") is False
    assert detect_outro(segments, 30, FPS, brand="my page") is True


def test_symbols_for_ingress_combine_planet_and_sign() -> None:
    symbols = symbols_for_topic(classify_text("saturn enters aries"))

    assert symbols.kind == "astronomicon"
    assert symbols.items == ("W", "A")
    assert symbols.asset_refs == (ASTRONOMICON_FONT,)


def test_symbols_for_moon_phase_use_icon() -> None:
    symbols = symbols_for_topic(classify_text("full moon in pisces"))

    assert symbols.kind == "moon-icon"
    assert symbols.items == ("icons/moon-phases/full-moon.svg",)
    assert symbols.asset_refs == symbols.items


def test_symbols_for_content() -> None:
    assert symbols_for_content("Sagittarius season").items == ("I",)
    assert symbols_for_content("Life advice") is None
