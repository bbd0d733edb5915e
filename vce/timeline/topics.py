"""Topic classification and outro detection over a sliding caption window.

Both detectors are driven by ordered rule tables. Rules are evaluated in
table order and the first one that matches wins; rules are never combined or
re-ranked by specificity.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Final

from vce.config import CONTEXT_CONFIG
from vce.domain import Segment
from vce.utils.frame_clock import to_frame

PLANETS: Final[tuple[str, ...]] = (
    "sun",
    "moon",
    "mercury",
    "venus",
    "mars",
    "jupiter",
    "saturn",
    "uranus",
    "neptune",
    "pluto",
)

SIGNS: Final[tuple[str, ...]] = (
    "aries",
    "taurus",
    "gemini",
    "cancer",
    "leo",
    "virgo",
    "libra",
    "scorpio",
    "sagittarius",
    "capricorn",
    "aquarius",
    "pisces",
)

MOON_PHASES: Final[tuple[str, ...]] = (
    "new moon",
    "waxing crescent",
    "first quarter",
    "waxing gibbous",
    "full moon",
    "waning gibbous",
    "last quarter",
    "waning crescent",
)

# Surface form -> canonical singular aspect.
ASPECT_FORMS: Final[Mapping[str, str]] = {
    "conjunct": "conjunct",
    "conjuncts": "conjunct",
    "conjunction": "conjunct",
    "square": "square",
    "squares": "square",
    "trine": "trine",
    "trines": "trine",
    "sextile": "sextile",
    "sextiles": "sextile",
    "oppose": "oppose",
    "opposes": "oppose",
    "opposite": "oppose",
    "opposition": "oppose",
}


class TopicKind(str, Enum):
    INGRESS = "ingress"
    ASPECT = "aspect"
    MOON_PHASE = "moon_phase"
    PLANET = "planet"
    SIGN = "sign"


@dataclass(frozen=True)
class Topic:
    """Short label describing what is currently being discussed."""

    kind: TopicKind
    label: str
    planets: tuple[str, ...] = ()
    sign: str | None = None
    aspect: str | None = None
    phase: str | None = None


@dataclass(frozen=True)
class TopicRule:
    """One entry of the ordered classifier table."""

    kind: TopicKind
    pattern: re.Pattern[str]
    build: Callable[[re.Match[str]], Topic]


def _alternation(words: Sequence[str]) -> str:
    ordered = sorted(words, key=len, reverse=True)
    return "|".join(re.escape(word) for word in ordered)


_PLANET = _alternation(PLANETS)
_SIGN = _alternation(SIGNS)
_PHASE = _alternation(MOON_PHASES)
_ASPECT = _alternation(tuple(ASPECT_FORMS))


def _ingress(match: re.Match[str]) -> Topic:
    planet, sign = match.group("planet"), match.group("sign")
    return Topic(
        kind=TopicKind.INGRESS,
        label=f"{planet} enters {sign}",
        planets=(planet,),
        sign=sign,
    )


def _aspect(match: re.Match[str]) -> Topic:
    first, second = match.group("first"), match.group("second")
    aspect = ASPECT_FORMS[match.group("aspect")]
    return Topic(
        kind=TopicKind.ASPECT,
        label=f"{first} {aspect} {second}",
        planets=(first, second),
        aspect=aspect,
    )


def _moon_phase(match: re.Match[str]) -> Topic:
    phase, sign = match.group("phase"), match.group("sign")
    return Topic(
        kind=TopicKind.MOON_PHASE,
        label=f"{phase} in {sign}" if sign else phase,
        planets=("moon",),
        sign=sign,
        phase=phase,
    )


def _planet(match: re.Match[str]) -> Topic:
    planet = match.group("planet")
    return Topic(kind=TopicKind.PLANET, label=planet, planets=(planet,))


def _sign(match: re.Match[str]) -> Topic:
    sign = match.group("sign")
    return Topic(kind=TopicKind.SIGN, label=sign, sign=sign)


TOPIC_RULES: Final[tuple[TopicRule, ...]] = (
    TopicRule(
        TopicKind.INGRESS,
        re.compile(rf"\b(?P<planet>{_PLANET})\s+enters\s+(?P<sign>{_SIGN})\b"),
        _ingress,
    ),
    TopicRule(
        TopicKind.ASPECT,
        re.compile(
            rf"\b(?P<first>{_PLANET})\s+(?P<aspect>{_ASPECT})\s+(?P<second>{_PLANET})\b"
        ),
        _aspect,
    ),
    TopicRule(
        TopicKind.MOON_PHASE,
        re.compile(rf"\b(?P<phase>{_PHASE})(?:\s+in\s+(?P<sign>{_SIGN}))?\b"),
        _moon_phase,
    ),
    TopicRule(TopicKind.PLANET, re.compile(rf"\b(?P<planet>{_PLANET})\b"), _planet),
    TopicRule(TopicKind.SIGN, re.compile(rf"\b(?P<sign>{_SIGN})\b"), _sign),
)

OUTRO_KEYWORDS: Final[tuple[str, ...]] = (
    "subscribe",
    "learn more",
    "link in bio",
    "follow for more",
    "download",
    "visit {brand}",
)


def classify_text(
    text: str, rules: Sequence[TopicRule] = TOPIC_RULES
) -> Topic | None:
    """Returns the topic of the first matching rule, or ``None``.

    Within one rule the earliest match in ``text`` is used.
    """
    lowered = text.lower()
    for rule in rules:
        match = rule.pattern.search(lowered)
        if match is not None:
            return rule.build(match)
    return None


def window_text(
    segments: Sequence[Segment],
    frame: int,
    fps: float,
    *,
    before_seconds: float,
    after_seconds: float,
) -> str:
    """Concatenates lower-cased texts of segments intersecting the window."""
    window_start = frame - to_frame(before_seconds, fps)
    window_end = frame + to_frame(after_seconds, fps)
    selected = [
        segment
        for segment in segments
        if to_frame(segment.start_time, fps) <= window_end
        and to_frame(segment.end_time, fps) > window_start
    ]
    selected.sort(key=lambda segment: (segment.start_time, segment.end_time))
    return " ".join(segment.text.strip().lower() for segment in selected)


def classify_topic(
    segments: Sequence[Segment],
    frame: int,
    fps: float,
    *,
    window_seconds: float = CONTEXT_CONFIG.topic_window_seconds,
) -> Topic | None:
    """Classifies what is being discussed at ``frame``.

    An explicit ``topic`` on a segment covering ``frame`` is tried first;
    otherwise the ±``window_seconds`` caption context is classified.
    Returns ``None`` when nothing matches.
    """
    for segment in segments:
        if segment.topic is None:
            continue
        if to_frame(segment.start_time, fps) <= frame < to_frame(segment.end_time, fps):
            explicit = classify_text(segment.topic)
            if explicit is not None:
                return explicit

    text = window_text(
        segments,
        frame,
        fps,
        before_seconds=window_seconds,
        after_seconds=window_seconds,
    )
    if not text:
        return None
    return classify_text(text)


@lru_cache(maxsize=32)
def _outro_patterns(brand: str) -> tuple[re.Pattern[str], ...]:
    """Keyword patterns for ``brand``; brand keywords are dropped when it is blank."""
    return tuple(
        re.compile(r"\b" + re.escape(keyword.format(brand=brand)) + r"\b")
        for keyword in OUTRO_KEYWORDS
        if brand or "{brand}" not in keyword
    )


def detect_outro(
    segments: Sequence[Segment],
    frame: int,
    fps: float,
    *,
    brand: str = CONTEXT_CONFIG.default_brand,
    window_seconds: float = CONTEXT_CONFIG.outro_window_seconds,
) -> bool:
    """Returns whether the last ``window_seconds`` of captions read as an outro."""
    text = window_text(
        segments, frame, fps, before_seconds=window_seconds, after_seconds=0.0
    )
    if not text:
        return False
    return any(
        pattern.search(text) for pattern in _outro_patterns(brand.strip().lower())
    )
