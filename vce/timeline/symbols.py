"""Maps topics and free-form content to the glyphs or icons of the symbol overlay.

Content is matched against an ordered rule table. Context phrases come first
since they name the real subject of a video ("saturn return", "fire signs"),
then ranked tiers, planets, signs, numerology, moon phases and tarot suits.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Final, Literal, TypeAlias

from vce.timeline.topics import Topic, TopicKind

SymbolKind: TypeAlias = Literal["astronomicon", "unicode", "number", "moon-icon"]

ASTRONOMICON_FONT: Final[str] = "fonts/Astronomicon.ttf"

# Astronomicon font letter mappings.
ZODIAC_LETTERS: Final[Mapping[str, str]] = {
    "aries": "A",
    "taurus": "B",
    "gemini": "C",
    "cancer": "D",
    "leo": "E",
    "virgo": "F",
    "libra": "G",
    "scorpio": "H",
    "sagittarius": "I",
    "capricorn": "J",
    "aquarius": "K",
    "pisces": "L",
}

PLANET_LETTERS: Final[Mapping[str, str]] = {
    "sun": "Q",
    "moon": "R",
    "mercury": "S",
    "venus": "T",
    "mars": "U",
    "jupiter": "V",
    "saturn": "W",
    "uranus": "X",
    "neptune": "Y",
    "pluto": "Z",
}

ASCENDANT_LETTER: Final[str] = "a"

# Alchemical symbols
FIRE: Final[str] = "\U0001F702"
AIR: Final[str] = "\U0001F701"
EARTH: Final[str] = "\U0001F703"
WATER: Final[str] = "\U0001F704"
CARDINAL: Final[str] = "\U0001F70D"
FIXED: Final[str] = "\U0001F714"
MUTABLE: Final[str] = "\U0001F715"

TAROT_SYMBOLS: Final[Mapping[str, str]] = {
    "wands": FIRE,
    "cups": WATER,
    "swords": AIR,
    "pentacles": EARTH,
}

# Icon file names keep the upstream "cresent" spelling.
MOON_PHASE_ICONS: Final[Mapping[str, str]] = {
    "new moon": "icons/moon-phases/new-moon.svg",
    "waxing crescent": "icons/moon-phases/waxing-cresent-moon.svg",
    "first quarter": "icons/moon-phases/first-quarter.svg",
    "waxing gibbous": "icons/moon-phases/waxing-gibbous-moon.svg",
    "full moon": "icons/moon-phases/full-moon.svg",
    "waning gibbous": "icons/moon-phases/waning-gibbous-moon.svg",
    "last quarter": "icons/moon-phases/last-quarter.svg",
    "waning crescent": "icons/moon-phases/waning-cresent-moon.svg",
}

MAX_TIER_SYMBOLS: Final[int] = 4
MAX_FOCUS_SIGNS: Final[int] = 3

_NUMEROLOGY_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(?:life path|angel number|master number)\s+(\d+)", re.IGNORECASE
)
_TIER_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"S tier[:\s]+([^.]+)", re.IGNORECASE),
    re.compile(r"A tier[:\s]+([^.]+)", re.IGNORECASE),
)


@dataclass(frozen=True)
class SymbolSet:
    """Glyph letters, unicode symbols, a number or icon asset paths to draw."""

    kind: SymbolKind
    items: tuple[str, ...]

    @property
    def asset_refs(self) -> tuple[str, ...]:
        """Asset references that must resolve before the overlay can render."""
        if self.kind == "moon-icon":
            return self.items
        if self.kind == "astronomicon":
            return (ASTRONOMICON_FONT,)
        return ()


def _astro(*letters: str) -> SymbolSet:
    return SymbolSet(kind="astronomicon", items=letters)


def _glyph(symbol: str) -> SymbolSet:
    return SymbolSet(kind="unicode", items=(symbol,))


def _moon(phase: str) -> SymbolSet:
    return SymbolSet(kind="moon-icon", items=(MOON_PHASE_ICONS[phase],))


_RANKED_SIGNS = _astro(
    ZODIAC_LETTERS["aries"], ZODIAC_LETTERS["leo"], ZODIAC_LETTERS["sagittarius"]
)
_SUN = PLANET_LETTERS["sun"]
_PHASE_PRIORITY = (
    "full moon",
    "new moon",
    "waxing crescent",
    "first quarter",
    "waxing gibbous",
    "waning gibbous",
    "last quarter",
    "waning crescent",
)

# Ordered: the first phrase contained in the content wins.
CONTEXT_PHRASES: Final[tuple[tuple[str, SymbolSet], ...]] = (
    *((phase, _moon(phase)) for phase in _PHASE_PRIORITY),
    ("ranking signs", _RANKED_SIGNS),
    ("ranking the signs", _RANKED_SIGNS),
    ("rank the signs", _RANKED_SIGNS),
    ("tier list", _RANKED_SIGNS),
    ("sun signs vs rising", _astro(_SUN, ASCENDANT_LETTER)),
    ("sun sign vs rising", _astro(_SUN, ASCENDANT_LETTER)),
    ("rising signs vs sun", _astro(ASCENDANT_LETTER, _SUN)),
    ("rising sign vs sun", _astro(ASCENDANT_LETTER, _SUN)),
    ("sun sign", _astro(_SUN)),
    ("rising sign", _astro(ASCENDANT_LETTER)),
    ("ascendant", _astro(ASCENDANT_LETTER)),
    *(
        (f"{name} {suffix}", _glyph(symbol))
        for name, symbol in (("cardinal", CARDINAL), ("fixed", FIXED), ("mutable", MUTABLE))
        for suffix in ("sign", "energy")
    ),
    *(
        (f"{name} {suffix}", _glyph(symbol))
        for name, symbol in (("fire", FIRE), ("earth", EARTH), ("air", AIR), ("water", WATER))
        for suffix in ("sign", "element")
    ),
    ("solar return", _astro(_SUN)),
    ("moon sign", _astro(PLANET_LETTERS["moon"])),
    ("lunar", _astro(PLANET_LETTERS["moon"])),
    ("mercury retrograde", _astro(PLANET_LETTERS["mercury"])),
    ("mercury return", _astro(PLANET_LETTERS["mercury"])),
    ("venus retrograde", _astro(PLANET_LETTERS["venus"])),
    ("venus return", _astro(PLANET_LETTERS["venus"])),
    ("mars retrograde", _astro(PLANET_LETTERS["mars"])),
    ("mars return", _astro(PLANET_LETTERS["mars"])),
    ("jupiter transit", _astro(PLANET_LETTERS["jupiter"])),
    ("jupiter return", _astro(PLANET_LETTERS["jupiter"])),
    ("saturn return", _astro(PLANET_LETTERS["saturn"])),
    ("saturn transit", _astro(PLANET_LETTERS["saturn"])),
)


def _context_phrase(content: str, lowered: str) -> SymbolSet | None:
    for phrase, symbols in CONTEXT_PHRASES:
        if phrase in lowered:
            return symbols
    return None


def _ranked_tiers(content: str, lowered: str) -> SymbolSet | None:
    """Top-tier (S and A) signs of a ranking video, at most four."""
    if "tier" not in lowered and "ranking" not in lowered:
        return None
    tiers = (pattern.search(content) for pattern in _TIER_PATTERNS)
    top_tier = " ".join(match.group(1) for match in tiers if match is not None).lower()
    letters = [letter for sign, letter in ZODIAC_LETTERS.items() if sign in top_tier]
    if not letters:
        return None
    return _astro(*letters[:MAX_TIER_SYMBOLS])


def _planets(content: str, lowered: str) -> SymbolSet | None:
    letters = [letter for planet, letter in PLANET_LETTERS.items() if planet in lowered]
    return _astro(*letters) if letters else None


def _focus_signs(content: str, lowered: str) -> SymbolSet | None:
    """Signs named in the content; more than three reads as a list, not a focus."""
    letters = [letter for sign, letter in ZODIAC_LETTERS.items() if sign in lowered]
    if not 0 < len(letters) <= MAX_FOCUS_SIGNS:
        return None
    return _astro(*letters)


def _numerology(content: str, lowered: str) -> SymbolSet | None:
    match = _NUMEROLOGY_PATTERN.search(content)
    if match is None:
        return None
    return SymbolSet(kind="number", items=(match.group(1),))


def _moon_phase(content: str, lowered: str) -> SymbolSet | None:
    for phase in MOON_PHASE_ICONS:
        if phase in lowered:
            return _moon(phase)
    return None


def _tarot_suit(content: str, lowered: str) -> SymbolSet | None:
    for suit, symbol in TAROT_SYMBOLS.items():
        if suit in lowered:
            return _glyph(symbol)
    return None


CONTENT_RULES: Final[tuple[Callable[[str, str], SymbolSet | None], ...]] = (
    _context_phrase,
    _ranked_tiers,
    _planets,
    _focus_signs,
    _numerology,
    _moon_phase,
    _tarot_suit,
)


def symbols_for_topic(topic: Topic) -> SymbolSet:
    """Returns the symbol set drawn for ``topic``."""
    if topic.kind is TopicKind.MOON_PHASE and topic.phase is not None:
        return _moon(topic.phase)

    letters: list[str] = [PLANET_LETTERS[planet] for planet in topic.planets]
    if topic.sign is not None:
        letters.append(ZODIAC_LETTERS[topic.sign])
    return SymbolSet(kind="astronomicon", items=tuple(letters))


def symbols_for_content(content: str) -> SymbolSet | None:
    """Extracts the symbol set for free-form content such as a title.

    Rules are tried in ``CONTENT_RULES`` order and matching is plain
    substring search on the lower-cased content.

    Returns:
        The first rule's symbol set, or ``None`` when no rule matches.
    """
    lowered = content.lower()
    for rule in CONTENT_RULES:
        symbols = rule(content, lowered)
        if symbols is not None:
            return symbols
    return None
