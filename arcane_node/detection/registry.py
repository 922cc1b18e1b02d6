"""Pattern registry — ordered matchers that recognise entity mentions.

Every matcher exposes the same small surface:

    rule_id   — stable identifier, used in logs
    category  — "Character" | "Place" | "Item" | "Organization"
    hint      — GenerationHint for novel entities, or None
    match(text) -> Iterable[Span]

Priority is the matcher's position in REGISTRY. More specific constructs come
first so that a span is claimed by its most specific reading:

    named individuals      "Gareth the guard", "Captain Aldric Vane"
    named establishments   "the Silver Stag Inn", "the Rusty Anchor Tavern"
    categorized landmarks  "the Moonwell Temple", "the Thieves Guild Hall"
    landmarks section      bullet items under a "Landmarks:" header
    shops                  "Mirela's Shop"
    generic places         "Copper Street", "Thieves Guild"
    list-style places      a line reading "Old Harbor Road"
    items                  "Frost Blade", "Amulet" phrases
    organizations          "the Silver Order", "the Thieves Guild"

"the Thieves Guild Hall" therefore resolves to the Guild Hall landmark: it is
registered ahead of both the generic "Guild" place and the "Guild"
organization, and the deduplicator drops the later overlapping spans.

Names are matched case-sensitively (capitalized words). Occupations,
place suffixes and a leading "the" are matched case-insensitively.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator
from typing import NamedTuple, Protocol

from arcane_node.models import EntityCategory, GenerationHint


class Span(NamedTuple):
    """One recognised substring: offsets into the source, matched text, canonical name."""

    start: int
    end: int
    text: str
    name: str


class Matcher(Protocol):
    rule_id: str
    category: EntityCategory
    hint: GenerationHint | None

    def match(self, text: str) -> Iterable[Span]: ...


NameExtractor = Callable[[re.Match[str]], str]


def _joined(match: re.Match[str]) -> str:
    """Name from the captured name plus the captured suffix word(s)."""
    return f"{match.group(1)} {match.group(2)}"


def _first_group(match: re.Match[str]) -> str:
    return match.group(1)


def _with_suffix(suffix: str) -> NameExtractor:
    def extract(match: re.Match[str]) -> str:
        return f"{match.group(1)} {suffix}"
    return extract


# ---------------------------------------------------------------------------
# RegexMatcher — one textual rule plus a name extractor
# ---------------------------------------------------------------------------

class RegexMatcher:
    """Regex-backed matcher.

    The pattern is compiled on first use, so a malformed rule only fails when
    it is scanned and the scanner can skip it.
    """

    def __init__(
        self,
        rule_id: str,
        pattern: str,
        category: EntityCategory,
        name_extractor: NameExtractor = _joined,
        hint: GenerationHint | None = None,
        flags: int = 0,
    ) -> None:
        self.rule_id = rule_id
        self.pattern = pattern
        self.category = category
        self.name_extractor = name_extractor
        self.hint = hint
        self._flags = flags
        self._compiled: re.Pattern[str] | None = None

    def _regex(self) -> re.Pattern[str]:
        if self._compiled is None:
            self._compiled = re.compile(self.pattern, self._flags)
        return self._compiled

    def match(self, text: str) -> Iterator[Span]:
        for m in self._regex().finditer(text):
            yield Span(m.start(), m.end(), m.group(0), self.name_extractor(m))

    def __repr__(self) -> str:
        return f"RegexMatcher({self.rule_id!r})"


# ---------------------------------------------------------------------------
# Structured scans
# ---------------------------------------------------------------------------

DEFAULT_LIST_STOP_WORDS: tuple[str, ...] = (
    "Using",
    "Secret",
    "Role",
    "Quirk",
    "Location",
    "Notable",
    "Landmarks",
    "Government",
    "Atmosphere",
    "Problem",
)

# [^\S\n] is whitespace without newlines, so a match never spans two lines.
_LIST_LINE = re.compile(
    r"^[^\S\n]*(?:[•\-*][^\S\n]*)*([A-Z][a-z]+(?:[^\S\n]+[A-Z][a-z]+){1,3})[^\S\n]*$",
    re.MULTILINE,
)


class ListLocationMatcher:
    """Short capitalized lines (2-4 words, optionally bulleted) read as place names.

    Lines containing a stop word are section labels, not places.
    """

    rule_id = "list-location"
    category: EntityCategory = "Place"

    def __init__(self, stop_words: Iterable[str] = DEFAULT_LIST_STOP_WORDS) -> None:
        self.stop_words = tuple(stop_words)
        self.hint = GenerationHint(forge_type="town")

    def match(self, text: str) -> Iterator[Span]:
        for m in _LIST_LINE.finditer(text):
            candidate = m.group(1)
            if any(word in candidate for word in self.stop_words):
                continue
            yield Span(m.start(1), m.end(1), candidate, candidate)


_LANDMARK_SECTION = re.compile(
    r"\bLandmarks?[:\s]*(.*?)(?=\n[A-Z][^:\n]*:|\Z)",
    re.IGNORECASE | re.DOTALL,
)
_LANDMARK_BULLET = re.compile(r"[•*\-][^\S\n]*((?:The[^\S\n]+)?[A-Z][^,\n]+?)(?=[^\S\n]*,)")


class LandmarkSectionMatcher:
    """Bullet items inside a "Landmarks:" section, each up to its first comma.

        Landmarks:
        • The Sunken Bell, a drowned chapel...
        • Widow's Reach, cliffside lookout...
    """

    rule_id = "landmark-section"
    category: EntityCategory = "Place"

    def __init__(self) -> None:
        self.hint = GenerationHint(forge_type="landmark")

    def match(self, text: str) -> Iterator[Span]:
        for section in _LANDMARK_SECTION.finditer(text):
            body = section.group(1)
            base = section.start(1)
            for bullet in _LANDMARK_BULLET.finditer(body):
                raw = bullet.group(1)
                landmark = raw.strip()
                start = base + bullet.start(1) + raw.index(landmark)
                yield Span(start, start + len(landmark), landmark, landmark)


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------

# Horizontal whitespace only, so no match spans two lines.
_SP = r"[^\S\n]+"
# One or two capitalized words, e.g. "Silver Stag".
_NAME = rf"([A-Z][a-z]+(?:{_SP}[A-Z][a-z]+)?)"
_OPT_THE = rf"(?:(?i:the){_SP})?"

_OCCUPATIONS = (
    "guard|herbalist|blacksmith|merchant|innkeeper|captain|leader|master|wizard|"
    "priest|healer|scholar|hunter|farmer|baker|brewer|tailor|cobbler|smith|scribe|"
    "mage|warrior|thief|assassin|bard|ranger|monk|paladin|cleric|druid|warlock|"
    "sorcerer|rogue|fighter|barbarian|artificer"
)
_TITLES = "Captain|Lord|Lady|Sir|Princess|Prince|King|Queen|Baron|Dame|Master|Doctor"


def _landmark(rule_id: str, suffixes: str, subtype: str) -> RegexMatcher:
    return RegexMatcher(
        rule_id,
        rf"\b{_OPT_THE}{_NAME}{_SP}((?i:{suffixes}))\b",
        "Place",
        hint=GenerationHint(forge_type="landmark", subtype=subtype),
    )


CHARACTER_MATCHERS: tuple[Matcher, ...] = (
    RegexMatcher(
        "character-occupation",
        rf"\b([A-Z][a-z]+){_SP}(?i:the){_SP}(?i:{_OCCUPATIONS})\b",
        "Character",
        name_extractor=_first_group,
        hint=GenerationHint(forge_type="hero"),
    ),
    RegexMatcher(
        "character-titled",
        rf"\b({_TITLES}){_SP}{_NAME}\b",
        "Character",
        hint=GenerationHint(forge_type="hero"),
    ),
)

ESTABLISHMENT_MATCHERS: tuple[Matcher, ...] = (
    RegexMatcher(
        "inn",
        rf"\b{_OPT_THE}{_NAME}{_SP}(?i:inn)\b",
        "Place",
        name_extractor=_with_suffix("Inn"),
        hint=GenerationHint(forge_type="inn"),
    ),
    RegexMatcher(
        "tavern",
        rf"\b{_OPT_THE}{_NAME}{_SP}(?i:tavern)\b",
        "Place",
        name_extractor=_with_suffix("Tavern"),
        hint=GenerationHint(forge_type="tavern"),
    ),
)

LANDMARK_MATCHERS: tuple[Matcher, ...] = (
    _landmark("landmark-library", "Library|Archives", "Library"),
    _landmark("landmark-temple", "Temple|Shrine|Cathedral|Chapel", "Temple"),
    _landmark("landmark-pier", "Pier|Dock|Harbor|Wharf", "Pier"),
    _landmark("landmark-market", "Market|Plaza|Square|Bazaar", "Market"),
    RegexMatcher(
        "landmark-guild-hall",
        rf"\b{_OPT_THE}{_NAME}{_SP}(?i:guild{_SP}hall)\b",
        "Place",
        name_extractor=_with_suffix("Guild Hall"),
        hint=GenerationHint(forge_type="landmark", subtype="Guild Hall"),
    ),
    _landmark("landmark-council", r"Council[^\S\n]+Chambers?|Chambers?", "Council Chambers"),
    _landmark("landmark-keep", "Keep|Castle|Fortress|Citadel", "Keep"),
    _landmark("landmark-arena", "Arena|Colosseum|Amphitheater", "Arena"),
    _landmark("landmark-cemetery", "Cemetery|Graveyard|Crypt|Mausoleum", "Cemetery"),
    _landmark("landmark-barracks", "Barracks|Armory|Garrison", "Barracks"),
    _landmark("landmark-theater", r"Theater|Theatre|Playhouse|Opera[^\S\n]+House", "Theater"),
    RegexMatcher(
        "landmark-tower",
        rf"\b{_OPT_THE}{_NAME}{_SP}(?i:tower)\b",
        "Place",
        name_extractor=_with_suffix("Tower"),
        hint=GenerationHint(forge_type="landmark", subtype="Tower"),
    ),
)

SHOP_MATCHERS: tuple[Matcher, ...] = (
    RegexMatcher(
        "shop",
        rf"\b{_OPT_THE}{_NAME}{_SP}(?i:shop)\b",
        "Place",
        name_extractor=_with_suffix("Shop"),
        hint=GenerationHint(forge_type="shop"),
    ),
)

GENERIC_PLACE_MATCHERS: tuple[Matcher, ...] = (
    RegexMatcher(
        "place-generic",
        rf"\b{_OPT_THE}{_NAME}{_SP}((?i:guild|hall|street|district|quarter|ward|alley))\b",
        "Place",
        hint=GenerationHint(forge_type="town"),
    ),
)

ITEM_MATCHERS: tuple[Matcher, ...] = (
    RegexMatcher(
        "item",
        rf"\b{_NAME}{_SP}((?i:specs|blade|sword|mirror|prism|glass|amulet|ring|staff|wand|"
        r"orb|tome|scroll|potion|shield|armor|bow|dagger|hammer|spear))\b",
        "Item",
        hint=GenerationHint(forge_type="item"),
    ),
)

ORGANIZATION_MATCHERS: tuple[Matcher, ...] = (
    RegexMatcher(
        "organization",
        rf"\b(?i:the){_SP}{_NAME}{_SP}((?i:guild|council|order|brotherhood|sisterhood|society|"
        r"cult|faction|alliance|clan|tribe))\b",
        "Organization",
        hint=GenerationHint(forge_type="guild"),
    ),
)


def build_registry(list_stop_words: Iterable[str] = DEFAULT_LIST_STOP_WORDS) -> tuple[Matcher, ...]:
    """Return the full matcher table in priority order."""
    return (
        *CHARACTER_MATCHERS,
        *ESTABLISHMENT_MATCHERS,
        *LANDMARK_MATCHERS,
        LandmarkSectionMatcher(),
        *SHOP_MATCHERS,
        *GENERIC_PLACE_MATCHERS,
        ListLocationMatcher(list_stop_words),
        *ITEM_MATCHERS,
        *ORGANIZATION_MATCHERS,
    )


REGISTRY: tuple[Matcher, ...] = build_registry()
