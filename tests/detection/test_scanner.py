"""Tests for the scanner: registry ordering and fail-open matchers."""

import logging

from arcane_node.detection import RegexMatcher, scan
from arcane_node.models import GenerationHint


def test_empty_text():
    assert scan("") == []


def test_no_matches():
    assert scan("nothing capitalized happens here.") == []


def test_occupation_candidate():
    candidates = scan("Gareth the guard")
    assert len(candidates) == 1
    c = candidates[0]
    assert c.name == "Gareth"
    assert c.category == "Character"
    assert c.span == (0, 16)
    assert c.text == "Gareth the guard"
    assert c.generation_hint == GenerationHint(forge_type="hero")


def test_offsets_point_at_source_text():
    text = "They crossed Copper Street to reach the Silver Stag Inn."
    for c in scan(text):
        assert text[c.start_offset:c.end_offset] == c.text


def test_registry_order_beats_text_order():
    text = "The Frost Blade lies in the Moonwell Temple. Gareth the guard keeps it."
    candidates = scan(text)
    names = [c.name for c in candidates]
    assert names == ["Gareth", "Moonwell Temple", "The Frost Blade"]
    assert [c.priority for c in candidates] == [0, 1, 2]


def test_thieves_guild_hall_yields_competing_candidates():
    text = "They met in the Thieves Guild Hall."
    by_name = {c.name: c for c in scan(text)}
    assert "Thieves Guild Hall" in by_name
    hall = by_name["Thieves Guild Hall"]
    assert hall.generation_hint == GenerationHint(forge_type="landmark", subtype="Guild Hall")
    # Landmark rule is scanned before the generic place and the organization rules
    assert hall.priority == 0


def test_custom_matchers():
    matcher = RegexMatcher(
        "ship",
        r"\bthe\s+([A-Z][a-z]+)\s+(Galleon)\b",
        "Place",
        hint=GenerationHint(forge_type="landmark", subtype="Ship"),
    )
    candidates = scan("Aboard the Gullwing Galleon we sailed.", [matcher])
    assert [c.name for c in candidates] == ["Gullwing Galleon"]


# ── Fail-open ──────────────────────────────────────────────


def test_broken_pattern_is_skipped(caplog):
    broken = RegexMatcher("broken", "([A-Z", "Place")
    working = RegexMatcher("street", r"\b([A-Z][a-z]+)\s+(Street)\b", "Place")

    with caplog.at_level(logging.WARNING, logger="arcane_node.detection.scanner"):
        candidates = scan("Down Copper Street.", [broken, working])

    assert [c.name for c in candidates] == ["Copper Street"]
    assert candidates[0].priority == 0
    assert "broken" in caplog.text


def test_failing_extractor_is_skipped(caplog):
    def explode(match):
        raise RuntimeError("extractor blew up")

    bad = RegexMatcher("bad-extractor", r"\b([A-Z][a-z]+)\s+(Street)\b", "Place", name_extractor=explode)
    good = RegexMatcher("item", r"\b([A-Z][a-z]+)\s+(Blade)\b", "Item")

    with caplog.at_level(logging.WARNING):
        candidates = scan("Copper Street hides the Frost Blade.", [bad, good])

    assert [c.name for c in candidates] == ["Frost Blade"]
    assert "bad-extractor" in caplog.text
    assert "extractor blew up" in caplog.text
