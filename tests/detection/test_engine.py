"""End-to-end tests for EntityDetector."""

import asyncio

import pytest
from fakes import FakeStore, record

from arcane_node.detection import DetectionError, EntityDetector, RegexMatcher, detect
from arcane_node.models import GenerationHint

STORY = (
    "Gareth the guard waited at the Silver Stag Inn while Captain Aldric Vane "
    "searched Copper Street for the Frost Blade. Rumour said the Silver Order "
    "had hidden it in the Moonwell Temple."
)


def _overlap_free(entities):
    spans = sorted(e.span for e in entities)
    return all(end <= start for (_, end), (start, _) in zip(spans, spans[1:]))


# ── Known vs novel ─────────────────────────────────────────


@pytest.mark.asyncio
async def test_known_entity_links_to_record():
    store = FakeStore(records=[record("Gareth", id="mem-gareth", type="npc")])
    [gareth] = await EntityDetector(store).detect("Gareth the guard", "c1")
    assert gareth.name == "Gareth"
    assert gareth.category == "Character"
    assert gareth.exists_in_store
    assert gareth.store_record_id == "mem-gareth"
    assert gareth.store_record_type == "npc"
    assert gareth.span == (0, 16)


@pytest.mark.asyncio
async def test_same_text_different_campaign_is_novel():
    store = FakeStore(records=[record("Gareth", campaign_id="c1")])
    detector = EntityDetector(store)
    [in_c1] = await detector.detect("Gareth the guard", "c1")
    [in_c2] = await detector.detect("Gareth the guard", "c2")
    assert in_c1.exists_in_store
    assert not in_c2.exists_in_store
    assert in_c2.generation_hint == GenerationHint(forge_type="hero")


@pytest.mark.asyncio
async def test_novel_entities_carry_hints():
    entities = await EntityDetector(FakeStore()).detect(STORY, "c1")
    by_name = {e.name: e for e in entities}
    assert by_name["Silver Stag Inn"].generation_hint.forge_type == "inn"
    assert by_name["Moonwell Temple"].generation_hint == GenerationHint(forge_type="landmark", subtype="Temple")
    assert by_name["Copper Street"].generation_hint.forge_type == "town"
    assert by_name["Frost Blade"].category == "Item"
    assert by_name["Silver Order"].category == "Organization"
    assert all(not e.exists_in_store for e in entities)


# ── Deduplication outcomes ─────────────────────────────────


@pytest.mark.asyncio
async def test_repeated_mention_collapses_to_first():
    text = "Gareth the guard nodded. Later, Gareth the guard left."
    entities = await EntityDetector(FakeStore()).detect(text, "c1")
    assert [e.name for e in entities] == ["Gareth"]
    assert entities[0].span == (0, 16)


@pytest.mark.asyncio
async def test_thieves_guild_hall_resolves_to_landmark():
    text = "They met in the Thieves Guild Hall."
    [hall] = await EntityDetector(FakeStore()).detect(text, "c1")
    assert hall.name == "Thieves Guild Hall"
    assert hall.category == "Place"
    assert hall.text == "the Thieves Guild Hall"
    assert hall.generation_hint == GenerationHint(forge_type="landmark", subtype="Guild Hall")


@pytest.mark.asyncio
async def test_landmarks_section_and_list_lines():
    text = (
        "Landmarks:\n"
        "• The Sunken Bell, a drowned chapel\n"
        "• Widow's Reach, a cliffside lookout\n"
        "Problem: smugglers\n"
        "Saltmarsh Crossing\n"
        "Secret Passage\n"
    )
    entities = await EntityDetector(FakeStore()).detect(text, "c1")
    names = [e.name for e in entities]
    assert names == ["The Sunken Bell", "Widow's Reach", "Saltmarsh Crossing"]
    assert entities[0].generation_hint.forge_type == "landmark"
    assert entities[2].generation_hint.forge_type == "town"


@pytest.mark.asyncio
async def test_output_invariants():
    text = STORY + " Gareth the guard returned to the Silver Stag Inn."
    entities = await EntityDetector(FakeStore()).detect(text, "c1")
    assert entities
    assert _overlap_free(entities)
    names = [e.name.casefold() for e in entities]
    assert len(names) == len(set(names))
    starts = [e.start_offset for e in entities]
    assert starts == sorted(starts)
    for e in entities:
        assert text[e.start_offset:e.end_offset] == e.text


# ── Input handling ─────────────────────────────────────────


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
async def test_blank_text_makes_no_lookups(text):
    store = FakeStore()
    assert await EntityDetector(store).detect(text, "c1") == []
    assert store.calls == []


@pytest.mark.asyncio
async def test_text_without_mentions():
    store = FakeStore()
    assert await EntityDetector(store).detect("it rained all night.", "c1") == []
    assert store.calls == []


@pytest.mark.asyncio
async def test_non_string_text_raises():
    with pytest.raises(DetectionError):
        await EntityDetector(FakeStore()).detect(None, "c1")


@pytest.mark.asyncio
@pytest.mark.parametrize("campaign_id", ["", None])
async def test_missing_campaign_raises(campaign_id):
    store = FakeStore()
    with pytest.raises(DetectionError):
        await EntityDetector(store).detect("Gareth the guard", campaign_id)
    assert store.calls == []


def test_detection_error_is_value_error():
    assert issubclass(DetectionError, ValueError)


# ── Configuration ──────────────────────────────────────────


@pytest.mark.asyncio
async def test_hint_forge_type_is_lowercased():
    matcher = RegexMatcher(
        "ship",
        r"\b([A-Z][a-z]+)\s+(Galleon)\b",
        "Place",
        hint=GenerationHint(forge_type="Landmark", subtype="Ship"),
    )
    [ship] = await EntityDetector(FakeStore(), matchers=[matcher]).detect("Gullwing Galleon", "c1")
    assert ship.generation_hint.forge_type == "landmark"
    assert ship.generation_hint.subtype == "Ship"


@pytest.mark.asyncio
async def test_failing_store_still_returns_all_entities():
    store = FakeStore(records=[record("Silver Stag Inn", type="tavern")], failing=["Gareth"])
    entities = await EntityDetector(store).detect("Gareth the guard drank at the Silver Stag Inn.", "c1")
    assert [(e.name, e.exists_in_store) for e in entities] == [
        ("Gareth", False),
        ("Silver Stag Inn", True),
    ]


@pytest.mark.asyncio
async def test_module_level_detect():
    store = FakeStore(records=[record("Gareth")])
    [gareth] = await detect("Gareth the guard", "c1", store)
    assert gareth.exists_in_store


@pytest.mark.asyncio
async def test_concurrent_calls_are_independent():
    store = FakeStore(records=[record("Gareth", campaign_id="c1"), record("Mirela", campaign_id="c2")])
    detector = EntityDetector(store)
    a, b = await asyncio.gather(
        detector.detect("Gareth the guard met Mirela the herbalist.", "c1"),
        detector.detect("Gareth the guard met Mirela the herbalist.", "c2"),
    )
    assert [(e.name, e.exists_in_store) for e in a] == [("Gareth", True), ("Mirela", False)]
    assert [(e.name, e.exists_in_store) for e in b] == [("Gareth", False), ("Mirela", True)]


# ── Line boundaries ────────────────────────────────────────


@pytest.mark.asyncio
async def test_names_do_not_join_across_lines():
    entities = await EntityDetector(FakeStore()).detect("Hidden Vault\nCopper Street\n", "c1")
    assert [e.name for e in entities] == ["Hidden Vault", "Copper Street"]
    assert entities[1].generation_hint.forge_type == "town"


@pytest.mark.asyncio
async def test_list_line_keeps_its_own_line():
    # "Old Harbor" on the second line is a harbor landmark, ranked above the list scan
    entities = await EntityDetector(FakeStore()).detect("Hidden Vault\nOld Harbor Road\n", "c1")
    assert [e.name for e in entities] == ["Hidden Vault", "Old Harbor"]
    assert all("\n" not in e.text for e in entities)
