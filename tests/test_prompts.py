"""Tests for Handlebars prompt rendering: template compilation, context building,
the take helper, and error handling."""

import pytest

from arcane_node.prompts import PromptError, build_context, render_prompt


# ── render_prompt ────────────────────────────────────────────


def test_render_simple_variable():
    result = render_prompt("Hello {{name}}!", {"name": "World"})
    assert result == "Hello World!"


def test_render_each_loop():
    tpl = "{{#each items}}{{this}} {{/each}}"
    result = render_prompt(tpl, {"items": ["a", "b", "c"]})
    assert result == "a b c "


def test_render_if_conditional():
    tpl = "{{#if show}}yes{{else}}no{{/if}}"
    assert render_prompt(tpl, {"show": True}) == "yes"
    assert render_prompt(tpl, {"show": False}) == "no"


def test_render_missing_variable():
    result = render_prompt("Hello {{name}}!", {})
    assert result == "Hello !"


def test_render_triple_stash_keeps_apostrophes():
    assert render_prompt("{{{name}}}", {"name": "Widow's Reach"}) == "Widow's Reach"


def test_render_invalid_template():
    with pytest.raises(PromptError):
        render_prompt("{{> missing_partial}}", {})


# ── take helper ──────────────────────────────────────────────


def test_take_first_n():
    tpl = "{{#take items 2}}{{this}} {{/take}}"
    result = render_prompt(tpl, {"items": ["a", "b", "c", "d"]})
    assert result == "a b "


def test_take_more_than_length():
    tpl = "{{#take items 10}}{{this}} {{/take}}"
    result = render_prompt(tpl, {"items": ["a", "b"]})
    assert result == "a b "


def test_take_with_objects():
    tpl = "{{#take entries 1}}{{title}}{{/take}}"
    result = render_prompt(tpl, {"entries": [{"title": "first"}, {"title": "second"}]})
    assert result == "first"


# ── build_context ────────────────────────────────────────────


def test_build_context_basic():
    campaign = {"id": "sunken-coast", "name": "The Sunken Coast", "description": "Storms."}
    ctx = build_context(campaign, "Gareth", "Character")

    assert ctx["campaign"] == {"name": "The Sunken Coast", "description": "Storms."}
    assert ctx["entity"] == {"name": "Gareth", "category": "Character"}
    assert ctx["existing"] == []
    assert "source_context" not in ctx


def test_build_context_with_subtype_and_source():
    ctx = build_context(
        {"name": "C"},
        "Moonwell Temple",
        "Place",
        subtype="Temple",
        existing_titles=["Gareth"],
        source_context="Priests chant in the Moonwell Temple.",
    )
    assert ctx["entity"]["subtype"] == "Temple"
    assert ctx["existing"] == ["Gareth"]
    assert ctx["source_context"] == "Priests chant in the Moonwell Temple."
    assert ctx["campaign"]["description"] == ""


def test_context_renders_in_template():
    tpl = "{{{campaign.name}}}: {{{entity.name}}}{{#if entity.subtype}} ({{entity.subtype}}){{/if}}"
    ctx = build_context({"name": "Coast"}, "Moonwell Temple", "Place", subtype="Temple")
    assert render_prompt(tpl, ctx) == "Coast: Moonwell Temple (Temple)"
