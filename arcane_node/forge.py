"""Conjure — generate a memory record for a novel entity on demand.

The entity's generation hint picks a forge template; the rendered prompt goes
to the LLM (stage = forge type), the JSON reply is parsed and stored as a
memory entry titled with the entity's name. A record with that title already
in memory is returned as-is instead of generating a duplicate.
"""

import json
import logging
from typing import Any

from arcane_node import storage
from arcane_node.llm import LLM
from arcane_node.models import EntityCategory, GenerationHint
from arcane_node.prompts import build_context, render_prompt

logger = logging.getLogger(__name__)

# Forge used when an entity carries no hint.
CATEGORY_FORGES: dict[str, str] = {
    "Character": "hero",
    "Place": "town",
    "Item": "item",
    "Organization": "guild",
}

# forge type → memory entry type
MEMORY_TYPES: dict[str, str] = {
    "hero": "npc",
    "inn": "tavern",
    "tavern": "tavern",
    "landmark": "location",
    "shop": "shop",
    "town": "location",
    "item": "item",
    "guild": "faction",
}

_PREAMBLE = """You are a worldbuilder for the tabletop campaign "{{{campaign.name}}}".
{{#if campaign.description}}Campaign premise: {{{campaign.description}}}
{{/if}}"""

_EPILOGUE = """
{{#if source_context}}
Context from the text that mentioned it (do not contradict it):
{{{source_context}}}
{{/if}}
{{#if existing}}
Already in this campaign (avoid near-duplicates of these):
{{#take existing 20}}- {{{this}}}
{{/take}}{{/if}}
Return ONLY valid JSON. No markdown."""

FORGE_TEMPLATES: dict[str, str] = {
    "hero": _PREAMBLE + """
Create the character "{{{entity.name}}}" for immediate use at the table.
Output schema:
{"name": "string", "role": "string", "appearance": "string", "personality": "string",
 "quirk": "string", "secret": "string", "hooks": ["string"]}""" + _EPILOGUE,

    "inn": _PREAMBLE + """
Create the inn "{{{entity.name}}}": a standard-quality, medium-sized lodging house.
Output schema:
{"name": "string", "description": "string", "atmosphere": "string",
 "innkeeper": {"name": "string", "personality": "string"},
 "menu": ["string"], "rooms": "string", "rumors": ["string"]}""" + _EPILOGUE,

    "tavern": _PREAMBLE + """
Create the tavern "{{{entity.name}}}": a small, budget drinking hall.
Output schema:
{"name": "string", "description": "string", "atmosphere": "string",
 "owner": {"name": "string", "personality": "string"},
 "drinks": ["string"], "patrons": ["string"], "rumors": ["string"]}""" + _EPILOGUE,

    "landmark": _PREAMBLE + """
Create the landmark "{{{entity.name}}}"{{#if entity.subtype}}, a {{{entity.subtype}}}{{/if}}.
Output schema:
{"name": "string", "type": "string", "description": "string", "atmosphere": "string",
 "notableFeatures": ["string"], "primaryFigure": {"name": "string", "role": "string"},
 "secrets": ["string"], "hooks": ["string"], "history": "string"}""" + _EPILOGUE,

    "shop": _PREAMBLE + """
Create the shop "{{{entity.name}}}".
Output schema:
{"name": "string", "description": "string", "shopkeeper": {"name": "string", "personality": "string"},
 "inventory": [{"item": "string", "price": "string"}], "hooks": ["string"]}""" + _EPILOGUE,

    "town": _PREAMBLE + """
Create the place "{{{entity.name}}}".
Output schema:
{"name": "string", "description": "string", "atmosphere": "string",
 "notablePeople": [{"name": "string", "role": "string"}], "landmarks": ["string"],
 "problem": "string", "hooks": ["string"]}""" + _EPILOGUE,

    "item": _PREAMBLE + """
Create the uncommon magic item "{{{entity.name}}}".
Output schema:
{"name": "string", "type": "string", "rarity": "string", "description": "string",
 "properties": ["string"], "history": "string", "drawback": "string"}""" + _EPILOGUE,

    "guild": _PREAMBLE + """
Create the organization "{{{entity.name}}}".
Output schema:
{"name": "string", "purpose": "string", "leader": {"name": "string", "title": "string"},
 "headquarters": "string", "members": ["string"], "goals": ["string"],
 "secrets": ["string"], "hooks": ["string"]}""" + _EPILOGUE,
}


class ForgeError(ValueError):
    """Raised when a forge reply can't be turned into a memory entry."""


def parse_json_output(text: str) -> dict | None:
    """Parse a JSON object from LLM output, stripping markdown fences."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)
    try:
        data = json.loads(cleaned)
        return data if isinstance(data, dict) else None
    except json.JSONDecodeError as e:
        logger.warning(f"Forge output is not valid JSON: {e}")
        return None


def resolve_forge_type(category: EntityCategory, hint: GenerationHint | None) -> str:
    if hint is not None and hint.forge_type.lower() in FORGE_TEMPLATES:
        return hint.forge_type.lower()
    return CATEGORY_FORGES[category]


async def conjure(
    campaign_id: str,
    name: str,
    category: EntityCategory,
    hint: GenerationHint | None,
    llm: LLM,
    source_context: str | None = None,
) -> dict[str, Any]:
    """Generate and store a memory entry for a novel entity. Returns the entry.

    Retries the LLM once if the first reply isn't a JSON object.
    """
    campaign = storage.get_campaign(campaign_id)
    if campaign is None:
        raise ForgeError(f"Campaign {campaign_id!r} not found")

    existing = storage.find_memory_by_title(campaign_id, name)
    if existing is not None:
        logger.info(f"Conjure skipped: {name!r} already in campaign {campaign_id}")
        return existing

    forge_type = resolve_forge_type(category, hint)
    ctx = build_context(
        campaign,
        name,
        category,
        subtype=hint.subtype if hint else None,
        existing_titles=[e["title"] for e in storage.get_memory(campaign_id) if not e.get("archived")],
        source_context=source_context,
    )
    prompt = render_prompt(FORGE_TEMPLATES[forge_type], ctx)

    data = parse_json_output(await llm(forge_type, prompt))
    if data is None:
        logger.warning(f"Forge {forge_type} returned unusable output for {name!r}, retrying once")
        data = parse_json_output(await llm(forge_type, prompt + "\nYour previous reply was not valid JSON."))
    if data is None:
        raise ForgeError(f"Forge {forge_type} did not return a JSON object for {name!r}")

    # The entity keeps the name it was mentioned by, whatever the model called it
    data["name"] = name
    if hint is not None and hint.subtype and "type" not in data:
        data["type"] = hint.subtype

    return storage.save_memory_entry(
        campaign_id,
        type=MEMORY_TYPES[forge_type],
        title=name,
        content=data,
        forge_type=forge_type,
        tags=[category.lower()],
    )
