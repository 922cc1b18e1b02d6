"""Create demo campaign data for development/testing."""

import shutil

from arcane_node import storage

DEMO_CAMPAIGN = {
    "name": "The Sunken Coast",
    "description": "A drowned kingdom's coastline, where smugglers, priests and "
    "old sea-gods all want what the tide uncovers.",
}

DEMO_MEMORY = [
    {
        "type": "npc",
        "title": "Gareth",
        "forge_type": "hero",
        "content": {
            "name": "Gareth",
            "role": "Harbor guard",
            "personality": "Gruff, tired, quietly honest",
            "secret": "Takes smugglers' coin to look away on moonless nights",
        },
    },
    {
        "type": "tavern",
        "title": "Drowned Lantern Tavern",
        "forge_type": "tavern",
        "content": {
            "name": "Drowned Lantern Tavern",
            "description": "A listing dockside taproom lit by salvaged ship lanterns.",
        },
    },
    {
        "type": "faction",
        "title": "Tidebound Order",
        "forge_type": "guild",
        "content": {
            "name": "Tidebound Order",
            "purpose": "Priests who catalogue what the sea returns",
        },
    },
]

DEMO_TEXT = """Captain Mirela Vance meets the party outside the Drowned Lantern Tavern.
Gareth the guard waves them through while the Tidebound Order watches from the pier.

Landmarks:
• The Sunken Bell, a drowned chapel visible at low tide
• Widow's Reach, a cliffside lookout

Saltmarsh Road
"""


def create_demo_data() -> dict:
    """Wipe existing campaigns and create a fresh demo campaign. Returns it."""
    if storage.campaigns_dir().exists():
        shutil.rmtree(storage.campaigns_dir())
    storage.campaigns_dir().mkdir(parents=True, exist_ok=True)

    campaign = storage.create_campaign(DEMO_CAMPAIGN["name"], DEMO_CAMPAIGN["description"])
    for entry in DEMO_MEMORY:
        storage.save_memory_entry(
            campaign["id"],
            type=entry["type"],
            title=entry["title"],
            content=entry["content"],
            forge_type=entry["forge_type"],
        )
    return campaign
