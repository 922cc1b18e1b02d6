"""FastMCP server exposing campaign memory and entity detection as MCP tools.

Tools:
  - detect_entities(campaign_id, text) — annotate text with known/novel entities
  - lookup_memory(campaign_id, title)  — fetch one memory entry by exact title

Storage is initialised from DATA_DIR (default ./data) when run as __main__;
tests initialise it themselves.

Usage:
    uv run python -m arcane_node.mcp_server
"""

from mcp.server.fastmcp import FastMCP

from arcane_node import storage
from arcane_node.detection import DetectionError
from arcane_node.routes.detection import get_detector

mcp = FastMCP("arcane-node-memory")


@mcp.tool()
async def detect_entities(campaign_id: str, text: str) -> dict:
    """Find character, place, item and organization mentions in text.

    Each entity reports whether it already exists in the campaign's memory
    (with its record id and type) or is novel (with a generation hint).
    """
    if storage.get_campaign(campaign_id) is None:
        return {"error": f"Campaign {campaign_id!r} not found", "entities": []}
    detector = get_detector()
    try:
        entities = await detector.detect(text, campaign_id)
    except DetectionError as e:
        return {"error": str(e), "entities": []}
    return {"entities": [e.model_dump() for e in entities]}


@mcp.tool()
def lookup_memory(campaign_id: str, title: str) -> dict:
    """Look up a memory entry by title (case-insensitive, exact). Returns {} if absent."""
    if storage.get_campaign(campaign_id) is None:
        return {}
    return storage.find_memory_by_title(campaign_id, title) or {}


if __name__ == "__main__":
    import os
    from pathlib import Path

    storage.init_storage(Path(os.getenv("DATA_DIR", "data")))
    mcp.run()
