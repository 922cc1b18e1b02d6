"""Campaign memory — the per-campaign list of generated/authored records."""

import asyncio
import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from arcane_node.models import MemoryRecord

from .core import campaign_path, campaigns_dir

_EDITABLE_FIELDS = {"type", "title", "content", "forge_type", "tags", "archived"}


def _memory_path(campaign_id: str) -> Path:
    campaign_path(campaign_id)  # validates the id
    return campaigns_dir() / campaign_id / "memory.json"


def get_memory(campaign_id: str) -> list[dict[str, Any]]:
    """Load memory entries for a campaign. Returns [] if missing."""
    path = _memory_path(campaign_id)
    if not path.is_file():
        return []
    return json.loads(path.read_text())


def _save_memory(campaign_id: str, entries: list[dict[str, Any]]) -> None:
    path = _memory_path(campaign_id)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(entries, indent=2))


def get_memory_entry(campaign_id: str, entry_id: str) -> dict[str, Any] | None:
    for entry in get_memory(campaign_id):
        if entry["id"] == entry_id:
            return entry
    return None


def save_memory_entry(
    campaign_id: str,
    type: str,
    title: str,
    content: Any,
    forge_type: str | None = None,
    tags: list[str] | None = None,
) -> dict[str, Any]:
    """Append a new entry and return it."""
    entry = {
        "id": uuid.uuid4().hex,
        "campaign_id": campaign_id,
        "type": type,
        "title": title,
        "content": content,
        "forge_type": forge_type,
        "tags": list(tags or []),
        "archived": False,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "last_edited_at": None,
    }
    entries = get_memory(campaign_id)
    entries.append(entry)
    _save_memory(campaign_id, entries)
    return entry


def update_memory_entry(
    campaign_id: str, entry_id: str, fields: dict[str, Any]
) -> dict[str, Any] | None:
    """Update editable fields of an entry. Returns the updated entry."""
    entries = get_memory(campaign_id)
    for entry in entries:
        if entry["id"] == entry_id:
            for key, value in fields.items():
                if key in _EDITABLE_FIELDS:
                    entry[key] = value
            entry["last_edited_at"] = datetime.now(timezone.utc).isoformat()
            _save_memory(campaign_id, entries)
            return entry
    return None


def delete_memory_entry(campaign_id: str, entry_id: str) -> bool:
    entries = get_memory(campaign_id)
    remaining = [e for e in entries if e["id"] != entry_id]
    if len(remaining) == len(entries):
        return False
    _save_memory(campaign_id, remaining)
    return True


def search_memory(
    campaign_id: str, q: str = "", type: str | None = None
) -> list[dict[str, Any]]:
    """Filter entries by case-insensitive substring of title or content, and by type."""
    needle = q.strip().lower()
    results = []
    for entry in get_memory(campaign_id):
        if type and entry.get("type") != type:
            continue
        if needle:
            haystack = entry.get("title", "") + "\n" + json.dumps(entry.get("content", ""))
            if needle not in haystack.lower():
                continue
        results.append(entry)
    return results


def find_memory_by_title(campaign_id: str, title: str) -> dict[str, Any] | None:
    """First non-archived entry whose title equals `title`, ignoring case."""
    wanted = title.casefold()
    for entry in get_memory(campaign_id):
        if entry.get("archived"):
            continue
        if entry.get("title", "").casefold() == wanted:
            return entry
    return None


class MemoryStore:
    """Async knowledge-store adapter over the JSON memory files.

    File reads run in a worker thread so concurrent lookups don't block
    the event loop.
    """

    async def find_by_title(self, campaign_id: str, title: str) -> MemoryRecord | None:
        entry = await asyncio.to_thread(find_memory_by_title, campaign_id, title)
        if entry is None:
            return None
        return MemoryRecord.model_validate(entry)
