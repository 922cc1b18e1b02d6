"""Campaign memory CRUD and search endpoints."""

from fastapi import APIRouter, HTTPException

from arcane_node import storage

from .models import CreateMemoryEntry, UpdateMemoryEntry

router = APIRouter()


def _require_campaign(campaign_id: str) -> dict:
    campaign = storage.get_campaign(campaign_id)
    if not campaign:
        raise HTTPException(404, "Campaign not found")
    return campaign


@router.get("/campaigns/{campaign_id}/memory")
async def list_memory(campaign_id: str, q: str = "", type: str | None = None):
    """List memory entries, optionally filtered by search text and type."""
    _require_campaign(campaign_id)
    return storage.search_memory(campaign_id, q=q, type=type)


@router.post("/campaigns/{campaign_id}/memory", status_code=201)
async def add_memory_entry(campaign_id: str, body: CreateMemoryEntry):
    """Add a memory entry."""
    _require_campaign(campaign_id)
    if not body.title.strip():
        raise HTTPException(400, "Title is required")
    return storage.save_memory_entry(
        campaign_id,
        type=body.type,
        title=body.title,
        content=body.content,
        forge_type=body.forge_type,
        tags=body.tags,
    )


@router.get("/campaigns/{campaign_id}/memory/{entry_id}")
async def get_memory_entry(campaign_id: str, entry_id: str):
    """Get one memory entry."""
    _require_campaign(campaign_id)
    entry = storage.get_memory_entry(campaign_id, entry_id)
    if entry is None:
        raise HTTPException(404, "Memory entry not found")
    return entry


@router.patch("/campaigns/{campaign_id}/memory/{entry_id}")
async def update_memory_entry(campaign_id: str, entry_id: str, body: UpdateMemoryEntry):
    """Update fields of a memory entry."""
    _require_campaign(campaign_id)
    entry = storage.update_memory_entry(campaign_id, entry_id, body.model_dump(exclude_unset=True))
    if entry is None:
        raise HTTPException(404, "Memory entry not found")
    return entry


@router.delete("/campaigns/{campaign_id}/memory/{entry_id}")
async def delete_memory_entry(campaign_id: str, entry_id: str):
    """Delete a memory entry."""
    _require_campaign(campaign_id)
    if not storage.delete_memory_entry(campaign_id, entry_id):
        raise HTTPException(404, "Memory entry not found")
    return {"ok": True}
