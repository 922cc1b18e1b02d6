"""Campaign CRUD endpoints."""

from fastapi import APIRouter, HTTPException

from arcane_node import storage

from .models import CreateCampaign

router = APIRouter()


@router.get("/campaigns")
async def list_campaigns():
    """List all campaigns."""
    return storage.list_campaigns()


@router.post("/campaigns", status_code=201)
async def create_campaign(body: CreateCampaign):
    """Create a campaign with an empty memory."""
    if not body.name.strip():
        raise HTTPException(400, "Campaign name is required")
    return storage.create_campaign(body.name, body.description)


@router.get("/campaigns/{campaign_id}")
async def get_campaign(campaign_id: str):
    """Get campaign metadata."""
    campaign = storage.get_campaign(campaign_id)
    if not campaign:
        raise HTTPException(404, "Campaign not found")
    return campaign


@router.delete("/campaigns/{campaign_id}")
async def delete_campaign(campaign_id: str):
    """Delete a campaign and its memory."""
    if not storage.delete_campaign(campaign_id):
        raise HTTPException(404, "Campaign not found")
    return {"ok": True}
