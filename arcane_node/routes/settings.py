"""Health check and settings endpoints."""

from fastapi import APIRouter, HTTPException
from pydantic import ValidationError

from arcane_node import storage

from .models import DetectionSettings

router = APIRouter()


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.get("/settings")
async def get_settings():
    """Get global app settings (LLM connection, detection)."""
    return storage.get_config()


@router.patch("/settings")
async def update_settings(body: dict):
    """Update global app settings (partial merge).

    The detection group is validated as a whole after merging, so a partial
    update can't leave the engine with unusable values.
    """
    detection = body.get("detection")
    if detection is not None:
        if not isinstance(detection, dict):
            raise HTTPException(422, "detection settings must be an object")
        merged = {**storage.get_config()["detection"], **detection}
        try:
            settings = DetectionSettings.model_validate(merged)
        except ValidationError as e:
            raise HTTPException(
                422, e.errors(include_url=False, include_context=False, include_input=False)
            )
        body = {**body, "detection": settings.model_dump()}
    return storage.update_config(body)
