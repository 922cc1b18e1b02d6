"""Pydantic request/response models for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field

from arcane_node.models import EntityCategory, GenerationHint


class CreateCampaign(BaseModel):
    name: str
    description: str = ""


class CreateMemoryEntry(BaseModel):
    type: str
    title: str
    content: Any
    forge_type: str | None = None
    tags: list[str] = []


class UpdateMemoryEntry(BaseModel):
    type: str | None = None
    title: str | None = None
    content: Any = None
    forge_type: str | None = None
    tags: list[str] | None = None
    archived: bool | None = None


class DetectBody(BaseModel):
    text: str


class ConjureBody(BaseModel):
    name: str
    category: EntityCategory
    generation_hint: GenerationHint | None = None
    source_context: str | None = None


class DetectionSettings(BaseModel):
    """The "detection" settings group, as the engine consumes it."""

    lookup_timeout: float | None = Field(default=None, gt=0)
    list_stop_words: list[str] = []
