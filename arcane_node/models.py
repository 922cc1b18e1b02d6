"""Core domain models.

Detection stages and storage adapters operate on these types.
Pydantic is used for validation and serialisation at every data boundary;
detection models are frozen so annotations handed to callers never change.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

EntityCategory = Literal[
    "Character",
    "Place",
    "Item",
    "Organization",
]


class GenerationHint(BaseModel):
    """Which forge template to run if a novel entity gets conjured."""

    model_config = ConfigDict(frozen=True)

    forge_type: str  # "hero" | "inn" | "tavern" | "landmark" | "shop" | "town" | "item" | "guild"
    subtype: str | None = None  # landmark kind, e.g. "Temple"


class RawCandidate(BaseModel):
    """A recognised span before reconciliation. Offsets are half-open."""

    model_config = ConfigDict(frozen=True)

    text: str
    name: str
    category: EntityCategory
    generation_hint: GenerationHint | None = None
    start_offset: int = Field(ge=0)
    end_offset: int = Field(ge=0)
    priority: int = 0  # position in the registry-ordered scan

    @model_validator(mode="after")
    def _check_span(self) -> RawCandidate:
        if self.end_offset < self.start_offset:
            raise ValueError("end_offset must not precede start_offset")
        return self

    @property
    def span(self) -> tuple[int, int]:
        return (self.start_offset, self.end_offset)


class AnnotatedEntity(RawCandidate):
    """A candidate plus its knowledge-store outcome."""

    exists_in_store: bool = False
    store_record_id: str | None = None
    store_record_type: str | None = None

    @model_validator(mode="after")
    def _check_store_ref(self) -> AnnotatedEntity:
        has_ref = self.store_record_id is not None and self.store_record_type is not None
        if self.exists_in_store and not has_ref:
            raise ValueError("known entities need store_record_id and store_record_type")
        if not self.exists_in_store and (
            self.store_record_id is not None or self.store_record_type is not None
        ):
            raise ValueError("novel entities must not carry a store reference")
        return self


class StoreRecord(BaseModel):
    """The part of a knowledge-store record the reconciler reads.

    Stores may return richer objects or plain rows; extra fields are ignored
    and numeric ids become strings.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    title: str
    type: str


class MemoryRecord(BaseModel):
    """A stored campaign record (character, place, item, faction...)."""

    id: str
    campaign_id: str
    type: str
    title: str
    content: Any = None
    forge_type: str | None = None
    tags: list[str] = Field(default_factory=list)
    archived: bool = False
    created_at: str = ""
    last_edited_at: str | None = None


class Campaign(BaseModel):
    """Campaign metadata stored on disk."""

    id: str
    name: str
    description: str = ""
    created_at: str = ""
