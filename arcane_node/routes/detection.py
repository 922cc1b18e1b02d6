"""Entity detection and conjure endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import ValidationError

from arcane_node import storage
from arcane_node.detection import DetectionError, EntityDetector, build_registry, splice_segments
from arcane_node.forge import ForgeError, conjure
from arcane_node.llm import LLM, HttpLLM, LLMError
from arcane_node.prompts import PromptError

from .models import ConjureBody, DetectBody, DetectionSettings

logger = logging.getLogger(__name__)

router = APIRouter()


def get_detector() -> EntityDetector:
    """Detector wired to the file memory store and current detection settings."""
    try:
        settings = DetectionSettings.model_validate(storage.get_config()["detection"])
    except ValidationError as e:
        logger.error(f"Stored detection settings are invalid: {e}")
        raise HTTPException(500, "Stored detection settings are invalid")
    return EntityDetector(
        storage.MemoryStore(),
        matchers=build_registry(settings.list_stop_words),
        lookup_timeout=settings.lookup_timeout,
    )


def get_llm() -> LLM:
    try:
        return HttpLLM.from_config(storage.get_config()["llm_connection"])
    except LLMError as e:
        raise HTTPException(502, str(e))


@router.post("/campaigns/{campaign_id}/detect")
async def detect_entities(
    campaign_id: str,
    body: DetectBody,
    detector: EntityDetector = Depends(get_detector),
):
    """Annotate text with known and novel entity mentions."""
    if not storage.get_campaign(campaign_id):
        raise HTTPException(404, "Campaign not found")
    try:
        entities = await detector.detect(body.text, campaign_id)
    except DetectionError as e:
        raise HTTPException(400, str(e))
    return {
        "entities": [e.model_dump() for e in entities],
        "segments": splice_segments(body.text, entities),
    }


@router.post("/campaigns/{campaign_id}/conjure", status_code=201)
async def conjure_entity(
    campaign_id: str,
    body: ConjureBody,
    response: Response,
    llm: LLM = Depends(get_llm),
):
    """Generate a memory entry for a novel entity and store it.

    Answers 201 with the new entry, or 200 with the entry already stored
    under that title.
    """
    if not storage.get_campaign(campaign_id):
        raise HTTPException(404, "Campaign not found")
    existing = storage.find_memory_by_title(campaign_id, body.name)
    if existing is not None:
        response.status_code = 200
        return existing
    try:
        return await conjure(
            campaign_id,
            body.name,
            body.category,
            body.generation_hint,
            llm,
            source_context=body.source_context,
        )
    except (LLMError, ForgeError) as e:
        raise HTTPException(502, str(e))
    except PromptError as e:
        logger.error(f"Forge template failed for {body.name!r}: {e}")
        raise HTTPException(500, str(e))
