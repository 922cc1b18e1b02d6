"""Engine entry point: scan → dedupe → reconcile → assemble."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from arcane_node.models import AnnotatedEntity

from .assembler import assemble
from .dedupe import dedupe
from .reconciler import KnowledgeStore, Reconciler
from .registry import REGISTRY, Matcher
from .scanner import scan

logger = logging.getLogger(__name__)


class DetectionError(ValueError):
    """Raised for unusable input before any scanning happens."""


class EntityDetector:
    """Detect entity mentions in generated text and link them to campaign memory.

    Holds no per-call state, so one detector can serve concurrent calls.
    """

    def __init__(
        self,
        store: KnowledgeStore,
        matchers: Sequence[Matcher] = REGISTRY,
        lookup_timeout: float | None = None,
    ) -> None:
        self._matchers = tuple(matchers)
        self._reconciler = Reconciler(store, lookup_timeout=lookup_timeout)

    async def detect(self, text: str, campaign_id: str) -> list[AnnotatedEntity]:
        """Return annotations for `text`, ordered by start offset.

        Raises DetectionError if text is not a string or campaign_id is missing.
        """
        if not isinstance(text, str):
            raise DetectionError(f"text must be a string, got {type(text).__name__}")
        if not campaign_id or not isinstance(campaign_id, str):
            raise DetectionError("campaign_id is required")
        if not text.strip():
            return []

        candidates = dedupe(scan(text, self._matchers))
        logger.debug("detect campaign=%s text_len=%d candidates=%d", campaign_id, len(text), len(candidates))
        entities = await self._reconciler.reconcile(candidates, campaign_id)
        return assemble(entities)


async def detect(text: str, campaign_id: str, store: KnowledgeStore) -> list[AnnotatedEntity]:
    """One-shot detection with the default registry."""
    return await EntityDetector(store).detect(text, campaign_id)
