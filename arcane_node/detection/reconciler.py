"""Reconciler — resolve candidates against the campaign's memory.

The knowledge store is injected. It must match the protocol:

    async def find_by_title(self, campaign_id: str, title: str) -> MemoryRecord | None: ...

Any object or mapping with `id`, `title` and `type` is accepted as a record.

Lookups for one batch run concurrently (one task per candidate, gathered).
Each task turns its own failure into a value: a store error or timeout is
logged and the candidate comes back as novel, so one bad lookup never sinks
the batch.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from arcane_node.models import AnnotatedEntity, MemoryRecord, RawCandidate, StoreRecord

logger = logging.getLogger(__name__)


class KnowledgeStore(Protocol):
    async def find_by_title(self, campaign_id: str, title: str) -> MemoryRecord | None: ...


def known(candidate: RawCandidate, record: StoreRecord | MemoryRecord) -> AnnotatedEntity:
    return AnnotatedEntity(
        **candidate.model_dump(),
        exists_in_store=True,
        store_record_id=record.id,
        store_record_type=record.type,
    )


def novel(candidate: RawCandidate) -> AnnotatedEntity:
    return AnnotatedEntity(**candidate.model_dump(), exists_in_store=False)


class Reconciler:
    """Classify candidates as known or novel.

    Args:
        store:          Knowledge store collaborator (see KnowledgeStore).
        lookup_timeout: Seconds allowed per lookup, or None for no limit.
                        A lookup that runs over is abandoned and its
                        candidate is reported as novel.
    """

    def __init__(self, store: KnowledgeStore, lookup_timeout: float | None = None) -> None:
        self._store = store
        self._lookup_timeout = lookup_timeout

    async def _lookup(self, candidate: RawCandidate, campaign_id: str) -> AnnotatedEntity:
        try:
            record = await asyncio.wait_for(
                self._store.find_by_title(campaign_id, candidate.name),
                timeout=self._lookup_timeout,
            )
            if record is not None:
                record = StoreRecord.model_validate(record, from_attributes=True)
        except asyncio.TimeoutError:
            logger.warning(
                "memory lookup timed out campaign=%s name=%r after %ss",
                campaign_id, candidate.name, self._lookup_timeout,
            )
            return novel(candidate)
        except Exception as e:
            logger.warning(
                "memory lookup failed campaign=%s name=%r: %s", campaign_id, candidate.name, e,
            )
            return novel(candidate)

        if record is None:
            return novel(candidate)
        if record.title.casefold() != candidate.name.casefold():
            logger.warning(
                "store returned non-matching record %s (%r) for %r, ignored",
                record.id, record.title, candidate.name,
            )
            return novel(candidate)
        return known(candidate, record)

    async def reconcile(
        self, candidates: list[RawCandidate], campaign_id: str
    ) -> list[AnnotatedEntity]:
        """Return one annotated entity per candidate, in input order."""
        if not candidates:
            return []
        return list(await asyncio.gather(
            *(self._lookup(c, campaign_id) for c in candidates)
        ))
