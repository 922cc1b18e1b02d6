"""Scanner — run every registry matcher over the text, in priority order."""

import logging
from collections.abc import Sequence

from arcane_node.models import RawCandidate

from .registry import REGISTRY, Matcher

logger = logging.getLogger(__name__)


def scan(text: str, matchers: Sequence[Matcher] = REGISTRY) -> list[RawCandidate]:
    """Return raw candidates from all matchers, concatenated in registry order.

    Candidates from a higher-priority matcher always precede those of a
    lower-priority one, whatever their position in the text. A matcher that
    raises is logged and skipped; the rest still run.
    """
    candidates: list[RawCandidate] = []
    if not text:
        return candidates

    for matcher in matchers:
        try:
            found = [
                RawCandidate(
                    text=span.text,
                    name=span.name,
                    category=matcher.category,
                    generation_hint=matcher.hint,
                    start_offset=span.start,
                    end_offset=span.end,
                    priority=len(candidates) + i,
                )
                for i, span in enumerate(matcher.match(text))
            ]
        except Exception as e:
            logger.warning(f"Matcher {getattr(matcher, 'rule_id', matcher)!r} failed, skipping: {e}")
            continue
        candidates.extend(found)

    return candidates
