"""Span deduplicator — reduce raw candidates to a non-overlapping, name-unique set.

Single left-to-right pass over the priority-ordered candidates. A candidate
survives only if

  1. its exact (start, end) span is unclaimed,
  2. its case-folded name is unclaimed, and
  3. its span does not partially overlap a claimed span.

Claims are recorded only for survivors, so the first (highest-priority)
candidate wins a position or a name and every later duplicate is dropped.
Overlap losers are dropped whole, never shrunk.
"""

import bisect

from arcane_node.models import RawCandidate


class _SpanIndex:
    """Sorted, non-overlapping claimed spans with O(log n) overlap checks."""

    def __init__(self) -> None:
        self._starts: list[int] = []
        self._ends: list[int] = []

    def overlaps(self, start: int, end: int) -> bool:
        i = bisect.bisect_right(self._starts, start)
        # Neighbour at or before start
        if i > 0 and self._ends[i - 1] > start:
            return True
        # Neighbour after start
        if i < len(self._starts) and self._starts[i] < end:
            return True
        return False

    def add(self, start: int, end: int) -> None:
        i = bisect.bisect_right(self._starts, start)
        self._starts.insert(i, start)
        self._ends.insert(i, end)


def dedupe(candidates: list[RawCandidate]) -> list[RawCandidate]:
    """Return surviving candidates, preserving input order."""
    seen_positions: set[tuple[int, int]] = set()
    seen_names: set[str] = set()
    claimed = _SpanIndex()
    deduplicated: list[RawCandidate] = []

    for candidate in candidates:
        position_key = candidate.span
        name_key = candidate.name.casefold()

        if position_key in seen_positions:
            continue
        if name_key in seen_names:
            continue
        if claimed.overlaps(*position_key):
            continue

        seen_positions.add(position_key)
        seen_names.add(name_key)
        claimed.add(*position_key)
        deduplicated.append(candidate)

    return deduplicated
