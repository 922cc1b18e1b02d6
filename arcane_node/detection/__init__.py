"""Entity mention detection and reconciliation.

Runs over freshly generated narrative text for one campaign:
  1. Scan — every registry matcher, in priority order, yields raw candidates
     (text, canonical name, category, generation hint, [start, end) offsets).
  2. Dedupe — first claim wins: exact span, case-folded name, then any
     partial overlap. Output is non-overlapping and name-unique.
  3. Reconcile — one concurrent memory lookup per candidate (exact,
     case-insensitive title match in the same campaign). Hits are known
     entities with a record id/type; misses, errors and timeouts are novel.
  4. Assemble — sort by start offset, normalise generation hints.

Entry point: EntityDetector(store).detect(text, campaign_id).

Presentation helpers: splice_segments() cuts the text at entity spans so a
renderer can link known entities and offer conjuring for novel ones.
"""

from .assembler import assemble  # noqa: F401
from .dedupe import dedupe  # noqa: F401
from .engine import DetectionError, EntityDetector, detect  # noqa: F401
from .reconciler import KnowledgeStore, Reconciler  # noqa: F401
from .registry import (  # noqa: F401
    DEFAULT_LIST_STOP_WORDS,
    REGISTRY,
    LandmarkSectionMatcher,
    ListLocationMatcher,
    Matcher,
    RegexMatcher,
    Span,
    build_registry,
)
from .scanner import scan  # noqa: F401
from .segments import Segment, segments_to_text, splice_segments  # noqa: F401
