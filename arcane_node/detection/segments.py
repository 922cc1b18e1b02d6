"""Splice source text into plain and annotated segments for rendering."""

from typing import Any

from arcane_node.models import AnnotatedEntity

Segment = dict[str, Any]  # {"type": "text"|"entity", "text": ..., "entity"?: {...}}


def splice_segments(text: str, entities: list[AnnotatedEntity]) -> list[Segment]:
    """Cut `text` at each entity span.

    Known entities become links (store_record_id), novel ones conjure
    triggers (generation_hint); the renderer decides from exists_in_store.
    Joining every segment's text gives back the original string. Entities
    that overlap an earlier one or fall outside the text are skipped.
    """
    segments: list[Segment] = []
    cursor = 0

    for entity in sorted(entities, key=lambda e: e.start_offset):
        start, end = entity.span
        if start < cursor or end > len(text):
            continue
        if start > cursor:
            segments.append({"type": "text", "text": text[cursor:start]})
        segments.append({
            "type": "entity",
            "text": text[start:end],
            "entity": entity.model_dump(),
        })
        cursor = end

    if cursor < len(text):
        segments.append({"type": "text", "text": text[cursor:]})

    return segments


def segments_to_text(segments: list[Segment]) -> str:
    """Join segments back into plain text."""
    return "".join(seg["text"] for seg in segments)
