"""Annotation assembler — the engine's single output seam.

Orders entities by source position (ties by scan priority) and normalises
the generation-hint key so presentation code can route on it directly.
"""

from arcane_node.models import AnnotatedEntity


def _normalise(entity: AnnotatedEntity) -> AnnotatedEntity:
    hint = entity.generation_hint
    if hint is None or hint.forge_type == hint.forge_type.lower():
        return entity
    return entity.model_copy(update={
        "generation_hint": hint.model_copy(update={"forge_type": hint.forge_type.lower()}),
    })


def assemble(entities: list[AnnotatedEntity]) -> list[AnnotatedEntity]:
    return sorted(
        (_normalise(e) for e in entities),
        key=lambda e: (e.start_offset, e.priority),
    )
