"""Handlebars prompt rendering for forge templates."""

from collections.abc import Callable
from typing import Any

import pybars


_compiler = pybars.Compiler()
_cache: dict[str, Callable] = {}


class PromptError(Exception):
    """Raised when a Handlebars template fails to compile or render."""


# ── Custom Handlebars helpers ────────────────────────────


def _helper_take(this, options, items, count):
    """{{#take array N}}...{{/take}} — iterate over the first N items."""
    result = []
    for item in list(items)[:int(count)]:
        result.extend(options["fn"](item))
    return result


_HELPERS: dict[str, Callable] = {
    "take": _helper_take,
}


def render_prompt(template_str: str, context: dict[str, Any]) -> str:
    """Compile and render a Handlebars template with the given context.

    Templates are cached by source string to avoid recompilation.
    """
    try:
        compiled = _cache.get(template_str)
        if compiled is None:
            compiled = _compiler.compile(template_str)
            _cache[template_str] = compiled
        return str(compiled(context, helpers=_HELPERS))
    except Exception as e:
        raise PromptError(f"Template error: {e}") from e


def build_context(
    campaign: dict[str, Any],
    name: str,
    category: str,
    subtype: str | None = None,
    existing_titles: list[str] | None = None,
    source_context: str | None = None,
) -> dict[str, Any]:
    """Assemble template variables for a forge prompt.

    Nested objects (campaign, entity) keep Handlebars paths short.
    """
    ctx: dict[str, Any] = {
        "campaign": {
            "name": campaign.get("name", ""),
            "description": campaign.get("description", ""),
        },
        "entity": {
            "name": name,
            "category": category,
        },
        "existing": existing_titles or [],
    }
    if subtype:
        ctx["entity"]["subtype"] = subtype
    if source_context:
        ctx["source_context"] = source_context
    return ctx
