"""Ingestion-boundary normalization of stored tags.

Persisted card tags arrive either as bare strings ("Card Draw", "card_draw")
or as mappings with some of the MechanicTag fields, sometimes camelCased.
Everything is folded into MechanicTag here so the scoring core never has to
branch on representation.
"""

from __future__ import annotations

import ast
import json
from typing import Any, Iterable, List, Mapping

from deckgen.logging_util import get_logger
from deckgen.tagging import tag_constants as tc
from deckgen.type_definitions import MechanicTag

logger = get_logger(__name__)

DEFAULT_PRIORITY = 5

_FIELD_ALIASES = {
    'synergyWeight': 'synergy_weight',
    'weight': 'synergy_weight',
    'tag': 'name',
    'tag_name': 'name',
}


def normalize_tag_name(raw: str) -> str:
    """Canonical spelling of a tag name: lower snake case."""
    return tc.slugify(raw)


def normalize_tag(raw: Any, default_priority: int = DEFAULT_PRIORITY) -> MechanicTag:
    """Convert one stored tag into a MechanicTag.

    Args:
        raw: A tag name string, a mapping with tag fields, or a MechanicTag
        default_priority: Priority used when the source carries none

    Returns:
        MechanicTag with category and weight filled from the vocabulary when absent

    Raises:
        ValueError: If no tag name can be extracted
    """
    if isinstance(raw, MechanicTag):
        return raw
    if isinstance(raw, str):
        name = normalize_tag_name(raw)
        if not name:
            raise ValueError(f"Empty tag name: {raw!r}")
        definition = tc.lookup_tag(name)
        return MechanicTag(
            name=name,
            category=definition.category,
            priority=default_priority,
            confidence=1.0,
            synergy_weight=definition.synergy_weight,
        )
    if isinstance(raw, Mapping):
        data = {_FIELD_ALIASES.get(k, k): v for k, v in raw.items()}
        name = normalize_tag_name(str(data.get('name') or ''))
        if not name:
            raise ValueError(f"Tag mapping has no name: {raw!r}")
        definition = tc.lookup_tag(name)
        evidence = data.get('evidence') or ()
        if isinstance(evidence, str):
            evidence = (evidence,)
        return MechanicTag(
            name=name,
            category=data.get('category') or definition.category,
            priority=int(data.get('priority') or default_priority),
            confidence=float(data['confidence']) if data.get('confidence') is not None else 1.0,
            evidence=tuple(str(e) for e in evidence),
            synergy_weight=float(data['synergy_weight']) if data.get('synergy_weight') is not None else definition.synergy_weight,
        )
    raise ValueError(f"Unsupported tag representation: {type(raw).__name__}")


def _expand(raw_tags: Any) -> List[Any]:
    if raw_tags is None:
        return []
    if isinstance(raw_tags, str):
        text = raw_tags.strip()
        if not text or text == '[]':
            return []
        if text.startswith('['):
            try:
                return list(json.loads(text))
            except json.JSONDecodeError:
                try:
                    parsed = ast.literal_eval(text)
                    if isinstance(parsed, (list, tuple)):
                        return list(parsed)
                except (ValueError, SyntaxError):
                    pass
        return [t for t in text.split(',') if t.strip()]
    if isinstance(raw_tags, (Mapping, MechanicTag)):
        return [raw_tags]
    return list(raw_tags)


def normalize_tags(raw_tags: Iterable[Any] | str | None) -> List[MechanicTag]:
    """Normalize a collection of stored tags, dropping unreadable entries.

    Duplicate names keep the entry with the highest (priority, confidence).
    Output order follows first appearance.
    """
    result: dict[str, MechanicTag] = {}
    for raw in _expand(raw_tags):
        try:
            tag = normalize_tag(raw)
        except ValueError as e:
            logger.warning(f"Skipping unreadable tag: {e}")
            continue
        current = result.get(tag.name)
        if current is None or (tag.priority, tag.confidence) > (current.priority, current.confidence):
            result[tag.name] = tag
    return list(result.values())
