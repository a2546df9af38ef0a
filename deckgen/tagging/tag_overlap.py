"""Curation-time merge of overlapping tag namespaces.

The tagger may emit both `mechanic_X` (keyword spotted in rules text) and
`ability_keyword_X` (keyword listed in the card's keyword field) for the same
mechanic. This module folds such duplicates into one canonical tag with a
union-find over tag names and remaps every card's tag list accordingly.

Usage:
    report = cleanup_overlapping_tags(vocabulary, card_tags)
    report.card_tags      # remapped, deduped, sorted per card
    report.tags_removed   # redundant names that can be dropped from storage
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from deckgen.logging_util import get_logger

logger = get_logger(__name__)

MECHANIC_PREFIX = 'mechanic_'
ABILITY_KEYWORD_PREFIX = 'ability_keyword_'


def _canonical_rank(name: str) -> Tuple[int, str]:
    """Lower sorts first: ability_keyword_ names win, then un-prefixed, then mechanic_."""
    if name.startswith(ABILITY_KEYWORD_PREFIX):
        return (0, name)
    if name.startswith(MECHANIC_PREFIX):
        return (2, name)
    return (1, name)


class TagUnionFind:
    """Disjoint sets of tag names; each set's representative is its canonical name."""

    def __init__(self) -> None:
        self._parent: Dict[str, str] = {}

    def add(self, name: str) -> None:
        self._parent.setdefault(name, name)

    def find(self, name: str) -> str:
        self.add(name)
        root = name
        while self._parent[root] != root:
            root = self._parent[root]
        # Path compression
        while self._parent[name] != root:
            self._parent[name], name = root, self._parent[name]
        return root

    def union(self, a: str, b: str) -> str:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return ra
        keep, drop = (ra, rb) if _canonical_rank(ra) <= _canonical_rank(rb) else (rb, ra)
        self._parent[drop] = keep
        return keep

    def groups(self) -> Dict[str, List[str]]:
        out: Dict[str, List[str]] = {}
        for name in list(self._parent):
            out.setdefault(self.find(name), []).append(name)
        return {root: sorted(members) for root, members in out.items()}


def find_overlapping_pairs(tag_names: Iterable[str]) -> List[Tuple[str, str]]:
    """Return (mechanic_X, ability_keyword_X) pairs where both names exist."""
    names = set(tag_names)
    pairs = []
    for name in sorted(names):
        if name.startswith(MECHANIC_PREFIX):
            partner = ABILITY_KEYWORD_PREFIX + name[len(MECHANIC_PREFIX):]
            if partner in names:
                pairs.append((name, partner))
    return pairs


def build_canonical_map(tag_names: Iterable[str], aliases: Sequence[Tuple[str, str]] = ()) -> Dict[str, str]:
    """Map every non-canonical tag name to its canonical replacement.

    Args:
        tag_names: Every tag name currently in the vocabulary
        aliases: Extra (a, b) pairs known to denote the same mechanic

    Returns:
        Dict of redundant name -> canonical name (canonical names are not keys)
    """
    names = list(tag_names)
    uf = TagUnionFind()
    for name in names:
        uf.add(name)
    for mechanic, ability in find_overlapping_pairs(names):
        uf.union(mechanic, ability)
    for a, b in aliases:
        uf.union(a, b)
    mapping = {}
    for name in names + [n for pair in aliases for n in pair]:
        root = uf.find(name)
        if root != name:
            mapping[name] = root
    return mapping


def remap_card_tags(card_tags: Mapping[str, Sequence[str]], mapping: Mapping[str, str]) -> Tuple[Dict[str, List[str]], int]:
    """Apply a canonical map to each card's tags, deduping and sorting.

    Returns:
        (new card -> tags dict, number of cards whose tag list changed)
    """
    updated: Dict[str, List[str]] = {}
    changed = 0
    for card, tags in card_tags.items():
        remapped = sorted({mapping.get(t, t) for t in tags})
        if remapped != sorted(tags):
            changed += 1
        updated[card] = remapped
    return updated, changed


@dataclass
class OverlapCleanupReport:
    pairs: List[Tuple[str, str]]
    mapping: Dict[str, str]
    cards_updated: int
    tags_removed: List[str]
    vocabulary: List[str]
    card_tags: Dict[str, List[str]] = field(repr=False)

    def summary(self) -> Dict[str, int]:
        return {
            'overlapping_pairs': len(self.pairs),
            'cards_updated': self.cards_updated,
            'tags_removed': len(self.tags_removed),
            'tags_remaining': len(self.vocabulary),
        }


def cleanup_overlapping_tags(
    vocabulary: Iterable[str],
    card_tags: Mapping[str, Sequence[str]],
    aliases: Sequence[Tuple[str, str]] = (),
) -> OverlapCleanupReport:
    """Fold overlapping namespaces and return the remapped associations.

    Tag names that only appear on cards are treated as part of the vocabulary.
    """
    names = set(vocabulary)
    for tags in card_tags.values():
        names.update(tags)
    ordered = sorted(names)
    pairs = find_overlapping_pairs(ordered)
    mapping = build_canonical_map(ordered, aliases)
    remapped, changed = remap_card_tags(card_tags, mapping)
    removed = sorted(n for n in mapping if n in names)
    remaining = sorted(n for n in names if n not in mapping)
    logger.info(
        f"Tag overlap cleanup: {len(pairs)} overlapping pairs, {changed} cards updated, "
        f"{len(removed)} redundant tags removed"
    )
    for mechanic, ability in pairs[:10]:
        logger.debug(f"Mapping {mechanic} -> {ability}")
    return OverlapCleanupReport(
        pairs=pairs,
        mapping=mapping,
        cards_updated=changed,
        tags_removed=removed,
        vocabulary=remaining,
        card_tags=remapped,
    )
