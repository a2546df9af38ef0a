"""Reverse tag index for tag-based card queries and vocabulary usage counts.

Usage:
    index = TagIndex()
    index.build_from_profiles(profiles)

    cards = index.get_cards_with_tag("token_creation")
    cards = index.get_cards_with_all_tags(["tokens_matter", "sacrifice_outlet"])
    tags = index.get_tags_for_card("Sol Ring")
    vocab = index.get_available_tags()   # [{name, category, count}, ...]
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set, Tuple

import pandas as pd

from deckgen.logging_util import get_logger
from deckgen.tagging import tag_constants as tc
from deckgen.tagging.tag_normalizer import normalize_tags
from deckgen.type_definitions import AvailableTag, CardMechanicsProfile

logger = get_logger(__name__)


@dataclass
class IndexStats:
    """Statistics about the tag index."""
    total_cards: int
    total_tags: int
    total_mappings: int
    build_time_seconds: float
    indexed_at: float  # Unix timestamp


class TagIndex:
    """Reverse index over card tag associations.

    Builds two indexes:
    - tag -> set(card names)
    - card -> sorted list(tags)

    The index is read-only once built; rebuild to pick up new associations.
    """

    def __init__(self) -> None:
        self._tag_to_cards: Dict[str, Set[str]] = {}
        self._card_to_tags: Dict[str, List[str]] = {}
        self._stats: Optional[IndexStats] = None

    def build(self, associations: Iterable[Tuple[str, Iterable[str]]]) -> IndexStats:
        """Build from (card name, tag names) pairs.

        Args:
            associations: Iterable of (card_name, tags) pairs

        Returns:
            IndexStats with build metrics
        """
        start_time = time.perf_counter()
        self._tag_to_cards.clear()
        self._card_to_tags.clear()

        total_mappings = 0
        for name, tags in associations:
            if not name:
                continue
            tag_list = sorted(set(tags))
            if not tag_list:
                continue
            self._card_to_tags[name] = tag_list
            for tag in tag_list:
                self._tag_to_cards.setdefault(tag, set()).add(name)
                total_mappings += 1

        build_time = time.perf_counter() - start_time
        self._stats = IndexStats(
            total_cards=len(self._card_to_tags),
            total_tags=len(self._tag_to_cards),
            total_mappings=total_mappings,
            build_time_seconds=build_time,
            indexed_at=time.time(),
        )
        logger.info(
            f"Built tag index: {self._stats.total_cards} cards, "
            f"{self._stats.total_tags} unique tags, "
            f"{self._stats.total_mappings} mappings in {build_time:.2f}s"
        )
        return self._stats

    def build_from_profiles(self, profiles: Iterable[CardMechanicsProfile]) -> IndexStats:
        return self.build((p.card_name, p.tag_names()) for p in profiles)

    def build_from_frame(self, df: pd.DataFrame, tags_column: str = 'tags') -> IndexStats:
        """Build from a corpus frame holding persisted tags (strings or mappings)."""
        if tags_column not in df.columns:
            logger.warning(f"{tags_column} column not found in card frame; tag index is empty")
            return self.build([])
        pairs = []
        for name, raw in zip(df['name'], df[tags_column]):
            pairs.append((name, [t.name for t in normalize_tags(raw)]))
        return self.build(pairs)

    def get_cards_with_tag(self, tag: str) -> Set[str]:
        return self._tag_to_cards.get(tag, set()).copy()

    def get_cards_with_all_tags(self, tags: List[str]) -> Set[str]:
        """Cards that have ALL specified tags (AND logic)."""
        if not tags:
            return set()
        result = self.get_cards_with_tag(tags[0])
        for tag in tags[1:]:
            result &= self.get_cards_with_tag(tag)
            if not result:
                break
        return result

    def get_cards_with_any_tags(self, tags: List[str]) -> Set[str]:
        """Cards that have ANY of the specified tags (OR logic)."""
        result: Set[str] = set()
        for tag in tags:
            result |= self.get_cards_with_tag(tag)
        return result

    def get_tags_for_card(self, card_name: str) -> List[str]:
        return self._card_to_tags.get(card_name, []).copy()

    def get_all_tags(self) -> List[str]:
        return sorted(self._tag_to_cards.keys())

    def get_popular_tags(self, limit: int = 50) -> List[tuple[str, int]]:
        """Most used tags as (tag, card_count), count descending then name."""
        tag_counts = [(tag, len(cards)) for tag, cards in self._tag_to_cards.items()]
        tag_counts.sort(key=lambda x: (-x[1], x[0]))
        return tag_counts[:limit]

    def get_available_tags(self) -> List[AvailableTag]:
        """Vocabulary plus usage counts, sorted by name."""
        return [
            AvailableTag(name=tag, category=tc.lookup_tag(tag).category.value, count=len(cards))
            for tag, cards in sorted(self._tag_to_cards.items())
        ]

    def get_stats(self) -> Optional[IndexStats]:
        return self._stats
