"""Caller-side cache of card analyses.

Entries are keyed by (card id, sha1 of oracle text) so an errata or a changed
oracle text produces a new key and forces re-tagging. The tagger itself never
caches.
"""

from __future__ import annotations

import hashlib
import threading
from typing import Callable, Dict, Optional, Tuple

from deckgen.type_definitions import Card, CardMechanicsProfile

CacheKey = Tuple[str, str]


def text_hash(text: str) -> str:
    return hashlib.sha1((text or '').encode('utf-8')).hexdigest()


def cache_key(card: Card) -> CacheKey:
    return (card.id, text_hash(card.oracle_text))


class AnalysisCache:
    """Thread-safe bounded cache of CardMechanicsProfile objects."""

    def __init__(self, max_entries: int = 50000) -> None:
        self.max_entries = max_entries
        self._entries: Dict[CacheKey, CardMechanicsProfile] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, card: Card) -> Optional[CardMechanicsProfile]:
        with self._lock:
            found = self._entries.get(cache_key(card))
            if found is None:
                self.misses += 1
            else:
                self.hits += 1
            return found

    def put(self, card: Card, profile: CardMechanicsProfile) -> None:
        with self._lock:
            if len(self._entries) >= self.max_entries:
                # Drop oldest insertion
                self._entries.pop(next(iter(self._entries)))
            self._entries[cache_key(card)] = profile

    def get_or_analyze(self, card: Card, analyze: Callable[[Card], CardMechanicsProfile]) -> CardMechanicsProfile:
        found = self.get(card)
        if found is not None:
            return found
        profile = analyze(card)
        self.put(card, profile)
        return profile

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)
