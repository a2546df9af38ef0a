"""
Card Source

Read-only access to the card corpus used by the generation pipeline.

The pipeline only depends on the CardSource protocol:
- get_card_by_name(name) -> Card | None
- search_by_filters(filters, limit) -> list[Card]
- get_available_tags() -> [{name, category, count}, ...]

DataFrameCardSource is the bundled implementation: a pandas frame loaded from a
JSON / CSV / Parquet snapshot (or handed in directly), cached in memory with a
TTL and reloaded when the file changes.

Usage:
    source = DataFrameCardSource("card_files/cards.json")
    commander = source.get_card_by_name("Atraxa, Praetors' Voice")
    pool = source.search_by_filters(CardFilters(color_identity=commander.color_identity), limit=15000)
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

import pandas as pd

from deckgen import settings
from deckgen.exceptions import CardSourceUnavailableError
from deckgen.logging_util import get_logger
from deckgen.path_util import get_cards_path
from deckgen.tagging.parallel_utils import analyze_cards
from deckgen.tagging.tag_index import TagIndex
from deckgen.type_definitions import AvailableTag, Card, CardCorpusDF, parse_color_identity, parse_mapping

logger = get_logger(__name__)


@dataclass
class CardFilters:
    """Hard filters for candidate pool construction.

    color_identity: keep cards whose identity is a subset of these colors (None = any)
    legal_in: keep cards legal in this format (cards without legality data are kept)
    exclude_names: names to drop (case-insensitive)
    type_includes / type_excludes: type line words (case-insensitive)
    text_query: substring of name, type line or oracle text
    """
    color_identity: Optional[Sequence[str]] = None
    legal_in: Optional[str] = 'commander'
    exclude_names: Sequence[str] = field(default_factory=tuple)
    type_includes: Sequence[str] = field(default_factory=tuple)
    type_excludes: Sequence[str] = field(default_factory=tuple)
    text_query: Optional[str] = None


class CardSource(Protocol):
    def get_card_by_name(self, name: str) -> Optional[Card]:
        ...

    def search_by_filters(self, filters: CardFilters, limit: Optional[int] = None) -> List[Card]:
        ...

    def get_available_tags(self) -> List[AvailableTag]:
        ...


def _front_face(name: str) -> str:
    return name.split(' // ')[0].strip()


def _legal_in(legalities, fmt: str) -> bool:
    data = parse_mapping(legalities)
    if not data:
        return True
    return str(data.get(fmt, '')).lower() == 'legal'


def prepare_frame(df: pd.DataFrame) -> CardCorpusDF:
    """Fill missing record columns and add the lookup helper columns.

    Helper columns are prefixed with an underscore and never reach Card objects.
    """
    df = df.copy()
    if 'name' not in df.columns:
        raise ValueError("card frame has no 'name' column")
    if 'set' not in df.columns and 'set_code' in df.columns:
        df['set'] = df['set_code']
    for col in settings.CARD_RECORD_COLUMNS:
        if col not in df.columns:
            df[col] = None
    df['name'] = df['name'].fillna('').astype(str)
    df['type_line'] = df['type_line'].fillna('').astype(str)
    df['oracle_text'] = df['oracle_text'].fillna('').astype(str)
    df = df[df['name'].str.strip() != ''].reset_index(drop=True)
    df['_name_lower'] = df['name'].str.strip().str.lower()
    df['_front_lower'] = df['name'].map(_front_face).str.lower()
    df['_ci'] = df['color_identity'].map(parse_color_identity)
    df['_type_lower'] = df['type_line'].str.lower()
    return df


class DataFrameCardSource:
    """pandas-backed CardSource with TTL caching and reload on file change."""

    def __init__(
        self,
        file_path: Optional[str] = None,
        frame: Optional[pd.DataFrame] = None,
        cache_ttl: int = 300,
        tag_index: Optional[TagIndex] = None,
    ) -> None:
        """
        Args:
            file_path: Corpus snapshot (.json, .csv or .parquet); default path_util.get_cards_path()
            frame: In-memory corpus; when given, file_path is ignored
            cache_ttl: Seconds before the file is checked again
            tag_index: Prebuilt tag index for get_available_tags()
        """
        self.file_path = file_path or get_cards_path()
        self.cache_ttl = cache_ttl
        self._df: Optional[CardCorpusDF] = prepare_frame(frame) if frame is not None else None
        self._in_memory = frame is not None
        self._last_load_time: float = time.time() if frame is not None else 0
        self._file_mtime: float = 0
        self._tag_index = tag_index

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def _read(self) -> pd.DataFrame:
        ext = os.path.splitext(self.file_path)[1].lower()
        if ext == '.parquet':
            return pd.read_parquet(self.file_path, engine='pyarrow')
        if ext == '.csv':
            return pd.read_csv(self.file_path, low_memory=False)
        return pd.read_json(self.file_path, orient='records')

    def load(self, force_reload: bool = False) -> CardCorpusDF:
        """Return the corpus frame, reloading when the cache is stale.

        Raises:
            CardSourceUnavailableError: If the snapshot is missing or unreadable
        """
        if self._in_memory:
            return self._df
        if not os.path.exists(self.file_path):
            raise CardSourceUnavailableError(self.file_path, details={'error': 'file not found'})

        current_time = time.time()
        file_mtime = os.path.getmtime(self.file_path)
        cache_valid = (
            self._df is not None
            and not force_reload
            and (current_time - self._last_load_time) < self.cache_ttl
            and file_mtime == self._file_mtime
        )
        if cache_valid:
            return self._df

        logger.info(f"Loading card corpus from {self.file_path}...")
        start_time = time.time()
        try:
            raw = self._read()
            self._df = prepare_frame(raw)
        except (OSError, ValueError) as e:
            raise CardSourceUnavailableError(self.file_path, details={'error': str(e)}) from e
        self._last_load_time = current_time
        self._file_mtime = file_mtime
        self._tag_index = None
        logger.info(f"Loaded {len(self._df)} cards in {time.time() - start_time:.3f}s")
        return self._df

    def clear_cache(self) -> None:
        if self._in_memory:
            return
        self._df = None
        self._last_load_time = 0
        self._tag_index = None
        logger.info("Card corpus cache cleared")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @staticmethod
    def _to_cards(df: pd.DataFrame) -> List[Card]:
        cols = [c for c in df.columns if not c.startswith('_')]
        return [Card.from_record(rec) for rec in df[cols].to_dict(orient='records')]

    def get_card_by_name(self, name: str) -> Optional[Card]:
        """Case-insensitive exact name lookup, then front-face lookup for split/DFC cards."""
        df = self.load()
        key = (name or '').strip().lower()
        if not key:
            return None
        matches = df[df['_name_lower'] == key]
        if matches.empty:
            matches = df[df['_front_lower'] == key]
        if matches.empty:
            return None
        return self._to_cards(matches.head(1))[0]

    def filter_frame(self, filters: CardFilters) -> CardCorpusDF:
        df = self.load()
        mask = pd.Series(True, index=df.index)
        if filters.color_identity is not None:
            allowed = set(parse_color_identity(list(filters.color_identity)))
            mask &= df['_ci'].map(lambda ci: set(ci) <= allowed)
        if filters.legal_in:
            fmt = filters.legal_in
            mask &= df['legalities'].map(lambda v: _legal_in(v, fmt))
        if filters.exclude_names:
            excluded = {n.strip().lower() for n in filters.exclude_names}
            mask &= ~df['_name_lower'].isin(excluded)
        for word in filters.type_includes:
            mask &= df['_type_lower'].str.contains(word.lower(), regex=False)
        for word in filters.type_excludes:
            mask &= ~df['_type_lower'].str.contains(word.lower(), regex=False)
        if filters.text_query:
            q = filters.text_query
            text_mask = df['name'].str.contains(q, case=False, regex=False, na=False)
            text_mask |= df['type_line'].str.contains(q, case=False, regex=False, na=False)
            text_mask |= df['oracle_text'].str.contains(q, case=False, regex=False, na=False)
            mask &= text_mask
        return df[mask]

    def search_by_filters(self, filters: CardFilters, limit: Optional[int] = None) -> List[Card]:
        """Cards matching every filter, deduplicated by name, in corpus order."""
        df = self.filter_frame(filters).drop_duplicates(subset='_name_lower', keep='first')
        if limit is not None and len(df) > limit:
            logger.warning(f"Candidate search truncated to {limit} of {len(df)} cards")
            df = df.head(limit)
        return self._to_cards(df)

    def iter_cards(self) -> List[Card]:
        return self._to_cards(self.load())

    # ------------------------------------------------------------------
    # Tag vocabulary
    # ------------------------------------------------------------------
    def tag_index(self) -> TagIndex:
        """Tag index over persisted tags, or over fresh analysis when the corpus has none."""
        if self._tag_index is not None:
            return self._tag_index
        df = self.load()
        index = TagIndex()
        if 'tags' in df.columns and df['tags'].notna().any():
            index.build_from_frame(df, tags_column='tags')
        else:
            result = analyze_cards(self._to_cards(df))
            index.build_from_profiles(profile for _, profile in result.analyzed)
        self._tag_index = index
        return index

    def get_available_tags(self) -> List[AvailableTag]:
        return self.tag_index().get_available_tags()

    def get_stats(self) -> dict:
        df = self.load()
        return {
            'total_cards': len(df),
            'file_path': None if self._in_memory else self.file_path,
            'cached': self._df is not None,
            'cache_age_seconds': int(time.time() - self._last_load_time) if self._last_load_time > 0 else None,
        }
