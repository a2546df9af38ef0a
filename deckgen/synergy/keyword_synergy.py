"""Keyword-overlap synergy between two oracle texts.

Keywords come from the MTGJSON keyword catalog (ability words, keyword
abilities, keyword actions). The catalog is fetched at most once per day and
cached on disk; when fetching is disabled or fails, the static catalog in
tag_constants is used instead.

On top of the catalog, a handful of context-specific pseudo keywords replace
overly broad words such as "tap" or "create" (Tap Ability, Create Treasure, ...).

Shared keywords are scored by rarity tier from the rule table: rarer mechanics
(landfall, storm) outscore common ones (flying), with a small bonus for
multiple shared keywords and a hard cap.
"""

from __future__ import annotations

# Standard library imports
import json
import os
import threading
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Pattern, Tuple

# Third-party imports
import requests

from deckgen import settings
from deckgen.exceptions import KeywordCatalogError
from deckgen.logging_util import get_logger
from deckgen.path_util import get_keywords_cache_path
from deckgen.synergy.rules import KeywordSynergyConfig, default_rule_table
from deckgen.tagging import regex_patterns as rgx
from deckgen.tagging import tag_constants as tc

logger = get_logger(__name__)

CATALOG_GROUPS: Tuple[str, ...] = ('ability_words', 'keyword_abilities', 'keyword_actions')
_MTGJSON_KEYS: Dict[str, str] = {
    'ability_words': 'abilityWords',
    'keyword_abilities': 'keywordAbilities',
    'keyword_actions': 'keywordActions',
}
STATIC_VERSION = 'static-fallback'


@dataclass
class CardKeywords:
    """Catalog keywords found in one oracle text, grouped like the catalog."""
    ability_words: List[str] = field(default_factory=list)
    keyword_abilities: List[str] = field(default_factory=list)
    keyword_actions: List[str] = field(default_factory=list)

    def all(self) -> List[str]:
        return [*self.ability_words, *self.keyword_abilities, *self.keyword_actions]

    @property
    def total(self) -> int:
        return len(self.ability_words) + len(self.keyword_abilities) + len(self.keyword_actions)


@dataclass(frozen=True)
class KeywordSynergyResult:
    score: float
    shared_keywords: Tuple[str, ...]
    analysis: str


def detect_specific_keywords(card_text: str) -> List[str]:
    """Context-specific pseudo keywords for tap/untap and token creation."""
    text = (card_text or '').lower()
    found: List[str] = []
    if 'tap:' in text or '{t}:' in text:
        found.append('Tap Ability')
    if 'tap an untapped' in text or 'tap target' in text:
        found.append('Tap Target')
    if 'becomes tapped' in text or 'enters tapped' in text or 'enters the battlefield tapped' in text:
        found.append('Enters Tapped')
    if 'tap it' in text and ('when' in text or 'whenever' in text):
        found.append('Conditional Tap')
    if 'untap:' in text or 'untap all' in text or 'untap target' in text:
        found.append('Untap Effect')
    if 'does not untap' in text or "doesn't untap" in text:
        found.append('Prevent Untap')
    if 'untap step' in text:
        found.append('Untap Step Matters')
    if 'create a' in text and 'token' in text:
        if 'treasure token' in text:
            found.append('Create Treasure')
        elif 'creature token' in text:
            found.append('Create Creature Token')
        elif 'artifact token' in text:
            found.append('Create Artifact Token')
        else:
            found.append('Create Token')
    return found


class KeywordCatalog:
    """MTGJSON keyword catalog with a daily cache and a static fallback."""

    def __init__(
        self,
        url: Optional[str] = None,
        cache_path: Optional[str] = None,
        fetch_enabled: Optional[bool] = None,
        session: Optional[requests.Session] = None,
    ):
        self.url = url or settings.MTGJSON_KEYWORDS_URL
        self.cache_path = cache_path or get_keywords_cache_path()
        self.fetch_enabled = settings.KEYWORD_FETCH_ENABLED if fetch_enabled is None else fetch_enabled
        self.session = session
        self._lock = threading.Lock()
        self._data: Optional[Dict[str, List[str]]] = None
        self._version = ''
        self._loaded_on: Optional[str] = None
        self._patterns: Dict[str, List[Tuple[str, Pattern]]] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def _fetch(self) -> Dict[str, object]:
        """Download Keywords.json.

        Raises:
            KeywordCatalogError: On HTTP/network failure or an unexpected payload
        """
        getter = self.session.get if self.session is not None else requests.get
        try:
            response = getter(self.url, headers={'User-Agent': settings.USER_AGENT}, timeout=settings.HTTP_TIMEOUT_SECONDS)
            response.raise_for_status()
            payload = response.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise KeywordCatalogError(self.url, status) from e
        except (requests.RequestException, ValueError) as e:
            raise KeywordCatalogError(self.url, details={'error': str(e)}) from e
        if not isinstance(payload, dict) or not isinstance(payload.get('data'), dict):
            raise KeywordCatalogError(self.url, details={'error': 'invalid keywords payload'})
        return payload

    @staticmethod
    def _groups_from_payload(payload: Dict[str, object]) -> Dict[str, List[str]]:
        data = payload.get('data') or {}
        return {
            group: sorted({str(k).strip().lower() for k in data.get(key, []) if str(k).strip()})
            for group, key in _MTGJSON_KEYS.items()
        }

    def _read_disk_cache(self, today: str) -> Optional[Tuple[Dict[str, List[str]], str]]:
        if not os.path.exists(self.cache_path):
            return None
        try:
            with open(self.cache_path, 'r', encoding='utf-8') as f:
                cached = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable keyword cache {self.cache_path}: {e}")
            return None
        if cached.get('fetched_on') != today:
            return None
        return self._groups_from_payload(cached), str(cached.get('meta', {}).get('version', ''))

    def _write_disk_cache(self, payload: Dict[str, object], today: str) -> None:
        try:
            os.makedirs(os.path.dirname(self.cache_path) or '.', exist_ok=True)
            with open(self.cache_path, 'w', encoding='utf-8') as f:
                json.dump({**payload, 'fetched_on': today}, f)
        except OSError as e:
            logger.warning(f"Could not write keyword cache {self.cache_path}: {e}")

    def _load(self, today: str) -> None:
        data: Optional[Dict[str, List[str]]] = None
        version = STATIC_VERSION
        if self.fetch_enabled:
            cached = self._read_disk_cache(today)
            if cached is not None:
                data, version = cached
            else:
                try:
                    payload = self._fetch()
                    data = self._groups_from_payload(payload)
                    version = str((payload.get('meta') or {}).get('version', ''))
                    self._write_disk_cache(payload, today)
                    logger.info(f"MTGJSON keywords loaded: {sum(len(v) for v in data.values())} keywords")
                except KeywordCatalogError as e:
                    logger.warning(f"{e.message}; falling back to static keyword list")
                    data = None
        if data is None:
            data = {group: list(tc.STATIC_KEYWORDS[group]) for group in CATALOG_GROUPS}
            version = STATIC_VERSION
        self._data = data
        self._version = version
        self._loaded_on = today
        self._patterns = {
            group: [(kw, rgx.keyword_pattern(kw)) for kw in words]
            for group, words in data.items()
        }

    def _ensure_loaded(self) -> None:
        today = date.today().isoformat()
        with self._lock:
            if self._data is None or self._loaded_on != today:
                self._load(today)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def get_keyword_categories(self) -> Dict[str, List[str]]:
        self._ensure_loaded()
        return {group: list(words) for group, words in self._data.items()}

    def metadata(self) -> Dict[str, object]:
        self._ensure_loaded()
        return {
            'date': self._loaded_on,
            'version': self._version,
            'total_keywords': sum(len(v) for v in self._data.values()),
        }

    def clear_cache(self) -> None:
        with self._lock:
            self._data = None
            self._loaded_on = None
            self._patterns = {}
        logger.info('Keyword catalog cache cleared')

    def analyze_card_keywords(self, card_text: str) -> CardKeywords:
        """Catalog keywords (plus pseudo keywords) present in an oracle text."""
        if not card_text:
            return CardKeywords()
        self._ensure_loaded()
        found = CardKeywords()
        for group in CATALOG_GROUPS:
            hits = [kw for kw, pattern in self._patterns.get(group, []) if pattern.search(card_text)]
            getattr(found, group).extend(hits)
        found.keyword_actions.extend(detect_specific_keywords(card_text))
        return found

    def calculate_keyword_synergy(
        self,
        commander_text: str,
        card_text: str,
        config: Optional[KeywordSynergyConfig] = None,
    ) -> KeywordSynergyResult:
        """Score the keywords shared by two oracle texts.

        Each shared keyword scores with the first rarity tier that lists it; a
        multi-keyword bonus of count x multi_match_bonus applies when more than
        one keyword is shared; the total is capped at score_cap.
        """
        config = config or default_rule_table().keyword_synergy
        commander_kw = self.analyze_card_keywords(commander_text)
        card_kw = self.analyze_card_keywords(card_text)
        shared: List[str] = []
        for group in CATALOG_GROUPS:
            card_group = set(getattr(card_kw, group))
            shared.extend(kw for kw in getattr(commander_kw, group) if kw in card_group and kw not in shared)

        score = sum(config.tier_score(kw) for kw in shared)
        if len(shared) > 1:
            score += len(shared) * config.multi_match_bonus
        score = min(score, config.score_cap)
        analysis = f"Shared keywords: {', '.join(shared)}" if shared else 'No shared keywords found'
        return KeywordSynergyResult(score=float(score), shared_keywords=tuple(shared), analysis=analysis)

    def has_keyword_synergy(self, commander_text: str, card_text: str, target_keywords: List[str]) -> bool:
        """True when both texts carry a keyword containing any of the targets."""
        commander_all = [k.lower() for k in self.analyze_card_keywords(commander_text).all()]
        card_all = [k.lower() for k in self.analyze_card_keywords(card_text).all()]
        for target in target_keywords:
            t = target.lower()
            if any(t in k for k in commander_all) and any(t in k for k in card_all):
                return True
        return False


_DEFAULT_CATALOG: Optional[KeywordCatalog] = None
_DEFAULT_LOCK = threading.Lock()


def get_keyword_catalog() -> KeywordCatalog:
    """Process-wide catalog built from settings."""
    global _DEFAULT_CATALOG
    with _DEFAULT_LOCK:
        if _DEFAULT_CATALOG is None:
            _DEFAULT_CATALOG = KeywordCatalog()
        return _DEFAULT_CATALOG


def calculate_keyword_synergy(commander_text: str, card_text: str) -> KeywordSynergyResult:
    return get_keyword_catalog().calculate_keyword_synergy(commander_text, card_text)
