"""
Card Sync

Incremental sync of new or changed Commander-legal cards from the Scryfall
search API. Each new or changed card is tagged and handed to a sink together
with its profile; persistence is up to the sink.

Stopping is cooperative: callers pass a CancellationToken and the job checks
it between pages and between batches, then returns a partial result marked
stopped=True.

Usage:
    token = CancellationToken()
    job = CardSyncJob(ScryfallSearchClient(), sink=store.upsert, lookup=store.get)
    result = job.run(token, since=date(2024, 1, 1))
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, Iterator, List, Optional

import requests
from tqdm import tqdm

from deckgen import settings
from deckgen.exceptions import CardAnalysisError, CardSourceUnavailableError, SyncCancelledError
from deckgen.logging_util import get_logger
from deckgen.tagging.mechanics_tagger import CardMechanicsTagger
from deckgen.type_definitions import Card, CardMechanicsProfile

logger = get_logger(__name__)

CardSink = Callable[[Card, CardMechanicsProfile, str], None]
CardLookup = Callable[[str], Optional[Card]]


class CancellationToken:
    """Thread-safe stop signal passed into long-running jobs."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, processed: int = 0) -> None:
        if self._event.is_set():
            raise SyncCancelledError(processed)


def build_sync_query(since: Optional[date] = None) -> str:
    """Scryfall query for Commander-legal English paper cards first printed after `since`."""
    query = 'game:paper legal:commander lang:en -is:digital'
    if since is not None:
        query += f' firstprint>{since.isoformat()}'
    return query


class ScryfallSearchClient:
    """Paginated Scryfall card search with request spacing and retry on 429."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        rate_limit_delay: float = settings.SYNC_RATE_LIMIT_DELAY,
        max_retries: int = 3,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.base_url = base_url or settings.SCRYFALL_SEARCH_URL
        self.session = session or requests.Session()
        self.rate_limit_delay = rate_limit_delay
        self.max_retries = max_retries
        self._sleep = sleep

    def _get(self, url: str, params: Optional[Dict[str, str]] = None) -> Optional[Dict[str, Any]]:
        """GET one page; None on 404 (Scryfall's 'no results').

        Raises:
            CardSourceUnavailableError: After max_retries failed attempts
        """
        last_error: Optional[str] = None
        for attempt in range(self.max_retries):
            try:
                response = self.session.get(
                    url,
                    params=params,
                    headers={'User-Agent': settings.USER_AGENT, 'Accept': 'application/json'},
                    timeout=settings.HTTP_TIMEOUT_SECONDS,
                )
                if response.status_code == 404:
                    return None
                if response.status_code == 429:
                    last_error = 'HTTP 429'
                    self._sleep(2 ** attempt)
                    continue
                response.raise_for_status()
                return response.json()
            except (requests.RequestException, ValueError) as e:
                last_error = str(e)
                logger.warning(f"Scryfall request failed (attempt {attempt + 1}/{self.max_retries}): {e}")
                if attempt < self.max_retries - 1:
                    self._sleep(2 ** attempt)
        raise CardSourceUnavailableError(url, details={'error': last_error})

    def search(self, query: str, token: Optional[CancellationToken] = None) -> Iterator[Dict[str, Any]]:
        """Yield raw card objects across all result pages."""
        url: Optional[str] = self.base_url
        params: Optional[Dict[str, str]] = {'q': query, 'unique': 'cards', 'order': 'released'}
        fetched = 0
        while url:
            if token is not None:
                token.raise_if_cancelled(fetched)
            page = self._get(url, params)
            if page is None:
                logger.info('Scryfall search returned no cards')
                return
            for item in page.get('data') or []:
                fetched += 1
                yield item
            url = page.get('next_page') if page.get('has_more', bool(page.get('next_page'))) else None
            params = None  # next_page already carries the query
            if url:
                self._sleep(self.rate_limit_delay)


def has_significant_changes(existing: Card, incoming: Card) -> bool:
    return (
        existing.oracle_text != incoming.oracle_text
        or existing.type_line != incoming.type_line
        or existing.mana_cost != incoming.mana_cost
        or existing.color_identity != incoming.color_identity
        or existing.keywords != incoming.keywords
    )


@dataclass
class SyncResult:
    processed: int = 0
    new_cards: int = 0
    updated: int = 0
    failed: int = 0
    stopped: bool = False
    new_names: List[str] = field(default_factory=list)
    updated_names: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'processed': self.processed,
            'new_cards': self.new_cards,
            'updated': self.updated,
            'failed': self.failed,
            'stopped': self.stopped,
            'new_names': list(self.new_names),
            'updated_names': list(self.updated_names),
        }


class CardSyncJob:
    """Fetches new cards, tags them and hands (card, profile, status) to a sink."""

    def __init__(
        self,
        client: ScryfallSearchClient,
        sink: CardSink,
        lookup: CardLookup,
        tagger: Optional[CardMechanicsTagger] = None,
        batch_size: int = settings.SYNC_BATCH_SIZE,
        show_progress: bool = False,
    ) -> None:
        self.client = client
        self.sink = sink
        self.lookup = lookup
        self.tagger = tagger or CardMechanicsTagger()
        self.batch_size = max(1, batch_size)
        self.show_progress = show_progress

    def _process(self, raw: Dict[str, Any], result: SyncResult) -> None:
        try:
            card = Card.from_record(raw)
            existing = self.lookup(card.id)
            if existing is not None and not has_significant_changes(existing, card):
                return
            profile = self.tagger.analyze_card(card)
        except CardAnalysisError as e:
            result.failed += 1
            logger.warning(f"Sync skipped card: {e.message}")
            return
        status = 'new' if existing is None else 'updated'
        self.sink(card, profile, status)
        if status == 'new':
            result.new_cards += 1
            result.new_names.append(card.name)
        else:
            result.updated += 1
            result.updated_names.append(card.name)
        logger.debug(f"{status.upper()}: {card.name} ({len(profile.mechanic_tags)} tags)")

    def run(self, token: Optional[CancellationToken] = None, since: Optional[date] = None) -> SyncResult:
        """Run one incremental sync.

        Returns:
            SyncResult; stopped=True when the token was cancelled part way
        """
        token = token or CancellationToken()
        result = SyncResult()
        query = build_sync_query(since)
        logger.info(f"Card sync: searching '{query}'")
        try:
            raw_cards = list(self.client.search(query, token))
            logger.info(f"Card sync: {len(raw_cards)} candidate cards")
            with tqdm(total=len(raw_cards), desc='Syncing cards', disable=not self.show_progress) as pbar:
                for start in range(0, len(raw_cards), self.batch_size):
                    token.raise_if_cancelled(result.processed)
                    batch = raw_cards[start:start + self.batch_size]
                    for raw in batch:
                        self._process(raw, result)
                        result.processed += 1
                        pbar.update(1)
        except SyncCancelledError as e:
            result.stopped = True
            logger.info(f"Card sync stopped: {e.message}")
        logger.info(
            f"Card sync finished: processed={result.processed} new={result.new_cards} "
            f"updated={result.updated} failed={result.failed} stopped={result.stopped}"
        )
        return result
