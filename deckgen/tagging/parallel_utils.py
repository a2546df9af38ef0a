"""Bulk card analysis, optionally spread over worker threads.

Card analysis has no cross-card dependencies, so a batch can be split across
a thread pool. Results are always reduced in card-id order so that downstream
ranking ties break the same way whatever the completion order was.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from tqdm import tqdm

from deckgen import settings
from deckgen.exceptions import CardAnalysisError
from deckgen.logging_util import get_logger
from deckgen.tagging.analysis_cache import AnalysisCache
from deckgen.tagging.mechanics_tagger import CardMechanicsTagger
from deckgen.type_definitions import Card, CardMechanicsProfile

logger = get_logger(__name__)


@dataclass
class BulkAnalysisResult:
    """Profiles sorted by card id plus the cards that could not be analyzed."""
    analyzed: List[Tuple[Card, CardMechanicsProfile]] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)  # (card name, reason)

    def profiles_by_id(self) -> Dict[str, CardMechanicsProfile]:
        return {card.id: profile for card, profile in self.analyzed}


def _analyze_one(tagger: CardMechanicsTagger, cache: Optional[AnalysisCache], card: Card) -> CardMechanicsProfile:
    if cache is not None:
        return cache.get_or_analyze(card, tagger.analyze_card)
    return tagger.analyze_card(card)


def analyze_cards(
    cards: Iterable[Card],
    workers: Optional[int] = None,
    cache: Optional[AnalysisCache] = None,
    tagger: Optional[CardMechanicsTagger] = None,
    show_progress: bool = False,
) -> BulkAnalysisResult:
    """Analyze many cards, skipping (and recording) per-card failures.

    Args:
        cards: Cards to analyze
        workers: Thread count; 1 runs serially (default: settings.TAGGING_WORKERS)
        cache: Optional AnalysisCache consulted before tagging
        tagger: Tagger instance (default: a fresh CardMechanicsTagger)
        show_progress: Display a tqdm progress bar

    Returns:
        BulkAnalysisResult with analyzed pairs sorted by (card id, name)
    """
    card_list = list(cards)
    tagger = tagger or CardMechanicsTagger()
    workers = max(1, workers if workers is not None else settings.TAGGING_WORKERS)
    result = BulkAnalysisResult()

    def record_failure(card: Card, err: CardAnalysisError) -> None:
        logger.warning(f"Skipping card during analysis: {err.message}")
        result.failures.append((card.name, err.message))

    with tqdm(total=len(card_list), desc='Analyzing cards', disable=not show_progress) as pbar:
        if workers == 1 or len(card_list) < 2:
            for card in card_list:
                try:
                    result.analyzed.append((card, _analyze_one(tagger, cache, card)))
                except CardAnalysisError as err:
                    record_failure(card, err)
                pbar.update(1)
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = {executor.submit(_analyze_one, tagger, cache, card): card for card in card_list}
                for future in as_completed(futures):
                    card = futures[future]
                    try:
                        result.analyzed.append((card, future.result()))
                    except CardAnalysisError as err:
                        record_failure(card, err)
                    pbar.update(1)

    result.analyzed.sort(key=lambda pair: (pair[0].id, pair[0].name))
    result.failures.sort()
    logger.info(f"Analyzed {len(result.analyzed)} cards ({len(result.failures)} skipped, workers={workers})")
    return result
