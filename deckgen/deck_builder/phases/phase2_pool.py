"""Phase 2: Candidate pool construction.

Hard filters only; nothing here changes a card's score. A card enters the pool
when it is Commander-legal, inside the commander's color identity, not the
commander itself, not a basic land (basics are added by the land phase) and
not of a category whose card_type_weights value is 0.

Expected attributes on the host DeckBuilder:
  - source, tagger, analysis_cache, constraints, workers
  - commander_card
  - candidates, skipped_cards (set here)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from deckgen import settings
from deckgen.deck_builder import builder_constants as bc
from deckgen.deck_builder import builder_utils as bu
from deckgen.deck_builder.commander_rules import is_card_legal_in_commander, is_color_identity_valid
from deckgen.logging_util import get_logger
from deckgen.services.card_source import CardFilters
from deckgen.tagging.parallel_utils import analyze_cards
from deckgen.type_definitions import Card, CardMechanicsProfile, SynergyScore

logger = get_logger(__name__)


@dataclass
class Candidate:
    """One scored pool entry; scores are filled in by the scoring phase."""
    card: Card
    profile: CardMechanicsProfile
    category: str
    synergy: Optional[SynergyScore] = None
    theme_bonus: float = 0.0
    random_bonus: float = 0.0
    theme_matches: List[str] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.card.name

    @property
    def final_score(self) -> float:
        base = self.synergy.total if self.synergy is not None else 0.0
        return base + self.theme_bonus + self.random_bonus

    @property
    def is_land(self) -> bool:
        return self.category == bc.LAND_CATEGORY


class CandidatePoolMixin:
    def _pool_filters(self) -> CardFilters:
        return CardFilters(
            color_identity=self.commander_card.color_identity,
            legal_in='commander',
            exclude_names=(self.commander_card.name,),
        )

    def _excluded_categories(self) -> List[str]:
        weights = self.constraints.card_type_weights
        return [cat for cat in (*bc.WEIGHTED_CATEGORIES, bc.PLANESWALKER_CATEGORY) if getattr(weights, cat) == 0]

    def build_candidate_pool(self) -> List[Candidate]:  # type: ignore[override]
        """Fetch, filter and analyze the candidate pool.

        Raises:
            CardSourceUnavailableError: If the corpus cannot be read (fatal)
        """
        cards = self.source.search_by_filters(self._pool_filters(), limit=settings.CANDIDATE_POOL_LIMIT)
        excluded = set(self._excluded_categories())
        if excluded:
            logger.info(f"Excluding categories with weight 0: {sorted(excluded)}")

        commander_key = self.commander_card.name.strip().lower()
        kept: List[Card] = []
        seen: set[str] = set()
        dropped: Dict[str, int] = {'banned/illegal': 0, 'color identity': 0, 'weight 0': 0, 'basic land': 0}
        for card in cards:
            key = card.name.strip().lower()
            if key == commander_key or key in seen:
                continue
            if bu.is_basic_land(card):
                dropped['basic land'] += 1
                continue
            if not is_card_legal_in_commander(card):
                dropped['banned/illegal'] += 1
                continue
            if not is_color_identity_valid(card, self.commander_card.color_identity):
                dropped['color identity'] += 1
                continue
            if bu.card_type_category(card.type_line) in excluded:
                dropped['weight 0'] += 1
                continue
            seen.add(key)
            kept.append(card)

        result = analyze_cards(kept, workers=self.workers, cache=self.analysis_cache, tagger=self.tagger)
        self.skipped_cards = [name for name, _reason in result.failures]
        self.candidates = [
            Candidate(card=card, profile=profile, category=bu.card_type_category(card.type_line))
            for card, profile in result.analyzed
        ]
        logger.info(
            f"Candidate pool: {len(self.candidates)} cards from {len(cards)} matches "
            f"(dropped {', '.join(f'{k}={v}' for k, v in dropped.items() if v) or 'none'}; "
            f"analysis failures={len(self.skipped_cards)})"
        )
        return self.candidates
