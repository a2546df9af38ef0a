from __future__ import annotations

import datetime
import math
import random
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from deckgen import settings
from deckgen.exceptions import InvalidConstraintsError
from deckgen.logging_util import get_logger
from deckgen.random_util import derive_seed_from_string, set_seed as _set_seed
from deckgen.services.card_source import CardSource, DataFrameCardSource
from deckgen.synergy.scorer import SynergyScorer
from deckgen.tagging.analysis_cache import AnalysisCache
from deckgen.tagging.mechanics_tagger import CardMechanicsTagger
from deckgen.type_definitions import (
    Card,
    CardMechanicsProfile,
    CardTypeWeights,
    CommanderProfile,
    DeckCard,
    GeneratedDeck,
    GenerationConstraints,
)

from .phases.phase1_commander import CommanderResolutionMixin
from .phases.phase2_pool import Candidate, CandidatePoolMixin
from .phases.phase3_scoring import CandidateScoringMixin
from .phases.phase4_selection import SelectionMixin
from .phases.phase5_lands import LandBaseMixin
from .phases.phase6_reporting import ReportingMixin

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Constraint validation
# ---------------------------------------------------------------------------
def _check_price(name: str, value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value) or value < 0:
        raise InvalidConstraintsError(name, value, 'a non-negative number or null')
    return float(value)


def _check_terms(name: str, value: Any) -> List[str]:
    if isinstance(value, str) or not all(isinstance(v, str) for v in value):
        raise InvalidConstraintsError(name, value, 'a list of strings')
    return [v.strip() for v in value if v.strip()]


def validate_constraints(constraints: GenerationConstraints | Mapping[str, Any] | None) -> GenerationConstraints:
    """Coerce and range-check generation constraints.

    Raises:
        InvalidConstraintsError: On the first malformed or out-of-range field
    """
    if constraints is None:
        return GenerationConstraints()
    if not isinstance(constraints, GenerationConstraints):
        constraints = dict(constraints)
        raw_weights = constraints.get('card_type_weights')
        if raw_weights is not None and not isinstance(raw_weights, (Mapping, CardTypeWeights)):
            raise InvalidConstraintsError('card_type_weights', raw_weights, 'a mapping of category to weight')
        # "tokens, lifegain" style strings from forms and the CLI
        for key in ('keywords', 'keyword_focus'):
            if isinstance(constraints.get(key), str):
                constraints[key] = constraints[key].split(',')
        try:
            constraints = GenerationConstraints.from_mapping(constraints)
        except (TypeError, ValueError) as e:
            raise InvalidConstraintsError('constraints', dict(constraints), str(e)) from e

    for category, weight in constraints.card_type_weights.as_dict().items():
        if isinstance(weight, bool) or not isinstance(weight, int):
            raise InvalidConstraintsError(f'card_type_weights.{category}', weight, 'an integer')
        if not settings.CARD_TYPE_WEIGHT_MIN <= weight <= settings.CARD_TYPE_WEIGHT_MAX:
            raise InvalidConstraintsError(
                f'card_type_weights.{category}', weight,
                f'{settings.CARD_TYPE_WEIGHT_MIN}-{settings.CARD_TYPE_WEIGHT_MAX}',
            )
    count = constraints.random_tag_count
    if isinstance(count, bool) or not isinstance(count, int) or not 0 <= count <= settings.RANDOM_TAG_COUNT_MAX:
        raise InvalidConstraintsError('random_tag_count', count, f'0-{settings.RANDOM_TAG_COUNT_MAX}')
    constraints.total_budget = _check_price('total_budget', constraints.total_budget)
    constraints.max_card_price = _check_price('max_card_price', constraints.max_card_price)
    constraints.keywords = _check_terms('keywords', constraints.keywords)
    constraints.keyword_focus = _check_terms('keyword_focus', constraints.keyword_focus)
    return constraints


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------
@dataclass
class DeckBuilder(
    CommanderResolutionMixin,
    CandidatePoolMixin,
    CandidateScoringMixin,
    SelectionMixin,
    LandBaseMixin,
    ReportingMixin,
):
    """One generation request: commander + 99 under the given constraints.

    Holds per-request state only; shared collaborators (card source, tagger,
    scorer, analysis cache) are read, never mutated.
    """
    source: CardSource = field(default_factory=DataFrameCardSource)
    constraints: GenerationConstraints = field(default_factory=GenerationConstraints)
    tagger: CardMechanicsTagger = field(default_factory=CardMechanicsTagger)
    scorer: Optional[SynergyScorer] = None
    analysis_cache: Optional[AnalysisCache] = None
    workers: Optional[int] = None

    # Seedable RNG support:
    # - seed: optional seed value stored for diagnostics
    # - _rng: internal Random instance; access via self.rng
    seed: Optional[int] = field(default=None, repr=False)
    _rng: Any = field(default=None, repr=False)

    # Per-request state filled in by the phases
    commander_card: Optional[Card] = field(default=None, repr=False)
    commander_mechanics: Optional[CardMechanicsProfile] = field(default=None, repr=False)
    commander_profile: Optional[CommanderProfile] = field(default=None, repr=False)
    candidates: List[Candidate] = field(default_factory=list, repr=False)
    skipped_cards: List[str] = field(default_factory=list, repr=False)
    random_tags: List[str] = field(default_factory=list, repr=False)
    curve_archetype: Optional[str] = field(default=None, repr=False)
    selected: List[DeckCard] = field(default_factory=list, repr=False)
    lands: List[DeckCard] = field(default_factory=list, repr=False)
    warnings: List[str] = field(default_factory=list, repr=False)
    notes: List[str] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        self.constraints = validate_constraints(self.constraints)
        if self.seed is None and self.constraints.seed is not None:
            self.set_seed(self.constraints.seed)
        if self.scorer is None:
            self.scorer = SynergyScorer()

    @property
    def rng(self) -> random.Random:
        """Lazy, per-builder RNG instance. If a seed was set, use it deterministically."""
        if self._rng is None:
            self._rng = _set_seed(self.seed) if self.seed is not None else random.Random()
        return self._rng

    def set_seed(self, seed: int | str) -> None:
        """Set deterministic seed for this builder and reset its RNG instance."""
        s = derive_seed_from_string(seed)
        self.seed = s
        self._rng = _set_seed(s)

    def _reset(self) -> None:
        if self.seed is not None:
            self._rng = _set_seed(self.seed)
        self.candidates = []
        self.skipped_cards = []
        self.random_tags = []
        self.curve_archetype = None
        self.selected = []
        self.lands = []
        self.warnings = []
        self.notes = []

    def build_deck(self, commander_name: str) -> GeneratedDeck:
        """Run every phase for one commander.

        Raises:
            CommanderNotFoundError / InvalidCommanderError: Commander step failed
            CardSourceUnavailableError: Corpus or tag vocabulary unreachable
            DeckValidationError: Assembled deck broke a format rule
        """
        start_ts = datetime.datetime.now()
        logger.info("=== Deck Generation: BEGIN ===")
        self._reset()
        self.run_commander_phase(commander_name)
        self.build_candidate_pool()
        self.score_candidates()
        self.select_nonlands()
        self.add_lands()
        deck = self.finalize_deck()
        elapsed = (datetime.datetime.now() - start_ts).total_seconds()
        logger.info(
            f"=== Deck Generation: END ({deck.total_cards} cards, {len(deck.warnings)} warnings, {elapsed:.2f}s) ==="
        )
        return deck


def generate_deck(
    commander_name: str,
    constraints: GenerationConstraints | Mapping[str, Any] | None = None,
    source: Optional[CardSource] = None,
    **builder_kwargs: Any,
) -> GeneratedDeck:
    """Generate a commander + 99 deck.

    Args:
        commander_name: Exact card name (case-insensitive; front face accepted)
        constraints: GenerationConstraints or a plain mapping of the same fields
        source: Card corpus; defaults to DataFrameCardSource on the configured path
        **builder_kwargs: Extra DeckBuilder fields (tagger, scorer, analysis_cache, workers, seed)

    Returns:
        GeneratedDeck with warnings for constraints that could only be partly met
    """
    builder = DeckBuilder(
        source=source if source is not None else DataFrameCardSource(),
        constraints=validate_constraints(constraints),
        **builder_kwargs,
    )
    return builder.build_deck(commander_name)
