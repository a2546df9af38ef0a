"""Phase 6: Finalize & report.

Prices the deck, checks total_budget, writes composition and mana curve notes
and runs the legality checks. An illegal deck is never returned: a failed
check raises DeckValidationError.

Expected attributes on the host DeckBuilder:
  - constraints, commander_card, commander_profile, selected, lands
  - random_tags, skipped_cards, warnings, notes
"""

from __future__ import annotations

from statistics import mean
from typing import Dict, List

from deckgen.deck_builder import builder_constants as bc
from deckgen.deck_builder import builder_utils as bu
from deckgen.deck_builder import mana_curve as mc
from deckgen.deck_builder.color_identity_utils import format_color_label
from deckgen.deck_builder.commander_rules import validate_deck_composition
from deckgen.exceptions import DeckValidationError
from deckgen.logging_util import get_logger
from deckgen.type_definitions import DeckCard, GeneratedDeck

logger = get_logger(__name__)


def composition_summary(cards: List[DeckCard]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for slot in cards:
        counts[slot.role] = counts.get(slot.role, 0) + 1
    return dict(sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])))


class ReportingMixin:
    def _commander_slot(self) -> DeckCard:
        price, source = bu.extract_card_price(self.commander_card, self.constraints.prefer_cheapest)
        return DeckCard(card=self.commander_card, role='commander', price_used=price, price_source=source)

    def _write_notes(self, cards: List[DeckCard]) -> None:
        self.notes.append(
            f"Commander: {self.commander_card.name} ({format_color_label(self.commander_card.color_identity)})"
        )
        if self.commander_profile.strategies:
            self.notes.append(f"Detected strategies: {', '.join(sorted(self.commander_profile.strategies))}")
        summary = composition_summary(cards)
        self.notes.append('Composition: ' + ', '.join(f"{n} {role}" for role, n in summary.items()))
        nonland = [s.synergy_score for s in cards if s.role != 'land']
        if nonland:
            avg = mean(nonland)
            high = sum(1 for s in nonland if s >= bc.HIGH_SYNERGY_THRESHOLD)
            self.notes.append(f"Average nonland synergy: {avg:.1f} ({high} high-synergy cards)")
        themes = list(self.constraints.keywords) + list(self.constraints.keyword_focus)
        if themes:
            self.notes.append(f"Themes applied: {', '.join(themes)}")
        if self.random_tags:
            self.notes.append(f"Random theme tags: {', '.join(self.random_tags)}")
        if self.skipped_cards:
            self.notes.append(f"{len(self.skipped_cards)} cards skipped after analysis or scoring failures")

    def _write_curve_notes(self, cards: List[DeckCard]) -> mc.ManaCurveAnalysis:
        analysis = mc.perform_mana_curve_analysis((s.card for s in cards if s.role != 'land'), self.commander_card)
        self.notes.append(
            f"Mana curve ({analysis.archetype}): {analysis.distribution()}; "
            f"average CMC {analysis.average_cmc:.2f}, deviation {analysis.deviation}"
        )
        self.notes.extend(f"Curve: {r}" for r in analysis.recommendations)
        logger.info(f"Mana curve [{analysis.archetype}] {analysis.distribution()} (deviation {analysis.deviation})")
        return analysis

    def finalize_deck(self) -> GeneratedDeck:  # type: ignore[override]
        """Assemble, price and validate the deck.

        Raises:
            DeckValidationError: If the assembled deck breaks a format rule
        """
        cards = list(self.selected) + list(self.lands)
        commander = self._commander_slot()
        total_price = commander.price_used + sum(s.price_used for s in cards)

        budget = self.constraints.total_budget
        if budget is not None and total_price > budget:
            self.warnings.append(f"Deck total ${total_price:.2f} exceeds total_budget ${budget:.2f}")

        errors = validate_deck_composition(self.commander_card, cards)
        if errors:
            for err in errors:
                logger.error(f"Deck validation: {err}")
            raise DeckValidationError(self.commander_card.name, errors)

        self._write_notes(cards)
        curve = self._write_curve_notes(cards)
        for warning in self.warnings:
            logger.warning(warning)
        logger.info(f"Deck total: {len(cards) + 1} cards, ${total_price:.2f}")
        return GeneratedDeck(
            commander=commander,
            cards=cards,
            total_price=total_price,
            warnings=list(self.warnings),
            notes=list(self.notes),
            mana_curve=dict(curve.current),
        )
