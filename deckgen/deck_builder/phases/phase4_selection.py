"""Phase 4: Nonland selection under card_type_weights.

Ranking is by final score descending, then fit to the commander's target mana
curve (see mana_curve), then name and id, so equal inputs always walk the
list in the same order.

  - planeswalkers: exact count. The top N eligible planeswalkers are taken
    first; a warning is recorded when fewer than N exist.
  - other categories: each walk of the ranked list accepts a card with
    probability INCLUSION_ACCEPT_BASE × weight / max(5, heaviest weight), so
    heavier categories are pulled forward and lighter ones held back.
    Walks repeat up to MAX_SELECTION_PASSES times; any remaining shortfall is
    filled in rank order.
  - singleton: one copy per name; the commander's name is reserved.
  - max_card_price: pricier cards are passed over (planeswalkers exempt).

Expected attributes on the host DeckBuilder:
  - constraints, rng, commander_card, candidates
  - selected, warnings, curve_archetype (updated here)
"""

from __future__ import annotations

from typing import List, Mapping, Optional, Set

from deckgen import settings
from deckgen.deck_builder import builder_constants as bc
from deckgen.deck_builder import builder_utils as bu
from deckgen.deck_builder import mana_curve as mc
from deckgen.logging_util import get_logger
from deckgen.type_definitions import DeckCard

logger = get_logger(__name__)


def rank_candidates(candidates, curve: Optional[Mapping[str, int]] = None):
    """Final score descending; equal scores prefer the mana value the target curve wants most."""
    def key(c):
        fit = curve.get(mc.curve_bucket(c.card.cmc), 0) if curve else 0
        return (-c.final_score, -fit, c.card.name.lower(), c.card.id)
    return sorted(candidates, key=key)


class SelectionMixin:
    def _deck_card(self, candidate) -> DeckCard:
        price, source = bu.extract_card_price(candidate.card, self.constraints.prefer_cheapest)
        return DeckCard(
            card=candidate.card,
            role=bc.CATEGORY_ROLE.get(candidate.category, 'other'),
            synergy_score=candidate.final_score,
            price_used=price,
            price_source=source,
        )

    def _over_price(self, candidate) -> bool:
        cap = self.constraints.max_card_price
        if cap is None:
            return False
        price, _ = bu.extract_card_price(candidate.card, self.constraints.prefer_cheapest)
        return price > cap

    def nonland_target(self) -> int:
        return max(0, settings.NON_COMMANDER_SLOTS - settings.LAND_TARGET)

    def select_planeswalkers(self, ranked, taken: Set[str]) -> List[DeckCard]:  # type: ignore[override]
        wanted = self.constraints.card_type_weights.planeswalkers
        if wanted <= 0:
            return []
        picks: List[DeckCard] = []
        for cand in ranked:
            if len(picks) >= wanted:
                break
            if cand.category != bc.PLANESWALKER_CATEGORY or cand.name.lower() in taken:
                continue
            picks.append(self._deck_card(cand))
            taken.add(cand.name.lower())
        if len(picks) < wanted:
            self.warnings.append(
                f"Could not fill planeswalker count: requested {wanted}, only {len(picks)} eligible cards available"
            )
        logger.info(f"Planeswalkers: {len(picks)}/{wanted}")
        return picks

    def select_nonlands(self) -> List[DeckCard]:  # type: ignore[override]
        """Fill the nonland slots; returns the selected deck cards."""
        weights = self.constraints.card_type_weights
        self.curve_archetype = mc.determine_curve_archetype(self.commander_card)
        curve = mc.target_curve(self.curve_archetype)
        logger.info(f"Curve archetype: {self.curve_archetype}")
        ranked = rank_candidates((c for c in self.candidates if not c.is_land), curve)
        taken: Set[str] = {self.commander_card.name.lower()}
        target = self.nonland_target()

        selected = self.select_planeswalkers(ranked, taken)
        if len(selected) > target:
            target = len(selected)

        reference = max(getattr(weights, cat) for cat in bc.WEIGHTED_CATEGORIES)
        over_price: Set[str] = set()
        eligible = []
        for cand in ranked:
            if cand.category == bc.PLANESWALKER_CATEGORY or cand.name.lower() in taken:
                continue
            if bu.category_weight(weights, cand.category) <= 0:
                continue
            if self._over_price(cand):
                over_price.add(cand.name)
                continue
            eligible.append(cand)

        passes = 0
        while len(selected) < target and passes < settings.MAX_SELECTION_PASSES:
            passes += 1
            for cand in eligible:
                if len(selected) >= target:
                    break
                key = cand.name.lower()
                if key in taken:
                    continue
                if self.rng.random() < bu.acceptance_probability(bu.category_weight(weights, cand.category), reference):
                    selected.append(self._deck_card(cand))
                    taken.add(key)
            if all(c.name.lower() in taken for c in eligible):
                break

        for cand in eligible:
            if len(selected) >= target:
                break
            if cand.name.lower() not in taken:
                selected.append(self._deck_card(cand))
                taken.add(cand.name.lower())

        if over_price:
            self.warnings.append(
                f"{len(over_price)} cards above max_card_price (${self.constraints.max_card_price:.2f}) were passed over"
            )
        if len(selected) < target:
            self.warnings.append(
                f"Only {len(selected)} eligible nonland cards available for {target} nonland slots; "
                "remaining slots are filled with lands"
            )
        self.selected = selected
        logger.info(f"Selected {len(selected)}/{target} nonland cards in {passes} passes")
        return selected
