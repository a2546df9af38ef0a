"""Phase 5: Land base.

Fills every slot left after nonland selection so the deck reaches exactly
NON_COMMANDER_SLOTS cards:
  1. Command Tower for multicolor commanders
  2. up to MAX_UTILITY_LANDS nonbasic lands from the pool, best first
  3. basic lands split by colored pip demand (Wastes for colorless commanders)

Expected attributes on the host DeckBuilder:
  - constraints, commander_card, candidates, selected
  - lands (set here)
"""

from __future__ import annotations

from typing import List, Set

from deckgen import settings
from deckgen.deck_builder import builder_constants as bc
from deckgen.deck_builder import builder_utils as bu
from deckgen.deck_builder.color_identity_utils import is_multicolor
from deckgen.logging_util import get_logger
from deckgen.type_definitions import Card, DeckCard

logger = get_logger(__name__)


class LandBaseMixin:
    def _land_slot(self, card: Card, synergy: float = 0.0) -> DeckCard:
        price, source = bu.extract_card_price(card, self.constraints.prefer_cheapest)
        return DeckCard(card=card, role='land', synergy_score=synergy, price_used=price, price_source=source)

    def _utility_land_choices(self, taken: Set[str], limit: int) -> List[DeckCard]:
        cap = self.constraints.max_card_price
        ranked = []
        for cand in self.candidates:
            if not cand.is_land or cand.name.lower() in taken or cand.name == bc.COMMAND_TOWER:
                continue
            if cap is not None and bu.extract_card_price(cand.card, self.constraints.prefer_cheapest)[0] > cap:
                continue
            score = bu.utility_land_score(cand.card, cand.final_score)
            if score > 0:
                ranked.append((score, cand))
        ranked.sort(key=lambda pair: (-pair[0], pair[1].card.name.lower(), pair[1].card.id))
        return [self._land_slot(cand.card, cand.final_score) for _score, cand in ranked[:limit]]

    def add_lands(self) -> List[DeckCard]:  # type: ignore[override]
        """Build the land base for the remaining slots."""
        slots = settings.NON_COMMANDER_SLOTS - len(self.selected)
        lands: List[DeckCard] = []
        taken = {self.commander_card.name.lower()} | {s.name.lower() for s in self.selected}
        identity = self.commander_card.color_identity

        if slots > 0 and is_multicolor(identity):
            tower = next((c for c in self.candidates if c.name == bc.COMMAND_TOWER), None)
            lands.append(self._land_slot(tower.card if tower else bu.make_command_tower()))
            taken.add(bc.COMMAND_TOWER.lower())

        utility_room = min(settings.MAX_UTILITY_LANDS, slots - len(lands))
        if utility_room > 0:
            utility = self._utility_land_choices(taken, utility_room)
            lands.extend(utility)
            taken.update(s.name.lower() for s in utility)

        remaining = slots - len(lands)
        pip_weights = bu.compute_spell_pip_weights([self.commander_card] + [s.card for s in self.selected], identity)
        counts = bu.allocate_basic_counts(pip_weights, identity, remaining)
        for color in [*bu.COLOR_LETTERS, 'C']:
            for _ in range(counts.get(color, 0)):
                lands.append(self._land_slot(bu.make_basic_land(color)))

        self.lands = lands
        basics = sum(counts.values())
        logger.info(
            f"Land base: {len(lands)} lands ({len(lands) - basics} nonbasic, {basics} basic: "
            f"{', '.join(f'{settings.BASIC_LAND_BY_COLOR[c]}={n}' for c, n in counts.items()) or 'none'})"
        )
        return lands
