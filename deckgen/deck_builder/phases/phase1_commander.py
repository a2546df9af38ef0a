"""Phase 1: Commander resolution & profile.

Provided methods expect `self` to be a DeckBuilder instance exposing:
  - source (CardSource), tagger (CardMechanicsTagger)
  - commander_card, commander_mechanics, commander_profile (set here)

Both steps are fatal on failure: an unknown or ineligible commander aborts the
whole generation request.
"""

from __future__ import annotations

from deckgen.deck_builder.commander_rules import commander_eligibility
from deckgen.exceptions import CommanderNotFoundError, InvalidCommanderError
from deckgen.logging_util import get_logger
from deckgen.synergy.commander_profile import CommanderProfileBuilder
from deckgen.type_definitions import Card, CommanderProfile

logger = get_logger(__name__)


class CommanderResolutionMixin:
    # ---------------------------
    # Commander Resolution
    # ---------------------------
    def resolve_commander(self, commander_name: str) -> Card:  # type: ignore[override]
        """Look up and validate the commander card.

        Raises:
            CommanderNotFoundError: No card with that name (or front-face name)
            InvalidCommanderError: Card cannot lead a Commander deck
        """
        name = (commander_name or '').strip()
        if not name:
            raise CommanderNotFoundError(commander_name, details={'error': 'empty name'})
        card = self.source.get_card_by_name(name)
        if card is None:
            raise CommanderNotFoundError(name)
        eligible, reason = commander_eligibility(card)
        if not eligible:
            raise InvalidCommanderError(card.name, reason, details={'type_line': card.type_line})
        self.commander_card = card
        logger.info(f"Commander resolved: {card.name} [{''.join(card.color_identity) or 'C'}]")
        return card

    def build_commander_profile(self) -> CommanderProfile:  # type: ignore[override]
        """Tag the commander and reduce its tags to a strategy profile."""
        self.commander_mechanics = self.tagger.analyze_card(self.commander_card)
        self.commander_profile = CommanderProfileBuilder().build(self.commander_card, self.commander_mechanics)
        logger.info(
            f"Commander profile: {len(self.commander_profile.tags)} tags, "
            f"strategies={sorted(self.commander_profile.strategies) or '[]'}"
        )
        return self.commander_profile

    def run_commander_phase(self, commander_name: str) -> CommanderProfile:
        self.resolve_commander(commander_name)
        return self.build_commander_profile()
