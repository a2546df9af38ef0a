"""Commander format rules: eligibility, card legality and deck composition checks."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from deckgen import settings
from deckgen.deck_builder import builder_constants as bc
from deckgen.deck_builder.builder_utils import is_basic_land
from deckgen.deck_builder.color_identity_utils import is_identity_subset
from deckgen.type_definitions import Card, DeckCard


def is_banned(card: Card) -> bool:
    return card.name.strip().lower() in bc.COMMANDER_BAN_LIST


def is_card_legal_in_commander(card: Card) -> bool:
    """Legal in the format and not on the ban list.

    Cards without any legality data are treated as legal (snapshots without a
    legalities column); an explicit non-'legal' value is not.
    """
    if is_banned(card):
        return False
    if not card.legalities:
        return True
    return str(card.legalities.get('commander', '')).lower() == 'legal'


def commander_eligibility(card: Card) -> Tuple[bool, str]:
    """Return (eligible, reason) where reason names the failed rule.

    Eligible leaders: legendary creatures, and planeswalkers whose text says
    they can be your commander. A Background only leads alongside a partner
    creature, so on its own it fails the type rule.
    """
    tline = card.type_line.lower()
    text = (card.oracle_text or '').lower()
    has_type = (
        ('legendary' in tline and 'creature' in tline)
        or ('planeswalker' in tline and 'can be your commander' in text)
    )
    if not has_type:
        return False, 'type'
    if not is_card_legal_in_commander(card):
        return False, 'legality'
    return True, ''


def is_commander_eligible(card: Card) -> bool:
    return commander_eligibility(card)[0]


def is_color_identity_valid(card: Card, commander_identity: Iterable[str]) -> bool:
    return is_identity_subset(card.color_identity, tuple(commander_identity))


def validate_deck_composition(commander: Card, cards: Sequence[DeckCard], expected: Optional[int] = None) -> List[str]:
    """Check a finished deck; returns error strings (empty when legal).

    Checks: exact count, singleton (basic lands exempt, commander included),
    color identity, format legality.
    """
    errors: List[str] = []
    expected = settings.NON_COMMANDER_SLOTS if expected is None else expected
    if len(cards) != expected:
        errors.append(f"Deck must contain exactly {expected} cards plus commander (found {len(cards)})")

    seen = {commander.name.lower()}
    duplicates: List[str] = []
    for slot in cards:
        if is_basic_land(slot.card):
            continue
        key = slot.card.name.lower()
        if key in seen and slot.card.name not in duplicates:
            duplicates.append(slot.card.name)
        seen.add(key)
    if duplicates:
        errors.append(f"Duplicate non-basic cards found: {', '.join(duplicates)}")

    off_color = [s.card.name for s in cards if not is_color_identity_valid(s.card, commander.color_identity)]
    if off_color:
        errors.append(f"Cards violate color identity: {', '.join(off_color)}")

    illegal = [s.card.name for s in cards if not is_card_legal_in_commander(s.card)]
    if illegal:
        errors.append(f"Illegal cards found: {', '.join(illegal)}")
    return errors
