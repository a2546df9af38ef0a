"""Commander strategy profiles.

A commander's strategies are inferred from its tag names alone by matching a
fixed table of archetype signatures. Each strategy lists one or more tag sets;
the strategy applies when any one set is fully present. A commander may match
several strategies or none.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, Tuple

from deckgen.logging_util import get_logger
from deckgen.type_definitions import Card, CardMechanicsProfile, CommanderProfile

logger = get_logger(__name__)


def _sig(*groups: Iterable[str]) -> Tuple[FrozenSet[str], ...]:
    return tuple(frozenset(g) for g in groups)


ARCHETYPE_SIGNATURES: Dict[str, Tuple[FrozenSet[str], ...]] = {
    '+1/+1 counters': _sig({'plus_one_counters'}, {'proliferate'}, {'counter_doubling'}),
    'tokens': _sig({'token_creation'}, {'creature_token_creation'}, {'tokens_matter'}, {'token_doubling'}),
    'go_wide': _sig({'token_creation', 'anthem_effect'}, {'creature_token_creation', 'anthem_effect'}),
    'aristocrats': _sig({'sacrifice_outlet', 'death_trigger'}, {'death_trigger', 'drain_effect'}),
    'sacrifice': _sig({'sacrifice_outlet'}),
    'spellslinger': _sig({'spell_trigger'}, {'spell_copying'}),
    'artifacts': _sig({'artifact_synergy'}),
    'enchantments': _sig({'enchantment_synergy'}),
    'landfall': _sig({'landfall'}, {'lands_matter'}, {'extra_land_drop', 'land_ramp'}),
    'reanimator': _sig({'reanimation'}, {'self_mill', 'graveyard_recursion'}),
    'graveyard': _sig({'graveyard_synergy'}, {'self_mill'}, {'graveyard_recursion'}),
    'blink': _sig({'flicker_effect'}, {'etb_payoff_generic'}),
    'etb': _sig({'etb_trigger_creature'}, {'etb_payoff_generic'}),
    'voltron': _sig({'equipment'}, {'aura_synergy'}),
    'lifegain': _sig({'lifegain_trigger'}, {'life_gain', 'drain_effect'}),
    'card_draw': _sig({'draw_trigger'}, {'wheel_effect'}),
    'ramp': _sig({'land_ramp'}, {'extra_land_drop'}),
    'control': _sig({'counterspell', 'spot_removal'}, {'board_wipe'}),
    'combat': _sig({'attack_trigger'}, {'combat_damage_trigger'}, {'extra_combat'}),
    'superfriends': _sig({'type_planeswalker'}),
    'poison': _sig({'poison_strategy'}),
    'energy': _sig({'energy_generation'}),
    'treasure': _sig({'treasure_generation'}),
}


def is_tribal_tag(name: str) -> bool:
    return name.startswith('tribal_') or name.endswith('_matters')


def strategies_for_tags(tags: Iterable[str]) -> FrozenSet[str]:
    """Strategy labels implied by a tag set (pure function of the tags)."""
    tag_set = frozenset(tags)
    found = {
        strategy
        for strategy, groups in ARCHETYPE_SIGNATURES.items()
        if any(group <= tag_set for group in groups)
    }
    if any(is_tribal_tag(t) for t in tag_set):
        found.add('tribal')
    return frozenset(found)


def tribes_for_tags(tags: Iterable[str]) -> Dict[str, Tuple[bool, bool]]:
    """Map tribe -> (has tribal_X, has X_matters) for a commander tag set."""
    tribes: Dict[str, Tuple[bool, bool]] = {}
    for tag in tags:
        if tag.startswith('tribal_'):
            tribe = tag[len('tribal_'):]
            tribal, matters = tribes.get(tribe, (False, False))
            tribes[tribe] = (True, matters)
        elif tag.endswith('_matters'):
            tribe = tag[:-len('_matters')]
            tribal, matters = tribes.get(tribe, (False, False))
            tribes[tribe] = (tribal, True)
    return tribes


class CommanderProfileBuilder:
    """Reduces a commander's analysis to the tag/strategy profile used for scoring."""

    def build(self, card: Card, profile: CardMechanicsProfile) -> CommanderProfile:
        tags = frozenset(profile.tag_names())
        strategies = strategies_for_tags(tags)
        if not strategies:
            logger.info(f"Commander {card.name} matched no strategy signature; scoring will rely on tags only")
        else:
            logger.info(f"Commander {card.name} strategies: {', '.join(sorted(strategies))}")
        return CommanderProfile(
            name=card.name,
            tags=tags,
            strategies=strategies,
            color_identity=card.color_identity,
        )


def build_commander_profile(card: Card, profile: CardMechanicsProfile) -> CommanderProfile:
    return CommanderProfileBuilder().build(card, profile)
