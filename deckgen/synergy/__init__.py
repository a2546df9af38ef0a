"""Commander profiles and synergy scoring."""

from deckgen.synergy.commander_profile import CommanderProfileBuilder, strategies_for_tags
from deckgen.synergy.scorer import SynergyScorer, calculate_synergy
from deckgen.synergy.tag_synergy import TagBasedSynergyScorer

__all__ = [
    'CommanderProfileBuilder',
    'strategies_for_tags',
    'SynergyScorer',
    'TagBasedSynergyScorer',
    'calculate_synergy',
]
