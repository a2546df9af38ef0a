"""Commander deck generator: mechanics tagging, synergy scoring and deck generation.

Public entry points (loaded lazily):
  - generate_deck(commander_name, constraints) -> GeneratedDeck
  - analyze_card(card) -> CardMechanicsProfile
  - calculate_synergy(commander_profile, card_profile) -> (score, breakdown)
"""

from __future__ import annotations

__version__ = '1.0.0'

__all__ = ['generate_deck', 'analyze_card', 'calculate_synergy', '__version__']

_LAZY = {
    'generate_deck': ('deckgen.deck_builder.builder', 'generate_deck'),
    'analyze_card': ('deckgen.tagging.mechanics_tagger', 'analyze_card'),
    'calculate_synergy': ('deckgen.synergy.scorer', 'calculate_synergy'),
}


def __getattr__(name):
    if name in _LAZY:
        from importlib import import_module
        module_name, attr = _LAZY[name]
        return getattr(import_module(module_name), attr)
    raise AttributeError(name)
