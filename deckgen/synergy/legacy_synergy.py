"""Coarse text heuristic used only when a card has zero tag-based synergy.

Gives analyzed-but-untagged cards a small baseline instead of a hard zero:
color identity fit, ETB payoffs for commanders that blink or re-enter, broad
type words the commander mentions, a few universal staples, and a fixed list of
shared keywords.
"""

from __future__ import annotations

import re
from typing import List, Tuple

from deckgen.tagging.mechanics_tagger import BASIC_SHARED_KEYWORDS
from deckgen.type_definitions import Card, SynergyContribution

COLORLESS_POINTS = 2
COLOR_OVERLAP_POINTS = 1
TYPE_WORD_POINTS = 3
STAPLE_POINTS = 5
SHARED_KEYWORD_POINTS = 1

LEGACY_STAPLES = frozenset({'sol ring', 'arcane signet', 'command tower'})
BROAD_TYPE_WORDS: Tuple[str, ...] = ('artifact', 'enchantment', 'instant', 'sorcery', 'planeswalker', 'land')

# Commander text hinting at blink / re-entry and the payoff phrases it rewards.
_ETB_COMMANDER_WORDS: Tuple[str, ...] = ('exile', 'enters', 'leaves', 'return')
_ETB_PAYOFFS: Tuple[Tuple[Tuple[str, ...], int, str], ...] = (
    (('whenever a creature enters', 'when a creature enters'), 10, 'Triggers on any creature entering'),
    (('whenever a creature you control enters', 'when a creature you control enters'), 8, 'Triggers on your creatures entering'),
    (('whenever a creature leaves', 'when a creature leaves', 'whenever a creature dies'), 5, 'Triggers on creatures leaving'),
)


def _legacy(key: str, score: float, description: str) -> SynergyContribution:
    return SynergyContribution(source='legacy', commander_key=key, card_tag='', score=float(score), description=description)


def calculate_legacy_synergy(commander: Card, card: Card) -> Tuple[float, List[SynergyContribution]]:
    """Heuristic synergy between two raw cards.

    Returns:
        (score, contributions)
    """
    out: List[SynergyContribution] = []
    card_text = (card.oracle_text or '').lower()
    commander_text = (commander.oracle_text or '').lower()
    card_type = card.type_line_lower

    if not card.color_identity:
        out.append(_legacy('color_identity', COLORLESS_POINTS, 'Colorless cards fit any deck'))
    elif set(card.color_identity) <= set(commander.color_identity):
        overlap = len(set(card.color_identity) & set(commander.color_identity))
        out.append(_legacy('color_identity', overlap * COLOR_OVERLAP_POINTS, f'Shares {overlap} color(s) with the commander'))

    if any(word in commander_text for word in _ETB_COMMANDER_WORDS):
        for phrases, points, description in _ETB_PAYOFFS:
            if any(p in card_text for p in phrases):
                out.append(_legacy('etb', points, description))
        if 'create' in card_text and 'token' in card_text and 'creature' in card_text:
            out.append(_legacy('etb', 6, 'Creature tokens add enter triggers'))

    for word in BROAD_TYPE_WORDS:
        if word in commander_text and word in card_type:
            out.append(_legacy(f'type_{word}', TYPE_WORD_POINTS, f'Commander cares about {word}s'))

    if card.name.lower() in LEGACY_STAPLES:
        out.append(_legacy('staple', STAPLE_POINTS, 'Universal staple'))

    shared = [
        kw for kw in BASIC_SHARED_KEYWORDS
        if re.search(r'\b' + re.escape(kw) + r'\b', card_text) and re.search(r'\b' + re.escape(kw) + r'\b', commander_text)
    ]
    if shared:
        out.append(_legacy('keywords', len(shared) * SHARED_KEYWORD_POINTS, f"Shared words: {', '.join(shared)}"))

    return sum(c.score for c in out), out
