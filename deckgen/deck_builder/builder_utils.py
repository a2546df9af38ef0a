"""Utility helper functions for the deck generation phases.

Pure/stateless helpers shared by the phase mixins: type categories, pip
weights, basic land allocation, price extraction, weighted sampling and land
ranking. Kept free of builder state so they can be tested on their own.
"""
from __future__ import annotations

import math
import random as _rand
import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from deckgen import settings
from deckgen.deck_builder import builder_constants as bc
from deckgen.type_definitions import Card, CardTypeWeights

COLOR_LETTERS = ['W', 'U', 'B', 'R', 'G']
_PIP = re.compile(r'\{([^}]+)\}')
_BASIC_NAMES_LOWER = {name.lower() for name in settings.BASIC_LAND_NAMES}


# ---------------------------------------------------------------------------
# Card classification
# ---------------------------------------------------------------------------
def card_type_category(type_line: str) -> str:
    """Map a type line to one card_type_weights category ('lands' / 'other' included)."""
    tline = (type_line or '').lower()
    for word, category in bc.TYPE_CATEGORY_ORDER:
        if word in tline:
            return category
    return bc.OTHER_CATEGORY


def is_basic_land(card: Card | str) -> bool:
    name = card if isinstance(card, str) else card.name
    return name.strip().lower() in _BASIC_NAMES_LOWER


def category_weight(weights: CardTypeWeights, category: str) -> int:
    """Inclusion weight of a category; lands and uncategorized cards are neutral."""
    if category in bc.WEIGHTED_CATEGORIES or category == bc.PLANESWALKER_CATEGORY:
        return int(getattr(weights, category))
    return settings.CARD_TYPE_WEIGHT_NEUTRAL


def acceptance_probability(weight: int | float, reference: int | float = settings.CARD_TYPE_WEIGHT_NEUTRAL) -> float:
    """Chance that one walk of the ranked list accepts a card of this weight.

    `reference` is the largest weight in play (never below neutral), so the
    heaviest category is accepted at INCLUSION_ACCEPT_BASE and the rest in proportion.
    """
    if weight <= 0:
        return 0.0
    reference = max(float(reference), float(settings.CARD_TYPE_WEIGHT_NEUTRAL))
    return min(1.0, settings.INCLUSION_ACCEPT_BASE * float(weight) / reference)


# ---------------------------------------------------------------------------
# Mana pips & basic lands
# ---------------------------------------------------------------------------
def compute_spell_pip_weights(cards: Iterable[Card], color_identity: Iterable[str]) -> Dict[str, float]:
    """Compute relative colored mana pip weights from non-land spells.

    Hybrid symbols are split evenly among their component colors. If no colored
    pips are found we fall back to an even distribution across the commander's
    color identity (or 0s if identity empty).
    """
    pip_counts = {c: 0.0 for c in COLOR_LETTERS}
    total_colored = 0.0
    for card in cards:
        if 'land' in card.type_line.lower():
            continue
        for match in _PIP.findall(card.mana_cost or ''):
            sym = match.upper()
            if len(sym) == 1 and sym in pip_counts:
                pip_counts[sym] += 1
                total_colored += 1
            elif '/' in sym:
                parts = [p for p in sym.split('/') if p in pip_counts]
                if parts:
                    weight_each = 1 / len(parts)
                    for p in parts:
                        pip_counts[p] += weight_each
                        total_colored += weight_each
    if total_colored <= 0:
        colors = [c for c in color_identity if c in pip_counts]
        if not colors:
            return {c: 0.0 for c in pip_counts}
        share = 1 / len(colors)
        return {c: (share if c in colors else 0.0) for c in pip_counts}
    return {c: (pip_counts[c] / total_colored) for c in pip_counts}


def allocate_basic_counts(pip_weights: Dict[str, float], color_identity: Sequence[str], slots: int) -> Dict[str, int]:
    """Split `slots` basic lands over the identity colors by pip share.

    Largest-remainder rounding so the counts always sum to exactly `slots`.
    Colors of the identity with no pips still get a share when every weight is 0.
    Colorless identities get Wastes ('C').
    """
    if slots <= 0:
        return {}
    colors = [c for c in COLOR_LETTERS if c in color_identity]
    if not colors:
        return {'C': slots}
    weights = {c: max(0.0, pip_weights.get(c, 0.0)) for c in colors}
    total = sum(weights.values())
    if total <= 0:
        weights = {c: 1.0 for c in colors}
        total = float(len(colors))
    raw = {c: slots * w / total for c, w in weights.items()}
    counts = {c: int(math.floor(v)) for c, v in raw.items()}
    leftover = slots - sum(counts.values())
    by_remainder = sorted(colors, key=lambda c: (-(raw[c] - counts[c]), COLOR_LETTERS.index(c)))
    for c in by_remainder[:leftover]:
        counts[c] += 1
    return {c: n for c, n in counts.items() if n > 0}


def make_basic_land(color: str) -> Card:
    """Synthesized basic land record for padding."""
    name = settings.BASIC_LAND_BY_COLOR[color]
    identity: Tuple[str, ...] = () if color == 'C' else (color,)
    subtype = '' if color == 'C' else f' — {name}'
    return Card(
        id=f'basic-{name.lower()}',
        name=name,
        type_line=f'Basic Land{subtype}',
        oracle_text=f'({{T}}: Add {{{color}}}.)',
        color_identity=identity,
        legalities={'commander': 'legal'},
        prices={'usd': settings.BASIC_LAND_PRICE},
        rarity='common',
    )


def make_command_tower() -> Card:
    return Card(
        id='command-tower',
        name=bc.COMMAND_TOWER,
        type_line='Land',
        oracle_text="{T}: Add one mana of any color in your commander's color identity.",
        legalities={'commander': 'legal'},
        prices={'usd': settings.COMMAND_TOWER_PRICE},
        rarity='common',
    )


# ---------------------------------------------------------------------------
# Land ranking
# ---------------------------------------------------------------------------
def tapped_land_penalty(type_line: str, oracle_text: str) -> int:
    """Penalty for lands that enter tapped; 0 for untapped lands.

    Conditional tapped lands (check lands, shocks) are cheaper than always-tapped ones.
    """
    text_l = (oracle_text or '').lower()
    if 'land' not in (type_line or '').lower():
        return 0
    if 'enters tapped' not in text_l and 'enters the battlefield tapped' not in text_l:
        return 0
    conditional = 'you may pay 2 life' in text_l or any(
        kw in text_l for kw in ('unless you control', 'if you control', 'as long as you control')
    )
    penalty = 6 if conditional else 8
    if 'any color' in text_l:
        penalty -= 3
    if 'cycling' in text_l:
        penalty -= 2
    return max(0, penalty)


def utility_land_score(card: Card, synergy: float = 0.0) -> float:
    """Heuristic ranking for nonbasic lands (higher is better)."""
    text_l = (card.oracle_text or '').lower()
    score = float(synergy)
    for fragment, bonus in bc.UTILITY_LAND_SIGNALS.items():
        if fragment in text_l:
            score += bonus
    return score - tapped_land_penalty(card.type_line, card.oracle_text)


# ---------------------------------------------------------------------------
# Prices
# ---------------------------------------------------------------------------
def _price_value(value) -> Optional[float]:
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(price) or price <= 0:
        return None
    return price


def extract_card_price(card: Card, prefer_cheapest: bool = False) -> Tuple[float, str]:
    """Return (price, source) for a card.

    Uses usd / usd_foil; prefer_cheapest picks the lower of the two. Cards with no
    usable price get a rarity-based estimate with source 'rarity-estimate'.
    """
    if is_basic_land(card):
        return settings.BASIC_LAND_PRICE, 'fixed-estimate'
    if card.name == bc.COMMAND_TOWER and not card.prices:
        return settings.COMMAND_TOWER_PRICE, 'fixed-estimate'
    found: List[Tuple[float, str]] = []
    for key in ('usd', 'usd_foil'):
        price = _price_value(card.prices.get(key))
        if price is not None:
            found.append((price, key))
    if not found:
        estimate = bc.RARITY_PRICE_ESTIMATES.get(card.rarity.lower(), bc.UNKNOWN_RARITY_PRICE)
        return estimate, 'rarity-estimate'
    if prefer_cheapest:
        return min(found)
    return found[0]


# ---------------------------------------------------------------------------
# Weighted sampling
# ---------------------------------------------------------------------------
def weighted_sample_without_replacement(pool: list[tuple[str, int | float]], k: int, rng=None) -> list[str]:
    """Sample up to k unique names from (name, weight) pool without replacement.

    If total weight becomes 0, stops early. Stable for small pools used here.
    """
    if k <= 0 or not pool:
        return []
    local_rng = rng if rng is not None else _rand
    working = pool.copy()
    chosen: list[str] = []
    while working and len(chosen) < k:
        total_w = sum(max(0, float(w)) for _, w in working)
        if total_w <= 0:
            break
        r = local_rng.random() * total_w
        acc = 0.0
        pick_idx = len(working) - 1
        for idx, (nm, w) in enumerate(working):
            acc += max(0, float(w))
            if r <= acc:
                pick_idx = idx
                break
        nm, _w = working.pop(pick_idx)
        chosen.append(nm)
    return chosen
