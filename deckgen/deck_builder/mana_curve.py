"""Mana curve targets and analysis for nonland spells.

Spells are bucketed by mana value into '0'..'5' and '6+'. A commander is
mapped to one curve archetype (aggro, midrange, control, ramp, combo) from
its text, cost and power; the archetype's target curve breaks ranking ties
during selection and the finished deck is compared against it for the notes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Final, Iterable, List, Mapping, Tuple

from deckgen.type_definitions import Card

CURVE_BINS: Final[Tuple[str, ...]] = ('0', '1', '2', '3', '4', '5', '6+')

# Target spell counts per bucket for each archetype
CURVE_ARCHETYPES: Final[Dict[str, Dict[str, int]]] = {
    'aggro':    {'0': 2, '1': 12, '2': 18, '3': 14, '4': 8,  '5': 5,  '6+': 6},
    'midrange': {'0': 3, '1': 8,  '2': 14, '3': 16, '4': 12, '5': 8,  '6+': 6},
    'control':  {'0': 4, '1': 6,  '2': 12, '3': 14, '4': 10, '5': 8,  '6+': 11},
    'ramp':     {'0': 5, '1': 4,  '2': 10, '3': 12, '4': 8,  '5': 10, '6+': 16},
    'combo':    {'0': 6, '1': 10, '2': 15, '3': 14, '4': 10, '5': 6,  '6+': 4},
}
DEFAULT_CURVE_ARCHETYPE: Final[str] = 'midrange'

# A bucket this far from its target gets a recommendation
RECOMMENDATION_SLACK: Final[int] = 2
HIGH_AVERAGE_CMC: Final[float] = 3.5
LOW_AVERAGE_CMC: Final[float] = 2.5


def curve_bucket(cmc: float) -> str:
    try:
        value = float(cmc or 0)
    except (TypeError, ValueError):
        value = 0.0
    if value >= 6:
        return '6+'
    return str(max(0, int(value)))


def _power(card: Card) -> int:
    try:
        return int(card.power) if card.power else 0
    except ValueError:
        # '*' and '1+*' style power
        return 0


def determine_curve_archetype(commander: Card) -> str:
    """Pick the curve archetype for a commander; the first matching signal wins."""
    text = (commander.oracle_text or '').lower()
    cmc = commander.cmc or 0
    if any(s in text for s in ('haste', 'attack', 'combat damage')) or (_power(commander) >= 4 and cmc <= 3):
        return 'aggro'
    if any(s in text for s in ('counter', 'draw', 'instant', 'flash')):
        return 'control'
    if ('land' in text and ('play' in text or 'put' in text)) or 'mana' in text or cmc >= 6:
        return 'ramp'
    if any(s in text for s in ('untap', 'copy', 'storm', 'cascade')):
        return 'combo'
    return DEFAULT_CURVE_ARCHETYPE


def target_curve(archetype: str) -> Dict[str, int]:
    return dict(CURVE_ARCHETYPES.get(archetype, CURVE_ARCHETYPES[DEFAULT_CURVE_ARCHETYPE]))


def analyze_mana_curve(cards: Iterable[Card]) -> Dict[str, int]:
    """Spell count per bucket; lands are not part of the curve."""
    curve = {b: 0 for b in CURVE_BINS}
    for card in cards:
        if 'land' in card.type_line.lower():
            continue
        curve[curve_bucket(card.cmc)] += 1
    return curve


def curve_deviation(current: Mapping[str, int], target: Mapping[str, int]) -> int:
    return sum(abs(current.get(b, 0) - target.get(b, 0)) for b in CURVE_BINS)


def average_cmc(curve: Mapping[str, int]) -> float:
    """Average over buckets, with '6+' counted as 6."""
    total = sum(curve.get(b, 0) for b in CURVE_BINS)
    if not total:
        return 0.0
    return sum(i * curve.get(b, 0) for i, b in enumerate(CURVE_BINS)) / total


def curve_recommendations(current: Mapping[str, int], target: Mapping[str, int]) -> List[str]:
    out: List[str] = []
    for b in CURVE_BINS:
        diff = current.get(b, 0) - target.get(b, 0)
        if diff > RECOMMENDATION_SLACK:
            out.append(f"Consider cutting {diff} cards at {b} CMC")
        elif diff < -RECOMMENDATION_SLACK:
            out.append(f"Consider adding {-diff} more cards at {b} CMC")
    avg = average_cmc(current)
    if avg > HIGH_AVERAGE_CMC:
        out.append('Curve is too high - add more low-cost cards')
    elif 0 < avg < LOW_AVERAGE_CMC:
        out.append('Curve might be too low - consider some higher impact cards')
    return out


@dataclass(frozen=True)
class ManaCurveAnalysis:
    archetype: str
    current: Dict[str, int]
    target: Dict[str, int]
    deviation: int
    average_cmc: float
    recommendations: List[str] = field(default_factory=list)

    def distribution(self) -> str:
        return ', '.join(f"{b}={self.current.get(b, 0)}" for b in CURVE_BINS)


def perform_mana_curve_analysis(cards: Iterable[Card], commander: Card) -> ManaCurveAnalysis:
    archetype = determine_curve_archetype(commander)
    target = target_curve(archetype)
    current = analyze_mana_curve(cards)
    return ManaCurveAnalysis(
        archetype=archetype,
        current=current,
        target=target,
        deviation=curve_deviation(current, target),
        average_cmc=round(average_cmc(current), 2),
        recommendations=curve_recommendations(current, target),
    )
