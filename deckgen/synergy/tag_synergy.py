"""Tag-based synergy between a commander profile and a candidate card.

Three sources add up to the score:
- rules: table lookup of (commander strategy | commander tag) x card tag, scaled
  by the card tag's synergy_weight and confidence
- tribal: a tribe-size-tiered bonus when the commander cares about a tribe and
  the card belongs to it, plus a double bonus when the commander has both the
  tribal_X and X_matters tags
- baseline: shared tags (priority x 2) and tags whose category maps to one of
  the commander's strategies (priority), both scaled by weight and confidence

Scoring is a pure function of its inputs. The breakdown is ordered by
contribution descending, then card tag, then source.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from deckgen.logging_util import get_logger
from deckgen.synergy.commander_profile import tribes_for_tags
from deckgen.synergy.rules import SynergyRule, SynergyRuleTable, default_rule_table
from deckgen.type_definitions import (
    CardMechanicsProfile,
    CommanderProfile,
    MechanicTag,
    SynergyContribution,
    TagCategory,
)

logger = get_logger(__name__)

# Logged at DEBUG when a card scores beyond this magnitude.
NOTABLE_SCORE = 50.0

# Type-line tags are shared by most of the pool; they never count as a direct match.
_NO_DIRECT_MATCH_CATEGORIES = frozenset({TagCategory.CARD_TYPES})


def sort_breakdown(items: List[SynergyContribution]) -> List[SynergyContribution]:
    return sorted(items, key=lambda c: (-c.score, c.card_tag, c.source, c.commander_key))


class TagBasedSynergyScorer:
    """Scores candidate cards against a commander profile using a rule table."""

    def __init__(self, rule_table: Optional[SynergyRuleTable] = None):
        table = rule_table or default_rule_table()
        self.rules_version = table.rules_version
        self.synergy_rules: List[SynergyRule] = list(table.rules)
        self.category_strategies = {k: tuple(v) for k, v in table.category_strategies.items()}
        self.tribal = table.tribal

    # ------------------------------------------------------------------
    # Rule management
    # ------------------------------------------------------------------
    def get_applicable_rules(self, commander: CommanderProfile) -> List[SynergyRule]:
        """Rules whose commander key is one of the commander's tags or strategies."""
        return [r for r in self.synergy_rules if commander.has(r.commander_key)]

    def add_custom_rule(self, rule: SynergyRule) -> None:
        self.synergy_rules.append(rule)

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------
    def calculate_synergy(
        self, commander: CommanderProfile, card: CardMechanicsProfile
    ) -> Tuple[float, List[SynergyContribution]]:
        """Score one candidate.

        Returns:
            (score floored at 0, ordered breakdown)
        """
        breakdown: List[SynergyContribution] = []
        breakdown.extend(self._rule_contributions(commander, card))
        breakdown.extend(self._tribal_contributions(commander, card))
        breakdown.extend(self._baseline_contributions(commander, card))
        breakdown = sort_breakdown(breakdown)
        total = max(0.0, sum(c.score for c in breakdown))
        if abs(total) >= NOTABLE_SCORE:
            logger.debug(f"High tag synergy: {card.card_name} = {total:.1f} ({len(breakdown)} contributions)")
        return total, breakdown

    def _rule_contributions(self, commander: CommanderProfile, card: CardMechanicsProfile) -> List[SynergyContribution]:
        out: List[SynergyContribution] = []
        for rule in self.get_applicable_rules(commander):
            tag = card.get_tag(rule.card_tag)
            if tag is None:
                continue
            score = rule.score * tag.synergy_weight * tag.confidence
            out.append(SynergyContribution(
                source='rule',
                commander_key=rule.commander_key,
                card_tag=tag.name,
                score=round(score, 4),
                description=f"{rule.description} (weight {tag.synergy_weight:.1f}, confidence {tag.confidence:.2f})",
            ))
        return out

    def _tribal_contributions(self, commander: CommanderProfile, card: CardMechanicsProfile) -> List[SynergyContribution]:
        out: List[SynergyContribution] = []
        for tribe, (has_tribal, has_matters) in sorted(tribes_for_tags(commander.tags).items()):
            tier = self.tribal.tier_for(tribe)
            if tier is None:
                continue
            members = self._tribe_member_tags(tribe, card)
            if not members:
                continue
            weight = sum(t.synergy_weight for t in members) / len(members)
            card_tag = members[0].name
            out.append(SynergyContribution(
                source='tribal',
                commander_key=f'tribal_{tribe}' if has_tribal else f'{tribe}_matters',
                card_tag=card_tag,
                score=round(tier.base_bonus * weight, 4),
                description=f"{tribe.capitalize()} type synergy with tribal commander (weight {weight:.1f})",
            ))
            if has_tribal and has_matters:
                out.append(SynergyContribution(
                    source='tribal',
                    commander_key=f'{tribe}_matters',
                    card_tag=card_tag,
                    score=round(tier.double_bonus * weight, 4),
                    description=f"Double tribal bonus for {tribe}",
                ))
        return out

    @staticmethod
    def _tribe_member_tags(tribe: str, card: CardMechanicsProfile) -> List[MechanicTag]:
        if tribe == 'artifact':
            return [t for t in card.mechanic_tags if t.name == 'type_artifact']
        return [t for t in card.mechanic_tags if t.name == f'creature_type_{tribe}']

    def _baseline_contributions(self, commander: CommanderProfile, card: CardMechanicsProfile) -> List[SynergyContribution]:
        out: List[SynergyContribution] = []
        for tag in card.mechanic_tags:
            if tag.name in commander.tags and tag.category not in _NO_DIRECT_MATCH_CATEGORIES:
                out.append(SynergyContribution(
                    source='baseline',
                    commander_key=tag.name,
                    card_tag=tag.name,
                    score=round(tag.priority * 2 * tag.synergy_weight * tag.confidence, 4),
                    description='Shares a mechanic with the commander',
                ))
            matched = sorted(s for s in self.category_strategies.get(tag.category.value, ()) if s in commander.strategies)
            if matched:
                out.append(SynergyContribution(
                    source='baseline',
                    commander_key=matched[0],
                    card_tag=tag.name,
                    score=round(tag.priority * tag.synergy_weight * tag.confidence, 4),
                    description=f"{tag.category.value} fits the commander's {matched[0]} strategy",
                ))
        return out
