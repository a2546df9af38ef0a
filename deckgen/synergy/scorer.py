"""Combined synergy signal for the generation pipeline.

total = (tag-based score, or the legacy heuristic when that is exactly 0)
        + keyword-overlap score

Tag-based and legacy scores are never added together.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from deckgen.logging_util import get_logger
from deckgen.synergy.keyword_synergy import KeywordCatalog, get_keyword_catalog
from deckgen.synergy.legacy_synergy import calculate_legacy_synergy
from deckgen.synergy.rules import SynergyRuleTable, default_rule_table
from deckgen.synergy.tag_synergy import TagBasedSynergyScorer, sort_breakdown
from deckgen.type_definitions import (
    Card,
    CardMechanicsProfile,
    CommanderProfile,
    SynergyContribution,
    SynergyScore,
)

logger = get_logger(__name__)


class SynergyScorer:
    """Scores candidates against one commander using all three signals."""

    def __init__(
        self,
        rule_table: Optional[SynergyRuleTable] = None,
        keyword_catalog: Optional[KeywordCatalog] = None,
    ):
        self.rule_table = rule_table or default_rule_table()
        self.tag_scorer = TagBasedSynergyScorer(self.rule_table)
        self.keyword_catalog = keyword_catalog or get_keyword_catalog()

    def score(
        self,
        commander_card: Card,
        commander: CommanderProfile,
        card: Card,
        card_profile: CardMechanicsProfile,
    ) -> SynergyScore:
        tag_score, breakdown = self.tag_scorer.calculate_synergy(commander, card_profile)
        legacy_score = 0.0
        used_legacy = tag_score == 0
        if used_legacy:
            legacy_score, legacy_items = calculate_legacy_synergy(commander_card, card)
            breakdown = breakdown + legacy_items

        keyword = self.keyword_catalog.calculate_keyword_synergy(
            commander_card.oracle_text, card.oracle_text, self.rule_table.keyword_synergy
        )
        if keyword.score > 0:
            breakdown = breakdown + [SynergyContribution(
                source='keyword',
                commander_key='oracle_text',
                card_tag=', '.join(keyword.shared_keywords),
                score=keyword.score,
                description=keyword.analysis,
            )]

        primary = legacy_score if used_legacy else tag_score
        total = max(0.0, primary + keyword.score)
        logger.debug(
            f"{card.name}: total={total:.1f} tag={tag_score:.1f} legacy={legacy_score:.1f} keyword={keyword.score:.1f}"
        )
        return SynergyScore(
            total=total,
            tag_score=tag_score,
            keyword_score=keyword.score,
            legacy_score=legacy_score,
            used_legacy=used_legacy,
            shared_keywords=keyword.shared_keywords,
            breakdown=tuple(sort_breakdown(list(breakdown))),
        )


def calculate_synergy(
    commander: CommanderProfile,
    card_profile: CardMechanicsProfile,
    rule_table: Optional[SynergyRuleTable] = None,
) -> Tuple[float, List[SynergyContribution]]:
    """Tag-based synergy of one card for one commander profile."""
    return TagBasedSynergyScorer(rule_table).calculate_synergy(commander, card_profile)
