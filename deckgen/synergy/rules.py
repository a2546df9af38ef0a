"""Pydantic schema and loader for the versioned synergy rule table.

The rule table is curation content, kept in deckgen/config/synergy_rules.yml
(override with DECKGEN_RULES_PATH). Loading validates the whole file up front
so scoring never has to cope with a half-valid table.
"""

from __future__ import annotations

# Standard library imports
import re
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

# Third-party imports
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from deckgen.exceptions import SynergyRulesError
from deckgen.logging_util import get_logger
from deckgen.path_util import get_synergy_rules_path
from deckgen.type_definitions import TagCategory

logger = get_logger(__name__)


class SynergyRule(BaseModel):
    """One (commander strategy | commander tag) x card tag contribution."""
    commander_strategy: Optional[str] = None
    commander_tag: Optional[str] = None
    card_tag: str
    score: float
    description: str = ''

    model_config = ConfigDict(extra='forbid', frozen=True)

    @model_validator(mode='after')
    def _exactly_one_key(self) -> 'SynergyRule':
        if (self.commander_strategy is None) == (self.commander_tag is None):
            raise ValueError('rule needs exactly one of commander_strategy / commander_tag')
        return self

    @property
    def commander_key(self) -> str:
        return self.commander_strategy if self.commander_strategy is not None else self.commander_tag

    @property
    def is_strategy_rule(self) -> bool:
        return self.commander_strategy is not None


class TribeTier(BaseModel):
    base_bonus: float
    double_bonus: float

    model_config = ConfigDict(extra='forbid')


class TribalConfig(BaseModel):
    default_tier: str = 'uncommon'
    tiers: Dict[str, TribeTier] = Field(default_factory=dict)
    tribe_sizes: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(extra='forbid')

    @model_validator(mode='after')
    def _known_tiers(self) -> 'TribalConfig':
        if self.tiers and self.default_tier not in self.tiers:
            raise ValueError(f"default_tier '{self.default_tier}' is not a defined tier")
        unknown = sorted({tier for tier in self.tribe_sizes.values() if tier not in self.tiers})
        if unknown:
            raise ValueError(f"tribe_sizes reference undefined tiers: {unknown}")
        return self

    def tier_for(self, tribe: str) -> Optional[TribeTier]:
        if not self.tiers:
            return None
        return self.tiers[self.tribe_sizes.get(tribe, self.default_tier)]


class KeywordTier(BaseModel):
    name: str
    score: float
    members: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra='forbid')

    @field_validator('members')
    @classmethod
    def _lower_members(cls, v: List[str]) -> List[str]:
        return [m.strip().lower() for m in v if m and m.strip()]


class KeywordSynergyConfig(BaseModel):
    unmatched_score: float = 1
    multi_match_bonus: float = 2
    score_cap: float = 35
    tiers: List[KeywordTier] = Field(default_factory=list)

    model_config = ConfigDict(extra='forbid')

    def tier_score(self, keyword: str) -> float:
        """Score of the first tier with a member appearing as whole words in the keyword."""
        kw = keyword.strip().lower()
        for tier in self.tiers:
            if any(re.search(rf'(?<!\w){re.escape(member)}(?!\w)', kw) for member in tier.members):
                return tier.score
        return self.unmatched_score


class SynergyRuleTable(BaseModel):
    rules_version: int
    rules: List[SynergyRule] = Field(default_factory=list)
    category_strategies: Dict[str, List[str]] = Field(default_factory=dict)
    tribal: TribalConfig = Field(default_factory=TribalConfig)
    keyword_synergy: KeywordSynergyConfig = Field(default_factory=KeywordSynergyConfig)

    model_config = ConfigDict(extra='forbid')

    @field_validator('category_strategies')
    @classmethod
    def _known_categories(cls, v: Dict[str, List[str]]) -> Dict[str, List[str]]:
        valid = {c.value for c in TagCategory}
        unknown = sorted(k for k in v if k not in valid)
        if unknown:
            raise ValueError(f"unknown tag categories: {unknown}")
        return v

    def rules_by_card_tag(self) -> Dict[str, List[SynergyRule]]:
        grouped: Dict[str, List[SynergyRule]] = {}
        for rule in self.rules:
            grouped.setdefault(rule.card_tag, []).append(rule)
        return grouped


def load_synergy_rules(path: str | Path | None = None) -> SynergyRuleTable:
    """Load and validate a rule table file.

    Args:
        path: YAML file (default: path_util.get_synergy_rules_path())

    Raises:
        SynergyRulesError: If the file is missing, unreadable or fails validation
    """
    target = Path(path) if path is not None else Path(get_synergy_rules_path())
    try:
        obj = yaml.safe_load(target.read_text(encoding='utf-8'))
    except OSError as e:
        raise SynergyRulesError(str(target), f"cannot read file: {e}") from e
    except yaml.YAMLError as e:
        raise SynergyRulesError(str(target), f"invalid YAML: {e}") from e
    if not isinstance(obj, dict):
        raise SynergyRulesError(str(target), 'top level must be a mapping')
    try:
        table = SynergyRuleTable.model_validate(obj)
    except ValidationError as e:
        raise SynergyRulesError(str(target), 'schema validation failed', details={'errors': e.errors()}) from e
    logger.info(f"Loaded synergy rules v{table.rules_version} ({len(table.rules)} rules) from {target}")
    return table


@lru_cache(maxsize=1)
def default_rule_table() -> SynergyRuleTable:
    """Bundled (or DECKGEN_RULES_PATH) rule table, loaded once per process."""
    return load_synergy_rules()
