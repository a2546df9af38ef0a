from __future__ import annotations

import json
import math
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, TypedDict

import pandas as pd


class TagCategory(str, Enum):
    """Fixed set of categories every mechanic tag belongs to."""
    TRIBAL = 'tribal'
    TOKENS = 'tokens'
    RESOURCE_GENERATION = 'resource_generation'
    COMBAT_ABILITIES = 'combat_abilities'
    REMOVAL_INTERACTION = 'removal_interaction'
    TRIGGERS_ABILITIES = 'triggers_abilities'
    SYNERGY_THEMES = 'synergy_themes'
    COUNTERS_MANIPULATION = 'counters_manipulation'
    WIN_CONDITIONS = 'win_conditions'
    CARD_TYPES = 'card_types'
    MANUAL = 'manual'
    OTHER = 'other'

    @classmethod
    def coerce(cls, value: Any) -> 'TagCategory':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.OTHER


# ----------------------------------------------------------------------------------
# Raw card record helpers
# ----------------------------------------------------------------------------------

def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return False


def _as_text(value: Any) -> str:
    if _is_missing(value):
        return ''
    return str(value)


def _as_float(value: Any, default: float = 0.0) -> float:
    if _is_missing(value) or value == '':
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_str_tuple(value: Any) -> Tuple[str, ...]:
    """Normalize list-likes, JSON strings and comma separated strings to a tuple."""
    if _is_missing(value):
        return ()
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return ()
        if text.startswith('['):
            try:
                return tuple(str(v).strip() for v in json.loads(text) if str(v).strip())
            except json.JSONDecodeError:
                pass
        return tuple(part.strip() for part in text.split(',') if part.strip())
    if isinstance(value, Iterable):
        return tuple(str(v).strip() for v in value if not _is_missing(v) and str(v).strip())
    return (str(value),)


def _as_mapping(value: Any) -> Dict[str, Any]:
    if _is_missing(value):
        return {}
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, str) and value.strip().startswith('{'):
        try:
            parsed = json.loads(value)
            return dict(parsed) if isinstance(parsed, dict) else {}
        except json.JSONDecodeError:
            return {}
    return {}


def _color_tuple(value: Any) -> Tuple[str, ...]:
    order = ('W', 'U', 'B', 'R', 'G')
    found = set()
    for token in _as_str_tuple(value):
        for ch in token.upper():
            if ch in order:
                found.add(ch)
    return tuple(c for c in order if c in found)


def parse_color_identity(value: Any) -> Tuple[str, ...]:
    """Color identity in WUBRG order from a list, JSON string or 'W, U' string."""
    return _color_tuple(value)


def parse_mapping(value: Any) -> Dict[str, Any]:
    return _as_mapping(value)


@dataclass(frozen=True)
class Card:
    """One raw card record as provided by the external card database.

    Read-only to the core. Built from Scryfall-style mappings or DataFrame rows
    via `Card.from_record`, which tolerates missing optional fields.
    """
    id: str
    name: str
    type_line: str
    oracle_text: str = ''
    mana_cost: str = ''
    cmc: float = 0.0
    color_identity: Tuple[str, ...] = ()
    colors: Tuple[str, ...] = ()
    keywords: Tuple[str, ...] = ()
    power: Optional[str] = None
    toughness: Optional[str] = None
    loyalty: Optional[str] = None
    legalities: Dict[str, str] = field(default_factory=dict, compare=False, hash=False)
    prices: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
    rarity: str = ''
    set_code: str = ''
    edhrec_rank: Optional[int] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any] | pd.Series) -> 'Card':
        if isinstance(record, pd.Series):
            record = record.to_dict()
        oracle = _as_text(record.get('oracle_text'))
        faces = record.get('card_faces')
        if not oracle and isinstance(faces, (list, tuple)):
            oracle = '\n//\n'.join(_as_text(f.get('oracle_text')) for f in faces if isinstance(f, Mapping))
        name = _as_text(record.get('name')).strip()
        card_id = _as_text(record.get('id')).strip() or name.lower()
        rank = record.get('edhrec_rank')
        return cls(
            id=card_id,
            name=name,
            type_line=_as_text(record.get('type_line')),
            oracle_text=oracle,
            mana_cost=_as_text(record.get('mana_cost')),
            cmc=_as_float(record.get('cmc', record.get('mana_value'))),
            color_identity=_color_tuple(record.get('color_identity')),
            colors=_color_tuple(record.get('colors')),
            keywords=_as_str_tuple(record.get('keywords')),
            power=None if _is_missing(record.get('power')) else str(record.get('power')),
            toughness=None if _is_missing(record.get('toughness')) else str(record.get('toughness')),
            loyalty=None if _is_missing(record.get('loyalty')) else str(record.get('loyalty')),
            legalities=_as_mapping(record.get('legalities')),
            prices=_as_mapping(record.get('prices')),
            rarity=_as_text(record.get('rarity')),
            set_code=_as_text(record.get('set', record.get('set_code'))),
            edhrec_rank=None if _is_missing(rank) or rank == '' else int(_as_float(rank)),
        )

    @property
    def type_line_lower(self) -> str:
        return self.type_line.lower()

    def to_record(self) -> Dict[str, Any]:
        data = asdict(self)
        data['set'] = data.pop('set_code')
        data['color_identity'] = list(self.color_identity)
        data['colors'] = list(self.colors)
        data['keywords'] = list(self.keywords)
        return data


@dataclass(frozen=True)
class MechanicTag:
    """A normalized mechanic/role label detected on one card.

    priority is clamped to 1-10 and confidence to 0-1 on construction.
    """
    name: str
    category: TagCategory
    priority: int
    confidence: float = 1.0
    evidence: Tuple[str, ...] = ()
    synergy_weight: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, 'category', TagCategory.coerce(self.category))
        object.__setattr__(self, 'priority', max(1, min(10, int(self.priority))))
        object.__setattr__(self, 'confidence', max(0.0, min(1.0, float(self.confidence))))
        object.__setattr__(self, 'evidence', tuple(self.evidence))
        object.__setattr__(self, 'synergy_weight', float(self.synergy_weight))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'category': self.category.value,
            'priority': self.priority,
            'confidence': self.confidence,
            'evidence': list(self.evidence),
            'synergy_weight': self.synergy_weight,
        }


@dataclass(frozen=True)
class CardMechanicsProfile:
    """Derived per-card analysis; recomputed on every analysis call."""
    card_id: str
    card_name: str
    primary_type: str
    functional_roles: Tuple[str, ...]
    power_level: int
    archetype_relevance: Tuple[str, ...]
    synergy_keywords: Tuple[str, ...]
    mechanic_tags: Tuple[MechanicTag, ...]

    def tag_names(self) -> List[str]:
        return [t.name for t in self.mechanic_tags]

    def get_tag(self, name: str) -> Optional[MechanicTag]:
        for tag in self.mechanic_tags:
            if tag.name == name:
                return tag
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'card_id': self.card_id,
            'card_name': self.card_name,
            'primary_type': self.primary_type,
            'functional_roles': list(self.functional_roles),
            'power_level': self.power_level,
            'archetype_relevance': list(self.archetype_relevance),
            'synergy_keywords': list(self.synergy_keywords),
            'mechanic_tags': [t.to_dict() for t in self.mechanic_tags],
        }


@dataclass(frozen=True)
class CommanderProfile:
    """Strategy profile of the chosen commander. strategies depends only on tags."""
    name: str
    tags: frozenset
    strategies: frozenset
    color_identity: Tuple[str, ...]

    def has(self, label: str) -> bool:
        return label in self.tags or label in self.strategies

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'tags': sorted(self.tags),
            'strategies': sorted(self.strategies),
            'color_identity': list(self.color_identity),
        }


@dataclass(frozen=True)
class SynergyContribution:
    """One explainable line of a synergy breakdown."""
    source: str        # 'rule', 'tribal', 'baseline', 'keyword' or 'legacy'
    commander_key: str  # commander strategy/tag (or signal name) that fired
    card_tag: str
    score: float
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SynergyScore:
    """Combined synergy signal handed to the generation pipeline."""
    total: float
    tag_score: float
    keyword_score: float
    legacy_score: float
    used_legacy: bool
    shared_keywords: Tuple[str, ...]
    breakdown: Tuple[SynergyContribution, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total': self.total,
            'tag_score': self.tag_score,
            'keyword_score': self.keyword_score,
            'legacy_score': self.legacy_score,
            'used_legacy': self.used_legacy,
            'shared_keywords': list(self.shared_keywords),
            'breakdown': [c.to_dict() for c in self.breakdown],
        }


@dataclass
class CardTypeWeights:
    """Relative inclusion weights (0-20, 5 neutral); planeswalkers is an exact count."""
    creatures: int = 5
    artifacts: int = 5
    enchantments: int = 5
    instants: int = 5
    sorceries: int = 5
    planeswalkers: int = 5

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> 'CardTypeWeights':
        if not data:
            return cls()
        known = {k: data[k] for k in ('creatures', 'artifacts', 'enchantments', 'instants', 'sorceries', 'planeswalkers') if k in data}
        return cls(**known)

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class GenerationConstraints:
    total_budget: Optional[float] = None
    max_card_price: Optional[float] = None
    prefer_cheapest: bool = False
    keywords: List[str] = field(default_factory=list)
    keyword_focus: List[str] = field(default_factory=list)
    card_type_weights: CardTypeWeights = field(default_factory=CardTypeWeights)
    random_tag_count: int = 0
    seed: Optional[int | str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> 'GenerationConstraints':
        data = dict(data or {})
        weights = data.get('card_type_weights')
        if not isinstance(weights, CardTypeWeights):
            weights = CardTypeWeights.from_mapping(weights)
        return cls(
            total_budget=data.get('total_budget'),
            max_card_price=data.get('max_card_price'),
            prefer_cheapest=bool(data.get('prefer_cheapest', False)),
            keywords=list(data.get('keywords') or []),
            keyword_focus=list(data.get('keyword_focus') or []),
            card_type_weights=weights,
            random_tag_count=int(data.get('random_tag_count') or 0),
            seed=data.get('seed'),
        )


@dataclass
class DeckCard:
    """One slot of a generated deck."""
    card: Card
    role: str
    synergy_score: float = 0.0
    price_used: float = 0.0
    price_source: str = ''

    @property
    def name(self) -> str:
        return self.card.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.card.id,
            'name': self.card.name,
            'type_line': self.card.type_line,
            'mana_cost': self.card.mana_cost,
            'cmc': self.card.cmc,
            'color_identity': list(self.card.color_identity),
            'role': self.role,
            'synergy_score': round(self.synergy_score, 2),
            'price_used': round(self.price_used, 2),
            'price_source': self.price_source,
        }


@dataclass
class GeneratedDeck:
    """Commander plus exactly 99 other card slots."""
    commander: DeckCard
    cards: List[DeckCard]
    total_price: float
    warnings: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)
    mana_curve: Dict[str, int] = field(default_factory=dict)  # spell count per mana value bucket

    @property
    def lands(self) -> List[DeckCard]:
        return [c for c in self.cards if c.role == 'land']

    @property
    def nonland_cards(self) -> List[DeckCard]:
        return [c for c in self.cards if c.role != 'land']

    @property
    def total_cards(self) -> int:
        return len(self.cards) + 1

    def role_breakdown(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for slot in self.cards:
            counts[slot.role] = counts.get(slot.role, 0) + 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        return {
            'commander': self.commander.to_dict(),
            'cards': [c.to_dict() for c in self.cards],
            'total_price': round(self.total_price, 2),
            'role_breakdown': self.role_breakdown(),
            'warnings': list(self.warnings),
            'notes': list(self.notes),
            'mana_curve': dict(self.mana_curve),
        }


class AvailableTag(TypedDict):
    name: str
    category: str
    count: int


# DataFrame type aliases
CardCorpusDF = pd.DataFrame
ScoredPoolDF = pd.DataFrame
