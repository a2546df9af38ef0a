"""
Tag Constants Module

Static tag vocabulary for the mechanics tagger and synergy scorer.
This module contains:
- The recognized mechanic tags with their category and base synergy weight
- Namespaced tag families resolved on the fly (type_*, creature_type_*, ...)
- Role and archetype mappings used to summarize a card
- Keyword priorities and the static keyword catalog
- Creature types used for tribal detection
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Final, FrozenSet, List, Optional, Tuple

from deckgen.type_definitions import TagCategory

# =============================================================================
# TABLE OF CONTENTS
# =============================================================================
# 1. TAG DEFINITIONS
# 2. NAMESPACED FAMILIES
# 3. ROLES & ARCHETYPES
# 4. KEYWORD PRIORITIES
# 5. STATIC KEYWORD CATALOG
# 6. CARD & CREATURE TYPES
# 7. LOOKUP HELPERS

# =============================================================================
# 1. TAG DEFINITIONS
# =============================================================================


@dataclass(frozen=True)
class TagDefinition:
    """One recognized tag: its category, base synergy weight and functional role."""
    name: str
    category: TagCategory
    synergy_weight: float = 1.0
    role: Optional[str] = None


_C = TagCategory

# (name, category, synergy_weight)
_VOCABULARY_ROWS: List[Tuple[str, TagCategory, float]] = [
    # Resource generation
    ('mana_generation', _C.RESOURCE_GENERATION, 1.0),
    ('land_ramp', _C.RESOURCE_GENERATION, 1.0),
    ('extra_land_drop', _C.RESOURCE_GENERATION, 1.0),
    ('treasure_generation', _C.RESOURCE_GENERATION, 1.0),
    ('cost_reduction', _C.RESOURCE_GENERATION, 0.9),
    ('card_draw', _C.RESOURCE_GENERATION, 1.0),
    ('card_selection', _C.RESOURCE_GENERATION, 0.8),
    ('tutor', _C.RESOURCE_GENERATION, 1.0),
    ('life_gain', _C.RESOURCE_GENERATION, 0.8),
    ('energy_generation', _C.RESOURCE_GENERATION, 0.9),
    # Tokens
    ('token_creation', _C.TOKENS, 1.0),
    ('creature_token_creation', _C.TOKENS, 1.0),
    ('token_doubling', _C.TOKENS, 1.2),
    ('tokens_matter', _C.TOKENS, 1.1),
    ('populate', _C.TOKENS, 1.0),
    # Combat
    ('evasion_unblockable', _C.COMBAT_ABILITIES, 0.9),
    ('extra_combat', _C.COMBAT_ABILITIES, 1.1),
    ('anthem_effect', _C.COMBAT_ABILITIES, 1.0),
    ('fight_mechanic', _C.COMBAT_ABILITIES, 0.9),
    ('equipment', _C.COMBAT_ABILITIES, 1.0),
    ('aura_synergy', _C.COMBAT_ABILITIES, 0.9),
    ('protection_static', _C.COMBAT_ABILITIES, 0.9),
    ('indestructible', _C.COMBAT_ABILITIES, 0.9),
    # Removal & interaction
    ('spot_removal', _C.REMOVAL_INTERACTION, 1.0),
    ('board_wipe', _C.REMOVAL_INTERACTION, 1.0),
    ('counterspell', _C.REMOVAL_INTERACTION, 1.0),
    ('damage_dealing', _C.REMOVAL_INTERACTION, 0.9),
    ('bounce_effect', _C.REMOVAL_INTERACTION, 0.8),
    ('graveyard_hate', _C.REMOVAL_INTERACTION, 0.8),
    ('land_destruction', _C.REMOVAL_INTERACTION, 0.7),
    ('control_magic', _C.REMOVAL_INTERACTION, 1.0),
    # Triggers
    ('etb_trigger_self', _C.TRIGGERS_ABILITIES, 0.9),
    ('etb_trigger_creature', _C.TRIGGERS_ABILITIES, 1.1),
    ('etb_payoff_generic', _C.TRIGGERS_ABILITIES, 1.2),
    ('etb_payoff_tribal', _C.TRIGGERS_ABILITIES, 1.0),
    ('creature_hostile_etb', _C.TRIGGERS_ABILITIES, 0.5),
    ('death_trigger', _C.TRIGGERS_ABILITIES, 1.0),
    ('leaves_battlefield_trigger', _C.TRIGGERS_ABILITIES, 0.8),
    ('attack_trigger', _C.TRIGGERS_ABILITIES, 1.0),
    ('combat_damage_trigger', _C.TRIGGERS_ABILITIES, 1.0),
    ('spell_trigger', _C.TRIGGERS_ABILITIES, 1.1),
    ('upkeep_trigger', _C.TRIGGERS_ABILITIES, 0.7),
    ('end_step_trigger', _C.TRIGGERS_ABILITIES, 0.7),
    ('landfall', _C.TRIGGERS_ABILITIES, 1.1),
    ('lifegain_trigger', _C.TRIGGERS_ABILITIES, 1.0),
    ('draw_trigger', _C.TRIGGERS_ABILITIES, 0.9),
    ('token_creation_trigger', _C.TRIGGERS_ABILITIES, 1.0),
    # Synergy themes
    ('sacrifice_outlet', _C.SYNERGY_THEMES, 1.0),
    ('reanimation', _C.SYNERGY_THEMES, 1.0),
    ('graveyard_recursion', _C.SYNERGY_THEMES, 1.0),
    ('self_mill', _C.SYNERGY_THEMES, 0.9),
    ('graveyard_synergy', _C.SYNERGY_THEMES, 0.9),
    ('flicker_effect', _C.SYNERGY_THEMES, 1.0),
    ('artifact_synergy', _C.SYNERGY_THEMES, 1.0),
    ('enchantment_synergy', _C.SYNERGY_THEMES, 1.0),
    ('spell_copying', _C.SYNERGY_THEMES, 1.1),
    ('lands_matter', _C.SYNERGY_THEMES, 1.0),
    ('discard_effect', _C.SYNERGY_THEMES, 0.7),
    ('wheel_effect', _C.SYNERGY_THEMES, 1.0),
    # Counters
    ('plus_one_counters', _C.COUNTERS_MANIPULATION, 1.0),
    ('minus_one_counters', _C.COUNTERS_MANIPULATION, 0.8),
    ('counter_doubling', _C.COUNTERS_MANIPULATION, 1.2),
    ('proliferate', _C.COUNTERS_MANIPULATION, 1.1),
    ('loyalty_abilities', _C.COUNTERS_MANIPULATION, 0.8),
    # Win conditions
    ('win_condition_direct', _C.WIN_CONDITIONS, 1.0),
    ('lose_condition_direct', _C.WIN_CONDITIONS, 1.0),
    ('poison_strategy', _C.WIN_CONDITIONS, 1.0),
    ('drain_effect', _C.WIN_CONDITIONS, 1.0),
]

# =============================================================================
# 2. NAMESPACED FAMILIES
# =============================================================================
# Prefix -> (category, synergy weight). Order matters: longest prefixes first so
# 'creature_type_' wins over 'type_'.
NAMESPACE_FAMILIES: List[Tuple[str, TagCategory, float]] = [
    ('planeswalker_type_', _C.CARD_TYPES, 0.6),
    ('creature_type_', _C.TRIBAL, 0.8),
    ('ability_keyword_', _C.COMBAT_ABILITIES, 0.9),
    ('supertype_', _C.CARD_TYPES, 0.5),
    ('subtype_', _C.CARD_TYPES, 0.6),
    ('mechanic_', _C.TRIGGERS_ABILITIES, 0.9),
    ('tribal_', _C.TRIBAL, 1.2),
    ('type_', _C.CARD_TYPES, 0.5),
    ('manual_', _C.MANUAL, 1.0),
]

SUFFIX_FAMILIES: List[Tuple[str, TagCategory, float]] = [
    ('_matters', _C.TRIBAL, 1.1),
]

# Deterministic namespace order used for tie-breaks (lower rank sorts first).
NAMESPACE_ORDER: Final[Tuple[str, ...]] = (
    '',                   # un-namespaced functional tags
    'tribal_',
    '_matters',           # suffix family: X_matters tribe payoffs
    'mechanic_',
    'ability_keyword_',
    'creature_type_',
    'subtype_',
    'planeswalker_type_',
    'supertype_',
    'type_',
)

# =============================================================================
# 3. ROLES & ARCHETYPES
# =============================================================================

DEFAULT_ROLE: Final[str] = 'synergy'

ROLE_MAP: Dict[str, str] = {
    'mana_generation': 'ramp',
    'land_ramp': 'ramp',
    'extra_land_drop': 'ramp',
    'treasure_generation': 'ramp',
    'cost_reduction': 'ramp',
    'card_draw': 'draw',
    'card_selection': 'draw',
    'wheel_effect': 'draw',
    'spot_removal': 'removal',
    'damage_dealing': 'removal',
    'counterspell': 'removal',
    'control_magic': 'removal',
    'board_wipe': 'board_wipe',
    'protection_static': 'protection',
    'indestructible': 'protection',
    'tutor': 'tutor',
    'reanimation': 'graveyard_recursion',
    'graveyard_recursion': 'graveyard_recursion',
    'win_condition_direct': 'finisher',
    'lose_condition_direct': 'finisher',
    'extra_combat': 'finisher',
    'drain_effect': 'finisher',
    'poison_strategy': 'finisher',
    'bounce_effect': 'utility',
    'flicker_effect': 'utility',
    'graveyard_hate': 'utility',
}

ARCHETYPE_RELEVANCE: Dict[str, FrozenSet[str]] = {
    'tokens': frozenset({'token_creation', 'creature_token_creation', 'token_doubling', 'tokens_matter', 'populate'}),
    'spellslinger': frozenset({'spell_trigger', 'spell_copying'}),
    'artifacts': frozenset({'artifact_synergy', 'treasure_generation'}),
    'enchantments': frozenset({'enchantment_synergy', 'aura_synergy'}),
    'landfall': frozenset({'landfall', 'lands_matter', 'extra_land_drop'}),
    'reanimator': frozenset({'reanimation', 'self_mill'}),
    'blink': frozenset({'flicker_effect', 'etb_trigger_self'}),
    'counters': frozenset({'plus_one_counters', 'counter_doubling', 'proliferate'}),
    'voltron': frozenset({'equipment', 'aura_synergy'}),
    'aristocrats': frozenset({'sacrifice_outlet', 'death_trigger', 'drain_effect'}),
    'lifegain': frozenset({'life_gain', 'lifegain_trigger'}),
}

# =============================================================================
# 4. KEYWORD PRIORITIES
# =============================================================================

KEYWORD_PRIORITY: Dict[str, int] = {
    'landfall': 10, 'storm': 10, 'cascade': 10, 'affinity': 10, 'dredge': 10,
    'proliferate': 9, 'convoke': 9, 'delve': 9, 'flashback': 9, 'threshold': 9, 'metalcraft': 9,
    'flying': 8, 'trample': 8, 'lifelink': 8, 'deathtouch': 8, 'haste': 8,
    'scry': 7, 'draw': 7, 'tutor': 7, 'ramp': 7,
}
DEFAULT_KEYWORD_PRIORITY: Final[int] = 5

COMBAT_KEYWORDS: FrozenSet[str] = frozenset({
    'flying', 'trample', 'haste', 'vigilance', 'lifelink', 'deathtouch', 'first strike',
    'double strike', 'menace', 'reach', 'hexproof', 'indestructible', 'ward', 'shroud',
    'defender', 'flash', 'protection', 'infect', 'wither', 'toxic', 'prowess', 'skulk',
    'fear', 'intimidate', 'shadow', 'horsemanship', 'flanking', 'bushido', 'exalted',
})

# =============================================================================
# 5. STATIC KEYWORD CATALOG
# =============================================================================
# Used by the tagger (which must stay pure) and as the fallback catalog when
# the MTGJSON keyword list is unavailable.

STATIC_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    'ability_words': (
        'adamant', 'addendum', 'alliance', 'battalion', 'bloodrush', 'celebration', 'channel',
        'chroma', 'cohort', 'constellation', 'converge', 'coven', 'delirium', 'domain',
        'eminence', 'enrage', 'fateful hour', 'ferocious', 'formidable', 'grandeur',
        'hellbent', 'heroic', 'imprint', 'inspired', 'kinship', 'landfall', 'lieutenant',
        'magecraft', 'metalcraft', 'morbid', 'pack tactics', 'parley', 'radiance', 'raid',
        'rally', 'revolt', 'spell mastery', 'strive', 'sweep', 'threshold', 'undergrowth',
    ),
    'keyword_abilities': (
        'affinity', 'afflict', 'afterlife', 'amplify', 'annihilator', 'ascend', 'bestow',
        'bushido', 'buyback', 'cascade', 'changeling', 'cipher', 'companion', 'convoke',
        'crew', 'cycling', 'dash', 'deathtouch', 'defender', 'delve', 'double strike',
        'dredge', 'echo', 'embalm', 'emerge', 'enchant', 'encore', 'entwine', 'equip',
        'escape', 'eternalize', 'evoke', 'evolve', 'exalted', 'exploit', 'extort', 'fabricate',
        'fading', 'first strike', 'flash', 'flashback', 'flying', 'foretell', 'fortify',
        'haste', 'hexproof', 'improvise', 'indestructible', 'infect', 'jump-start', 'kicker',
        'lifelink', 'living weapon', 'madness', 'menace', 'miracle', 'modular', 'morph',
        'mutate', 'ninjutsu', 'outlast', 'overload', 'partner', 'persist', 'prowess',
        'reach', 'rebound', 'reconfigure', 'riot', 'scavenge', 'shroud', 'skulk', 'soulbond',
        'spectacle', 'split second', 'storm', 'sunburst', 'surge', 'suspend', 'toxic',
        'trample', 'undying', 'unearth', 'vanishing', 'vigilance', 'ward', 'wither',
    ),
    'keyword_actions': (
        'adapt', 'amass', 'connive', 'detain', 'discover', 'explore', 'fateseal', 'fight',
        'goad', 'incubate', 'investigate', 'manifest', 'meld', 'mill', 'monstrosity',
        'planeswalk', 'populate', 'proliferate', 'regenerate', 'scry', 'support', 'surveil',
        'venture into the dungeon',
    ),
}

# =============================================================================
# 6. CARD & CREATURE TYPES
# =============================================================================

SUPERTYPES: Tuple[str, ...] = ('legendary', 'basic', 'snow', 'world', 'ongoing')

CARD_TYPES: Tuple[str, ...] = (
    'creature', 'artifact', 'enchantment', 'instant', 'sorcery', 'planeswalker',
    'land', 'battle', 'kindred', 'tribal',
)

CREATURE_TYPES: Tuple[str, ...] = (
    'advisor', 'ally', 'angel', 'ape', 'archer', 'artificer', 'assassin', 'avatar',
    'bat', 'bear', 'beast', 'bird', 'cat', 'centaur', 'cleric', 'construct', 'demon',
    'devil', 'dinosaur', 'djinn', 'dog', 'dragon', 'drake', 'druid', 'dwarf', 'elder',
    'eldrazi', 'elemental', 'elf', 'faerie', 'fish', 'fox', 'frog', 'fungus', 'giant',
    'gnome', 'goat', 'goblin', 'god', 'golem', 'gorgon', 'griffin', 'horror', 'human',
    'hydra', 'illusion', 'insect', 'knight', 'kor', 'kraken', 'merfolk', 'minotaur',
    'monk', 'mouse', 'mutant', 'myr', 'ninja', 'noble', 'ogre', 'ooze', 'orc', 'peasant',
    'pegasus', 'phoenix', 'phyrexian', 'pirate', 'plant', 'rabbit', 'rat', 'rebel',
    'rogue', 'samurai', 'saproling', 'scout', 'serpent', 'shade', 'shaman', 'skeleton',
    'sliver', 'snake', 'soldier', 'specter', 'sphinx', 'spider', 'spirit', 'squirrel',
    'thopter', 'treefolk', 'troll', 'unicorn', 'vampire', 'warlock', 'warrior',
    'werewolf', 'wizard', 'wolf', 'wraith', 'wurm', 'zombie',
)

# Irregular plural -> singular forms used in rules text.
CREATURE_TYPE_PLURALS: Dict[str, str] = {
    'elves': 'elf', 'dwarves': 'dwarf', 'wolves': 'wolf', 'werewolves': 'werewolf',
    'mice': 'mouse', 'allies': 'ally', 'faeries': 'faerie', 'sphinxes': 'sphinx',
    'foxes': 'fox', 'fungi': 'fungus', 'merfolk': 'merfolk', 'fish': 'fish',
}

# =============================================================================
# 7. LOOKUP HELPERS
# =============================================================================

TAG_VOCABULARY: Dict[str, TagDefinition] = {
    name: TagDefinition(name=name, category=category, synergy_weight=weight, role=ROLE_MAP.get(name))
    for name, category, weight in _VOCABULARY_ROWS
}


def slugify(value: str) -> str:
    """Lower-case a keyword or type and join words with underscores."""
    out = []
    for ch in value.strip().lower():
        if ch.isalnum():
            out.append(ch)
        elif out and out[-1] != '_':
            out.append('_')
    return ''.join(out).strip('_')


def namespace_of(name: str) -> str:
    """Namespace prefix of a tag, or '_matters' for tribe payoff tags ('' when functional)."""
    for suffix, _category, _weight in SUFFIX_FAMILIES:
        if name.endswith(suffix):
            return suffix
    for prefix in sorted(NAMESPACE_ORDER, key=len, reverse=True):
        if prefix and name.startswith(prefix):
            return prefix
    return ''


def namespace_rank(name: str) -> int:
    """Position of a tag's namespace in NAMESPACE_ORDER."""
    return NAMESPACE_ORDER.index(namespace_of(name))


def lookup_tag(name: str) -> TagDefinition:
    """Resolve any tag name, including namespaced family members, to a definition.

    Unknown names resolve to category OTHER with weight 1.0 so vocabulary drift
    never raises at analysis time.
    """
    found = TAG_VOCABULARY.get(name)
    if found is not None:
        return found
    for prefix, category, weight in NAMESPACE_FAMILIES:
        if name.startswith(prefix):
            return TagDefinition(name=name, category=category, synergy_weight=weight, role=ROLE_MAP.get(name))
    for suffix, category, weight in SUFFIX_FAMILIES:
        if name.endswith(suffix):
            return TagDefinition(name=name, category=category, synergy_weight=weight)
    return TagDefinition(name=name, category=TagCategory.OTHER, synergy_weight=1.0)


def is_known_tag(name: str) -> bool:
    """True when the name is in the vocabulary or belongs to a namespaced family."""
    if name in TAG_VOCABULARY:
        return True
    if any(name.startswith(p) for p, _, _ in NAMESPACE_FAMILIES):
        return True
    return any(name.endswith(s) for s, _, _ in SUFFIX_FAMILIES)


def keyword_priority(keyword: str) -> int:
    return KEYWORD_PRIORITY.get(keyword.strip().lower(), DEFAULT_KEYWORD_PRIORITY)


def all_static_keywords() -> List[str]:
    seen: List[str] = []
    for group in ('ability_words', 'keyword_abilities', 'keyword_actions'):
        for kw in STATIC_KEYWORDS[group]:
            if kw not in seen:
                seen.append(kw)
    return seen


def role_for_tag(name: str) -> Optional[str]:
    return ROLE_MAP.get(name)


# Widely played staples; power level never drops below STAPLE_MIN_POWER for these.
STAPLE_CARDS: FrozenSet[str] = frozenset({
    'sol ring', 'arcane signet', 'command tower', 'lightning greaves', 'swiftfoot boots',
    'swords to plowshares', 'path to exile', 'cyclonic rift', 'demonic tutor',
    'vampiric tutor', 'rhystic study', 'smothering tithe', 'mystic remora',
    'counterspell', 'cultivate', "kodama's reach", 'beast within', 'chaos warp',
    'fellwar stone', 'mind stone', 'thought vessel', 'skullclamp', 'eternal witness',
})
STAPLE_MIN_POWER: Final[int] = 8
