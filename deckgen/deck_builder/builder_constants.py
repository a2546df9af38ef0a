from __future__ import annotations

from typing import Dict, Final, FrozenSet, Tuple

# Commander ban list (names compared case-insensitively)
COMMANDER_BAN_LIST: Final[FrozenSet[str]] = frozenset(name.lower() for name in (
    'Ancestral Recall',
    'Balance',
    'Biorhythm',
    'Black Lotus',
    'Braids, Cabal Minion',
    'Chaos Orb',
    'Coalition Victory',
    'Channel',
    'Emrakul, the Aeons Torn',
    'Erayo, Soratami Ascendant',
    'Falling Star',
    'Fastbond',
    'Flash',
    'Gifts Ungiven',
    'Griselbrand',
    'Hullbreacher',
    'Iona, Shield of Emeria',
    'Karakas',
    'Leovold, Emissary of Trest',
    'Library of Alexandria',
    'Limited Resources',
    'Lutri, the Spellchaser',
    'Mox Emerald',
    'Mox Jet',
    'Mox Pearl',
    'Mox Ruby',
    'Mox Sapphire',
    "Painter's Servant",
    'Panoptic Mirror',
    'Primeval Titan',
    'Prophet of Kruphix',
    'Recurring Nightmare',
    'Rofellos, Llanowar Emissary',
    'Shahrazad',
    'Sundering Titan',
    'Sway of the Stars',
    'Sylvan Primordial',
    'Time Vault',
    'Time Walk',
    'Tinker',
    'Tolarian Academy',
    'Trade Secrets',
    'Upheaval',
    'Worldfire',
    "Yawgmoth's Bargain",
))

# Type category of a card is the first of these words found in its type line.
# Creature comes first so that a creatures=0 request removes artifact and
# enchantment creatures too.
TYPE_CATEGORY_ORDER: Final[Tuple[Tuple[str, str], ...]] = (
    ('creature', 'creatures'),
    ('planeswalker', 'planeswalkers'),
    ('land', 'lands'),
    ('artifact', 'artifacts'),
    ('enchantment', 'enchantments'),
    ('instant', 'instants'),
    ('sorcery', 'sorceries'),
)
OTHER_CATEGORY: Final[str] = 'other'
LAND_CATEGORY: Final[str] = 'lands'
PLANESWALKER_CATEGORY: Final[str] = 'planeswalkers'

# Categories whose card_type_weights value is a relative inclusion weight
WEIGHTED_CATEGORIES: Final[Tuple[str, ...]] = ('creatures', 'artifacts', 'enchantments', 'instants', 'sorceries')

# Deck slot role per category
CATEGORY_ROLE: Final[Dict[str, str]] = {
    'creatures': 'creature',
    'planeswalkers': 'planeswalker',
    'lands': 'land',
    'artifacts': 'artifact',
    'enchantments': 'enchantment',
    'instants': 'instant',
    'sorceries': 'sorcery',
    'other': 'other',
}

COMMAND_TOWER: Final[str] = 'Command Tower'

# Price estimate per rarity when a card has no usable price data
RARITY_PRICE_ESTIMATES: Final[Dict[str, float]] = {
    'mythic': 5.00,
    'rare': 1.50,
    'uncommon': 0.25,
    'common': 0.10,
}
UNKNOWN_RARITY_PRICE: Final[float] = 0.50

# Utility land signals (lowercase oracle text fragments) and the extra
# priority each adds when ranking nonbasic lands for the land base.
UTILITY_LAND_SIGNALS: Final[Dict[str, int]] = {
    'draw a card': 6,
    'destroy target': 6,
    'exile target': 6,
    'create a': 4,
    'scry': 3,
    'surveil': 3,
    'any color': 5,
    'untap target': 2,
}

# Average synergy at or above which a card is reported as high synergy
HIGH_SYNERGY_THRESHOLD: Final[float] = 50.0
