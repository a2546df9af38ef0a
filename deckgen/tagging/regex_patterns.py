"""
Centralized regex patterns for card mechanics tagging.

All patterns are compiled with re.IGNORECASE and run against oracle text that
has been lower-cased, stripped of reminder text, and had the card's own name
replaced with '~'.

Usage:
    from deckgen.tagging import regex_patterns as rgx

    if rgx.CARD_DRAW_EXACT.search(text):
        ...
"""

import re
from typing import List, Pattern

# =============================================================================
# TEXT CLEANUP
# =============================================================================

REMINDER_TEXT: Pattern = re.compile(r'\([^)]*\)')
WHITESPACE: Pattern = re.compile(r'[ \t]+')
SENTENCE_SPLIT: Pattern = re.compile(r'(?<=[.:\n])\s+')
MANA_SYMBOL: Pattern = re.compile(r'\{([^}]+)\}')

# =============================================================================
# RESOURCE GENERATION
# =============================================================================

ADD_MANA_SYMBOL: Pattern = re.compile(r'\badd \{[wubrgc]\}', re.IGNORECASE)
ADD_MANA_WORDS: Pattern = re.compile(r'\badd (?:one|two|three|x|that much) mana\b', re.IGNORECASE)
ADD_MANA_LOOSE: Pattern = re.compile(r'\badds?\b[^.]*\bmana\b', re.IGNORECASE)

SEARCH_LAND_ONTO_BATTLEFIELD: Pattern = re.compile(
    r'search your library for [^.]*\bland cards?\b[^.]*onto the battlefield', re.IGNORECASE)
PUT_LAND_ONTO_BATTLEFIELD: Pattern = re.compile(
    r'put (?:a|an|up to \w+) [^.]*\bland cards? [^.]*onto the battlefield', re.IGNORECASE)
ADDITIONAL_LAND: Pattern = re.compile(r'play (?:an|two|three) additional lands?', re.IGNORECASE)

CREATE_TREASURE: Pattern = re.compile(r'\bcreates? [^.]*\btreasure tokens?\b', re.IGNORECASE)
TREASURE_WORD: Pattern = re.compile(r'\btreasures?\b', re.IGNORECASE)

COST_REDUCTION: Pattern = re.compile(
    r'(?P<target>[a-z ,/-]*?)spells? (?:you cast )?costs? \{?(?:\d+|x)\}? less to cast', re.IGNORECASE)
COST_REDUCTION_LOOSE: Pattern = re.compile(r'\bcosts? [^.]*less to (?:cast|activate)\b', re.IGNORECASE)

DRAW_CARDS: Pattern = re.compile(
    r'\bdraws? (?:a|an additional|one|two|three|four|five|seven|x|that many) cards?\b', re.IGNORECASE)
DRAW_LOOSE: Pattern = re.compile(r'\bdraws?\b[^.]*\bcards?\b', re.IGNORECASE)

SCRY_SURVEIL: Pattern = re.compile(r'\b(?:scry|surveil) (?:\d+|x)\b', re.IGNORECASE)
LOOK_AT_TOP: Pattern = re.compile(r'look at the top (?:\w+ )?cards? of your library', re.IGNORECASE)

SEARCH_NONLAND: Pattern = re.compile(
    r'search your library for (?:a|an|up to \w+) (?!basic land|land)(?:[a-z ]+ )?cards?\b', re.IGNORECASE)
SEARCH_LIBRARY: Pattern = re.compile(r'search your library for\b', re.IGNORECASE)
SEARCH_FOR_LAND: Pattern = re.compile(r'search your library for [^.]*\bland\b', re.IGNORECASE)

GAIN_LIFE: Pattern = re.compile(r'\b(?:you )?gains? (?:\d+|x|that much) life\b', re.IGNORECASE)
GAIN_LIFE_LOOSE: Pattern = re.compile(r'\bgains?\b[^.]*\blife\b', re.IGNORECASE)

ENERGY: Pattern = re.compile(r'\{e\}|\benergy counters?\b', re.IGNORECASE)

# =============================================================================
# TOKENS
# =============================================================================

CREATE_TOKEN: Pattern = re.compile(
    r'\bcreates? (?:a|an|one|two|three|four|five|x|that many|a number of|\d+) [^.]*?\btokens?\b', re.IGNORECASE)
TOKEN_WORD: Pattern = re.compile(r'\btokens?\b', re.IGNORECASE)
CREATE_CREATURE_TOKEN: Pattern = re.compile(r'\bcreates? [^.]*?\bcreature tokens?\b', re.IGNORECASE)
TOKEN_SUBTYPE: Pattern = re.compile(
    r'\bcreates? [^.]*?(?:\d+/\d+ )?(?:(?:white|blue|black|red|green|colorless) (?:and \w+ )?)?(?P<subtype>[a-z]+) creature tokens?\b',
    re.IGNORECASE)
TOKEN_DOUBLING: Pattern = re.compile(
    r'(?:twice that many [^.]*tokens?|tokens? would be created[^.]*instead)', re.IGNORECASE)
TOKENS_YOU_CONTROL: Pattern = re.compile(r'\b(?:tokens? you control|for each token)\b', re.IGNORECASE)
POPULATE: Pattern = re.compile(r'\bpopulate\b', re.IGNORECASE)

# =============================================================================
# COMBAT
# =============================================================================

CANT_BE_BLOCKED: Pattern = re.compile(r"\bcan't be blocked\b", re.IGNORECASE)
EXTRA_COMBAT: Pattern = re.compile(r'\badditional combat phase\b', re.IGNORECASE)
ANTHEM: Pattern = re.compile(r'\b(?:other )?creatures you control get \+\d+/\+\d+', re.IGNORECASE)
ANTHEM_LOOSE: Pattern = re.compile(r'\bget \+\d+/\+\d+\b', re.IGNORECASE)
FIGHT: Pattern = re.compile(r'\bfights?\b', re.IGNORECASE)
EQUIP_COST: Pattern = re.compile(r'\bequip (?:\{|\d)', re.IGNORECASE)
EQUIPPED_CREATURE: Pattern = re.compile(r'\bequipped creature\b', re.IGNORECASE)
AURAS_YOU_CONTROL: Pattern = re.compile(r'\b(?:auras? you control|enchanted creatures? you control)\b', re.IGNORECASE)
GRANT_PROTECTION: Pattern = re.compile(
    r'\b(?:have|has|gains?) (?:hexproof|shroud|protection from)\b', re.IGNORECASE)
INDESTRUCTIBLE_GRANT: Pattern = re.compile(r'\b(?:have|has|gains?) indestructible\b', re.IGNORECASE)
INDESTRUCTIBLE_WORD: Pattern = re.compile(r'\bindestructible\b', re.IGNORECASE)

# =============================================================================
# REMOVAL & INTERACTION
# =============================================================================

DESTROY_OR_EXILE_TARGET: Pattern = re.compile(
    r'\b(?:destroy|exile) (?:another )?target (?:creature|artifact|enchantment|planeswalker|nonland permanent|permanent|nonartifact|noncreature|attacking|tapped)\b',
    re.IGNORECASE)
DESTROY_OR_EXILE_TARGET_LOOSE: Pattern = re.compile(r'\b(?:destroy|exile)s? target\b', re.IGNORECASE)
BOARD_WIPE: Pattern = re.compile(
    r'\b(?:destroy|exile) all (?:other )?(?:creatures|nonland permanents|permanents|artifacts|enchantments|nontoken creatures)\b',
    re.IGNORECASE)
MASS_SHRINK: Pattern = re.compile(r'\ball (?:other )?creatures get -\d+/-\d+', re.IGNORECASE)
DESTROY_ALL_LOOSE: Pattern = re.compile(r'\b(?:destroy|exile) all\b', re.IGNORECASE)
COUNTER_TARGET_SPELL: Pattern = re.compile(
    r'\bcounter target (?:spell|activated|triggered|noncreature|creature|instant|sorcery|artifact)\b', re.IGNORECASE)
COUNTER_TARGET_LOOSE: Pattern = re.compile(r'\bcounter target\b', re.IGNORECASE)
DAMAGE_TARGET: Pattern = re.compile(
    r'\bdeals? (?:\d+|x) damage to (?:any target|target|each creature|each opponent)\b', re.IGNORECASE)
DAMAGE_LOOSE: Pattern = re.compile(r'\bdeals? (?:\d+|x|that much) damage\b', re.IGNORECASE)
BOUNCE_TARGET: Pattern = re.compile(r"\breturn (?:up to \w+ )?target [^.]*to (?:its|their) owner'?s'? hands?\b", re.IGNORECASE)
BOUNCE_LOOSE: Pattern = re.compile(r"\bto (?:its|their) owner'?s'? hands?\b", re.IGNORECASE)
EXILE_GRAVEYARD: Pattern = re.compile(
    r"\bexile (?:target player's|each opponent's|all cards from all|all cards from target player's|all) graveyards?\b",
    re.IGNORECASE)
EXILE_FROM_GRAVEYARD_LOOSE: Pattern = re.compile(r'\bexile [^.]*from (?:a|any|all|an opponent\'s) graveyards?\b', re.IGNORECASE)
DESTROY_LAND: Pattern = re.compile(r'\bdestroy (?:target|all|each) (?:nonbasic )?lands?\b', re.IGNORECASE)
GAIN_CONTROL: Pattern = re.compile(r'\bgain control of (?:target|all|each)\b', re.IGNORECASE)

# =============================================================================
# TRIGGERS
# =============================================================================

ETB_SELF: Pattern = re.compile(r'\bwhen(?:ever)? (?:~|this (?:creature|artifact|enchantment|land|permanent)) enters\b', re.IGNORECASE)
ENTERS_WORD: Pattern = re.compile(r'\benters\b', re.IGNORECASE)
ETB_OTHER_CREATURE: Pattern = re.compile(
    r'\bwhenever (?:another |a |one or more )(?:other )?(?:nontoken )?creatures? (?:you control )?enters?\b', re.IGNORECASE)
ETB_TRIBAL: Pattern = re.compile(
    r'\bwhenever (?:another |a |one or more )(?:other )?(?:nontoken )?(?P<tribe>[a-z]+?)s? (?:you control )?enters?\b',
    re.IGNORECASE)
ETB_HARMFUL: Pattern = re.compile(
    r'\bwhenever (?:a|another) creature enters[^.]*(?:deals? \d+ damage to (?:that creature\'s controller|you)|you lose \d+ life|sacrifice)',
    re.IGNORECASE)
DIES_TRIGGER: Pattern = re.compile(
    r'\bwhenever (?:a|another|one or more) (?:other )?(?:nontoken )?(?:creatures?|permanents?)[^.]*?\bdies?\b', re.IGNORECASE)
DIES_WORD: Pattern = re.compile(r'\bdies\b', re.IGNORECASE)
LEAVES_BATTLEFIELD: Pattern = re.compile(r'\bleaves the battlefield\b', re.IGNORECASE)
ATTACKS_TRIGGER: Pattern = re.compile(r'\bwhenever [^.]*?\battacks?\b', re.IGNORECASE)
COMBAT_DAMAGE_TO_PLAYER: Pattern = re.compile(r'\bdeals? combat damage to (?:a player|an opponent)\b', re.IGNORECASE)
CAST_SPELL_TRIGGER: Pattern = re.compile(
    r'\bwhenever you cast (?:an? |your )?(?:instant|sorcery|noncreature|instant or sorcery)? ?spells?\b', re.IGNORECASE)
MAGECRAFT: Pattern = re.compile(r'\b(?:magecraft|copy an instant or sorcery)\b', re.IGNORECASE)
UPKEEP_TRIGGER: Pattern = re.compile(r'\bat the beginning of (?:your|each|each player\'s) upkeep\b', re.IGNORECASE)
END_STEP_TRIGGER: Pattern = re.compile(r'\bat the beginning of (?:your|each|the next) end step\b', re.IGNORECASE)
LANDFALL: Pattern = re.compile(r'\b(?:landfall\b|whenever a land (?:you control )?enters)', re.IGNORECASE)
LIFEGAIN_TRIGGER: Pattern = re.compile(r'\bwhenever you gain life\b', re.IGNORECASE)
DRAW_TRIGGER: Pattern = re.compile(r'\bwhenever you draw (?:a|your second) card\b', re.IGNORECASE)
TOKEN_TRIGGER: Pattern = re.compile(r'\bwhenever (?:you create|one or more tokens?)\b', re.IGNORECASE)

# =============================================================================
# SYNERGY THEMES
# =============================================================================

SACRIFICE_OUTLET: Pattern = re.compile(r'\bsacrifice (?:a|another|an) (?:creature|permanent|artifact)\b', re.IGNORECASE)
SACRIFICE_WORD: Pattern = re.compile(r'\bsacrifices?\b', re.IGNORECASE)
REANIMATE: Pattern = re.compile(
    r'\b(?:return|put) (?:up to \w+ )?target creature cards? from (?:your|a) graveyard (?:to|onto) the battlefield\b',
    re.IGNORECASE)
REANIMATE_LOOSE: Pattern = re.compile(r'\bfrom (?:your|a|any) graveyards? (?:to|onto) the battlefield\b', re.IGNORECASE)
REGROWTH: Pattern = re.compile(r'\breturn (?:up to \w+ )?target [^.]*cards? from your graveyard to your hand\b', re.IGNORECASE)
REGROWTH_LOOSE: Pattern = re.compile(r'\bfrom your graveyard to your hand\b', re.IGNORECASE)
MILL: Pattern = re.compile(
    r'\b(?:mills? (?:\w+) cards?|put the top (?:\w+ )?cards? of your library into your graveyard)\b', re.IGNORECASE)
GRAVEYARD_COUNT: Pattern = re.compile(r'\bcards? in your graveyard\b', re.IGNORECASE)
FLICKER: Pattern = re.compile(
    r'\bexile (?:another |up to one )?target [^.]*?, then return (?:it|that card|them|those cards)\b', re.IGNORECASE)
FLICKER_LOOSE: Pattern = re.compile(r'\breturn (?:it|that card|the exiled card|those cards) to the battlefield\b', re.IGNORECASE)
ARTIFACTS_MATTER: Pattern = re.compile(
    r'\b(?:artifacts? you control|whenever (?:an|another) artifact|for each artifact|artifact spells?)\b', re.IGNORECASE)
ENCHANTMENTS_MATTER: Pattern = re.compile(
    r'\b(?:enchantments? you control|whenever (?:an|another) enchantment|for each enchantment|constellation)\b',
    re.IGNORECASE)
COPY_SPELL: Pattern = re.compile(r'\bcopy (?:target|that|it|the next) (?:instant|sorcery|spell|instant or sorcery)?', re.IGNORECASE)
LANDS_YOU_CONTROL: Pattern = re.compile(r'\b(?:lands? you control|for each land)\b', re.IGNORECASE)
DISCARD: Pattern = re.compile(r'\bdiscards? (?:a|two|three|that|x) cards?\b', re.IGNORECASE)
WHEEL: Pattern = re.compile(r'\bdiscards? (?:their|his or her|your) hands?[^.]*\bdraws?\b', re.IGNORECASE)

# =============================================================================
# COUNTERS
# =============================================================================

PUT_PLUS_ONE: Pattern = re.compile(
    r'\bput (?:a|an|one|two|three|x|that many|\w+) \+1/\+1 counters? on\b', re.IGNORECASE)
PLUS_ONE_WORD: Pattern = re.compile(r'\+1/\+1 counters?', re.IGNORECASE)
MINUS_ONE: Pattern = re.compile(r'-1/-1 counters?', re.IGNORECASE)
COUNTER_DOUBLING: Pattern = re.compile(
    r'(?:twice that many [^.]*counters|double the number of [^.]*counters)', re.IGNORECASE)
PROLIFERATE: Pattern = re.compile(r'\bproliferate\b', re.IGNORECASE)
LOYALTY_ABILITY: Pattern = re.compile(r'(?m)^[+−\-]\d+:')

# =============================================================================
# WIN CONDITIONS
# =============================================================================

WIN_GAME: Pattern = re.compile(r'\byou win the game\b', re.IGNORECASE)
LOSE_GAME: Pattern = re.compile(r'\b(?:target player|target opponent|each opponent|that player) loses the game\b', re.IGNORECASE)
POISON: Pattern = re.compile(r'\b(?:poison counters?|toxic \d+|infect)\b', re.IGNORECASE)
DRAIN: Pattern = re.compile(r'\beach opponent loses (?:\d+|x|that much) life\b', re.IGNORECASE)
DRAIN_LOOSE: Pattern = re.compile(r'\bopponents? loses? [^.]*life\b', re.IGNORECASE)

# =============================================================================
# TRIBAL
# =============================================================================

REPEATABLE: Pattern = re.compile(r'\b(?:whenever|at the beginning of)\b', re.IGNORECASE)


def tribal_patterns(plural_group: str) -> List[Pattern]:
    """Build the tribal phrasing patterns for an alternation of type names.

    The named group 'tribe' captures the creature type word as written.
    """
    return [
        re.compile(rf'\b(?:other )?(?P<tribe>{plural_group}) you control\b', re.IGNORECASE),
        re.compile(rf'\beach (?:other )?(?P<tribe>{plural_group})\b', re.IGNORECASE),
        re.compile(rf'\bother (?P<tribe>{plural_group})\b', re.IGNORECASE),
    ]


def tribal_matters_patterns(plural_group: str) -> List[Pattern]:
    return [
        re.compile(rf'\bfor each (?P<tribe>{plural_group})\b', re.IGNORECASE),
        re.compile(rf'\bnumber of (?P<tribe>{plural_group})\b', re.IGNORECASE),
        re.compile(rf'\bwhenever (?:a|another|one or more) (?P<tribe>{plural_group})\b', re.IGNORECASE),
        re.compile(rf'\b(?P<tribe>{plural_group}) spells?\b', re.IGNORECASE),
    ]


def keyword_pattern(keyword: str) -> Pattern:
    """Word-boundary pattern for a keyword name (multi-word names allowed)."""
    return re.compile(r'\b' + re.escape(keyword.lower()) + r'\b', re.IGNORECASE)
