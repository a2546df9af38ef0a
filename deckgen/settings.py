from __future__ import annotations

# Standard library imports
import os
from typing import Dict, List, Tuple


def _env_flag(name: str, default: str = '1') -> bool:
    return os.getenv(name, default).strip().lower() not in ('0', 'false', 'off', 'disabled')


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)).strip())
    except ValueError:
        return default


# ----------------------------------------------------------------------------------
# COLOR CONSTANTS
# ----------------------------------------------------------------------------------
MANA_COLORS: List[str] = ['W', 'U', 'B', 'R', 'G']

BASIC_LAND_BY_COLOR: Dict[str, str] = {
    'W': 'Plains',
    'U': 'Island',
    'B': 'Swamp',
    'R': 'Mountain',
    'G': 'Forest',
    'C': 'Wastes',
}

BASIC_LAND_NAMES: Tuple[str, ...] = (
    'Plains', 'Island', 'Swamp', 'Mountain', 'Forest', 'Wastes',
    'Snow-Covered Plains', 'Snow-Covered Island', 'Snow-Covered Swamp',
    'Snow-Covered Mountain', 'Snow-Covered Forest', 'Snow-Covered Wastes',
)

# ----------------------------------------------------------------------------------
# CARD RECORD COLUMNS
# ----------------------------------------------------------------------------------
# Columns the corpus frame is expected to expose. Missing optional columns are
# filled with neutral defaults when the frame is loaded.
CARD_RECORD_COLUMNS: List[str] = [
    'id', 'name', 'type_line', 'oracle_text', 'mana_cost', 'cmc',
    'color_identity', 'colors', 'keywords', 'power', 'toughness', 'loyalty',
    'legalities', 'prices', 'rarity', 'set', 'edhrec_rank',
]

# ----------------------------------------------------------------------------------
# DECK SHAPE
# ----------------------------------------------------------------------------------
DECK_SIZE: int = 100
NON_COMMANDER_SLOTS: int = DECK_SIZE - 1

LAND_TARGET: int = _env_int('DECKGEN_LAND_TARGET', 36)
MAX_UTILITY_LANDS: int = _env_int('DECKGEN_MAX_UTILITY_LANDS', 12)
CANDIDATE_POOL_LIMIT: int = _env_int('DECKGEN_CANDIDATE_POOL_LIMIT', 15000)

# card_type_weights bounds and defaults
CARD_TYPE_WEIGHT_MIN: int = 0
CARD_TYPE_WEIGHT_MAX: int = 20
CARD_TYPE_WEIGHT_DEFAULT: int = 5
CARD_TYPE_WEIGHT_NEUTRAL: int = 5
RANDOM_TAG_COUNT_MAX: int = 10

# Base acceptance probability for a neutral-weight card on each walk of the
# ranked list; scaled by weight / neutral and capped at 1.0.
INCLUSION_ACCEPT_BASE: float = 0.85
MAX_SELECTION_PASSES: int = 25

# ----------------------------------------------------------------------------------
# THEME / RANDOM TAG BONUSES
# ----------------------------------------------------------------------------------
THEME_TAG_BONUS: Dict[str, int] = {'high': 750, 'medium': 600, 'low': 500}
THEME_MATCH_BONUS: int = 500
THEME_PREMIUM_BONUS: int = 1000
KEYWORD_MULTI_MATCH_FACTOR: int = 50
TAG_MULTI_MATCH_FACTOR: int = 100
RANDOM_TAG_BONUS: int = 150

# ----------------------------------------------------------------------------------
# PRICING
# ----------------------------------------------------------------------------------
BASIC_LAND_PRICE: float = 0.25
COMMAND_TOWER_PRICE: float = 1.00
PRICE_KEYS: Tuple[str, ...] = ('usd', 'usd_foil', 'usd_etched', 'eur', 'tix')

# ----------------------------------------------------------------------------------
# TAGGING
# ----------------------------------------------------------------------------------
TAGGING_WORKERS: int = max(1, _env_int('DECKGEN_TAGGING_WORKERS', 1))
MAX_EVIDENCE_SNIPPETS: int = 3

# ----------------------------------------------------------------------------------
# EXTERNAL SOURCES
# ----------------------------------------------------------------------------------
MTGJSON_KEYWORDS_URL: str = os.getenv('MTGJSON_KEYWORDS_URL', 'https://mtgjson.com/api/v5/Keywords.json')
KEYWORD_FETCH_ENABLED: bool = _env_flag('DECKGEN_FETCH_KEYWORDS', '0')
SCRYFALL_SEARCH_URL: str = os.getenv('SCRYFALL_SEARCH_URL', 'https://api.scryfall.com/cards/search')
HTTP_TIMEOUT_SECONDS: int = _env_int('DECKGEN_HTTP_TIMEOUT', 30)
USER_AGENT: str = 'Commander-Deck-Generator/1.0'
SYNC_BATCH_SIZE: int = _env_int('DECKGEN_SYNC_BATCH_SIZE', 100)
SYNC_RATE_LIMIT_DELAY: float = 0.1  # 100ms between Scryfall page requests
