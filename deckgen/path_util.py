from __future__ import annotations

import os

_PKG_DIR = os.path.dirname(os.path.abspath(__file__))


def card_files_dir() -> str:
    """Return the base directory for card files (corpus snapshots and caches).

    Defaults to 'card_files'. Override with CARD_FILES_DIR environment variable.
    """
    base = os.getenv("CARD_FILES_DIR")
    base = base.strip() if isinstance(base, str) else None
    return base or "card_files"


def get_cards_path() -> str:
    """Get the path to the card corpus file.

    Returns:
        Path from DECKGEN_CARDS_PATH, or card_files/cards.json
    """
    override = os.getenv("DECKGEN_CARDS_PATH")
    if override and override.strip():
        return override.strip()
    return os.path.join(card_files_dir(), "cards.json")


def config_dir() -> str:
    """Return the directory holding bundled configuration data."""
    return os.path.join(_PKG_DIR, "config")


def get_synergy_rules_path() -> str:
    """Get the path to the versioned synergy rule table.

    Defaults to the bundled deckgen/config/synergy_rules.yml. Override with
    DECKGEN_RULES_PATH to curate rules without touching the package.
    """
    override = os.getenv("DECKGEN_RULES_PATH")
    if override and override.strip():
        return override.strip()
    return os.path.join(config_dir(), "synergy_rules.yml")


def get_keywords_cache_path() -> str:
    """Get the path of the on-disk MTGJSON keyword catalog cache.

    Returns:
        Path from DECKGEN_KEYWORDS_CACHE, or card_files/keywords.json
    """
    override = os.getenv("DECKGEN_KEYWORDS_CACHE")
    if override and override.strip():
        return override.strip()
    return os.path.join(card_files_dir(), "keywords.json")
