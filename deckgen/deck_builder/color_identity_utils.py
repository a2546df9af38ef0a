"""Color identity checks and labels for commanders and deck cards."""
from __future__ import annotations

from typing import Iterable

from deckgen.type_definitions import parse_color_identity

__all__ = [
    "canon_color_code",
    "color_label_from_code",
    "format_color_label",
    "is_identity_subset",
    "is_multicolor",
]

_COLOR_NAMES: dict[str, str] = {
    "W": "White",
    "U": "Blue",
    "B": "Black",
    "R": "Red",
    "G": "Green",
    "C": "Colorless",
}
_GUILD_LABELS: dict[str, str] = {
    "WU": "Azorius",
    "UB": "Dimir",
    "BR": "Rakdos",
    "RG": "Gruul",
    "WG": "Selesnya",
    "WB": "Orzhov",
    "UR": "Izzet",
    "BG": "Golgari",
    "WR": "Boros",
    "UG": "Simic",
    "WUB": "Esper",
    "UBR": "Grixis",
    "BRG": "Jund",
    "WRG": "Naya",
    "WUG": "Bant",
    "WBR": "Mardu",
    "WUR": "Jeskai",
    "UBG": "Sultai",
    "URG": "Temur",
    "WBG": "Abzan",
    "WUBR": "Yore-Tiller",
    "WUBG": "Witch-Maw",
    "WURG": "Ink-Treader",
    "WBRG": "Dune-Brood",
    "UBRG": "Glint-Eye",
    "WUBRG": "Five-Color",
}


def canon_color_code(identity: Iterable[str] | str | None) -> str:
    """WUBRG-ordered code for an identity; 'C' when colorless."""
    return "".join(parse_color_identity(identity)) or "C"


def color_label_from_code(code: str) -> str:
    if not code:
        return ""
    if len(code) == 1:
        return f"{_COLOR_NAMES.get(code, code)} ({code})"
    label = _GUILD_LABELS.get(code)
    if label:
        return f"{label} ({code})"
    return f"{' / '.join(_COLOR_NAMES.get(ch, ch) for ch in code)} ({code})"


def format_color_label(identity: Iterable[str] | str | None) -> str:
    return color_label_from_code(canon_color_code(identity))


def is_identity_subset(card_identity: Iterable[str] | str | None, commander_identity: Iterable[str] | str | None) -> bool:
    """True when every color of the card is in the commander's identity (colorless always passes)."""
    return set(parse_color_identity(card_identity)) <= set(parse_color_identity(commander_identity))


def is_multicolor(identity: Iterable[str] | str | None) -> bool:
    return len(parse_color_identity(identity)) > 1
