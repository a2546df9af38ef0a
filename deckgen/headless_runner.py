from __future__ import annotations

import argparse
import json
import os
from typing import Any, Dict, List, Optional

from deckgen.deck_builder.builder import generate_deck
from deckgen.exceptions import (
    CardSourceUnavailableError,
    CommanderNotFoundError,
    DeckBuilderError,
    InvalidCommanderError,
    InvalidConstraintsError,
)
from deckgen.logging_util import get_logger
from deckgen.services.card_source import DataFrameCardSource
from deckgen.tagging.mechanics_tagger import analyze_card, profile_tags_by_category
from deckgen.type_definitions import GeneratedDeck

logger = get_logger(__name__)

_WEIGHT_KEYS = ('creatures', 'artifacts', 'enchantments', 'instants', 'sorceries', 'planeswalkers')


def _parse_bool(val: Optional[str | bool | int]) -> Optional[bool]:
    if val is None:
        return None
    if isinstance(val, bool):
        return val
    if isinstance(val, int):
        return bool(val)
    s = str(val).strip().lower()
    if s in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if s in {"0", "false", "f", "no", "n", "off"}:
        return False
    return None


def _parse_list(val: Any) -> List[str]:
    if val is None:
        return []
    if isinstance(val, (list, tuple)):
        return [str(v).strip() for v in val if str(v).strip()]
    return [part.strip() for part in str(val).split(',') if part.strip()]


def _load_json_config(path: str) -> Dict[str, Any]:
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"config file {path} must hold a JSON object")
    return data


def _resolve_value(cli: Optional[Any], env_name: str, json_data: Dict[str, Any], json_key: str, default: Any) -> Any:
    """CLI flag, then environment variable, then JSON config, then default."""
    if cli is not None:
        return cli
    env_val = os.getenv(env_name)
    if env_val is not None:
        if isinstance(default, bool):
            b = _parse_bool(env_val)
            return default if b is None else b
        if isinstance(default, int) or default is None:
            try:
                return int(env_val)
            except ValueError:
                try:
                    return float(env_val)
                except ValueError:
                    return default
        return env_val
    if json_key in json_data:
        return json_data[json_key]
    return default


def _build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Headless commander deck generator")
    p.add_argument("--config", metavar="PATH", default=os.getenv("DECK_CONFIG"),
                   help="Path to JSON config file with constraint fields")
    p.add_argument("--commander", metavar="NAME", default=None,
                   help="Commander name (case-insensitive)")
    p.add_argument("--cards", metavar="PATH", default=None,
                   help="Card corpus snapshot (.json/.csv/.parquet); default from DECKGEN_CARDS_PATH")

    weight_group = p.add_argument_group("Card Type Weights", "Relative inclusion weights 0-20 (5 neutral, 0 excludes)")
    for key in _WEIGHT_KEYS:
        help_text = "Exact planeswalker count" if key == 'planeswalkers' else f"Weight for {key}"
        weight_group.add_argument(f"--{key}", metavar="INT", type=int, default=None, help=help_text)

    theme_group = p.add_argument_group("Themes")
    theme_group.add_argument("--themes", metavar="TAGS", default=None,
                             help="Comma separated theme tags (e.g. 'tokens,sacrifice')")
    theme_group.add_argument("--keywords", metavar="WORDS", default=None,
                             help="Comma separated focus keywords matched against card text and tags")
    theme_group.add_argument("--random-tags", metavar="0-10", type=int, default=None,
                             help="Number of random theme tags to inject")
    theme_group.add_argument("--seed", metavar="SEED", default=None,
                             help="Seed for reproducible generation (int or string)")

    budget_group = p.add_argument_group("Budget")
    budget_group.add_argument("--total-budget", metavar="USD", type=float, default=None)
    budget_group.add_argument("--max-card-price", metavar="USD", type=float, default=None)
    budget_group.add_argument("--prefer-cheapest", action="store_true", default=None,
                              help="Use the cheapest printing price when several are known")

    p.add_argument("--analyze", metavar="CARD", default=None,
                   help="Print the mechanics profile of one card and exit")
    p.add_argument("--json", action="store_true", help="Print the deck as JSON")
    p.add_argument("--dry-run", action="store_true",
                   help="Print resolved constraints and exit without generating")
    return p


def resolve_constraints(args: argparse.Namespace, json_cfg: Dict[str, Any]) -> Dict[str, Any]:
    cfg_weights = json_cfg.get('card_type_weights') or {}
    weights: Dict[str, Any] = {}
    for key in _WEIGHT_KEYS:
        value = _resolve_value(getattr(args, key), f"DECK_{key.upper()}", cfg_weights, key, None)
        if value is not None:
            weights[key] = value
    return {
        'card_type_weights': weights,
        'keywords': _parse_list(_resolve_value(args.themes, "DECK_THEMES", json_cfg, "keywords", "")),
        'keyword_focus': _parse_list(_resolve_value(args.keywords, "DECK_KEYWORDS", json_cfg, "keyword_focus", "")),
        'random_tag_count': _resolve_value(args.random_tags, "DECK_RANDOM_TAGS", json_cfg, "random_tag_count", 0),
        'seed': _resolve_value(args.seed, "DECK_SEED", json_cfg, "seed", None),
        'total_budget': _resolve_value(args.total_budget, "DECK_TOTAL_BUDGET", json_cfg, "total_budget", None),
        'max_card_price': _resolve_value(args.max_card_price, "DECK_MAX_CARD_PRICE", json_cfg, "max_card_price", None),
        'prefer_cheapest': _resolve_value(args.prefer_cheapest, "DECK_PREFER_CHEAPEST", json_cfg, "prefer_cheapest", False),
    }


def format_deck_text(deck: GeneratedDeck) -> str:
    lines = [f"Commander: {deck.commander.name}", ""]
    by_role: Dict[str, List[str]] = {}
    counts: Dict[str, int] = {}
    for slot in deck.cards:
        if slot.name not in counts:
            by_role.setdefault(slot.role, []).append(slot.name)
        counts[slot.name] = counts.get(slot.name, 0) + 1
    for role in sorted(by_role):
        names = by_role[role]
        lines.append(f"{role.title()} ({sum(counts[n] for n in names)})")
        lines.extend(f"  {counts[n]} {n}" for n in names)
        lines.append("")
    lines.append(f"Total: {deck.total_cards} cards, ${deck.total_price:.2f}")
    for note in deck.notes:
        lines.append(f"Note: {note}")
    for warning in deck.warnings:
        lines.append(f"Warning: {warning}")
    return "\n".join(lines)


def _print_card_analysis(source: DataFrameCardSource, name: str) -> int:
    card = source.get_card_by_name(name)
    if card is None:
        print(f"Card not found: {name}")
        return 2
    profile = analyze_card(card)
    print(f"{profile.card_name}: primary={profile.primary_type} power={profile.power_level}")
    print(f"  roles: {', '.join(profile.functional_roles)}")
    print(f"  archetypes: {', '.join(profile.archetype_relevance) or '-'}")
    for category, names in sorted(profile_tags_by_category(profile).items(), key=lambda kv: kv[0].value):
        print(f"  [{category.value}] {', '.join(names)}")
    return 0


def _main(argv: Optional[List[str]] = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    json_cfg: Dict[str, Any] = {}
    if args.config and os.path.isfile(args.config):
        try:
            json_cfg = _load_json_config(args.config)
        except (OSError, ValueError) as e:
            print(f"Could not read config: {e}")
            return 2

    source = DataFrameCardSource(args.cards) if args.cards else DataFrameCardSource()
    try:
        if args.analyze:
            return _print_card_analysis(source, args.analyze)

        commander_name = _resolve_value(args.commander, "DECK_COMMANDER", json_cfg, "commander", "")
        if not commander_name:
            parser.error("--commander is required (or DECK_COMMANDER / config 'commander')")
        constraints = resolve_constraints(args, json_cfg)
        if args.dry_run:
            print(json.dumps({'commander': commander_name, 'constraints': constraints}, indent=2))
            return 0

        deck = generate_deck(commander_name, constraints, source=source)
    except (CommanderNotFoundError, InvalidCommanderError, InvalidConstraintsError) as exc:
        print(str(exc))
        return 2
    except CardSourceUnavailableError as exc:
        print(str(exc))
        return 1
    except DeckBuilderError as exc:
        logger.error(f"Deck generation failed: {exc}")
        print(str(exc))
        return 1

    if args.json:
        print(json.dumps(deck.to_dict(), indent=2))
    else:
        print(format_deck_text(deck))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    return _main(argv)


if __name__ == "__main__":
    raise SystemExit(_main())
