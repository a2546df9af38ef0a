"""Fold overlapping tag namespaces in a card -> tags JSON export.

mechanic_X tags that duplicate an ability_keyword_X tag are remapped to one
canonical name on every card. Writes the cleaned mapping and prints a summary.

Usage:
    python -m deckgen.scripts.cleanup_overlapping_tags card_tags.json [--out cleaned.json] [--dry-run]
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Dict, List

from deckgen.logging_util import get_logger
from deckgen.tagging.tag_overlap import cleanup_overlapping_tags

logger = get_logger(__name__)


def _load_card_tags(path: str) -> Dict[str, List[str]]:
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object mapping card name to a list of tags")
    return {str(card): [str(t) for t in (tags or [])] for card, tags in data.items()}


def main(argv: List[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Fold overlapping mechanic/ability tags")
    p.add_argument("input", help="JSON file: {card name: [tags]}")
    p.add_argument("--out", default=None, help="Output path (default: overwrite input)")
    p.add_argument("--dry-run", action="store_true", help="Report only, do not write")
    args = p.parse_args(argv)

    if not os.path.isfile(args.input):
        print(f"Error: {args.input} not found")
        return 2
    try:
        card_tags = _load_card_tags(args.input)
    except (OSError, ValueError) as e:
        print(f"Error: could not read {args.input}: {e}")
        return 2

    report = cleanup_overlapping_tags([], card_tags)
    print(json.dumps(report.summary(), indent=2))
    for mechanic, ability in report.pairs[:20]:
        print(f"  {mechanic} -> {ability}")

    if args.dry_run:
        return 0
    out_path = args.out or args.input
    with open(out_path, 'w', encoding='utf-8') as f:
        json.dump(report.card_tags, f, indent=2, sort_keys=True)
    logger.info(f"Wrote cleaned tags for {len(report.card_tags)} cards to {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
