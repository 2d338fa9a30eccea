"""Estimate cards exiled by Tasha's Hideous Laughter from the command line.

Usage:
    python scripts/estimate_deck.py my_deck.txt
    python scripts/estimate_deck.py --url "https://mtgtop8.com/event?e=1&d=2"
    cat my_deck.txt | python scripts/estimate_deck.py
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fastapi import HTTPException

from thl.services.estimator import estimate_deck
from thl.services.mtgtop8 import load_deck


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Estimate the expected number of cards exiled by Tasha's Hideous Laughter."
    )
    parser.add_argument(
        "decklist",
        nargs="?",
        help="Path to a decklist file ('4 Lightning Bolt' per line). Reads stdin when omitted.",
    )
    parser.add_argument("--url", help="mtgtop8 event page to load the main deck from")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show lookup logging")
    return parser


async def run(decklist: Optional[str], url: Optional[str]) -> int:
    if url:
        loaded = await load_deck(url)
        print(f"Loaded {len(loaded.entries)} main-deck lines from {loaded.dec_url}")
        text = loaded.deck_text
    elif decklist:
        text = Path(decklist).read_text(encoding="utf-8")
    else:
        text = sys.stdin.read()

    outcome = await estimate_deck(text)
    estimate = outcome.estimate

    print(f"Expected cards exiled: {estimate.expected_exile:.2f}")
    print(f"Average CMC: {estimate.average_cmc:.2f} over {estimate.counted_cards}/{estimate.total_cards} cards")
    if outcome.missing_cards:
        print(f"Ignored (not found): {', '.join(outcome.missing_cards)}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        return asyncio.run(run(args.decklist, args.url))
    except HTTPException as exc:
        print(f"Load deck failed: {exc.detail}", file=sys.stderr)
    except (ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
