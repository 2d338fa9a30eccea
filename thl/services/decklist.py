"""Decklist text parsing for pasted lists and mtgtop8 .dec exports."""
from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List

from thl.constants import (
    CARD_BRACKET_SUFFIX_RE,
    CARD_HASH_SUFFIX_RE,
    CARD_SET_SUFFIX_RE,
    DEC_ENTRY_RE,
    DECK_HEADER_RE,
    LEADING_COUNT_RE,
    SIDEBOARD_RE,
)
from thl.models import DeckEntry

logger = logging.getLogger(__name__)


def normalize_card_name(card_name: str) -> str:
    """Strip common set/collector suffixes from exported decklists."""
    if not card_name:
        return ""

    cleaned = card_name.strip()

    # Remove Arena/exporter style "(SET) 123" suffixes first
    cleaned = CARD_SET_SUFFIX_RE.sub("", cleaned)
    # Remove bracketed set codes like "[BRO] #270"
    cleaned = CARD_BRACKET_SUFFIX_RE.sub("", cleaned)
    # Remove lingering "#123" style markers if present
    cleaned = CARD_HASH_SUFFIX_RE.sub("", cleaned)

    return cleaned.strip()


def parse_decklist(text: str) -> List[DeckEntry]:
    """
    Parse pasted decklist text into deck entries.

    Supports formats like:
        4 Lightning Bolt
        4x Counterspell
        1 Sol Ring (C21) 263

    Category headers such as "24 LANDS" and the "Sideboard" or "SB:" marker
    line itself are skipped; cards listed after the marker are still read.
    Repeated names are merged by summing their counts, keeping the order in
    which names first appear.
    """
    if not text:
        return []

    counts: Dict[str, int] = {}

    for raw_line in re.split(r"\r?\n", text):
        line = raw_line.strip()
        if not line:
            continue
        if SIDEBOARD_RE.match(line):
            continue
        if DECK_HEADER_RE.match(line):
            continue

        parts = line.split()
        count_match = LEADING_COUNT_RE.match(parts[0])
        if not count_match:
            continue

        count = int(count_match.group(1))
        name = normalize_card_name(" ".join(parts[1:]))
        if not name or count <= 0:
            continue

        counts[name] = counts.get(name, 0) + count

    entries = [DeckEntry(name=name, count=count) for name, count in counts.items()]
    logger.debug(f"Parsed {len(entries)} unique cards from decklist text")
    return entries


def extract_main_deck_lines(dec_text: str) -> List[str]:
    """Return "<count> <name>" lines from a .dec file, stopping at the sideboard."""
    entries: List[str] = []

    for raw_line in re.split(r"\r?\n", dec_text or ""):
        line = raw_line.strip()
        if not line:
            continue
        if SIDEBOARD_RE.match(line):
            break

        match = DEC_ENTRY_RE.match(line)
        if match:
            entries.append(f"{match.group(1)} {match.group(2)}")

    return entries


def format_decklist(entries: Iterable[DeckEntry]) -> str:
    """Render entries back to one "<count> <name>" line per card."""
    return "\n".join(f"{entry.count} {entry.name}" for entry in entries)


def total_card_count(entries: Iterable[DeckEntry]) -> int:
    return sum(entry.count for entry in entries)
