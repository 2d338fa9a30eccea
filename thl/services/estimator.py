"""Expected cards exiled by Tasha's Hideous Laughter from a deck's average CMC."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

import httpx
from pydantic import BaseModel, Field

from thl.constants import EXILE_MANA_VALUE_THRESHOLD
from thl.models import DeckEntry
from thl.services.decklist import parse_decklist, total_card_count
from thl.services.scryfall import fetch_card_costs

logger = logging.getLogger(__name__)


class ExileEstimate(BaseModel):
    average_cmc: float
    expected_exile: float
    total_cards: int
    counted_cards: int
    unique_cards: int


class EstimateOutcome(BaseModel):
    estimate: ExileEstimate
    entries: List[DeckEntry]
    missing_cards: List[str] = Field(default_factory=list)


def compute_expected_exile(entries: Sequence[DeckEntry], costs: Dict[str, float]) -> ExileEstimate:
    """
    Weight each card's CMC by its count and divide the exile threshold by the
    average.

    Entries without a cost are ignored. Raises ValueError when no entry has a
    cost or when the average CMC is not positive (an all-land deck).
    """
    valid = [entry for entry in entries if costs.get(entry.name) is not None]
    if not valid:
        raise ValueError("No valid cards found")

    counted_cards = sum(entry.count for entry in valid)
    total_cmc = sum(costs[entry.name] * entry.count for entry in valid)
    average_cmc = total_cmc / counted_cards

    if average_cmc <= 0:
        raise ValueError("Average CMC <= 0")

    return ExileEstimate(
        average_cmc=round(average_cmc, 4),
        expected_exile=round(EXILE_MANA_VALUE_THRESHOLD / average_cmc, 2),
        total_cards=total_card_count(entries),
        counted_cards=counted_cards,
        unique_cards=len(entries),
    )


async def estimate_deck(text: str, client: Optional[httpx.AsyncClient] = None) -> EstimateOutcome:
    """Parse decklist text, resolve costs from Scryfall and compute the estimate."""
    entries = parse_decklist(text)
    if not entries:
        raise ValueError("No valid cards found")

    lookup = await fetch_card_costs([entry.name for entry in entries], client=client)
    estimate = compute_expected_exile(entries, lookup.costs)

    logger.info(
        f"Estimate: {estimate.expected_exile} cards exiled "
        f"(avg CMC {estimate.average_cmc}, {len(lookup.missing)} missing)"
    )
    return EstimateOutcome(estimate=estimate, entries=entries, missing_cards=lookup.missing)
