"""Expected-exile estimate route."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from thl.constants import EXILE_MANA_VALUE_THRESHOLD
from thl.models import EstimateRequest, EstimateResponse
from thl.security import verify_api_key
from thl.services.estimator import estimate_deck
from thl.services.mtgtop8 import load_deck

router = APIRouter(prefix="/api/v1/exile", tags=["exile"])
logger = logging.getLogger(__name__)


@router.post("/estimate", response_model=EstimateResponse)
async def estimate_expected_exile(
    request: EstimateRequest,
    api_key: str = Depends(verify_api_key),
) -> EstimateResponse:
    """
    Estimate how many cards Tasha's Hideous Laughter exiles from this deck.

    - Provide a decklist via:
      * Multi-line text blob (``decklist_text``)
      * mtgtop8 event page URL (``deck_url``), used only when no text is given
    - Each unique card's CMC is looked up on Scryfall concurrently
    - Cards that cannot be found are ignored and reported in ``missing_cards``
    """
    source = "decklist_text"
    deck_url = None
    decklist_text = request.decklist_text if request.decklist_text and request.decklist_text.strip() else None

    try:
        if decklist_text is None:
            source = "deck_url"
            try:
                loaded = await load_deck(request.deck_url)
            except HTTPException as exc:
                raise HTTPException(
                    status_code=exc.status_code,
                    detail=f"Load deck failed: {exc.detail}",
                )
            deck_url = loaded.deck_url
            decklist_text = loaded.deck_text

        outcome = await estimate_deck(decklist_text)

    except ValueError as exc:
        logger.info(f"Estimate rejected: {exc}")
        raise HTTPException(status_code=422, detail=str(exc))

    warnings = []
    if outcome.missing_cards:
        warnings.append(f"Ignored (not found): {', '.join(outcome.missing_cards)}")

    estimate = outcome.estimate
    return EstimateResponse(
        expected_exile=estimate.expected_exile,
        average_cmc=estimate.average_cmc,
        total_cards=estimate.total_cards,
        counted_cards=estimate.counted_cards,
        unique_cards=estimate.unique_cards,
        missing_cards=outcome.missing_cards,
        entries=outcome.entries,
        source=source,
        deck_url=deck_url,
        warnings=warnings,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.get("/info")
async def get_estimate_info(api_key: str = Depends(verify_api_key)) -> Dict[str, Any]:
    """Describe how the expected-exile estimate is calculated."""
    return {
        "success": True,
        "card": "Tasha's Hideous Laughter",
        "formula": f"{EXILE_MANA_VALUE_THRESHOLD} / average_cmc",
        "threshold": EXILE_MANA_VALUE_THRESHOLD,
        "description": (
            "Each opponent exiles cards from the top of their library until they have exiled "
            f"cards with total mana value {EXILE_MANA_VALUE_THRESHOLD} or greater. The expected "
            "number of cards exiled is approximated by dividing the threshold by the deck's "
            "count-weighted average CMC."
        ),
        "notes": [
            "Decks loaded from mtgtop8 exclude the sideboard; pasted text is read in full.",
            "Cards not found on Scryfall are ignored and reported.",
            "Lands count toward the average with CMC 0.",
        ],
        "source": "scryfall",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
