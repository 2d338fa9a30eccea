"""Decklist parsing and mtgtop8 deck loading routes."""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from thl.models import DeckLoadRequest, DeckLoadResponse, DeckParseRequest, DeckParseResponse
from thl.security import verify_api_key
from thl.services.decklist import parse_decklist, total_card_count
from thl.services.mtgtop8 import load_deck

router = APIRouter(prefix="/api/v1/deck", tags=["deck"])
logger = logging.getLogger(__name__)


@router.post("/parse", response_model=DeckParseResponse)
async def parse_deck(request: DeckParseRequest, api_key: str = Depends(verify_api_key)) -> DeckParseResponse:
    """Parse pasted decklist text into merged main-deck entries."""
    entries = parse_decklist(request.decklist_text)
    if not entries:
        raise HTTPException(status_code=422, detail="No deck entries found in decklist text")

    return DeckParseResponse(
        entries=entries,
        total_cards=total_card_count(entries),
        unique_cards=len(entries),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.post("/load", response_model=DeckLoadResponse)
async def load_deck_from_url(request: DeckLoadRequest, api_key: str = Depends(verify_api_key)) -> DeckLoadResponse:
    """
    Load a main deck from an mtgtop8 event page.

    The page's .dec export is fetched and the sideboard dropped; the returned
    ``deck_text`` can be edited and sent to ``/api/v1/exile/estimate``.
    """
    try:
        result = await load_deck(request.deck_url)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except HTTPException as exc:
        raise HTTPException(status_code=exc.status_code, detail=f"Load deck failed: {exc.detail}")

    return DeckLoadResponse(
        deck_url=result.deck_url,
        dec_url=result.dec_url,
        entries=result.entries,
        deck_text=result.deck_text,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
