"""Expected-exile request/response models."""
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from .decks import DeckEntry


class EstimateRequest(BaseModel):
    """Request model for the expected-exile estimate."""

    decklist_text: Optional[str] = Field(
        default=None,
        description="Multi-line decklist text. Takes precedence over deck_url.",
    )
    deck_url: Optional[str] = Field(
        default=None,
        description="mtgtop8 event/deck page URL to load the decklist from.",
    )

    @model_validator(mode="after")
    def _ensure_deck_source_present(self) -> "EstimateRequest":
        """Ensure that a decklist or a deck URL is provided."""
        has_text = bool(self.decklist_text and self.decklist_text.strip())
        has_url = bool(self.deck_url and self.deck_url.strip())

        if not (has_text or has_url):
            raise ValueError("A decklist must be supplied via 'decklist_text' or 'deck_url'.")

        return self


class EstimateResponse(BaseModel):
    """Expected number of cards exiled by Tasha's Hideous Laughter."""

    success: bool = True
    expected_exile: float = Field(..., description="20 divided by the average CMC, rounded to 2 places")
    average_cmc: float
    total_cards: int = Field(..., description="Main-deck cards parsed from the decklist")
    counted_cards: int = Field(..., description="Cards whose CMC was resolved")
    unique_cards: int
    missing_cards: List[str] = Field(default_factory=list)
    entries: List[DeckEntry] = Field(default_factory=list)
    source: str = Field("decklist_text", description="Where the decklist came from")
    deck_url: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)
    timestamp: str
