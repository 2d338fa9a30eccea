"""Decklist request/response models."""
from typing import List

from pydantic import BaseModel, Field, field_validator


class DeckEntry(BaseModel):
    """A card name with the number of copies in the main deck."""

    name: str
    count: int = Field(..., ge=1)


class DeckParseRequest(BaseModel):
    """Request model for parsing a pasted decklist."""

    decklist_text: str = Field(
        ...,
        description="Multi-line decklist text. Each line should look like '4 Lightning Bolt'.",
    )


class DeckParseResponse(BaseModel):
    """Parsed decklist with totals."""

    success: bool = True
    entries: List[DeckEntry]
    total_cards: int
    unique_cards: int
    timestamp: str


class DeckLoadRequest(BaseModel):
    """Request model for loading a decklist from an mtgtop8 event page."""

    deck_url: str = Field(..., description="mtgtop8 event/deck page URL")

    @field_validator("deck_url")
    @classmethod
    def _strip_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("deck_url cannot be empty")
        return value


class DeckLoadResponse(BaseModel):
    """Main-deck entries extracted from an mtgtop8 .dec export."""

    success: bool = True
    deck_url: str
    dec_url: str
    entries: List[str]
    deck_text: str
    timestamp: str
