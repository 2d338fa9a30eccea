"""Aggregate exports for API models."""
from .decks import (
    DeckEntry,
    DeckLoadRequest,
    DeckLoadResponse,
    DeckParseRequest,
    DeckParseResponse,
)
from .estimates import EstimateRequest, EstimateResponse

__all__ = [
    "DeckEntry",
    "DeckLoadRequest",
    "DeckLoadResponse",
    "DeckParseRequest",
    "DeckParseResponse",
    "EstimateRequest",
    "EstimateResponse",
]
