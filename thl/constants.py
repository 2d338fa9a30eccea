"""Shared constants and regular expressions for the Tasha's Hideous Calculator API."""
from __future__ import annotations

import re

from cachetools import TTLCache

from config import settings

API_VERSION = "1.0.0"

# Tasha's Hideous Laughter exiles until 20 or more total mana value has been exiled
EXILE_MANA_VALUE_THRESHOLD = 20

MTGTOP8_ALLOWED_HOSTS = {"mtgtop8.com", "www.mtgtop8.com"}
DEC_LINK_SELECTOR = 'a[href$=".dec"], a[href*="?d="]'

DECK_HEADER_RE = re.compile(r"^\d+\s+[A-Z][A-Z\s'-]+$")
SIDEBOARD_RE = re.compile(r"^(?:sideboard|SB[:\s])", re.IGNORECASE)
LEADING_COUNT_RE = re.compile(r"^(\d+)")
DEC_ENTRY_RE = re.compile(r"^([0-9]+)\s+(.*)$")
CARD_SET_SUFFIX_RE = re.compile(r"\s*\(([A-Z0-9]{2,5})\)\s*\d*$")
CARD_BRACKET_SUFFIX_RE = re.compile(r"\s*\[[A-Z0-9]{2,5}\]\s*(?:#?\d+)?$")
CARD_HASH_SUFFIX_RE = re.compile(r"\s+#\d+$")

# card name -> cmc, successful Scryfall lookups only
cmc_cache = TTLCache(maxsize=5000, ttl=settings.cache_ttl)

__all__ = [
    "API_VERSION",
    "EXILE_MANA_VALUE_THRESHOLD",
    "MTGTOP8_ALLOWED_HOSTS",
    "DEC_LINK_SELECTOR",
    "DECK_HEADER_RE",
    "SIDEBOARD_RE",
    "LEADING_COUNT_RE",
    "DEC_ENTRY_RE",
    "CARD_SET_SUFFIX_RE",
    "CARD_BRACKET_SUFFIX_RE",
    "CARD_HASH_SUFFIX_RE",
    "cmc_cache",
]
