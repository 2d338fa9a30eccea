"""Load a main-deck list from an mtgtop8 event page via its .dec export."""
from __future__ import annotations

import logging
from typing import List, Optional
from urllib.parse import quote, urljoin, urlparse

import httpx
from bs4 import BeautifulSoup
from fastapi import HTTPException
from pydantic import BaseModel

from config import settings
from thl.constants import DEC_LINK_SELECTOR, MTGTOP8_ALLOWED_HOSTS
from thl.services.decklist import extract_main_deck_lines
from thl.utils.timeout_config import get_external_client

logger = logging.getLogger(__name__)

HTML_ACCEPT = {"Accept": "text/html,application/xhtml+xml,*/*;q=0.8"}


class DeckLoadResult(BaseModel):
    deck_url: str
    dec_url: str
    entries: List[str]
    deck_text: str


def validate_deck_url(deck_url: str) -> str:
    """Ensure the URL points at mtgtop8 over http(s) and return it stripped."""
    deck_url = (deck_url or "").strip()
    parsed = urlparse(deck_url)

    if parsed.scheme not in {"http", "https"}:
        raise ValueError("URL must start with http:// or https://")
    if (parsed.hostname or "").lower() not in MTGTOP8_ALLOWED_HOSTS:
        raise ValueError(f"URL must be from a supported site: {', '.join(sorted(MTGTOP8_ALLOWED_HOSTS))}")

    return deck_url


def proxied(url: str) -> str:
    """Wrap a URL in the configured fetch proxy, if any."""
    template = settings.deck_proxy_url
    if not template:
        return url
    return template.format(url=quote(url, safe=""))


def find_dec_link(html: str, base_url: Optional[str] = None) -> Optional[str]:
    """Return the absolute URL of the first .dec export link on an event page."""
    soup = BeautifulSoup(html, "html.parser")
    anchor = soup.select_one(DEC_LINK_SELECTOR)
    if anchor is None:
        return None

    href = (anchor.get("href") or "").strip()
    if not href:
        return None

    return urljoin(base_url or settings.mtgtop8_base_url, href)


async def _fetch_text(client: httpx.AsyncClient, url: str, failure_detail: str) -> str:
    try:
        response = await client.get(proxied(url), headers=HTML_ACCEPT)
        response.raise_for_status()
    except httpx.TimeoutException:
        logger.error(f"Timeout fetching {url}")
        raise HTTPException(status_code=504, detail=f"{failure_detail}: request timed out")
    except httpx.HTTPStatusError as exc:
        logger.error(f"mtgtop8 HTTP error {exc.response.status_code} for {url}")
        raise HTTPException(status_code=502, detail=failure_detail)
    except httpx.RequestError as exc:
        logger.error(f"Network error fetching {url}: {exc}")
        raise HTTPException(status_code=502, detail=failure_detail)

    return response.text


async def load_deck(deck_url: str, client: Optional[httpx.AsyncClient] = None) -> DeckLoadResult:
    """
    Fetch an mtgtop8 event page, follow its .dec export link and return the
    main-deck entries.

    Raises:
        ValueError: if the URL is not an mtgtop8 http(s) URL
        HTTPException: 502/504 on fetch failures, 404 when no .dec link is
            found, 422 when the .dec link leaves mtgtop8 or the file has no
            main-deck entries
    """
    deck_url = validate_deck_url(deck_url)

    if client is None:
        async with get_external_client() as http_client:
            return await _load_deck(http_client, deck_url)
    return await _load_deck(client, deck_url)


async def _load_deck(client: httpx.AsyncClient, deck_url: str) -> DeckLoadResult:
    logger.info(f"Loading deck page: {deck_url}")
    html = await _fetch_text(client, deck_url, "Failed to fetch deck page")

    dec_url = find_dec_link(html)
    if not dec_url:
        logger.warning(f"No .dec link found on {deck_url}")
        raise HTTPException(status_code=404, detail=".dec link not found")

    if (urlparse(dec_url).hostname or "").lower() not in MTGTOP8_ALLOWED_HOSTS:
        logger.warning(f"Refusing .dec link outside mtgtop8: {dec_url}")
        raise HTTPException(status_code=422, detail=".dec link points outside mtgtop8")

    logger.info(f"Fetching .dec export: {dec_url}")
    dec_text = await _fetch_text(client, dec_url, "Failed to fetch .dec file")

    entries = extract_main_deck_lines(dec_text)
    if not entries:
        raise HTTPException(status_code=422, detail="No deck entries in .dec")

    logger.info(f"Loaded {len(entries)} main-deck lines from {dec_url}")
    return DeckLoadResult(
        deck_url=deck_url,
        dec_url=dec_url,
        entries=entries,
        deck_text="\n".join(entries),
    )
