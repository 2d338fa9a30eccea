"""Service for resolving card mana values (CMC) from Scryfall."""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, Iterable, List, Optional

import httpx
from pydantic import BaseModel, Field

from config import settings
from thl.constants import cmc_cache
from thl.utils.timeout_config import get_external_client

logger = logging.getLogger(__name__)


class CardLookupError(Exception):
    """Raised when a single card's CMC cannot be resolved."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"Card not found: {name} ({reason})")
        self.name = name
        self.reason = reason


class CostLookupResult(BaseModel):
    """CMC per resolved name plus the names that could not be resolved."""

    costs: Dict[str, float] = Field(default_factory=dict)
    missing: List[str] = Field(default_factory=list)


async def fetch_card_cmc(client: httpx.AsyncClient, name: str) -> float:
    """Fetch one card by exact name and return its converted mana cost."""
    endpoint = f"{settings.scryfall_api_base.rstrip('/')}/cards/named"

    try:
        response = await client.get(endpoint, params={"exact": name})
    except httpx.TimeoutException as exc:
        raise CardLookupError(name, "timeout") from exc
    except httpx.RequestError as exc:
        raise CardLookupError(name, f"network error: {exc}") from exc

    if response.status_code != 200:
        raise CardLookupError(name, f"HTTP {response.status_code}")

    try:
        data = response.json()
    except ValueError as exc:
        raise CardLookupError(name, "invalid JSON") from exc

    cmc = data.get("cmc") if isinstance(data, dict) else None
    if cmc is None:
        raise CardLookupError(name, "no cmc in response")

    try:
        return float(cmc)
    except (TypeError, ValueError) as exc:
        raise CardLookupError(name, "invalid cmc") from exc


async def fetch_card_costs(
    names: Iterable[str],
    client: Optional[httpx.AsyncClient] = None,
) -> CostLookupResult:
    """
    Resolve the CMC of every unique name concurrently.

    One request is made per unique name not already cached. A failed lookup
    only lands the name in ``missing``; it never aborts the batch.
    """
    unique_names = list(dict.fromkeys(names))
    result = CostLookupResult()

    pending: List[str] = []
    for name in unique_names:
        if name in cmc_cache:
            result.costs[name] = cmc_cache[name]
        else:
            pending.append(name)

    if not pending:
        return result

    logger.info(
        f"Fetching CMC for {len(pending)} cards from Scryfall "
        f"({len(unique_names) - len(pending)} cached)"
    )

    semaphore = asyncio.Semaphore(settings.scryfall_max_concurrency)
    failures: Dict[str, str] = {}

    async def _lookup(http_client: httpx.AsyncClient, name: str) -> None:
        async with semaphore:
            try:
                cmc = await fetch_card_cmc(http_client, name)
            except CardLookupError as exc:
                logger.warning(f"Scryfall lookup failed for '{name}': {exc.reason}")
                failures[name] = exc.reason
                return
        result.costs[name] = cmc
        cmc_cache[name] = cmc

    if client is None:
        async with get_external_client() as http_client:
            await asyncio.gather(*(_lookup(http_client, name) for name in pending))
    else:
        await asyncio.gather(*(_lookup(client, name) for name in pending))

    result.missing = [name for name in unique_names if name in failures]
    logger.info(f"Resolved {len(result.costs)} cards, {len(result.missing)} missing")
    return result
