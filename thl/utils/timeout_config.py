"""Centralized timeout and client configuration for outbound requests."""
import httpx


def get_external_timeout():
    """Get an httpx timeout configuration for Scryfall and mtgtop8 calls."""
    from config import settings

    return httpx.Timeout(
        connect=settings.external_api_connect_timeout,
        read=settings.external_api_timeout,
        write=settings.external_api_write_timeout,
        pool=5.0
    )


def get_default_headers():
    """Scryfall asks every client to identify itself and request JSON."""
    from config import settings

    return {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }


def get_external_client():
    """Get an httpx.AsyncClient with the configured timeouts and headers."""
    return httpx.AsyncClient(
        timeout=get_external_timeout(),
        headers=get_default_headers(),
        follow_redirects=True,
    )
