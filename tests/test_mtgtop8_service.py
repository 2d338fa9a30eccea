"""Tests for loading decks from mtgtop8 event pages."""
import httpx
import pytest
from fastapi import HTTPException

from thl.services import mtgtop8
from thl.services.mtgtop8 import find_dec_link, load_deck, proxied, validate_deck_url

EVENT_URL = "https://mtgtop8.com/event?e=123&d=456&f=PAU"

EVENT_HTML = """
<html>
  <body>
    <div class="deck_line">4 Tasha's Hideous Laughter</div>
    <div>
      <a href="event?e=123&f=PAU">Back to event</a>
      <a href="mtgo?d=456&f=Tasha_Mill">MTGO</a>
      <a href="dec?d=456&f=Tasha_Mill">.dec</a>
    </div>
  </body>
</html>
"""

DEC_TEXT = (
    "// Deck file for Magic Workstation\r\n"
    "4 Tasha's Hideous Laughter\r\n"
    "4 Ruin Crab\r\n"
    "16 Island\r\n"
    "SB: 3 Hydroblast\r\n"
)


def _transport(pages):
    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if url in pages:
            status, body = pages[url]
            return httpx.Response(status, text=body)
        return httpx.Response(404, text="not found")

    return httpx.MockTransport(handler)


def test_validate_deck_url_only_accepts_mtgtop8():
    assert validate_deck_url(f"  {EVENT_URL} ") == EVENT_URL

    with pytest.raises(ValueError):
        validate_deck_url("ftp://mtgtop8.com/event?e=1")
    with pytest.raises(ValueError):
        validate_deck_url("https://evil.example.com/event?e=1")


def test_find_dec_link_resolves_relative_href():
    assert find_dec_link(EVENT_HTML) == "https://mtgtop8.com/mtgo?d=456&f=Tasha_Mill"


def test_find_dec_link_matches_dec_suffix_and_keeps_absolute_urls():
    html = '<a href="https://files.example.com/decks/tasha.dec">Download</a>'
    assert find_dec_link(html) == "https://files.example.com/decks/tasha.dec"

    html = '<a href="/export/tasha.dec">Download</a>'
    assert find_dec_link(html) == "https://mtgtop8.com/export/tasha.dec"


def test_find_dec_link_returns_none_without_export_link():
    assert find_dec_link("<html><a href='/search'>Search</a></html>") is None


def test_proxied_wraps_url_when_configured(monkeypatch):
    assert proxied(EVENT_URL) == EVENT_URL

    monkeypatch.setattr(mtgtop8.settings, "deck_proxy_url", "https://proxy.example.com/raw?url={url}")
    assert proxied("https://mtgtop8.com/dec?d=1") == (
        "https://proxy.example.com/raw?url=https%3A%2F%2Fmtgtop8.com%2Fdec%3Fd%3D1"
    )


@pytest.mark.asyncio
async def test_load_deck_follows_dec_link():
    pages = {
        EVENT_URL: (200, EVENT_HTML),
        "https://mtgtop8.com/mtgo?d=456&f=Tasha_Mill": (200, DEC_TEXT),
    }

    async with httpx.AsyncClient(transport=_transport(pages)) as client:
        result = await load_deck(EVENT_URL, client=client)

    assert result.dec_url == "https://mtgtop8.com/mtgo?d=456&f=Tasha_Mill"
    assert result.entries == ["4 Tasha's Hideous Laughter", "4 Ruin Crab", "16 Island"]
    assert result.deck_text == "4 Tasha's Hideous Laughter\n4 Ruin Crab\n16 Island"


@pytest.mark.asyncio
async def test_load_deck_reports_each_failure_step():
    async with httpx.AsyncClient(transport=_transport({EVENT_URL: (500, "boom")})) as client:
        with pytest.raises(HTTPException) as page_error:
            await load_deck(EVENT_URL, client=client)
    assert page_error.value.status_code == 502
    assert page_error.value.detail == "Failed to fetch deck page"

    async with httpx.AsyncClient(transport=_transport({EVENT_URL: (200, "<html></html>")})) as client:
        with pytest.raises(HTTPException) as link_error:
            await load_deck(EVENT_URL, client=client)
    assert link_error.value.status_code == 404
    assert link_error.value.detail == ".dec link not found"

    async with httpx.AsyncClient(transport=_transport({EVENT_URL: (200, EVENT_HTML)})) as client:
        with pytest.raises(HTTPException) as dec_error:
            await load_deck(EVENT_URL, client=client)
    assert dec_error.value.detail == "Failed to fetch .dec file"

    pages = {
        EVENT_URL: (200, EVENT_HTML),
        "https://mtgtop8.com/mtgo?d=456&f=Tasha_Mill": (200, "// empty\r\nSB: 1 Duress"),
    }
    async with httpx.AsyncClient(transport=_transport(pages)) as client:
        with pytest.raises(HTTPException) as empty_error:
            await load_deck(EVENT_URL, client=client)
    assert empty_error.value.status_code == 422
    assert empty_error.value.detail == "No deck entries in .dec"


@pytest.mark.asyncio
async def test_load_deck_maps_timeouts(monkeypatch):
    class _TimeoutClient:
        def __init__(self, *args, **kwargs):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc, tb):
            return False

        async def get(self, *args, **kwargs):
            raise httpx.ReadTimeout("too slow")

    monkeypatch.setattr(mtgtop8, "get_external_client", lambda: _TimeoutClient())

    with pytest.raises(HTTPException) as exc:
        await load_deck(EVENT_URL)

    assert exc.value.status_code == 504


@pytest.mark.asyncio
async def test_load_deck_refuses_dec_link_outside_mtgtop8():
    fetched = []
    html = '<a href="https://files.example.com/decks/tasha.dec">Download</a>'

    def handler(request: httpx.Request) -> httpx.Response:
        fetched.append(str(request.url))
        return httpx.Response(200, text=html)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(HTTPException) as exc:
            await load_deck(EVENT_URL, client=client)

    assert exc.value.status_code == 422
    assert exc.value.detail == ".dec link points outside mtgtop8"
    assert fetched == [EVENT_URL]
