import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app import app
from config import settings
from thl.constants import cmc_cache


@pytest.fixture(scope="session")
def client():
    """Shared TestClient for FastAPI app."""
    return TestClient(app)


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {settings.api_key}"}


@pytest.fixture(autouse=True)
def clear_cmc_cache():
    """Scryfall lookups are memoised process-wide; start every test cold."""
    cmc_cache.clear()
    yield
    cmc_cache.clear()
