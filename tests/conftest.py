from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from app.main import app
from app.core.auth import create_access_token
from app.db.session import get_ledger_service
from app.repositories.memory_repo import InMemoryLedgerStore
from app.services.ledger_service import LedgerService

OWNER = "owner-a"
OTHER_OWNER = "owner-b"


@pytest.fixture
def owner():
    return OWNER


@pytest.fixture
def other_owner():
    return OTHER_OWNER


@pytest.fixture
def march_1():
    return date(2024, 3, 1)


@pytest.fixture
def store():
    """Fresh in-memory store per test."""
    return InMemoryLedgerStore()


@pytest.fixture
def ledger(store):
    return LedgerService(store)


def _mock_collection(name: str) -> MagicMock:
    collection = MagicMock()
    collection.name = name
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock()
    collection.find_one_and_update = AsyncMock(return_value=None)
    collection.delete_one = AsyncMock()
    collection.update_one = AsyncMock()
    collection.create_index = AsyncMock()

    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=[])
    collection.find.return_value = cursor
    return collection


@pytest.fixture
def mock_db():
    """Mock motor database with one mock per ledger collection."""
    collections = {
        name: _mock_collection(name)
        for name in ("expenses", "wager_transactions", "day_closings")
    }
    db = MagicMock()
    db.__getitem__.side_effect = lambda name: collections[name]
    return db


@pytest.fixture
def auth_headers(owner):
    return {"Authorization": f"Bearer {create_access_token(owner)}"}


@pytest.fixture
def other_auth_headers(other_owner):
    return {"Authorization": f"Bearer {create_access_token(other_owner)}"}


@pytest_asyncio.fixture
async def client(ledger):
    """API client wired to the in-memory ledger."""
    app.dependency_overrides[get_ledger_service] = lambda: ledger
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
