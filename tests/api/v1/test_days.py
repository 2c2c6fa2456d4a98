"""
Tests for the ledger HTTP API.

Covers:
- Expense and wager CRUD over HTTP
- Opening balance, finalize, day snapshot, finalized days
- Error status mapping
- Caller-side lock on finalized days
"""

from decimal import Decimal

import pytest
from fastapi import status

from app.core.config import settings
from app.utils.ledger_validation import LedgerStorageError

API = settings.API_V1_STR


@pytest.mark.asyncio
async def test_create_and_list_expenses(client, auth_headers):
    response = await client.post(
        f"{API}/days/2024-03-01/expenses",
        headers=auth_headers,
        json={"category": "Servicios", "subcategory": "Luz", "amount": "1500", "description": "Pago"}
    )

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["id"] == 1
    assert data["date"] == "2024-03-01"
    assert Decimal(data["amount"]) == Decimal("1500")

    listing = await client.get(f"{API}/days/2024-03-01/expenses", headers=auth_headers)
    assert listing.status_code == status.HTTP_200_OK
    assert [e["id"] for e in listing.json()] == [1]


@pytest.mark.asyncio
async def test_negative_amount_rejected(client, auth_headers):
    response = await client.post(
        f"{API}/days/2024-03-01/expenses",
        headers=auth_headers,
        json={"category": "Servicios", "amount": "-5"}
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_invalid_date_rejected(client, auth_headers):
    response = await client.get(f"{API}/days/2024-02-30/expenses", headers=auth_headers)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_and_delete_expense(client, auth_headers):
    await client.post(
        f"{API}/days/2024-03-01/expenses",
        headers=auth_headers,
        json={"category": "Comida", "amount": "10"}
    )

    updated = await client.patch(
        f"{API}/days/2024-03-01/expenses/1",
        headers=auth_headers,
        json={"amount": "12.75"}
    )
    assert updated.status_code == status.HTTP_200_OK
    assert Decimal(updated.json()["amount"]) == Decimal("12.75")
    assert updated.json()["category"] == "Comida"

    deleted = await client.delete(f"{API}/days/2024-03-01/expenses/1", headers=auth_headers)
    assert deleted.status_code == status.HTTP_204_NO_CONTENT

    # Deleting again is still fine
    again = await client.delete(f"{API}/days/2024-03-01/expenses/1", headers=auth_headers)
    assert again.status_code == status.HTTP_204_NO_CONTENT


@pytest.mark.asyncio
async def test_update_missing_expense_is_404(client, auth_headers):
    response = await client.patch(
        f"{API}/days/2024-03-01/expenses/5",
        headers=auth_headers,
        json={"amount": "1"}
    )

    assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_wager_crud(client, auth_headers):
    created = await client.post(
        f"{API}/days/2024-03-01/wagers",
        headers=auth_headers,
        json={"kind": "ingress", "category": "Primera", "amount": "5000"}
    )
    assert created.status_code == status.HTTP_201_CREATED
    assert created.json()["source"] == "Primera"

    updated = await client.patch(
        f"{API}/days/2024-03-01/wagers/1",
        headers=auth_headers,
        json={"kind": "egress"}
    )
    assert updated.json()["kind"] == "egress"

    listing = await client.get(f"{API}/days/2024-03-01/wagers", headers=auth_headers)
    assert len(listing.json()) == 1

    deleted = await client.delete(f"{API}/days/2024-03-01/wagers/1", headers=auth_headers)
    assert deleted.status_code == status.HTTP_204_NO_CONTENT
    listing = await client.get(f"{API}/days/2024-03-01/wagers", headers=auth_headers)
    assert listing.json() == []


@pytest.mark.asyncio
async def test_wager_requires_kind(client, auth_headers):
    response = await client.post(
        f"{API}/days/2024-03-01/wagers",
        headers=auth_headers,
        json={"category": "Primera", "amount": "1"}
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_opening_balance_finalize_and_snapshot(client, auth_headers):
    await client.post(
        f"{API}/days/2024-03-01/expenses",
        headers=auth_headers,
        json={"category": "Servicios", "amount": "1500"}
    )

    opening = await client.get(f"{API}/days/2024-03-02/opening-balance", headers=auth_headers)
    assert opening.status_code == status.HTTP_200_OK
    assert Decimal(opening.json()["opening_balance"]) == Decimal("-1500")

    finalized = await client.post(f"{API}/days/2024-03-01/finalize", headers=auth_headers)
    assert finalized.status_code == status.HTTP_200_OK
    body = finalized.json()
    assert body["finalized"] is True
    assert body["date"] == "2024-03-01"
    assert Decimal(body["closing_balance"]) == Decimal("-1500")

    snapshot = await client.get(f"{API}/days/2024-03-01", headers=auth_headers)
    assert snapshot.json()["is_finalized"] is True
    assert len(snapshot.json()["expenses"]) == 1
    assert snapshot.json()["wager_transactions"] == []

    next_day = await client.get(f"{API}/days/2024-03-02", headers=auth_headers)
    assert Decimal(next_day.json()["opening_balance"]) == Decimal("-1500")
    assert next_day.json()["is_finalized"] is False

    days = await client.get(f"{API}/finalized-days", headers=auth_headers)
    assert days.json() == {"dates": ["2024-03-01"]}


@pytest.mark.asyncio
async def test_owners_do_not_see_each_other(client, auth_headers, other_auth_headers):
    await client.post(
        f"{API}/days/2024-03-01/expenses",
        headers=auth_headers,
        json={"category": "Servicios", "amount": "100"}
    )
    await client.post(f"{API}/days/2024-03-01/finalize", headers=auth_headers)

    listing = await client.get(f"{API}/days/2024-03-01/expenses", headers=other_auth_headers)
    assert listing.json() == []

    opening = await client.get(f"{API}/days/2024-03-02/opening-balance", headers=other_auth_headers)
    assert Decimal(opening.json()["opening_balance"]) == Decimal("0")

    days = await client.get(f"{API}/finalized-days", headers=other_auth_headers)
    assert days.json() == {"dates": []}


@pytest.mark.asyncio
async def test_edit_on_finalized_day_allowed_by_default(client, auth_headers):
    await client.post(f"{API}/days/2024-03-01/finalize", headers=auth_headers)

    response = await client.post(
        f"{API}/days/2024-03-01/expenses",
        headers=auth_headers,
        json={"category": "Servicios", "amount": "1"}
    )

    assert response.status_code == status.HTTP_201_CREATED


@pytest.mark.asyncio
async def test_edit_on_finalized_day_locked_when_enabled(client, auth_headers, monkeypatch):
    monkeypatch.setattr(settings, "LOCK_FINALIZED_DAYS", True)
    await client.post(f"{API}/days/2024-03-01/finalize", headers=auth_headers)

    create = await client.post(
        f"{API}/days/2024-03-01/expenses",
        headers=auth_headers,
        json={"category": "Servicios", "amount": "1"}
    )
    delete = await client.delete(f"{API}/days/2024-03-01/wagers/1", headers=auth_headers)
    open_day = await client.post(
        f"{API}/days/2024-03-02/expenses",
        headers=auth_headers,
        json={"category": "Servicios", "amount": "1"}
    )

    assert create.status_code == status.HTTP_409_CONFLICT
    assert delete.status_code == status.HTTP_409_CONFLICT
    assert open_day.status_code == status.HTTP_201_CREATED


@pytest.mark.asyncio
async def test_storage_failure_is_503(client, auth_headers, ledger, monkeypatch):
    async def broken(*args, **kwargs):
        raise LedgerStorageError("Storage failure during list expenses")

    monkeypatch.setattr(ledger.store, "list_expenses", broken)

    response = await client.get(f"{API}/days/2024-03-01/expenses", headers=auth_headers)

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "ok"
