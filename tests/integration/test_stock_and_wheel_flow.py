"""
End-to-end flows through the API against a real SQLite database.

Covers stock intake and consumption, the wheel rotation lifecycle, company
isolation and the activity log written behind them.
"""

from collections.abc import AsyncGenerator
from datetime import timedelta
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

import mro.application.activity_dispatcher as dispatcher_module
import mro.infrastructure.storage.sqlite as sqlite_module
import mro.infrastructure.storage.sqlite.connection as conn_module
from mro.api.main import app
from mro.application.activity_dispatcher import ActivityDispatcher
from mro.config import get_settings
from mro.core.services.rotation_schedule import utc_today
from mro.infrastructure.auth import issue_token
from mro.infrastructure.storage.sqlite.migrations.migrator import initialize_database


def headers_for(company_id: str, privilege: str = "user", user_id: str = "user-1") -> dict:
    token = issue_token(
        get_settings().auth,
        user_id=user_id,
        company_id=company_id,
        privilege=privilege,
        name="Dana Mechanic",
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def dispatcher(tmp_path: Path, monkeypatch) -> AsyncGenerator[ActivityDispatcher, None]:
    """Fresh database, store singletons and an unstarted activity dispatcher."""
    db_path = tmp_path / "flow.db"
    results = await initialize_database(db_path)
    assert all(r.success for r in results)

    settings = MagicMock()
    settings.storage.db_path = db_path
    settings.storage.pool_size = 3
    settings.storage.busy_timeout = 5000

    for name in ("_store_metrics", "_stock_store", "_wheel_rotation_store", "_activity_store"):
        monkeypatch.setattr(sqlite_module, name, None)

    activity_dispatcher = ActivityDispatcher(retry_delay=0)
    monkeypatch.setattr(dispatcher_module, "_dispatcher", activity_dispatcher)

    conn_module._pool = None
    with patch.object(conn_module, "get_settings", return_value=settings):
        try:
            yield activity_dispatcher
        finally:
            await conn_module.close_pool()


@pytest.fixture
async def client(dispatcher) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestStockFlow:
    async def test_consume_until_insufficient(self, client: AsyncClient, dispatcher):
        company_a = headers_for("company-a")

        created = await client.post(
            "/api/stock-inventory",
            json={"partNo": "PN-100", "serialNo": "SN-1", "quantity": 10},
            headers=company_a,
        )
        assert created.status_code == 201
        item_id = created.json()["data"]["id"]

        used = await client.post(
            f"/api/stock-inventory/{item_id}/use-quantity",
            json={"usedQuantity": 4, "purpose": "A-check"},
            headers=company_a,
        )
        assert used.status_code == 200
        assert used.json()["data"]["remainingQuantity"] == 6

        overdraw = await client.post(
            f"/api/stock-inventory/{item_id}/use-quantity",
            json={"usedQuantity": 10},
            headers=company_a,
        )
        assert overdraw.status_code == 400
        assert overdraw.json()["errorCode"] == "INSUFFICIENT_QUANTITY"

        item = await client.get(f"/api/stock-inventory/{item_id}", headers=company_a)
        assert item.json()["data"]["quantity"] == 6

        history = await client.get(
            f"/api/stock-inventory/{item_id}/usage-history", headers=company_a
        )
        data = history.json()["data"]
        assert [r["usedQuantity"] for r in data["usageHistory"]] == [4]
        assert data["usageHistory"][0]["remainingQuantity"] == 6
        assert data["statistics"]["totalQuantityUsed"] == 4

        repeat = await client.get(
            f"/api/stock-inventory/{item_id}/usage-history", headers=company_a
        )
        assert repeat.json()["data"]["usageHistory"] == data["usageHistory"]

        check = await client.get(f"/api/stock-inventory/{item_id}/ledger-check", headers=company_a)
        assert check.json()["data"]["consistent"] is True
        assert check.json()["data"]["initialQuantity"] == 10

        await dispatcher.drain()
        log = await client.get(
            "/api/user-activity", headers=headers_for("company-a", privilege="admin")
        )
        actions = [entry["action"] for entry in log.json()["data"]]
        assert sorted(actions) == ["ADDED_STOCK_INVENTORY", "UPDATED_STOCK_INVENTORY"]

    async def test_other_company_cannot_see_or_consume(self, client: AsyncClient):
        created = await client.post(
            "/api/stock-inventory",
            json={"partNo": "PN-100", "quantity": 3},
            headers=headers_for("company-a"),
        )
        item_id = created.json()["data"]["id"]
        company_b = headers_for("company-b", user_id="user-9")

        assert (await client.get(f"/api/stock-inventory/{item_id}", headers=company_b)).status_code == 404
        consumed = await client.post(
            f"/api/stock-inventory/{item_id}/use-quantity",
            json={"usedQuantity": 1},
            headers=company_b,
        )
        assert consumed.status_code == 404

        listed = await client.get("/api/stock-inventory", headers=company_b)
        assert listed.json()["total"] == 0

        item = await client.get(f"/api/stock-inventory/{item_id}", headers=headers_for("company-a"))
        assert item.json()["data"]["quantity"] == 3

    async def test_expiry_status_is_company_scoped(self, client: AsyncClient):
        today = utc_today()
        company_a = headers_for("company-a")
        for offset in (0, 30, 31):
            await client.post(
                "/api/stock-inventory",
                json={
                    "partNo": f"PN-{offset}",
                    "quantity": 1,
                    "expireDate": str(today + timedelta(days=offset)),
                },
                headers=company_a,
            )
        await client.post(
            "/api/stock-inventory",
            json={"partNo": "PN-B", "quantity": 1, "expireDate": str(today)},
            headers=headers_for("company-b"),
        )

        response = await client.get("/api/stock-inventory/expiry-status", headers=company_a)

        assert response.status_code == 200
        assert response.json()["data"] == {
            "expiredCount": 1,
            "expiringSoonCount": 1,
            "totalWithExpiry": 3,
        }


class TestWheelFlow:
    async def test_register_rotate_and_read_back(self, client: AsyncClient, dispatcher):
        company_a = headers_for("company-a")

        registered = await client.post(
            "/api/wheel-rotation",
            json={
                "arrivalDate": "2024-01-01",
                "station": "DXB",
                "airline": "Example Air",
                "wheelPartNumber": "WPN-7",
                "wheelSerialNumber": "WSN-42",
            },
            headers=company_a,
        )
        assert registered.status_code == 201
        wheel_id = registered.json()["id"]
        assert registered.json()["nextRotationDue"] == "2024-02-01"

        rotated = await client.post(
            f"/api/wheel-rotation/{wheel_id}/rotate",
            json={"newPosition": 90, "rotationDate": "2024-02-01"},
            headers=company_a,
        )
        assert rotated.status_code == 201
        assert rotated.json()["previousPosition"] == 0

        wheel = (await client.get(f"/api/wheel-rotation/{wheel_id}", headers=company_a)).json()
        assert wheel["currentPosition"] == 90
        assert wheel["lastRotationDate"] == "2024-02-01"
        assert wheel["nextRotationDue"] == "2024-03-01"
        assert [h["newPosition"] for h in wheel["rotationHistory"]] == [90]

        updated = await client.put(
            f"/api/wheel-rotation/{wheel_id}",
            json={"rotationFrequency": "weekly"},
            headers=company_a,
        )
        assert updated.json()["nextRotationDue"] == "2024-02-08"
        assert updated.json()["currentPosition"] == 90

        other = await client.get(
            f"/api/wheel-rotation/{wheel_id}", headers=headers_for("company-b", user_id="user-9")
        )
        assert other.status_code == 404

        await dispatcher.drain()
        log = await client.get(
            "/api/user-activity",
            params={"resourceType": "WHEEL_ROTATION"},
            headers=headers_for("company-a", privilege="admin"),
        )
        assert log.json()["pagination"]["total"] == 3
