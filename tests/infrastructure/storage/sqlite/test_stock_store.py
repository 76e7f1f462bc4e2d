"""Tests for the SQLite stock store and its usage ledger."""

import asyncio
from datetime import UTC, date, datetime, timedelta
from unittest.mock import patch

import aiosqlite
import pytest

from mro.core.entities import StockItem
from mro.core.exceptions import (
    DatabaseError,
    InsufficientQuantityError,
    InvalidQuantityError,
    StockItemNotFoundError,
)
from mro.core.services.stock_ledger import verify_ledger
from mro.infrastructure.storage.sqlite.metrics import StoreMetrics
from mro.infrastructure.storage.sqlite.stock_store import SQLiteStockStore


@pytest.fixture
def store(sqlite_pool) -> SQLiteStockStore:
    return SQLiteStockStore(metrics=StoreMetrics())


async def create(store: SQLiteStockStore, company_id: str = "company-a", **kwargs) -> StockItem:
    fields = {"part_no": "PN-100", "quantity": 10, **kwargs}
    return await store.create_item(StockItem(company_id=company_id, **fields))


async def consume(store: SQLiteStockStore, item: StockItem, qty: int, company_id: str = "company-a"):
    return await store.consume(
        company_id=company_id,
        item_id=item.id,
        used_quantity=qty,
        used_by="user-1",
        used_by_name="Dana Mechanic",
        purpose="A-check",
    )


class TestStockItems:
    async def test_create_and_get(self, store):
        created = await create(store, serial_no="SN-1", unit="EA")
        assert created.id is not None

        fetched = await store.get_item("company-a", created.id)
        assert fetched is not None
        assert fetched.part_no == "PN-100"
        assert fetched.quantity == 10
        assert fetched.serial_no == "SN-1"

    async def test_get_from_other_company_is_none(self, store):
        created = await create(store)
        assert await store.get_item("company-b", created.id) is None

    async def test_list_and_count_with_search(self, store):
        await create(store, part_no="BRAKE-1")
        await create(store, part_no="TIRE-1", description="Main gear tire")
        await create(store, part_no="TIRE-2", company_id="company-b")

        assert await store.count_items("company-a") == 2
        tires = await store.list_items("company-a", search="tire")
        assert [i.part_no for i in tires] == ["TIRE-1"]
        assert await store.count_items("company-a", search="tire") == 1

    async def test_search_treats_wildcards_literally(self, store):
        await create(store, part_no="PN_1")
        await create(store, part_no="PNX1")

        matches = await store.list_items("company-a", search="PN_")
        assert [i.part_no for i in matches] == ["PN_1"]

    async def test_list_items_with_expiry(self, store):
        await create(store, part_no="LATE", expire_date=date(2025, 6, 1))
        await create(store, part_no="EARLY", expire_date=date(2024, 1, 15))
        await create(store, part_no="NO-EXPIRY")
        await create(store, part_no="OTHER", company_id="company-b", expire_date=date(2024, 1, 1))

        items = await store.list_items_with_expiry("company-a")

        assert [i.part_no for i in items] == ["EARLY", "LATE"]
        assert items[0].expire_date == date(2024, 1, 15)


class TestConsume:
    async def test_consume_decrements_and_records(self, store):
        item = await create(store)

        result = await consume(store, item, 4)

        assert result.stock_item.quantity == 6
        assert result.usage_record.used_quantity == 4
        assert result.usage_record.remaining_quantity == 6
        assert result.usage_record.used_by_name == "Dana Mechanic"

        stored = await store.get_item("company-a", item.id)
        assert stored.quantity == 6
        history = await store.get_usage_history("company-a", item.id)
        assert len(history) == 1
        assert history[0].id == result.usage_record.id

    async def test_overdraw_rejected_and_ledger_unchanged(self, store):
        item = await create(store)
        await consume(store, item, 4)

        with pytest.raises(InsufficientQuantityError) as exc_info:
            await consume(store, item, 10)

        assert exc_info.value.available == 6
        assert exc_info.value.requested == 10
        assert (await store.get_item("company-a", item.id)).quantity == 6
        assert len(await store.get_usage_history("company-a", item.id)) == 1

    async def test_consume_everything(self, store):
        item = await create(store, quantity=3)
        result = await consume(store, item, 3)
        assert result.stock_item.quantity == 0

    async def test_non_positive_rejected(self, store):
        item = await create(store)
        with pytest.raises(InvalidQuantityError):
            await consume(store, item, 0)

    async def test_missing_item(self, store):
        with pytest.raises(StockItemNotFoundError):
            await store.consume(
                company_id="company-a",
                item_id="does-not-exist",
                used_quantity=1,
                used_by="user-1",
                used_by_name="Dana",
            )

    async def test_other_company_cannot_consume(self, store):
        item = await create(store)

        with pytest.raises(StockItemNotFoundError):
            await consume(store, item, 1, company_id="company-b")

        assert (await store.get_item("company-a", item.id)).quantity == 10
        assert await store.get_usage_history("company-b", item.id) == []

    async def test_failed_ledger_insert_rolls_back_decrement(self, store):
        item = await create(store)

        with patch.object(
            SQLiteStockStore,
            "_insert_usage_record",
            side_effect=aiosqlite.OperationalError("disk I/O error"),
        ):
            with pytest.raises(DatabaseError):
                await consume(store, item, 4)

        assert (await store.get_item("company-a", item.id)).quantity == 10
        assert await store.get_usage_history("company-a", item.id) == []

    async def test_ledger_conserves_quantity(self, store):
        item = await create(store, quantity=20)
        for qty in (3, 5, 1, 7):
            await consume(store, item, qty)

        stored = await store.get_item("company-a", item.id)
        history = await store.get_usage_history("company-a", item.id)

        assert stored.quantity + sum(r.used_quantity for r in history) == 20
        replay = verify_ledger(stored, history)
        assert replay.initial_quantity == 20
        assert replay.final_quantity == 4

    async def test_history_newest_first(self, store):
        item = await create(store)
        await consume(store, item, 1)
        await consume(store, item, 2)

        history = await store.get_usage_history("company-a", item.id)
        assert [r.remaining_quantity for r in history] == [7, 9]

    async def test_history_ties_on_used_at_are_stable(self, store):
        item = await create(store)
        same_instant = datetime(2024, 3, 1, 8, 0, tzinfo=UTC)
        for qty in (1, 2, 3):
            await store.consume(
                company_id="company-a",
                item_id=item.id,
                used_quantity=qty,
                used_by="user-1",
                used_by_name="Dana Mechanic",
                used_at=same_instant,
            )
        await store.consume(
            company_id="company-a",
            item_id=item.id,
            used_quantity=1,
            used_by="user-1",
            used_by_name="Dana Mechanic",
            used_at=same_instant - timedelta(hours=1),
        )

        first = await store.get_usage_history("company-a", item.id)
        second = await store.get_usage_history("company-a", item.id)

        assert [r.remaining_quantity for r in first] == [4, 7, 9, 3]
        assert [r.id for r in first] == [r.id for r in second]

    async def test_concurrent_consumers_never_overdraw(self, store):
        item = await create(store, quantity=10)

        results = await asyncio.gather(
            *(consume(store, item, 3) for _ in range(5)),
            return_exceptions=True,
        )

        succeeded = [r for r in results if not isinstance(r, Exception)]
        rejected = [r for r in results if isinstance(r, InsufficientQuantityError)]
        assert len(succeeded) == 3
        assert len(rejected) == 2

        stored = await store.get_item("company-a", item.id)
        history = await store.get_usage_history("company-a", item.id)
        assert stored.quantity == 1
        assert sorted(r.remaining_quantity for r in history) == [1, 4, 7]
        verify_ledger(stored, history)


class TestMetrics:
    async def test_reads_and_writes_tracked_per_company(self, store):
        item = await create(store)
        await store.get_item("company-a", item.id)
        await consume(store, item, 1)
        with pytest.raises(InsufficientQuantityError):
            await consume(store, item, 100)

        metrics = store.metrics.get("company-a")
        assert metrics.writes == 3
        assert metrics.reads == 1
        assert metrics.failures == 1
        assert store.metrics.get("company-b").reads == 0
