"""Tests for stock item intake, lookup, usage history, ledger check and expiry status."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from mro.application.dto.requests import CreateStockItemRequest
from mro.application.use_cases import (
    CreateStockItemUseCase,
    GetStockItemUseCase,
    GetUsageHistoryUseCase,
    ListStockItemsUseCase,
    StockExpiryStatusUseCase,
    VerifyLedgerUseCase,
)
from mro.core.entities.activity import ActivityAction
from mro.core.exceptions import StockItemNotFoundError


@pytest.fixture
def mock_stock_store():
    return AsyncMock()


class TestCreateStockItemUseCase:
    async def test_item_scoped_to_caller_company(
        self, mock_stock_store, mock_dispatcher, tenant, sample_stock_item
    ):
        mock_stock_store.create_item.return_value = sample_stock_item
        use_case = CreateStockItemUseCase(stock_store=mock_stock_store, dispatcher=mock_dispatcher)

        request = CreateStockItemRequest(partNo="PN-100", quantity=10, unit="EA")
        await use_case.execute(tenant, request)

        created = mock_stock_store.create_item.call_args[0][0]
        assert created.company_id == "company-a"
        assert created.part_no == "PN-100"
        assert created.quantity == 10

        activity = mock_dispatcher.publish.call_args[0][0]
        assert activity.action == ActivityAction.ADDED_STOCK_INVENTORY
        assert activity.resource_title == "Added stock item PN-100"

    async def test_to_response(self, mock_stock_store, mock_dispatcher, sample_stock_item):
        use_case = CreateStockItemUseCase(stock_store=mock_stock_store, dispatcher=mock_dispatcher)
        body = use_case.to_response(sample_stock_item).model_dump(by_alias=True)
        assert body["message"] == "Stock inventory record created"
        assert body["data"]["partNo"] == "PN-100"


class TestGetStockItemUseCase:
    async def test_found(self, mock_stock_store, tenant, sample_stock_item):
        mock_stock_store.get_item.return_value = sample_stock_item
        use_case = GetStockItemUseCase(stock_store=mock_stock_store)

        item = await use_case.execute(tenant, "item-1")

        mock_stock_store.get_item.assert_awaited_once_with("company-a", "item-1")
        assert item.id == "item-1"

    async def test_other_company_sees_not_found(self, mock_stock_store, other_tenant):
        mock_stock_store.get_item.return_value = None
        use_case = GetStockItemUseCase(stock_store=mock_stock_store)

        with pytest.raises(StockItemNotFoundError):
            await use_case.execute(other_tenant, "item-1")
        mock_stock_store.get_item.assert_awaited_once_with("company-b", "item-1")


class TestListStockItemsUseCase:
    async def test_page_and_has_more(self, mock_stock_store, tenant, sample_stock_item):
        mock_stock_store.list_items.return_value = [sample_stock_item]
        mock_stock_store.count_items.return_value = 3
        use_case = ListStockItemsUseCase(stock_store=mock_stock_store)

        page = await use_case.execute(tenant, limit=1, offset=0, search="  PN ")

        mock_stock_store.list_items.assert_awaited_once_with(
            "company-a", limit=1, offset=0, search="PN"
        )
        body = use_case.to_response(page).model_dump(by_alias=True)
        assert body["total"] == 3
        assert body["hasMore"] is True
        assert len(body["data"]) == 1


class TestGetUsageHistoryUseCase:
    async def test_history_with_statistics(
        self, mock_stock_store, tenant, sample_stock_item, sample_usage_record
    ):
        item = sample_stock_item.model_copy(update={"quantity": 6})
        mock_stock_store.get_item.return_value = item
        mock_stock_store.get_usage_history.return_value = [sample_usage_record]
        use_case = GetUsageHistoryUseCase(stock_store=mock_stock_store)

        result = await use_case.execute(tenant, "item-1")
        body = use_case.to_response(result).model_dump(by_alias=True)

        assert body["data"]["stockItem"]["currentQuantity"] == 6
        assert body["data"]["statistics"]["totalQuantityUsed"] == 4
        assert body["data"]["statistics"]["uniqueUsers"] == 1
        assert len(body["data"]["usageHistory"]) == 1
        assert body["data"]["dailySummary"][0]["totalUsed"] == 4

    async def test_missing_item(self, mock_stock_store, tenant):
        mock_stock_store.get_item.return_value = None
        use_case = GetUsageHistoryUseCase(stock_store=mock_stock_store)

        with pytest.raises(StockItemNotFoundError):
            await use_case.execute(tenant, "nope")
        mock_stock_store.get_usage_history.assert_not_awaited()


class TestVerifyLedgerUseCase:
    async def test_consistent(self, mock_stock_store, tenant, sample_stock_item, sample_usage_record):
        mock_stock_store.get_item.return_value = sample_stock_item.model_copy(update={"quantity": 6})
        mock_stock_store.get_usage_history.return_value = [sample_usage_record]
        use_case = VerifyLedgerUseCase(stock_store=mock_stock_store)

        result = await use_case.execute(tenant, "item-1")

        assert result.consistent is True
        assert result.initial_quantity == 10
        assert result.total_used == 4

    async def test_inconsistent_reported_not_raised(
        self, mock_stock_store, tenant, sample_stock_item, sample_usage_record
    ):
        # Item says 10 but the ledger ends at 6
        mock_stock_store.get_item.return_value = sample_stock_item
        mock_stock_store.get_usage_history.return_value = [sample_usage_record]
        use_case = VerifyLedgerUseCase(stock_store=mock_stock_store)

        result = await use_case.execute(tenant, "item-1")

        assert result.consistent is False
        assert "item holds 10" in result.reason


class TestStockExpiryStatusUseCase:
    async def test_counts_against_given_day(self, mock_stock_store, tenant, sample_stock_item):
        mock_stock_store.list_items_with_expiry.return_value = [
            sample_stock_item.model_copy(update={"expire_date": date(2024, 3, 1)}),
            sample_stock_item.model_copy(update={"expire_date": date(2024, 3, 31)}),
            sample_stock_item.model_copy(update={"expire_date": date(2024, 4, 1)}),
        ]
        use_case = StockExpiryStatusUseCase(stock_store=mock_stock_store)

        result = await use_case.execute(tenant, today=date(2024, 3, 1))

        mock_stock_store.list_items_with_expiry.assert_awaited_once_with("company-a")
        assert result.expired_count == 1
        assert result.expiring_soon_count == 1
        assert result.total_with_expiry == 3
        assert use_case.to_response(result).model_dump(by_alias=True)["data"] == {
            "expiredCount": 1,
            "expiringSoonCount": 1,
            "totalWithExpiry": 3,
        }
