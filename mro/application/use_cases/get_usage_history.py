"""Get Usage History Use Case: ledger entries plus derived statistics."""

from dataclasses import dataclass

from mro.application.dto.responses import (
    DailyUsageResponse,
    UsageHistoryData,
    UsageHistoryResponse,
    UsageItemSummaryResponse,
    UsageRecordResponse,
    UsageStatisticsResponse,
)
from mro.config import get_logger
from mro.core.entities.stock import StockItem, UsageRecord
from mro.core.entities.tenant import TenantContext
from mro.core.exceptions import StockItemNotFoundError
from mro.core.interfaces.stock_store import IStockStore
from mro.core.services.stock_ledger import UsageSummary, summarize_usage

logger = get_logger(__name__)


@dataclass
class UsageHistoryResult:
    stock_item: StockItem
    history: list[UsageRecord]
    summary: UsageSummary


class GetUsageHistoryUseCase:
    """Read a stock item's usage ledger. Read-only and repeatable."""

    def __init__(self, stock_store: IStockStore | None = None):
        self._stock_store = stock_store

    async def _get_stock_store(self) -> IStockStore:
        if self._stock_store is None:
            from mro.infrastructure.storage.sqlite import get_stock_store

            self._stock_store = await get_stock_store()
        return self._stock_store

    async def execute(self, tenant: TenantContext, stock_item_id: str) -> UsageHistoryResult:
        store = await self._get_stock_store()

        item = await store.get_item(tenant.company_id, stock_item_id)
        if item is None:
            raise StockItemNotFoundError(stock_item_id)

        history = await store.get_usage_history(tenant.company_id, stock_item_id)
        summary = summarize_usage(item, history)

        logger.debug(
            "usage_history_loaded",
            stock_item_id=stock_item_id,
            records=len(history),
        )
        return UsageHistoryResult(stock_item=item, history=history, summary=summary)

    def to_response(self, result: UsageHistoryResult) -> UsageHistoryResponse:
        item = result.stock_item
        stats = result.summary.statistics
        return UsageHistoryResponse(
            data=UsageHistoryData(
                stock_item=UsageItemSummaryResponse(
                    id=item.id,
                    part_no=item.part_no,
                    serial_no=item.serial_no,
                    description=item.description,
                    current_quantity=item.quantity,
                ),
                usage_history=[UsageRecordResponse.from_entity(r) for r in result.history],
                statistics=UsageStatisticsResponse(
                    total_usage_records=stats.total_usage_records,
                    total_quantity_used=stats.total_quantity_used,
                    current_quantity=stats.current_quantity,
                    last_used_at=stats.last_used_at,
                    last_used_by=stats.last_used_by,
                    unique_users=stats.unique_users,
                ),
                daily_summary=[
                    DailyUsageResponse(
                        date=day.date,
                        total_used=day.total_used,
                        record_count=day.record_count,
                        users=list(day.users),
                    )
                    for day in result.summary.daily_summary
                ],
            )
        )
