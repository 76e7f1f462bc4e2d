"""Verify Ledger Use Case: replay a stock item's usage history."""

from mro.application.dto.responses import LedgerCheckData, LedgerCheckResponse
from mro.config import get_logger
from mro.core.entities.tenant import TenantContext
from mro.core.exceptions import LedgerInconsistencyError, StockItemNotFoundError
from mro.core.interfaces.stock_store import IStockStore
from mro.core.services.stock_ledger import verify_ledger

logger = get_logger(__name__)


class VerifyLedgerUseCase:
    """Check that an item's usage records replay to its current quantity."""

    def __init__(self, stock_store: IStockStore | None = None):
        self._stock_store = stock_store

    async def _get_stock_store(self) -> IStockStore:
        if self._stock_store is None:
            from mro.infrastructure.storage.sqlite import get_stock_store

            self._stock_store = await get_stock_store()
        return self._stock_store

    async def execute(self, tenant: TenantContext, stock_item_id: str) -> LedgerCheckData:
        store = await self._get_stock_store()
        item = await store.get_item(tenant.company_id, stock_item_id)
        if item is None:
            raise StockItemNotFoundError(stock_item_id)

        history = await store.get_usage_history(tenant.company_id, stock_item_id)
        try:
            replay = verify_ledger(item, history)
        except LedgerInconsistencyError as e:
            logger.warning("ledger_inconsistent", stock_item_id=stock_item_id, reason=e.details["reason"])
            return LedgerCheckData(
                stock_item_id=stock_item_id,
                consistent=False,
                reason=e.details["reason"],
            )

        return LedgerCheckData(
            stock_item_id=stock_item_id,
            consistent=True,
            initial_quantity=replay.initial_quantity,
            final_quantity=replay.final_quantity,
            total_used=replay.total_used,
        )

    def to_response(self, result: LedgerCheckData) -> LedgerCheckResponse:
        return LedgerCheckResponse(data=result)
