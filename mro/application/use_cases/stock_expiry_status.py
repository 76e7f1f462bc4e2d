"""Stock Expiry Status Use Case: count expired and soon-to-expire items."""

from datetime import date

from mro.application.dto.responses import ExpiryStatusData, ExpiryStatusResponse
from mro.config import get_logger
from mro.core.entities.tenant import TenantContext
from mro.core.interfaces.stock_store import IStockStore
from mro.core.services.rotation_schedule import utc_today
from mro.core.services.stock_expiry import count_expiry_status

logger = get_logger(__name__)


class StockExpiryStatusUseCase:
    def __init__(self, stock_store: IStockStore | None = None):
        self._stock_store = stock_store

    async def _get_stock_store(self) -> IStockStore:
        if self._stock_store is None:
            from mro.infrastructure.storage.sqlite import get_stock_store

            self._stock_store = await get_stock_store()
        return self._stock_store

    async def execute(self, tenant: TenantContext, today: date | None = None) -> ExpiryStatusData:
        store = await self._get_stock_store()
        items = await store.list_items_with_expiry(tenant.company_id)
        result = count_expiry_status(items, today or utc_today())
        logger.debug(
            "stock_expiry_counted",
            expired=result.expired_count,
            expiring_soon=result.expiring_soon_count,
        )
        return ExpiryStatusData(
            expired_count=result.expired_count,
            expiring_soon_count=result.expiring_soon_count,
            total_with_expiry=result.total_with_expiry,
        )

    def to_response(self, result: ExpiryStatusData) -> ExpiryStatusResponse:
        return ExpiryStatusResponse(data=result)
