"""Abstract interface for stock inventory storage."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from mro.core.entities.stock import StockItem, UsageRecord


@dataclass
class ConsumptionResult:
    """Item state and ledger entry produced by one committed consumption."""

    stock_item: StockItem
    usage_record: UsageRecord


class IStockStore(ABC):
    """Interface for stock item and usage ledger persistence.

    Every method is scoped by company_id; an id owned by another company
    behaves exactly like a missing id.
    """

    @abstractmethod
    async def create_item(self, item: StockItem) -> StockItem:
        """Create a new stock item."""
        pass

    @abstractmethod
    async def get_item(self, company_id: str, item_id: str) -> StockItem | None:
        """Get stock item by ID."""
        pass

    @abstractmethod
    async def list_items(
        self,
        company_id: str,
        limit: int = 100,
        offset: int = 0,
        search: str | None = None,
    ) -> list[StockItem]:
        """List stock items, optionally filtered by part/serial/description."""
        pass

    @abstractmethod
    async def count_items(self, company_id: str, search: str | None = None) -> int:
        """Count stock items matching the same filter as list_items."""
        pass

    @abstractmethod
    async def list_items_with_expiry(self, company_id: str) -> list[StockItem]:
        """List stock items that carry an expiry date."""
        pass

    @abstractmethod
    async def consume(
        self,
        company_id: str,
        item_id: str,
        used_quantity: int,
        used_by: str,
        used_by_name: str,
        purpose: str | None = None,
        notes: str | None = None,
        used_at: datetime | None = None,
    ) -> ConsumptionResult:
        """
        Decrement quantity and append a usage record in one transaction.

        Raises:
            StockItemNotFoundError: item absent for this company
            InsufficientQuantityError: quantity on hand below used_quantity
            DatabaseError: the transaction failed and was rolled back
        """
        pass

    @abstractmethod
    async def get_usage_history(
        self, company_id: str, item_id: str
    ) -> list[UsageRecord]:
        """Get usage records for an item, most recent first."""
        pass
