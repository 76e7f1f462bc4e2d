"""SQLite implementation of stock item and usage ledger storage."""

from datetime import date, datetime
from uuid import uuid4

import aiosqlite

from mro.config import get_logger
from mro.core.entities.stock import StockItem, UsageRecord, utcnow
from mro.core.exceptions import (
    DatabaseError,
    InsufficientQuantityError,
    InvalidQuantityError,
    StockItemNotFoundError,
)
from mro.core.interfaces.stock_store import ConsumptionResult, IStockStore
from mro.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from mro.infrastructure.storage.sqlite.metrics import StoreMetrics

logger = get_logger(__name__)


def _search_clause(search: str | None) -> tuple[str, tuple]:
    if not search:
        return "", ()
    escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{escaped}%"
    clause = (
        " AND (part_no LIKE ? ESCAPE '\\' OR serial_no LIKE ? ESCAPE '\\'"
        " OR description LIKE ? ESCAPE '\\')"
    )
    return clause, (pattern, pattern, pattern)


class SQLiteStockStore(IStockStore):
    """SQLite implementation of stock items and their usage ledger."""

    def __init__(self, metrics: StoreMetrics | None = None):
        self.metrics = metrics or StoreMetrics()

    async def create_item(self, item: StockItem) -> StockItem:
        """Create a new stock item."""
        now = utcnow()
        item.id = item.id or uuid4().hex
        item.created_at = now
        item.updated_at = now
        with self.metrics.track(item.company_id, "create_stock_item", "write"):
            try:
                async with get_transaction() as conn:
                    await conn.execute(
                        """
                        INSERT INTO stock_items (
                            id, company_id, part_no, serial_no, description,
                            quantity, unit, location, expire_date,
                            created_at, updated_at
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            item.id,
                            item.company_id,
                            item.part_no,
                            item.serial_no,
                            item.description,
                            item.quantity,
                            item.unit,
                            item.location,
                            item.expire_date.isoformat() if item.expire_date else None,
                            item.created_at.isoformat(),
                            item.updated_at.isoformat(),
                        ),
                    )
            except aiosqlite.Error as e:
                logger.error("stock_item_create_failed", error=str(e))
                raise DatabaseError("create_stock_item", str(e)) from e

        logger.info(
            "stock_item_created",
            item_id=item.id,
            part_no=item.part_no,
            quantity=item.quantity,
        )
        return item

    async def get_item(self, company_id: str, item_id: str) -> StockItem | None:
        """Get stock item by ID."""
        with self.metrics.track(company_id, "get_stock_item", "read"):
            async with get_connection() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM stock_items WHERE id = ? AND company_id = ?",
                    (item_id, company_id),
                )
                row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_stock_item(row)

    async def list_items(
        self,
        company_id: str,
        limit: int = 100,
        offset: int = 0,
        search: str | None = None,
    ) -> list[StockItem]:
        """List stock items newest first, optionally filtered."""
        clause, params = _search_clause(search)
        with self.metrics.track(company_id, "list_stock_items", "read"):
            async with get_connection() as conn:
                cursor = await conn.execute(
                    f"""
                    SELECT * FROM stock_items
                    WHERE company_id = ?{clause}
                    ORDER BY created_at DESC, id
                    LIMIT ? OFFSET ?
                    """,
                    (company_id, *params, limit, offset),
                )
                rows = await cursor.fetchall()
        return [self._row_to_stock_item(row) for row in rows]

    async def list_items_with_expiry(self, company_id: str) -> list[StockItem]:
        with self.metrics.track(company_id, "list_expiring_items", "read"):
            async with get_connection() as conn:
                cursor = await conn.execute(
                    """
                    SELECT * FROM stock_items
                    WHERE company_id = ? AND expire_date IS NOT NULL
                    ORDER BY expire_date, id
                    """,
                    (company_id,),
                )
                rows = await cursor.fetchall()
        return [self._row_to_stock_item(row) for row in rows]

    async def count_items(self, company_id: str, search: str | None = None) -> int:
        clause, params = _search_clause(search)
        with self.metrics.track(company_id, "count_stock_items", "read"):
            async with get_connection() as conn:
                cursor = await conn.execute(
                    f"SELECT COUNT(*) FROM stock_items WHERE company_id = ?{clause}",
                    (company_id, *params),
                )
                row = await cursor.fetchone()
        return row[0] if row else 0

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

        The item row is read under BEGIN IMMEDIATE, so the availability
        check and the decrement see the same quantity even with concurrent
        consumers on other connections.
        """
        if used_quantity <= 0:
            raise InvalidQuantityError(used_quantity)

        used_at = used_at or utcnow()

        with self.metrics.track(company_id, "consume_stock", "write"):
            try:
                async with get_transaction(immediate=True) as conn:
                    cursor = await conn.execute(
                        "SELECT * FROM stock_items WHERE id = ? AND company_id = ?",
                        (item_id, company_id),
                    )
                    row = await cursor.fetchone()
                    if row is None:
                        raise StockItemNotFoundError(item_id)

                    item = self._row_to_stock_item(row)
                    if item.quantity < used_quantity:
                        raise InsufficientQuantityError(item_id, item.quantity, used_quantity)

                    remaining = item.quantity - used_quantity
                    cursor = await conn.execute(
                        """
                        UPDATE stock_items SET quantity = ?, updated_at = ?
                        WHERE id = ? AND company_id = ? AND quantity = ?
                        """,
                        (remaining, used_at.isoformat(), item_id, company_id, item.quantity),
                    )
                    if cursor.rowcount != 1:
                        raise DatabaseError("consume_stock", "stock item changed during update")

                    record = UsageRecord(
                        id=uuid4().hex,
                        company_id=company_id,
                        stock_item_id=item_id,
                        used_quantity=used_quantity,
                        remaining_quantity=remaining,
                        used_by=used_by,
                        used_by_name=used_by_name,
                        purpose=purpose,
                        notes=notes,
                        used_at=used_at,
                    )
                    await self._insert_usage_record(conn, record)
            except aiosqlite.Error as e:
                logger.error("stock_consume_failed", item_id=item_id, error=str(e))
                raise DatabaseError("consume_stock", str(e)) from e

        item.quantity = remaining
        item.updated_at = used_at
        logger.info(
            "stock_consumed",
            item_id=item_id,
            used_quantity=used_quantity,
            remaining_quantity=remaining,
        )
        return ConsumptionResult(stock_item=item, usage_record=record)

    async def _insert_usage_record(
        self, conn: aiosqlite.Connection, record: UsageRecord
    ) -> None:
        await conn.execute(
            """
            INSERT INTO stock_usage_history (
                id, company_id, stock_item_id, used_quantity, remaining_quantity,
                used_by, used_by_name, purpose, notes, used_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.id,
                record.company_id,
                record.stock_item_id,
                record.used_quantity,
                record.remaining_quantity,
                record.used_by,
                record.used_by_name,
                record.purpose,
                record.notes,
                record.used_at.isoformat(),
            ),
        )

    async def get_usage_history(
        self, company_id: str, item_id: str
    ) -> list[UsageRecord]:
        """Get usage records for an item, most recent first."""
        with self.metrics.track(company_id, "get_usage_history", "read"):
            async with get_connection() as conn:
                cursor = await conn.execute(
                    """
                    SELECT * FROM stock_usage_history
                    WHERE company_id = ? AND stock_item_id = ?
                    ORDER BY used_at DESC, remaining_quantity ASC
                    """,
                    (company_id, item_id),
                )
                rows = await cursor.fetchall()
        return [self._row_to_usage_record(row) for row in rows]

    @staticmethod
    def _row_to_stock_item(row: aiosqlite.Row) -> StockItem:
        """Convert a database row to a StockItem entity."""
        return StockItem(
            id=row["id"],
            company_id=row["company_id"],
            part_no=row["part_no"],
            serial_no=row["serial_no"],
            description=row["description"],
            quantity=row["quantity"],
            unit=row["unit"],
            location=row["location"],
            expire_date=date.fromisoformat(row["expire_date"]) if row["expire_date"] else None,
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    @staticmethod
    def _row_to_usage_record(row: aiosqlite.Row) -> UsageRecord:
        """Convert a database row to a UsageRecord entity."""
        return UsageRecord(
            id=row["id"],
            company_id=row["company_id"],
            stock_item_id=row["stock_item_id"],
            used_quantity=row["used_quantity"],
            remaining_quantity=row["remaining_quantity"],
            used_by=row["used_by"],
            used_by_name=row["used_by_name"],
            purpose=row["purpose"],
            notes=row["notes"],
            used_at=datetime.fromisoformat(row["used_at"]),
        )
