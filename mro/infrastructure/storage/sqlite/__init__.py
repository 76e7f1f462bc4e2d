"""SQLite storage implementations."""

from mro.infrastructure.storage.sqlite.activity_store import SQLiteActivityStore
from mro.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from mro.infrastructure.storage.sqlite.metrics import StoreMetrics
from mro.infrastructure.storage.sqlite.stock_store import SQLiteStockStore
from mro.infrastructure.storage.sqlite.wheel_rotation_store import SQLiteWheelRotationStore

# Type aliases for convenience
StockStore = SQLiteStockStore
WheelRotationStore = SQLiteWheelRotationStore
ActivityStore = SQLiteActivityStore

get_connection_pool = get_pool
close_connection_pool = close_pool

# Singleton instances, all sharing one metrics collector
_store_metrics: StoreMetrics | None = None
_stock_store: SQLiteStockStore | None = None
_wheel_rotation_store: SQLiteWheelRotationStore | None = None
_activity_store: SQLiteActivityStore | None = None


def get_store_metrics() -> StoreMetrics:
    """Get the process-wide store metrics collector."""
    global _store_metrics
    if _store_metrics is None:
        _store_metrics = StoreMetrics()
    return _store_metrics


async def get_stock_store() -> SQLiteStockStore:
    """Get singleton stock store instance."""
    global _stock_store
    if _stock_store is None:
        _stock_store = SQLiteStockStore(metrics=get_store_metrics())
    return _stock_store


async def get_wheel_rotation_store() -> SQLiteWheelRotationStore:
    """Get singleton wheel rotation store instance."""
    global _wheel_rotation_store
    if _wheel_rotation_store is None:
        _wheel_rotation_store = SQLiteWheelRotationStore(metrics=get_store_metrics())
    return _wheel_rotation_store


async def get_activity_store() -> SQLiteActivityStore:
    """Get singleton activity store instance."""
    global _activity_store
    if _activity_store is None:
        _activity_store = SQLiteActivityStore(metrics=get_store_metrics())
    return _activity_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "get_connection_pool",
    "close_connection_pool",
    # Metrics
    "StoreMetrics",
    "get_store_metrics",
    # Store classes
    "SQLiteStockStore",
    "SQLiteWheelRotationStore",
    "SQLiteActivityStore",
    "StockStore",
    "WheelRotationStore",
    "ActivityStore",
    # Factory functions
    "get_stock_store",
    "get_wheel_rotation_store",
    "get_activity_store",
]
