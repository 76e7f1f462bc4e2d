"""Application use cases."""

from mro.application.use_cases.consume_stock import ConsumeStockResult, ConsumeStockUseCase
from mro.application.use_cases.get_usage_history import (
    GetUsageHistoryUseCase,
    UsageHistoryResult,
)
from mro.application.use_cases.list_activities import ActivityPage, ListActivitiesUseCase
from mro.application.use_cases.list_upcoming_rotations import ListUpcomingRotationsUseCase
from mro.application.use_cases.manage_stock_items import (
    CreateStockItemUseCase,
    GetStockItemUseCase,
    ListStockItemsUseCase,
    StockItemPage,
)
from mro.application.use_cases.query_wheel_rotations import (
    GetWheelRotationUseCase,
    ListWheelRotationsUseCase,
)
from mro.application.use_cases.record_rotation import RecordRotationUseCase
from mro.application.use_cases.register_wheel import RegisterWheelUseCase
from mro.application.use_cases.rotation_counts import RotationCountsUseCase
from mro.application.use_cases.stock_expiry_status import StockExpiryStatusUseCase
from mro.application.use_cases.update_wheel_rotation import UpdateWheelRotationUseCase
from mro.application.use_cases.verify_ledger import VerifyLedgerUseCase

__all__ = [
    # Stock inventory
    "ConsumeStockUseCase",
    "ConsumeStockResult",
    "GetUsageHistoryUseCase",
    "UsageHistoryResult",
    "VerifyLedgerUseCase",
    "StockExpiryStatusUseCase",
    "CreateStockItemUseCase",
    "GetStockItemUseCase",
    "ListStockItemsUseCase",
    "StockItemPage",
    # Wheel rotation
    "RegisterWheelUseCase",
    "RecordRotationUseCase",
    "UpdateWheelRotationUseCase",
    "GetWheelRotationUseCase",
    "ListWheelRotationsUseCase",
    "ListUpcomingRotationsUseCase",
    "RotationCountsUseCase",
    # Activity
    "ListActivitiesUseCase",
    "ActivityPage",
]
