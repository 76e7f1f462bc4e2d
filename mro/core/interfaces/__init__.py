"""Core interfaces (ports) for dependency injection."""

from mro.core.interfaces.activity_store import IActivityStore
from mro.core.interfaces.stock_store import ConsumptionResult, IStockStore
from mro.core.interfaces.wheel_rotation_store import (
    IWheelRotationStore,
    RotationResult,
)

__all__ = [
    "IActivityStore",
    "IStockStore",
    "ConsumptionResult",
    "IWheelRotationStore",
    "RotationResult",
]
