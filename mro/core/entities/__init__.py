"""Core domain entities."""

from mro.core.entities.activity import ActivityAction, ResourceType, UserActivity
from mro.core.entities.stock import StockItem, UsageRecord
from mro.core.entities.tenant import TenantContext
from mro.core.entities.wheel_rotation import (
    RotationFrequency,
    RotationHistory,
    WheelRotationAsset,
)

__all__ = [
    "ActivityAction",
    "ResourceType",
    "UserActivity",
    "StockItem",
    "UsageRecord",
    "TenantContext",
    "RotationFrequency",
    "RotationHistory",
    "WheelRotationAsset",
]
