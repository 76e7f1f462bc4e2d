"""User activity (audit trail) entities."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from mro.core.entities.stock import utcnow


class ActivityAction(str, Enum):
    """Recorded user actions."""

    ADDED_STOCK_INVENTORY = "ADDED_STOCK_INVENTORY"
    UPDATED_STOCK_INVENTORY = "UPDATED_STOCK_INVENTORY"
    ADDED_WHEEL_ROTATION = "ADDED_WHEEL_ROTATION"
    UPDATED_WHEEL_ROTATION = "UPDATED_WHEEL_ROTATION"
    ROTATED_WHEEL = "ROTATED_WHEEL"


class ResourceType(str, Enum):
    """Kinds of resources an activity refers to."""

    STOCK_INVENTORY = "STOCK_INVENTORY"
    WHEEL_ROTATION = "WHEEL_ROTATION"


class UserActivity(BaseModel):
    """A single audit-log entry, scoped to the acting user's company."""

    id: str | None = None
    company_id: str
    user_id: str
    action: ActivityAction
    resource_type: ResourceType | None = None
    resource_id: str | None = None
    resource_title: str | None = None
    metadata: dict[str, Any] | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
