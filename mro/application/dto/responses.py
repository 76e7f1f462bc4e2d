"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization. Serialized with camelCase
aliases; stock and schedule endpoints wrap payloads in a
`{success, message?, data}` envelope.
"""

from datetime import date, datetime
from typing import Any

from pydantic import Field

from mro.application.dto.requests import CamelModel
from mro.core.entities.activity import UserActivity
from mro.core.entities.stock import StockItem, UsageRecord
from mro.core.entities.wheel_rotation import RotationHistory, WheelRotationAsset


# --- Stock Inventory ---


class StockItemResponse(CamelModel):
    """Stock item as returned by the API."""

    id: str
    company_id: str
    part_no: str
    serial_no: str | None = None
    description: str | None = None
    quantity: int
    unit: str | None = None
    location: str | None = None
    expire_date: date | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, item: StockItem) -> "StockItemResponse":
        return cls.model_validate(item.model_dump())


class UsageRecordResponse(CamelModel):
    """One usage ledger entry."""

    id: str
    stock_item_id: str
    used_quantity: int
    remaining_quantity: int
    used_by: str
    used_by_name: str
    purpose: str | None = None
    notes: str | None = None
    used_at: datetime

    @classmethod
    def from_entity(cls, record: UsageRecord) -> "UsageRecordResponse":
        return cls.model_validate(record.model_dump())


class StockItemEnvelope(CamelModel):
    success: bool = True
    message: str | None = None
    data: StockItemResponse


class StockItemListResponse(CamelModel):
    """Paginated stock item list."""

    success: bool = True
    data: list[StockItemResponse] = Field(default_factory=list)
    total: int
    limit: int
    offset: int
    has_more: bool


class UseQuantityData(CamelModel):
    used_quantity: int
    remaining_quantity: int
    usage_record: UsageRecordResponse
    stock_item: StockItemResponse


class UseQuantityResponse(CamelModel):
    """Result of a stock consumption."""

    success: bool = True
    message: str
    data: UseQuantityData


class UsageItemSummaryResponse(CamelModel):
    id: str
    part_no: str
    serial_no: str | None = None
    description: str | None = None
    current_quantity: int


class UsageStatisticsResponse(CamelModel):
    total_usage_records: int
    total_quantity_used: int
    current_quantity: int
    last_used_at: datetime | None = None
    last_used_by: str | None = None
    unique_users: int


class DailyUsageResponse(CamelModel):
    date: date
    total_used: int
    record_count: int
    users: list[str] = Field(default_factory=list)


class UsageHistoryData(CamelModel):
    stock_item: UsageItemSummaryResponse
    usage_history: list[UsageRecordResponse] = Field(default_factory=list)
    statistics: UsageStatisticsResponse
    daily_summary: list[DailyUsageResponse] = Field(default_factory=list)


class UsageHistoryResponse(CamelModel):
    """Usage ledger for one stock item with derived statistics."""

    success: bool = True
    data: UsageHistoryData


class LedgerCheckData(CamelModel):
    stock_item_id: str
    consistent: bool
    initial_quantity: int | None = None
    final_quantity: int | None = None
    total_used: int | None = None
    reason: str | None = None


class LedgerCheckResponse(CamelModel):
    """Outcome of replaying an item's usage ledger."""

    success: bool = True
    data: LedgerCheckData


class ExpiryStatusData(CamelModel):
    expired_count: int
    expiring_soon_count: int
    total_with_expiry: int


class ExpiryStatusResponse(CamelModel):
    """Expired and soon-to-expire stock counts for the company."""

    success: bool = True
    data: ExpiryStatusData


# --- Wheel Rotation ---


class RotationHistoryResponse(CamelModel):
    """One performed rotation."""

    id: str
    company_id: str
    wheel_rotation_id: str
    rotation_date: date
    previous_position: int
    new_position: int
    performed_by: str | None = None
    notes: str | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, history: RotationHistory) -> "RotationHistoryResponse":
        return cls.model_validate(history.model_dump())


class WheelRotationResponse(CamelModel):
    """Wheel rotation asset with (some of) its history."""

    id: str
    company_id: str
    arrival_date: date
    station: str
    airline: str
    wheel_part_number: str
    wheel_serial_number: str
    rotation_frequency: str
    current_position: int
    last_rotation_date: date
    next_rotation_due: date
    is_active: bool
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
    rotation_history: list[RotationHistoryResponse] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, asset: WheelRotationAsset) -> "WheelRotationResponse":
        return cls.model_validate(asset.model_dump())


class ScheduledRotationResponse(CamelModel):
    """A wheel placed in an urgency bucket."""

    id: str
    wheel_serial_number: str
    wheel_part_number: str
    airline: str
    station: str
    rotation_frequency: str
    next_rotation_due: date
    current_position: int
    notes: str | None = None
    urgency: str
    days_overdue: int | None = None


class CategorizedRotationsResponse(CamelModel):
    overdue: list[ScheduledRotationResponse] = Field(default_factory=list)
    today: list[ScheduledRotationResponse] = Field(default_factory=list)
    this_week: list[ScheduledRotationResponse] = Field(default_factory=list)
    later: list[ScheduledRotationResponse] = Field(default_factory=list)


class UpcomingSummaryResponse(CamelModel):
    total_upcoming: int
    total_overdue: int
    by_frequency: dict[str, int] = Field(default_factory=dict)
    by_station: dict[str, int] = Field(default_factory=dict)


class PeriodResponse(CamelModel):
    # "from" is a keyword, so the field is spelled out and aliased explicitly
    from_date: date = Field(..., alias="from")
    to: date
    days: int


class UpcomingRotationsData(CamelModel):
    categorized: CategorizedRotationsResponse
    summary: UpcomingSummaryResponse
    period: PeriodResponse


class UpcomingRotationsResponse(CamelModel):
    """Active wheels due soon, grouped by urgency."""

    success: bool = True
    data: UpcomingRotationsData


class TodayCountResponse(CamelModel):
    success: bool = True
    count: int


class RotationCountsData(CamelModel):
    today: int
    this_week: int
    this_month: int
    this_quarter: int
    this_year: int
    overdue: int
    total_active: int
    frequency_breakdown: dict[str, int] = Field(default_factory=dict)


class RotationCountsResponse(CamelModel):
    """Active wheels due within rolling windows."""

    success: bool = True
    data: RotationCountsData


# --- User Activity ---


class UserActivityResponse(CamelModel):
    id: str
    user_id: str
    action: str
    resource_type: str | None = None
    resource_id: str | None = None
    resource_title: str | None = None
    metadata: dict[str, Any] | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, activity: UserActivity) -> "UserActivityResponse":
        return cls.model_validate(activity.model_dump(mode="json"))


class PaginationResponse(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class UserActivityListResponse(CamelModel):
    """A page of the company's activity log."""

    success: bool = True
    data: list[UserActivityResponse] = Field(default_factory=list)
    pagination: PaginationResponse


# --- Health & Errors ---


class ComponentHealthResponse(CamelModel):
    """Health status of one dependency."""

    name: str
    status: str
    latency_ms: float | None = None
    details: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None


class HealthResponse(CamelModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ComponentHealthResponse | None = None
    activity_log: ComponentHealthResponse | None = None


class ErrorResponse(CamelModel):
    """Standardized error response DTO.

    Every error response includes:
    - success: always false
    - error_code: machine-readable code (e.g. STOCK_ITEM_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    success: bool = False
    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    details: dict[str, Any] | None = Field(default=None, description="Structured error data")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
