"""Data transfer objects shared by use cases and the API layer."""

from mro.application.dto.requests import (
    CamelModel,
    CreateStockItemRequest,
    CreateWheelRotationRequest,
    RotateWheelRequest,
    UpdateWheelRotationRequest,
    UseQuantityRequest,
)
from mro.application.dto.responses import (
    ErrorResponse,
    ExpiryStatusResponse,
    HealthResponse,
    LedgerCheckResponse,
    RotationCountsResponse,
    RotationHistoryResponse,
    StockItemEnvelope,
    StockItemListResponse,
    StockItemResponse,
    TodayCountResponse,
    UpcomingRotationsResponse,
    UsageHistoryResponse,
    UseQuantityResponse,
    UserActivityListResponse,
    WheelRotationResponse,
)

__all__ = [
    "CamelModel",
    "CreateStockItemRequest",
    "CreateWheelRotationRequest",
    "RotateWheelRequest",
    "UpdateWheelRotationRequest",
    "UseQuantityRequest",
    "ErrorResponse",
    "ExpiryStatusResponse",
    "HealthResponse",
    "LedgerCheckResponse",
    "RotationCountsResponse",
    "RotationHistoryResponse",
    "StockItemEnvelope",
    "StockItemListResponse",
    "StockItemResponse",
    "TodayCountResponse",
    "UpcomingRotationsResponse",
    "UsageHistoryResponse",
    "UseQuantityResponse",
    "UserActivityListResponse",
    "WheelRotationResponse",
]
