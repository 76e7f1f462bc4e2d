"""
Dependency injection container for FastAPI.

Provides the authenticated tenant, permission guards and use case
instances to route handlers.
"""

from collections.abc import Awaitable, Callable
from functools import lru_cache

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from mro.application.activity_dispatcher import RequestOrigin
from mro.application.use_cases import (
    ConsumeStockUseCase,
    CreateStockItemUseCase,
    GetStockItemUseCase,
    GetUsageHistoryUseCase,
    GetWheelRotationUseCase,
    ListActivitiesUseCase,
    ListStockItemsUseCase,
    ListUpcomingRotationsUseCase,
    ListWheelRotationsUseCase,
    RecordRotationUseCase,
    RegisterWheelUseCase,
    RotationCountsUseCase,
    StockExpiryStatusUseCase,
    UpdateWheelRotationUseCase,
    VerifyLedgerUseCase,
)
from mro.config import Settings, bind_tenant_context, get_logger, get_settings
from mro.core.entities.tenant import TenantContext
from mro.core.exceptions import PermissionDeniedError, UnauthenticatedError
from mro.core.services.authorization import missing_permissions
from mro.infrastructure.auth import decode_session_token

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Identity
async def get_tenant_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
) -> TenantContext:
    """Resolve the caller's user and company from the session token."""
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError()

    tenant = decode_session_token(credentials.credentials, settings.auth)
    bind_tenant_context(tenant.company_id, tenant.user_id)
    return tenant


def require_permission(
    *permissions: str,
) -> Callable[..., Awaitable[TenantContext]]:
    """Build a dependency that admits callers holding every listed permission."""

    async def checker(tenant: TenantContext = Depends(get_tenant_context)) -> TenantContext:
        missing = missing_permissions(tenant.privilege, permissions)
        if missing:
            logger.warning(
                "permission_denied",
                privilege=tenant.privilege,
                missing=missing,
            )
            raise PermissionDeniedError(missing)
        return tenant

    return checker


def get_request_origin(request: Request) -> RequestOrigin:
    """Client address and user agent for the activity log."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        ip_address: str | None = forwarded.split(",")[0].strip()
    else:
        ip_address = request.client.host if request.client else None
    return RequestOrigin(
        ip_address=ip_address,
        user_agent=request.headers.get("User-Agent"),
    )


# Stock inventory use cases
def get_create_stock_item_use_case() -> CreateStockItemUseCase:
    return CreateStockItemUseCase()


def get_get_stock_item_use_case() -> GetStockItemUseCase:
    return GetStockItemUseCase()


def get_list_stock_items_use_case() -> ListStockItemsUseCase:
    return ListStockItemsUseCase()


def get_consume_stock_use_case() -> ConsumeStockUseCase:
    """Get consume stock use case."""
    return ConsumeStockUseCase()


def get_usage_history_use_case() -> GetUsageHistoryUseCase:
    return GetUsageHistoryUseCase()


def get_verify_ledger_use_case() -> VerifyLedgerUseCase:
    return VerifyLedgerUseCase()


def get_expiry_status_use_case() -> StockExpiryStatusUseCase:
    return StockExpiryStatusUseCase()


# Wheel rotation use cases
def get_register_wheel_use_case() -> RegisterWheelUseCase:
    """Get register wheel use case."""
    return RegisterWheelUseCase()


def get_get_wheel_rotation_use_case() -> GetWheelRotationUseCase:
    return GetWheelRotationUseCase()


def get_list_wheel_rotations_use_case() -> ListWheelRotationsUseCase:
    return ListWheelRotationsUseCase()


def get_update_wheel_rotation_use_case() -> UpdateWheelRotationUseCase:
    return UpdateWheelRotationUseCase()


def get_record_rotation_use_case() -> RecordRotationUseCase:
    """Get record rotation use case."""
    return RecordRotationUseCase()


def get_upcoming_rotations_use_case() -> ListUpcomingRotationsUseCase:
    return ListUpcomingRotationsUseCase()


def get_rotation_counts_use_case() -> RotationCountsUseCase:
    return RotationCountsUseCase()


# Activity log
def get_list_activities_use_case() -> ListActivitiesUseCase:
    return ListActivitiesUseCase()
