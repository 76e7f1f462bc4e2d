"""Stock inventory endpoints: intake, lookup and quantity consumption."""

from fastapi import APIRouter, Depends, Query, status

from mro.api.dependencies import (
    get_consume_stock_use_case,
    get_create_stock_item_use_case,
    get_expiry_status_use_case,
    get_get_stock_item_use_case,
    get_list_stock_items_use_case,
    get_request_origin,
    get_usage_history_use_case,
    get_verify_ledger_use_case,
    require_permission,
)
from mro.application.activity_dispatcher import RequestOrigin
from mro.application.dto.requests import CreateStockItemRequest, UseQuantityRequest
from mro.application.dto.responses import (
    ErrorResponse,
    ExpiryStatusResponse,
    LedgerCheckResponse,
    StockItemEnvelope,
    StockItemListResponse,
    UsageHistoryResponse,
    UseQuantityResponse,
)
from mro.application.use_cases import (
    ConsumeStockUseCase,
    CreateStockItemUseCase,
    GetStockItemUseCase,
    GetUsageHistoryUseCase,
    ListStockItemsUseCase,
    StockExpiryStatusUseCase,
    VerifyLedgerUseCase,
)
from mro.core.entities.tenant import TenantContext
from mro.core.services.authorization import Permission

router = APIRouter(prefix="/api/stock-inventory", tags=["stock-inventory"])

_AUTH_ERRORS = {401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}}


@router.post(
    "",
    response_model=StockItemEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses=_AUTH_ERRORS,
)
async def create_stock_item(
    request: CreateStockItemRequest,
    tenant: TenantContext = Depends(require_permission(Permission.STOCK_CREATE)),
    origin: RequestOrigin = Depends(get_request_origin),
    use_case: CreateStockItemUseCase = Depends(get_create_stock_item_use_case),
) -> StockItemEnvelope:
    """Add an item to the company's inventory."""
    item = await use_case.execute(tenant, request, origin=origin)
    return use_case.to_response(item)


@router.get("", response_model=StockItemListResponse, responses=_AUTH_ERRORS)
async def list_stock_items(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    search: str | None = None,
    tenant: TenantContext = Depends(require_permission(Permission.STOCK_VIEW)),
    use_case: ListStockItemsUseCase = Depends(get_list_stock_items_use_case),
) -> StockItemListResponse:
    """List the company's stock items, newest first."""
    page = await use_case.execute(tenant, limit=limit, offset=offset, search=search)
    return use_case.to_response(page)


@router.get("/expiry-status", response_model=ExpiryStatusResponse, responses=_AUTH_ERRORS)
async def get_expiry_status(
    tenant: TenantContext = Depends(require_permission(Permission.STOCK_VIEW)),
    use_case: StockExpiryStatusUseCase = Depends(get_expiry_status_use_case),
) -> ExpiryStatusResponse:
    """Count expired items and items expiring within 30 days."""
    result = await use_case.execute(tenant)
    return use_case.to_response(result)


@router.get(
    "/{stock_item_id}",
    response_model=StockItemEnvelope,
    responses={**_AUTH_ERRORS, 404: {"model": ErrorResponse}},
)
async def get_stock_item(
    stock_item_id: str,
    tenant: TenantContext = Depends(require_permission(Permission.STOCK_VIEW)),
    use_case: GetStockItemUseCase = Depends(get_get_stock_item_use_case),
) -> StockItemEnvelope:
    item = await use_case.execute(tenant, stock_item_id)
    return use_case.to_response(item)


@router.post(
    "/{stock_item_id}/use-quantity",
    response_model=UseQuantityResponse,
    responses={
        **_AUTH_ERRORS,
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def use_quantity(
    stock_item_id: str,
    request: UseQuantityRequest,
    tenant: TenantContext = Depends(require_permission(Permission.STOCK_CONSUME)),
    origin: RequestOrigin = Depends(get_request_origin),
    use_case: ConsumeStockUseCase = Depends(get_consume_stock_use_case),
) -> UseQuantityResponse:
    """
    Consume quantity from a stock item.

    The decrement and its usage record are committed together. A request
    for more than is on hand is rejected and leaves the item untouched.
    """
    result = await use_case.execute(tenant, stock_item_id, request, origin=origin)
    return use_case.to_response(result)


@router.get(
    "/{stock_item_id}/usage-history",
    response_model=UsageHistoryResponse,
    responses={**_AUTH_ERRORS, 404: {"model": ErrorResponse}},
)
async def get_usage_history(
    stock_item_id: str,
    tenant: TenantContext = Depends(require_permission(Permission.STOCK_VIEW)),
    use_case: GetUsageHistoryUseCase = Depends(get_usage_history_use_case),
) -> UsageHistoryResponse:
    """Usage ledger for an item with statistics and a per-day summary."""
    result = await use_case.execute(tenant, stock_item_id)
    return use_case.to_response(result)


@router.get(
    "/{stock_item_id}/ledger-check",
    response_model=LedgerCheckResponse,
    responses={**_AUTH_ERRORS, 404: {"model": ErrorResponse}},
)
async def check_ledger(
    stock_item_id: str,
    tenant: TenantContext = Depends(require_permission(Permission.STOCK_VIEW)),
    use_case: VerifyLedgerUseCase = Depends(get_verify_ledger_use_case),
) -> LedgerCheckResponse:
    """Replay the usage ledger against the item's current quantity."""
    result = await use_case.execute(tenant, stock_item_id)
    return use_case.to_response(result)
