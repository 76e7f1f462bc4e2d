"""Wheel rotation endpoints: registration, schedule views and rotations."""

from fastapi import APIRouter, Depends, Query, status

from mro.api.dependencies import (
    get_get_wheel_rotation_use_case,
    get_list_wheel_rotations_use_case,
    get_record_rotation_use_case,
    get_register_wheel_use_case,
    get_request_origin,
    get_rotation_counts_use_case,
    get_upcoming_rotations_use_case,
    get_update_wheel_rotation_use_case,
    require_permission,
)
from mro.application.activity_dispatcher import RequestOrigin
from mro.application.dto.requests import (
    CreateWheelRotationRequest,
    RotateWheelRequest,
    UpdateWheelRotationRequest,
)
from mro.application.dto.responses import (
    ErrorResponse,
    RotationCountsResponse,
    RotationHistoryResponse,
    TodayCountResponse,
    UpcomingRotationsResponse,
    WheelRotationResponse,
)
from mro.application.use_cases import (
    GetWheelRotationUseCase,
    ListUpcomingRotationsUseCase,
    ListWheelRotationsUseCase,
    RecordRotationUseCase,
    RegisterWheelUseCase,
    RotationCountsUseCase,
    UpdateWheelRotationUseCase,
)
from mro.core.entities.tenant import TenantContext
from mro.core.services.authorization import Permission

router = APIRouter(prefix="/api/wheel-rotation", tags=["wheel-rotation"])

_AUTH_ERRORS = {401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}}


@router.post(
    "",
    response_model=WheelRotationResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_AUTH_ERRORS,
)
async def register_wheel(
    request: CreateWheelRotationRequest,
    tenant: TenantContext = Depends(require_permission(Permission.WHEEL_CREATE)),
    origin: RequestOrigin = Depends(get_request_origin),
    use_case: RegisterWheelUseCase = Depends(get_register_wheel_use_case),
) -> WheelRotationResponse:
    """Start tracking a wheel. The first rotation is due one period after arrival."""
    asset = await use_case.execute(tenant, request, origin=origin)
    return use_case.to_response(asset)


@router.get("", response_model=list[WheelRotationResponse], responses=_AUTH_ERRORS)
async def list_wheel_rotations(
    active: bool | None = None,
    tenant: TenantContext = Depends(require_permission(Permission.WHEEL_VIEW)),
    use_case: ListWheelRotationsUseCase = Depends(get_list_wheel_rotations_use_case),
) -> list[WheelRotationResponse]:
    """List tracked wheels, each with its latest rotation."""
    assets = await use_case.execute(tenant, is_active=active)
    return use_case.to_response(assets)


# Fixed paths are declared before /{wheel_id} so they are not captured by it


@router.get("/upcoming", response_model=UpcomingRotationsResponse, responses=_AUTH_ERRORS)
async def list_upcoming_rotations(
    days: int | None = Query(None, ge=0),
    tenant: TenantContext = Depends(require_permission(Permission.WHEEL_VIEW)),
    use_case: ListUpcomingRotationsUseCase = Depends(get_upcoming_rotations_use_case),
) -> UpcomingRotationsResponse:
    """Active wheels due within the window, grouped by urgency."""
    result = await use_case.execute(tenant, days=days)
    return use_case.to_response(result)


@router.get("/today-count", response_model=TodayCountResponse, responses=_AUTH_ERRORS)
async def today_count(
    tenant: TenantContext = Depends(require_permission(Permission.WHEEL_VIEW)),
    use_case: RotationCountsUseCase = Depends(get_rotation_counts_use_case),
) -> TodayCountResponse:
    counts = await use_case.execute(tenant)
    return use_case.to_today_response(counts)


@router.get(
    "/frequency-counts", response_model=RotationCountsResponse, responses=_AUTH_ERRORS
)
async def frequency_counts(
    tenant: TenantContext = Depends(require_permission(Permission.WHEEL_VIEW)),
    use_case: RotationCountsUseCase = Depends(get_rotation_counts_use_case),
) -> RotationCountsResponse:
    """Active wheels due today, this week, month, quarter and year."""
    counts = await use_case.execute(tenant)
    return use_case.to_response(counts)


@router.get(
    "/{wheel_id}",
    response_model=WheelRotationResponse,
    responses={**_AUTH_ERRORS, 404: {"model": ErrorResponse}},
)
async def get_wheel_rotation(
    wheel_id: str,
    tenant: TenantContext = Depends(require_permission(Permission.WHEEL_VIEW)),
    use_case: GetWheelRotationUseCase = Depends(get_get_wheel_rotation_use_case),
) -> WheelRotationResponse:
    """A wheel with its full rotation history, newest first."""
    asset = await use_case.execute(tenant, wheel_id)
    return use_case.to_response(asset)


@router.put(
    "/{wheel_id}",
    response_model=WheelRotationResponse,
    responses={**_AUTH_ERRORS, 404: {"model": ErrorResponse}},
)
async def update_wheel_rotation(
    wheel_id: str,
    request: UpdateWheelRotationRequest,
    tenant: TenantContext = Depends(require_permission(Permission.WHEEL_UPDATE)),
    origin: RequestOrigin = Depends(get_request_origin),
    use_case: UpdateWheelRotationUseCase = Depends(get_update_wheel_rotation_use_case),
) -> WheelRotationResponse:
    """
    Edit a wheel's descriptive fields.

    Position and rotation dates only change through /rotate; a frequency
    change reschedules the next due date from the last rotation.
    """
    asset = await use_case.execute(tenant, wheel_id, request, origin=origin)
    return use_case.to_response(asset)


@router.post(
    "/{wheel_id}/rotate",
    response_model=RotationHistoryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        **_AUTH_ERRORS,
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def rotate_wheel(
    wheel_id: str,
    request: RotateWheelRequest,
    tenant: TenantContext = Depends(require_permission(Permission.WHEEL_ROTATE)),
    origin: RequestOrigin = Depends(get_request_origin),
    use_case: RecordRotationUseCase = Depends(get_record_rotation_use_case),
) -> RotationHistoryResponse:
    """Record a rotation and reschedule the wheel."""
    result = await use_case.execute(tenant, wheel_id, request, origin=origin)
    return use_case.to_response(result)
