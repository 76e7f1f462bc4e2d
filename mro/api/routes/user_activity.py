"""Company activity log endpoint."""

from fastapi import APIRouter, Depends, Query

from mro.api.dependencies import get_list_activities_use_case, require_permission
from mro.application.dto.responses import ErrorResponse, UserActivityListResponse
from mro.application.use_cases import ListActivitiesUseCase
from mro.core.entities.tenant import TenantContext
from mro.core.services.authorization import Permission

router = APIRouter(prefix="/api/user-activity", tags=["user-activity"])


@router.get(
    "",
    response_model=UserActivityListResponse,
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def list_user_activity(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    action: str | None = None,
    resource_type: str | None = Query(None, alias="resourceType"),
    tenant: TenantContext = Depends(require_permission(Permission.ACTIVITY_VIEW)),
    use_case: ListActivitiesUseCase = Depends(get_list_activities_use_case),
) -> UserActivityListResponse:
    """Page through the company's activity log, newest first."""
    result = await use_case.execute(
        tenant, page=page, limit=limit, action=action, resource_type=resource_type
    )
    return use_case.to_response(result)
