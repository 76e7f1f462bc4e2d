"""List Activities Use Case: a page of the company's activity log."""

import math
from dataclasses import dataclass

from mro.application.dto.responses import (
    PaginationResponse,
    UserActivityListResponse,
    UserActivityResponse,
)
from mro.core.entities.activity import UserActivity
from mro.core.entities.tenant import TenantContext
from mro.core.interfaces.activity_store import IActivityStore


@dataclass
class ActivityPage:
    activities: list[UserActivity]
    page: int
    limit: int
    total: int


class ListActivitiesUseCase:
    def __init__(self, activity_store: IActivityStore | None = None):
        self._activity_store = activity_store

    async def _get_activity_store(self) -> IActivityStore:
        if self._activity_store is None:
            from mro.infrastructure.storage.sqlite import get_activity_store

            self._activity_store = await get_activity_store()
        return self._activity_store

    async def execute(
        self,
        tenant: TenantContext,
        page: int = 1,
        limit: int = 20,
        action: str | None = None,
        resource_type: str | None = None,
    ) -> ActivityPage:
        page = max(1, page)
        store = await self._get_activity_store()
        activities = await store.list_activities(
            tenant.company_id,
            limit=limit,
            offset=(page - 1) * limit,
            action=action,
            resource_type=resource_type,
        )
        total = await store.count(tenant.company_id, action=action, resource_type=resource_type)
        return ActivityPage(activities=activities, page=page, limit=limit, total=total)

    def to_response(self, result: ActivityPage) -> UserActivityListResponse:
        return UserActivityListResponse(
            data=[UserActivityResponse.from_entity(a) for a in result.activities],
            pagination=PaginationResponse(
                page=result.page,
                limit=result.limit,
                total=result.total,
                total_pages=math.ceil(result.total / result.limit) if result.limit else 0,
            ),
        )
