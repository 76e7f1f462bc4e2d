"""Rotation Counts Use Case: active wheels due within rolling windows."""

from datetime import date

from mro.application.dto.responses import (
    RotationCountsData,
    RotationCountsResponse,
    TodayCountResponse,
)
from mro.core.entities.tenant import TenantContext
from mro.core.interfaces.wheel_rotation_store import IWheelRotationStore
from mro.core.services.rotation_schedule import (
    RotationWindowCounts,
    count_rotation_windows,
    utc_today,
)


class RotationCountsUseCase:
    """Counts for today, this week, month, quarter and year, plus overdue."""

    def __init__(self, wheel_store: IWheelRotationStore | None = None):
        self._wheel_store = wheel_store

    async def _get_wheel_store(self) -> IWheelRotationStore:
        if self._wheel_store is None:
            from mro.infrastructure.storage.sqlite import get_wheel_rotation_store

            self._wheel_store = await get_wheel_rotation_store()
        return self._wheel_store

    async def execute(
        self, tenant: TenantContext, today: date | None = None
    ) -> RotationWindowCounts:
        store = await self._get_wheel_store()
        assets = await store.list_assets(tenant.company_id, is_active=True)
        return count_rotation_windows(assets, today or utc_today())

    def to_response(self, counts: RotationWindowCounts) -> RotationCountsResponse:
        return RotationCountsResponse(
            data=RotationCountsData(
                today=counts.today,
                this_week=counts.this_week,
                this_month=counts.this_month,
                this_quarter=counts.this_quarter,
                this_year=counts.this_year,
                overdue=counts.overdue,
                total_active=counts.total_active,
                frequency_breakdown=counts.frequency_breakdown,
            )
        )

    def to_today_response(self, counts: RotationWindowCounts) -> TodayCountResponse:
        return TodayCountResponse(count=counts.today)
