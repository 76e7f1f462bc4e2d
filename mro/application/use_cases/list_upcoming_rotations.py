"""List Upcoming Rotations Use Case: wheels due soon, grouped by urgency."""

from datetime import date, timedelta

from mro.application.dto.responses import (
    CategorizedRotationsResponse,
    PeriodResponse,
    ScheduledRotationResponse,
    UpcomingRotationsData,
    UpcomingRotationsResponse,
    UpcomingSummaryResponse,
)
from mro.config import get_logger, get_settings
from mro.config.settings import ScheduleSettings
from mro.core.entities.tenant import TenantContext
from mro.core.interfaces.wheel_rotation_store import IWheelRotationStore
from mro.core.services.rotation_schedule import (
    ScheduledRotation,
    UpcomingRotations,
    categorize_upcoming,
    utc_today,
)

logger = get_logger(__name__)


class ListUpcomingRotationsUseCase:
    """
    Bucket a company's active wheels by how soon they are due.

    The look-ahead window defaults to the configured number of days and is
    clamped to [0, max_upcoming_days].
    """

    def __init__(
        self,
        wheel_store: IWheelRotationStore | None = None,
        schedule_settings: ScheduleSettings | None = None,
    ):
        self._wheel_store = wheel_store
        self._settings = schedule_settings

    async def _get_wheel_store(self) -> IWheelRotationStore:
        if self._wheel_store is None:
            from mro.infrastructure.storage.sqlite import get_wheel_rotation_store

            self._wheel_store = await get_wheel_rotation_store()
        return self._wheel_store

    def _window(self, days: int | None) -> int:
        settings = self._settings or get_settings().schedule
        if days is None:
            days = settings.default_upcoming_days
        return max(0, min(days, settings.max_upcoming_days))

    async def execute(
        self,
        tenant: TenantContext,
        days: int | None = None,
        today: date | None = None,
    ) -> UpcomingRotations:
        days = self._window(days)
        today = today or utc_today()

        store = await self._get_wheel_store()
        due = await store.list_due_until(tenant.company_id, today + timedelta(days=days))
        result = categorize_upcoming(due, today, days)

        logger.debug(
            "upcoming_rotations_listed",
            days=days,
            overdue=result.total_overdue,
            upcoming=result.total_upcoming,
        )
        return result

    @staticmethod
    def _entry(scheduled: ScheduledRotation) -> ScheduledRotationResponse:
        asset = scheduled.asset
        return ScheduledRotationResponse(
            id=asset.id,
            wheel_serial_number=asset.wheel_serial_number,
            wheel_part_number=asset.wheel_part_number,
            airline=asset.airline,
            station=asset.station,
            rotation_frequency=asset.rotation_frequency,
            next_rotation_due=asset.next_rotation_due,
            current_position=asset.current_position,
            notes=asset.notes,
            urgency=scheduled.urgency.value,
            days_overdue=scheduled.days_overdue,
        )

    def to_response(self, result: UpcomingRotations) -> UpcomingRotationsResponse:
        return UpcomingRotationsResponse(
            data=UpcomingRotationsData(
                categorized=CategorizedRotationsResponse(
                    overdue=[self._entry(s) for s in result.overdue],
                    today=[self._entry(s) for s in result.today],
                    this_week=[self._entry(s) for s in result.this_week],
                    later=[self._entry(s) for s in result.later],
                ),
                summary=UpcomingSummaryResponse(
                    total_upcoming=result.total_upcoming,
                    total_overdue=result.total_overdue,
                    by_frequency=result.by_frequency,
                    by_station=result.by_station,
                ),
                period=PeriodResponse(
                    from_date=result.period_from,
                    to=result.period_to,
                    days=result.days,
                ),
            )
        )
