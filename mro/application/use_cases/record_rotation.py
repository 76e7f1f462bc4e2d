"""Record Rotation Use Case: log a performed wheel rotation."""

from mro.application.activity_dispatcher import (
    ActivityDispatcher,
    RequestOrigin,
    build_activity,
    get_activity_dispatcher,
)
from mro.application.dto.requests import RotateWheelRequest
from mro.application.dto.responses import RotationHistoryResponse
from mro.config import get_logger
from mro.core.entities.activity import ActivityAction, ResourceType
from mro.core.entities.tenant import TenantContext
from mro.core.interfaces.wheel_rotation_store import IWheelRotationStore, RotationResult
from mro.core.services.rotation_schedule import utc_today, validate_position

logger = get_logger(__name__)


class RecordRotationUseCase:
    """
    Record a rotation for a company's wheel.

    The history row, new position, last rotation date and recomputed due
    date are written in one store transaction.
    """

    def __init__(
        self,
        wheel_store: IWheelRotationStore | None = None,
        dispatcher: ActivityDispatcher | None = None,
    ):
        self._wheel_store = wheel_store
        self._dispatcher = dispatcher

    async def _get_wheel_store(self) -> IWheelRotationStore:
        if self._wheel_store is None:
            from mro.infrastructure.storage.sqlite import get_wheel_rotation_store

            self._wheel_store = await get_wheel_rotation_store()
        return self._wheel_store

    async def execute(
        self,
        tenant: TenantContext,
        wheel_id: str,
        request: RotateWheelRequest,
        origin: RequestOrigin | None = None,
    ) -> RotationResult:
        new_position = validate_position(request.new_position)
        rotation_date = request.rotation_date or utc_today()
        performed_by = request.performed_by or tenant.display_name

        logger.info(
            "record_rotation_started",
            wheel_id=wheel_id,
            new_position=new_position,
            rotation_date=rotation_date.isoformat(),
        )

        store = await self._get_wheel_store()
        result = await store.record_rotation(
            company_id=tenant.company_id,
            wheel_id=wheel_id,
            new_position=new_position,
            rotation_date=rotation_date,
            performed_by=performed_by,
            notes=request.notes,
        )

        dispatcher = self._dispatcher or get_activity_dispatcher()
        dispatcher.publish(
            build_activity(
                tenant,
                action=ActivityAction.ROTATED_WHEEL,
                resource_type=ResourceType.WHEEL_ROTATION,
                resource_id=wheel_id,
                resource_title=(
                    f"Rotated wheel {result.asset.wheel_serial_number} from "
                    f"{result.history.previous_position}° to {new_position}°"
                ),
                metadata={
                    "previousPosition": result.history.previous_position,
                    "newPosition": new_position,
                    "nextRotationDue": result.asset.next_rotation_due.isoformat(),
                },
                origin=origin,
            )
        )
        return result

    def to_response(self, result: RotationResult) -> RotationHistoryResponse:
        return RotationHistoryResponse.from_entity(result.history)
