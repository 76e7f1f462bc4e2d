"""Register Wheel Use Case: start rotation tracking for a wheel."""

from mro.application.activity_dispatcher import (
    ActivityDispatcher,
    RequestOrigin,
    build_activity,
    get_activity_dispatcher,
)
from mro.application.dto.requests import CreateWheelRotationRequest
from mro.application.dto.responses import WheelRotationResponse
from mro.config import get_logger
from mro.core.entities.activity import ActivityAction, ResourceType
from mro.core.entities.tenant import TenantContext
from mro.core.entities.wheel_rotation import WheelRotationAsset
from mro.core.interfaces.wheel_rotation_store import IWheelRotationStore
from mro.core.services.rotation_schedule import calculate_next_rotation_date

logger = get_logger(__name__)


class RegisterWheelUseCase:
    """
    Create a wheel rotation asset.

    A new wheel starts at 0 degrees with its arrival date as the last
    rotation, so the first rotation falls due one interval after arrival.
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
        request: CreateWheelRotationRequest,
        origin: RequestOrigin | None = None,
    ) -> WheelRotationAsset:
        frequency = request.rotation_frequency.value
        asset = WheelRotationAsset(
            company_id=tenant.company_id,
            arrival_date=request.arrival_date,
            station=request.station,
            airline=request.airline,
            wheel_part_number=request.wheel_part_number,
            wheel_serial_number=request.wheel_serial_number,
            rotation_frequency=frequency,
            current_position=0,
            last_rotation_date=request.arrival_date,
            next_rotation_due=calculate_next_rotation_date(request.arrival_date, frequency),
            is_active=True,
            notes=request.notes,
        )

        store = await self._get_wheel_store()
        asset = await store.create(asset)

        dispatcher = self._dispatcher or get_activity_dispatcher()
        dispatcher.publish(
            build_activity(
                tenant,
                action=ActivityAction.ADDED_WHEEL_ROTATION,
                resource_type=ResourceType.WHEEL_ROTATION,
                resource_id=asset.id,
                resource_title=(
                    f"Added wheel {asset.wheel_serial_number} for rotation tracking"
                ),
                metadata={
                    "airline": asset.airline,
                    "partNumber": asset.wheel_part_number,
                },
                origin=origin,
            )
        )
        return asset

    def to_response(self, asset: WheelRotationAsset) -> WheelRotationResponse:
        return WheelRotationResponse.from_entity(asset)
