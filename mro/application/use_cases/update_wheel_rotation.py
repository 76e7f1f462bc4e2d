"""Update Wheel Rotation Use Case: edit details, cadence, or retire a wheel."""

from mro.application.activity_dispatcher import (
    ActivityDispatcher,
    RequestOrigin,
    build_activity,
    get_activity_dispatcher,
)
from mro.application.dto.requests import UpdateWheelRotationRequest
from mro.application.dto.responses import WheelRotationResponse
from mro.config import get_logger
from mro.core.entities.activity import ActivityAction, ResourceType
from mro.core.entities.tenant import TenantContext
from mro.core.entities.wheel_rotation import WheelRotationAsset
from mro.core.exceptions import WheelRotationNotFoundError
from mro.core.interfaces.wheel_rotation_store import IWheelRotationStore

logger = get_logger(__name__)


class UpdateWheelRotationUseCase:
    """
    Apply a partial update to a wheel.

    Position and rotation dates are not editable here; a frequency change
    moves the due date to last rotation + new interval.
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
        request: UpdateWheelRotationRequest,
        origin: RequestOrigin | None = None,
    ) -> WheelRotationAsset:
        store = await self._get_wheel_store()
        asset = await store.get(tenant.company_id, wheel_id)
        if asset is None:
            raise WheelRotationNotFoundError(wheel_id)

        changes = request.model_dump(exclude_unset=True)
        if "rotation_frequency" in changes and changes["rotation_frequency"] is not None:
            changes["rotation_frequency"] = request.rotation_frequency.value
        changes = {k: v for k, v in changes.items() if v is not None or k == "notes"}

        updated = await store.update_details(asset.model_copy(update=changes))

        dispatcher = self._dispatcher or get_activity_dispatcher()
        dispatcher.publish(
            build_activity(
                tenant,
                action=ActivityAction.UPDATED_WHEEL_ROTATION,
                resource_type=ResourceType.WHEEL_ROTATION,
                resource_id=wheel_id,
                resource_title=f"Updated wheel {updated.wheel_serial_number} information",
                metadata={"fields": sorted(changes)},
                origin=origin,
            )
        )
        return updated

    def to_response(self, asset: WheelRotationAsset) -> WheelRotationResponse:
        return WheelRotationResponse.from_entity(asset)
