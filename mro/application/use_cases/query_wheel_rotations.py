"""Wheel rotation read use cases: single asset and list."""

from mro.application.dto.responses import WheelRotationResponse
from mro.core.entities.tenant import TenantContext
from mro.core.entities.wheel_rotation import WheelRotationAsset
from mro.core.exceptions import WheelRotationNotFoundError
from mro.core.interfaces.wheel_rotation_store import IWheelRotationStore


class _WheelStoreMixin:
    _wheel_store: IWheelRotationStore | None

    async def _get_wheel_store(self) -> IWheelRotationStore:
        if self._wheel_store is None:
            from mro.infrastructure.storage.sqlite import get_wheel_rotation_store

            self._wheel_store = await get_wheel_rotation_store()
        return self._wheel_store


class GetWheelRotationUseCase(_WheelStoreMixin):
    """Fetch one wheel with its full rotation history, newest first."""

    def __init__(self, wheel_store: IWheelRotationStore | None = None):
        self._wheel_store = wheel_store

    async def execute(self, tenant: TenantContext, wheel_id: str) -> WheelRotationAsset:
        store = await self._get_wheel_store()
        asset = await store.get(tenant.company_id, wheel_id, include_history=True)
        if asset is None:
            raise WheelRotationNotFoundError(wheel_id)
        return asset

    def to_response(self, asset: WheelRotationAsset) -> WheelRotationResponse:
        return WheelRotationResponse.from_entity(asset)


class ListWheelRotationsUseCase(_WheelStoreMixin):
    """List a company's wheels, newest first, each with its latest rotation."""

    def __init__(self, wheel_store: IWheelRotationStore | None = None):
        self._wheel_store = wheel_store

    async def execute(
        self, tenant: TenantContext, is_active: bool | None = None
    ) -> list[WheelRotationAsset]:
        store = await self._get_wheel_store()
        return await store.list_assets(tenant.company_id, is_active=is_active)

    def to_response(self, assets: list[WheelRotationAsset]) -> list[WheelRotationResponse]:
        return [WheelRotationResponse.from_entity(a) for a in assets]
