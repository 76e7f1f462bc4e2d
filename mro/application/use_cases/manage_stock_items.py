"""Stock item intake and lookup use cases."""

from dataclasses import dataclass

from mro.application.activity_dispatcher import (
    ActivityDispatcher,
    RequestOrigin,
    build_activity,
    get_activity_dispatcher,
)
from mro.application.dto.requests import CreateStockItemRequest
from mro.application.dto.responses import (
    StockItemEnvelope,
    StockItemListResponse,
    StockItemResponse,
)
from mro.config import get_logger
from mro.core.entities.activity import ActivityAction, ResourceType
from mro.core.entities.stock import StockItem
from mro.core.entities.tenant import TenantContext
from mro.core.exceptions import StockItemNotFoundError
from mro.core.interfaces.stock_store import IStockStore

logger = get_logger(__name__)


class _StockStoreMixin:
    _stock_store: IStockStore | None

    async def _get_stock_store(self) -> IStockStore:
        if self._stock_store is None:
            from mro.infrastructure.storage.sqlite import get_stock_store

            self._stock_store = await get_stock_store()
        return self._stock_store


class CreateStockItemUseCase(_StockStoreMixin):
    """Take a new item into a company's inventory."""

    def __init__(
        self,
        stock_store: IStockStore | None = None,
        dispatcher: ActivityDispatcher | None = None,
    ):
        self._stock_store = stock_store
        self._dispatcher = dispatcher

    async def execute(
        self,
        tenant: TenantContext,
        request: CreateStockItemRequest,
        origin: RequestOrigin | None = None,
    ) -> StockItem:
        store = await self._get_stock_store()
        item = await store.create_item(
            StockItem(
                company_id=tenant.company_id,
                part_no=request.part_no,
                serial_no=request.serial_no,
                description=request.description,
                quantity=request.quantity,
                unit=request.unit,
                location=request.location,
                expire_date=request.expire_date,
            )
        )

        dispatcher = self._dispatcher or get_activity_dispatcher()
        dispatcher.publish(
            build_activity(
                tenant,
                action=ActivityAction.ADDED_STOCK_INVENTORY,
                resource_type=ResourceType.STOCK_INVENTORY,
                resource_id=item.id,
                resource_title=f"Added stock item {item.part_no}",
                metadata={
                    "partNo": item.part_no,
                    "serialNo": item.serial_no,
                    "quantity": item.quantity,
                },
                origin=origin,
            )
        )
        return item

    def to_response(self, item: StockItem) -> StockItemEnvelope:
        return StockItemEnvelope(
            message="Stock inventory record created",
            data=StockItemResponse.from_entity(item),
        )


class GetStockItemUseCase(_StockStoreMixin):
    def __init__(self, stock_store: IStockStore | None = None):
        self._stock_store = stock_store

    async def execute(self, tenant: TenantContext, stock_item_id: str) -> StockItem:
        store = await self._get_stock_store()
        item = await store.get_item(tenant.company_id, stock_item_id)
        if item is None:
            raise StockItemNotFoundError(stock_item_id)
        return item

    def to_response(self, item: StockItem) -> StockItemEnvelope:
        return StockItemEnvelope(data=StockItemResponse.from_entity(item))


@dataclass
class StockItemPage:
    items: list[StockItem]
    total: int
    limit: int
    offset: int


class ListStockItemsUseCase(_StockStoreMixin):
    """Page through a company's stock items, optionally searching."""

    def __init__(self, stock_store: IStockStore | None = None):
        self._stock_store = stock_store

    async def execute(
        self,
        tenant: TenantContext,
        limit: int = 50,
        offset: int = 0,
        search: str | None = None,
    ) -> StockItemPage:
        store = await self._get_stock_store()
        search = search.strip() if search else None
        items = await store.list_items(tenant.company_id, limit=limit, offset=offset, search=search)
        total = await store.count_items(tenant.company_id, search=search)
        return StockItemPage(items=items, total=total, limit=limit, offset=offset)

    def to_response(self, page: StockItemPage) -> StockItemListResponse:
        return StockItemListResponse(
            data=[StockItemResponse.from_entity(i) for i in page.items],
            total=page.total,
            limit=page.limit,
            offset=page.offset,
            has_more=page.offset + len(page.items) < page.total,
        )
