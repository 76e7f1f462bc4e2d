"""Consume Stock Use Case: decrement a stock item through the usage ledger."""

from dataclasses import dataclass

from mro.application.activity_dispatcher import (
    ActivityDispatcher,
    RequestOrigin,
    build_activity,
    get_activity_dispatcher,
)
from mro.application.dto.requests import UseQuantityRequest
from mro.application.dto.responses import (
    StockItemResponse,
    UsageRecordResponse,
    UseQuantityData,
    UseQuantityResponse,
)
from mro.config import get_logger
from mro.core.entities.activity import ActivityAction, ResourceType
from mro.core.entities.stock import StockItem, UsageRecord
from mro.core.entities.tenant import TenantContext
from mro.core.interfaces.stock_store import IStockStore
from mro.core.services.stock_ledger import coerce_used_quantity

logger = get_logger(__name__)


@dataclass
class ConsumeStockResult:
    """Result of consuming stock."""

    stock_item: StockItem
    usage_record: UsageRecord
    used_quantity: int


class ConsumeStockUseCase:
    """
    Consume quantity from a company's stock item.

    Validation happens before any write. The decrement and the usage record
    are committed together by the store; the activity entry is published
    only after that commit and cannot fail the request.
    """

    def __init__(
        self,
        stock_store: IStockStore | None = None,
        dispatcher: ActivityDispatcher | None = None,
    ):
        self._stock_store = stock_store
        self._dispatcher = dispatcher

    async def _get_stock_store(self) -> IStockStore:
        if self._stock_store is None:
            from mro.infrastructure.storage.sqlite import get_stock_store

            self._stock_store = await get_stock_store()
        return self._stock_store

    def _get_dispatcher(self) -> ActivityDispatcher:
        if self._dispatcher is None:
            self._dispatcher = get_activity_dispatcher()
        return self._dispatcher

    async def execute(
        self,
        tenant: TenantContext,
        stock_item_id: str,
        request: UseQuantityRequest,
        origin: RequestOrigin | None = None,
    ) -> ConsumeStockResult:
        """Execute consume stock use case."""
        used_quantity = coerce_used_quantity(request.used_quantity)

        logger.info(
            "consume_stock_started",
            stock_item_id=stock_item_id,
            used_quantity=used_quantity,
        )

        store = await self._get_stock_store()
        result = await store.consume(
            company_id=tenant.company_id,
            item_id=stock_item_id,
            used_quantity=used_quantity,
            used_by=tenant.user_id,
            used_by_name=tenant.display_name,
            purpose=request.purpose or None,
            notes=request.notes or None,
        )
        item = result.stock_item

        self._get_dispatcher().publish(
            build_activity(
                tenant,
                action=ActivityAction.UPDATED_STOCK_INVENTORY,
                resource_type=ResourceType.STOCK_INVENTORY,
                resource_id=stock_item_id,
                resource_title=f"Used {used_quantity} units of {item.part_no}",
                metadata={
                    "usedQuantity": used_quantity,
                    "remainingQuantity": item.quantity,
                    "purpose": request.purpose or None,
                    "partNo": item.part_no,
                    "serialNo": item.serial_no,
                },
                origin=origin,
            )
        )

        logger.info(
            "consume_stock_complete",
            stock_item_id=stock_item_id,
            remaining_quantity=item.quantity,
        )
        return ConsumeStockResult(
            stock_item=item,
            usage_record=result.usage_record,
            used_quantity=used_quantity,
        )

    def to_response(self, result: ConsumeStockResult) -> UseQuantityResponse:
        """Convert result to API response."""
        remaining = result.stock_item.quantity
        return UseQuantityResponse(
            message=(
                f"Successfully used {result.used_quantity} units. "
                f"{remaining} units remaining."
            ),
            data=UseQuantityData(
                used_quantity=result.used_quantity,
                remaining_quantity=remaining,
                usage_record=UsageRecordResponse.from_entity(result.usage_record),
                stock_item=StockItemResponse.from_entity(result.stock_item),
            ),
        )
