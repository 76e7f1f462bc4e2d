"""Stock inventory domain entities."""

from datetime import UTC, date, datetime

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(UTC)


class StockItem(BaseModel):
    """A trackable inventory unit whose quantity only the usage ledger decrements."""

    id: str | None = None
    company_id: str
    part_no: str
    serial_no: str | None = None
    description: str | None = None
    quantity: int = Field(default=0, ge=0)
    unit: str | None = None
    location: str | None = None
    expire_date: date | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class UsageRecord(BaseModel):
    """
    Immutable ledger entry for one consumption against a stock item.

    remaining_quantity is the item quantity immediately after this entry.
    """

    id: str | None = None
    company_id: str
    stock_item_id: str
    used_quantity: int = Field(gt=0)
    remaining_quantity: int = Field(ge=0)
    used_by: str
    used_by_name: str
    purpose: str | None = None
    notes: str | None = None
    used_at: datetime = Field(default_factory=utcnow)
