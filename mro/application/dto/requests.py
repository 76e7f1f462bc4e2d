"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation. Field names are snake_case
in Python and camelCase on the wire.
"""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from mro.core.entities.wheel_rotation import RotationFrequency


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case keys, emits camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Stock Inventory ---


class CreateStockItemRequest(CamelModel):
    """Request to take a new stock item into inventory."""

    part_no: str = Field(..., min_length=1, description="Part number")
    serial_no: str | None = Field(default=None, description="Serial number")
    description: str | None = Field(default=None, description="Item description")
    quantity: int = Field(default=0, ge=0, description="Initial quantity on hand")
    unit: str | None = Field(default=None, description="Unit of measure", examples=["EA", "L"])
    location: str | None = Field(default=None, description="Storage location")
    expire_date: date | None = Field(default=None, description="Shelf-life expiry")


class UseQuantityRequest(CamelModel):
    """Request to consume quantity from a stock item.

    used_quantity is left loosely typed so the ledger can reject bad values
    with its own INVALID_QUANTITY error instead of a schema error.
    """

    used_quantity: Any = Field(default=None, description="Units to consume (positive integer)")
    purpose: str | None = Field(default=None, description="Why the stock was used")
    notes: str | None = Field(default=None, description="Additional notes")


# --- Wheel Rotation ---


class CreateWheelRotationRequest(CamelModel):
    """Request to start rotation tracking for a wheel."""

    arrival_date: date = Field(..., description="Date the wheel arrived at the station")
    station: str = Field(..., min_length=1)
    airline: str = Field(..., min_length=1)
    wheel_part_number: str = Field(..., min_length=1)
    wheel_serial_number: str = Field(..., min_length=1)
    rotation_frequency: RotationFrequency = Field(default=RotationFrequency.MONTHLY)
    notes: str | None = None


class UpdateWheelRotationRequest(CamelModel):
    """Partial update of a wheel's descriptive fields, cadence or active flag."""

    station: str | None = Field(default=None, min_length=1)
    airline: str | None = Field(default=None, min_length=1)
    wheel_part_number: str | None = Field(default=None, min_length=1)
    wheel_serial_number: str | None = Field(default=None, min_length=1)
    rotation_frequency: RotationFrequency | None = None
    notes: str | None = None
    is_active: bool | None = None


class RotateWheelRequest(CamelModel):
    """Request to record a performed rotation."""

    new_position: Any = Field(default=None, description="New position in degrees, 0-359")
    performed_by: str | None = Field(default=None, description="Defaults to the acting user")
    rotation_date: date | None = Field(default=None, description="Defaults to today")
    notes: str | None = None
