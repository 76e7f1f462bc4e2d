"""Wheel rotation tracking entities."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field

from mro.core.entities.stock import utcnow


class RotationFrequency(str, Enum):
    """Cadence at which a wheel must be rotated."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    BIANNUALLY = "biannually"
    ANNUALLY = "annually"


class RotationHistory(BaseModel):
    """One performed rotation. Append-only."""

    id: str | None = None
    company_id: str
    wheel_rotation_id: str
    rotation_date: date
    previous_position: int
    new_position: int
    performed_by: str | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=utcnow)


class WheelRotationAsset(BaseModel):
    """
    Aircraft wheel subject to periodic position rotation.

    next_rotation_due is always last_rotation_date advanced by the
    rotation frequency; current_position changes only through a rotation.
    """

    id: str | None = None
    company_id: str
    arrival_date: date
    station: str
    airline: str
    wheel_part_number: str
    wheel_serial_number: str
    # Stored as text so rows written with an unknown cadence still load
    rotation_frequency: str = RotationFrequency.MONTHLY.value
    current_position: int = 0
    last_rotation_date: date
    next_rotation_due: date
    is_active: bool = True
    notes: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    rotation_history: list[RotationHistory] = Field(default_factory=list)

    def is_overdue(self, today: date) -> bool:
        """Check if an active wheel has passed its due date."""
        return self.is_active and self.next_rotation_due < today
