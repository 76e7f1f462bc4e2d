"""Abstract interface for wheel rotation storage."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date

from mro.core.entities.wheel_rotation import RotationHistory, WheelRotationAsset


@dataclass
class RotationResult:
    """Asset state and history row produced by one committed rotation."""

    asset: WheelRotationAsset
    history: RotationHistory


class IWheelRotationStore(ABC):
    """Interface for wheel rotation assets and their rotation history."""

    @abstractmethod
    async def create(self, asset: WheelRotationAsset) -> WheelRotationAsset:
        """Create a new wheel rotation asset."""
        pass

    @abstractmethod
    async def get(
        self, company_id: str, wheel_id: str, include_history: bool = False
    ) -> WheelRotationAsset | None:
        """Get an asset by ID, optionally with its full history (newest first)."""
        pass

    @abstractmethod
    async def list_assets(
        self, company_id: str, is_active: bool | None = None
    ) -> list[WheelRotationAsset]:
        """List assets newest first, each carrying at most its latest history row."""
        pass

    @abstractmethod
    async def list_due_until(
        self, company_id: str, until: date
    ) -> list[WheelRotationAsset]:
        """List active assets due on or before `until`, earliest due first."""
        pass

    @abstractmethod
    async def update_details(self, asset: WheelRotationAsset) -> WheelRotationAsset:
        """Persist descriptive fields, frequency, due date and active flag."""
        pass

    @abstractmethod
    async def record_rotation(
        self,
        company_id: str,
        wheel_id: str,
        new_position: int,
        rotation_date: date,
        performed_by: str | None = None,
        notes: str | None = None,
    ) -> RotationResult:
        """
        Append a history row and move the asset to its new position atomically.

        Raises:
            WheelRotationNotFoundError: asset absent for this company
            DatabaseError: the transaction failed and was rolled back
        """
        pass
