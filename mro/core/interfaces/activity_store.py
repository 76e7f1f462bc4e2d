"""Abstract interface for user activity storage."""

from abc import ABC, abstractmethod

from mro.core.entities.activity import UserActivity


class IActivityStore(ABC):
    """Interface for the append-only user activity log."""

    @abstractmethod
    async def add(self, activity: UserActivity) -> UserActivity:
        """Append an activity entry."""
        pass

    @abstractmethod
    async def list_activities(
        self,
        company_id: str,
        limit: int = 20,
        offset: int = 0,
        action: str | None = None,
        resource_type: str | None = None,
    ) -> list[UserActivity]:
        """List a company's activities, newest first."""
        pass

    @abstractmethod
    async def count(
        self,
        company_id: str,
        action: str | None = None,
        resource_type: str | None = None,
    ) -> int:
        """Count a company's activities matching the filters."""
        pass
