"""Tests for the upcoming rotations, rotation counts and activity log use cases."""

from datetime import date, timedelta
from unittest.mock import AsyncMock

import pytest

from mro.application.use_cases import (
    ListActivitiesUseCase,
    ListUpcomingRotationsUseCase,
    RotationCountsUseCase,
)
from mro.config.settings import ScheduleSettings
from mro.core.entities import UserActivity
from mro.core.entities.activity import ActivityAction

TODAY = date(2024, 3, 10)


@pytest.fixture
def mock_wheel_store():
    return AsyncMock()


@pytest.fixture
def schedule_settings():
    return ScheduleSettings(default_upcoming_days=30, max_upcoming_days=90)


class TestListUpcomingRotationsUseCase:
    async def test_default_window(self, mock_wheel_store, schedule_settings, tenant, sample_wheel):
        wheel = sample_wheel.model_copy(update={"next_rotation_due": TODAY + timedelta(days=3)})
        mock_wheel_store.list_due_until.return_value = [wheel]
        use_case = ListUpcomingRotationsUseCase(
            wheel_store=mock_wheel_store, schedule_settings=schedule_settings
        )

        result = await use_case.execute(tenant, today=TODAY)

        mock_wheel_store.list_due_until.assert_awaited_once_with(
            "company-a", TODAY + timedelta(days=30)
        )
        assert result.days == 30
        assert len(result.this_week) == 1

    async def test_window_clamped(self, mock_wheel_store, schedule_settings, tenant):
        mock_wheel_store.list_due_until.return_value = []
        use_case = ListUpcomingRotationsUseCase(
            wheel_store=mock_wheel_store, schedule_settings=schedule_settings
        )

        result = await use_case.execute(tenant, days=1000, today=TODAY)
        assert result.days == 90

    async def test_response_shape(self, mock_wheel_store, schedule_settings, tenant, sample_wheel):
        overdue = sample_wheel.model_copy(update={"next_rotation_due": TODAY - timedelta(days=4)})
        mock_wheel_store.list_due_until.return_value = [overdue]
        use_case = ListUpcomingRotationsUseCase(
            wheel_store=mock_wheel_store, schedule_settings=schedule_settings
        )

        result = await use_case.execute(tenant, days=7, today=TODAY)
        body = use_case.to_response(result).model_dump(mode="json", by_alias=True)

        data = body["data"]
        assert data["categorized"]["overdue"][0]["daysOverdue"] == 4
        assert data["categorized"]["overdue"][0]["urgency"] == "critical"
        assert data["categorized"]["thisWeek"] == []
        assert data["summary"] == {
            "totalUpcoming": 0,
            "totalOverdue": 1,
            "byFrequency": {},
            "byStation": {},
        }
        assert data["period"] == {"from": "2024-03-10", "to": "2024-03-17", "days": 7}


class TestRotationCountsUseCase:
    async def test_counts_active_wheels(self, mock_wheel_store, tenant, sample_wheel):
        mock_wheel_store.list_assets.return_value = [
            sample_wheel.model_copy(update={"next_rotation_due": TODAY}),
            sample_wheel.model_copy(update={"id": "w2", "next_rotation_due": TODAY - timedelta(days=1)}),
        ]
        use_case = RotationCountsUseCase(wheel_store=mock_wheel_store)

        counts = await use_case.execute(tenant, today=TODAY)

        mock_wheel_store.list_assets.assert_awaited_once_with("company-a", is_active=True)
        body = use_case.to_response(counts).model_dump(by_alias=True)
        assert body["data"]["today"] == 1
        assert body["data"]["overdue"] == 1
        assert body["data"]["totalActive"] == 2
        assert body["data"]["frequencyBreakdown"] == {"monthly": 2}
        assert use_case.to_today_response(counts).count == 1


class TestListActivitiesUseCase:
    async def test_pagination(self, tenant):
        store = AsyncMock()
        store.list_activities.return_value = [
            UserActivity(
                id="a1",
                company_id="company-a",
                user_id="user-1",
                action=ActivityAction.ROTATED_WHEEL,
                resource_title="Rotated wheel WSN-42 from 0° to 90°",
            )
        ]
        store.count.return_value = 41
        use_case = ListActivitiesUseCase(activity_store=store)

        page = await use_case.execute(tenant, page=3, limit=20, action="ROTATED_WHEEL")

        store.list_activities.assert_awaited_once_with(
            "company-a", limit=20, offset=40, action="ROTATED_WHEEL", resource_type=None
        )
        body = use_case.to_response(page).model_dump(by_alias=True)
        assert body["pagination"] == {"page": 3, "limit": 20, "total": 41, "totalPages": 3}
        assert body["data"][0]["action"] == "ROTATED_WHEEL"
