"""Pytest configuration and fixtures."""

from datetime import UTC, date, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from mro.application.activity_dispatcher import ActivityDispatcher
from mro.core.entities import StockItem, TenantContext, UsageRecord, WheelRotationAsset


@pytest.fixture
def tenant() -> TenantContext:
    """A regular user acting for company A."""
    return TenantContext(
        user_id="user-1",
        company_id="company-a",
        privilege="user",
        user_name="Dana Mechanic",
        email="dana@example.com",
    )


@pytest.fixture
def other_tenant() -> TenantContext:
    """A user of a different company."""
    return TenantContext(user_id="user-9", company_id="company-b", user_name="Other Co")


@pytest.fixture
def mock_dispatcher() -> MagicMock:
    """Dispatcher stand-in that records published activities."""
    dispatcher = MagicMock(spec=ActivityDispatcher)
    dispatcher.publish.return_value = True
    return dispatcher


@pytest.fixture
def mock_activity_store() -> AsyncMock:
    store = AsyncMock()
    store.add.side_effect = lambda activity: activity
    return store


@pytest.fixture
def sample_stock_item() -> StockItem:
    now = datetime(2024, 3, 1, 8, 0, tzinfo=UTC)
    return StockItem(
        id="item-1",
        company_id="company-a",
        part_no="PN-100",
        serial_no="SN-1",
        description="Brake wear pin",
        quantity=10,
        unit="EA",
        location="Bin A1",
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def sample_usage_record() -> UsageRecord:
    return UsageRecord(
        id="usage-1",
        company_id="company-a",
        stock_item_id="item-1",
        used_quantity=4,
        remaining_quantity=6,
        used_by="user-1",
        used_by_name="Dana Mechanic",
        purpose="A-check",
        used_at=datetime(2024, 3, 2, 9, 30, tzinfo=UTC),
    )


@pytest.fixture
def sample_wheel() -> WheelRotationAsset:
    now = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
    return WheelRotationAsset(
        id="wheel-1",
        company_id="company-a",
        arrival_date=date(2024, 1, 1),
        station="DXB",
        airline="Example Air",
        wheel_part_number="WPN-7",
        wheel_serial_number="WSN-42",
        rotation_frequency="monthly",
        current_position=0,
        last_rotation_date=date(2024, 1, 1),
        next_rotation_due=date(2024, 2, 1),
        created_at=now,
        updated_at=now,
    )
