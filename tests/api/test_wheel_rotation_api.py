"""API tests for wheel rotation endpoints."""

from datetime import UTC, date, datetime
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from mro.api.dependencies import (
    get_get_wheel_rotation_use_case,
    get_list_wheel_rotations_use_case,
    get_record_rotation_use_case,
    get_register_wheel_use_case,
    get_rotation_counts_use_case,
    get_upcoming_rotations_use_case,
    get_update_wheel_rotation_use_case,
)
from mro.api.main import app
from mro.application.use_cases import (
    GetWheelRotationUseCase,
    ListUpcomingRotationsUseCase,
    ListWheelRotationsUseCase,
    RecordRotationUseCase,
    RegisterWheelUseCase,
    RotationCountsUseCase,
    UpdateWheelRotationUseCase,
)
from mro.config.settings import ScheduleSettings
from mro.core.entities import RotationHistory
from mro.core.interfaces.wheel_rotation_store import RotationResult


@pytest.fixture
def mock_wheel_store(sample_wheel):
    store = AsyncMock()
    store.create.side_effect = lambda asset: asset.model_copy(update={"id": "wheel-new"})
    store.get.return_value = sample_wheel
    store.list_assets.return_value = [sample_wheel]
    store.list_due_until.return_value = [sample_wheel]
    store.update_details.side_effect = lambda asset: asset
    return store


@pytest.fixture
async def wheel_client(mock_wheel_store, mock_dispatcher):
    overrides = {
        get_register_wheel_use_case: lambda: RegisterWheelUseCase(
            wheel_store=mock_wheel_store, dispatcher=mock_dispatcher
        ),
        get_get_wheel_rotation_use_case: lambda: GetWheelRotationUseCase(
            wheel_store=mock_wheel_store
        ),
        get_list_wheel_rotations_use_case: lambda: ListWheelRotationsUseCase(
            wheel_store=mock_wheel_store
        ),
        get_update_wheel_rotation_use_case: lambda: UpdateWheelRotationUseCase(
            wheel_store=mock_wheel_store, dispatcher=mock_dispatcher
        ),
        get_record_rotation_use_case: lambda: RecordRotationUseCase(
            wheel_store=mock_wheel_store, dispatcher=mock_dispatcher
        ),
        get_upcoming_rotations_use_case: lambda: ListUpcomingRotationsUseCase(
            wheel_store=mock_wheel_store, schedule_settings=ScheduleSettings()
        ),
        get_rotation_counts_use_case: lambda: RotationCountsUseCase(wheel_store=mock_wheel_store),
    }
    app.dependency_overrides.update(overrides)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    for dependency in overrides:
        app.dependency_overrides.pop(dependency, None)


class TestWheelRotationAPI:
    async def test_requires_auth(self, wheel_client: AsyncClient):
        response = await wheel_client.get("/api/wheel-rotation")
        assert response.status_code == 401

    async def test_register_schedules_first_rotation(
        self, wheel_client: AsyncClient, auth_headers, mock_dispatcher
    ):
        response = await wheel_client.post(
            "/api/wheel-rotation",
            json={
                "arrivalDate": "2024-01-31",
                "station": "DXB",
                "airline": "Example Air",
                "wheelPartNumber": "WPN-7",
                "wheelSerialNumber": "WSN-99",
                "rotationFrequency": "monthly",
            },
            headers=auth_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["id"] == "wheel-new"
        assert body["currentPosition"] == 0
        assert body["lastRotationDate"] == "2024-01-31"
        assert body["nextRotationDue"] == "2024-02-29"
        mock_dispatcher.publish.assert_called_once()

    async def test_register_rejects_unknown_frequency(
        self, wheel_client: AsyncClient, auth_headers
    ):
        response = await wheel_client.post(
            "/api/wheel-rotation",
            json={
                "arrivalDate": "2024-01-31",
                "station": "DXB",
                "airline": "Example Air",
                "wheelPartNumber": "WPN-7",
                "wheelSerialNumber": "WSN-99",
                "rotationFrequency": "fortnightly",
            },
            headers=auth_headers,
        )
        assert response.status_code == 422

    async def test_list_passes_active_filter(
        self, wheel_client: AsyncClient, auth_headers, mock_wheel_store
    ):
        response = await wheel_client.get(
            "/api/wheel-rotation", params={"active": "true"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert [w["wheelSerialNumber"] for w in response.json()] == ["WSN-42"]
        mock_wheel_store.list_assets.assert_awaited_once_with("company-a", is_active=True)

    async def test_get_unknown_wheel_is_404(
        self, wheel_client: AsyncClient, auth_headers, mock_wheel_store
    ):
        mock_wheel_store.get.return_value = None

        response = await wheel_client.get("/api/wheel-rotation/nope", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["errorCode"] == "WHEEL_ROTATION_NOT_FOUND"

    async def test_update_changes_station(
        self, wheel_client: AsyncClient, auth_headers, mock_wheel_store
    ):
        response = await wheel_client.put(
            "/api/wheel-rotation/wheel-1",
            json={"station": "AUH"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["station"] == "AUH"
        saved = mock_wheel_store.update_details.await_args.args[0]
        assert saved.current_position == 0

    async def test_rotate(
        self, wheel_client: AsyncClient, auth_headers, mock_wheel_store, sample_wheel
    ):
        history = RotationHistory(
            id="hist-1",
            company_id="company-a",
            wheel_rotation_id="wheel-1",
            rotation_date=date(2024, 2, 1),
            previous_position=0,
            new_position=90,
            performed_by="Dana Mechanic",
            created_at=datetime(2024, 2, 1, 10, 0, tzinfo=UTC),
        )
        mock_wheel_store.record_rotation.return_value = RotationResult(
            asset=sample_wheel.model_copy(
                update={
                    "current_position": 90,
                    "last_rotation_date": date(2024, 2, 1),
                    "next_rotation_due": date(2024, 3, 1),
                }
            ),
            history=history,
        )

        response = await wheel_client.post(
            "/api/wheel-rotation/wheel-1/rotate",
            json={"newPosition": 90, "rotationDate": "2024-02-01"},
            headers=auth_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["previousPosition"] == 0
        assert body["newPosition"] == 90
        kwargs = mock_wheel_store.record_rotation.await_args.kwargs
        assert kwargs["performed_by"] == "Dana Mechanic"

    @pytest.mark.parametrize("position", [360, -1, "north"])
    async def test_rotate_invalid_position(
        self, wheel_client: AsyncClient, auth_headers, mock_wheel_store, position
    ):
        response = await wheel_client.post(
            "/api/wheel-rotation/wheel-1/rotate",
            json={"newPosition": position},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["errorCode"] == "INVALID_ROTATION"
        mock_wheel_store.record_rotation.assert_not_awaited()

    async def test_reader_cannot_rotate(self, wheel_client: AsyncClient, make_headers):
        response = await wheel_client.post(
            "/api/wheel-rotation/wheel-1/rotate",
            json={"newPosition": 90},
            headers=make_headers(privilege="reader-only"),
        )
        assert response.status_code == 403


class TestWheelScheduleAPI:
    async def test_upcoming_is_not_captured_by_wheel_id(
        self, wheel_client: AsyncClient, auth_headers, mock_wheel_store
    ):
        with patch(
            "mro.application.use_cases.list_upcoming_rotations.utc_today",
            return_value=date(2024, 2, 3),
        ):
            response = await wheel_client.get(
                "/api/wheel-rotation/upcoming", params={"days": 7}, headers=auth_headers
            )

        assert response.status_code == 200
        data = response.json()["data"]
        [overdue] = data["categorized"]["overdue"]
        assert overdue["daysOverdue"] == 2
        assert data["summary"]["totalOverdue"] == 1
        assert data["period"] == {"from": "2024-02-03", "to": "2024-02-10", "days": 7}
        mock_wheel_store.get.assert_not_awaited()
        mock_wheel_store.list_due_until.assert_awaited_once_with("company-a", date(2024, 2, 10))

    async def test_upcoming_rejects_negative_days(self, wheel_client: AsyncClient, auth_headers):
        response = await wheel_client.get(
            "/api/wheel-rotation/upcoming", params={"days": -1}, headers=auth_headers
        )
        assert response.status_code == 422

    async def test_today_count(self, wheel_client: AsyncClient, auth_headers):
        with patch(
            "mro.application.use_cases.rotation_counts.utc_today",
            return_value=date(2024, 2, 1),
        ):
            response = await wheel_client.get(
                "/api/wheel-rotation/today-count", headers=auth_headers
            )

        assert response.status_code == 200
        assert response.json() == {"success": True, "count": 1}

    async def test_frequency_counts(self, wheel_client: AsyncClient, auth_headers):
        with patch(
            "mro.application.use_cases.rotation_counts.utc_today",
            return_value=date(2024, 1, 15),
        ):
            response = await wheel_client.get(
                "/api/wheel-rotation/frequency-counts", headers=auth_headers
            )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["totalActive"] == 1
        assert data["today"] == 0
        assert data["overdue"] == 0
        assert data["frequencyBreakdown"] == {"monthly": 1}
