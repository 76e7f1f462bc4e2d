"""Shared fixtures for API tests."""

from collections.abc import Callable

import pytest

from mro.config import get_settings
from mro.infrastructure.auth import issue_token


@pytest.fixture
def make_headers() -> Callable[..., dict[str, str]]:
    """Build Authorization headers for a caller of the given company/privilege."""

    def _make(
        privilege: str = "user",
        company_id: str = "company-a",
        user_id: str = "user-1",
    ) -> dict[str, str]:
        token = issue_token(
            get_settings().auth,
            user_id=user_id,
            company_id=company_id,
            privilege=privilege,
            name="Dana Mechanic",
        )
        return {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def auth_headers(make_headers) -> dict[str, str]:
    return make_headers()
