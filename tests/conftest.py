"""Global pytest fixtures for the admin dashboard core.

This module provides shared fixtures for testing including:
- A fixed reference day for date contracts
- Default validation settings
- Backend payloads for ad requests in each lifecycle stage
"""

from datetime import date, timedelta
from typing import Any

import pytest

from dashboard.ads.config import AdSettings

TODAY = date(2025, 6, 15)


@pytest.fixture
def today() -> date:
    """Reference day used as "today" by date checks."""
    return TODAY


@pytest.fixture
def yesterday(today: date) -> date:
    return today - timedelta(days=1)


@pytest.fixture
def tomorrow(today: date) -> date:
    return today + timedelta(days=1)


@pytest.fixture
def settings() -> AdSettings:
    """Validation limits with their default values."""
    return AdSettings()


def make_ad_payload(status: str = "SUBMITTED", **overrides: Any) -> dict[str, Any]:
    """Build an ad request as the backend serializes it."""
    payload: dict[str, Any] = {
        "id": "6f1c2e8a-0b4d-4d8e-9a51-3f7c2a9e1b10",
        "status": status,
        "user": {
            "id": "u-1",
            "email": "advertiser@example.com",
            "username": "advertiser",
            "phone_number": None,
        },
        "full_name": "Sita Sharma",
        "contact_number": "9800000000",
        "title": None,
        "description": None,
        "duration_days": None,
        "admin_price": None,
        "submitted_at": "2025-06-01T09:30:00Z",
        "start_date": None,
        "end_date": None,
        "stations": [],
        "ad_content": None,
        "transaction": None,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def ad_payload():
    """Factory for backend ad request payloads."""
    return make_ad_payload
