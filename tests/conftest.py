"""Pytest configuration and fixtures for Myfox tests."""

from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
import pytest

from custom_components.myfox import api
from custom_components.myfox.models import AccessToken

CLIENT_ID = "test_client_id"
CLIENT_SECRET = "test_client_secret"
REFRESH_TOKEN = "test_refresh_token"
ACCESS_TOKEN = "test_access_token"
SITE_ID = "12345"


def create_token_manager(
    session: httpx.AsyncClient,
    *,
    valid: bool = True,
    **kwargs: Any,
) -> api.MyfoxTokenManager:
    """Create a token manager, optionally holding a valid access token.

    Args:
        session: HTTP client session.
        valid: Seed the manager with an access token expiring in one hour.
        **kwargs: Overrides for the manager's constructor arguments.

    Returns:
        A MyfoxTokenManager instance.

    """
    arguments = {
        "client_id": CLIENT_ID,
        "client_secret": CLIENT_SECRET,
        "refresh_token": REFRESH_TOKEN,
        **kwargs,
    }
    manager = api.MyfoxTokenManager(session, **arguments)
    if valid:
        # Accessing private member for testing purposes
        manager._access_token = AccessToken(
            token=ACCESS_TOKEN,
            expire_at=datetime.now(UTC) + timedelta(hours=1),
        )
    return manager


def create_client(session: httpx.AsyncClient, **kwargs: Any) -> api.MyfoxApiClient:
    """Create an API client whose token needs no refresh."""
    return api.MyfoxApiClient(session, create_token_manager(session), **kwargs)


def resource_url(path: str) -> str:
    """Return the full URL of a resource path called with the test token."""
    return f"{api.BASE_URL}{path}?access_token={ACCESS_TOKEN}"


def envelope(payload: Any) -> dict[str, Any]:
    """Wrap a payload in a successful Myfox envelope."""
    return {"status": "OK", "timestamp": 1700000000, "payload": payload}


@pytest.fixture
def sample_token_response() -> dict[str, Any]:
    """Fixture providing a sample token endpoint response."""
    return {
        "access_token": "new_access_token",
        "expires_in": 3600,
        "token_type": "bearer",
        "scope": None,
        "refresh_token": "new_refresh_token",
    }


@pytest.fixture
def sample_sites() -> list[dict[str, Any]]:
    """Fixture providing the items of a site listing."""
    return [
        {"siteId": SITE_ID, "label": "Home", "brand": "myfox", "timezone": "Europe/Paris"},
    ]


@pytest.fixture
def sample_socket_devices() -> list[dict[str, Any]]:
    """Fixture providing the items of an electric outlet listing."""
    return [
        {"deviceId": "101", "label": "Lamp", "modelId": 9, "modelLabel": "Myfox Socket"},
        {"deviceId": "102", "label": "Heater", "modelId": 9, "modelLabel": "Myfox Socket"},
    ]


@pytest.fixture
def sample_electric_groups() -> list[dict[str, Any]]:
    """Fixture providing the items of an electric group listing."""
    return [
        {"groupId": "201", "label": "Living room", "type": "electric", "devices": []},
    ]


@pytest.fixture
def sample_temperature_sensors() -> list[dict[str, Any]]:
    """Fixture providing the items of a temperature sensor listing."""
    return [
        {
            "deviceId": "301",
            "label": "Hall",
            "modelLabel": "Myfox Temperature Sensor",
            "lastTemperature": 19.5,
            "lastTemperatureAt": "2024-01-01T10:00:00Z",
        },
        {
            "deviceId": "302",
            "label": "Bedroom",
            "modelLabel": "Myfox Temperature Sensor",
            "lastTemperature": 21.0,
            "lastTemperatureAt": "2024-01-01T10:00:00Z",
        },
    ]


@pytest.fixture
def sample_scenarios() -> list[dict[str, Any]]:
    """Fixture providing the items of a scenario listing."""
    return [
        {"scenarioId": "401", "label": "Good night", "typeLabel": "onDemand", "enabled": True},
        {"scenarioId": "402", "label": "Every morning", "typeLabel": "scheduled", "enabled": True},
        {"scenarioId": "403", "label": "Leaving", "typeLabel": "onDemand", "enabled": False},
    ]
