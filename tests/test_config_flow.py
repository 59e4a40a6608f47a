"""Tests for the Myfox Config Flow."""

from collections.abc import Iterator
from typing import Any
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest
from homeassistant.const import CONF_CLIENT_ID, CONF_CLIENT_SECRET
from homeassistant.data_entry_flow import FlowResultType

from conftest import CLIENT_ID, CLIENT_SECRET, REFRESH_TOKEN
from custom_components.myfox import api
from custom_components.myfox.config_flow import MyfoxConfigFlow
from custom_components.myfox.const import (
    CONF_DEBUG,
    CONF_DEBUG_PAYLOAD,
    CONF_REFRESH_TOKEN,
    ERROR_API_ERROR,
    ERROR_CANNOT_CONNECT,
    ERROR_INVALID_AUTH,
    ERROR_INVALID_CONFIG,
    ERROR_TIMEOUT,
    ERROR_UNKNOWN,
)

ROTATED_REFRESH_TOKEN = "rotated_refresh_token"


@pytest.fixture
def mock_hass() -> Mock:
    """Create a mock Home Assistant instance."""
    return Mock()


@pytest.fixture
def flow(mock_hass: Mock) -> MyfoxConfigFlow:
    """Create a MyfoxConfigFlow instance for testing."""
    flow_instance = MyfoxConfigFlow()
    flow_instance.hass = mock_hass
    flow_instance.async_set_unique_id = AsyncMock()
    flow_instance._abort_if_unique_id_configured = Mock()
    flow_instance.async_create_entry = Mock(
        return_value={"type": FlowResultType.CREATE_ENTRY},
    )
    flow_instance.async_show_form = Mock(return_value={"type": FlowResultType.FORM})
    return flow_instance


@pytest.fixture
def user_input() -> dict[str, Any]:
    """Create the data submitted in the user step."""
    return {
        CONF_CLIENT_ID: CLIENT_ID,
        CONF_CLIENT_SECRET: CLIENT_SECRET,
        CONF_REFRESH_TOKEN: REFRESH_TOKEN,
        CONF_DEBUG: False,
        CONF_DEBUG_PAYLOAD: False,
    }


@pytest.fixture
def mock_client() -> Iterator[Mock]:
    """Patch the API client and token manager built by the flow."""
    with (
        patch("custom_components.myfox.config_flow.get_async_client"),
        patch(
            "custom_components.myfox.api.MyfoxTokenManager"
        ) as mock_token_manager_cls,
        patch("custom_components.myfox.api.MyfoxApiClient") as mock_client_cls,
    ):
        mock_token_manager_cls.return_value.refresh_token = ROTATED_REFRESH_TOKEN
        client = mock_client_cls.return_value
        client.async_get_sites = AsyncMock(
            return_value=[{"siteId": "1", "label": "Home"}]
        )
        yield client


class TestMyfoxConfigFlowAsyncStepUser:
    """Tests for async_step_user method."""

    @pytest.mark.asyncio
    async def test_async_step_user_shows_form_when_no_input(
        self,
        flow: MyfoxConfigFlow,
    ) -> None:
        """Test that async_step_user shows form when no input provided."""
        result = await flow.async_step_user()
        flow.async_show_form.assert_called_once()
        assert flow.async_show_form.call_args.kwargs["errors"] == {}
        assert result["type"] == FlowResultType.FORM

    @pytest.mark.asyncio
    async def test_async_step_user_creates_entry_on_successful_validation(
        self,
        flow: MyfoxConfigFlow,
        user_input: dict[str, Any],
        mock_client: Mock,
    ) -> None:
        """Test that a successful site listing creates the entry."""
        result = await flow.async_step_user(user_input)

        assert result["type"] == FlowResultType.CREATE_ENTRY
        mock_client.async_get_sites.assert_awaited_once()
        flow.async_set_unique_id.assert_awaited_once_with(CLIENT_ID)
        flow._abort_if_unique_id_configured.assert_called_once()
        kwargs = flow.async_create_entry.call_args.kwargs
        assert kwargs["title"] == "Myfox (Home)"
        assert kwargs["data"][CONF_CLIENT_ID] == CLIENT_ID
        assert kwargs["data"][CONF_CLIENT_SECRET] == CLIENT_SECRET

    @pytest.mark.asyncio
    async def test_async_step_user_stores_rotated_refresh_token(
        self,
        flow: MyfoxConfigFlow,
        user_input: dict[str, Any],
        mock_client: Mock,  # noqa: ARG002
    ) -> None:
        """Test that the entry keeps the refresh token rotated by validation."""
        await flow.async_step_user(user_input)

        data = flow.async_create_entry.call_args.kwargs["data"]
        assert data[CONF_REFRESH_TOKEN] == ROTATED_REFRESH_TOKEN

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (api.MyfoxConfigurationError("client_id"), ERROR_INVALID_CONFIG),
            (api.MyfoxApiAuthError("Invalid refresh token"), ERROR_INVALID_AUTH),
            (httpx.ConnectError("Connection refused"), ERROR_CANNOT_CONNECT),
            (httpx.TimeoutException("Timed out"), ERROR_TIMEOUT),
            (api.MyfoxHttpError("getSites", 500, "Error"), ERROR_API_ERROR),
            (api.MyfoxApiError("getSites", "KO", {}), ERROR_API_ERROR),
            (RuntimeError("boom"), ERROR_UNKNOWN),
        ],
    )
    async def test_async_step_user_shows_error(
        self,
        flow: MyfoxConfigFlow,
        user_input: dict[str, Any],
        mock_client: Mock,
        error: Exception,
        expected: str,
    ) -> None:
        """Test that validation failures are reported on the form."""
        mock_client.async_get_sites.side_effect = error

        result = await flow.async_step_user(user_input)

        assert result["type"] == FlowResultType.FORM
        flow.async_create_entry.assert_not_called()
        assert flow.async_show_form.call_args.kwargs["errors"] == {"base": expected}
