"""
Configuration flow for Myfox integration.

This module handles the setup and configuration of the Myfox
integration through Home Assistant's config flow system.
"""

import logging
from typing import Any

import httpx
import voluptuous as vol
from homeassistant.config_entries import ConfigFlow, ConfigFlowResult
from homeassistant.const import CONF_CLIENT_ID, CONF_CLIENT_SECRET
from homeassistant.helpers.httpx_client import get_async_client

from . import api
from .const import (
    CONF_DEBUG,
    CONF_DEBUG_PAYLOAD,
    CONF_REFRESH_TOKEN,
    DOMAIN,
    ERROR_API_ERROR,
    ERROR_CANNOT_CONNECT,
    ERROR_INVALID_AUTH,
    ERROR_INVALID_CONFIG,
    ERROR_TIMEOUT,
    ERROR_UNKNOWN,
)

_LOGGER = logging.getLogger(__name__)

STEP_USER_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_CLIENT_ID): str,
        vol.Required(CONF_CLIENT_SECRET): str,
        vol.Required(CONF_REFRESH_TOKEN): str,
        vol.Optional(CONF_DEBUG, default=False): bool,
        vol.Optional(CONF_DEBUG_PAYLOAD, default=False): bool,
    }
)


class MyfoxConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle configuration flow for Myfox integration."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """
        Handle the initial step of the config flow.

        The credentials are checked by listing the sites they give access
        to. The refresh token may be rotated by that check, so the entry
        stores the one held by the token manager afterwards.

        Args:
            user_input: User input data containing the API credentials.

        Returns:
            ConfigFlowResult indicating the next step or errors.

        """
        errors: dict[str, str] = {}

        if user_input is not None:
            client_id = user_input[CONF_CLIENT_ID]
            session = get_async_client(self.hass)
            token_manager = api.MyfoxTokenManager(
                session,
                client_id,
                user_input[CONF_CLIENT_SECRET],
                user_input[CONF_REFRESH_TOKEN],
            )
            client = api.MyfoxApiClient(session, token_manager)

            try:
                sites = await client.async_get_sites()
                _LOGGER.info("Successfully authenticated with Myfox API")

            except api.MyfoxConfigurationError as err:
                _LOGGER.warning(
                    "Invalid configuration (%s): %s", ERROR_INVALID_CONFIG, err
                )
                errors["base"] = ERROR_INVALID_CONFIG
            except api.MyfoxApiAuthError as err:
                _LOGGER.warning(
                    "Authentication failed (%s): %s", ERROR_INVALID_AUTH, err
                )
                errors["base"] = ERROR_INVALID_AUTH
            except httpx.ConnectError:
                _LOGGER.exception("Connection error (%s)", ERROR_CANNOT_CONNECT)
                errors["base"] = ERROR_CANNOT_CONNECT
            except httpx.TimeoutException:
                _LOGGER.exception("Timeout error (%s)", ERROR_TIMEOUT)
                errors["base"] = ERROR_TIMEOUT
            except api.MyfoxApiClientError:
                _LOGGER.exception("API client error (%s)", ERROR_API_ERROR)
                errors["base"] = ERROR_API_ERROR
            except Exception:
                _LOGGER.exception(
                    "Unexpected error during authentication (%s)",
                    ERROR_UNKNOWN,
                )
                errors["base"] = ERROR_UNKNOWN

            else:
                await self.async_set_unique_id(client_id)
                self._abort_if_unique_id_configured()

                labels = ", ".join(site["label"] for site in sites) or client_id
                return self.async_create_entry(
                    title=f"Myfox ({labels})",
                    data={
                        **user_input,
                        CONF_REFRESH_TOKEN: token_manager.refresh_token,
                    },
                )

        return self.async_show_form(
            step_id="user",
            data_schema=STEP_USER_DATA_SCHEMA,
            errors=errors,
        )
