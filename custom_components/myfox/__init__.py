from __future__ import annotations

import logging

import httpx
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_CLIENT_ID, CONF_CLIENT_SECRET, Platform
from homeassistant.core import HomeAssistant

from . import api
from .api import create_session_client
from .const import CONF_DEBUG, CONF_DEBUG_PAYLOAD, CONF_REFRESH_TOKEN, DOMAIN
from .coordinator import MyfoxSiteCoordinator

_LOGGER = logging.getLogger(__name__)

PLATFORMS = [
    Platform.ALARM_CONTROL_PANEL,
    Platform.COVER,
    Platform.SCENE,
    Platform.SENSOR,
    Platform.SWITCH,
]


def create_client(
    hass: HomeAssistant,
    entry: ConfigEntry,
    session: httpx.AsyncClient,
) -> api.MyfoxApiClient:
    """Build the API client of an entry.

    Rotated refresh tokens are written back to the config entry so the next
    start uses the latest one.
    """

    def _persist_refresh_token(refresh_token: str) -> None:
        _LOGGER.debug("Storing rotated refresh token for entry %s", entry.entry_id)
        hass.config_entries.async_update_entry(
            entry, data={**entry.data, CONF_REFRESH_TOKEN: refresh_token}
        )

    debug = entry.data.get(CONF_DEBUG, False)
    token_manager = api.MyfoxTokenManager(
        session,
        entry.data.get(CONF_CLIENT_ID),
        entry.data.get(CONF_CLIENT_SECRET),
        entry.data.get(CONF_REFRESH_TOKEN),
        _persist_refresh_token,
        debug=debug,
    )
    return api.MyfoxApiClient(
        session,
        token_manager,
        debug=debug,
        debug_payload=entry.data.get(CONF_DEBUG_PAYLOAD, False),
    )


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    _LOGGER.info("Setting up Myfox integration for entry %s", entry.entry_id)

    session = create_session_client(hass)
    client = create_client(hass, entry, session)

    try:
        sites = await client.async_get_sites()
        _LOGGER.info("Successfully retrieved %d sites from Myfox API", len(sites))

        site_entries = []
        for site in sites:
            site_id = site["siteId"]
            coordinator = MyfoxSiteCoordinator(hass, client, site)
            await coordinator.async_config_entry_first_refresh()
            site_entries.append(
                {
                    "site": site,
                    "coordinator": coordinator,
                    "electrics": await client.async_get_electrics(site_id),
                    "shutters": await client.async_get_shutters(site_id),
                    "scenarios": await client.async_get_scenarios(site_id),
                }
            )
    except api.MyfoxConfigurationError as err:
        _LOGGER.error("Invalid configuration for entry %s: %s", entry.entry_id, err)
        return False
    except api.MyfoxApiAuthError as err:
        _LOGGER.warning(
            "Authentication failed for entry %s: %s", entry.entry_id, str(err)
        )
        return False
    except api.MyfoxApiClientError as err:
        _LOGGER.error("API client error for entry %s: %s", entry.entry_id, str(err))
        return False
    except httpx.ConnectError as err:
        _LOGGER.error("Connection error for entry %s: %s", entry.entry_id, str(err))
        return False
    except httpx.TimeoutException as err:
        _LOGGER.error("Timeout error for entry %s: %s", entry.entry_id, str(err))
        return False
    except httpx.RequestError as err:
        _LOGGER.error("Request error for entry %s: %s", entry.entry_id, str(err))
        return False
    except Exception as err:
        _LOGGER.exception(
            "Unexpected error during setup for entry %s: %s", entry.entry_id, err
        )
        return False

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = {
        "client": client,
        "sites": site_entries,
    }
    _LOGGER.debug("Stored data for entry %s: %d sites", entry.entry_id, len(sites))

    try:
        await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
        _LOGGER.info("Successfully setup Myfox integration for entry %s", entry.entry_id)
        return True
    except Exception as err:
        _LOGGER.error("Failed to setup platforms for entry %s: %s", entry.entry_id, err)
        return False


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    _LOGGER.info("Unloading Myfox integration for entry %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        if DOMAIN in hass.data and entry.entry_id in hass.data[DOMAIN]:
            hass.data[DOMAIN].pop(entry.entry_id)
            _LOGGER.debug("Cleaned up data for entry %s", entry.entry_id)
        _LOGGER.info(
            "Successfully unloaded Myfox integration for entry %s", entry.entry_id
        )
    else:
        _LOGGER.warning("Failed to unload some platforms for entry %s", entry.entry_id)

    return unload_ok
