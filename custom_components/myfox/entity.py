"""Base entity for Myfox devices, groups and scenarios."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.entity import Entity

from .api import MyfoxApiAuthError, MyfoxApiClientError, MyfoxConfigurationError
from .const import DOMAIN
from .models import MyfoxTarget, is_group, target_key

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from .api import MyfoxApiClient

_LOGGER = logging.getLogger(__name__)

MANUFACTURER = "Myfox"


class MyfoxEntity(Entity):
    """Entity bound to one Myfox device or group of a site."""

    _attr_has_entity_name = True
    _attr_name = None
    _attr_should_poll = False
    _target_kind: str | None = None

    def __init__(
        self,
        client: MyfoxApiClient,
        site_id: str,
        target: MyfoxTarget,
    ) -> None:
        self._client = client
        self._site_id = site_id
        self._target = target
        self._attr_unique_id = f"{site_id}_{target_key(target, self._target_kind)}"
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, self._attr_unique_id)},
            name=target.get("label"),
            manufacturer=MANUFACTURER,
            model="Group" if is_group(target) else target.get("modelLabel"),
        )

    async def _async_execute_command(self, command: Awaitable[Any]) -> bool:
        return await async_execute_command(self.entity_id, command)


async def async_execute_command(entity_id: str | None, command: Awaitable[Any]) -> bool:
    """Await a command sent on behalf of an entity and log its failure.

    Returns:
        True if the command succeeded, False otherwise.

    """
    try:
        await command
    except (MyfoxApiAuthError, MyfoxConfigurationError):
        _LOGGER.exception(
            "Authentication error for %s. Please re-configure the integration.",
            entity_id,
        )
    except MyfoxApiClientError:
        _LOGGER.exception("API error while sending command to %s", entity_id)
    except httpx.RequestError:
        _LOGGER.exception("Connection error while sending command to %s", entity_id)
    else:
        return True
    return False
