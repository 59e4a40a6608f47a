"""Cover entities for Myfox shutters and shutter groups."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from homeassistant.components.cover import (
    CoverDeviceClass,
    CoverEntity,
    CoverEntityFeature,
)
from homeassistant.const import STATE_CLOSED, STATE_OPEN
from homeassistant.helpers.restore_state import RestoreEntity

from .const import DOMAIN
from .entity import MyfoxEntity

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up cover entities for Myfox shutters."""
    entry_data = hass.data[DOMAIN][entry.entry_id]
    client = entry_data["client"]

    entities = [
        MyfoxShutterCover(client, site_entry["site"]["siteId"], target)
        for site_entry in entry_data["sites"]
        for target in site_entry["shutters"]
    ]
    async_add_entities(entities)


class MyfoxShutterCover(MyfoxEntity, CoverEntity, RestoreEntity):
    """Cover for a Myfox shutter or shutter group.

    Shutters only accept open and close commands and never report their
    position, so the state is the last one commanded.
    """

    _attr_device_class = CoverDeviceClass.SHUTTER
    _attr_supported_features = CoverEntityFeature.OPEN | CoverEntityFeature.CLOSE
    _attr_assumed_state = True
    _attr_is_closed: bool | None = None

    async def async_added_to_hass(self) -> None:
        """Restore the last commanded position."""
        await super().async_added_to_hass()
        last_state = await self.async_get_last_state()
        if last_state and last_state.state in (STATE_OPEN, STATE_CLOSED):
            self._attr_is_closed = last_state.state == STATE_CLOSED
            _LOGGER.debug("Restored state for %s", self.entity_id)

    async def _async_set_position(self, open_: bool) -> None:  # noqa: FBT001
        if await self._async_execute_command(
            self._client.async_set_shutter_position(self._site_id, self._target, open_)
        ):
            self._attr_is_closed = not open_
            self.async_write_ha_state()

    async def async_open_cover(self, **kwargs: Any) -> None:  # noqa: ANN401, ARG002
        await self._async_set_position(True)  # noqa: FBT003

    async def async_close_cover(self, **kwargs: Any) -> None:  # noqa: ANN401, ARG002
        await self._async_set_position(False)  # noqa: FBT003
