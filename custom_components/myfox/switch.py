"""Switch entities for Myfox electric outlets and electric groups.

The Myfox API does not report the state of outlets, so the state shown is
the last one commanded, restored across restarts.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from homeassistant.components.switch import SwitchDeviceClass, SwitchEntity
from homeassistant.const import STATE_ON
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
    """Set up switch entities for Myfox electrics."""
    entry_data = hass.data[DOMAIN][entry.entry_id]
    client = entry_data["client"]

    entities = [
        MyfoxElectricSwitch(client, site_entry["site"]["siteId"], target)
        for site_entry in entry_data["sites"]
        for target in site_entry["electrics"]
    ]
    async_add_entities(entities)


class MyfoxElectricSwitch(MyfoxEntity, SwitchEntity, RestoreEntity):
    """Switch for a Myfox electric outlet or electric group."""

    _attr_device_class = SwitchDeviceClass.OUTLET
    _attr_assumed_state = True
    _attr_is_on = False

    async def async_added_to_hass(self) -> None:
        """Restore the last commanded state."""
        await super().async_added_to_hass()
        if last_state := await self.async_get_last_state():
            self._attr_is_on = last_state.state == STATE_ON
            _LOGGER.debug("Restored state for %s", self.entity_id)

    async def _async_switch(self, on: bool) -> None:  # noqa: FBT001
        if await self._async_execute_command(
            self._client.async_switch_electric(self._site_id, self._target, on)
        ):
            self._attr_is_on = on
            self.async_write_ha_state()

    async def async_turn_on(self, **kwargs: Any) -> None:  # noqa: ANN401, ARG002
        await self._async_switch(True)  # noqa: FBT003

    async def async_turn_off(self, **kwargs: Any) -> None:  # noqa: ANN401, ARG002
        await self._async_switch(False)  # noqa: FBT003
