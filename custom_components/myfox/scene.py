"""Scene entities for Myfox on-demand scenarios."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.components.scene import Scene

from .const import DOMAIN
from .entity import MyfoxEntity

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    entry_data = hass.data[DOMAIN][entry.entry_id]
    client = entry_data["client"]

    entities = [
        MyfoxScenarioScene(client, site_entry["site"]["siteId"], scenario)
        for site_entry in entry_data["sites"]
        for scenario in site_entry["scenarios"]
    ]
    async_add_entities(entities)


class MyfoxScenarioScene(MyfoxEntity, Scene):
    """Scene playing a Myfox on-demand scenario."""

    _target_kind = "scenario"

    async def async_activate(self, **kwargs: Any) -> None:  # noqa: ANN401, ARG002
        await self._async_execute_command(
            self._client.async_play_scenario(self._site_id, self._target)
        )
