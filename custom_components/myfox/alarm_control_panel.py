"""Alarm control panel entities for Myfox sites."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from homeassistant.components.alarm_control_panel import (
    AlarmControlPanelEntity,
    AlarmControlPanelEntityFeature,
    AlarmControlPanelState,
)
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN, SECURITY_ARMED, SECURITY_DISARMED, SECURITY_PARTIAL
from .coordinator import MyfoxSiteCoordinator
from .entity import MANUFACTURER, async_execute_command

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

_LOGGER = logging.getLogger(__name__)

ALARM_STATE_MAP = {
    SECURITY_ARMED: AlarmControlPanelState.ARMED_AWAY,
    SECURITY_PARTIAL: AlarmControlPanelState.ARMED_HOME,
    SECURITY_DISARMED: AlarmControlPanelState.DISARMED,
}


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up one alarm control panel per Myfox site."""
    entry_data = hass.data[DOMAIN][entry.entry_id]
    async_add_entities(
        MyfoxAlarmControlPanel(site_entry["coordinator"])
        for site_entry in entry_data["sites"]
    )


class MyfoxAlarmControlPanel(
    CoordinatorEntity[MyfoxSiteCoordinator], AlarmControlPanelEntity
):
    """Security system of a Myfox site."""

    _attr_has_entity_name = True
    _attr_name = None
    _attr_code_arm_required = False
    _attr_supported_features = (
        AlarmControlPanelEntityFeature.ARM_AWAY
        | AlarmControlPanelEntityFeature.ARM_HOME
    )

    def __init__(self, coordinator: MyfoxSiteCoordinator) -> None:
        super().__init__(coordinator)
        site = coordinator.site
        self._attr_unique_id = f"{coordinator.site_id}_alarm"
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, coordinator.site_id)},
            name=site.get("label"),
            manufacturer=MANUFACTURER,
            model=site.get("brand"),
        )

    @property
    def alarm_state(self) -> AlarmControlPanelState | None:
        """Return the state reported by the last poll."""
        alarm_state = self.coordinator.data.alarm_state
        if not alarm_state:
            return None
        label = alarm_state.get("statusLabel")
        if label not in ALARM_STATE_MAP:
            _LOGGER.warning("Unknown security level: %s", label)
            return None
        return ALARM_STATE_MAP[label]

    async def _async_set_security_level(self, security_level: str) -> None:
        if await async_execute_command(
            self.entity_id,
            self.coordinator.client.async_set_alarm_state(
                self.coordinator.site_id, security_level
            ),
        ):
            await self.coordinator.async_request_refresh()

    async def async_alarm_disarm(self, code: str | None = None) -> None:  # noqa: ARG002
        await self._async_set_security_level(SECURITY_DISARMED)

    async def async_alarm_arm_home(self, code: str | None = None) -> None:  # noqa: ARG002
        await self._async_set_security_level(SECURITY_PARTIAL)

    async def async_alarm_arm_away(self, code: str | None = None) -> None:  # noqa: ARG002
        await self._async_set_security_level(SECURITY_ARMED)
