"""Temperature sensor entities for Myfox sites."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorStateClass,
)
from homeassistant.const import UnitOfTemperature
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN
from .coordinator import MyfoxSiteCoordinator
from .entity import MANUFACTURER

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from .models import TemperatureSensor


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up temperature sensors found by the first poll of each site."""
    entry_data = hass.data[DOMAIN][entry.entry_id]
    async_add_entities(
        MyfoxTemperatureSensor(site_entry["coordinator"], sensor)
        for site_entry in entry_data["sites"]
        for sensor in site_entry["coordinator"].data.temperature_sensors
    )


class MyfoxTemperatureSensor(CoordinatorEntity[MyfoxSiteCoordinator], SensorEntity):
    """Last temperature recorded by a Myfox sensor."""

    _attr_has_entity_name = True
    _attr_name = None
    _attr_device_class = SensorDeviceClass.TEMPERATURE
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_native_unit_of_measurement = UnitOfTemperature.CELSIUS

    def __init__(
        self,
        coordinator: MyfoxSiteCoordinator,
        sensor: TemperatureSensor,
    ) -> None:
        super().__init__(coordinator)
        self._device_id = sensor["deviceId"]
        self._attr_unique_id = f"{coordinator.site_id}_device_{self._device_id}"
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, self._attr_unique_id)},
            name=sensor.get("label"),
            manufacturer=MANUFACTURER,
            model=sensor.get("modelLabel"),
        )

    @property
    def available(self) -> bool:
        return (
            super().available
            and self.coordinator.get_temperature_sensor(self._device_id) is not None
        )

    @property
    def native_value(self) -> float | None:
        sensor = self.coordinator.get_temperature_sensor(self._device_id)
        if sensor is None:
            return None
        return sensor.get("lastTemperature")
