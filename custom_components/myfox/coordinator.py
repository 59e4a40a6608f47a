"""Coordinator for Myfox integration."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import TYPE_CHECKING

import httpx
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from . import api
from .const import DEFAULT_POLL_INTERVAL, DOMAIN
from .models import AlarmState, Site, TemperatureSensor

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

_LOGGER = logging.getLogger(__name__)


@dataclass
class MyfoxSiteData:
    """Polled state of one Myfox site."""

    alarm_state: AlarmState | None = None
    temperature_sensors: list[TemperatureSensor] = field(default_factory=list)


class MyfoxSiteCoordinator(DataUpdateCoordinator[MyfoxSiteData]):
    """Coordinator that polls the alarm and temperature sensors of a site."""

    def __init__(
        self,
        hass: HomeAssistant,
        client: api.MyfoxApiClient,
        site: Site,
    ) -> None:
        super().__init__(
            hass,
            _LOGGER,
            name=f"{DOMAIN}_{site['siteId']}",
            update_interval=timedelta(seconds=DEFAULT_POLL_INTERVAL),
        )
        self.client = client
        self.site = site
        self.data = MyfoxSiteData()

    @property
    def site_id(self) -> str:
        return self.site["siteId"]

    async def _async_update_data(self) -> MyfoxSiteData:
        try:
            alarm_state, sensors = await asyncio.gather(
                self.client.async_get_alarm_state(self.site_id),
                self.client.async_get_temperature_sensors(self.site_id),
            )
        except api.MyfoxConfigurationError as err:
            raise UpdateFailed(f"Configuration error while polling site: {err}") from err
        except api.MyfoxApiAuthError as err:
            raise UpdateFailed(f"Authentication error while polling site: {err}") from err
        except api.MyfoxApiClientError as err:
            raise UpdateFailed(f"API error while polling site: {err}") from err
        except httpx.RequestError as err:
            raise UpdateFailed(f"Connection error while polling site: {err}") from err

        _LOGGER.debug(
            "Polled site %s: alarm %s, %d temperature sensors",
            self.site_id,
            alarm_state.get("statusLabel") if alarm_state else None,
            len(sensors),
        )
        return MyfoxSiteData(alarm_state=alarm_state, temperature_sensors=sensors)

    def get_temperature_sensor(self, device_id: str) -> TemperatureSensor | None:
        """Return the last polled entry of a temperature sensor."""
        return api.find_temperature_sensor(self.data.temperature_sensors, device_id)
