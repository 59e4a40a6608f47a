"""API client for the Myfox cloud.

This module provides the OAuth2 token manager, the request executor that
unwraps Myfox response envelopes, and the client exposing one coroutine per
vendor resource operation.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
from homeassistant.core import HomeAssistant
from homeassistant.helpers.httpx_client import create_async_httpx_client

from .const import (
    ALARM_SECURITY_LEVELS,
    BASE_URL,
    REQUEST_TIMEOUT,
    SCENARIO_MODEL_LABEL,
    SCENARIO_ON_DEMAND,
    STATUS_OK,
    TOKEN_URL,
)
from .models import (
    AccessToken,
    AlarmState,
    Device,
    Group,
    MyfoxTarget,
    Scenario,
    Site,
    TemperatureSensor,
    TemperatureValue,
    empty_access_token,
    is_group,
)

_LOGGER = logging.getLogger(__name__)


class MyfoxApiClientError(Exception):
    """Base exception for Myfox API client errors."""


class MyfoxConfigurationError(MyfoxApiClientError):
    """Exception raised when a required credential is missing."""

    def __init__(self, field: str) -> None:
        super().__init__(f"[Configuration] missing {field.replace('_', ' ')}")
        self.field = field


class MyfoxApiAuthError(MyfoxApiClientError):
    """Exception raised when the token endpoint refuses a refresh."""


class MyfoxHttpError(MyfoxApiClientError):
    """Exception raised for a non-success HTTP status."""

    def __init__(self, action: str, status: int, status_text: str) -> None:
        super().__init__(f"{action} failed: HTTP {status} {status_text}")
        self.action = action
        self.status = status
        self.status_text = status_text


class MyfoxParseError(MyfoxApiClientError):
    """Exception raised when a response body is not valid JSON."""

    def __init__(self, action: str, body: str) -> None:
        super().__init__(f"{action} failed: response is not valid JSON")
        self.action = action
        self.body = body


class MyfoxApiError(MyfoxApiClientError):
    """Exception raised when the envelope status is not OK."""

    def __init__(self, action: str, status: Any, envelope: Any) -> None:
        super().__init__(f"{action} failed: API status {status}")
        self.action = action
        self.status = status
        self.envelope = envelope


def is_http_error(status: int) -> bool:
    """Check if HTTP status code lies outside the 2xx success range.

    Args:
        status: HTTP status code to check.

    Returns:
        True if status code is not in [200, 300), False otherwise.

    """
    return not 200 <= status < 300


def validate_http_status(action: str, response: httpx.Response) -> None:
    """Raise MyfoxHttpError if the response status is not a success.

    Args:
        action: Name of the operation, used in the error.
        response: HTTP response object to validate.

    Raises:
        MyfoxHttpError: If the status is outside the success range.

    """
    if not is_http_error(response.status_code):
        return
    raise MyfoxHttpError(action, response.status_code, response.reason_phrase)


def parse_json(
    action: str,
    response: httpx.Response,
    *,
    debug_payload: bool = False,
) -> Any:
    """Parse the response body as JSON.

    The raw body is logged when it cannot be decoded.

    Raises:
        MyfoxParseError: If the body is not valid JSON.

    """
    try:
        data = response.json()
    except ValueError as err:
        _LOGGER.error("Failed to parse JSON result of %s: %s", action, response.text)
        raise MyfoxParseError(action, response.text) from err

    if debug_payload:
        _LOGGER.debug("Parsed JSON result of %s: %s", action, data)
    return data


def is_api_error(data: Any) -> bool:
    """Check if a Myfox envelope reports a failure."""
    return not isinstance(data, dict) or data.get("status") != STATUS_OK


def extract_payload(action: str, data: Any) -> Any:
    """Unwrap a Myfox envelope.

    Args:
        action: Name of the operation, used in the error.
        data: Parsed response body.

    Returns:
        The envelope's payload field.

    Raises:
        MyfoxApiError: If the envelope status is not OK.

    """
    if is_api_error(data):
        status = data.get("status") if isinstance(data, dict) else None
        raise MyfoxApiError(action, status, data)
    return data.get("payload")


def extract_items(payload: Any) -> list[Any]:
    """Extract the item list from a listing payload."""
    if not payload:
        return []
    return payload.get("items", [])


def extract_on_demand_scenarios(items: list[Scenario]) -> list[Device]:
    """Keep on-demand scenarios and shape them as addressable devices.

    Args:
        items: Raw scenario listing.

    Returns:
        Device-shaped records with the scenario id as ``deviceId``.

    """
    return [
        Device(
            deviceId=scenario["scenarioId"],
            label=scenario["label"],
            modelLabel=SCENARIO_MODEL_LABEL,
        )
        for scenario in items
        if scenario.get("typeLabel") == SCENARIO_ON_DEMAND
    ]


def find_temperature_sensor(
    sensors: list[TemperatureSensor],
    device_id: str,
) -> TemperatureSensor | None:
    """Return the sensor with the given device id, or None when absent."""
    return next((s for s in sensors if s.get("deviceId") == device_id), None)


def create_session_client(hass: HomeAssistant) -> httpx.AsyncClient:
    """Create HTTP client for the Myfox API.

    Args:
        hass: Home Assistant instance.

    Returns:
        Configured httpx AsyncClient.

    """
    return create_async_httpx_client(hass, timeout=REQUEST_TIMEOUT)


async def async_execute(
    session: httpx.AsyncClient,
    action: str,
    path: str,
    token: str,
    method: str = "GET",
    *,
    debug_payload: bool = False,
) -> Any:
    """Issue one authenticated request and unwrap the Myfox envelope.

    Args:
        session: HTTP client session.
        action: Name of the operation, carried by errors.
        path: Resource path below the API base URL.
        token: Valid access token.
        method: HTTP method, GET for reads and POST for commands.
        debug_payload: Log the parsed response body.

    Returns:
        The envelope's payload.

    Raises:
        MyfoxHttpError: If the HTTP status is not a success.
        MyfoxParseError: If the body is not valid JSON.
        MyfoxApiError: If the envelope status is not OK.

    """
    response = await session.request(
        method,
        f"{BASE_URL}{path}",
        params={"access_token": token},
    )
    validate_http_status(action, response)
    data = parse_json(action, response, debug_payload=debug_payload)
    return extract_payload(action, data)


def _retrieve_refresh_exception(task: asyncio.Task[str]) -> None:
    # Callers may all have been cancelled, leaving a failure nobody reads.
    if not task.cancelled():
        task.exception()


class MyfoxTokenManager:
    """Manage the Myfox OAuth2 access token.

    The token is refreshed lazily once expired. Concurrent callers share a
    single in-flight refresh.
    """

    def __init__(
        self,
        session: httpx.AsyncClient,
        client_id: str | None,
        client_secret: str | None,
        refresh_token: str | None,
        on_refresh_token_update: Callable[[str], None] | None = None,
        *,
        debug: bool = False,
    ) -> None:
        """Initialize the token manager.

        Args:
            session: HTTP client session.
            client_id: OAuth2 client identifier.
            client_secret: OAuth2 client secret.
            refresh_token: Refresh token used to obtain access tokens.
            on_refresh_token_update: Called with the new refresh token
                whenever the server rotates it.
            debug: Log token lifecycle traces.

        """
        self._session = session
        self._client_id = client_id
        self._client_secret = client_secret
        self._refresh_token = refresh_token
        self._on_refresh_token_update = on_refresh_token_update
        self._debug = debug
        self._access_token = empty_access_token()
        self._refresh_task: asyncio.Task[str] | None = None

    @property
    def refresh_token(self) -> str | None:
        """Return the refresh token the next refresh will use."""
        return self._refresh_token

    @property
    def access_token(self) -> AccessToken:
        """Return the stored access token and its expiry."""
        return self._access_token

    def _validate_configuration(self) -> None:
        if not self._refresh_token:
            raise MyfoxConfigurationError("refresh_token")
        if not self._client_id:
            raise MyfoxConfigurationError("client_id")
        if not self._client_secret:
            raise MyfoxConfigurationError("client_secret")

    async def async_get_valid_token(self) -> str:
        """Return a valid access token, refreshing it if expired.

        Raises:
            MyfoxConfigurationError: If a credential is missing.
            MyfoxApiAuthError: If the refresh fails.

        """
        self._validate_configuration()

        if self._refresh_task is not None:
            return await asyncio.shield(self._refresh_task)

        if self._access_token.is_expired():
            if self._debug:
                _LOGGER.debug("Access token expired, refreshing")
            task = asyncio.create_task(self._async_refresh_and_clear())
            task.add_done_callback(_retrieve_refresh_exception)
            self._refresh_task = task
            return await asyncio.shield(task)

        return self._access_token.token

    async def _async_refresh_and_clear(self) -> str:
        try:
            return await self.async_refresh_access_token()
        finally:
            self._refresh_task = None

    async def async_refresh_access_token(self) -> str:
        """Exchange the refresh token for a new access token.

        Returns:
            The new access token.

        Raises:
            MyfoxApiAuthError: If the token endpoint refuses the refresh or
                answers with an unusable body.

        """
        payload = {
            "grant_type": "refresh_token",
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "refresh_token": self._refresh_token,
        }

        _LOGGER.debug("Refreshing access token with Myfox API")
        response = await self._session.post(TOKEN_URL, data=payload)

        try:
            data = response.json()
        except ValueError as err:
            _LOGGER.error("Failed to parse token response: %s", response.text)
            error_msg = f"Failed to refresh access token: {response.reason_phrase}"
            raise MyfoxApiAuthError(error_msg) from err

        if is_http_error(response.status_code):
            description = (
                data.get("error_description", response.reason_phrase)
                if isinstance(data, dict)
                else response.reason_phrase
            )
            error_msg = f"Failed to refresh access token: {description}"
            raise MyfoxApiAuthError(error_msg)

        try:
            access_token = data["access_token"]
            expires_in = int(data["expires_in"])
        except (KeyError, TypeError, ValueError) as err:
            error_msg = f"Failed to refresh access token: missing {err}"
            raise MyfoxApiAuthError(error_msg) from err
        if not access_token:
            error_msg = "Failed to refresh access token: missing 'access_token'"
            raise MyfoxApiAuthError(error_msg)

        self._access_token = AccessToken(
            token=access_token,
            expire_at=datetime.now(UTC) + timedelta(seconds=expires_in),
        )
        _LOGGER.debug(
            "Successfully refreshed access token, expires at %s",
            self._access_token.expire_at.isoformat(),
        )

        new_refresh_token = data.get("refresh_token")
        if new_refresh_token and new_refresh_token != self._refresh_token:
            self._refresh_token = new_refresh_token
            self._notify_refresh_token_update(new_refresh_token)

        return access_token

    def _notify_refresh_token_update(self, refresh_token: str) -> None:
        if self._on_refresh_token_update is None:
            return
        # A persistence failure leaves the refreshed tokens in place.
        try:
            self._on_refresh_token_update(refresh_token)
        except Exception:
            _LOGGER.exception("Failed to persist rotated refresh token")


class MyfoxApiClient:
    """Client for the Myfox REST resources."""

    def __init__(
        self,
        session: httpx.AsyncClient,
        token_manager: MyfoxTokenManager,
        *,
        debug: bool = False,
        debug_payload: bool = False,
    ) -> None:
        self._session = session
        self._token_manager = token_manager
        self._debug = debug
        self._debug_payload = debug_payload

    @property
    def token_manager(self) -> MyfoxTokenManager:
        return self._token_manager

    def _trace(self, action: str, *args: Any) -> None:
        if self._debug:
            _LOGGER.debug("%s %s", action, args)

    async def _async_call(self, action: str, path: str, method: str = "GET") -> Any:
        token = await self._token_manager.async_get_valid_token()
        return await async_execute(
            self._session,
            action,
            path,
            token,
            method,
            debug_payload=self._debug_payload,
        )

    # Sites and alarm

    async def async_get_sites(self) -> list[Site]:
        """Fetch the sites reachable with the client credentials."""
        self._trace("getSites")
        payload = await self._async_call("getSites", "/v2/client/site/items")
        return extract_items(payload)

    async def async_get_alarm_state(self, site_id: str) -> AlarmState:
        """Fetch the security state of a site."""
        self._trace("getAlarmState", site_id)
        return await self._async_call("getAlarmState", f"/v2/site/{site_id}/security")

    async def async_set_alarm_state(self, site_id: str, security_level: str) -> Any:
        """Set the security level of a site.

        Args:
            site_id: Site identifier.
            security_level: One of ``armed``, ``partial`` or ``disarmed``.

        Raises:
            ValueError: If the security level is unknown.

        """
        if security_level not in ALARM_SECURITY_LEVELS:
            error_msg = f"Unknown security level: {security_level}"
            raise ValueError(error_msg)

        self._trace("setAlarmState", site_id, security_level)
        return await self._async_call(
            "setAlarmState",
            f"/v2/site/{site_id}/security/set/{security_level}",
            "POST",
        )

    # Electrics

    async def async_get_electrics(self, site_id: str) -> list[MyfoxTarget]:
        """Fetch electric outlets followed by electric groups."""
        devices, groups = await asyncio.gather(
            self.async_get_electrics_devices(site_id),
            self.async_get_electrics_groups(site_id),
        )
        return [*devices, *groups]

    async def async_get_electrics_devices(self, site_id: str) -> list[Device]:
        self._trace("getElectricsDevices", site_id)
        payload = await self._async_call(
            "getElectricsDevices", f"/v2/site/{site_id}/device/socket/items"
        )
        return extract_items(payload)

    async def async_get_electrics_groups(self, site_id: str) -> list[Group]:
        self._trace("getElectricsGroups", site_id)
        payload = await self._async_call(
            "getElectricsGroups", f"/v2/site/{site_id}/group/electric/items"
        )
        return extract_items(payload)

    async def async_switch_electric(
        self,
        site_id: str,
        target: MyfoxTarget,
        on: bool,  # noqa: FBT001
    ) -> Any:
        """Switch an electric outlet or group on or off."""
        state = "on" if on else "off"
        if is_group(target):
            self._trace("switchElectricGroup", site_id, target, state)
            path = f"/v2/site/{site_id}/group/{target['groupId']}/electric/{state}"
        else:
            self._trace("switchElectricDevice", site_id, target, state)
            path = f"/v2/site/{site_id}/device/{target['deviceId']}/socket/{state}"
        return await self._async_call("switchElectric", path, "POST")

    # Temperature sensors

    async def async_get_temperature_sensors(
        self, site_id: str
    ) -> list[TemperatureSensor]:
        self._trace("getTemperatureSensors", site_id)
        payload = await self._async_call(
            "getTemperatureSensors",
            f"/v2/site/{site_id}/device/data/temperature/items",
        )
        return extract_items(payload)

    async def async_get_temperatures(
        self, site_id: str, device: Device
    ) -> list[TemperatureValue]:
        """Fetch the recorded temperature history of a sensor."""
        self._trace("getTemperatures", site_id, device)
        payload = await self._async_call(
            "getTemperatures",
            f"/v2/site/{site_id}/device/{device['deviceId']}/data/temperature",
        )
        return extract_items(payload)

    async def async_get_last_temperature(
        self, site_id: str, device: Device
    ) -> TemperatureSensor | None:
        """Return the sensor entry of a device, or None if it is not listed."""
        self._trace("getLastTemperature", site_id, device)
        payload = await self._async_call(
            "getLastTemperature",
            f"/v2/site/{site_id}/device/data/temperature/items",
        )
        return find_temperature_sensor(extract_items(payload), device["deviceId"])

    # Scenarios

    async def async_get_scenarios(self, site_id: str) -> list[Device]:
        """Fetch on-demand scenarios shaped as addressable devices."""
        self._trace("getScenarios", site_id)
        payload = await self._async_call(
            "getScenarios", f"/v2/site/{site_id}/scenario/items"
        )
        return extract_on_demand_scenarios(extract_items(payload))

    async def async_play_scenario(self, site_id: str, device: Device) -> Any:
        self._trace("playScenario", site_id, device)
        return await self._async_call(
            "playScenario",
            f"/v2/site/{site_id}/scenario/{device['deviceId']}/play",
            "POST",
        )

    # Shutters

    async def async_get_shutters(self, site_id: str) -> list[MyfoxTarget]:
        """Fetch shutters followed by shutter groups."""
        devices, groups = await asyncio.gather(
            self.async_get_shutters_device(site_id),
            self.async_get_shutters_group(site_id),
        )
        return [*devices, *groups]

    async def async_get_shutters_device(self, site_id: str) -> list[Device]:
        self._trace("getShuttersDevice", site_id)
        payload = await self._async_call(
            "getShuttersDevice", f"/v2/site/{site_id}/device/shutter/items"
        )
        return extract_items(payload)

    async def async_get_shutters_group(self, site_id: str) -> list[Group]:
        self._trace("getShuttersGroup", site_id)
        payload = await self._async_call(
            "getShuttersGroup", f"/v2/site/{site_id}/group/shutter/items"
        )
        return extract_items(payload)

    async def async_set_shutter_position(
        self,
        site_id: str,
        target: MyfoxTarget,
        open_: bool,  # noqa: FBT001
    ) -> Any:
        """Open or close a shutter or shutter group."""
        position = "open" if open_ else "close"
        self._trace("setShutterPosition", site_id, target, position)
        if is_group(target):
            path = f"/v2/site/{site_id}/group/{target['groupId']}/shutter/{position}"
        else:
            path = f"/v2/site/{site_id}/device/{target['deviceId']}/shutter/{position}"
        return await self._async_call("setShutterPosition", path, "POST")
