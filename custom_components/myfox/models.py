"""Data models for Myfox integration."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import NotRequired, TypedDict


@dataclass
class AccessToken:
    """Represents an OAuth2 access token with its expiration timestamp."""

    token: str
    expire_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        """Return True once the expiration timestamp lies in the past."""
        return self.expire_at < (now or datetime.now(UTC))


def empty_access_token() -> AccessToken:
    """Return the placeholder token held before the first refresh."""
    return AccessToken(token="", expire_at=datetime.fromtimestamp(0, UTC))


class Site(TypedDict):
    """A Myfox installation."""

    siteId: str
    label: str
    brand: NotRequired[str]
    timezone: NotRequired[str]


class Device(TypedDict):
    """An individually addressable Myfox device."""

    deviceId: str
    label: str
    modelLabel: NotRequired[str]
    modelId: NotRequired[int]


class Group(TypedDict):
    """A group of devices switched together."""

    groupId: str
    label: str
    type: NotRequired[str]
    devices: NotRequired[list[Device]]


class Scenario(TypedDict):
    scenarioId: str
    label: str
    typeLabel: str
    enabled: NotRequired[bool]


class TemperatureSensor(TypedDict):
    """A temperature sensor and its last recorded value."""

    deviceId: str
    label: str
    modelLabel: NotRequired[str]
    lastTemperature: NotRequired[float]
    lastTemperatureAt: NotRequired[str]


class TemperatureValue(TypedDict):
    recordedAt: str
    celsius: float


class AlarmState(TypedDict):
    """Security state of a site."""

    status: int
    statusLabel: str


MyfoxTarget = Device | Group


def is_group(target: MyfoxTarget) -> bool:
    """Return True if the target is addressed as a group.

    A target carrying a ``groupId`` is a group; anything else is a device
    addressed by its ``deviceId``.
    """
    return bool(target.get("groupId"))


def target_id(target: MyfoxTarget) -> str:
    """Return the vendor identifier used to address the target."""
    if is_group(target):
        return str(target["groupId"])
    return str(target["deviceId"])


def target_key(target: MyfoxTarget, kind: str | None = None) -> str:
    """Return a key unique across devices, groups and scenarios of a site.

    Devices and groups are numbered independently by Myfox, so the id alone
    does not identify a target.
    """
    if kind is None:
        kind = "group" if is_group(target) else "device"
    return f"{kind}_{target_id(target)}"
