"""Pydantic models for Android devices."""

from enum import StrEnum


class DeviceState(StrEnum):
    """ADB device connection state, as printed by `adb devices`."""

    DEVICE = "device"
    OFFLINE = "offline"
    UNAUTHORIZED = "unauthorized"
    NO_PERMISSIONS = "no permissions"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, token: str) -> "DeviceState":
        """Map a status token to a state, falling back to UNKNOWN."""
        try:
            return cls(token)
        except ValueError:
            return cls.UNKNOWN
