"""Pydantic models for installed applications and namespace prefixes."""

from enum import StrEnum

from pydantic import BaseModel


class InstalledApplication(BaseModel):
    """An application installed on a device."""

    package_name: str
    """Full package name (e.g., com.example.app)."""

    display_name: str
    """Readable name derived from the last package segment."""

    version: str = ""
    """Version string. Not retrieved, always empty."""

    is_system: bool = False
    """Whether the package appears in the system package listing."""


class PrefixSource(StrEnum):
    """Where a trusted prefix suggestion came from."""

    DEVICE_SCAN = "device_scan"
    RECOMMENDED = "recommended"


class TrustedPrefix(BaseModel):
    """A two-segment namespace prefix suggested for a new package name."""

    prefix: str
    """Two-segment prefix (e.g., com.example)."""

    count: int
    """Number of scanned packages using the prefix, or a fixed rank for curated entries."""

    source: PrefixSource
    """Whether the entry was found on the device or is a curated recommendation."""
