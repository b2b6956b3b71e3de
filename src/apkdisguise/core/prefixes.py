"""Trusted namespace prefix suggestions.

A prefix is worth suggesting when several apps already installed on the
device share it, so a repackaged app under it looks like one more of them.
"""

from collections import Counter

from apkdisguise.core.adb import ADBWrapper
from apkdisguise.models.apk import PrefixSource, TrustedPrefix

# Reserved platform/vendor namespaces, never suggested
DENIED_PREFIXES: tuple[str, ...] = (
    "com.android",
    "com.google",
    "android.hardware",
    "vendor.mediatek",
)

MIN_OCCURRENCES = 2

RECOMMENDED_PREFIXES: tuple[tuple[str, int], ...] = (
    ("cn.chinapost", 999),
    ("com.nlscan", 100),
)


def two_segment_prefix(package_name: str) -> str | None:
    """Return the first two dot segments joined by a dot, or None if there are fewer."""
    parts = package_name.split(".")
    if len(parts) < 2:
        return None
    return f"{parts[0]}.{parts[1]}"


def is_denied(prefix: str) -> bool:
    """Check a prefix against the reserved platform namespaces."""
    return any(prefix.startswith(denied) for denied in DENIED_PREFIXES)


def recommended_prefixes() -> list[TrustedPrefix]:
    """Curated entries placed ahead of every scan result."""
    return [
        TrustedPrefix(prefix=prefix, count=count, source=PrefixSource.RECOMMENDED)
        for prefix, count in RECOMMENDED_PREFIXES
    ]


def rank_prefixes(package_names: list[str]) -> list[TrustedPrefix]:
    """Rank prefixes found among package names.

    Args:
        package_names: Raw package names from one device.

    Returns:
        Curated entries first, then scan-derived prefixes used at least
        twice, by descending count (ties alphabetical).
    """
    counts = Counter(
        prefix
        for prefix in map(two_segment_prefix, package_names)
        if prefix is not None
    )

    scanned = [
        TrustedPrefix(prefix=prefix, count=count, source=PrefixSource.DEVICE_SCAN)
        for prefix, count in counts.items()
        if count >= MIN_OCCURRENCES and not is_denied(prefix)
    ]
    scanned.sort(key=lambda entry: (-entry.count, entry.prefix))

    return recommended_prefixes() + scanned


class PrefixScanner:
    """Scans a device's package list for trusted prefixes."""

    def __init__(self, adb: ADBWrapper):
        self.adb = adb

    def scan(self, device_id: str) -> list[TrustedPrefix]:
        """Rank prefixes for the packages installed on a device."""
        return rank_prefixes(self.adb.list_packages(device_id))
