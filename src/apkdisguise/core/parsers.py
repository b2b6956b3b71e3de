"""Parsers for `adb` and `pm` text output.

All functions here are pure: they take captured stdout and return
structured values, so they can be tested without a device.
"""

from apkdisguise.models.device import DeviceState

PACKAGE_LINE_PREFIX = "package:"


def parse_devices(output: str) -> list[str]:
    """Extract ready device identifiers from `adb devices -l` output.

    The first line is the "List of devices attached" header and is always
    dropped. Only devices whose status token is `device` are kept, so
    offline and unauthorized entries never show up.
    """
    devices = []

    for line in output.splitlines()[1:]:  # Skip header line
        parts = line.split()
        if len(parts) < 2:
            continue

        if DeviceState.parse(parts[1]) is not DeviceState.DEVICE:
            continue

        devices.append(parts[0])

    return devices


def parse_package_names(output: str) -> list[str]:
    """Extract package names from `pm list packages` output."""
    packages = []

    for line in output.splitlines():
        line = line.strip()
        if line.startswith(PACKAGE_LINE_PREFIX):
            name = line[len(PACKAGE_LINE_PREFIX) :].strip()
            if name:
                packages.append(name)

    return packages


def parse_package_paths(output: str) -> list[tuple[str, str]]:
    """Extract (apk_path, package_name) pairs from `pm list packages -f` output.

    Lines look like `package:/data/app/x/base.apk=com.example.app`. APK
    paths can contain `=` themselves, so the package name is whatever follows
    the last one.
    """
    entries = []

    for line in output.splitlines():
        line = line.strip()
        if not line.startswith(PACKAGE_LINE_PREFIX):
            continue

        content = line[len(PACKAGE_LINE_PREFIX) :]
        apk_path, sep, package_name = content.rpartition("=")
        if not sep:
            continue

        package_name = package_name.strip()
        if package_name:
            entries.append((apk_path, package_name))

    return entries


def display_name_for(package_name: str) -> str:
    """Derive a readable name from the last segment of a package name.

    A space goes before every uppercase letter except the first character,
    and underscores become spaces: `com.acme.myCoolApp` gives
    `my Cool App`, `org.legacy_tool` gives `legacy tool`.
    """
    segment = package_name.split(".")[-1]

    chars = []
    for i, c in enumerate(segment):
        if i > 0 and c.isupper():
            chars.append(" ")
        chars.append(c)

    return "".join(chars).replace("_", " ")
