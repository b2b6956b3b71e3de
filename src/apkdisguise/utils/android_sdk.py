"""Android SDK path detection utilities."""

import os
import platform
from pathlib import Path

from apkdisguise.utils.config import get_config_str

MIN_BUILD_TOOLS_VERSION = "30.0.0"
SDK_ENV_VARS = ("ANDROID_HOME", "ANDROID_SDK_ROOT")


def default_sdk_locations(system: str | None = None) -> tuple[Path, ...]:
    """Where Android Studio and package managers usually put the SDK."""
    home = Path.home()
    by_system = {
        "Darwin": (home / "Library" / "Android" / "sdk", Path("/opt/android-sdk")),
        "Linux": (home / "Android" / "Sdk", home / "android-sdk", Path("/opt/android-sdk")),
        "Windows": (home / "AppData" / "Local" / "Android" / "Sdk", Path("C:/Android/sdk")),
    }
    return by_system.get(system or platform.system(), ())


def get_android_home() -> Path | None:
    """Get the Android SDK root.

    The `android_home` config key wins, then ANDROID_HOME/ANDROID_SDK_ROOT,
    then the platform's default install locations. Only existing
    directories count.
    """
    configured = [get_config_str("android_home")]
    configured += [os.environ.get(var) for var in SDK_ENV_VARS]

    candidates = [Path(raw).expanduser() for raw in configured if raw]
    candidates += default_sdk_locations()

    return next((path for path in candidates if path.is_dir()), None)


def find_build_tools(
    android_home: Path | None = None,
    min_version: str = MIN_BUILD_TOOLS_VERSION,
) -> Path | None:
    """Find the latest Android build-tools directory.

    Args:
        android_home: SDK root. Detected when None.
        min_version: Minimum accepted version (e.g., "30.0.0").

    Returns:
        Path like .../build-tools/35.0.0/, or None if no suitable version.
    """
    android_home = android_home or get_android_home()
    if not android_home:
        return None

    build_tools_dir = android_home / "build-tools"
    if not build_tools_dir.is_dir():
        return None

    versions: list[tuple[tuple[int, ...], Path]] = []
    min_version_tuple = tuple(int(x) for x in min_version.split("."))

    for version_dir in build_tools_dir.iterdir():
        if not version_dir.is_dir():
            continue
        try:
            version_tuple = tuple(int(x) for x in version_dir.name.split("."))
        except ValueError:
            # Skip non-version directories
            continue
        if version_tuple >= min_version_tuple:
            versions.append((version_tuple, version_dir))

    if not versions:
        return None

    versions.sort(reverse=True)
    return versions[0][1]


def find_zipalign(build_tools: Path) -> Path | None:
    """Locate the zipalign binary in a build-tools directory."""
    name = "zipalign.exe" if platform.system() == "Windows" else "zipalign"
    zipalign = build_tools / name
    return zipalign if zipalign.is_file() else None


def find_apksigner_jar(build_tools: Path) -> Path | None:
    """Locate apksigner.jar in a build-tools directory.

    The `apksigner` script in build-tools wraps lib/apksigner.jar; the jar is
    used directly so it can be launched with a chosen Java runtime.
    """
    jar = build_tools / "lib" / "apksigner.jar"
    return jar if jar.is_file() else None
