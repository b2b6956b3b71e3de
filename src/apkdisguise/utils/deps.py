"""External tool discovery.

Tools are looked up, in order: explicit override, config.json, the bundled
tools directory, the Android SDK, then PATH. A key missing from the result of
`resolve_tool_paths` means the tool is not installed; that is not an error
until something actually requires it.
"""

from __future__ import annotations

import os
import platform
import shutil
from collections.abc import Mapping
from pathlib import Path
from typing import Final

from apkdisguise.exceptions import ToolNotFoundError
from apkdisguise.models.pipeline import ToolPaths
from apkdisguise.utils.android_sdk import (
    find_apksigner_jar,
    find_build_tools,
    find_zipalign,
)
from apkdisguise.utils.config import get_config_dir, get_config_str

TOOL_KEYS: Final[tuple[str, ...]] = (
    "java",
    "apktool",
    "zipalign",
    "apksigner",
    "keystore",
    "adb",
)

# Install hints for required tools
TOOL_INSTALL_HINTS: dict[str, str] = {
    "java": "Install a JDK (macOS: brew install openjdk, others: https://adoptium.net/)",
    "apktool": "https://apktool.ibotpeaches.com/ (put apktool.jar in the tools directory)",
    "zipalign": "Part of Android SDK build-tools (set ANDROID_HOME)",
    "apksigner": (
        "Part of Android SDK build-tools (set ANDROID_HOME), "
        "or put apksigner.jar in the tools directory"
    ),
    "keystore": (
        "keytool -genkeypair -v -keystore release-key.jks -keyalg RSA "
        "-keysize 2048 -validity 10000 -alias my-alias"
    ),
    "adb": "https://developer.android.com/tools/releases/platform-tools",
}

TOOLS_DIR_ENV_VAR: Final[str] = "APKDISGUISE_TOOLS_DIR"
TOOLS_DIR_CONFIG_KEY: Final[str] = "tools_dir"

APKTOOL_JAR_NAME: Final[str] = "apktool.jar"
APKSIGNER_JAR_NAME: Final[str] = "apksigner.jar"
KEYSTORE_NAME: Final[str] = "release-key.jks"


def get_tools_dir() -> Path:
    """Directory holding bundled tools (env, then config, then ~/.apkdisguise/tools)."""

    raw = os.environ.get(TOOLS_DIR_ENV_VAR) or get_config_str(TOOLS_DIR_CONFIG_KEY)
    if raw:
        return Path(raw).expanduser()
    return get_config_dir() / "tools"


def _existing_file(raw_value: str | Path | None) -> Path | None:
    if not raw_value:
        return None

    candidate = Path(raw_value).expanduser()
    return candidate if candidate.is_file() else None


def _which(name: str) -> Path | None:
    found = shutil.which(name)
    return Path(found) if found else None


def _bundled(tools_dir: Path) -> dict[str, Path]:
    zipalign_name = "zipalign.exe" if platform.system() == "Windows" else "zipalign"
    candidates = {
        "apktool": tools_dir / APKTOOL_JAR_NAME,
        "zipalign": tools_dir / zipalign_name,
        "apksigner": tools_dir / APKSIGNER_JAR_NAME,
        "keystore": tools_dir / KEYSTORE_NAME,
    }
    return {key: path for key, path in candidates.items() if path.is_file()}


def _java_from_home() -> Path | None:
    java_home = os.environ.get("JAVA_HOME")
    if not java_home:
        return None
    name = "java.exe" if platform.system() == "Windows" else "java"
    return _existing_file(Path(java_home) / "bin" / name)


def _fallback(key: str, build_tools: Path | None) -> Path | None:
    """Last-resort lookup in the Android SDK and on PATH."""

    if key == "java":
        return _java_from_home() or _which("java")

    if key == "zipalign":
        sdk_zipalign = find_zipalign(build_tools) if build_tools else None
        return sdk_zipalign or _which("zipalign")

    if key == "apksigner":
        return find_apksigner_jar(build_tools) if build_tools else None

    if key == "adb":
        return _which("adb")

    return None


def resolve_tool_paths(
    tools_dir: Path | None = None,
    overrides: Mapping[str, str | Path | None] | None = None,
) -> dict[str, Path]:
    """Locate every known tool.

    Args:
        tools_dir: Bundled tools directory. Defaults to get_tools_dir().
        overrides: Explicit paths by tool key, taking precedence over
            everything else.

    Returns:
        Mapping from tool key to absolute path, for tools actually found.
    """
    overrides = overrides or {}
    bundled = _bundled(tools_dir or get_tools_dir())
    build_tools = find_build_tools()

    resolved: dict[str, Path] = {}
    for key in TOOL_KEYS:
        path = (
            _existing_file(overrides.get(key))
            or _existing_file(get_config_str(f"{key}_path"))
            or bundled.get(key)
            or _fallback(key, build_tools)
        )
        if path is not None:
            resolved[key] = path.resolve()

    return resolved


def require_tools(resolved: Mapping[str, Path], *keys: str) -> None:
    """Require that all specified tools were found.

    Raises:
        ToolNotFoundError: For the first missing tool.
    """
    for key in keys:
        if key not in resolved:
            raise ToolNotFoundError(key, TOOL_INSTALL_HINTS.get(key))


def build_tool_paths(resolved: Mapping[str, Path]) -> ToolPaths:
    """Turn resolved paths into the pipeline's ToolPaths.

    Raises:
        ToolNotFoundError: If any tool the build stages need is missing.
    """
    require_tools(resolved, "java", "apktool", "zipalign", "apksigner", "keystore")

    return ToolPaths(
        java=str(resolved["java"]),
        apktool=resolved["apktool"],
        zipalign=resolved["zipalign"],
        apksigner=resolved["apksigner"],
        keystore=resolved["keystore"],
        adb=str(resolved.get("adb", "adb")),
    )


def get_adb_command(resolved: Mapping[str, Path] | None = None) -> str:
    """ADB executable to launch, falling back to the bare name."""

    resolved = resolved if resolved is not None else resolve_tool_paths()
    adb = resolved.get("adb")
    return str(adb) if adb else "adb"
