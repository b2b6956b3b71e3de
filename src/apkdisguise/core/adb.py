"""ADB wrapper for device discovery and package inventory."""

from pathlib import Path

from apkdisguise.core import classifier
from apkdisguise.core.parsers import (
    display_name_for,
    parse_devices,
    parse_package_names,
    parse_package_paths,
)
from apkdisguise.exceptions import DeviceNotFoundError, LaunchError
from apkdisguise.models.apk import InstalledApplication
from apkdisguise.utils.logging import get_logger
from apkdisguise.utils.process import ProcessResult, run_tool

logger = get_logger(__name__)


class ADBWrapper:
    """Wrapper for ADB commands.

    Every query runs the host tool afresh; nothing is cached between calls.
    """

    def __init__(self, adb: str = "adb"):
        """Initialize ADB wrapper.

        Args:
            adb: ADB executable name or path.
        """
        self.adb = adb

    def _run(self, *args: str, device_id: str | None = None) -> ProcessResult:
        """Run an ADB command, optionally targeting a device.

        Raises:
            LaunchError: If adb cannot be started.
        """
        cmd = [self.adb]
        if device_id:
            cmd.extend(["-s", device_id])
        cmd.extend(args)

        return run_tool(cmd)

    def is_available(self) -> bool:
        """Check whether adb can be launched and answers `adb version`."""
        try:
            return self._run("version").success
        except LaunchError:
            return False

    def list_devices(self) -> list[str]:
        """List identifiers of connected devices that are ready for commands.

        Returns:
            Device identifiers in the order adb reports them. Empty if none.
        """
        result = self._run("devices", "-l")
        return parse_devices(result.stdout)

    def resolve_device(self, device_id: str | None = None) -> str:
        """Pick the device to target.

        Args:
            device_id: Explicit device. If None, the single connected device.

        Returns:
            The target device identifier.

        Raises:
            DeviceNotFoundError: If the device is not connected, or the choice
                is ambiguous.
        """
        devices = self.list_devices()

        if device_id:
            if device_id not in devices:
                raise DeviceNotFoundError(f"Device not found or not ready: {device_id}")
            return device_id

        if not devices:
            raise DeviceNotFoundError("No devices connected")

        if len(devices) > 1:
            raise DeviceNotFoundError(
                f"Multiple devices connected: {', '.join(devices)}. "
                "Use --device to specify which one."
            )

        return devices[0]

    def list_packages(self, device_id: str) -> list[str]:
        """List all package names installed on a device.

        Args:
            device_id: Target device.

        Returns:
            Package names in the order pm prints them.
        """
        result = self._run("shell", "pm", "list", "packages", device_id=device_id)
        return parse_package_names(result.stdout)

    def list_system_packages(self, device_id: str) -> set[str]:
        """Get the set of system package names on a device."""
        result = self._run(
            "shell", "pm", "list", "packages", "-s", device_id=device_id
        )
        return set(parse_package_names(result.stdout))

    def list_installed_applications(
        self, device_id: str
    ) -> list[InstalledApplication]:
        """List installed applications with system/user classification.

        Args:
            device_id: Target device.

        Returns:
            Applications sorted case-insensitively by display name.

        Raises:
            LaunchError: If either of the two adb queries cannot be started.
        """
        listing = self._run(
            "shell", "pm", "list", "packages", "-f", device_id=device_id
        )
        system_packages = self.list_system_packages(device_id)

        apps = [
            InstalledApplication(
                package_name=package_name,
                display_name=display_name_for(package_name),
                is_system=package_name in system_packages,
            )
            for _, package_name in parse_package_paths(listing.stdout)
        ]
        apps.sort(key=lambda app: app.display_name.lower())

        logger.info(
            "Loaded installed applications",
            device=device_id,
            total=len(apps),
            system=sum(1 for app in apps if app.is_system),
        )
        return apps

    def uninstall(self, device_id: str, package_name: str) -> bool:
        """Uninstall a package from a device.

        Returns:
            True only if pm printed its success marker.
        """
        result = self._run(
            "shell", "pm", "uninstall", package_name, device_id=device_id
        )
        removed = classifier.UNINSTALL.succeeded(result)

        if not removed:
            logger.warning(
                "Uninstall reported failure",
                device=device_id,
                package=package_name,
                output=result.output,
            )
        return removed

    def install(self, device_id: str, apk: Path) -> ProcessResult:
        """Install an APK, replacing any existing copy and granting permissions.

        Returns:
            The raw result; callers classify it with `classifier.INSTALL`.
        """
        return self._run("install", "-r", "-t", "-g", str(apk), device_id=device_id)
