"""Typed exception hierarchy for apkdisguise."""


class DisguiseError(Exception):
    """Base exception for all apkdisguise errors."""

    pass


class ToolNotFoundError(DisguiseError):
    """Raised when a required external tool is not installed."""

    def __init__(self, tool: str, install_hint: str | None = None):
        self.tool = tool
        self.install_hint = install_hint
        message = f"Required tool not found: {tool}"
        if install_hint:
            message += f"\nInstall: {install_hint}"
        super().__init__(message)


class LaunchError(DisguiseError):
    """Raised when an external executable cannot be started."""

    def __init__(self, command: list[str], reason: str):
        self.command = command
        self.reason = reason
        cmd_str = " ".join(command)
        super().__init__(f"Failed to launch: {cmd_str}\n{reason}")


class ADBError(DisguiseError):
    """Raised when a device-side operation cannot proceed."""

    pass


class DeviceNotFoundError(ADBError):
    """Raised when no device is connected or the device choice is ambiguous."""

    pass


class ManifestError(DisguiseError):
    """Raised when the decompiled manifest cannot be read, patched or written."""

    pass


class InvalidApkError(DisguiseError):
    """Raised when the source APK path does not point at a usable APK."""

    pass
