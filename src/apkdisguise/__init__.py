"""apkdisguise - repackage Android APKs under a new package identity."""

__version__ = "0.1.0"
