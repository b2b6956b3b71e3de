"""Command-line interface for apkdisguise."""
