"""Pydantic models shared across apkdisguise."""
