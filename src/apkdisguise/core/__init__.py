"""Core device, prefix and pipeline logic."""
