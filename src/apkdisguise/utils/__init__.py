"""Process, configuration, logging and tool-path helpers."""
