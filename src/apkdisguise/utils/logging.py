"""Structured logging configuration.

structlog builds the event, the standard library routes it, and a rich
handler prints it on stderr so it never mixes with command output.

Until setup_logging() runs, events go to the standard library with only a
NullHandler on the package logger, so library use stays silent unless the
host application configures logging itself.
"""

from __future__ import annotations

import logging

import structlog
from rich.console import Console
from rich.logging import RichHandler

DEFAULT_LOG_LEVEL = "WARNING"
PACKAGE_LOGGER = "apkdisguise"


def _configure_structlog(level: int, cache: bool) -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            # Level and time are printed by RichHandler
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=cache,
    )


def setup_logging(log_level: str | None = None) -> None:
    """Configure structured logging for the application.

    Args:
        log_level: Level name such as "INFO" or "DEBUG". Defaults to WARNING
            so that normal CLI output is not drowned in tool chatter.
    """
    log_level = (log_level or DEFAULT_LOG_LEVEL).upper()
    level = getattr(logging, log_level, logging.WARNING)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        tracebacks_show_locals=log_level == "DEBUG",
    )

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )

    _configure_structlog(level, cache=True)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured bound logger
    """
    return structlog.get_logger(name)


# Library default: nothing reaches stdout before the CLI configures output
logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())
if not structlog.is_configured():
    _configure_structlog(logging.INFO, cache=False)
