"""
Structured logging using structlog on top of the standard library.

Library modules get their logger through get_logger(__name__). Importing the
library never configures structlog; applications embedding it keep control of
processors, handlers and levels. configure_structlog() routes events to
standard library loggers named after the module.

The command line calls setup_logging() once, which configures structlog and
installs a single stderr handler rendering either human-readable console
output or JSON lines.

Configuration via environment variables (see opticaleye.config):
  - OPTICAL_EYE_LOGLEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: WARNING)
  - OPTICAL_EYE_LOG_FORMAT: TEXT or JSON (default: TEXT)

Usage:
    from opticaleye.log import get_logger

    logger = get_logger(__name__)
    logger.warning("checksum_mismatch", found="0x1234", expected="0x4321")
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.typing import Processor

_LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Shared processors for structlog events and foreign (plain logging) records
_SHARED_PROCESSORS: list[Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def log_level_of(level_str: str) -> int:
    """Convert log level string to logging constant (unknown names map to WARNING)."""
    return _LOG_LEVELS.get(level_str.strip().upper(), logging.WARNING)


def configure_structlog() -> None:
    """Route structlog events through the standard library.

    Leaves an existing structlog configuration alone.
    """
    if structlog.is_configured():
        return  # The embedding application owns the configuration

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_SHARED_PROCESSORS,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def setup_logging(level: str | int = "WARNING", log_format: str = "TEXT") -> None:
    """
    Configure structlog, install the stderr handler and set the root log level.

    Args:
        level: Level name or logging constant
        log_format: "JSON" for JSON lines, anything else for console output
    """
    configure_structlog()

    log_level = level if isinstance(level, int) else log_level_of(level)

    if log_format.upper() == "JSON":
        final_processor: Processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            final_processor,
        ],
        foreign_pre_chain=_SHARED_PROCESSORS,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    # pyserial's URL handlers log every byte at DEBUG
    logging.getLogger("pySerial").setLevel(max(log_level, logging.INFO))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for a module.

    Args:
        name: Logger name, normally the module's __name__

    Returns:
        structlog logger, bound on first use to the configuration in effect then
    """
    return structlog.stdlib.get_logger(name)
