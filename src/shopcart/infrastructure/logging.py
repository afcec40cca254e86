"""Logging configuration for the shopcart CLI.

Application and infrastructure modules log through
``structlog.get_logger(__name__)``; this module routes those records
through the standard library so the level can be set in one place.
Log output goes to stderr and never mixes with command output.
"""

from __future__ import annotations

import logging
import os
import sys

import structlog


def get_log_level(verbose: bool = False) -> str:
    """DEBUG when verbose, else LOG_LEVEL from the environment (WARNING)."""
    if verbose:
        return "DEBUG"
    return os.getenv("LOG_LEVEL", "WARNING").upper()


def setup_stdlib_logging(log_level: str) -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)


def setup_structlog() -> None:
    processors: list = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.contextvars.merge_contextvars,
    ]

    if os.getenv("SHOPCART_LOG_FORMAT", "console").lower() == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(verbose: bool = False) -> None:
    """Configure all logging for the application."""
    setup_stdlib_logging(get_log_level(verbose))
    setup_structlog()
