"""Logging configuration for iotz.

Two output channels:
- rich consoles for user-facing messages
- the logging module for diagnostics (docker commands, exit codes)

Usage:
    from iotz.logging import get_logger
    logger = get_logger(__name__)
    logger.debug("Docker command: %s", cmd)

Enable verbose logging via ``iotz --debug`` or ``IOTZ_DEBUG=1``.
"""

from __future__ import annotations

import logging
import os
import sys

_loggers: dict[str, logging.Logger] = {}
_initialized = False

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FORMAT_DEBUG = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _get_log_level() -> int:
    """Determine log level from environment."""
    if os.environ.get("IOTZ_DEBUG", "").lower() in ("1", "true", "yes"):
        return logging.DEBUG
    return logging.WARNING


def _init_logging() -> None:
    """Attach the stderr handler to the iotz root logger (once)."""
    global _initialized
    if _initialized:
        return

    level = _get_log_level()
    root_logger = logging.getLogger("iotz")
    root_logger.setLevel(level)

    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(level)
        handler.setFormatter(
            logging.Formatter(
                LOG_FORMAT_DEBUG if level == logging.DEBUG else LOG_FORMAT,
                datefmt=DATE_FORMAT,
            )
        )
        root_logger.addHandler(handler)

    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module, namespaced under ``iotz``."""
    _init_logging()

    if not name.startswith("iotz"):
        name = f"iotz.{name}"

    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)

    return _loggers[name]


def set_debug(enabled: bool = True) -> None:
    """Enable or disable debug logging (CLI ``--debug``)."""
    level = logging.DEBUG if enabled else logging.WARNING
    root_logger = logging.getLogger("iotz")
    root_logger.setLevel(level)

    fmt = LOG_FORMAT_DEBUG if enabled else LOG_FORMAT
    for handler in root_logger.handlers:
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(fmt, datefmt=DATE_FORMAT))
