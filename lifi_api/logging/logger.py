# lifi_api/logging/logger.py
from __future__ import annotations

import logging
import os
import sys
import time
from typing import Optional, Tuple

from lifi_api.configuration.config import settings

APP_NAMESPACE = "lifi_api"
CONSOLE_HANDLER_NAME = "lifi_api.console"

_RESET = "\033[0m"
_DIM = "\033[2m"

# level -> (emoji, ANSI color)
_LEVEL_STYLE = {
    "DEBUG": ("🔍", "\033[36m"),
    "INFO": ("ℹ️", "\033[32m"),
    "WARNING": ("⚠️", "\033[33m"),
    "ERROR": ("❌", "\033[31m"),
    "CRITICAL": ("🛑", "\033[35m"),
}

# Transport libraries are noisy at DEBUG; each gets its own knob.
_LIBRARY_LEVEL_SETTINGS: Tuple[Tuple[str, str], ...] = (
    ("httpx", "LOG_LEVEL_LIB_HTTPX"),
    ("httpcore", "LOG_LEVEL_LIB_HTTPCORE"),
    ("asyncio", "LOG_LEVEL_LIB_ASYNCIO"),
)


def _level_from_str(value: str) -> int:
    level = logging.getLevelName((value or "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def _canonical_name(name: str) -> str:
    """Map arbitrary logger names (test modules included) into the 'lifi_api.*' namespace."""
    if name == APP_NAMESPACE or name.startswith(APP_NAMESPACE + "."):
        return name
    return f"{APP_NAMESPACE}.{name}"


def _utc_timestamp(record: logging.LogRecord) -> str:
    return time.strftime("%Y-%m-%d %H:%M:%S", time.gmtime(record.created)) + f".{int(record.msecs):03d}+0000"


class ColorFormatter(logging.Formatter):
    """
    Readable, colored formatter with emoji per level.

    Under pytest-xdist each line is prefixed with the worker id so interleaved
    output from parallel live scenarios stays attributable.

    Example:
      2026-10-02 01:36:22.123+0000 [gw1] ℹ️ INFO     lifi_api.core.load_probe - [PERF][SUMMARY] label=quote ...
    """

    def __init__(self, use_color: bool = True, worker: Optional[str] = None) -> None:
        super().__init__()
        self.use_color = use_color
        self.worker = worker if worker is not None else os.getenv("PYTEST_XDIST_WORKER", "")

    def format(self, record: logging.LogRecord) -> str:
        timestamp = _utc_timestamp(record)
        level_name = record.levelname.upper()
        emoji, color = _LEVEL_STYLE.get(level_name, ("", ""))
        worker = f"[{self.worker}] " if self.worker else ""
        message = record.getMessage()

        if self.use_color:
            line = (
                f"{_DIM}{timestamp}{_RESET} {worker}{color}{emoji} {level_name:<8}{_RESET} "
                f"{record.name} {_DIM}- {message}{_RESET}"
            )
        else:
            line = f"{timestamp} {worker}{emoji} {level_name:<8} {record.name} - {message}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _install_console_handler(root: logging.Logger) -> logging.Handler:
    """Install (once) a stderr handler that does not filter by level; loggers decide."""
    for handler in root.handlers:
        if handler.get_name() == CONSOLE_HANDLER_NAME:
            return handler

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.set_name(CONSOLE_HANDLER_NAME)
    handler.setLevel(logging.NOTSET)
    handler.setFormatter(ColorFormatter(use_color=sys.stderr.isatty() and not settings.NO_COLOR))
    root.addHandler(handler)
    return handler


def init_logging() -> None:
    """
    Initialize logging with:
    - UTC timestamps, emoji per level, xdist worker tag
    - 'lifi_api.*' at LOG_LEVEL_LIFI_API, everything else at LOG_LEVEL
    - Quiet transport libraries unless explicitly raised
    Safe to call more than once.
    """
    root = logging.getLogger()
    root.setLevel(_level_from_str(settings.LOG_LEVEL))
    _install_console_handler(root)

    logging.getLogger(APP_NAMESPACE).setLevel(_level_from_str(settings.LOG_LEVEL_LIFI_API))

    for library, setting_name in _LIBRARY_LEVEL_SETTINGS:
        logging.getLogger(library).setLevel(_level_from_str(getattr(settings, setting_name)))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger in the canonical 'lifi_api.*' namespace."""
    return logging.getLogger(_canonical_name(name or APP_NAMESPACE))
