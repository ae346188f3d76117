"""Process logging: colored root handler on stdout, plus the bare request-line logger."""

import logging
import sys
from datetime import datetime

from src.core.clock import iso_timestamp

ACCESS_LOGGER_NAME = "ekosim.access"

# ANSI color codes
_RESET = "\033[0m"
_BOLD = "\033[1m"
_GRAY = "\033[90m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_CYAN = "\033[36m"

_LEVEL_COLORS = {
    logging.DEBUG: _GRAY,
    logging.INFO: _CYAN,
    logging.WARNING: _YELLOW,
    logging.ERROR: _RED + _BOLD,
    logging.CRITICAL: _RED + _BOLD,
}


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors per log level."""

    def format(self, record: logging.LogRecord) -> str:
        color = _LEVEL_COLORS.get(record.levelno, _RESET)
        record.levelname = f"{color}[{record.levelname}]{_RESET}"
        return super().format(record)


def get_access_logger() -> logging.Logger:
    return logging.getLogger(ACCESS_LOGGER_NAME)


def _bare_stdout_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def ensure_access_handler() -> None:
    """Give the access logger a bare stdout handler when nothing else would print its INFO lines.

    No-op if the access logger already has handlers or the root logger is configured (setup_logging, embedding app).
    """
    access = get_access_logger()
    if access.handlers or logging.root.handlers:
        return
    access.addHandler(_bare_stdout_handler())
    access.setLevel(logging.INFO)


def format_request_line(received_at: datetime, method: str, url: str) -> str:
    """Request log line: '<ISO-8601> - <METHOD> <URL>'."""
    return f"{iso_timestamp(received_at)} - {method} {url}"


def setup_logging(level: str = "info") -> None:
    """Configure colored root logging on stdout; access lines go to stdout unformatted."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        ColoredFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logging.root.handlers.clear()
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))

    access_handler = _bare_stdout_handler()
    access = get_access_logger()
    access.handlers.clear()
    access.addHandler(access_handler)
    access.setLevel(logging.INFO)
    access.propagate = False
