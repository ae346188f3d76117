"""Core utilities: clock, errors, logging setup."""

from src.core.clock import iso_timestamp, utc_now
from src.core.errors import BindError

__all__ = ["BindError", "iso_timestamp", "utc_now"]
