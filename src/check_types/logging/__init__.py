"""Structured logging utilities."""

from .events import JsonlEventLogger, SessionEvent, utc_timestamp

__all__ = ["JsonlEventLogger", "SessionEvent", "utc_timestamp"]
