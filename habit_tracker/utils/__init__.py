"""
Utility functions for habit-tracker.
"""

from .io import exclusive_lock, load_json, safe_read_json, safe_write_json, atomic_write
from .date import (
    parse_date, format_date, to_calendar_day, resolve_timezone,
    as_aware, start_of_day, end_of_day, today
)
from .log import configure_logging

__all__ = [
    # I/O utilities
    'exclusive_lock',
    'load_json',
    'safe_read_json',
    'safe_write_json',
    'atomic_write',
    # Date utilities
    'parse_date',
    'format_date',
    'to_calendar_day',
    'resolve_timezone',
    'as_aware',
    'start_of_day',
    'end_of_day',
    'today',
    # Logging
    'configure_logging'
]
