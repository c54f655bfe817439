"""
Exception classes for habit-tracker.
"""


class HabitTrackerError(Exception):
    """Base exception for all habit-tracker errors."""
    pass


class ConfigurationError(HabitTrackerError):
    """Raised when configuration is invalid or missing."""
    pass


class StorageError(HabitTrackerError):
    """Raised when the habit data file cannot be read or written."""
    pass


class HabitNotFoundError(HabitTrackerError):
    """Raised when a habit (or completion) cannot be found."""
    pass


class ValidationError(HabitTrackerError):
    """Raised when user-supplied data is malformed."""
    pass
