"""
Core module for habit-tracker - contains domain models, configuration, and exceptions.
"""

from .models import (
    Habit,
    Category,
    CompletionRecord,
    Frequency,
    Mood,
    StreakResult,
    SuccessRateResult,
    HabitStats,
    AppConfig
)

from .exceptions import (
    HabitTrackerError,
    ConfigurationError,
    StorageError,
    HabitNotFoundError,
    ValidationError
)

__all__ = [
    # Models
    'Habit',
    'Category',
    'CompletionRecord',
    'Frequency',
    'Mood',
    'StreakResult',
    'SuccessRateResult',
    'HabitStats',
    'AppConfig',
    # Exceptions
    'HabitTrackerError',
    'ConfigurationError',
    'StorageError',
    'HabitNotFoundError',
    'ValidationError'
]
