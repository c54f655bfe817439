"""
Command implementations for habit-tracker.
"""

from .manage import ManageCommand
from .track import TrackCommand
from .stats import StatsCommand
from .export import ExportCommand
from .config import ConfigCommand
from .category import CategoryCommand

__all__ = [
    'ManageCommand',
    'TrackCommand',
    'StatsCommand',
    'ExportCommand',
    'ConfigCommand',
    'CategoryCommand',
]
