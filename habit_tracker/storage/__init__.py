"""Local persistence for habits and completion records."""

from .repository import HabitRepository

__all__ = ['HabitRepository']
