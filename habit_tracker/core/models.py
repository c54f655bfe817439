"""
Domain models for habit-tracker.

This module contains the data structures shared by the habit repository,
the statistics calculator and the command-line interface.
"""

from __future__ import annotations

import json
import os
import random
import string
import time
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from enum import Enum
from typing import Any, Dict, Optional

from .paths import get_path_manager


_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_id() -> str:
    """Generate an identifier of the form ``<epoch-millis>-<9 base36 chars>``."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{int(time.time() * 1000)}-{suffix}"


def _normalize_path(path: str) -> str:
    """Expand user and convert to absolute path."""
    return os.path.abspath(os.path.expanduser(path))


def _datetime_to_iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


def _iso_to_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    # fromisoformat only understands a trailing "Z" from Python 3.11 on
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None


def _int_setting(data: Dict[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


class Frequency(Enum):
    """How often a habit is meant to be performed."""

    DAILY = "daily"
    WEEKLY = "weekly"
    CUSTOM = "custom"


class Mood(Enum):
    """Optional mood attached to a completion."""

    GREAT = "great"
    GOOD = "good"
    OKAY = "okay"
    BAD = "bad"


@dataclass
class Habit:
    """A user-defined recurring action."""

    id: str
    name: str
    description: Optional[str] = None
    color: str = "#4A90D9"
    icon: str = "star"
    frequency: Frequency = Frequency.DAILY
    target_value: Optional[int] = None
    unit: Optional[str] = None
    reminder_time: Optional[str] = None
    category_id: Optional[str] = None
    archived: bool = False
    archived_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    order: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "color": self.color,
            "icon": self.icon,
            "frequency": self.frequency.value,
            "target_value": self.target_value,
            "unit": self.unit,
            "reminder_time": self.reminder_time,
            "category_id": self.category_id,
            "archived": self.archived,
            "archived_at": _datetime_to_iso(self.archived_at),
            "created_at": _datetime_to_iso(self.created_at),
            "updated_at": _datetime_to_iso(self.updated_at),
            "order": self.order,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Habit:
        try:
            frequency = Frequency(data.get("frequency", Frequency.DAILY.value))
        except ValueError:
            frequency = Frequency.DAILY

        now = datetime.now()
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            description=data.get("description"),
            color=data.get("color", "#4A90D9"),
            icon=data.get("icon", "star"),
            frequency=frequency,
            target_value=data.get("target_value"),
            unit=data.get("unit"),
            reminder_time=data.get("reminder_time"),
            category_id=data.get("category_id"),
            archived=bool(data.get("archived", False)),
            archived_at=_iso_to_datetime(data.get("archived_at")),
            created_at=_iso_to_datetime(data.get("created_at")) or now,
            updated_at=_iso_to_datetime(data.get("updated_at")) or now,
            order=int(data.get("order", 0)),
        )


@dataclass
class Category:
    """A named group of habits such as Health or Learning."""

    id: str
    name: str
    color: str = "#6366F1"
    icon: str = "folder"
    order: int = 0
    is_custom: bool = True
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "icon": self.icon,
            "order": self.order,
            "is_custom": self.is_custom,
            "created_at": _datetime_to_iso(self.created_at),
            "updated_at": _datetime_to_iso(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Category:
        now = datetime.now()
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            color=data.get("color", "#6366F1"),
            icon=data.get("icon", "folder"),
            order=int(data.get("order", 0)),
            is_custom=bool(data.get("is_custom", True)),
            created_at=_iso_to_datetime(data.get("created_at")) or now,
            updated_at=_iso_to_datetime(data.get("updated_at")) or now,
        )


@dataclass
class CompletionRecord:
    """A timestamped "done" (or explicitly skipped) event for one habit."""

    id: str
    habit_id: str
    completed_at: datetime
    skipped: bool = False
    value: Optional[int] = None
    note: Optional[str] = None
    mood: Optional[Mood] = None
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "habit_id": self.habit_id,
            "completed_at": _datetime_to_iso(self.completed_at),
            "skipped": self.skipped,
            "value": self.value,
            "note": self.note,
            "mood": self.mood.value if self.mood else None,
            "created_at": _datetime_to_iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CompletionRecord:
        completed_at = _iso_to_datetime(data.get("completed_at"))
        if completed_at is None:
            raise ValueError(f"Completion {data.get('id')!r} has no valid completed_at")

        mood = None
        if data.get("mood"):
            try:
                mood = Mood(data["mood"])
            except ValueError:
                mood = None

        return cls(
            id=data["id"],
            habit_id=data["habit_id"],
            completed_at=completed_at,
            skipped=bool(data.get("skipped", False)),
            value=data.get("value"),
            note=data.get("note"),
            mood=mood,
            created_at=_iso_to_datetime(data.get("created_at")) or completed_at,
        )


@dataclass(frozen=True)
class StreakResult:
    """Current and longest streak of a habit."""

    current_streak: int
    longest_streak: int
    last_completed_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "last_completed_at": _datetime_to_iso(self.last_completed_at),
        }


@dataclass(frozen=True)
class SuccessRateResult:
    """Share of days in a window with at least one completion."""

    success_rate: int
    total_days: int
    completed_days: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success_rate": self.success_rate,
            "total_days": self.total_days,
            "completed_days": self.completed_days,
        }


@dataclass(frozen=True)
class HabitStats:
    """Everything the stats views show for one habit."""

    habit: Habit
    streaks: StreakResult
    success: SuccessRateResult
    total_completions: int
    completed_today: bool
    window_start: date
    window_end: date

    def to_dict(self) -> Dict[str, Any]:
        return {
            "habit_id": self.habit.id,
            "name": self.habit.name,
            "total_completions": self.total_completions,
            "completed_today": self.completed_today,
            "window": {
                "start": self.window_start.isoformat(),
                "end": self.window_end.isoformat(),
            },
            **self.streaks.to_dict(),
            **self.success.to_dict(),
        }


@dataclass
class AppConfig:
    """User configuration for habit-tracker."""

    timezone: str = "local"
    success_window_days: int = 30
    first_day_of_week: int = 1  # 0 = Sunday, 1 = Monday
    data_path: Optional[str] = None
    log_to_file: bool = False

    def __post_init__(self) -> None:
        if self.data_path is None:
            self.data_path = str(get_path_manager().data_path)
        else:
            self.data_path = _normalize_path(self.data_path)

        if self.success_window_days < 1:
            self.success_window_days = 1
        if self.first_day_of_week not in (0, 1):
            self.first_day_of_week = 1

    def tzinfo(self) -> Optional[tzinfo]:
        """Resolve the configured timezone; ``None`` means host local time."""
        from ..utils.date import resolve_timezone

        return resolve_timezone(self.timezone)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timezone": self.timezone,
            "success_window_days": self.success_window_days,
            "first_day_of_week": self.first_day_of_week,
            "log_to_file": self.log_to_file,
            "paths": {
                "data": self.data_path,
            },
        }

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------
    @classmethod
    def load_from_file(cls, config_path: str) -> AppConfig:
        """
        Load a configuration file.

        A missing or unreadable file gives the defaults, and so does any
        single setting of the wrong type.
        """
        from ..utils.io import safe_read_json

        data = safe_read_json(_normalize_path(config_path), default={})
        if not isinstance(data, dict):
            return cls()

        paths = data.get("paths")
        if not isinstance(paths, dict):
            paths = {}
        data_path = paths.get("data", data.get("data_path"))
        if not isinstance(data_path, str) or not data_path.strip():
            data_path = None

        timezone = data.get("timezone")
        if not isinstance(timezone, str) or not timezone.strip():
            timezone = "local"

        log_to_file = data.get("log_to_file", False)

        return cls(
            timezone=timezone,
            success_window_days=_int_setting(data, "success_window_days", 30),
            first_day_of_week=_int_setting(data, "first_day_of_week", 1),
            data_path=data_path,
            log_to_file=log_to_file if isinstance(log_to_file, bool) else False,
        )

    def save_to_file(self, config_path: str) -> None:
        config_path = _normalize_path(config_path)
        os.makedirs(os.path.dirname(config_path), exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as handle:
            json.dump(self.to_dict(), handle, indent=2, ensure_ascii=False)
