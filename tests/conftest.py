#!/usr/bin/env python3
"""
Global pytest configuration and fixtures.

This module provides:
- An isolated HABIT_TRACKER_HOME for every test
- A repository on a temporary store
- Factories for completion records on fixed calendar days
"""

import os
import sys
from datetime import date, datetime, time, timedelta
from itertools import count
from typing import Callable, Optional

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from habit_tracker.core.models import AppConfig, CompletionRecord
from habit_tracker.storage.repository import HabitRepository


# Fixed reference day so streak arithmetic never depends on the wall clock
REFERENCE_DAY = date(2024, 3, 15)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point the working directory at a temporary location."""
    home = tmp_path / "home"
    monkeypatch.setenv("HABIT_TRACKER_HOME", str(home))
    return home


@pytest.fixture
def today() -> date:
    return REFERENCE_DAY


@pytest.fixture
def make_record() -> Callable[..., CompletionRecord]:
    """Build completion records; ``day`` may be a date or an offset from REFERENCE_DAY."""
    ids = count(1)

    def _make(day=0, hour: int = 12, minute: int = 0, skipped: bool = False,
              habit_id: str = "habit-1", at: Optional[datetime] = None) -> CompletionRecord:
        if at is None:
            if isinstance(day, int):
                day = REFERENCE_DAY - timedelta(days=day)
            at = datetime.combine(day, time(hour, minute))
        return CompletionRecord(
            id=f"rec-{next(ids)}",
            habit_id=habit_id,
            completed_at=at,
            skipped=skipped,
        )

    return _make


@pytest.fixture
def store_path(tmp_path) -> str:
    return str(tmp_path / "data" / "habits.json")


@pytest.fixture
def repository(store_path) -> HabitRepository:
    """Repository on an empty temporary store."""
    return HabitRepository(store_path)


@pytest.fixture
def config(store_path) -> AppConfig:
    """Configuration pointing at the temporary store."""
    return AppConfig(data_path=store_path)
