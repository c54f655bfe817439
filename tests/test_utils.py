"""
Tests for utility modules (habit_tracker/utils/{io,date,log}.py).

Validates atomic writes, calendar-day conversion under the timezone policy
and logging setup.
"""

import json
import logging
import tempfile
from datetime import date, datetime, timedelta, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from habit_tracker.core.exceptions import ConfigurationError
from habit_tracker.utils.io import safe_read_json, safe_write_json, atomic_write, exclusive_lock, load_json
from habit_tracker.utils.date import (
    as_aware,
    end_of_day,
    format_date,
    parse_date,
    resolve_timezone,
    start_of_day,
    to_calendar_day,
)
from habit_tracker.utils.log import configure_logging


class TestIOUtils:
    """Test suite for habit_tracker/utils/io.py."""

    def test_safe_read_json_existing_file(self):
        """Test reading existing JSON file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            test_file = Path(tmpdir) / "test.json"
            test_data = {"key": "value", "number": 42}
            test_file.write_text(json.dumps(test_data))

            assert safe_read_json(str(test_file)) == test_data

    def test_safe_read_json_nonexistent_file(self):
        """Test reading non-existent file returns default."""
        result = safe_read_json("/nonexistent/file.json", default={"empty": True})

        assert result == {"empty": True}

    def test_safe_read_json_invalid_json(self, tmp_path):
        """Test reading invalid JSON returns default."""
        test_file = tmp_path / "invalid.json"
        test_file.write_text("not valid json {{{")

        assert safe_read_json(str(test_file), default={}) == {}

    def test_load_json_propagates_errors(self, tmp_path):
        test_file = tmp_path / "invalid.json"
        test_file.write_text("not valid json {{{")

        with pytest.raises(json.JSONDecodeError):
            load_json(str(test_file))
        with pytest.raises(FileNotFoundError):
            load_json(str(tmp_path / "missing.json"))

    def test_safe_write_json_creates_parent_dirs(self, tmp_path):
        """Test that parent directories are created if needed."""
        test_file = tmp_path / "nested" / "dir" / "file.json"

        assert safe_write_json(str(test_file), {"items": [1, 2, 3]}) is True
        assert json.loads(test_file.read_text()) == {"items": [1, 2, 3]}

    def test_safe_write_json_unserializable(self, tmp_path):
        test_file = tmp_path / "file.json"

        assert safe_write_json(str(test_file), {"when": object()}) is False
        assert not test_file.exists()

    def test_atomic_write_replaces_content(self, tmp_path):
        test_file = tmp_path / "out.txt"
        test_file.write_text("old")

        assert atomic_write(str(test_file), "new") is True
        assert test_file.read_text() == "new"
        assert not list(tmp_path.glob(".tmp_*"))

    def test_exclusive_lock_spans_read_and_write(self, tmp_path):
        """Test an unlocked read-modify-write inside a held lock."""
        test_file = tmp_path / "counter.json"
        test_file.write_text(json.dumps({"count": 1}))

        with exclusive_lock(str(test_file)):
            data = load_json(str(test_file), lock=False)
            data["count"] += 1
            assert safe_write_json(str(test_file), data, lock=False) is True

        assert load_json(str(test_file)) == {"count": 2}

    def test_exclusive_lock_times_out_when_held(self, tmp_path):
        test_file = tmp_path / "busy.json"

        with exclusive_lock(str(test_file)):
            with pytest.raises(TimeoutError):
                with exclusive_lock(str(test_file), timeout=0.1):
                    pass


class TestDateUtils:
    """Test suite for habit_tracker/utils/date.py."""

    def test_parse_date(self):
        assert parse_date("2024-03-15") == date(2024, 3, 15)
        assert parse_date("2024-3-5") == date(2024, 3, 5)
        assert parse_date("2024-03-15T10:00:00") == date(2024, 3, 15)
        assert parse_date("yesterday") is None
        assert parse_date(None) is None

    def test_format_date(self):
        assert format_date(date(2024, 3, 5)) == "2024-03-05"
        assert format_date(None) is None

    def test_calendar_day_of_naive_datetime(self):
        value = datetime(2024, 3, 15, 23, 59)

        assert to_calendar_day(value) == date(2024, 3, 15)
        assert to_calendar_day(value, timezone(timedelta(hours=-8))) == date(2024, 3, 15)

    def test_calendar_day_of_aware_datetime(self):
        value = datetime(2024, 3, 15, 23, 30, tzinfo=timezone.utc)

        assert to_calendar_day(value, timezone.utc) == date(2024, 3, 15)
        assert to_calendar_day(value, timezone(timedelta(hours=2))) == date(2024, 3, 16)
        assert to_calendar_day(value, timezone(timedelta(hours=-5))) == date(2024, 3, 15)

    def test_calendar_day_of_plain_date(self):
        assert to_calendar_day(date(2024, 3, 15)) == date(2024, 3, 15)

    def test_calendar_day_rejects_other_types(self):
        with pytest.raises(TypeError):
            to_calendar_day("2024-03-15")

    def test_as_aware(self):
        plus_two = timezone(timedelta(hours=2))
        naive = datetime(2024, 3, 15, 12, 0)

        assert as_aware(naive, plus_two).tzinfo is plus_two
        assert as_aware(naive).tzinfo is not None
        aware = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)
        assert as_aware(aware, plus_two) is aware

    def test_day_bounds(self):
        day = date(2024, 3, 15)

        start = start_of_day(day, timezone.utc)
        end = end_of_day(day, timezone.utc)

        assert start == datetime(2024, 3, 15, 0, 0, tzinfo=timezone.utc)
        assert end.date() == day
        assert end.hour == 23 and end.minute == 59

    def test_resolve_timezone(self):
        assert resolve_timezone("local") is None
        assert resolve_timezone("") is None
        assert resolve_timezone(None) is None
        assert resolve_timezone("UTC") is not None

    def test_resolve_unknown_timezone(self):
        with pytest.raises(ConfigurationError):
            resolve_timezone("Mars/Olympus_Mons")


class TestLogging:
    """Test suite for habit_tracker/utils/log.py."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers = list(root.handlers)
        level = root.level
        yield
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers = handlers
        root.setLevel(level)

    def test_verbose_sets_debug(self):
        configure_logging(verbose=True)

        assert logging.getLogger().level == logging.DEBUG

    def test_file_handler_added_once(self, tmp_path):
        log_file = tmp_path / "logs" / "habit-tracker.log"

        configure_logging(log_file=str(log_file))
        configure_logging(log_file=str(log_file))

        file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert logging.getLogger().level == logging.INFO

        logging.getLogger("habit_tracker.test").info("written to file")
        file_handlers[0].flush()
        assert "written to file" in log_file.read_text()
