"""
Tests for command classes (habit_tracker/commands/).

Commands run against a repository on a temporary store and are checked
through their printed output and return values.
"""

import json
from datetime import date, timedelta
from unittest.mock import patch

import pytest

from habit_tracker.commands import (
    CategoryCommand,
    ConfigCommand,
    ExportCommand,
    ManageCommand,
    StatsCommand,
    TrackCommand,
)
from habit_tracker.core.models import AppConfig


@pytest.fixture
def manage(config, repository):
    return ManageCommand(config, repository=repository)


@pytest.fixture
def track(config, repository):
    return TrackCommand(config, repository=repository)


@pytest.fixture
def stats(config, repository):
    return StatsCommand(config, repository=repository)


@pytest.fixture
def categories(config, repository):
    return CategoryCommand(config, repository=repository)


class TestManageCommand:
    """Adding, listing, archiving and deleting habits."""

    def test_add_and_list(self, manage, repository, capsys):
        assert manage.add("Read", target=20, unit="pages") is True
        assert "Added habit 'Read'" in capsys.readouterr().out

        [habit] = repository.get_all_habits()
        assert habit.target_value == 20

        assert manage.list_habits() is True
        assert "Read" in capsys.readouterr().out

    def test_add_invalid_frequency(self, manage, capsys):
        assert manage.add("Read", frequency="hourly") is False
        assert "Error:" in capsys.readouterr().out

    def test_list_empty(self, manage, capsys):
        assert manage.list_habits() is True
        assert "No habits yet" in capsys.readouterr().out

    def test_archive_by_name(self, manage, repository, capsys):
        repository.create_habit("Read")

        assert manage.archive("read") is True
        assert repository.get_all_habits() == []

        manage.list_habits(include_archived=True)
        assert "(archived)" in capsys.readouterr().out

    def test_delete_unknown_habit(self, manage, capsys):
        assert manage.delete("nothing") is False
        assert "Error:" in capsys.readouterr().out

    def test_unexpected_errors_are_reported(self, manage, repository):
        with patch.object(repository, "get_all_habits", side_effect=RuntimeError("boom")):
            assert manage.list_habits() is False

    def test_add_with_category(self, manage, repository, capsys):
        assert manage.add("Yoga", category="health") is True

        [habit] = repository.get_all_habits()
        assert habit.category_id == repository.find_category("Health").id

    def test_add_with_unknown_category(self, manage, repository, capsys):
        assert manage.add("Yoga", category="Hobbies") is False
        assert "Error:" in capsys.readouterr().out
        assert repository.get_all_habits() == []

    def test_list_by_category(self, manage, repository, capsys):
        manage.add("Yoga", category="Health")
        manage.add("Spanish", category="Learning")
        capsys.readouterr()

        assert manage.list_habits(category="learning") is True

        output = capsys.readouterr().out
        assert "Spanish" in output
        assert "Yoga" not in output


class TestTrackCommand:
    """Logging completions and skips."""

    def test_done_reports_streak(self, track, repository, capsys):
        habit = repository.create_habit("Read")
        yesterday = (date.today() - timedelta(days=1)).isoformat()

        assert track.done("Read", date_str=yesterday) is True
        assert track.done("Read", note="chapter 4", mood="good") is True

        output = capsys.readouterr().out
        assert "Current streak: 2 days" in output
        records = repository.get_completions(habit.id)
        assert len(records) == 2
        assert records[0].note == "chapter 4"

    def test_done_with_invalid_date(self, track, repository, capsys):
        repository.create_habit("Read")

        assert track.done("Read", date_str="last tuesday") is False
        assert "Invalid date" in capsys.readouterr().out

    def test_done_with_configured_timezone(self, store_path, repository):
        habit = repository.create_habit("Read")
        command = TrackCommand(AppConfig(timezone="UTC", data_path=store_path), repository=repository)

        assert command.done("Read") is True

        [record] = repository.get_completions(habit.id)
        assert record.completed_at.tzinfo is not None

    def test_skip(self, track, repository, capsys):
        habit = repository.create_habit("Read")

        assert track.skip("Read", note="travelling") is True
        assert "skipped" in capsys.readouterr().out
        [record] = repository.get_completions(habit.id)
        assert record.skipped is True


class TestStatsCommand:
    """Statistics reports and heatmaps."""

    def test_report_for_one_habit(self, stats, repository, capsys):
        habit = repository.create_habit("Read")
        repository.complete_habit(habit.id)

        assert stats.run("Read", days=7) is True

        output = capsys.readouterr().out
        assert "READ" in output
        assert "Current streak: 1 days" in output
        assert "(1/7 days" in output

    def test_json_for_all_habits(self, stats, repository, capsys):
        read = repository.create_habit("Read")
        repository.create_habit("Walk")
        repository.complete_habit(read.id)

        assert stats.run(as_json=True) is True

        reports = json.loads(capsys.readouterr().out)
        assert [r["name"] for r in reports] == ["Read", "Walk"]
        assert reports[0]["current_streak"] == 1
        assert reports[0]["total_days"] == 30
        assert len(reports[0]["last_7_days"]) == 7
        assert reports[1]["best_time_of_day"] is None

    def test_no_habits(self, stats, capsys):
        assert stats.run() is True
        assert "No habits yet" in capsys.readouterr().out

    def test_unknown_habit(self, stats, capsys):
        assert stats.run("missing") is False
        assert "Error:" in capsys.readouterr().out

    def test_heatmap(self, stats, repository, capsys):
        habit = repository.create_habit("Read")
        repository.complete_habit(habit.id)

        assert stats.heatmap("Read", weeks=4) is True

        output = capsys.readouterr().out
        assert "Read" in output
        assert output.count("░") == 2


class TestExportCommand:
    """Writing exports."""

    def test_export_to_file(self, config, repository, tmp_path, capsys):
        repository.create_habit("Read")
        target = tmp_path / "export" / "habits.csv"

        assert ExportCommand(config, repository=repository).run(fmt="csv", output=str(target)) is True

        assert target.read_text().startswith("Habit Name,")
        assert "Exported CSV" in capsys.readouterr().out

    def test_export_to_stdout(self, config, repository, capsys):
        repository.create_habit("Read")

        assert ExportCommand(config, repository=repository).run() is True

        exported = json.loads(capsys.readouterr().out)
        assert exported["habits"][0]["name"] == "Read"

    def test_failed_write(self, config, repository, capsys):
        with patch("habit_tracker.commands.export.atomic_write", return_value=False):
            assert ExportCommand(config, repository=repository).run(output="/tmp/x.json") is False
        assert "Could not write export" in capsys.readouterr().out


class TestConfigCommand:
    """Changing settings."""

    def test_updates_values(self, config, capsys):
        command = ConfigCommand(config)

        assert command.run(timezone="UTC", window=14, first_day="sunday", log_to_file=True) is True

        assert config.timezone == "UTC"
        assert config.success_window_days == 14
        assert config.first_day_of_week == 0
        assert config.log_to_file is True
        assert json.loads(capsys.readouterr().out)["timezone"] == "UTC"

    def test_rejects_unknown_timezone(self, config, capsys):
        assert ConfigCommand(config).run(timezone="Atlantis/Capital") is False
        assert config.timezone == "local"
        assert "Error:" in capsys.readouterr().out

    def test_rejects_empty_window(self, config):
        assert ConfigCommand(config).run(window=0) is False
        assert config.success_window_days == 30


class TestCategoryCommand:
    """Listing, adding, deleting and assigning categories."""

    def test_list_seeds_defaults(self, categories, repository, capsys):
        repository.create_habit("Read")

        assert categories.list_categories() is True

        output = capsys.readouterr().out
        assert "Health" in output and "Productivity" in output and "Learning" in output
        assert "(default)" in output
        assert len(repository.get_all_categories()) == 3

    def test_list_counts_habits(self, categories, repository, capsys):
        repository.initialize_default_categories()
        health = repository.find_category("Health")
        repository.create_habit("Yoga", category_id=health.id)
        repository.create_habit("Run", category_id=health.id)

        categories.list_categories()

        [line] = [row for row in capsys.readouterr().out.splitlines() if "Health" in row]
        assert "2 habits" in line

    def test_add(self, categories, repository, capsys):
        assert categories.add("Music", icon="🎵") is True
        assert "Added category 'Music'" in capsys.readouterr().out

        music = repository.find_category("Music")
        assert music.icon == "🎵"
        assert music.is_custom is True
        assert len(repository.get_all_categories()) == 4

    def test_delete(self, categories, repository, capsys):
        music = repository.create_category("Music")
        repository.create_habit("Piano", category_id=music.id)

        assert categories.delete("music") is True

        assert "1 habits uncategorized" in capsys.readouterr().out
        assert repository.get_all_categories() == []

    def test_delete_unknown(self, categories, capsys):
        assert categories.delete("Nothing") is False
        assert "Error:" in capsys.readouterr().out

    def test_assign(self, categories, repository, capsys):
        yoga = repository.create_habit("Yoga")
        book = repository.create_habit("Read a book")

        assert categories.assign() is True

        assert "Assigned categories to 2 habits" in capsys.readouterr().out
        assert repository.get_habit_by_id(yoga.id).category_id == repository.find_category("Health").id
        assert repository.get_habit_by_id(book.id).category_id == repository.find_category("Learning").id
