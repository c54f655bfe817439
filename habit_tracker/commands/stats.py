"""Stats command - streaks, success rates and completion heatmaps."""

import json
from typing import Optional

from ..analytics.statistics import (
    get_best_time_of_day,
    get_completion_dates,
    get_weekly_stats,
    summarize_habit,
)
from ..utils.date import today as current_day
from ..utils.insights import format_heatmap, format_stats_report
from .base import BaseCommand


class StatsCommand(BaseCommand):
    """Command for showing statistics of one habit or of all habits."""

    def run(self, ref: Optional[str] = None, days: Optional[int] = None, as_json: bool = False) -> bool:
        """
        Show statistics.

        Args:
            ref: Habit id or name; all active habits when omitted
            days: Success-rate window in days (defaults to the configured window)
            as_json: Print machine-readable JSON instead of the report

        Returns:
            True if successful, False otherwise
        """
        try:
            tz = self.config.tzinfo()
            anchor = current_day(tz)
            window = days if days and days > 0 else self.config.success_window_days

            if ref:
                habits = [self.repository.find_habit(ref)]
            else:
                habits = self.repository.get_all_habits()

            if not habits:
                print("No habits yet. Add one with 'habit-tracker add NAME'.")
                return True

            reports = []
            for habit in habits:
                completions = self.repository.get_completions(habit.id)
                stats = summarize_habit(habit, completions, window_days=window, today=anchor, tz=tz)
                week = get_weekly_stats(completions, today=anchor, tz=tz)
                best_time = get_best_time_of_day(completions, tz=tz)
                self.logger.debug("Computed stats for %s from %d records", habit.name, len(completions))

                if as_json:
                    entry = stats.to_dict()
                    entry["best_time_of_day"] = best_time
                    entry["last_7_days"] = [
                        {"day": d["day"], "date": d["date"].isoformat(), "count": d["count"]}
                        for d in week
                    ]
                    reports.append(entry)
                else:
                    reports.append(format_stats_report(stats, week=week, best_time=best_time))

            if as_json:
                print(json.dumps(reports, indent=2, ensure_ascii=False))
            else:
                print("\n\n".join(reports))
            return True

        except Exception as exc:
            return self._fail("Stats", exc)

    def heatmap(self, ref: str, weeks: int = 12) -> bool:
        """Print a calendar density grid for one habit."""
        try:
            tz = self.config.tzinfo()
            habit = self.repository.find_habit(ref)
            per_day = get_completion_dates(self.repository.get_completions(habit.id), tz=tz)

            print(f"\n  {habit.name}\n")
            print(format_heatmap(
                per_day,
                today=current_day(tz),
                weeks=weeks,
                first_day_of_week=self.config.first_day_of_week,
            ))
            return True
        except Exception as exc:
            return self._fail("Heatmap", exc)
