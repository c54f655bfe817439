"""Track command - log completions and skips."""

from datetime import datetime
from typing import Optional

from ..analytics.statistics import compute_streaks
from ..core.exceptions import ValidationError
from ..utils.date import parse_date
from .base import BaseCommand


class TrackCommand(BaseCommand):
    """Command for marking a habit done (or skipped) on a day."""

    def _resolve_when(self, date_str: Optional[str]):
        if not date_str:
            return None
        target = parse_date(date_str)
        if target is None:
            raise ValidationError(f"Invalid date {date_str!r}, expected YYYY-MM-DD")
        return target

    def done(
        self,
        ref: str,
        date_str: Optional[str] = None,
        value: Optional[int] = None,
        note: Optional[str] = None,
        mood: Optional[str] = None,
    ) -> bool:
        """Log a completion and report the resulting streak."""
        try:
            tz = self.config.tzinfo()
            habit = self.repository.find_habit(ref)
            when = self._resolve_when(date_str)
            if when is None and tz is not None:
                when = datetime.now(tz)

            record = self.repository.complete_habit(habit.id, when=when, value=value, note=note, mood=mood)
            self.logger.info("Logged completion %s for %s", record.id, habit.name)

            streaks = compute_streaks(self.repository.get_completions(habit.id), tz=tz)
            emoji = "🔥" if streaks.current_streak >= 3 else "✓"
            print(f"{emoji} '{habit.name}' done. Current streak: {streaks.current_streak} days "
                  f"(best: {streaks.longest_streak})")
            return True
        except Exception as exc:
            return self._fail("Complete habit", exc)

    def skip(self, ref: str, date_str: Optional[str] = None, note: Optional[str] = None) -> bool:
        """Log an explicit skip; it never counts towards streaks or rates."""
        try:
            tz = self.config.tzinfo()
            habit = self.repository.find_habit(ref)
            when = self._resolve_when(date_str)
            if when is None and tz is not None:
                when = datetime.now(tz)

            self.repository.skip_habit(habit.id, when=when, note=note)
            print(f"– '{habit.name}' skipped")
            return True
        except Exception as exc:
            return self._fail("Skip habit", exc)
