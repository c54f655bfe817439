"""Manage command - create, list, archive and delete habits."""

from typing import Optional

from ..analytics.statistics import summarize_habit
from ..core.models import Frequency
from ..utils.insights import format_habit_list
from .base import BaseCommand


class ManageCommand(BaseCommand):
    """Command for maintaining the set of tracked habits."""

    def add(
        self,
        name: str,
        description: Optional[str] = None,
        frequency: str = Frequency.DAILY.value,
        color: Optional[str] = None,
        icon: Optional[str] = None,
        target: Optional[int] = None,
        unit: Optional[str] = None,
        category: Optional[str] = None,
    ) -> bool:
        try:
            fields = {"description": description, "frequency": frequency,
                      "target_value": target, "unit": unit}
            if category:
                self.repository.initialize_default_categories()
                fields["category_id"] = self.repository.find_category(category).id
            if color:
                fields["color"] = color
            if icon:
                fields["icon"] = icon

            habit = self.repository.create_habit(name, **fields)
            print(f"✓ Added habit '{habit.name}' ({habit.id})")
            return True
        except Exception as exc:
            return self._fail("Add habit", exc)

    def list_habits(self, include_archived: bool = False, category: Optional[str] = None) -> bool:
        """Print every habit with its streak, success rate and today marker."""
        try:
            tz = self.config.tzinfo()
            category_id = self.repository.find_category(category).id if category else None
            habits = self.repository.get_all_habits(include_archived=include_archived, category_id=category_id)
            rows = [
                summarize_habit(
                    habit,
                    self.repository.get_completions(habit.id),
                    window_days=self.config.success_window_days,
                    tz=tz,
                )
                for habit in habits
            ]
            print(format_habit_list(rows))
            return True
        except Exception as exc:
            return self._fail("List habits", exc)

    def archive(self, ref: str) -> bool:
        try:
            habit = self.repository.find_habit(ref)
            self.repository.archive_habit(habit.id)
            print(f"✓ Archived '{habit.name}'")
            return True
        except Exception as exc:
            return self._fail("Archive habit", exc)

    def delete(self, ref: str) -> bool:
        """Delete a habit and all of its completions."""
        try:
            habit = self.repository.find_habit(ref)
            self.repository.delete_habit(habit.id)
            print(f"✓ Deleted '{habit.name}' and its history")
            return True
        except Exception as exc:
            return self._fail("Delete habit", exc)
