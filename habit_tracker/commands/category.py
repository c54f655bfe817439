"""Category command - group habits into categories."""

from collections import Counter
from typing import Optional

from ..utils.insights import format_category_list
from .base import BaseCommand


class CategoryCommand(BaseCommand):
    """Command for listing, creating and removing habit categories."""

    def list_categories(self) -> bool:
        """Print categories, seeding the defaults into an empty store first."""
        try:
            self.repository.initialize_default_categories()
            counts = Counter(habit.category_id for habit in self.repository.get_all_habits())
            print(format_category_list(self.repository.get_all_categories(), counts))
            return True
        except Exception as exc:
            return self._fail("List categories", exc)

    def add(self, name: str, color: Optional[str] = None, icon: Optional[str] = None) -> bool:
        try:
            self.repository.initialize_default_categories()
            category = self.repository.create_category(name, color=color, icon=icon)
            print(f"✓ Added category '{category.name}' ({category.id})")
            return True
        except Exception as exc:
            return self._fail("Add category", exc)

    def delete(self, ref: str) -> bool:
        try:
            category = self.repository.find_category(ref)
            released = self.repository.delete_category(category.id)
            print(f"✓ Deleted category '{category.name}' ({released} habits uncategorized)")
            return True
        except Exception as exc:
            return self._fail("Delete category", exc)

    def assign(self) -> bool:
        """Put every uncategorized habit into a default category by keyword."""
        try:
            self.repository.initialize_default_categories()
            updated = self.repository.assign_categories_to_habits()
            print(f"✓ Assigned categories to {updated} habits")
            return True
        except Exception as exc:
            return self._fail("Assign categories", exc)
