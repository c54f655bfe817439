"""Habit repository: CRUD operations over the local JSON habit store."""

import contextlib
import json
import logging
import os
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from ..core.exceptions import HabitNotFoundError, StorageError, ValidationError
from ..core.models import Category, CompletionRecord, Frequency, Habit, Mood, generate_id
from ..utils.date import as_aware
from ..utils.io import exclusive_lock, load_json, safe_write_json


STORE_VERSION = 1

# Fields callers may change through update_habit
UPDATABLE_FIELDS = (
    "name",
    "description",
    "color",
    "icon",
    "frequency",
    "target_value",
    "unit",
    "reminder_time",
    "category_id",
    "order",
)

CATEGORY_FIELDS = ("name", "color", "icon", "order")

# Seeded into a store that has no categories yet
DEFAULT_CATEGORIES = (
    {"name": "Health", "color": "#10B981", "icon": "💪"},
    {"name": "Productivity", "color": "#6366F1", "icon": "⚡"},
    {"name": "Learning", "color": "#F59E0B", "icon": "📚"},
)

# Keyword rules for assign_categories_to_habits; anything unmatched is Productivity
CATEGORY_KEYWORDS = (
    ("Health", ("exercise", "workout", "meditation", "yoga", "water", "sleep", "health"),
               ("fitness", "barbell", "body", "water", "heart", "moon")),
    ("Learning", ("learn", "study", "read", "book", "language", "spanish", "course"),
                 ("book", "school", "language")),
)
FALLBACK_CATEGORY = "Productivity"


def _empty_store() -> Dict[str, Any]:
    return {"version": STORE_VERSION, "habits": [], "completions": [], "categories": []}


class HabitRepository:
    """
    Persists habits, categories and completion records in a single JSON document.

    The store is re-read on every call, so several processes may share one
    file. Every change is a read-modify-write held under one exclusive file
    lock, and the write itself is atomic.
    """

    def __init__(
        self,
        data_path: str,
        logger: Optional[logging.Logger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.data_path = os.path.abspath(os.path.expanduser(data_path))
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock or datetime.now

    # ------------------------------------------------------------------
    # Store access
    # ------------------------------------------------------------------
    def _load(self, lock: bool = True) -> Dict[str, Any]:
        if not os.path.exists(self.data_path):
            return _empty_store()

        try:
            data = load_json(self.data_path, lock=lock)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Habit store {self.data_path} is corrupt: {exc}") from exc
        except OSError as exc:
            raise StorageError(f"Cannot read habit store {self.data_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise StorageError(f"Habit store {self.data_path} has an unexpected layout")

        data.setdefault("habits", [])
        data.setdefault("completions", [])
        data.setdefault("categories", [])
        return data

    def _save(self, data: Dict[str, Any], lock: bool = True) -> None:
        data["version"] = STORE_VERSION
        if not safe_write_json(self.data_path, data, lock=lock):
            raise StorageError(f"Failed to write habit store {self.data_path}")
        self.logger.debug(
            "Saved %d habits and %d completions to %s",
            len(data["habits"]), len(data["completions"]), self.data_path
        )

    @contextlib.contextmanager
    def _transaction(self) -> Iterator[Dict[str, Any]]:
        """
        Yield the store for modification and save it on a clean exit.

        Nothing is written when the block raises.
        """
        try:
            with exclusive_lock(self.data_path):
                data = self._load(lock=False)
                yield data
                self._save(data, lock=False)
        except TimeoutError as exc:
            raise StorageError(f"Timed out waiting for habit store {self.data_path}") from exc

    @staticmethod
    def _index_of(entries: List[Dict[str, Any]], entry_id: str) -> int:
        for index, entry in enumerate(entries):
            if entry.get("id") == entry_id:
                return index
        return -1

    # ------------------------------------------------------------------
    # Habits
    # ------------------------------------------------------------------
    def get_all_habits(self, include_archived: bool = False, category_id: Optional[str] = None) -> List[Habit]:
        """List habits ordered by their display order, then name."""
        habits = [Habit.from_dict(entry) for entry in self._load()["habits"]]
        if not include_archived:
            habits = [h for h in habits if not h.archived]
        if category_id is not None:
            habits = [h for h in habits if h.category_id == category_id]
        return sorted(habits, key=lambda h: (h.order, h.name.lower()))

    def get_habit_by_id(self, habit_id: str) -> Optional[Habit]:
        data = self._load()
        index = self._index_of(data["habits"], habit_id)
        if index < 0:
            return None
        return Habit.from_dict(data["habits"][index])

    def find_habit(self, ref: str) -> Habit:
        """
        Resolve a habit by id, or by case-insensitive name.

        Raises:
            HabitNotFoundError: if no habit, or more than one, matches
        """
        habit = self.get_habit_by_id(ref)
        if habit is not None:
            return habit

        wanted = ref.strip().lower()
        matches = [h for h in self.get_all_habits(include_archived=True) if h.name.lower() == wanted]
        if not matches:
            raise HabitNotFoundError(f"No habit named or identified by {ref!r}")
        if len(matches) > 1:
            ids = ", ".join(h.id for h in matches)
            raise HabitNotFoundError(f"Several habits are named {ref!r}; use an id ({ids})")
        return matches[0]

    def create_habit(self, name: str, **fields: Any) -> Habit:
        """Create a habit; extra fields are any of UPDATABLE_FIELDS."""
        if not name or not name.strip():
            raise ValidationError("Habit name cannot be empty")

        with self._transaction() as data:
            now = self.clock()
            order = fields.pop("order", None)
            if order is None:
                order = max((entry.get("order", 0) for entry in data["habits"]), default=-1) + 1

            habit = Habit(id=generate_id(), name=name.strip(), created_at=now, updated_at=now, order=order)
            self._apply_fields(habit, fields, data)
            data["habits"].append(habit.to_dict())

        self.logger.info("Created habit %s (%s)", habit.name, habit.id)
        return habit

    def update_habit(self, habit_id: str, **fields: Any) -> Habit:
        with self._transaction() as data:
            index = self._index_of(data["habits"], habit_id)
            if index < 0:
                raise HabitNotFoundError(f"Habit {habit_id} not found")

            habit = Habit.from_dict(data["habits"][index])
            self._apply_fields(habit, fields, data)
            habit.updated_at = self.clock()
            data["habits"][index] = habit.to_dict()
        return habit

    def _apply_fields(self, habit: Habit, fields: Dict[str, Any], data: Dict[str, Any]) -> None:
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown habit fields: {', '.join(sorted(unknown))}")

        if "name" in fields:
            if not fields["name"] or not str(fields["name"]).strip():
                raise ValidationError("Habit name cannot be empty")
            fields["name"] = str(fields["name"]).strip()

        if "frequency" in fields and not isinstance(fields["frequency"], Frequency):
            try:
                fields["frequency"] = Frequency(fields["frequency"])
            except ValueError as exc:
                raise ValidationError(f"Unknown frequency: {fields['frequency']!r}") from exc

        category_id = fields.get("category_id")
        if category_id is not None and self._index_of(data["categories"], category_id) < 0:
            raise ValidationError(f"Unknown category: {category_id!r}")

        for key, value in fields.items():
            setattr(habit, key, value)

    def delete_habit(self, habit_id: str) -> None:
        """Delete a habit together with all of its completion records."""
        with self._transaction() as data:
            index = self._index_of(data["habits"], habit_id)
            if index < 0:
                raise HabitNotFoundError(f"Habit {habit_id} not found")

            removed = data["habits"].pop(index)
            before = len(data["completions"])
            data["completions"] = [c for c in data["completions"] if c.get("habit_id") != habit_id]
            dropped = before - len(data["completions"])

        self.logger.info("Deleted habit %s and %d completions", removed.get("name"), dropped)

    def archive_habit(self, habit_id: str) -> Habit:
        with self._transaction() as data:
            index = self._index_of(data["habits"], habit_id)
            if index < 0:
                raise HabitNotFoundError(f"Habit {habit_id} not found")

            habit = Habit.from_dict(data["habits"][index])
            now = self.clock()
            habit.archived = True
            habit.archived_at = now
            habit.updated_at = now
            data["habits"][index] = habit.to_dict()
        return habit

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------
    def get_all_categories(self) -> List[Category]:
        categories = [Category.from_dict(entry) for entry in self._load()["categories"]]
        return sorted(categories, key=lambda c: (c.order, c.name.lower()))

    def find_category(self, ref: str) -> Category:
        """
        Resolve a category by id, or by case-insensitive name.

        Raises:
            HabitNotFoundError: if no category, or more than one, matches
        """
        categories = self.get_all_categories()
        for category in categories:
            if category.id == ref:
                return category

        wanted = ref.strip().lower()
        matches = [c for c in categories if c.name.lower() == wanted]
        if len(matches) != 1:
            problem = "Several categories are" if matches else "No category is"
            raise HabitNotFoundError(f"{problem} named {ref!r}")
        return matches[0]

    def create_category(self, name: str, is_custom: bool = True, **fields: Any) -> Category:
        """Create a category; extra fields are any of CATEGORY_FIELDS."""
        if not name or not name.strip():
            raise ValidationError("Category name cannot be empty")
        unknown = set(fields) - set(CATEGORY_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown category fields: {', '.join(sorted(unknown))}")

        with self._transaction() as data:
            category = self._new_category(data, name.strip(), is_custom, fields)

        self.logger.info("Created category %s (%s)", category.name, category.id)
        return category

    def _new_category(
        self,
        data: Dict[str, Any],
        name: str,
        is_custom: bool,
        fields: Dict[str, Any],
    ) -> Category:
        now = self.clock()
        order = fields.pop("order", None)
        if order is None:
            order = max((entry.get("order", 0) for entry in data["categories"]), default=-1) + 1

        category = Category(
            id=generate_id(),
            name=name,
            order=order,
            is_custom=is_custom,
            created_at=now,
            updated_at=now,
        )
        for key, value in fields.items():
            if value is not None:
                setattr(category, key, value)
        data["categories"].append(category.to_dict())
        return category

    def update_category(self, category_id: str, **fields: Any) -> Category:
        unknown = set(fields) - set(CATEGORY_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown category fields: {', '.join(sorted(unknown))}")
        if "name" in fields and (not fields["name"] or not str(fields["name"]).strip()):
            raise ValidationError("Category name cannot be empty")

        with self._transaction() as data:
            index = self._index_of(data["categories"], category_id)
            if index < 0:
                raise HabitNotFoundError(f"Category {category_id} not found")

            category = Category.from_dict(data["categories"][index])
            for key, value in fields.items():
                setattr(category, key, value.strip() if key == "name" else value)
            category.updated_at = self.clock()
            data["categories"][index] = category.to_dict()
        return category

    def delete_category(self, category_id: str) -> int:
        """
        Delete a category; its habits are kept without a category.

        Returns:
            Number of habits that lost the category
        """
        with self._transaction() as data:
            index = self._index_of(data["categories"], category_id)
            if index < 0:
                raise HabitNotFoundError(f"Category {category_id} not found")

            data["categories"].pop(index)
            released = 0
            for entry in data["habits"]:
                if entry.get("category_id") == category_id:
                    entry["category_id"] = None
                    released += 1
        return released

    def initialize_default_categories(self) -> List[Category]:
        """
        Seed Health, Productivity and Learning into a store without categories.

        Returns:
            The categories created; empty when the store already had some
        """
        with self._transaction() as data:
            if data["categories"]:
                return []
            created = [
                self._new_category(data, seed["name"], False, {"color": seed["color"], "icon": seed["icon"]})
                for seed in DEFAULT_CATEGORIES
            ]

        self.logger.info("Seeded %d default categories", len(created))
        return created

    def assign_categories_to_habits(self) -> int:
        """
        Give every habit without a category one of the default categories.

        Habits are matched on name and icon keywords; anything unmatched goes
        to Productivity. Returns the number of habits updated, or 0 when the
        default categories are missing.
        """
        with self._transaction() as data:
            by_name = {entry.get("name"): entry.get("id") for entry in data["categories"]}
            wanted = [name for name, _, _ in CATEGORY_KEYWORDS] + [FALLBACK_CATEGORY]
            if not all(name in by_name for name in wanted):
                self.logger.warning("Default categories not found; initialize them first")
                return 0

            now = self.clock()
            updated = 0
            for entry in data["habits"]:
                if entry.get("category_id"):
                    continue
                name = str(entry.get("name", "")).lower()
                icon = str(entry.get("icon", "")).lower()
                target = FALLBACK_CATEGORY
                for category_name, name_words, icon_words in CATEGORY_KEYWORDS:
                    if any(w in name for w in name_words) or any(w in icon for w in icon_words):
                        target = category_name
                        break
                entry["category_id"] = by_name[target]
                entry["updated_at"] = now.isoformat()
                updated += 1

        self.logger.info("Assigned categories to %d habits", updated)
        return updated

    # ------------------------------------------------------------------
    # Completions
    # ------------------------------------------------------------------
    def _record(
        self,
        habit_id: str,
        when: Optional[Union[date, datetime]],
        skipped: bool,
        value: Optional[int] = None,
        note: Optional[str] = None,
        mood: Optional[Union[Mood, str]] = None,
    ) -> CompletionRecord:
        if mood is not None and not isinstance(mood, Mood):
            try:
                mood = Mood(mood)
            except ValueError as exc:
                raise ValidationError(f"Unknown mood: {mood!r}") from exc

        with self._transaction() as data:
            if self._index_of(data["habits"], habit_id) < 0:
                raise HabitNotFoundError(f"Habit {habit_id} not found")

            now = self.clock()
            if when is None:
                when = now
            elif not isinstance(when, datetime):
                # A bare day is logged at the current time of day
                when = datetime.combine(when, now.time(), tzinfo=now.tzinfo)

            record = CompletionRecord(
                id=generate_id(),
                habit_id=habit_id,
                completed_at=when,
                skipped=skipped,
                value=value,
                note=note,
                mood=mood,
                created_at=now,
            )
            data["completions"].append(record.to_dict())
        return record

    def complete_habit(
        self,
        habit_id: str,
        when: Optional[Union[date, datetime]] = None,
        value: Optional[int] = None,
        note: Optional[str] = None,
        mood: Optional[Union[Mood, str]] = None,
    ) -> CompletionRecord:
        """Log a completion; ``when`` defaults to now."""
        return self._record(habit_id, when, skipped=False, value=value, note=note, mood=mood)

    def skip_habit(
        self,
        habit_id: str,
        when: Optional[Union[date, datetime]] = None,
        note: Optional[str] = None,
    ) -> CompletionRecord:
        """Log an explicit "not done" marker."""
        return self._record(habit_id, when, skipped=True, note=note)

    def get_completions(
        self,
        habit_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[CompletionRecord]:
        """Completions of one habit, newest first, optionally within [start, end]."""
        records = []
        for entry in self._load()["completions"]:
            if entry.get("habit_id") != habit_id:
                continue
            try:
                record = CompletionRecord.from_dict(entry)
            except (KeyError, ValueError) as exc:
                self.logger.warning("Ignoring malformed completion %s: %s", entry.get("id"), exc)
                continue
            if start is not None and as_aware(record.completed_at) < as_aware(start):
                continue
            if end is not None and as_aware(record.completed_at) > as_aware(end):
                continue
            records.append(record)

        return sorted(records, key=lambda r: as_aware(r.completed_at), reverse=True)

    def delete_completion(self, completion_id: str) -> None:
        with self._transaction() as data:
            index = self._index_of(data["completions"], completion_id)
            if index < 0:
                raise HabitNotFoundError(f"Completion {completion_id} not found")
            data["completions"].pop(index)
