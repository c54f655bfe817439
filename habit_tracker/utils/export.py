"""
Export of habit data to JSON and CSV.
"""

import csv
import io
import json
from datetime import datetime, timezone
from typing import Any, Dict

from ..core.models import AppConfig
from ..analytics.statistics import get_total_completions


EXPORT_VERSION = "1.0.0"
CSV_HEADER = ["Habit Name", "Frequency", "Target Value", "Unit", "Created Date", "Completed Count"]


def build_export(repository, config: AppConfig) -> Dict[str, Any]:
    """Collect every habit (archived included), the categories and all completions."""
    habits = repository.get_all_habits(include_archived=True)
    settings = config.to_dict()
    settings.pop("paths", None)

    return {
        "version": EXPORT_VERSION,
        "export_date": datetime.now(timezone.utc).isoformat(),
        "habits": [habit.to_dict() for habit in habits],
        "categories": [category.to_dict() for category in repository.get_all_categories()],
        "completions": {
            habit.id: [record.to_dict() for record in repository.get_completions(habit.id)]
            for habit in habits
        },
        "settings": settings,
    }


def export_to_json(repository, config: AppConfig) -> str:
    """Export all habit data as a pretty-printed JSON document."""
    return json.dumps(build_export(repository, config), indent=2, ensure_ascii=False)


def export_to_csv(repository) -> str:
    """
    Export one row per active habit with its completion count.

    Skipped records are not counted.
    """
    buffer = io.StringIO()
    buffer.write(",".join(CSV_HEADER) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")

    for habit in repository.get_all_habits():
        completions = repository.get_completions(habit.id)
        writer.writerow([
            habit.name,
            habit.frequency.value,
            habit.target_value if habit.target_value is not None else "",
            habit.unit or "",
            habit.created_at.isoformat(),
            get_total_completions(completions),
        ])

    return buffer.getvalue()

