"""
Terminal formatting for habit lists, statistics reports and heatmaps.
"""

from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from ..core.models import Category, HabitStats
from .date import format_date


# Density glyphs indexed by completion count (capped at the last entry)
HEATMAP_GLYPHS = ("·", "░", "▒", "▓")
HEATMAP_FUTURE = " "


def format_habit_list(rows: List[HabitStats]) -> str:
    """
    Format the habit overview table.

    Args:
        rows: One HabitStats per habit, in display order

    Returns:
        Terminal-formatted table
    """
    if not rows:
        return "No habits yet. Add one with 'habit-tracker add NAME'."

    lines = []
    lines.append(f"  {'':2} {'Habit':<30} {'Streak':>7} {'Best':>5} {'Rate':>5}")
    lines.append("-" * 60)
    for stats in rows:
        marker = "✓" if stats.completed_today else " "
        name = stats.habit.name[:30]
        if stats.habit.archived:
            name = f"{name[:20]} (archived)"
        lines.append(
            f"  {marker:2} {name:<30} "
            f"{stats.streaks.current_streak:>6}d "
            f"{stats.streaks.longest_streak:>4}d "
            f"{stats.success.success_rate:>4}%"
        )
    return "\n".join(lines)


def format_category_list(categories: List[Category], habit_counts: Dict[str, int]) -> str:
    """Format categories with the number of active habits in each."""
    if not categories:
        return "No categories yet."

    lines = []
    for category in categories:
        count = habit_counts.get(category.id, 0)
        origin = "" if category.is_custom else "  (default)"
        lines.append(f"  {category.icon} {category.name:<20} {count:>3} habits{origin}")
    return "\n".join(lines)


def format_weekly_bars(week: List[Dict[str, Any]], width: int = 20) -> str:
    """Render get_weekly_stats output as horizontal bars."""
    peak = max((entry["count"] for entry in week), default=0)
    lines = []
    for entry in week:
        count = entry["count"]
        bar = "█" * (round(count / peak * width) if peak else 0)
        lines.append(f"    {entry['day']:<3} {bar:<{width}} {count}")
    return "\n".join(lines)


def format_stats_report(
    stats: HabitStats,
    week: Optional[List[Dict[str, Any]]] = None,
    best_time: Optional[str] = None
) -> str:
    """
    Format the detailed statistics of one habit for terminal display.

    Args:
        stats: Summary from summarize_habit
        week: Optional get_weekly_stats output
        best_time: Optional get_best_time_of_day output

    Returns:
        Terminal-formatted report
    """
    streaks = stats.streaks
    success = stats.success

    lines = []
    lines.append("=" * 60)
    lines.append(f"  {stats.habit.name.upper()}")
    lines.append("=" * 60)

    emoji = "🔥" if streaks.current_streak >= 3 else "⚡"
    lines.append(f"  {emoji} Current streak: {streaks.current_streak} days")
    lines.append(f"  🏆 Longest streak: {streaks.longest_streak} days")
    lines.append(f"  ✅ Total completions: {stats.total_completions}")
    lines.append(
        f"  📈 Success rate: {success.success_rate}% "
        f"({success.completed_days}/{success.total_days} days, "
        f"{format_date(stats.window_start)} to {format_date(stats.window_end)})"
    )
    if streaks.last_completed_at:
        lines.append(f"  🕒 Last completed: {streaks.last_completed_at.strftime('%Y-%m-%d %H:%M')}")
    lines.append(f"  Today: {'done' if stats.completed_today else 'not done yet'}")
    if best_time:
        lines.append(f"  Best time of day: {best_time}")

    if week:
        lines.append("-" * 60)
        lines.append("  Last 7 days:")
        lines.append(format_weekly_bars(week))

    lines.append("=" * 60)
    return "\n".join(lines)


def format_heatmap(
    per_day: Dict[date, int],
    today: date,
    weeks: int = 12,
    first_day_of_week: int = 1
) -> str:
    """
    Render a calendar density grid, one column per week and one row per weekday.

    Args:
        per_day: Completion counts keyed by calendar day (get_completion_dates)
        today: Last day shown; its week is the rightmost column
        weeks: Number of week columns
        first_day_of_week: 0 for Sunday, 1 for Monday

    Returns:
        Grid with a legend line
    """
    weeks = max(weeks, 1)
    # date.weekday(): Monday is 0, Sunday is 6
    first_weekday = 6 if first_day_of_week == 0 else 0
    this_week_start = today - timedelta(days=(today.weekday() - first_weekday) % 7)
    grid_start = this_week_start - timedelta(weeks=weeks - 1)

    lines = []
    for row in range(7):
        row_day = grid_start + timedelta(days=row)
        cells = []
        for column in range(weeks):
            day = row_day + timedelta(weeks=column)
            if day > today:
                cells.append(HEATMAP_FUTURE)
            else:
                count = per_day.get(day, 0)
                cells.append(HEATMAP_GLYPHS[min(count, len(HEATMAP_GLYPHS) - 1)])
        lines.append(f"  {row_day.strftime('%a'):<3} {' '.join(cells)}")

    lines.append("")
    lines.append(
        f"  {format_date(grid_start)} to {format_date(today)}   "
        f"{HEATMAP_GLYPHS[0]} none  {HEATMAP_GLYPHS[1]} 1  {HEATMAP_GLYPHS[2]} 2  {HEATMAP_GLYPHS[3]} 3+"
    )
    return "\n".join(lines)
