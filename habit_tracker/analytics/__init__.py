"""Statistics over habit completions: streaks, success rates and heatmap data."""

from .statistics import (
    compute_streaks,
    compute_success_rate,
    get_total_completions,
    get_completion_dates,
    is_completed_today,
    get_weekly_stats,
    get_best_time_of_day,
    summarize_habit,
)

__all__ = [
    'compute_streaks',
    'compute_success_rate',
    'get_total_completions',
    'get_completion_dates',
    'is_completed_today',
    'get_weekly_stats',
    'get_best_time_of_day',
    'summarize_habit',
]
