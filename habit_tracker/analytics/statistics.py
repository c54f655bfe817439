"""
Streak and success-rate statistics for habit completions.

Every function here is pure: it reads the completion records it is given,
never touches storage and never raises for well-formed input, so it is
safe to call from any display path. Skipped records are explicit "not done"
markers and are excluded from every positive count. All comparisons happen
on calendar days (see ``habit_tracker.utils.date``), so several records on
the same day count as one day for streaks and rates.
"""

from collections import Counter
from datetime import date, datetime, timedelta, tzinfo
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..core.models import (
    CompletionRecord,
    Habit,
    HabitStats,
    StreakResult,
    SuccessRateResult,
)
from ..utils.date import (
    ONE_DAY,
    DateLike,
    as_aware,
    end_of_day,
    start_of_day,
    to_calendar_day,
    today as current_day,
)


# (slot name, first hour inclusive, last hour exclusive); anything else is night
TIME_SLOTS = (
    ("morning", 5, 12),
    ("afternoon", 12, 17),
    ("evening", 17, 21),
)
NIGHT_SLOT = "night"


def _active(completions: Iterable[CompletionRecord]) -> List[CompletionRecord]:
    return [c for c in completions if not c.skipped]


def _distinct_days_desc(
    completions: Iterable[CompletionRecord],
    tz: Optional[tzinfo] = None
) -> Tuple[date, ...]:
    """Distinct calendar days of the given records, newest first."""
    days = {to_calendar_day(c.completed_at, tz) for c in completions}
    return tuple(sorted(days, reverse=True))


def _current_streak(days: Sequence[date], anchor: date) -> int:
    """
    Count consecutive days ending today, or ending yesterday when today
    has no completion yet.

    ``days`` must be distinct and sorted newest first.
    """
    streak = 0
    expected = anchor
    for index, day in enumerate(days):
        gap = (expected - day).days
        # Only the first day may be one behind: today is still open
        if gap == 0 or (gap == 1 and index == 0):
            streak += 1
            expected = day - ONE_DAY
        else:
            break
    return streak


def _longest_run(days: Sequence[date]) -> int:
    """Longest run of consecutive calendar days in a newest-first sequence."""
    longest = 0
    run = 0
    previous: Optional[date] = None
    for day in days:
        if previous is not None and (previous - day).days == 1:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day
    return longest


def compute_streaks(
    completions: Iterable[CompletionRecord],
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None
) -> StreakResult:
    """
    Calculate current and longest streak from completions.

    Args:
        completions: Records of one habit in any order; may include skips
        today: Calendar day the current streak is measured against
            (defaults to today in ``tz``)
        tz: Timezone used to map timestamps to calendar days

    Returns:
        StreakResult; zeros and no last completion when nothing counts
    """
    active = _active(completions)
    if not active:
        return StreakResult(current_streak=0, longest_streak=0, last_completed_at=None)

    anchor = today if today is not None else current_day(tz)
    days = _distinct_days_desc(active, tz)

    current = _current_streak(days, anchor)
    longest = max(_longest_run(days), current)
    latest = max(active, key=lambda c: as_aware(c.completed_at, tz))

    return StreakResult(
        current_streak=current,
        longest_streak=longest,
        last_completed_at=latest.completed_at,
    )


def compute_success_rate(
    completions: Iterable[CompletionRecord],
    start_date: DateLike,
    end_date: Optional[DateLike] = None,
    tz: Optional[tzinfo] = None
) -> SuccessRateResult:
    """
    Calculate the share of days in a window that have a completion.

    Plain ``date`` bounds cover their whole day; ``datetime`` bounds are
    compared as instants. ``end_date`` defaults to now. An inverted range
    yields a non-positive ``total_days`` and a rate of 0.

    Args:
        completions: Records of one habit
        start_date: First day (or instant) of the window, inclusive
        end_date: Last day (or instant) of the window, inclusive
        tz: Timezone used to map timestamps to calendar days

    Returns:
        SuccessRateResult with the rate rounded half-up to an integer percent
    """
    if end_date is None:
        end_date = datetime.now(tz) if tz is not None else datetime.now()

    total_days = (to_calendar_day(end_date, tz) - to_calendar_day(start_date, tz)).days + 1

    lower = start_of_day(start_date, tz)
    upper = end_of_day(end_date, tz)
    in_window = [
        c for c in _active(completions)
        if lower <= as_aware(c.completed_at, tz) <= upper
    ]
    completed_days = len(_distinct_days_desc(in_window, tz))

    if total_days > 0:
        # Half-up in integer arithmetic: 29/200 days gives 15
        rate = (completed_days * 200 + total_days) // (2 * total_days)
    else:
        rate = 0

    return SuccessRateResult(
        success_rate=rate,
        total_days=total_days,
        completed_days=completed_days,
    )


def get_total_completions(completions: Iterable[CompletionRecord]) -> int:
    """Count non-skipped records, without collapsing same-day records."""
    return len(_active(completions))


def get_completion_dates(
    completions: Iterable[CompletionRecord],
    tz: Optional[tzinfo] = None
) -> Dict[date, int]:
    """Count non-skipped records per calendar day, for heatmaps."""
    return dict(Counter(to_calendar_day(c.completed_at, tz) for c in _active(completions)))


def is_completed_today(
    completions: Iterable[CompletionRecord],
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None
) -> bool:
    """Check if the habit has a non-skipped completion today."""
    anchor = today if today is not None else current_day(tz)
    return any(to_calendar_day(c.completed_at, tz) == anchor for c in _active(completions))


def get_weekly_stats(
    completions: Iterable[CompletionRecord],
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None
) -> List[Dict[str, object]]:
    """
    Completion counts for the last seven days, oldest first.

    Returns:
        List of {"day": "Mon", "date": date, "count": int}
    """
    anchor = today if today is not None else current_day(tz)
    per_day = get_completion_dates(completions, tz)

    week = []
    for offset in range(6, -1, -1):
        day = anchor - timedelta(days=offset)
        week.append({
            "day": day.strftime("%a"),
            "date": day,
            "count": per_day.get(day, 0),
        })
    return week


def _time_slot(hour: int) -> str:
    for name, first, last in TIME_SLOTS:
        if first <= hour < last:
            return name
    return NIGHT_SLOT


def get_best_time_of_day(
    completions: Sequence[CompletionRecord],
    tz: Optional[tzinfo] = None
) -> Optional[str]:
    """
    Time slot with the most completions.

    Slots are morning (05-12), afternoon (12-17), evening (17-21) and night.
    Ties go to the earlier slot in that order. Returns None only for an empty
    input; a list of nothing but skips reports "morning".
    """
    if not completions:
        return None

    counts = {name: 0 for name, _, _ in TIME_SLOTS}
    counts[NIGHT_SLOT] = 0
    for completion in _active(completions):
        local_time = as_aware(completion.completed_at, tz).astimezone(tz)
        counts[_time_slot(local_time.hour)] += 1

    best_slot = TIME_SLOTS[0][0]
    best_count = 0
    for name, count in counts.items():
        if count > best_count:
            best_slot, best_count = name, count
    return best_slot


def summarize_habit(
    habit: Habit,
    completions: Sequence[CompletionRecord],
    window_days: int = 30,
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None
) -> HabitStats:
    """
    Bundle the statistics shown for one habit.

    The success-rate window is the trailing ``window_days`` calendar days
    including today.
    """
    anchor = today if today is not None else current_day(tz)
    window_start = anchor - timedelta(days=max(window_days, 1) - 1)

    return HabitStats(
        habit=habit,
        streaks=compute_streaks(completions, today=anchor, tz=tz),
        success=compute_success_rate(completions, window_start, anchor, tz=tz),
        total_completions=get_total_completions(completions),
        completed_today=is_completed_today(completions, today=anchor, tz=tz),
        window_start=window_start,
        window_end=anchor,
    )
