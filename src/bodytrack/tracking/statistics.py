"""Aggregate statistics and projections over a weight history.

Statistics are recomputed from the raw entries every time they are needed;
nothing here is cached or persisted.

Entry sets differ by figure:
- ``weight_change`` and ``days_tracked`` use every entry.
- Rates (weekly/monthly change), averages and projections use only valid
  entries (no cheat-meal or retention flag).
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Optional

from bodytrack.tracking.models import GoalType, Statistics, WeeklyAnalysis, WeightEntry
from bodytrack.tracking.moving_average import moving_average

# Minimum valid day span before a rate is reported
MIN_DAYS_FOR_WEEKLY_RATE = 7
MIN_DAYS_FOR_MONTHLY_RATE = 30

# Minimum number of valid entries before projecting forward
MIN_ENTRIES_FOR_PROJECTION = 7

MOVING_AVERAGE_WINDOWS = (7, 14, 30)


def sort_entries(entries: Iterable[WeightEntry]) -> list[WeightEntry]:
    """Return entries sorted by date, oldest first."""
    return sorted(entries, key=lambda e: e.date)


def day_span(first: date, last: date) -> int:
    """Inclusive number of calendar days from first to last."""
    return (last - first).days + 1


def calculate_statistics(
    entries: list[WeightEntry],
    goal_type: GoalType,
    target_weight: Optional[float] = None,
) -> Statistics:
    """Calculate aggregate statistics for a weight history.

    Args:
        entries: Weight entries in any order
        goal_type: The user's current goal (accepted for symmetry with
            insights; the numbers themselves do not depend on it)
        target_weight: Optional goal weight used for the days-to-goal estimate

    Returns:
        Statistics; all zeros when there are no entries
    """
    if not entries:
        return Statistics()

    sorted_entries = sort_entries(entries)
    valid_entries = [e for e in sorted_entries if e.is_valid]
    first_entry = sorted_entries[0]
    last_entry = sorted_entries[-1]

    days_tracked = day_span(first_entry.date, last_entry.date)

    average_weight = (
        sum(e.weight for e in valid_entries) / len(valid_entries) if valid_entries else 0.0
    )
    weight_change = last_entry.weight - first_entry.weight
    cheat_meal_count = sum(1 for e in entries if e.is_cheat_meal)
    retention_count = sum(1 for e in entries if e.is_retention)

    ma7, ma14, ma30 = (moving_average(valid_entries, w) for w in MOVING_AVERAGE_WINDOWS)

    # Rates only from valid entries
    if len(valid_entries) >= 2:
        valid_weight_change = valid_entries[-1].weight - valid_entries[0].weight
        valid_days_tracked = day_span(valid_entries[0].date, valid_entries[-1].date)
    else:
        valid_weight_change = 0.0
        valid_days_tracked = days_tracked

    weekly_average_change = 0.0
    if valid_days_tracked >= MIN_DAYS_FOR_WEEKLY_RATE:
        weekly_average_change = valid_weight_change / valid_days_tracked * 7

    monthly_average_change = 0.0
    if valid_days_tracked >= MIN_DAYS_FOR_MONTHLY_RATE:
        monthly_average_change = valid_weight_change / valid_days_tracked * 30

    # Every logged entry counts as tracking effort, flagged or not
    consistency_score = min(100.0, len(entries) / days_tracked * 100)

    projected_weight_30_days = None
    projected_weight_goal = None
    estimated_days_to_goal = None

    if weekly_average_change != 0 and len(valid_entries) >= MIN_ENTRIES_FOR_PROJECTION:
        daily_change = weekly_average_change / 7
        projected_weight_30_days = last_entry.weight + daily_change * 30

        if target_weight:
            estimated_days_to_goal = abs((target_weight - last_entry.weight) / daily_change)
            projected_weight_goal = target_weight

    return Statistics(
        average_weight=average_weight,
        weight_change=weight_change,
        weekly_average_change=weekly_average_change,
        monthly_average_change=monthly_average_change,
        moving_average_7=ma7,
        moving_average_14=ma14,
        moving_average_30=ma30,
        total_entries=len(entries),
        cheat_meal_count=cheat_meal_count,
        retention_count=retention_count,
        days_tracked=days_tracked,
        consistency_score=consistency_score,
        projected_weight_30_days=projected_weight_30_days,
        projected_weight_goal=projected_weight_goal,
        estimated_days_to_goal=estimated_days_to_goal,
    )


def get_weekly_analysis(entries: list[WeightEntry]) -> list[WeeklyAnalysis]:
    """Break a weight history into Monday-start calendar weeks.

    Each week's average uses valid entries only (0.0 if there are none).
    Its change is measured against the mean of every entry logged before
    the week started; the first week compares against itself.

    Args:
        entries: Weight entries in any order

    Returns:
        One WeeklyAnalysis per calendar week between the first and last entry
    """
    if not entries:
        return []

    sorted_entries = sort_entries(entries)
    first_date = sorted_entries[0].date
    last_date = sorted_entries[-1].date

    week_start = first_date - timedelta(days=first_date.weekday())
    weeks: list[WeeklyAnalysis] = []

    while week_start <= last_date:
        week_end = week_start + timedelta(days=6)
        week_entries = [e for e in sorted_entries if week_start <= e.date <= week_end]
        valid = [e for e in week_entries if e.is_valid]
        average_weight = sum(e.weight for e in valid) / len(valid) if valid else 0.0

        previous = [e for e in sorted_entries if e.date < week_start]
        previous_average = (
            sum(e.weight for e in previous) / len(previous) if previous else average_weight
        )

        weeks.append(
            WeeklyAnalysis(
                week_start=week_start,
                week_end=week_end,
                average_weight=average_weight,
                weight_change=average_weight - previous_average,
                entries=len(week_entries),
                cheat_meals=sum(1 for e in week_entries if e.is_cheat_meal),
                retentions=sum(1 for e in week_entries if e.is_retention),
            )
        )
        week_start += timedelta(days=7)

    return weeks
