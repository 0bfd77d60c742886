"""Heuristic detection of unflagged cheat-meal and retention days.

The detector is advisory: it returns candidate entry ids for the user to
confirm and never changes the entries themselves.
"""

from __future__ import annotations

from bodytrack.tracking.models import AnomalyReport, WeightEntry
from bodytrack.tracking.statistics import sort_entries

# A spike of more than this (kg) that reverses afterwards looks like a cheat meal
CHEAT_MEAL_RISE_KG = 0.8
CHEAT_MEAL_FALL_KG = 0.5

# A one-step rise of more than this (kg) looks like fluid retention
RETENTION_RISE_KG = 1.0


def detect_anomalies(entries: list[WeightEntry]) -> AnomalyReport:
    """Flag interior entries whose weight jumps look like noise.

    For each entry that has both a previous and a next entry (by date) and
    is not already flagged:
    - rise > 0.8 kg from the previous entry and fall > 0.5 kg into the next
      one marks a possible cheat meal;
    - rise > 1.0 kg from the previous entry marks possible retention.

    Both thresholds are strict, so a rise of exactly 1.0 kg is not retention.

    Args:
        entries: Weight entries in any order

    Returns:
        AnomalyReport with candidate ids in date order
    """
    report = AnomalyReport()
    if len(entries) < 3:
        return report

    sorted_entries = sort_entries(entries)

    for prev, current, nxt in zip(sorted_entries, sorted_entries[1:], sorted_entries[2:]):
        if current.is_cheat_meal or current.is_retention:
            continue

        increase_from_prev = current.weight - prev.weight
        change_to_next = nxt.weight - current.weight

        if increase_from_prev > CHEAT_MEAL_RISE_KG and change_to_next < -CHEAT_MEAL_FALL_KG:
            report.possible_cheat_meals.append(current.id)

        if increase_from_prev > RETENTION_RISE_KG:
            report.possible_retentions.append(current.id)

    return report
