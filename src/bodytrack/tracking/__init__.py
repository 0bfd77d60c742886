"""Weight tracking analytics.

This module derives trends and recommendations from a weight history:

Key components:
- Moving averages over valid entries, plus an outlier-resistant variant
- Aggregate statistics, rates and goal projections
- Goal-aware natural-language insights
- Advisory detection of unflagged cheat-meal and retention days
- Bulk planning: recommended gain rates and projections
"""

from __future__ import annotations

from bodytrack.tracking.anomalies import detect_anomalies
from bodytrack.tracking.bulk_plan import BulkPlan, plan_bulk
from bodytrack.tracking.insights import get_smart_insights
from bodytrack.tracking.models import (
    AnomalyReport,
    ExperienceLevel,
    GoalType,
    Sex,
    Statistics,
    UserProfile,
    WeeklyAnalysis,
    WeightEntry,
)
from bodytrack.tracking.moving_average import moving_average, robust_moving_average
from bodytrack.tracking.statistics import calculate_statistics, get_weekly_analysis

__all__ = [
    "AnomalyReport",
    "BulkPlan",
    "ExperienceLevel",
    "GoalType",
    "Sex",
    "Statistics",
    "UserProfile",
    "WeeklyAnalysis",
    "WeightEntry",
    "calculate_statistics",
    "detect_anomalies",
    "get_smart_insights",
    "get_weekly_analysis",
    "moving_average",
    "plan_bulk",
    "robust_moving_average",
]
