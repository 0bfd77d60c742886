"""Bulk planning: recommended gain rates, current progress and projections.

Recommended weekly gains by training experience follow Garthe et al. and
Helms. Projections extend the low end, midpoint and high end of the
recommended range over the planned bulk length, using 4.33 weeks per month.

Progress here uses the plain day difference between the first and last
valid entries, not the inclusive span used by calculate_statistics().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from bodytrack.tracking.models import ExperienceLevel, UserProfile, WeightEntry
from bodytrack.tracking.statistics import sort_entries

WEEKS_PER_MONTH = 4.33

DEFAULT_BULK_MONTHS = 3
DEFAULT_EXPERIENCE = ExperienceLevel.INTERMEDIATE


@dataclass(frozen=True)
class GainRange:
    """Recommended weekly weight gain (kg/week)."""

    min_weekly: float
    max_weekly: float

    @property
    def midpoint(self) -> float:
        return (self.min_weekly + self.max_weekly) / 2

    @property
    def label(self) -> str:
        return (
            f"{self.min_weekly:g}-{self.max_weekly:g} kg/week "
            f"({self.min_weekly * 4:g}-{self.max_weekly * 4:g} kg/month)"
        )


RECOMMENDED_GAIN = {
    ExperienceLevel.BEGINNER: GainRange(0.25, 0.5),
    ExperienceLevel.INTERMEDIATE: GainRange(0.15, 0.35),
    ExperienceLevel.ADVANCED: GainRange(0.1, 0.25),
}


class Scenario(Enum):
    """Projection scenarios within the recommended range."""
    CONSERVATIVE = "conservative"
    OPTIMAL = "optimal"
    AGGRESSIVE = "aggressive"


@dataclass
class BulkProjection:
    """Expected gain for one scenario over the planned bulk."""

    scenario: Scenario
    weekly_gain: float
    monthly_gain: float
    total_gain: float
    final_weight: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "scenario": self.scenario.value,
            "weekly_gain": self.weekly_gain,
            "monthly_gain": self.monthly_gain,
            "total_gain": self.total_gain,
            "final_weight": self.final_weight,
        }


@dataclass
class BulkProgress:
    """Observed gain between the first and last valid entries."""

    days_elapsed: int
    weeks_elapsed: float
    months_elapsed: float
    weight_gained: float
    weekly_rate: float
    monthly_rate: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "days_elapsed": self.days_elapsed,
            "weeks_elapsed": self.weeks_elapsed,
            "months_elapsed": self.months_elapsed,
            "weight_gained": self.weight_gained,
            "weekly_rate": self.weekly_rate,
            "monthly_rate": self.monthly_rate,
        }


@dataclass
class BulkPlan:
    """Recommended range, current progress and projections for a bulk."""

    experience_level: ExperienceLevel
    duration_months: int
    recommended: GainRange
    progress: Optional[BulkProgress] = None
    projections: list[BulkProjection] = field(default_factory=list)

    def projection(self, scenario: Scenario) -> BulkProjection:
        return next(p for p in self.projections if p.scenario is scenario)

    def to_dict(self) -> dict[str, Any]:
        return {
            "experience_level": self.experience_level.value,
            "duration_months": self.duration_months,
            "recommended": {
                "min_weekly": self.recommended.min_weekly,
                "max_weekly": self.recommended.max_weekly,
                "label": self.recommended.label,
            },
            "progress": self.progress.to_dict() if self.progress else None,
            "projections": [p.to_dict() for p in self.projections],
        }


def recommended_range(level: ExperienceLevel) -> GainRange:
    """Return the recommended weekly gain range for an experience level."""
    return RECOMMENDED_GAIN[level]


def project_bulk(
    current_weight: float,
    level: ExperienceLevel,
    months: int,
) -> list[BulkProjection]:
    """Project conservative, optimal and aggressive bulks.

    Args:
        current_weight: Starting point in kg
        level: Training experience, selects the recommended range
        months: Planned bulk length

    Returns:
        One projection per Scenario, in declaration order
    """
    gain_range = recommended_range(level)
    weekly_by_scenario = {
        Scenario.CONSERVATIVE: gain_range.min_weekly,
        Scenario.OPTIMAL: gain_range.midpoint,
        Scenario.AGGRESSIVE: gain_range.max_weekly,
    }

    projections = []
    for scenario, weekly in weekly_by_scenario.items():
        monthly = weekly * WEEKS_PER_MONTH
        total = monthly * months
        projections.append(
            BulkProjection(
                scenario=scenario,
                weekly_gain=weekly,
                monthly_gain=monthly,
                total_gain=total,
                final_weight=current_weight + total,
            )
        )
    return projections


def calculate_bulk_progress(entries: list[WeightEntry]) -> Optional[BulkProgress]:
    """Measure the gain rate over valid entries.

    Returns:
        BulkProgress, or None with fewer than two valid entries
    """
    valid = sort_entries([e for e in entries if e.is_valid])
    if len(valid) < 2:
        return None

    first, last = valid[0], valid[-1]
    days = (last.date - first.date).days
    weeks = days / 7
    months = days / 30
    gained = last.weight - first.weight

    return BulkProgress(
        days_elapsed=days,
        weeks_elapsed=weeks,
        months_elapsed=months,
        weight_gained=gained,
        weekly_rate=gained / weeks if weeks > 0 else 0.0,
        monthly_rate=gained / months if months > 0 else 0.0,
    )


def plan_bulk(
    profile: UserProfile,
    entries: list[WeightEntry],
    level: Optional[ExperienceLevel] = None,
    months: Optional[int] = None,
) -> BulkPlan:
    """Build a bulk plan, falling back to the profile's saved settings.

    Args:
        profile: Supplies current weight, experience level and bulk length
        entries: Weight history for the progress block
        level: Overrides the profile's experience level
        months: Overrides the profile's planned bulk length
    """
    level = level or profile.experience_level or DEFAULT_EXPERIENCE
    months = months or profile.bulk_duration_months or DEFAULT_BULK_MONTHS

    return BulkPlan(
        experience_level=level,
        duration_months=months,
        recommended=recommended_range(level),
        progress=calculate_bulk_progress(entries),
        projections=project_bulk(profile.current_weight, level, months),
    )
