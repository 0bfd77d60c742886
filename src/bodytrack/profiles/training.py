"""Training history helpers: experience level and natural muscle potential."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from bodytrack.tracking.models import ExperienceLevel

# Expected lean mass gain (kg/year) for years 1, 2, 3 and 4+ (McDonald model)
YEARLY_MUSCLE_GAIN_KG = (10.0, 5.0, 2.5, 1.25)


@dataclass
class TrainingProfile:
    """Training age and natural potential derived from the gym start date."""

    training_years: float
    experience_level: ExperienceLevel
    max_lean_mass: float  # kg
    yearly_muscle_gain: float  # kg/year

    def to_dict(self) -> dict[str, Any]:
        return {
            "training_years": self.training_years,
            "experience_level": self.experience_level.value,
            "max_lean_mass": self.max_lean_mass,
            "yearly_muscle_gain": self.yearly_muscle_gain,
        }


def calculate_training_years(gym_start_date: date, today: Optional[date] = None) -> float:
    """Years of training since gym_start_date (fractional)."""
    today = today or date.today()
    days = math.ceil(abs((today - gym_start_date).days))
    return days / 365


def get_experience_level(years: float) -> ExperienceLevel:
    """Map training years to an experience level."""
    if years < 1:
        return ExperienceLevel.BEGINNER
    if years < 4:
        return ExperienceLevel.INTERMEDIATE
    return ExperienceLevel.ADVANCED


def calculate_muscular_potential(height: float, years: float) -> tuple[float, float]:
    """Approximate natural muscular potential.

    Args:
        height: Height in cm
        years: Training years

    Returns:
        Tuple of (max_lean_mass_kg, expected_yearly_gain_kg)
    """
    height_inches = height / 2.54
    max_lean_mass = (height_inches - 100) * 1.1
    year_index = min(int(math.floor(years)), len(YEARLY_MUSCLE_GAIN_KG) - 1)
    return max_lean_mass, YEARLY_MUSCLE_GAIN_KG[max(year_index, 0)]


def calculate_training_profile(
    gym_start_date: date,
    height: float,
    today: Optional[date] = None,
) -> TrainingProfile:
    """Combine training years, experience level and muscular potential."""
    years = calculate_training_years(gym_start_date, today)
    max_lean_mass, yearly_gain = calculate_muscular_potential(height, years)
    return TrainingProfile(
        training_years=years,
        experience_level=get_experience_level(years),
        max_lean_mass=max_lean_mass,
        yearly_muscle_gain=yearly_gain,
    )
