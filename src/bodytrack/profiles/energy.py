"""Energy expenditure calculator.

Builds Total Daily Energy Expenditure from four parts:

    TDEE = BMR + NEAT + resistance training + cardio

BMR comes from either Mifflin-St Jeor (weight, height, age, sex) or
Katch-McArdle (lean mass only). Katch-McArdle is used whenever lean mass is
known because it does not have to guess body composition.

Exercise energy is computed per session from METs and amortised over the
week, so the breakdown is a daily average.

A formula TDEE is only a prior. When someone is bulking and tracks their
intake and weekly gain, calculate_real_tdee() back-solves their actual
expenditure from the energy balance (1 kg of tissue ≈ 7700 kcal).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from bodytrack.errors import MissingDataError
from bodytrack.numeric import round_int
from bodytrack.tracking.models import Sex


class ActivityLevel(Enum):
    """Daily activity outside structured exercise."""
    SEDENTARY = "sedentary"          # Desk job, little walking
    LIGHT = "light"                  # Some walking, on feet part of the day
    MODERATE = "moderate"            # On feet most of the day
    ACTIVE = "active"                # Physical job


class CardioType(Enum):
    """Kinds of cardio with a known MET value."""
    WALKING = "walking"
    FAST_WALKING = "fast_walking"
    JOGGING = "jogging"
    RUNNING = "running"
    HIIT = "hiit"
    CYCLING = "cycling"
    ELLIPTICAL = "elliptical"
    MIXED = "mixed"


# Activity level multipliers (Harris-Benedict activity factors)
ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
}

# Base METs per cardio type at average intensity
CARDIO_METS = {
    CardioType.WALKING: 3.5,
    CardioType.FAST_WALKING: 4.5,
    CardioType.JOGGING: 7.0,
    CardioType.RUNNING: 9.0,
    CardioType.HIIT: 8.0,
    CardioType.CYCLING: 6.0,
    CardioType.ELLIPTICAL: 5.0,
    CardioType.MIXED: 6.0,
}

# Moderate-to-hard resistance training
WEIGHT_TRAINING_METS = 5.5

DEFAULT_CARDIO_INTENSITY = 5

# Energy stored in 1 kg of mixed muscle/fat tissue
KCAL_PER_KG_TISSUE = 7700


@dataclass
class TDEEBreakdown:
    """Daily energy expenditure components (kcal/day)."""

    bmr: int
    neat: int
    weights: int
    cardio: int

    def to_dict(self) -> dict[str, int]:
        return {
            "bmr": self.bmr,
            "neat": self.neat,
            "weights": self.weights,
            "cardio": self.cardio,
        }


@dataclass
class TDEEResult:
    """TDEE with its breakdown."""

    bmr: int
    tdee: int
    breakdown: TDEEBreakdown


def calculate_bmr_mifflin(weight: float, height: float, age: float, sex: Sex) -> float:
    """Calculate Basal Metabolic Rate using Mifflin-St Jeor equation.

    Args:
        weight: Weight in kg
        height: Height in cm
        age: Age in years
        sex: Biological sex

    Returns:
        BMR in calories per day
    """
    base = (10 * weight) + (6.25 * height) - (5 * age)
    if sex is Sex.MALE:
        return base + 5
    if sex is Sex.FEMALE:
        return base - 161
    raise ValueError(f"Unknown sex: {sex}")


def calculate_bmr_katch_mcardle(lean_mass: float) -> float:
    """Calculate BMR from lean body mass (kg) using Katch-McArdle."""
    return 370 + (21.6 * lean_mass)


def get_activity_multiplier(activity_level: ActivityLevel) -> float:
    """Return the TDEE multiplier for an activity level."""
    return ACTIVITY_MULTIPLIERS[activity_level]


def calculate_neat(bmr: float, activity_level: ActivityLevel) -> float:
    """Non-exercise activity thermogenesis: the activity share above BMR."""
    return bmr * (get_activity_multiplier(activity_level) - 1)


def calculate_weight_training_calories(
    weight: float,
    hours_per_session: float,
    days_per_week: float,
) -> float:
    """Daily-average calories burned by resistance training.

    Args:
        weight: Body weight in kg
        hours_per_session: Session length in hours
        days_per_week: Training days per week

    Returns:
        kcal/day averaged over 7 days
    """
    calories_per_session = WEIGHT_TRAINING_METS * weight * hours_per_session
    return calories_per_session * days_per_week / 7


def cardio_intensity_factor(intensity: float) -> float:
    """Scale METs by perceived intensity on a 1-10 scale (5 -> 1.0)."""
    return 0.7 + intensity * 0.06


def calculate_cardio_calories(
    weight: float,
    cardio_type: CardioType,
    minutes_per_session: float,
    days_per_week: float,
    intensity: float = DEFAULT_CARDIO_INTENSITY,
) -> float:
    """Daily-average calories burned by cardio.

    Args:
        weight: Body weight in kg
        cardio_type: Kind of cardio
        minutes_per_session: Session length in minutes
        days_per_week: Cardio days per week
        intensity: Perceived intensity, 1-10

    Returns:
        kcal/day averaged over 7 days
    """
    mets = CARDIO_METS[cardio_type] * cardio_intensity_factor(intensity)
    calories_per_session = mets * weight * (minutes_per_session / 60)
    return calories_per_session * days_per_week / 7


def calculate_tdee(
    weight: float,
    height: Optional[float],
    age: Optional[float],
    sex: Optional[Sex],
    activity_level: ActivityLevel,
    training_days_per_week: float,
    hours_per_session: float,
    does_cardio: bool = False,
    cardio_days_per_week: Optional[float] = None,
    cardio_minutes_per_session: Optional[float] = None,
    cardio_type: Optional[CardioType] = None,
    cardio_intensity: Optional[float] = None,
    lean_mass: Optional[float] = None,
) -> TDEEResult:
    """Calculate Total Daily Energy Expenditure with its breakdown.

    Katch-McArdle is used when lean_mass is given, otherwise Mifflin-St Jeor,
    which then needs height, age and sex. Cardio only counts when does_cardio
    is set and days, minutes and type are all provided.

    Returns:
        TDEEResult with every figure rounded to whole kcal

    Raises:
        MissingDataError: If Mifflin-St Jeor is needed but height, age or sex is missing
    """
    if lean_mass:
        bmr = calculate_bmr_katch_mcardle(lean_mass)
    else:
        if height is None or age is None or sex is None:
            raise MissingDataError("Mifflin-St Jeor needs height, age and sex when lean mass is unknown")
        bmr = calculate_bmr_mifflin(weight, height, age, sex)

    neat = calculate_neat(bmr, activity_level)
    weights_calories = calculate_weight_training_calories(
        weight, hours_per_session, training_days_per_week
    )

    cardio_calories = 0.0
    if does_cardio and cardio_days_per_week and cardio_minutes_per_session and cardio_type:
        cardio_calories = calculate_cardio_calories(
            weight,
            cardio_type,
            cardio_minutes_per_session,
            cardio_days_per_week,
            cardio_intensity or DEFAULT_CARDIO_INTENSITY,
        )

    tdee = bmr + neat + weights_calories + cardio_calories

    return TDEEResult(
        bmr=round_int(bmr),
        tdee=round_int(tdee),
        breakdown=TDEEBreakdown(
            bmr=round_int(bmr),
            neat=round_int(neat),
            weights=round_int(weights_calories),
            cardio=round_int(cardio_calories),
        ),
    )


def calculate_real_tdee(current_calories: float, weekly_gain: float) -> int:
    """
    Back-solve TDEE from observed intake and weight gain.

    If someone eating current_calories gains weekly_gain kg per week, their
    daily surplus is weekly_gain × 7700 / 7 and their TDEE is intake minus
    that surplus.

    Args:
        current_calories: Average daily intake (kcal)
        weekly_gain: Observed weekly weight change (kg, negative for loss)

    Returns:
        Estimated TDEE (kcal/day)

    Example:
        >>> calculate_real_tdee(3000, 0.3)
        2670
    """
    daily_surplus = weekly_gain * KCAL_PER_KG_TISSUE / 7
    return round_int(current_calories - daily_surplus)
