"""Body composition from skin-fold measurements.

Uses the Jackson-Pollock 7-site equations for body density and the Siri
equation to convert density into body-fat percentage. Caliper readings are
noisy, so out-of-range results are clamped instead of rejected.
"""

from __future__ import annotations

from dataclasses import dataclass

from bodytrack.tracking.models import Sex

# Siri output is clamped to this range (percent)
MIN_BODY_FAT = 0.0
MAX_BODY_FAT = 50.0


@dataclass
class SkinFolds:
    """Seven-site skin-fold measurements in millimetres."""

    triceps: float
    subscapular: float
    chest: float
    axillary: float
    abdominal: float
    suprailiac: float
    thigh: float

    @property
    def total(self) -> float:
        """Sum of all seven sites."""
        return (
            self.triceps
            + self.subscapular
            + self.chest
            + self.axillary
            + self.abdominal
            + self.suprailiac
            + self.thigh
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "triceps": self.triceps,
            "subscapular": self.subscapular,
            "chest": self.chest,
            "axillary": self.axillary,
            "abdominal": self.abdominal,
            "suprailiac": self.suprailiac,
            "thigh": self.thigh,
        }


@dataclass
class BodyComposition:
    """Body-fat percentage split into fat and lean mass (kg)."""

    body_fat_percentage: float
    lean_mass: float
    fat_mass: float


def calculate_body_density(skin_fold_sum: float, age: float, sex: Sex) -> float:
    """Jackson-Pollock 7-site body density (g/cm³).

    Args:
        skin_fold_sum: Sum of the seven skin folds (mm)
        age: Age in years
        sex: Biological sex

    Returns:
        Body density
    """
    s = skin_fold_sum
    if sex is Sex.MALE:
        return 1.112 - 0.00043499 * s + 0.00000055 * s * s - 0.00028826 * age
    if sex is Sex.FEMALE:
        return 1.097 - 0.00046971 * s + 0.00000056 * s * s - 0.00012828 * age
    raise ValueError(f"Unknown sex: {sex}")


def calculate_body_fat(skin_folds: SkinFolds, age: float, sex: Sex) -> float:
    """Body-fat percentage via Jackson-Pollock 7-site and Siri.

    Always returns a value in [0, 50], including for negative or absurdly
    large skin-fold sums.

    Args:
        skin_folds: Seven-site measurements
        age: Age in years
        sex: Biological sex

    Returns:
        Body-fat percentage
    """
    density = calculate_body_density(skin_folds.total, age, sex)
    if density <= 0:
        # Siri is undefined here; the limit from the positive side is +inf
        return MAX_BODY_FAT

    body_fat = (4.95 / density - 4.5) * 100
    return max(MIN_BODY_FAT, min(body_fat, MAX_BODY_FAT))


def split_body_mass(weight: float, body_fat_percentage: float) -> BodyComposition:
    """Split total weight into fat and lean mass."""
    fat_mass = weight * body_fat_percentage / 100
    return BodyComposition(
        body_fat_percentage=body_fat_percentage,
        lean_mass=weight - fat_mass,
        fat_mass=fat_mass,
    )


def calculate_body_composition(
    skin_folds: SkinFolds,
    age: float,
    sex: Sex,
    weight: float,
) -> BodyComposition:
    """Body-fat percentage, lean mass and fat mass in one call."""
    return split_body_mass(weight, calculate_body_fat(skin_folds, age, sex))
