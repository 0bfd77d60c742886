"""Macro allocation for bulk, cut and maintenance."""

from __future__ import annotations

from dataclasses import dataclass

from bodytrack.numeric import round_int
from bodytrack.tracking.models import GoalType

# Calorie adjustment from TDEE by goal (kcal/day)
CALORIE_ADJUSTMENTS = {
    GoalType.BULK: 300,           # Moderate surplus
    GoalType.CUT: -400,           # Moderate deficit
    GoalType.MAINTENANCE: 0,
}

# Protein by goal (g per kg body weight); higher in a deficit to keep muscle
PROTEIN_PER_KG = {
    GoalType.BULK: 2.0,
    GoalType.CUT: 2.4,
    GoalType.MAINTENANCE: 2.0,
}

FAT_CALORIE_SHARE = 0.25
KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9

# Never recommend fewer carbs than this, whatever the arithmetic says
MIN_CARBS_G = 50


@dataclass
class MacroTargets:
    """Daily calorie and macronutrient targets (kcal, grams)."""

    calories: int
    protein: int
    carbs: int
    fat: int

    def to_dict(self) -> dict[str, int]:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
        }


def calculate_macros(tdee: float, weight: float, goal: GoalType) -> MacroTargets:
    """Calculate calorie and macro targets for a goal.

    Fat is 25% of calories, protein is set per kg of body weight and carbs
    fill the remainder, floored at 50 g.

    Args:
        tdee: Effective TDEE (kcal/day)
        weight: Body weight in kg
        goal: Bulk, cut or maintenance

    Returns:
        MacroTargets with whole-number calories and grams
    """
    calories = tdee + CALORIE_ADJUSTMENTS[goal]

    protein = round_int(weight * PROTEIN_PER_KG[goal])
    protein_calories = protein * KCAL_PER_G_PROTEIN

    fat_calories = calories * FAT_CALORIE_SHARE
    fat = round_int(fat_calories / KCAL_PER_G_FAT)

    carb_calories = calories - protein_calories - fat_calories
    carbs = round_int(carb_calories / KCAL_PER_G_CARBS)

    return MacroTargets(
        calories=round_int(calories),
        protein=protein,
        carbs=max(carbs, MIN_CARBS_G),
        fat=fat,
    )


def calculate_all_macros(tdee: float, weight: float) -> dict[GoalType, MacroTargets]:
    """Macro targets for every goal from the same TDEE."""
    return {goal: calculate_macros(tdee, weight, goal) for goal in GoalType}
