"""Body composition, energy expenditure and macro calculators."""

from bodytrack.profiles.body_comp import (
    BodyComposition,
    SkinFolds,
    calculate_body_composition,
    calculate_body_fat,
)
from bodytrack.profiles.energy import (
    ActivityLevel,
    CardioType,
    TDEEBreakdown,
    TDEEResult,
    calculate_bmr_katch_mcardle,
    calculate_bmr_mifflin,
    calculate_real_tdee,
    calculate_tdee,
)
from bodytrack.profiles.evaluation import (
    CalculatedData,
    EvaluationDraft,
    NutritionEvaluation,
    calculate_evaluation,
)
from bodytrack.profiles.macros import MacroTargets, calculate_macros

__all__ = [
    "ActivityLevel",
    "BodyComposition",
    "CalculatedData",
    "CardioType",
    "EvaluationDraft",
    "MacroTargets",
    "NutritionEvaluation",
    "SkinFolds",
    "TDEEBreakdown",
    "TDEEResult",
    "calculate_bmr_katch_mcardle",
    "calculate_bmr_mifflin",
    "calculate_body_composition",
    "calculate_body_fat",
    "calculate_evaluation",
    "calculate_macros",
    "calculate_real_tdee",
    "calculate_tdee",
]
