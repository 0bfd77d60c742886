"""Daily nutrition logging: meals, foods and derived totals."""

from bodytrack.nutrition.models import (
    DailyLog,
    FoodEntry,
    FoodItem,
    Meal,
    MealType,
    NutritionGoals,
)
from bodytrack.nutrition.service import NutritionLogService, NutritionState

__all__ = [
    "DailyLog",
    "FoodEntry",
    "FoodItem",
    "Meal",
    "MealType",
    "NutritionGoals",
    "NutritionLogService",
    "NutritionState",
]
