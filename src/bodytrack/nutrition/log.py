"""Daily nutrition log aggregation.

Every function here is pure: it takes a DailyLog and returns a new one,
leaving the input untouched. After any change to a meal's foods the meal
totals are recomputed from its entries, then the day totals from its meals.
Totals are never adjusted incrementally, so repeated edits cannot drift.

Rounding: calories to whole kcal, protein/carbs/fat to one decimal, at
every level (entry, meal, day).
"""

from __future__ import annotations

import dataclasses
from datetime import date, datetime
from typing import Optional

from bodytrack.nutrition.models import (
    DEFAULT_MEAL_NAMES,
    DEFAULT_MEAL_TYPES,
    DailyLog,
    FoodEntry,
    FoodItem,
    Meal,
    MealType,
    NutritionGoals,
)
from bodytrack.numeric import round_half_up, round_int


def calculate_food_nutrients(food: FoodItem, grams: float) -> dict[str, float]:
    """Scale per-100 g nutrition facts to a quantity.

    Args:
        food: Food with nutrients per 100 g
        grams: Quantity eaten

    Returns:
        Dict with calories (int) and protein/carbs/fat (one decimal)
    """
    return {
        "calories": round_int(food.calories * grams / 100),
        "protein": round_half_up(food.protein * grams / 100, 1),
        "carbs": round_half_up(food.carbs * grams / 100, 1),
        "fat": round_half_up(food.fat * grams / 100, 1),
    }


def create_food_entry(food: FoodItem, grams: float) -> FoodEntry:
    """Snapshot a food at a quantity into a new log entry."""
    return FoodEntry(food_item=food, grams=grams, **calculate_food_nutrients(food, grams))


def create_empty_meal(meal_type: MealType, name: Optional[str] = None) -> Meal:
    return Meal(type=meal_type, name=name or DEFAULT_MEAL_NAMES[meal_type])


def create_empty_day_log(
    log_date: date,
    goals: NutritionGoals,
    meal_names: Optional[dict[MealType, str]] = None,
) -> DailyLog:
    """A new day with the four default meals and targets copied from goals."""
    names = meal_names or {}
    return DailyLog(
        date=log_date,
        meals=[create_empty_meal(t, names.get(t)) for t in DEFAULT_MEAL_TYPES],
        target_calories=goals.calories,
        target_protein=goals.protein,
        target_carbs=goals.carbs,
        target_fat=goals.fat,
        water_target=goals.water,
    )


def recalculate_meal(meal: Meal) -> Meal:
    """Return the meal with totals recomputed from its food entries."""
    return dataclasses.replace(
        meal,
        foods=list(meal.foods),
        total_calories=round_int(sum(f.calories for f in meal.foods)),
        total_protein=round_half_up(sum(f.protein for f in meal.foods), 1),
        total_carbs=round_half_up(sum(f.carbs for f in meal.foods), 1),
        total_fat=round_half_up(sum(f.fat for f in meal.foods), 1),
    )


def recalculate_day_totals(log: DailyLog) -> DailyLog:
    """Return the day with totals recomputed from its meals' totals."""
    return dataclasses.replace(
        log,
        meals=list(log.meals),
        total_calories=round_int(sum(m.total_calories for m in log.meals)),
        total_protein=round_half_up(sum(m.total_protein for m in log.meals), 1),
        total_carbs=round_half_up(sum(m.total_carbs for m in log.meals), 1),
        total_fat=round_half_up(sum(m.total_fat for m in log.meals), 1),
        updated_at=datetime.now(),
    )


def recalculate_totals(log: DailyLog) -> DailyLog:
    """Recompute every meal and then the day."""
    return recalculate_day_totals(
        dataclasses.replace(log, meals=[recalculate_meal(m) for m in log.meals])
    )


def _replace_meal_foods(
    log: DailyLog,
    meal_type: MealType,
    foods: list[FoodEntry],
) -> DailyLog:
    meals = [
        recalculate_meal(dataclasses.replace(m, foods=foods)) if m.type is meal_type else m
        for m in log.meals
    ]
    return recalculate_day_totals(dataclasses.replace(log, meals=meals))


def add_food_to_meal(
    log: DailyLog,
    meal_type: MealType,
    food: FoodItem,
    grams: float,
    meal_name: Optional[str] = None,
) -> DailyLog:
    """Append a food to a meal, creating the meal if the day lacks it.

    Args:
        log: The day to change
        meal_type: Target meal slot
        food: Food with nutrients per 100 g
        grams: Quantity eaten
        meal_name: Display name used if the meal has to be created

    Returns:
        New DailyLog with meal and day totals recomputed
    """
    if grams <= 0:
        raise ValueError(f"grams must be positive, got {grams}")

    entry = create_food_entry(food, grams)

    meal = log.get_meal(meal_type)
    if meal is None:
        meal = create_empty_meal(meal_type, meal_name)
        log = dataclasses.replace(log, meals=[*log.meals, meal])

    return _replace_meal_foods(log, meal_type, [*meal.foods, entry])


def remove_food_from_meal(log: DailyLog, meal_type: MealType, food_entry_id: str) -> DailyLog:
    """Remove a food entry from a meal. Unknown ids leave the foods unchanged."""
    meal = log.get_meal(meal_type)
    if meal is None:
        return recalculate_day_totals(log)

    foods = [f for f in meal.foods if f.id != food_entry_id]
    return _replace_meal_foods(log, meal_type, foods)


def update_food_in_meal(
    log: DailyLog,
    meal_type: MealType,
    food_entry_id: str,
    grams: float,
) -> DailyLog:
    """Resize a food entry.

    Nutrients are re-derived from the entry's food item at the new quantity,
    not scaled from the old snapshot, so rounding does not compound.
    """
    if grams <= 0:
        raise ValueError(f"grams must be positive, got {grams}")

    meal = log.get_meal(meal_type)
    if meal is None:
        return recalculate_day_totals(log)

    foods = [
        dataclasses.replace(f, grams=grams, **calculate_food_nutrients(f.food_item, grams))
        if f.id == food_entry_id
        else f
        for f in meal.foods
    ]
    return _replace_meal_foods(log, meal_type, foods)


def add_water(log: DailyLog) -> DailyLog:
    return dataclasses.replace(log, water_glasses=log.water_glasses + 1, updated_at=datetime.now())


def remove_water(log: DailyLog) -> DailyLog:
    return set_water_glasses(log, log.water_glasses - 1)


def set_water_glasses(log: DailyLog, glasses: int) -> DailyLog:
    """Set the water counter, floored at zero."""
    return dataclasses.replace(log, water_glasses=max(0, glasses), updated_at=datetime.now())


def set_day_notes(log: DailyLog, notes: Optional[str]) -> DailyLog:
    return dataclasses.replace(log, notes=notes, updated_at=datetime.now())
