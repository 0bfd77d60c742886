"""Tests for daily nutrition log aggregation."""

from __future__ import annotations

import random
from datetime import date

import pytest

from bodytrack.nutrition.log import (
    add_food_to_meal,
    add_water,
    calculate_food_nutrients,
    create_empty_day_log,
    recalculate_totals,
    remove_food_from_meal,
    remove_water,
    set_day_notes,
    set_water_glasses,
    update_food_in_meal,
)
from bodytrack.nutrition.models import DailyLog, FoodItem, MealType, NutritionGoals

DAY = date(2025, 3, 10)


@pytest.fixture
def empty_day() -> DailyLog:
    return create_empty_day_log(DAY, NutritionGoals())


def assert_totals_consistent(log: DailyLog) -> None:
    """Meal totals match their foods and day totals match the meals."""
    for meal in log.meals:
        assert meal.total_calories == sum(f.calories for f in meal.foods)
        assert meal.total_protein == pytest.approx(sum(f.protein for f in meal.foods), abs=0.051)
        assert meal.total_carbs == pytest.approx(sum(f.carbs for f in meal.foods), abs=0.051)
        assert meal.total_fat == pytest.approx(sum(f.fat for f in meal.foods), abs=0.051)
    assert log.total_calories == sum(m.total_calories for m in log.meals)
    assert log.total_protein == pytest.approx(sum(m.total_protein for m in log.meals), abs=0.051)
    assert log.total_carbs == pytest.approx(sum(m.total_carbs for m in log.meals), abs=0.051)
    assert log.total_fat == pytest.approx(sum(m.total_fat for m in log.meals), abs=0.051)


class TestFoodNutrients:
    def test_scales_per_100g(self, simple_food: FoodItem) -> None:
        assert calculate_food_nutrients(simple_food, 150) == {
            "calories": 300,
            "protein": 15.0,
            "carbs": 30.0,
            "fat": 7.5,
        }

    def test_calories_round_half_up(self) -> None:
        food = FoodItem(name="Half", calories=101, protein=0, carbs=0, fat=0)
        assert calculate_food_nutrients(food, 50)["calories"] == 51


class TestEmptyDayLog:
    def test_defaults(self, empty_day: DailyLog) -> None:
        assert [m.type for m in empty_day.meals] == [
            MealType.BREAKFAST,
            MealType.LUNCH,
            MealType.DINNER,
            MealType.SNACKS,
        ]
        assert empty_day.meals[0].name == "Breakfast"
        assert empty_day.target_calories == 2500
        assert empty_day.water_target == 8
        assert empty_day.total_calories == 0

    def test_custom_meal_names(self) -> None:
        log = create_empty_day_log(DAY, NutritionGoals(), {MealType.SNACKS: "Merienda"})
        assert log.get_meal(MealType.SNACKS).name == "Merienda"


class TestAddFood:
    """Tests for add_food_to_meal."""

    def test_single_food(self, empty_day: DailyLog, simple_food: FoodItem) -> None:
        log = add_food_to_meal(empty_day, MealType.BREAKFAST, simple_food, 100)

        breakfast = log.get_meal(MealType.BREAKFAST)
        assert len(breakfast.foods) == 1
        entry = breakfast.foods[0]
        assert (entry.calories, entry.protein, entry.carbs, entry.fat) == (200, 10.0, 20.0, 5.0)
        assert breakfast.total_calories == 200
        assert (log.total_calories, log.total_protein, log.total_carbs, log.total_fat) == (
            200, 10.0, 20.0, 5.0,
        )

    def test_input_not_modified(self, empty_day: DailyLog, simple_food: FoodItem) -> None:
        add_food_to_meal(empty_day, MealType.LUNCH, simple_food, 100)
        assert empty_day.get_meal(MealType.LUNCH).foods == []
        assert empty_day.total_calories == 0

    def test_creates_missing_meal(self, empty_day: DailyLog, simple_food: FoodItem) -> None:
        log = add_food_to_meal(empty_day, MealType.POST_WORKOUT, simple_food, 50, "After gym")
        meal = log.get_meal(MealType.POST_WORKOUT)
        assert meal.name == "After gym"
        assert meal.total_calories == 100
        assert len(log.meals) == 5

    def test_rejects_non_positive_grams(self, empty_day: DailyLog, simple_food: FoodItem) -> None:
        with pytest.raises(ValueError):
            add_food_to_meal(empty_day, MealType.LUNCH, simple_food, 0)


class TestRemoveAndUpdate:
    def test_remove(self, empty_day: DailyLog, simple_food: FoodItem, oats: FoodItem) -> None:
        log = add_food_to_meal(empty_day, MealType.LUNCH, simple_food, 100)
        log = add_food_to_meal(log, MealType.LUNCH, oats, 80)
        entry_id = log.get_meal(MealType.LUNCH).foods[0].id

        log = remove_food_from_meal(log, MealType.LUNCH, entry_id)
        lunch = log.get_meal(MealType.LUNCH)
        assert [f.food_item.name for f in lunch.foods] == ["Rolled oats"]
        assert log.total_calories == lunch.total_calories
        assert_totals_consistent(log)

    def test_remove_unknown_id(self, empty_day: DailyLog, simple_food: FoodItem) -> None:
        log = add_food_to_meal(empty_day, MealType.LUNCH, simple_food, 100)
        log = remove_food_from_meal(log, MealType.LUNCH, "missing")
        assert log.total_calories == 200

    def test_update_rederives_from_food(self, empty_day: DailyLog, simple_food: FoodItem) -> None:
        log = add_food_to_meal(empty_day, MealType.DINNER, simple_food, 33)
        entry_id = log.get_meal(MealType.DINNER).foods[0].id

        log = update_food_in_meal(log, MealType.DINNER, entry_id, 250)
        entry = log.get_meal(MealType.DINNER).foods[0]
        assert entry.grams == 250
        assert (entry.calories, entry.protein, entry.carbs, entry.fat) == (500, 25.0, 50.0, 12.5)
        assert log.total_calories == 500

    def test_recalculate_fixes_stale_totals(self, empty_day: DailyLog, simple_food: FoodItem) -> None:
        log = add_food_to_meal(empty_day, MealType.DINNER, simple_food, 100)
        log.meals[2].total_calories = 9999
        log.total_calories = 9999
        assert recalculate_totals(log).total_calories == 200


class TestTotalsInvariant:
    def test_random_operations(self, empty_day: DailyLog) -> None:
        """Totals stay consistent through any sequence of edits."""
        rng = random.Random(42)
        foods = [
            FoodItem(
                name=f"Food {i}",
                calories=rng.uniform(20, 900),
                protein=rng.uniform(0, 40),
                carbs=rng.uniform(0, 80),
                fat=rng.uniform(0, 50),
            )
            for i in range(6)
        ]
        meal_types = list(MealType)

        log = empty_day
        for _ in range(200):
            meal_type = rng.choice(meal_types)
            meal = log.get_meal(meal_type)
            action = rng.random()
            if meal is None or not meal.foods or action < 0.5:
                log = add_food_to_meal(log, meal_type, rng.choice(foods), rng.uniform(1, 400))
            elif action < 0.75:
                log = remove_food_from_meal(log, meal_type, rng.choice(meal.foods).id)
            else:
                log = update_food_in_meal(
                    log, meal_type, rng.choice(meal.foods).id, rng.uniform(1, 400)
                )
            assert_totals_consistent(log)


class TestWaterAndNotes:
    def test_add_and_remove(self, empty_day: DailyLog) -> None:
        log = add_water(add_water(empty_day))
        assert log.water_glasses == 2
        assert remove_water(log).water_glasses == 1

    def test_floor_at_zero(self, empty_day: DailyLog) -> None:
        assert remove_water(empty_day).water_glasses == 0
        assert set_water_glasses(empty_day, -3).water_glasses == 0

    def test_notes(self, empty_day: DailyLog) -> None:
        log = set_day_notes(empty_day, "Rest day")
        assert log.notes == "Rest day"
        assert set_day_notes(log, None).notes is None
