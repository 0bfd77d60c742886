"""Tests for the nutrition log service."""

from __future__ import annotations

import threading
from datetime import date

import pytest

from bodytrack.nutrition.models import FoodItem, MealType, NutritionGoals
from bodytrack.nutrition.service import MAX_RECENT_FOODS, NutritionLogService, NutritionState

DAY = date(2025, 3, 10)


@pytest.fixture
def service() -> NutritionLogService:
    return NutritionLogService()


class TestDayLogs:
    """Tests for day creation and meal edits."""

    def test_get_or_create(self, service: NutritionLogService) -> None:
        assert service.get_log(DAY) is None
        log = service.get_or_create_log(DAY)
        assert service.get_or_create_log(DAY) is log
        assert log.target_calories == 2500

    def test_new_days_use_current_goals(self, service: NutritionLogService) -> None:
        service.get_or_create_log(DAY)
        service.set_goals(NutritionGoals(calories=3000, protein=180, carbs=350, fat=90, water=10))

        assert service.get_log(DAY).target_calories == 2500
        tomorrow = service.get_or_create_log(date(2025, 3, 11))
        assert tomorrow.target_calories == 3000
        assert tomorrow.water_target == 10

    def test_add_creates_day(self, service: NutritionLogService, simple_food: FoodItem) -> None:
        log = service.add_food_to_meal(DAY, MealType.BREAKFAST, simple_food, 100)
        assert log.total_calories == 200
        assert service.get_log(DAY) is log

    def test_edits_on_missing_day_return_none(self, service: NutritionLogService) -> None:
        assert service.remove_food_from_meal(DAY, MealType.LUNCH, "x") is None
        assert service.update_food_in_meal(DAY, MealType.LUNCH, "x", 50) is None
        assert service.remove_water(DAY) is None
        assert service.set_day_notes(DAY, "hi") is None
        assert service.get_log(DAY) is None

    def test_update_and_remove(self, service: NutritionLogService, simple_food: FoodItem) -> None:
        log = service.add_food_to_meal(DAY, MealType.LUNCH, simple_food, 100)
        entry_id = log.get_meal(MealType.LUNCH).foods[0].id

        log = service.update_food_in_meal(DAY, MealType.LUNCH, entry_id, 50)
        assert log.total_calories == 100

        log = service.remove_food_from_meal(DAY, MealType.LUNCH, entry_id)
        assert log.total_calories == 0

    def test_list_logs_newest_first(self, service: NutritionLogService) -> None:
        for day in (date(2025, 3, 1), date(2025, 3, 5), date(2025, 3, 3)):
            service.get_or_create_log(day)
        assert [log.date.day for log in service.list_logs()] == [5, 3, 1]

    def test_renamed_meal_used_for_new_days(self, service: NutritionLogService) -> None:
        service.set_meal_name(MealType.SNACKS, "Merienda")
        assert service.get_meal_name(MealType.SNACKS) == "Merienda"
        assert service.get_meal_name(MealType.LUNCH) == "Lunch"
        assert service.get_or_create_log(DAY).get_meal(MealType.SNACKS).name == "Merienda"

    def test_water(self, service: NutritionLogService) -> None:
        service.add_water(DAY)
        service.add_water(DAY)
        assert service.remove_water(DAY).water_glasses == 1
        assert service.set_water_glasses(DAY, -1).water_glasses == 0


class TestConcurrency:
    def test_concurrent_adds_to_same_day(self, service: NutritionLogService) -> None:
        """No edit is lost when many threads change meals of one day."""
        food = FoodItem(name="Rice", calories=100, protein=2, carbs=22, fat=0.3)
        meals = list(MealType)
        per_thread = 25

        def worker(meal_type: MealType) -> None:
            for _ in range(per_thread):
                service.add_food_to_meal(DAY, meal_type, food, 100)

        threads = [threading.Thread(target=worker, args=(meals[i % len(meals)],)) for i in range(12)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        log = service.get_log(DAY)
        assert sum(len(m.foods) for m in log.meals) == 12 * per_thread
        assert log.total_calories == 12 * per_thread * 100
        assert len({m.type for m in log.meals}) == len(log.meals)


class TestFoods:
    """Tests for custom and recent foods."""

    def test_custom_food_round_trip(self, service: NutritionLogService) -> None:
        food = service.add_custom_food("Protein bar", 350, 30, 35, 10, brand="Acme")
        assert food.is_custom
        assert service.custom_foods == [food]

        assert service.remove_custom_food(food.id) is True
        assert service.remove_custom_food(food.id) is False
        assert service.custom_foods == []

    def test_removing_custom_food_keeps_log_entries(self, service: NutritionLogService) -> None:
        food = service.add_custom_food("Protein bar", 350, 30, 35, 10)
        service.add_food_to_meal(DAY, MealType.SNACKS, food, 60)
        service.remove_custom_food(food.id)

        entry = service.get_log(DAY).get_meal(MealType.SNACKS).foods[0]
        assert entry.food_item.name == "Protein bar"
        assert entry.calories == 210

    def test_recent_foods_most_recent_first(self, service: NutritionLogService, oats, simple_food) -> None:
        service.add_food_to_meal(DAY, MealType.BREAKFAST, oats, 80)
        service.add_food_to_meal(DAY, MealType.LUNCH, simple_food, 100)
        service.add_food_to_meal(DAY, MealType.DINNER, oats, 80)
        assert [f.name for f in service.recent_foods] == ["Rolled oats", "Test food"]

    def test_recent_foods_capped(self, service: NutritionLogService) -> None:
        foods = [FoodItem(name=f"Food {i}", calories=100, protein=1, carbs=1, fat=1) for i in range(25)]
        for food in foods:
            service.add_to_recent_foods(food)

        recent = service.recent_foods
        assert len(recent) == MAX_RECENT_FOODS
        assert recent[0] is foods[-1]
        assert foods[0] not in recent


class TestState:
    def test_snapshot_and_load(self, service: NutritionLogService, simple_food: FoodItem) -> None:
        service.add_food_to_meal(DAY, MealType.LUNCH, simple_food, 100)
        service.add_custom_food("Bar", 350, 30, 35, 10)
        service.set_meal_name(MealType.DINNER, "Supper")

        state = service.snapshot()
        restored = NutritionLogService(state)

        assert restored.get_log(DAY).total_calories == 200
        assert [f.name for f in restored.custom_foods] == ["Bar"]
        assert restored.get_meal_name(MealType.DINNER) == "Supper"

    def test_load_truncates_recent(self) -> None:
        foods = [FoodItem(name=f"F{i}", calories=1, protein=0, carbs=0, fat=0) for i in range(30)]
        service = NutritionLogService(NutritionState(recent_foods=foods))
        assert len(service.recent_foods) == MAX_RECENT_FOODS
