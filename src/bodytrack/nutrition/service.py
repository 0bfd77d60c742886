"""In-memory nutrition log service with per-date critical sections.

The service owns the day logs, custom foods, recent foods, goals and meal
names. Each mutation of a day reads the whole DailyLog, applies a pure
function from bodytrack.nutrition.log and writes the whole day back while
holding the lock for that date, so two edits to different meals of the
same day cannot lose each other's changes. Different dates never share a
lock.

Persistence is not done here; callers use load_state()/snapshot() to move
state in and out of a store (see bodytrack.db.queries).
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional

from bodytrack.nutrition import log as daylog
from bodytrack.nutrition.models import (
    DEFAULT_MEAL_NAMES,
    DailyLog,
    FoodItem,
    MealType,
    NutritionGoals,
)

logger = logging.getLogger(__name__)

MAX_RECENT_FOODS = 20


@dataclass
class NutritionState:
    """Everything the service holds, for saving and loading."""

    logs: list[DailyLog] = field(default_factory=list)
    custom_foods: list[FoodItem] = field(default_factory=list)
    recent_foods: list[FoodItem] = field(default_factory=list)
    goals: NutritionGoals = field(default_factory=NutritionGoals)
    meal_names: dict[MealType, str] = field(default_factory=dict)


class NutritionLogService:
    """Owns nutrition logs and serialises changes per calendar date."""

    def __init__(self, state: Optional[NutritionState] = None):
        self._logs: dict[date, DailyLog] = {}
        self._day_locks: dict[date, threading.Lock] = {}
        self._registry_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._custom_foods: list[FoodItem] = []
        self._recent_foods: list[FoodItem] = []
        self._goals = NutritionGoals()
        self._meal_names: dict[MealType, str] = {}
        if state is not None:
            self.load_state(state)

    # === Lifecycle ===

    def load_state(self, state: NutritionState) -> None:
        """Replace all in-memory state."""
        with self._registry_lock, self._state_lock:
            self._logs = {log.date: log for log in state.logs}
            self._custom_foods = list(state.custom_foods)
            self._recent_foods = list(state.recent_foods)[:MAX_RECENT_FOODS]
            self._goals = state.goals
            self._meal_names = dict(state.meal_names)
        logger.debug("Loaded %d day logs, %d custom foods", len(state.logs), len(state.custom_foods))

    def snapshot(self) -> NutritionState:
        """Copy of the current state, newest day first."""
        with self._registry_lock, self._state_lock:
            return NutritionState(
                logs=sorted(self._logs.values(), key=lambda day: day.date, reverse=True),
                custom_foods=list(self._custom_foods),
                recent_foods=list(self._recent_foods),
                goals=self._goals,
                meal_names=dict(self._meal_names),
            )

    # === Day logs ===

    def _lock_for(self, log_date: date) -> threading.Lock:
        with self._registry_lock:
            lock = self._day_locks.get(log_date)
            if lock is None:
                lock = self._day_locks[log_date] = threading.Lock()
            return lock

    def _new_day(self, log_date: date) -> DailyLog:
        with self._state_lock:
            goals = self._goals
            names = dict(self._meal_names)
        return daylog.create_empty_day_log(log_date, goals, names)

    def _mutate(
        self,
        log_date: date,
        change: Callable[[DailyLog], DailyLog],
        create: bool = True,
    ) -> Optional[DailyLog]:
        """Apply a whole-day change inside the date's critical section.

        Returns None (and changes nothing) if the day does not exist and
        create is False.
        """
        with self._lock_for(log_date):
            current = self._logs.get(log_date)
            if current is None:
                if not create:
                    return None
                current = self._new_day(log_date)
            updated = change(current)
            self._logs[log_date] = updated
            return updated

    def get_log(self, log_date: date) -> Optional[DailyLog]:
        return self._logs.get(log_date)

    def get_or_create_log(self, log_date: date) -> DailyLog:
        with self._lock_for(log_date):
            log = self._logs.get(log_date)
            if log is None:
                log = self._logs[log_date] = self._new_day(log_date)
            return log

    def list_logs(self) -> list[DailyLog]:
        """All day logs, newest first."""
        return sorted(self._logs.values(), key=lambda day: day.date, reverse=True)

    # === Foods in meals ===

    def add_food_to_meal(
        self,
        log_date: date,
        meal_type: MealType,
        food: FoodItem,
        grams: float,
    ) -> DailyLog:
        """Add a food to a meal, creating the day and meal as needed."""
        meal_name = self.get_meal_name(meal_type)
        updated = self._mutate(
            log_date,
            lambda log: daylog.add_food_to_meal(log, meal_type, food, grams, meal_name),
        )
        self.add_to_recent_foods(food)
        logger.debug("Added %.0f g of %s to %s on %s", grams, food.name, meal_type.value, log_date)
        return updated  # type: ignore[return-value]

    def remove_food_from_meal(
        self,
        log_date: date,
        meal_type: MealType,
        food_entry_id: str,
    ) -> Optional[DailyLog]:
        return self._mutate(
            log_date,
            lambda log: daylog.remove_food_from_meal(log, meal_type, food_entry_id),
            create=False,
        )

    def update_food_in_meal(
        self,
        log_date: date,
        meal_type: MealType,
        food_entry_id: str,
        grams: float,
    ) -> Optional[DailyLog]:
        return self._mutate(
            log_date,
            lambda log: daylog.update_food_in_meal(log, meal_type, food_entry_id, grams),
            create=False,
        )

    def recalculate_totals(self, log_date: date) -> Optional[DailyLog]:
        return self._mutate(log_date, daylog.recalculate_totals, create=False)

    # === Water and notes ===

    def add_water(self, log_date: date) -> DailyLog:
        return self._mutate(log_date, daylog.add_water)  # type: ignore[return-value]

    def remove_water(self, log_date: date) -> Optional[DailyLog]:
        return self._mutate(log_date, daylog.remove_water, create=False)

    def set_water_glasses(self, log_date: date, glasses: int) -> Optional[DailyLog]:
        return self._mutate(
            log_date, lambda log: daylog.set_water_glasses(log, glasses), create=False
        )

    def set_day_notes(self, log_date: date, notes: Optional[str]) -> Optional[DailyLog]:
        return self._mutate(log_date, lambda log: daylog.set_day_notes(log, notes), create=False)

    # === Goals ===

    @property
    def goals(self) -> NutritionGoals:
        return self._goals

    def set_goals(self, goals: NutritionGoals) -> None:
        """Set goals for days created from now on. Existing days keep theirs."""
        with self._state_lock:
            self._goals = goals

    # === Custom and recent foods ===

    @property
    def custom_foods(self) -> list[FoodItem]:
        return list(self._custom_foods)

    @property
    def recent_foods(self) -> list[FoodItem]:
        return list(self._recent_foods)

    def add_custom_food(
        self,
        name: str,
        calories: float,
        protein: float,
        carbs: float,
        fat: float,
        category: str = "other",
        brand: Optional[str] = None,
        fiber: Optional[float] = None,
        sugar: Optional[float] = None,
        sodium: Optional[float] = None,
    ) -> FoodItem:
        food = FoodItem(
            name=name,
            calories=calories,
            protein=protein,
            carbs=carbs,
            fat=fat,
            category=category,
            brand=brand,
            fiber=fiber,
            sugar=sugar,
            sodium=sodium,
            is_custom=True,
        )
        with self._state_lock:
            self._custom_foods.append(food)
        return food

    def remove_custom_food(self, food_id: str) -> bool:
        """Remove a custom food. Past log entries keep their snapshot."""
        with self._state_lock:
            before = len(self._custom_foods)
            self._custom_foods = [f for f in self._custom_foods if f.id != food_id]
            return len(self._custom_foods) < before

    def add_to_recent_foods(self, food: FoodItem) -> None:
        """Move a food to the front of the recent list (max 20, no duplicates)."""
        with self._state_lock:
            others = [f for f in self._recent_foods if f.id != food.id]
            self._recent_foods = [food, *others][:MAX_RECENT_FOODS]

    # === Meal names ===

    def set_meal_name(self, meal_type: MealType, name: str) -> None:
        with self._state_lock:
            self._meal_names[meal_type] = name

    def get_meal_name(self, meal_type: MealType) -> str:
        return self._meal_names.get(meal_type) or DEFAULT_MEAL_NAMES[meal_type]
