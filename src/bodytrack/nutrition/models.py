"""Data models for the daily nutrition log."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from bodytrack.tracking.models import new_id


class MealType(Enum):
    """Meal slots of a day, in display order."""
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACKS = "snacks"
    PRE_WORKOUT = "pre_workout"
    POST_WORKOUT = "post_workout"


# Meals every day log starts with; workout meals are created on demand
DEFAULT_MEAL_TYPES = (
    MealType.BREAKFAST,
    MealType.LUNCH,
    MealType.DINNER,
    MealType.SNACKS,
)

DEFAULT_MEAL_NAMES = {
    MealType.BREAKFAST: "Breakfast",
    MealType.LUNCH: "Lunch",
    MealType.DINNER: "Dinner",
    MealType.SNACKS: "Snacks",
    MealType.PRE_WORKOUT: "Pre-workout",
    MealType.POST_WORKOUT: "Post-workout",
}


@dataclass(frozen=True)
class FoodItem:
    """Nutrition facts per 100 g. Never scaled in place."""

    name: str
    calories: float  # kcal per 100 g
    protein: float  # g per 100 g
    carbs: float
    fat: float
    category: str = "other"
    brand: Optional[str] = None
    fiber: Optional[float] = None
    sugar: Optional[float] = None
    sodium: Optional[float] = None  # mg per 100 g
    is_custom: bool = False
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "brand": self.brand,
            "category": self.category,
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
            "fiber": self.fiber,
            "sugar": self.sugar,
            "sodium": self.sodium,
            "is_custom": self.is_custom,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FoodItem":
        return cls(
            id=data["id"],
            name=data["name"],
            brand=data.get("brand"),
            category=data.get("category", "other"),
            calories=float(data["calories"]),
            protein=float(data["protein"]),
            carbs=float(data["carbs"]),
            fat=float(data["fat"]),
            fiber=data.get("fiber"),
            sugar=data.get("sugar"),
            sodium=data.get("sodium"),
            is_custom=bool(data.get("is_custom", False)),
        )


@dataclass
class FoodEntry:
    """A logged quantity of a food.

    Nutrients are a snapshot taken when the entry is added or resized, so
    later edits to a custom food do not rewrite past logs.
    """

    food_item: FoodItem
    grams: float
    calories: int
    protein: float
    carbs: float
    fat: float
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "food_item": self.food_item.to_dict(),
            "grams": self.grams,
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FoodEntry":
        return cls(
            id=data["id"],
            food_item=FoodItem.from_dict(data["food_item"]),
            grams=float(data["grams"]),
            calories=int(data["calories"]),
            protein=float(data["protein"]),
            carbs=float(data["carbs"]),
            fat=float(data["fat"]),
        )


@dataclass
class Meal:
    """One meal slot and its foods. Totals are always derived from foods."""

    type: MealType
    name: str
    foods: list[FoodEntry] = field(default_factory=list)
    total_calories: int = 0
    total_protein: float = 0.0
    total_carbs: float = 0.0
    total_fat: float = 0.0
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "name": self.name,
            "foods": [f.to_dict() for f in self.foods],
            "total_calories": self.total_calories,
            "total_protein": self.total_protein,
            "total_carbs": self.total_carbs,
            "total_fat": self.total_fat,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Meal":
        return cls(
            id=data["id"],
            type=MealType(data["type"]),
            name=data["name"],
            foods=[FoodEntry.from_dict(f) for f in data.get("foods", [])],
            total_calories=int(data.get("total_calories", 0)),
            total_protein=float(data.get("total_protein", 0)),
            total_carbs=float(data.get("total_carbs", 0)),
            total_fat=float(data.get("total_fat", 0)),
        )


@dataclass
class NutritionGoals:
    """Daily nutrition targets new day logs are created with."""

    calories: float = 2500
    protein: float = 150
    carbs: float = 300
    fat: float = 80
    water: int = 8  # glasses
    source: str = "manual"  # 'manual' or 'evaluation'

    def to_dict(self) -> dict[str, Any]:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
            "water": self.water,
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NutritionGoals":
        defaults = cls()
        return cls(
            calories=data.get("calories", defaults.calories),
            protein=data.get("protein", defaults.protein),
            carbs=data.get("carbs", defaults.carbs),
            fat=data.get("fat", defaults.fat),
            water=int(data.get("water", defaults.water)),
            source=data.get("source", defaults.source),
        )


@dataclass
class DailyLog:
    """Everything eaten and drunk on one calendar date."""

    date: date
    meals: list[Meal]
    target_calories: float
    target_protein: float
    target_carbs: float
    target_fat: float
    water_target: int
    total_calories: int = 0
    total_protein: float = 0.0
    total_carbs: float = 0.0
    total_fat: float = 0.0
    water_glasses: int = 0
    notes: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def get_meal(self, meal_type: MealType) -> Optional[Meal]:
        """Return the meal of a type, or None if the day has none."""
        for meal in self.meals:
            if meal.type is meal_type:
                return meal
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "meals": [m.to_dict() for m in self.meals],
            "target_calories": self.target_calories,
            "target_protein": self.target_protein,
            "target_carbs": self.target_carbs,
            "target_fat": self.target_fat,
            "total_calories": self.total_calories,
            "total_protein": self.total_protein,
            "total_carbs": self.total_carbs,
            "total_fat": self.total_fat,
            "water_glasses": self.water_glasses,
            "water_target": self.water_target,
            "notes": self.notes,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DailyLog":
        return cls(
            id=data["id"],
            date=date.fromisoformat(data["date"]),
            meals=[Meal.from_dict(m) for m in data.get("meals", [])],
            target_calories=data["target_calories"],
            target_protein=data["target_protein"],
            target_carbs=data["target_carbs"],
            target_fat=data["target_fat"],
            total_calories=int(data.get("total_calories", 0)),
            total_protein=float(data.get("total_protein", 0)),
            total_carbs=float(data.get("total_carbs", 0)),
            total_fat=float(data.get("total_fat", 0)),
            water_glasses=int(data.get("water_glasses", 0)),
            water_target=int(data["water_target"]),
            notes=data.get("notes"),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )
