"""Data models for weight tracking and derived statistics."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional


class GoalType(Enum):
    """Body composition phase the user is currently in."""
    BULK = "bulk"
    CUT = "cut"
    MAINTENANCE = "maintenance"


class Sex(Enum):
    """Biological sex for BMR and body-fat formulas."""
    MALE = "male"
    FEMALE = "female"


class ExperienceLevel(Enum):
    """Training experience, derived from years since starting the gym."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


# Physiological bounds accepted for a logged weight (kg)
MIN_WEIGHT_KG = 0.0
MAX_WEIGHT_KG = 500.0


def is_weight_in_range(weight: float) -> bool:
    """True if weight lies in (MIN_WEIGHT_KG, MAX_WEIGHT_KG]."""
    return MIN_WEIGHT_KG < weight <= MAX_WEIGHT_KG


def new_id() -> str:
    """Return a fresh random identifier."""
    return str(uuid.uuid4())


@dataclass
class WeightEntry:
    """A single weight measurement.

    Cheat-meal and retention days are kept for display and counting but are
    excluded from every mean and trend calculation.
    """

    date: date
    weight: float  # kg
    is_cheat_meal: bool = False
    is_retention: bool = False
    notes: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def is_valid(self) -> bool:
        """True if the entry takes part in averages and trends."""
        return not self.is_cheat_meal and not self.is_retention

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "weight": self.weight,
            "is_cheat_meal": self.is_cheat_meal,
            "is_retention": self.is_retention,
            "notes": self.notes,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WeightEntry":
        entry = cls(
            date=date.fromisoformat(str(data["date"])[:10]),
            weight=float(data["weight"]),
            is_cheat_meal=bool(data.get("is_cheat_meal", False)),
            is_retention=bool(data.get("is_retention", False)),
            notes=data.get("notes"),
        )
        if data.get("id"):
            entry.id = data["id"]
        if data.get("created_at"):
            entry.created_at = datetime.fromisoformat(data["created_at"])
        if data.get("updated_at"):
            entry.updated_at = datetime.fromisoformat(data["updated_at"])
        return entry


@dataclass
class UserProfile:
    """The single user profile of an installation."""

    name: str
    goal_type: GoalType
    start_weight: float
    start_date: date
    current_weight: Optional[float] = None  # tracks the latest entry
    target_weight: Optional[float] = None
    height: Optional[float] = None  # cm
    age: Optional[int] = None
    gender: Optional[Sex] = None
    bulk_duration_months: Optional[int] = None
    experience_level: Optional[ExperienceLevel] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if isinstance(self.goal_type, str):
            self.goal_type = GoalType(self.goal_type)
        if isinstance(self.gender, str):
            self.gender = Sex(self.gender)
        if isinstance(self.experience_level, str):
            self.experience_level = ExperienceLevel(self.experience_level)
        if self.current_weight is None:
            self.current_weight = self.start_weight

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "goal_type": self.goal_type.value,
            "start_weight": self.start_weight,
            "current_weight": self.current_weight,
            "start_date": self.start_date.isoformat(),
            "target_weight": self.target_weight,
            "height": self.height,
            "age": self.age,
            "gender": self.gender.value if self.gender else None,
            "bulk_duration_months": self.bulk_duration_months,
            "experience_level": (
                self.experience_level.value if self.experience_level else None
            ),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserProfile":
        profile = cls(
            name=data["name"],
            goal_type=GoalType(data["goal_type"]),
            start_weight=float(data["start_weight"]),
            start_date=date.fromisoformat(str(data["start_date"])[:10]),
            current_weight=data.get("current_weight"),
            target_weight=data.get("target_weight"),
            height=data.get("height"),
            age=data.get("age"),
            gender=data.get("gender"),
            bulk_duration_months=data.get("bulk_duration_months"),
            experience_level=data.get("experience_level"),
        )
        if data.get("id"):
            profile.id = data["id"]
        if data.get("created_at"):
            profile.created_at = datetime.fromisoformat(data["created_at"])
        if data.get("updated_at"):
            profile.updated_at = datetime.fromisoformat(data["updated_at"])
        return profile


@dataclass
class Statistics:
    """Aggregate statistics derived from a weight history.

    Recomputed on every read; never persisted.
    """

    average_weight: float = 0.0
    weight_change: float = 0.0
    weekly_average_change: float = 0.0
    monthly_average_change: float = 0.0
    moving_average_7: float = 0.0
    moving_average_14: float = 0.0
    moving_average_30: float = 0.0
    total_entries: int = 0
    cheat_meal_count: int = 0
    retention_count: int = 0
    days_tracked: int = 0
    consistency_score: float = 0.0
    projected_weight_30_days: Optional[float] = None
    projected_weight_goal: Optional[float] = None
    estimated_days_to_goal: Optional[float] = None

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dict."""
        return {
            "average_weight": self.average_weight,
            "weight_change": self.weight_change,
            "weekly_average_change": self.weekly_average_change,
            "monthly_average_change": self.monthly_average_change,
            "moving_average_7": self.moving_average_7,
            "moving_average_14": self.moving_average_14,
            "moving_average_30": self.moving_average_30,
            "total_entries": self.total_entries,
            "cheat_meal_count": self.cheat_meal_count,
            "retention_count": self.retention_count,
            "days_tracked": self.days_tracked,
            "consistency_score": self.consistency_score,
            "projected_weight_30_days": self.projected_weight_30_days,
            "projected_weight_goal": self.projected_weight_goal,
            "estimated_days_to_goal": self.estimated_days_to_goal,
        }


@dataclass
class WeeklyAnalysis:
    """Summary of one Monday-to-Sunday week of entries."""

    week_start: date
    week_end: date
    average_weight: float
    weight_change: float
    entries: int
    cheat_meals: int
    retentions: int


@dataclass
class AnomalyReport:
    """Entry ids that look like unflagged cheat-meal or retention days."""

    possible_cheat_meals: list[str] = field(default_factory=list)
    possible_retentions: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.possible_cheat_meals and not self.possible_retentions
