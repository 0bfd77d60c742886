"""Nutrition evaluation: form data in, calculated targets out.

An evaluation is filled in step by step (demographics, skin folds, diet
history, reverse diet, active bulk, current activity) and only validated
when the draft is committed. Every calculated figure is derived in one pass
by calculate_evaluation(); changing any input means recomputing everything.

Pipeline:
    skin folds + age/sex -> body fat -> lean mass
    lean mass (Katch-McArdle) + activity + training + cardio -> TDEE
    active bulk intake + weekly gain -> real TDEE (overrides formula TDEE)
    effective TDEE + weight -> macros for bulk, cut and maintenance
    gym start date + height -> training years, experience, natural potential
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from bodytrack.errors import InvalidEvaluationError
from bodytrack.profiles.body_comp import SkinFolds, calculate_body_composition
from bodytrack.profiles.energy import (
    ActivityLevel,
    CardioType,
    TDEEBreakdown,
    calculate_real_tdee,
    calculate_tdee,
)
from bodytrack.profiles.macros import MacroTargets, calculate_macros
from bodytrack.profiles.training import TrainingProfile, calculate_training_profile
from bodytrack.tracking.models import MAX_WEIGHT_KG, GoalType, Sex, new_id


class EvaluationPhase(Enum):
    """Diet phase the user reports being in at evaluation time."""
    BULK = "bulk"
    CUT = "cut"
    MAINTENANCE = "maintenance"
    REVERSE = "reverse"


@dataclass
class CardioDetails:
    """A cardio routine."""

    type: CardioType
    days_per_week: int
    minutes_per_session: int
    intensity: int = 5  # 1-10
    description: Optional[str] = None


@dataclass
class DietPhase:
    """A past diet (cut) phase, including any relapses."""

    phase_number: int
    start_date: date
    start_weight: float
    end_date: Optional[date] = None
    end_weight: Optional[float] = None
    went_to_gym: bool = False
    did_cardio: bool = False
    cardio_details: Optional[CardioDetails] = None
    had_relapses: bool = False
    relapse_count: int = 0
    total_weight_gained_from_relapses: float = 0.0
    relapse_description: Optional[str] = None


@dataclass
class ReverseDietState:
    """Progress of a reverse diet, if one is running."""

    is_currently_doing: bool = False
    start_date: Optional[date] = None
    weeks_elapsed: Optional[int] = None
    start_calories: Optional[float] = None
    current_calories: Optional[float] = None
    weekly_increment: Optional[float] = None
    target_calories: Optional[float] = None
    start_weight: Optional[float] = None
    current_weight: Optional[float] = None
    notes: Optional[str] = None


@dataclass
class ActiveBulkState:
    """Observed intake and gain rate during a bulk in progress."""

    is_currently_doing: bool = False
    current_calories: Optional[float] = None
    weekly_gain: Optional[float] = None  # kg/week
    weeks_in_bulk: Optional[int] = None


@dataclass
class CalculatedData:
    """Everything derived from an evaluation."""

    body_fat_percentage: float
    lean_mass: float
    fat_mass: float
    bmr: int
    tdee: int
    tdee_breakdown: TDEEBreakdown
    macros: dict[GoalType, MacroTargets]
    real_tdee: Optional[int] = None
    training: Optional[TrainingProfile] = None

    @property
    def effective_tdee(self) -> int:
        """Observed TDEE when available, formula TDEE otherwise."""
        return self.real_tdee if self.real_tdee else self.tdee

    def to_dict(self) -> dict[str, Any]:
        return {
            "body_fat_percentage": self.body_fat_percentage,
            "lean_mass": self.lean_mass,
            "fat_mass": self.fat_mass,
            "bmr": self.bmr,
            "tdee": self.tdee,
            "tdee_breakdown": self.tdee_breakdown.to_dict(),
            "real_tdee": self.real_tdee,
            "macros": {goal.value: m.to_dict() for goal, m in self.macros.items()},
            "training": self.training.to_dict() if self.training else None,
        }


@dataclass
class NutritionEvaluation:
    """A point-in-time nutrition evaluation."""

    age: int
    gender: Sex
    height: float  # cm
    weight: float  # kg
    gym_start_date: date
    skin_folds: SkinFolds
    training_days_per_week: int
    hours_per_session: float
    daily_activity: ActivityLevel
    current_phase: EvaluationPhase
    has_lost_weight_recently: bool = False
    diet_phases: list[DietPhase] = field(default_factory=list)
    reverse_diet: ReverseDietState = field(default_factory=ReverseDietState)
    active_bulk: ActiveBulkState = field(default_factory=ActiveBulkState)
    does_cardio: bool = False
    current_cardio: Optional[CardioDetails] = None
    calculated: Optional[CalculatedData] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)


def calculate_evaluation(
    evaluation: NutritionEvaluation,
    today: Optional[date] = None,
) -> CalculatedData:
    """Derive body composition, TDEE, real TDEE, macros and training profile.

    Args:
        evaluation: A committed evaluation
        today: Reference date for training years (default: today)

    Returns:
        CalculatedData
    """
    composition = calculate_body_composition(
        evaluation.skin_folds, evaluation.age, evaluation.gender, evaluation.weight
    )

    cardio = evaluation.current_cardio
    tdee_result = calculate_tdee(
        weight=evaluation.weight,
        height=evaluation.height,
        age=evaluation.age,
        sex=evaluation.gender,
        activity_level=evaluation.daily_activity,
        training_days_per_week=evaluation.training_days_per_week,
        hours_per_session=evaluation.hours_per_session,
        does_cardio=evaluation.does_cardio,
        cardio_days_per_week=cardio.days_per_week if cardio else None,
        cardio_minutes_per_session=cardio.minutes_per_session if cardio else None,
        cardio_type=cardio.type if cardio else None,
        cardio_intensity=cardio.intensity if cardio else None,
        lean_mass=composition.lean_mass,
    )

    real_tdee = None
    bulk = evaluation.active_bulk
    if bulk.is_currently_doing and bulk.current_calories and bulk.weekly_gain:
        real_tdee = calculate_real_tdee(bulk.current_calories, bulk.weekly_gain)

    effective_tdee = real_tdee or tdee_result.tdee
    macros = {
        goal: calculate_macros(effective_tdee, evaluation.weight, goal) for goal in GoalType
    }

    return CalculatedData(
        body_fat_percentage=composition.body_fat_percentage,
        lean_mass=composition.lean_mass,
        fat_mass=composition.fat_mass,
        bmr=tdee_result.bmr,
        tdee=tdee_result.tdee,
        tdee_breakdown=tdee_result.breakdown,
        macros=macros,
        real_tdee=real_tdee,
        training=calculate_training_profile(evaluation.gym_start_date, evaluation.height, today),
    )


def with_calculations(evaluation: NutritionEvaluation) -> NutritionEvaluation:
    """Return a copy of the evaluation with a freshly computed derived block."""
    return dataclasses.replace(evaluation, calculated=calculate_evaluation(evaluation))


def update_evaluation(evaluation: NutritionEvaluation, **changes: Any) -> NutritionEvaluation:
    """Apply field changes and recompute every derived value.

    Raises:
        InvalidEvaluationError: If the changed evaluation fails validation
    """
    updated = dataclasses.replace(evaluation, **changes, updated_at=datetime.now())
    problems = validate_evaluation(updated)
    if problems:
        raise InvalidEvaluationError(problems)
    return with_calculations(updated)


def validate_evaluation(evaluation: NutritionEvaluation) -> list[str]:
    """Return every problem with an evaluation (empty list if valid)."""
    problems: list[str] = []

    if not 0 < evaluation.age <= 120:
        problems.append(f"age must be between 1 and 120, got {evaluation.age}")
    if evaluation.height <= 0:
        problems.append(f"height must be positive, got {evaluation.height}")
    if not 0 < evaluation.weight <= MAX_WEIGHT_KG:
        problems.append(f"weight must be in (0, {MAX_WEIGHT_KG:.0f}] kg, got {evaluation.weight}")

    for site, value in evaluation.skin_folds.to_dict().items():
        if value < 0:
            problems.append(f"skin fold '{site}' cannot be negative, got {value}")

    if not 0 <= evaluation.training_days_per_week <= 7:
        problems.append(
            f"training_days_per_week must be 0-7, got {evaluation.training_days_per_week}"
        )
    if evaluation.hours_per_session < 0:
        problems.append(f"hours_per_session cannot be negative, got {evaluation.hours_per_session}")

    if evaluation.does_cardio:
        cardio = evaluation.current_cardio
        if cardio is None:
            problems.append("current_cardio is required when does_cardio is set")
        else:
            if not 1 <= cardio.days_per_week <= 7:
                problems.append(f"cardio days_per_week must be 1-7, got {cardio.days_per_week}")
            if cardio.minutes_per_session <= 0:
                problems.append(
                    f"cardio minutes_per_session must be positive, got {cardio.minutes_per_session}"
                )
            if not 1 <= cardio.intensity <= 10:
                problems.append(f"cardio intensity must be 1-10, got {cardio.intensity}")

    bulk = evaluation.active_bulk
    if bulk.is_currently_doing and bulk.current_calories is not None and bulk.current_calories <= 0:
        problems.append(f"active bulk calories must be positive, got {bulk.current_calories}")

    return problems


# Fields the draft must have before it can be committed
REQUIRED_FIELDS = (
    "age",
    "gender",
    "height",
    "weight",
    "gym_start_date",
    "skin_folds",
    "training_days_per_week",
    "hours_per_session",
    "daily_activity",
    "current_phase",
)


class EvaluationDraft:
    """Staged builder for a NutritionEvaluation.

    Each step records its fields without validating them; commit() checks
    everything at once and returns the evaluation with its calculations.

    Example:
        >>> evaluation = (
        ...     EvaluationDraft()
        ...     .set_demographics(age=30, gender="male", height=180, weight=80,
        ...                       gym_start_date=date(2020, 1, 1))
        ...     .set_skin_folds(SkinFolds(10, 12, 8, 10, 15, 12, 14))
        ...     .set_activity(training_days_per_week=4, hours_per_session=1.5,
        ...                   daily_activity="sedentary", current_phase="bulk")
        ...     .commit()
        ... )
    """

    def __init__(self) -> None:
        self._fields: dict[str, Any] = {}

    def set_demographics(
        self,
        age: int,
        gender: Sex | str,
        height: float,
        weight: float,
        gym_start_date: date,
    ) -> "EvaluationDraft":
        self._fields.update(
            age=age,
            gender=gender,
            height=height,
            weight=weight,
            gym_start_date=gym_start_date,
        )
        return self

    def set_skin_folds(self, skin_folds: SkinFolds) -> "EvaluationDraft":
        self._fields["skin_folds"] = skin_folds
        return self

    def set_diet_history(
        self,
        has_lost_weight_recently: bool,
        diet_phases: Optional[list[DietPhase]] = None,
    ) -> "EvaluationDraft":
        self._fields["has_lost_weight_recently"] = has_lost_weight_recently
        self._fields["diet_phases"] = list(diet_phases or [])
        return self

    def set_reverse_diet(self, state: ReverseDietState) -> "EvaluationDraft":
        self._fields["reverse_diet"] = state
        return self

    def set_active_bulk(self, state: ActiveBulkState) -> "EvaluationDraft":
        self._fields["active_bulk"] = state
        return self

    def set_activity(
        self,
        training_days_per_week: int,
        hours_per_session: float,
        daily_activity: ActivityLevel | str,
        current_phase: EvaluationPhase | str,
        does_cardio: bool = False,
        current_cardio: Optional[CardioDetails] = None,
    ) -> "EvaluationDraft":
        self._fields.update(
            training_days_per_week=training_days_per_week,
            hours_per_session=hours_per_session,
            daily_activity=daily_activity,
            current_phase=current_phase,
            does_cardio=does_cardio,
            # Cardio details only matter when the user does cardio
            current_cardio=current_cardio if does_cardio else None,
        )
        return self

    @property
    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_FIELDS if self._fields.get(name) is None]

    def commit(self) -> NutritionEvaluation:
        """Validate the draft and build the evaluation with calculations.

        Raises:
            InvalidEvaluationError: Listing every missing or invalid field
        """
        problems = [f"missing field: {name}" for name in self.missing_fields]
        if problems:
            raise InvalidEvaluationError(problems)

        fields = dict(self._fields)
        try:
            fields["gender"] = Sex(fields["gender"])
            fields["daily_activity"] = ActivityLevel(fields["daily_activity"])
            fields["current_phase"] = EvaluationPhase(fields["current_phase"])
        except ValueError as e:
            raise InvalidEvaluationError([str(e)]) from e

        evaluation = NutritionEvaluation(**fields)
        problems = validate_evaluation(evaluation)
        if problems:
            raise InvalidEvaluationError(problems)

        return with_calculations(evaluation)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EvaluationDraft":
        """Build a draft from a plain mapping (YAML form file or backup)."""
        draft = cls()
        for name in REQUIRED_FIELDS:
            if name in data and name != "skin_folds":
                draft._fields[name] = data[name]

        if isinstance(draft._fields.get("gym_start_date"), str):
            draft._fields["gym_start_date"] = date.fromisoformat(draft._fields["gym_start_date"])

        if "skin_folds" in data:
            draft._fields["skin_folds"] = SkinFolds(**data["skin_folds"])

        draft._fields["has_lost_weight_recently"] = bool(data.get("has_lost_weight_recently", False))
        draft._fields["diet_phases"] = [_phase_from_dict(p) for p in data.get("diet_phases") or []]

        if data.get("reverse_diet"):
            draft._fields["reverse_diet"] = _reverse_diet_from_dict(data["reverse_diet"])
        if data.get("active_bulk"):
            draft._fields["active_bulk"] = ActiveBulkState(**data["active_bulk"])

        draft._fields["does_cardio"] = bool(data.get("does_cardio", False))
        if draft._fields["does_cardio"] and data.get("current_cardio"):
            draft._fields["current_cardio"] = _cardio_from_dict(data["current_cardio"])

        return draft


def _optional_date(value: Any) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _cardio_from_dict(data: dict[str, Any]) -> CardioDetails:
    return CardioDetails(
        type=CardioType(data["type"]),
        days_per_week=int(data["days_per_week"]),
        minutes_per_session=int(data["minutes_per_session"]),
        intensity=int(data.get("intensity", 5)),
        description=data.get("description"),
    )


def _phase_from_dict(data: dict[str, Any]) -> DietPhase:
    values = dict(data)
    values["start_date"] = _optional_date(values["start_date"])
    values["end_date"] = _optional_date(values.get("end_date"))
    if values.get("cardio_details"):
        values["cardio_details"] = _cardio_from_dict(values["cardio_details"])
    return DietPhase(**values)


def _reverse_diet_from_dict(data: dict[str, Any]) -> ReverseDietState:
    values = dict(data)
    values["start_date"] = _optional_date(values.get("start_date"))
    return ReverseDietState(**values)


def _to_plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _to_plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_plain(v) for v in value]
    return value


def evaluation_to_dict(evaluation: NutritionEvaluation) -> dict[str, Any]:
    """Convert an evaluation's inputs to a JSON-serializable dict.

    The derived block is left out; it is recomputed on load.
    """
    data = {
        f.name: getattr(evaluation, f.name)
        for f in dataclasses.fields(evaluation)
        if f.name not in ("calculated", "skin_folds", "diet_phases", "reverse_diet",
                          "active_bulk", "current_cardio")
    }
    data["skin_folds"] = evaluation.skin_folds.to_dict()
    data["diet_phases"] = [dataclasses.asdict(p) for p in evaluation.diet_phases]
    data["reverse_diet"] = dataclasses.asdict(evaluation.reverse_diet)
    data["active_bulk"] = dataclasses.asdict(evaluation.active_bulk)
    data["current_cardio"] = (
        dataclasses.asdict(evaluation.current_cardio) if evaluation.current_cardio else None
    )
    return _to_plain(data)


def evaluation_from_dict(data: dict[str, Any]) -> NutritionEvaluation:
    """Rebuild a stored evaluation and recompute its derived block.

    Raises:
        InvalidEvaluationError: If the stored data no longer validates
    """
    evaluation = EvaluationDraft.from_dict(data).commit()
    updates: dict[str, Any] = {}
    if data.get("id"):
        updates["id"] = data["id"]
    for stamp in ("created_at", "updated_at"):
        if data.get(stamp):
            updates[stamp] = datetime.fromisoformat(data[stamp])
    return dataclasses.replace(evaluation, **updates)
