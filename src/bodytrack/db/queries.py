"""Database queries for profiles, weight entries, evaluations and nutrition logs."""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import date, datetime
from typing import Any, Iterable, Optional

from bodytrack.errors import InvalidEntryError
from bodytrack.nutrition.models import DailyLog, FoodItem, MealType, NutritionGoals
from bodytrack.nutrition.service import MAX_RECENT_FOODS, NutritionState
from bodytrack.profiles.evaluation import (
    NutritionEvaluation,
    evaluation_from_dict,
    evaluation_to_dict,
)
from bodytrack.tracking.models import (
    MAX_WEIGHT_KG,
    MIN_WEIGHT_KG,
    UserProfile,
    WeightEntry,
    is_weight_in_range,
)

logger = logging.getLogger(__name__)


def _check_weight(weight: float) -> None:
    if not is_weight_in_range(weight):
        raise InvalidEntryError(
            f"Weight must be greater than {MIN_WEIGHT_KG:g} and at most {MAX_WEIGHT_KG:g} kg, got {weight}"
        )


class ProfileQueries:
    """Database queries for the single user profile."""

    @staticmethod
    def save_profile(conn: sqlite3.Connection, profile: UserProfile) -> None:
        """Store the profile, replacing any existing one."""
        conn.execute("DELETE FROM user_profile WHERE id != ?", (profile.id,))
        conn.execute(
            """
            INSERT OR REPLACE INTO user_profile
            (id, name, goal_type, start_weight, current_weight, start_date,
             target_weight, height, age, gender, bulk_duration_months,
             experience_level, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                profile.id,
                profile.name,
                profile.goal_type.value,
                profile.start_weight,
                profile.current_weight,
                profile.start_date.isoformat(),
                profile.target_weight,
                profile.height,
                profile.age,
                profile.gender.value if profile.gender else None,
                profile.bulk_duration_months,
                profile.experience_level.value if profile.experience_level else None,
                profile.created_at.isoformat(),
                profile.updated_at.isoformat(),
            ),
        )
        conn.commit()
        logger.debug("Saved profile %s", profile.id)

    @staticmethod
    def get_profile(conn: sqlite3.Connection) -> Optional[UserProfile]:
        """Get the profile, or None before one has been created."""
        row = conn.execute(
            """
            SELECT id, name, goal_type, start_weight, current_weight, start_date,
                   target_weight, height, age, gender, bulk_duration_months,
                   experience_level, created_at, updated_at
            FROM user_profile LIMIT 1
            """
        ).fetchone()

        if row is None:
            return None

        profile = UserProfile(
            name=row["name"],
            goal_type=row["goal_type"],
            start_weight=row["start_weight"],
            current_weight=row["current_weight"],
            start_date=date.fromisoformat(row["start_date"]),
            target_weight=row["target_weight"],
            height=row["height"],
            age=row["age"],
            gender=row["gender"],
            bulk_duration_months=row["bulk_duration_months"],
            experience_level=row["experience_level"],
        )
        profile.id = row["id"]
        profile.created_at = datetime.fromisoformat(row["created_at"])
        profile.updated_at = datetime.fromisoformat(row["updated_at"])
        return profile

    @staticmethod
    def sync_current_weight(conn: sqlite3.Connection) -> Optional[float]:
        """Set the profile's current weight to the most recent entry's weight.

        Leaves the profile untouched when there are no entries.
        """
        row = conn.execute(
            """
            SELECT weight FROM weight_entries
            ORDER BY date DESC, created_at DESC LIMIT 1
            """
        ).fetchone()

        if row is None:
            return None

        conn.execute(
            "UPDATE user_profile SET current_weight = ?, updated_at = ?",
            (row["weight"], datetime.now().isoformat()),
        )
        conn.commit()
        return row["weight"]


def _entry_from_row(row: sqlite3.Row) -> WeightEntry:
    entry = WeightEntry(
        date=date.fromisoformat(row["date"]),
        weight=row["weight"],
        is_cheat_meal=bool(row["is_cheat_meal"]),
        is_retention=bool(row["is_retention"]),
        notes=row["notes"],
    )
    entry.id = row["id"]
    entry.created_at = datetime.fromisoformat(row["created_at"])
    entry.updated_at = datetime.fromisoformat(row["updated_at"])
    return entry


class WeightQueries:
    """Database queries for weight entries.

    Every mutation re-syncs the profile's current weight.
    """

    @staticmethod
    def _insert(conn: sqlite3.Connection, entry: WeightEntry) -> None:
        _check_weight(entry.weight)
        conn.execute(
            """
            INSERT OR REPLACE INTO weight_entries
            (id, date, weight, is_cheat_meal, is_retention, notes, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                entry.id,
                entry.date.isoformat(),
                entry.weight,
                entry.is_cheat_meal,
                entry.is_retention,
                entry.notes,
                entry.created_at.isoformat(),
                entry.updated_at.isoformat(),
            ),
        )

    @staticmethod
    def add_entry(conn: sqlite3.Connection, entry: WeightEntry) -> WeightEntry:
        """Add a weight entry.

        Raises:
            InvalidEntryError: If the weight is outside (0, 500] kg
        """
        WeightQueries._insert(conn, entry)
        conn.commit()
        ProfileQueries.sync_current_weight(conn)
        logger.debug("Added weight entry %s (%s, %.1f kg)", entry.id, entry.date, entry.weight)
        return entry

    @staticmethod
    def add_entries(conn: sqlite3.Connection, entries: Iterable[WeightEntry]) -> int:
        """Add several entries at once (CSV import). Returns the count added."""
        count = 0
        for entry in entries:
            WeightQueries._insert(conn, entry)
            count += 1
        conn.commit()
        ProfileQueries.sync_current_weight(conn)
        logger.debug("Imported %d weight entries", count)
        return count

    @staticmethod
    def replace_all(conn: sqlite3.Connection, entries: Iterable[WeightEntry]) -> int:
        """Replace the whole history (backup restore)."""
        conn.execute("DELETE FROM weight_entries")
        return WeightQueries.add_entries(conn, entries)

    @staticmethod
    def get_entry(conn: sqlite3.Connection, entry_id: str) -> Optional[WeightEntry]:
        row = conn.execute(
            "SELECT * FROM weight_entries WHERE id = ?", (entry_id,)
        ).fetchone()
        return _entry_from_row(row) if row else None

    @staticmethod
    def list_entries(
        conn: sqlite3.Connection,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[WeightEntry]:
        """Get weight entries in chronological order.

        Args:
            start_date: If set, return entries on or after this date
            end_date: If set, return entries on or before this date
        """
        query = "SELECT * FROM weight_entries WHERE 1 = 1"
        params: list = []

        if start_date:
            query += " AND date >= ?"
            params.append(start_date.isoformat())
        if end_date:
            query += " AND date <= ?"
            params.append(end_date.isoformat())

        query += " ORDER BY date, created_at"

        return [_entry_from_row(row) for row in conn.execute(query, params).fetchall()]

    @staticmethod
    def update_entry(conn: sqlite3.Connection, entry_id: str, **changes: Any) -> WeightEntry:
        """Change fields of an entry.

        Raises:
            InvalidEntryError: If the entry does not exist or the new weight
                is out of range
        """
        entry = WeightQueries.get_entry(conn, entry_id)
        if entry is None:
            raise InvalidEntryError(f"No weight entry with id {entry_id}")

        for name, value in changes.items():
            if name not in ("date", "weight", "is_cheat_meal", "is_retention", "notes"):
                raise ValueError(f"Cannot update field '{name}'")
            setattr(entry, name, value)
        entry.updated_at = datetime.now()

        WeightQueries._insert(conn, entry)
        conn.commit()
        ProfileQueries.sync_current_weight(conn)
        logger.debug("Updated weight entry %s: %s", entry_id, ", ".join(changes))
        return entry

    @staticmethod
    def delete_entry(conn: sqlite3.Connection, entry_id: str) -> None:
        """Delete an entry.

        Raises:
            InvalidEntryError: If the entry does not exist
        """
        cursor = conn.execute("DELETE FROM weight_entries WHERE id = ?", (entry_id,))
        if cursor.rowcount == 0:
            raise InvalidEntryError(f"No weight entry with id {entry_id}")
        conn.commit()
        ProfileQueries.sync_current_weight(conn)
        logger.debug("Deleted weight entry %s", entry_id)


class EvaluationQueries:
    """Database queries for the current nutrition evaluation."""

    @staticmethod
    def save_evaluation(conn: sqlite3.Connection, evaluation: NutritionEvaluation) -> None:
        """Store the evaluation, replacing the previous one."""
        conn.execute("DELETE FROM nutrition_evaluation")
        conn.execute(
            """
            INSERT INTO nutrition_evaluation (id, evaluation_json, updated_at)
            VALUES (?, ?, ?)
            """,
            (
                evaluation.id,
                json.dumps(evaluation_to_dict(evaluation)),
                evaluation.updated_at.isoformat(),
            ),
        )
        conn.commit()
        logger.debug("Saved nutrition evaluation %s", evaluation.id)

    @staticmethod
    def get_evaluation(conn: sqlite3.Connection) -> Optional[NutritionEvaluation]:
        """Get the stored evaluation with its derived data recomputed."""
        row = conn.execute(
            "SELECT evaluation_json FROM nutrition_evaluation LIMIT 1"
        ).fetchone()
        if row is None:
            return None
        return evaluation_from_dict(json.loads(row["evaluation_json"]))

    @staticmethod
    def clear_evaluation(conn: sqlite3.Connection) -> None:
        conn.execute("DELETE FROM nutrition_evaluation")
        conn.commit()


class NutritionLogQueries:
    """Database queries for day logs, custom foods and nutrition settings."""

    @staticmethod
    def save_log(conn: sqlite3.Connection, log: DailyLog) -> None:
        conn.execute(
            """
            INSERT OR REPLACE INTO daily_logs (date, log_json, updated_at)
            VALUES (?, ?, ?)
            """,
            (log.date.isoformat(), json.dumps(log.to_dict()), log.updated_at.isoformat()),
        )
        conn.commit()

    @staticmethod
    def get_log(conn: sqlite3.Connection, log_date: date) -> Optional[DailyLog]:
        row = conn.execute(
            "SELECT log_json FROM daily_logs WHERE date = ?", (log_date.isoformat(),)
        ).fetchone()
        return DailyLog.from_dict(json.loads(row["log_json"])) if row else None

    @staticmethod
    def list_logs(conn: sqlite3.Connection) -> list[DailyLog]:
        """All day logs, newest first."""
        rows = conn.execute("SELECT log_json FROM daily_logs ORDER BY date DESC").fetchall()
        return [DailyLog.from_dict(json.loads(row["log_json"])) for row in rows]

    @staticmethod
    def save_custom_food(conn: sqlite3.Connection, food: FoodItem) -> None:
        conn.execute(
            "INSERT OR REPLACE INTO custom_foods (id, name, food_json) VALUES (?, ?, ?)",
            (food.id, food.name, json.dumps(food.to_dict())),
        )
        conn.commit()

    @staticmethod
    def list_custom_foods(conn: sqlite3.Connection) -> list[FoodItem]:
        rows = conn.execute("SELECT food_json FROM custom_foods ORDER BY created_at, name").fetchall()
        return [FoodItem.from_dict(json.loads(row["food_json"])) for row in rows]

    @staticmethod
    def _get_value(conn: sqlite3.Connection, key: str) -> Any:
        row = conn.execute("SELECT value_json FROM app_state WHERE key = ?", (key,)).fetchone()
        return json.loads(row["value_json"]) if row else None

    @staticmethod
    def _set_value(conn: sqlite3.Connection, key: str, value: Any) -> None:
        conn.execute(
            "INSERT OR REPLACE INTO app_state (key, value_json) VALUES (?, ?)",
            (key, json.dumps(value)),
        )

    @staticmethod
    def load_state(
        conn: sqlite3.Connection,
        default_goals: Optional[NutritionGoals] = None,
    ) -> NutritionState:
        """Read everything a NutritionLogService needs.

        Args:
            default_goals: Goals to use when none have been saved yet
        """
        goals_data = NutritionLogQueries._get_value(conn, "goals")
        recent_data = NutritionLogQueries._get_value(conn, "recent_foods") or []
        names_data = NutritionLogQueries._get_value(conn, "meal_names") or {}

        if goals_data:
            goals = NutritionGoals.from_dict(goals_data)
        else:
            goals = default_goals or NutritionGoals()

        return NutritionState(
            logs=NutritionLogQueries.list_logs(conn),
            custom_foods=NutritionLogQueries.list_custom_foods(conn),
            recent_foods=[FoodItem.from_dict(f) for f in recent_data][:MAX_RECENT_FOODS],
            goals=goals,
            meal_names={MealType(k): v for k, v in names_data.items()},
        )

    @staticmethod
    def save_state(conn: sqlite3.Connection, state: NutritionState) -> None:
        """Write a NutritionLogService snapshot back.

        Custom foods missing from the snapshot are deleted; day logs are
        upserted by date.
        """
        for log in state.logs:
            conn.execute(
                """
                INSERT OR REPLACE INTO daily_logs (date, log_json, updated_at)
                VALUES (?, ?, ?)
                """,
                (log.date.isoformat(), json.dumps(log.to_dict()), log.updated_at.isoformat()),
            )

        keep = [f.id for f in state.custom_foods]
        placeholders = ", ".join("?" for _ in keep)
        if keep:
            conn.execute(f"DELETE FROM custom_foods WHERE id NOT IN ({placeholders})", keep)
        else:
            conn.execute("DELETE FROM custom_foods")
        for food in state.custom_foods:
            conn.execute(
                "INSERT OR IGNORE INTO custom_foods (id, name, food_json) VALUES (?, ?, ?)",
                (food.id, food.name, json.dumps(food.to_dict())),
            )

        NutritionLogQueries._set_value(conn, "goals", state.goals.to_dict())
        NutritionLogQueries._set_value(
            conn, "recent_foods", [f.to_dict() for f in state.recent_foods]
        )
        NutritionLogQueries._set_value(
            conn, "meal_names", {t.value: name for t, name in state.meal_names.items()}
        )
        conn.commit()
        logger.debug("Saved nutrition state: %d day logs", len(state.logs))
