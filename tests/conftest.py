"""Pytest fixtures for bodytrack tests."""

from __future__ import annotations

import tempfile
from datetime import date, timedelta
from pathlib import Path

import pytest

from bodytrack.db.connection import DatabaseConnection
from bodytrack.nutrition.models import FoodItem
from bodytrack.tracking.models import GoalType, UserProfile, WeightEntry


def _make_entries(
    weights: list[float],
    start: date = date(2025, 1, 1),
    step_days: int = 1,
) -> list[WeightEntry]:
    """One entry per weight, step_days apart, oldest first."""
    return [
        WeightEntry(date=start + timedelta(days=i * step_days), weight=w)
        for i, w in enumerate(weights)
    ]


@pytest.fixture
def make_entries():
    """Factory for evenly spaced weight entries."""
    return _make_entries


@pytest.fixture
def temp_db():
    """Create a temporary database with schema."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    db = DatabaseConnection(db_path)
    db.initialize_schema()

    yield db

    db_path.unlink(missing_ok=True)


@pytest.fixture
def bulk_entries() -> list[WeightEntry]:
    """35 daily entries rising linearly from 70 to 71 kg (0.2 kg/week)."""
    return _make_entries([70 + i / 34 for i in range(35)])


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile(
        name="Alex",
        goal_type=GoalType.BULK,
        start_weight=70.0,
        start_date=date(2025, 1, 1),
        target_weight=75.0,
        height=178,
        age=28,
        gender="male",
    )


@pytest.fixture
def oats() -> FoodItem:
    """Rolled oats, per 100 g."""
    return FoodItem(name="Rolled oats", calories=389, protein=16.9, carbs=66.3, fat=6.9, category="grains")


@pytest.fixture
def simple_food() -> FoodItem:
    return FoodItem(name="Test food", calories=200, protein=10, carbs=20, fat=5)
