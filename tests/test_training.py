"""Tests for training-history helpers."""

from __future__ import annotations

from datetime import date

import pytest

from bodytrack.profiles.training import (
    calculate_muscular_potential,
    calculate_training_profile,
    calculate_training_years,
    get_experience_level,
)
from bodytrack.tracking.models import ExperienceLevel


class TestTrainingYears:
    def test_one_leap_year(self) -> None:
        years = calculate_training_years(date(2020, 1, 1), today=date(2021, 1, 1))
        assert years == pytest.approx(366 / 365)

    def test_future_start_counts_absolute(self) -> None:
        years = calculate_training_years(date(2025, 1, 31), today=date(2025, 1, 1))
        assert years == pytest.approx(30 / 365)


class TestExperienceLevel:
    @pytest.mark.parametrize(
        "years, level",
        [
            (0.0, ExperienceLevel.BEGINNER),
            (0.99, ExperienceLevel.BEGINNER),
            (1.0, ExperienceLevel.INTERMEDIATE),
            (3.9, ExperienceLevel.INTERMEDIATE),
            (4.0, ExperienceLevel.ADVANCED),
            (12.0, ExperienceLevel.ADVANCED),
        ],
    )
    def test_levels(self, years: float, level: ExperienceLevel) -> None:
        assert get_experience_level(years) is level


class TestMuscularPotential:
    @pytest.mark.parametrize(
        "years, yearly_gain",
        [(0.5, 10.0), (1.5, 5.0), (2.0, 2.5), (3.7, 1.25), (20.0, 1.25)],
    )
    def test_yearly_gain(self, years: float, yearly_gain: float) -> None:
        _, gain = calculate_muscular_potential(180, years)
        assert gain == yearly_gain

    def test_max_lean_mass(self) -> None:
        max_lean_mass, _ = calculate_muscular_potential(254, 1)
        assert max_lean_mass == pytest.approx(0.0)


class TestTrainingProfile:
    def test_combines_helpers(self) -> None:
        training = calculate_training_profile(date(2020, 1, 1), 180, today=date(2022, 1, 1))

        assert training.training_years == pytest.approx(731 / 365)
        assert training.experience_level is ExperienceLevel.INTERMEDIATE
        assert training.max_lean_mass == pytest.approx((180 / 2.54 - 100) * 1.1)
        assert training.yearly_muscle_gain == 2.5

    def test_to_dict(self) -> None:
        data = calculate_training_profile(date(2025, 1, 1), 254, today=date(2025, 7, 1)).to_dict()
        assert data["experience_level"] == "beginner"
        assert data["yearly_muscle_gain"] == 10.0
        assert data["max_lean_mass"] == pytest.approx(0.0)
