"""Tests for BMR, TDEE and observed-TDEE calculations."""

from __future__ import annotations

import pytest

from bodytrack.errors import MissingDataError
from bodytrack.profiles.energy import (
    ActivityLevel,
    CardioType,
    calculate_bmr_katch_mcardle,
    calculate_bmr_mifflin,
    calculate_cardio_calories,
    calculate_real_tdee,
    calculate_tdee,
    calculate_weight_training_calories,
    get_activity_multiplier,
)
from bodytrack.tracking.models import Sex


class TestBMR:
    """Tests for the BMR equations."""

    def test_mifflin_male(self) -> None:
        assert calculate_bmr_mifflin(80, 180, 30, Sex.MALE) == pytest.approx(1780)

    def test_mifflin_female(self) -> None:
        assert calculate_bmr_mifflin(80, 180, 30, Sex.FEMALE) == pytest.approx(1614)

    def test_katch_mcardle(self) -> None:
        assert calculate_bmr_katch_mcardle(60) == pytest.approx(1666)


class TestActivity:
    @pytest.mark.parametrize(
        "level, multiplier",
        [
            (ActivityLevel.SEDENTARY, 1.2),
            (ActivityLevel.LIGHT, 1.375),
            (ActivityLevel.MODERATE, 1.55),
            (ActivityLevel.ACTIVE, 1.725),
        ],
    )
    def test_multipliers(self, level: ActivityLevel, multiplier: float) -> None:
        assert get_activity_multiplier(level) == multiplier

    def test_weight_training_daily_average(self) -> None:
        # 5.5 METs * 80 kg * 1.5 h * 4 days / 7
        assert calculate_weight_training_calories(80, 1.5, 4) == pytest.approx(660 * 4 / 7)

    def test_cardio_average_intensity(self) -> None:
        # Running at intensity 5: 9 METs * 80 kg * 0.5 h * 3 days / 7
        calories = calculate_cardio_calories(80, CardioType.RUNNING, 30, 3, 5)
        assert calories == pytest.approx(360 * 3 / 7)

    def test_cardio_harder_burns_more(self) -> None:
        easy = calculate_cardio_calories(70, CardioType.CYCLING, 45, 3, 3)
        hard = calculate_cardio_calories(70, CardioType.CYCLING, 45, 3, 9)
        assert hard > easy


class TestCalculateTDEE:
    """Tests for calculate_tdee."""

    def test_katch_when_lean_mass_known(self) -> None:
        result = calculate_tdee(
            weight=80,
            height=None,
            age=None,
            sex=None,
            activity_level=ActivityLevel.SEDENTARY,
            training_days_per_week=0,
            hours_per_session=0,
            lean_mass=60,
        )
        assert result.bmr == 1666
        assert result.breakdown.neat == 333
        assert result.breakdown.weights == 0
        assert result.breakdown.cardio == 0
        assert result.tdee == 1999

    def test_mifflin_without_lean_mass(self) -> None:
        result = calculate_tdee(80, 180, 30, Sex.MALE, ActivityLevel.SEDENTARY, 0, 0)
        assert result.bmr == 1780
        assert result.tdee == 2136

    def test_mifflin_needs_demographics(self) -> None:
        with pytest.raises(MissingDataError):
            calculate_tdee(80, None, 30, Sex.MALE, ActivityLevel.SEDENTARY, 0, 0)

    def test_breakdown_sums_to_tdee(self) -> None:
        result = calculate_tdee(
            weight=80,
            height=180,
            age=30,
            sex=Sex.MALE,
            activity_level=ActivityLevel.MODERATE,
            training_days_per_week=4,
            hours_per_session=1.5,
            does_cardio=True,
            cardio_days_per_week=3,
            cardio_minutes_per_session=30,
            cardio_type=CardioType.RUNNING,
            cardio_intensity=5,
        )
        parts = result.breakdown
        assert parts.weights == 377
        assert parts.cardio == 154
        assert abs(parts.bmr + parts.neat + parts.weights + parts.cardio - result.tdee) <= 2

    def test_cardio_ignored_unless_enabled(self) -> None:
        result = calculate_tdee(
            80, 180, 30, Sex.MALE, ActivityLevel.SEDENTARY, 0, 0,
            does_cardio=False,
            cardio_days_per_week=3,
            cardio_minutes_per_session=30,
            cardio_type=CardioType.RUNNING,
        )
        assert result.breakdown.cardio == 0

    def test_cardio_ignored_when_incomplete(self) -> None:
        result = calculate_tdee(
            80, 180, 30, Sex.MALE, ActivityLevel.SEDENTARY, 0, 0,
            does_cardio=True,
            cardio_days_per_week=3,
            cardio_minutes_per_session=None,
            cardio_type=CardioType.RUNNING,
        )
        assert result.breakdown.cardio == 0


class TestRealTDEE:
    """Tests for calculate_real_tdee."""

    def test_bulk_example(self) -> None:
        assert calculate_real_tdee(3000, 0.3) == 2670

    def test_no_gain(self) -> None:
        assert calculate_real_tdee(2500, 0) == 2500

    def test_loss_raises_estimate(self) -> None:
        assert calculate_real_tdee(2000, -0.5) == 2550
