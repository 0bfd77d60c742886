"""Tests for skin-fold body composition."""

from __future__ import annotations

import pytest

from bodytrack.profiles.body_comp import (
    SkinFolds,
    calculate_body_composition,
    calculate_body_density,
    calculate_body_fat,
)
from bodytrack.tracking.models import Sex


def folds(value: float) -> SkinFolds:
    """Seven equal sites."""
    return SkinFolds(value, value, value, value, value, value, value)


class TestBodyDensity:
    def test_male(self) -> None:
        # S = 70, A = 30
        expected = 1.112 - 0.00043499 * 70 + 0.00000055 * 70**2 - 0.00028826 * 30
        assert calculate_body_density(70, 30, Sex.MALE) == pytest.approx(expected)

    def test_female(self) -> None:
        expected = 1.097 - 0.00046971 * 90 + 0.00000056 * 90**2 - 0.00012828 * 25
        assert calculate_body_density(90, 25, Sex.FEMALE) == pytest.approx(expected)


class TestBodyFat:
    """Tests for calculate_body_fat."""

    def test_typical_male(self) -> None:
        density = 1.112 - 0.00043499 * 70 + 0.00000055 * 70**2 - 0.00028826 * 30
        expected = (4.95 / density - 4.5) * 100
        assert calculate_body_fat(folds(10), 30, Sex.MALE) == pytest.approx(expected)
        assert 8 < expected < 12

    def test_total(self) -> None:
        assert SkinFolds(1, 2, 3, 4, 5, 6, 7).total == 28

    @pytest.mark.parametrize("value", [-1000, -50, 0, 1, 30, 100, 400, 1e6])
    @pytest.mark.parametrize("age", [-10, 0, 25, 80, 500])
    @pytest.mark.parametrize("sex", [Sex.MALE, Sex.FEMALE])
    def test_always_clamped(self, value: float, age: float, sex: Sex) -> None:
        body_fat = calculate_body_fat(folds(value), age, sex)
        assert 0.0 <= body_fat <= 50.0

    def test_very_lean_clamps_to_zero(self) -> None:
        assert calculate_body_fat(folds(0), 0, Sex.MALE) == 0.0


class TestBodyComposition:
    def test_masses_add_up(self) -> None:
        comp = calculate_body_composition(folds(12), 28, Sex.MALE, 80.0)
        assert comp.lean_mass + comp.fat_mass == pytest.approx(80.0)
        assert comp.fat_mass == pytest.approx(80.0 * comp.body_fat_percentage / 100)
