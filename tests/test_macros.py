"""Tests for macro allocation."""

from __future__ import annotations

from bodytrack.profiles.macros import MIN_CARBS_G, calculate_all_macros, calculate_macros
from bodytrack.tracking.models import GoalType


class TestCalculateMacros:
    """Tests for calculate_macros."""

    def test_bulk(self) -> None:
        macros = calculate_macros(2500, 80, GoalType.BULK)
        assert macros.calories == 2800
        assert macros.protein == 160
        assert macros.fat == 78
        assert macros.carbs == 365

    def test_cut(self) -> None:
        macros = calculate_macros(2500, 80, GoalType.CUT)
        assert macros.calories == 2100
        assert macros.protein == 192
        assert macros.fat == 58
        assert macros.carbs == 202

    def test_maintenance(self) -> None:
        macros = calculate_macros(2500, 80, GoalType.MAINTENANCE)
        assert macros.calories == 2500
        assert macros.protein == 160

    def test_carbs_floor(self) -> None:
        """Heavy, low-TDEE cut would go negative on carbs."""
        macros = calculate_macros(1200, 120, GoalType.CUT)
        assert macros.carbs == MIN_CARBS_G

    def test_all_goals(self) -> None:
        all_macros = calculate_all_macros(2500, 80)
        assert set(all_macros) == set(GoalType)
        assert all_macros[GoalType.BULK].calories > all_macros[GoalType.CUT].calories
