"""Tests for nutrition evaluation drafts and derived calculations."""

from __future__ import annotations

from datetime import date

import pytest

from bodytrack.errors import InvalidEvaluationError
from bodytrack.profiles.body_comp import SkinFolds
from bodytrack.profiles.energy import ActivityLevel, CardioType
from bodytrack.profiles.evaluation import (
    ActiveBulkState,
    CardioDetails,
    DietPhase,
    EvaluationDraft,
    EvaluationPhase,
    calculate_evaluation,
    evaluation_from_dict,
    evaluation_to_dict,
    update_evaluation,
)
from bodytrack.tracking.models import ExperienceLevel, GoalType, Sex


def base_draft() -> EvaluationDraft:
    return (
        EvaluationDraft()
        .set_demographics(
            age=30, gender="male", height=180, weight=80, gym_start_date=date(2020, 1, 1)
        )
        .set_skin_folds(SkinFolds(10, 12, 8, 10, 15, 12, 14))
        .set_activity(
            training_days_per_week=4,
            hours_per_session=1.5,
            daily_activity="sedentary",
            current_phase="bulk",
        )
    )


class TestEvaluationDraft:
    """Tests for EvaluationDraft.commit."""

    def test_commit_calculates(self) -> None:
        evaluation = base_draft().commit()

        assert evaluation.gender is Sex.MALE
        assert evaluation.daily_activity is ActivityLevel.SEDENTARY
        assert evaluation.current_phase is EvaluationPhase.BULK

        calc = evaluation.calculated
        assert calc is not None
        assert 0 < calc.body_fat_percentage < 50
        assert calc.lean_mass + calc.fat_mass == pytest.approx(80)
        assert calc.real_tdee is None
        assert calc.effective_tdee == calc.tdee
        assert set(calc.macros) == set(GoalType)

    def test_missing_fields_listed(self) -> None:
        draft = EvaluationDraft().set_skin_folds(SkinFolds(10, 10, 10, 10, 10, 10, 10))
        assert "age" in draft.missing_fields
        assert "skin_folds" not in draft.missing_fields

        with pytest.raises(InvalidEvaluationError) as exc_info:
            draft.commit()
        assert "missing field: age" in exc_info.value.problems

    def test_invalid_values_rejected(self) -> None:
        draft = base_draft().set_demographics(
            age=0, gender="male", height=-1, weight=600, gym_start_date=date(2020, 1, 1)
        )
        with pytest.raises(InvalidEvaluationError) as exc_info:
            draft.commit()
        assert len(exc_info.value.problems) == 3

    def test_unknown_enum_value(self) -> None:
        draft = base_draft().set_demographics(
            age=30, gender="other", height=180, weight=80, gym_start_date=date(2020, 1, 1)
        )
        with pytest.raises(InvalidEvaluationError):
            draft.commit()

    def test_cardio_dropped_when_not_doing_cardio(self) -> None:
        cardio = CardioDetails(CardioType.RUNNING, 3, 30)
        evaluation = (
            base_draft()
            .set_activity(4, 1.5, "sedentary", "bulk", does_cardio=False, current_cardio=cardio)
            .commit()
        )
        assert evaluation.current_cardio is None
        assert evaluation.calculated.tdee_breakdown.cardio == 0

    def test_cardio_required_when_doing_cardio(self) -> None:
        draft = base_draft().set_activity(4, 1.5, "sedentary", "bulk", does_cardio=True)
        with pytest.raises(InvalidEvaluationError):
            draft.commit()

    def test_cardio_counted(self) -> None:
        cardio = CardioDetails(CardioType.RUNNING, 3, 30, intensity=5)
        evaluation = (
            base_draft()
            .set_activity(4, 1.5, "sedentary", "bulk", does_cardio=True, current_cardio=cardio)
            .commit()
        )
        assert evaluation.calculated.tdee_breakdown.cardio == 154


class TestRealTDEE:
    """Observed TDEE from an active bulk overrides the formula."""

    def test_active_bulk_overrides(self) -> None:
        evaluation = (
            base_draft()
            .set_active_bulk(
                ActiveBulkState(is_currently_doing=True, current_calories=3000, weekly_gain=0.3)
            )
            .commit()
        )
        calc = evaluation.calculated
        assert calc.real_tdee == 2670
        assert calc.effective_tdee == 2670
        assert calc.macros[GoalType.BULK].calories == 2970
        assert calc.macros[GoalType.CUT].calories == 2270

    def test_inactive_bulk_ignored(self) -> None:
        evaluation = (
            base_draft()
            .set_active_bulk(
                ActiveBulkState(is_currently_doing=False, current_calories=3000, weekly_gain=0.3)
            )
            .commit()
        )
        assert evaluation.calculated.real_tdee is None

    def test_zero_gain_ignored(self) -> None:
        evaluation = (
            base_draft()
            .set_active_bulk(
                ActiveBulkState(is_currently_doing=True, current_calories=3000, weekly_gain=0)
            )
            .commit()
        )
        assert evaluation.calculated.real_tdee is None


class TestTrainingBlock:
    """Training years and natural potential derived from the evaluation."""

    def test_from_gym_start_and_height(self) -> None:
        calc = calculate_evaluation(base_draft().commit(), today=date(2025, 1, 1))

        assert calc.training.training_years == pytest.approx(1827 / 365)
        assert calc.training.experience_level is ExperienceLevel.ADVANCED
        assert calc.training.yearly_muscle_gain == 1.25
        assert calc.training.max_lean_mass == pytest.approx((180 / 2.54 - 100) * 1.1)

    def test_in_output_dict(self) -> None:
        data = calculate_evaluation(base_draft().commit(), today=date(2021, 6, 1)).to_dict()
        assert data["training"]["experience_level"] == "intermediate"
        assert data["training"]["yearly_muscle_gain"] == 5.0


class TestUpdateEvaluation:
    def test_recomputes_everything(self) -> None:
        evaluation = base_draft().commit()
        heavier = update_evaluation(evaluation, weight=90)

        assert heavier.id == evaluation.id
        assert heavier.calculated.lean_mass > evaluation.calculated.lean_mass
        assert heavier.calculated.macros[GoalType.BULK].protein == 180
        assert heavier.calculated == calculate_evaluation(heavier)

    def test_rejects_invalid_change(self) -> None:
        with pytest.raises(InvalidEvaluationError):
            update_evaluation(base_draft().commit(), training_days_per_week=9)


class TestSerialization:
    """Tests for evaluation_to_dict and evaluation_from_dict."""

    def test_from_plain_mapping(self) -> None:
        data = {
            "age": 25,
            "gender": "female",
            "height": 165,
            "weight": 60,
            "gym_start_date": "2023-06-01",
            "skin_folds": {
                "triceps": 15,
                "subscapular": 12,
                "chest": 8,
                "axillary": 10,
                "abdominal": 18,
                "suprailiac": 14,
                "thigh": 22,
            },
            "training_days_per_week": 3,
            "hours_per_session": 1,
            "daily_activity": "light",
            "current_phase": "cut",
            "does_cardio": True,
            "current_cardio": {"type": "walking", "days_per_week": 5, "minutes_per_session": 40},
        }
        evaluation = EvaluationDraft.from_dict(data).commit()
        assert evaluation.gym_start_date == date(2023, 6, 1)
        assert evaluation.current_cardio.type is CardioType.WALKING
        assert evaluation.calculated.tdee_breakdown.cardio > 0

    def test_stored_form_keeps_inputs(self) -> None:
        phase = DietPhase(
            phase_number=1,
            start_date=date(2023, 1, 1),
            start_weight=90,
            end_date=date(2023, 6, 1),
            end_weight=82,
            did_cardio=True,
            cardio_details=CardioDetails(CardioType.HIIT, 2, 20, 8),
        )
        evaluation = base_draft().set_diet_history(True, [phase]).commit()

        data = evaluation_to_dict(evaluation)
        assert "calculated" not in data
        assert data["gender"] == "male"
        assert data["diet_phases"][0]["cardio_details"]["type"] == "hiit"

        restored = evaluation_from_dict(data)
        assert restored.id == evaluation.id
        assert restored.created_at == evaluation.created_at
        assert restored.diet_phases == evaluation.diet_phases
        assert restored.calculated == evaluation.calculated
