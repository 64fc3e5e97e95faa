"""Tests for TreatmentDetails."""

from datetime import timedelta

import pytest

from vetrecords.domain.details import TreatmentDetails, TreatmentMedication
from vetrecords.domain.enums import RecordAction
from vetrecords.domain.exceptions import DetailValidationError, InvalidTransitionError
from vetrecords.domain.state_machines import TreatmentStatus
from vetrecords.domain.utils import today


def make_treatment(**overrides) -> TreatmentDetails:
    values = {
        "treatment_name": "Antibiotic course",
        "start_date": today(),
        "instructions": "Give with food",
        "end_date": today() + timedelta(days=7),
        "medications": [TreatmentMedication.create("Amoxicillin", "10 mg/kg", "every 12h", 7)],
        "follow_up_required": True,
        "follow_up_date": today() + timedelta(days=10),
    }
    values.update(overrides)
    return TreatmentDetails.create(**values)


class TestTreatmentValidation:
    """Test suite for TreatmentDetails.validate."""

    def test_valid_treatment(self):
        """Test creating a valid planned treatment."""
        treatment = make_treatment()
        assert treatment.status == TreatmentStatus.PLANNED
        assert len(treatment.medications) == 1
        assert treatment.completed_at is None

    def test_name_required(self):
        """Test that the treatment needs a name."""
        with pytest.raises(DetailValidationError) as exc_info:
            make_treatment(treatment_name=" ")
        assert exc_info.value.field == "treatment_name"

    def test_start_in_future_rejected(self):
        """Test that a treatment cannot start in the future."""
        with pytest.raises(DetailValidationError) as exc_info:
            make_treatment(start_date=today() + timedelta(days=1))
        assert exc_info.value.field == "start_date"

    def test_end_before_start_rejected(self):
        """Test that the end date cannot precede the start date."""
        with pytest.raises(DetailValidationError) as exc_info:
            make_treatment(end_date=today() - timedelta(days=1))
        assert exc_info.value.field == "end_date"

    def test_instructions_required(self):
        """Test that instructions are required."""
        with pytest.raises(DetailValidationError) as exc_info:
            make_treatment(instructions="")
        assert exc_info.value.field == "instructions"

    def test_follow_up_date_required_when_follow_up_required(self):
        """Test follow-up consistency when a follow-up is required."""
        with pytest.raises(DetailValidationError) as exc_info:
            make_treatment(follow_up_date=None)
        assert exc_info.value.field == "follow_up_date"

    def test_follow_up_date_without_follow_up_rejected(self):
        """Test follow-up consistency when no follow-up is required."""
        with pytest.raises(DetailValidationError):
            make_treatment(follow_up_required=False)

    def test_follow_up_before_end_rejected(self):
        """Test that the follow-up cannot precede the end of the treatment."""
        with pytest.raises(DetailValidationError) as exc_info:
            make_treatment(follow_up_date=today() + timedelta(days=3))
        assert exc_info.value.field == "follow_up_date"

    def test_invalid_medication_rejected(self):
        """Test that each medication is validated."""
        broken = TreatmentMedication.model_construct(
            name="Amoxicillin", dosage="10 mg/kg", frequency="every 12h", duration_in_days=0, notes=None
        )
        with pytest.raises(DetailValidationError) as exc_info:
            make_treatment(medications=[broken])
        assert exc_info.value.field == "duration_in_days"

    def test_no_follow_up_no_end(self):
        """Test a minimal open-ended treatment."""
        treatment = make_treatment(end_date=None, medications=None, follow_up_required=False, follow_up_date=None)
        assert treatment.medications == ()


class TestTreatmentLifecycle:
    """Test suite for TreatmentDetails.apply_action."""

    def test_scenario_finish_from_planned_fails(self):
        """Test that FINISH is not declared from PLANNED."""
        treatment = make_treatment()
        with pytest.raises(InvalidTransitionError):
            treatment.apply_action(RecordAction.FINISH)
        assert treatment.status == TreatmentStatus.PLANNED

    def test_activate_suspend_resume_finish(self):
        """Test the full treatment lifecycle."""
        treatment = make_treatment()
        treatment = treatment.apply_action(RecordAction.ACTIVATE).details
        treatment = treatment.apply_action(RecordAction.SUSPEND).details
        assert treatment.status == TreatmentStatus.SUSPENDED
        treatment = treatment.apply_action(RecordAction.ACTIVATE).details
        result = treatment.apply_action(RecordAction.FINISH)
        assert result.previous_status == TreatmentStatus.ACTIVE
        assert result.new_status == TreatmentStatus.FINISHED
        assert result.details.completed_at == today()

    def test_surgery_actions_rejected(self):
        """Test that surgery-only actions are not declared for treatments."""
        with pytest.raises(InvalidTransitionError):
            make_treatment().apply_action(RecordAction.ADMIT)


class TestTreatmentCorrection:
    """Test suite for TreatmentDetails.can_correct."""

    def test_identical_value_is_not_a_correction(self):
        """Test that an unchanged treatment is not a correction."""
        treatment = make_treatment()
        assert treatment.can_correct(treatment) is False

    def test_instructions_may_change(self):
        """Test amending the instructions."""
        original = make_treatment()
        corrected = make_treatment(instructions="Give on an empty stomach")
        assert corrected.can_correct(original) is True

    def test_end_date_may_change(self):
        """Test amending the estimated end date."""
        original = make_treatment()
        corrected = make_treatment(end_date=today() + timedelta(days=9))
        assert corrected.can_correct(original) is True

    def test_name_is_fixed(self):
        """Test that the treatment name cannot be corrected."""
        original = make_treatment()
        corrected = make_treatment(treatment_name="Other", instructions="Give on an empty stomach")
        assert corrected.can_correct(original) is False

    def test_status_is_fixed(self):
        """Test that a correction cannot change the status."""
        original = make_treatment()
        active = original.apply_action(RecordAction.ACTIVATE).details
        assert active.can_correct(original) is False
