"""Tests for the MedicalRecord aggregate."""

from datetime import timedelta

import pytest

from vetrecords.domain.details import (
    ConsultationDetails,
    DiagnosisDetails,
    HospitalizationDetails,
    SurgeryDetails,
    SurgeryMedication,
    SurgeryProcedure,
    TreatmentDetails,
    WeightDetails,
)
from vetrecords.domain.enums import (
    AnesthesiaType,
    DiagnosisCategory,
    DiagnosisSeverity,
    MedicalRecordType,
    RecordAction,
    SurgeryOutcome,
    SurgeryType,
    WeightUnit,
)
from vetrecords.domain.events import (
    HospitalizationStatusChangedEvent,
    MedicalRecordCorrectedEvent,
    MedicalRecordCorrectionCreatedEvent,
    MedicalRecordCreatedEvent,
    SurgeryStatusChangedEvent,
    TreatmentStatusChangedEvent,
)
from vetrecords.domain.exceptions import (
    DetailValidationError,
    IllegalCorrectionError,
    InvalidTransitionError,
    UnsupportedActionError,
)
from vetrecords.domain.medical_record import MedicalRecord
from vetrecords.domain.utils import today, utcnow


def surgery_details(**overrides) -> SurgeryDetails:
    values = {
        "surgery_name": "Spay",
        "surgery_type": SurgeryType.PREVENTIVE,
        "procedures": [SurgeryProcedure.create("Ovariohysterectomy")],
        "anesthesia_type": AnesthesiaType.GENERAL,
        "hospitalization_required": True,
        "surgery_date": utcnow() + timedelta(days=1),
    }
    values.update(overrides)
    return SurgeryDetails.create(**values)


def weight_record(value: float = 4.2) -> MedicalRecord:
    return MedicalRecord.create("pet-1", "clinic-1", "vet-1", WeightDetails.create(value, WeightUnit.KG))


def surgery_record() -> MedicalRecord:
    return MedicalRecord.create("pet-1", "clinic-1", "vet-1", surgery_details(), notes="Fasted since midnight")


def diagnosis_details(**overrides) -> DiagnosisDetails:
    values = {
        "diagnosis_name": "Otitis externa",
        "category": DiagnosisCategory.INFECTIOUS,
        "severity": DiagnosisSeverity.MILD,
        "diagnosed_at": today(),
    }
    values.update(overrides)
    return DiagnosisDetails.create(**values)


class TestMedicalRecordCreation:
    """Test suite for MedicalRecord.create."""

    def test_create_stateless_record(self):
        """Test creating a weight record."""
        record = weight_record()
        assert record.id
        assert record.record_type == MedicalRecordType.WEIGHT
        assert record.status is None
        assert record.corrected_record_id is None
        assert record.recorded_at == record.updated_at

    def test_create_stateful_record_mirrors_status(self):
        """Test that the record mirrors the detail status."""
        record = surgery_record()
        assert record.record_type == MedicalRecordType.SURGERY
        assert record.status == "SCHEDULED"
        assert record.notes == "Fasted since midnight"

    def test_create_emits_created_event(self):
        """Test that creation buffers a MedicalRecordCreatedEvent."""
        record = surgery_record()
        events = record.domain_events
        assert len(events) == 1
        event = events[0]
        assert isinstance(event, MedicalRecordCreatedEvent)
        assert event.record_id == record.id
        assert event.pet_id == "pet-1"
        assert event.clinic_id == "clinic-1"
        assert event.record_type == MedicalRecordType.SURGERY

    def test_details_required(self):
        """Test that a record needs details."""
        with pytest.raises(DetailValidationError) as exc_info:
            MedicalRecord.create("pet-1", "clinic-1", "vet-1", None)
        assert exc_info.value.field == "details"

    def test_record_type_must_match_details(self):
        """Test that a declared type must match the details."""
        with pytest.raises(DetailValidationError) as exc_info:
            MedicalRecord.create(
                "pet-1", "clinic-1", "vet-1", WeightDetails.create(4.2, WeightUnit.KG),
                record_type=MedicalRecordType.SURGERY,
            )
        assert exc_info.value.field == "record_type"

    def test_ids_are_unique(self):
        """Test that every record gets its own id."""
        assert weight_record().id != weight_record().id

    def test_rebuild_from_plain_data(self):
        """Test that the tagged union resolves the detail variant from data."""
        record = surgery_record()
        rebuilt = MedicalRecord.model_validate(record.model_dump())
        assert isinstance(rebuilt.details, SurgeryDetails)
        assert rebuilt.details == record.details
        assert rebuilt.domain_events == []

    def test_mismatched_mirror_rejected(self):
        """Test that a record whose type disagrees with its details cannot be built."""
        data = weight_record().model_dump()
        data["record_type"] = MedicalRecordType.DIAGNOSIS
        with pytest.raises(DetailValidationError):
            MedicalRecord.model_validate(data)


class TestMedicalRecordLifecycle:
    """Test suite for apply_action and the surgery operations."""

    def test_apply_action_updates_mirror_and_emits_event(self):
        """Test that a transition updates status and buffers an event."""
        record = surgery_record()
        record.clear_domain_events()
        before = record.updated_at

        record.apply_action(RecordAction.ADMIT, "vet-2")

        assert record.status == "ADMITTED"
        assert record.details.status.value == "ADMITTED"
        assert record.updated_at >= before
        events = record.pull_domain_events()
        assert len(events) == 1
        event = events[0]
        assert isinstance(event, SurgeryStatusChangedEvent)
        assert event.record_id == record.id
        assert event.previous_status == "SCHEDULED"
        assert event.new_status == "ADMITTED"
        assert event.veterinarian_id == "vet-2"
        assert record.domain_events == []

    def test_full_surgery_through_aggregate(self):
        """Test driving a surgery to COMPLETED through the aggregate."""
        record = surgery_record()
        record.apply_action(RecordAction.ADMIT, "vet-1")
        record.apply_action(RecordAction.START, "vet-1")
        record.change_surgery_outcome(SurgeryOutcome.SUCCESS)
        record.add_post_op_medication(SurgeryMedication.create("Meloxicam", "0.1 mg/kg", "every 24h", 5))
        record.apply_action(RecordAction.COMPLETE, "vet-1")

        assert record.status == "COMPLETED"
        assert record.details.completed_at >= record.details.surgery_date
        status_events = [e for e in record.domain_events if isinstance(e, SurgeryStatusChangedEvent)]
        assert [e.new_status for e in status_events] == ["ADMITTED", "IN_PROGRESS", "COMPLETED"]

    def test_failed_action_leaves_record_unchanged(self):
        """Test that a rejected action does not touch the record."""
        record = surgery_record()
        record.apply_action(RecordAction.ADMIT)
        record.apply_action(RecordAction.START)
        snapshot = record.model_dump()
        event_count = len(record.domain_events)

        with pytest.raises(DetailValidationError, match="cannot complete without outcome"):
            record.apply_action(RecordAction.COMPLETE)

        assert record.model_dump() == snapshot
        assert record.status == "IN_PROGRESS"
        assert len(record.domain_events) == event_count

    def test_invalid_transition(self):
        """Test that an undeclared transition raises InvalidTransitionError."""
        record = surgery_record()
        with pytest.raises(InvalidTransitionError):
            record.apply_action(RecordAction.COMPLETE)
        assert record.status == "SCHEDULED"

    def test_stateless_record_rejects_actions(self):
        """Test that a weight record has no lifecycle."""
        record = weight_record()
        with pytest.raises(UnsupportedActionError):
            record.apply_action(RecordAction.ADMIT)

    def test_hospitalization_event_type(self):
        """Test that hospitalization transitions emit their own event type."""
        details = HospitalizationDetails.create(
            utcnow() - timedelta(hours=1), "Observation", "Pyometra", False, "Ward B", "Stable"
        )
        record = MedicalRecord.create("pet-1", "clinic-1", "vet-1", details)
        record.apply_action(RecordAction.ADMIT)
        assert isinstance(record.domain_events[-1], HospitalizationStatusChangedEvent)

    def test_treatment_event_type(self):
        """Test that treatment transitions emit their own event type."""
        details = TreatmentDetails.create("Antibiotics", today(), "Give with food")
        record = MedicalRecord.create("pet-1", "clinic-1", "vet-1", details)
        record.apply_action(RecordAction.ACTIVATE)
        assert record.status == "ACTIVE"
        assert isinstance(record.domain_events[-1], TreatmentStatusChangedEvent)

    def test_surgery_operations_on_other_kind_rejected(self):
        """Test that surgery operations require a surgery record."""
        record = weight_record()
        with pytest.raises(DetailValidationError) as exc_info:
            record.change_surgery_outcome(SurgeryOutcome.SUCCESS)
        assert exc_info.value.field == "record_type"

    def test_reschedule_surgery(self):
        """Test rescheduling through the aggregate."""
        record = surgery_record()
        new_date = utcnow() + timedelta(days=10)
        record.reschedule_surgery(new_date)
        assert record.details.surgery_date == new_date


class TestMedicalRecordUpdate:
    """Test suite for MedicalRecord.update."""

    def test_update_replaces_details(self):
        """Test an operational edit of a stateless record."""
        record = weight_record()
        record.update(WeightDetails.create(4.5, WeightUnit.KG))
        assert record.details.value == 4.5

    def test_update_rejects_other_kind(self):
        """Test that an update cannot change the record type."""
        record = weight_record()
        with pytest.raises(DetailValidationError) as exc_info:
            record.update(ConsultationDetails.create("Check-up"))
        assert exc_info.value.field == "record_type"
        assert isinstance(record.details, WeightDetails)

    def test_update_rejects_status_change(self):
        """Test that status changes must use apply_action."""
        record = surgery_record()
        admitted = record.details.apply_action(RecordAction.ADMIT).details
        with pytest.raises(DetailValidationError) as exc_info:
            record.update(admitted)
        assert exc_info.value.field == "status"
        assert record.status == "SCHEDULED"

    def test_update_requires_details(self):
        """Test that update needs a value."""
        with pytest.raises(DetailValidationError):
            weight_record().update(None)

    def test_update_cannot_drop_post_op_medication(self):
        """Test that an edit cannot shrink a surgery's post-op medications."""
        record = surgery_record()
        record.apply_action(RecordAction.ADMIT)
        record.apply_action(RecordAction.START)
        record.add_post_op_medication(SurgeryMedication.create("Meloxicam", "0.1 mg/kg", "every 24h", 5))
        snapshot = record.model_dump()

        with pytest.raises(DetailValidationError) as exc_info:
            record.update(record.details.model_copy(update={"post_op_medications": ()}))

        assert exc_info.value.field == "post_op_medications"
        assert record.model_dump() == snapshot

    def test_update_may_add_post_op_medication(self):
        """Test that an edit keeping every post-op medication is accepted."""
        record = surgery_record()
        record.apply_action(RecordAction.ADMIT)
        record.apply_action(RecordAction.START)
        first = SurgeryMedication.create("Meloxicam", "0.1 mg/kg", "every 24h", 5)
        record.add_post_op_medication(first)
        second = SurgeryMedication.create("Tramadol", "2 mg/kg", "every 8h", 3)

        record.update(record.details.model_copy(update={"post_op_medications": (first, second)}))

        assert record.details.post_op_medications == (first, second)

    def test_update_cannot_move_date_after_admission(self):
        """Test that the surgery date is fixed once the pet is admitted."""
        record = surgery_record()
        record.apply_action(RecordAction.ADMIT)
        moved = record.details.model_copy(update={"surgery_date": record.details.surgery_date + timedelta(days=30)})

        with pytest.raises(DetailValidationError) as exc_info:
            record.update(moved)

        assert exc_info.value.field == "surgery_date"

    def test_update_may_move_date_while_scheduled(self):
        """Test that a scheduled surgery date can still be edited."""
        record = surgery_record()
        new_date = record.details.surgery_date + timedelta(days=3)
        record.update(record.details.model_copy(update={"surgery_date": new_date}))
        assert record.details.surgery_date == new_date


class TestMedicalRecordCorrection:
    """Test suite for MedicalRecord.create_correction_of."""

    def test_correction_creates_new_record(self):
        """Test that a correction is a new record pointing at the original."""
        original = weight_record(4.2)
        original_snapshot = original.model_dump()

        corrected = MedicalRecord.create_correction_of(
            original, WeightDetails.create(4.4, WeightUnit.KG), "vet-2", "Scale was miscalibrated"
        )

        assert corrected.id != original.id
        assert corrected.corrected_record_id == original.id
        assert corrected.pet_id == original.pet_id
        assert corrected.clinic_id == original.clinic_id
        assert corrected.veterinarian_id == "vet-2"
        assert corrected.details.value == 4.4
        assert original.model_dump() == original_snapshot

    def test_correction_events(self):
        """Test that a correction emits correction-created and corrected events."""
        original = weight_record()
        corrected = MedicalRecord.create_correction_of(
            original, WeightDetails.create(4.4, WeightUnit.KG), "vet-2", "Scale was miscalibrated"
        )
        created, applied = corrected.domain_events
        assert isinstance(created, MedicalRecordCorrectionCreatedEvent)
        assert created.corrected_record_id == corrected.id
        assert created.original_record_id == original.id
        assert created.reason == "Scale was miscalibrated"
        assert isinstance(applied, MedicalRecordCorrectedEvent)
        assert applied.original_record_id == original.id
        assert applied.corrected_record_id == corrected.id

    def test_reason_required(self):
        """Test that a correction needs a reason."""
        original = weight_record()
        with pytest.raises(IllegalCorrectionError) as exc_info:
            MedicalRecord.create_correction_of(original, WeightDetails.create(4.4, WeightUnit.KG), "vet-2", " ")
        assert exc_info.value.original_record_id == original.id

    def test_false_becomes_correction_not_permitted(self):
        """Test that a rejected rule becomes IllegalCorrectionError."""
        original = MedicalRecord.create("pet-1", "clinic-1", "vet-1", ConsultationDetails.create("Check-up"))
        only_findings = ConsultationDetails.create("Check-up", clinical_findings="Tartar")
        with pytest.raises(IllegalCorrectionError, match="correction not permitted"):
            MedicalRecord.create_correction_of(original, only_findings, "vet-2", "Add findings")

    def test_type_mismatch_rejected(self):
        """Test that a correction must keep the record type."""
        original = weight_record()
        with pytest.raises(IllegalCorrectionError):
            MedicalRecord.create_correction_of(original, ConsultationDetails.create("Check-up"), "vet-2", "Oops")

    def test_completed_surgery_cannot_be_corrected(self):
        """Test that correcting a closed surgery raises."""
        record = surgery_record()
        record.apply_action(RecordAction.ADMIT)
        record.apply_action(RecordAction.START)
        record.change_surgery_outcome(SurgeryOutcome.SUCCESS)
        record.add_post_op_medication(SurgeryMedication.create("Meloxicam", "0.1 mg/kg", "every 24h", 5))
        record.apply_action(RecordAction.COMPLETE)

        with pytest.raises(IllegalCorrectionError):
            MedicalRecord.create_correction_of(record, record.details, "vet-2", "Fix name")

    def test_correction_keeps_original_notes_by_default(self):
        """Test that the correction inherits notes unless given."""
        original = MedicalRecord.create("pet-1", "clinic-1", "vet-1", diagnosis_details(), notes="Left ear")
        corrected = MedicalRecord.create_correction_of(
            original, diagnosis_details(severity=DiagnosisSeverity.MODERATE), "vet-1", "Re-assessed"
        )
        assert corrected.notes == "Left ear"
        other = MedicalRecord.create_correction_of(
            original, diagnosis_details(), "vet-1", "Re-assessed", notes="Both ears"
        )
        assert other.notes == "Both ears"
