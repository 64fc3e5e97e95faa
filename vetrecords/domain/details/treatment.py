"""Treatment details and lifecycle."""

from datetime import date
from typing import ClassVar, Literal, Optional, Sequence

from vetrecords.domain.details.base import (
    MedicalRecordDetailsBase,
    StatusChangeResult,
    TreatmentMedication,
)
from vetrecords.domain.enums import MedicalRecordType, RecordAction
from vetrecords.domain.exceptions import DetailValidationError
from vetrecords.domain.state_machines import TreatmentStatus
from vetrecords.domain.utils import is_blank, today

# Identity of a treatment; a correction must keep these as they are.
_FIXED_FIELDS = ("treatment_name", "start_date", "status", "completed_at")
_AMENDABLE_FIELDS = ("instructions", "medications", "follow_up_required", "follow_up_date", "end_date")


class TreatmentDetails(MedicalRecordDetailsBase):
    """Treatment plan for a pet.

    Parameters:
        treatment_name: Name of the treatment
        start_date: First day of the treatment, not in the future
        instructions: Instructions for the owner
        end_date: Estimated last day of the treatment
        medications: Medications that make up the treatment
        follow_up_required: Whether a follow-up visit is needed
        follow_up_date: Follow-up visit date, required iff follow_up_required
        status: Current lifecycle status
        completed_at: Day the treatment was finished
    """

    stateful: ClassVar[bool] = True

    record_type: Literal[MedicalRecordType.TREATMENT] = MedicalRecordType.TREATMENT
    treatment_name: Optional[str] = None
    start_date: Optional[date] = None
    instructions: Optional[str] = None
    end_date: Optional[date] = None
    medications: tuple[TreatmentMedication, ...] = ()
    follow_up_required: bool = False
    follow_up_date: Optional[date] = None
    status: Optional[TreatmentStatus] = TreatmentStatus.PLANNED
    completed_at: Optional[date] = None

    @classmethod
    def create(
        cls,
        treatment_name: Optional[str],
        start_date: Optional[date],
        instructions: Optional[str],
        end_date: Optional[date] = None,
        medications: Optional[Sequence[TreatmentMedication]] = None,
        follow_up_required: bool = False,
        follow_up_date: Optional[date] = None,
    ) -> "TreatmentDetails":
        """Plan a new treatment (status PLANNED)."""
        return cls._build(
            treatment_name=treatment_name,
            start_date=start_date,
            instructions=instructions,
            end_date=end_date,
            medications=tuple(medications or ()),
            follow_up_required=follow_up_required,
            follow_up_date=follow_up_date,
            status=TreatmentStatus.PLANNED,
        )

    def current_status(self) -> Optional[TreatmentStatus]:
        return self.status

    def validate(self) -> None:
        if is_blank(self.treatment_name):
            raise DetailValidationError("Treatment name must not be blank", field="treatment_name")
        if self.start_date is None:
            raise DetailValidationError("Treatment start date is required", field="start_date")
        if self.start_date > today():
            raise DetailValidationError("Treatment start date cannot be in the future", field="start_date")
        if self.end_date is not None and self.end_date < self.start_date:
            raise DetailValidationError("Treatment end date cannot be before its start date", field="end_date")
        if is_blank(self.instructions):
            raise DetailValidationError("Treatment instructions must not be blank", field="instructions")
        if self.status is None:
            raise DetailValidationError("Treatment status is required", field="status")
        if not self.follow_up_required and self.follow_up_date is not None:
            raise DetailValidationError(
                "Follow-up date given but no follow-up is required", field="follow_up_date"
            )
        if self.follow_up_required and self.follow_up_date is None:
            raise DetailValidationError(
                "Follow-up date is required when a follow-up is required", field="follow_up_date"
            )
        if (
            self.follow_up_date is not None
            and self.end_date is not None
            and self.follow_up_date < self.end_date
        ):
            raise DetailValidationError(
                "Follow-up date cannot be before the end of the treatment", field="follow_up_date"
            )
        for medication in self.medications:
            medication.validate()

    def can_correct(self, previous: MedicalRecordDetailsBase) -> bool:
        """Legal when the fixed fields match and at least one amendable field changed."""
        if not isinstance(previous, TreatmentDetails):
            return False
        if self._differs_in(previous, _FIXED_FIELDS):
            return False
        return self._differs_in(previous, _AMENDABLE_FIELDS)

    def apply_action(self, action: RecordAction) -> StatusChangeResult:
        target = self.status.next(action)
        changes = {"status": target}
        if target is TreatmentStatus.FINISHED:
            changes["completed_at"] = today()
        return self._transition(action, **changes)
