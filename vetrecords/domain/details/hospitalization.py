"""Hospitalization details and lifecycle."""

from datetime import datetime
from typing import ClassVar, Literal, Optional

from pydantic import AwareDatetime

from vetrecords.domain.details.base import MedicalRecordDetailsBase, StatusChangeResult
from vetrecords.domain.enums import MedicalRecordType, RecordAction
from vetrecords.domain.exceptions import DetailValidationError
from vetrecords.domain.state_machines import HospitalizationStatus
from vetrecords.domain.utils import is_blank, utcnow

# Only these fields are compared when deciding whether a correction is legal.
_CORRECTABLE_FIELDS = ("reason", "diagnosis_at_admission", "notes", "ward", "intensive_care")

_DISCHARGING_STATES = (
    HospitalizationStatus.COMPLETED,
    HospitalizationStatus.CANCELLED,
    HospitalizationStatus.DECEASED,
)


class HospitalizationDetails(MedicalRecordDetailsBase):
    """Stay of a pet in the clinic.

    ADMIT stamps the admission time; any action that ends the stay
    (COMPLETE, DECLARE_DECEASED, CANCEL) stamps the discharge time.

    Parameters:
        admission_date: When the pet was (or is booked to be) admitted
        discharge_date: When the stay ended
        reason: Reason for the hospitalization
        diagnosis_at_admission: Working diagnosis at admission
        intensive_care: Whether the pet is in intensive care
        ward: Ward the pet is placed in
        notes: Clinical notes
        status: Current lifecycle status
    """

    stateful: ClassVar[bool] = True

    record_type: Literal[MedicalRecordType.HOSPITALIZATION] = MedicalRecordType.HOSPITALIZATION
    admission_date: Optional[AwareDatetime] = None
    discharge_date: Optional[AwareDatetime] = None
    reason: Optional[str] = None
    diagnosis_at_admission: Optional[str] = None
    intensive_care: bool = False
    ward: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[HospitalizationStatus] = HospitalizationStatus.SCHEDULED

    @classmethod
    def create(
        cls,
        admission_date: Optional[datetime],
        reason: Optional[str],
        diagnosis_at_admission: Optional[str],
        intensive_care: bool,
        ward: Optional[str],
        notes: Optional[str],
        discharge_date: Optional[datetime] = None,
        status: HospitalizationStatus = HospitalizationStatus.SCHEDULED,
    ) -> "HospitalizationDetails":
        return cls._build(
            admission_date=admission_date,
            discharge_date=discharge_date,
            reason=reason,
            diagnosis_at_admission=diagnosis_at_admission,
            intensive_care=intensive_care,
            ward=ward,
            notes=notes,
            status=status,
        )

    def current_status(self) -> Optional[HospitalizationStatus]:
        return self.status

    def validate(self) -> None:
        if self.status is None:
            raise DetailValidationError("Hospitalization status is required", field="status")
        if self.admission_date is None:
            raise DetailValidationError("Admission date is required", field="admission_date")
        if self.admission_date > utcnow():
            raise DetailValidationError("Admission date cannot be in the future", field="admission_date")
        if self.discharge_date is not None and self.discharge_date < self.admission_date:
            raise DetailValidationError(
                "Invalid hospitalization: discharge before admission", field="discharge_date"
            )
        for name in ("reason", "diagnosis_at_admission", "ward", "notes"):
            if is_blank(getattr(self, name)):
                raise DetailValidationError(f"Hospitalization {name} must not be blank", field=name)
        if self.status in _DISCHARGING_STATES and self.discharge_date is None:
            raise DetailValidationError(
                f"Hospitalization in state {self.status.value} requires a discharge date",
                field="discharge_date",
            )

    def can_correct(self, previous: MedicalRecordDetailsBase) -> bool:
        if not isinstance(previous, HospitalizationDetails):
            return False
        if self == previous:
            return True
        return self._differs_in(previous, _CORRECTABLE_FIELDS)

    def apply_action(self, action: RecordAction) -> StatusChangeResult:
        target = self.status.next(action)
        changes = {"status": target}
        if target is HospitalizationStatus.ADMITTED:
            changes["admission_date"] = utcnow()
        elif target in _DISCHARGING_STATES:
            changes["discharge_date"] = utcnow()
        return self._transition(action, **changes)
