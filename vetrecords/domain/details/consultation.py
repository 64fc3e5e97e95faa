from datetime import date
from typing import Literal, Optional, Sequence

from vetrecords.domain.details.base import MedicalRecordDetailsBase
from vetrecords.domain.enums import MedicalRecordType
from vetrecords.domain.exceptions import DetailValidationError
from vetrecords.domain.utils import first_blank_index, is_blank, today

_AMENDABLE_FIELDS = ("reason", "diagnosis", "treatment_plan")


class ConsultationDetails(MedicalRecordDetailsBase):
    """Outcome of a consultation visit. Consultations have no lifecycle."""

    record_type: Literal[MedicalRecordType.CONSULTATION] = MedicalRecordType.CONSULTATION
    reason: Optional[str] = None
    symptoms: tuple[Optional[str], ...] = ()
    clinical_findings: Optional[str] = None
    diagnosis: Optional[str] = None
    treatment_plan: Optional[str] = None
    follow_up_required: bool = False
    follow_up_date: Optional[date] = None

    @classmethod
    def create(
        cls,
        reason: Optional[str],
        symptoms: Optional[Sequence[str]] = None,
        clinical_findings: Optional[str] = None,
        diagnosis: Optional[str] = None,
        treatment_plan: Optional[str] = None,
        follow_up_required: bool = False,
        follow_up_date: Optional[date] = None,
    ) -> "ConsultationDetails":
        return cls._build(
            reason=reason,
            symptoms=tuple(symptoms or ()),
            clinical_findings=clinical_findings,
            diagnosis=diagnosis,
            treatment_plan=treatment_plan,
            follow_up_required=follow_up_required,
            follow_up_date=follow_up_date,
        )

    def validate(self) -> None:
        if is_blank(self.reason):
            raise DetailValidationError("Consultation reason must not be blank", field="reason")
        if self.follow_up_required:
            if self.follow_up_date is None:
                raise DetailValidationError(
                    "Follow-up date is required when a follow-up is required", field="follow_up_date"
                )
            if self.follow_up_date < today():
                raise DetailValidationError("Follow-up date cannot be in the past", field="follow_up_date")
        blank = first_blank_index(self.symptoms)
        if blank is not None:
            raise DetailValidationError(f"Symptom #{blank + 1} must not be blank", field="symptoms")

    def can_correct(self, previous: MedicalRecordDetailsBase) -> bool:
        """Legal only when the reason, diagnosis or treatment plan changed; a no-op is not."""
        if not isinstance(previous, ConsultationDetails):
            return False
        return self._differs_in(previous, _AMENDABLE_FIELDS)
