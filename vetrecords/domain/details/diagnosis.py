"""Diagnosis details.

A diagnosis has no lifecycle. Any diagnosis may amend another diagnosis:
a correction that changes nothing is a legal no-op. Comparing against a
different record kind is a programming error and raises.
"""

from datetime import date
from typing import Literal, Optional, Sequence

from vetrecords.domain.details.base import MedicalRecordDetailsBase
from vetrecords.domain.enums import DiagnosisCategory, DiagnosisSeverity, MedicalRecordType
from vetrecords.domain.exceptions import DetailValidationError, IllegalCorrectionError
from vetrecords.domain.utils import first_blank_index, is_blank, today


class DiagnosisDetails(MedicalRecordDetailsBase):
    """Clinical diagnosis of a pet.

    Parameters:
        diagnosis_name: Name of the condition
        category: Diagnosis category
        description: Optional free-text description
        severity: Severity of the condition
        diagnosed_at: Day of the diagnosis, not in the future
        chronic: Whether the condition is chronic
        contagious: Whether the condition is contagious
        symptoms: Observed symptoms
        recommendations: Recommendations for the owner
        follow_up_required: Whether a follow-up is needed
        follow_up_date: Follow-up date, required iff follow_up_required
    """

    record_type: Literal[MedicalRecordType.DIAGNOSIS] = MedicalRecordType.DIAGNOSIS
    diagnosis_name: Optional[str] = None
    category: Optional[DiagnosisCategory] = None
    description: Optional[str] = None
    severity: Optional[DiagnosisSeverity] = None
    diagnosed_at: Optional[date] = None
    chronic: bool = False
    contagious: bool = False
    symptoms: tuple[Optional[str], ...] = ()
    recommendations: tuple[Optional[str], ...] = ()
    follow_up_required: bool = False
    follow_up_date: Optional[date] = None

    @classmethod
    def create(
        cls,
        diagnosis_name: Optional[str],
        category: Optional[DiagnosisCategory],
        severity: Optional[DiagnosisSeverity],
        diagnosed_at: Optional[date],
        description: Optional[str] = None,
        chronic: bool = False,
        contagious: bool = False,
        symptoms: Optional[Sequence[str]] = None,
        recommendations: Optional[Sequence[str]] = None,
        follow_up_required: bool = False,
        follow_up_date: Optional[date] = None,
    ) -> "DiagnosisDetails":
        return cls._build(
            diagnosis_name=diagnosis_name,
            category=category,
            description=description,
            severity=severity,
            diagnosed_at=diagnosed_at,
            chronic=chronic,
            contagious=contagious,
            symptoms=tuple(symptoms or ()),
            recommendations=tuple(recommendations or ()),
            follow_up_required=follow_up_required,
            follow_up_date=follow_up_date,
        )

    def validate(self) -> None:
        if is_blank(self.diagnosis_name):
            raise DetailValidationError("Diagnosis name must not be blank", field="diagnosis_name")
        if self.category is None:
            raise DetailValidationError("Diagnosis category is required", field="category")
        if self.severity is None:
            raise DetailValidationError("Diagnosis severity is required", field="severity")
        if self.diagnosed_at is None:
            raise DetailValidationError("Diagnosis date is required", field="diagnosed_at")
        if self.diagnosed_at > today():
            raise DetailValidationError("Diagnosis date cannot be in the future", field="diagnosed_at")

        if self.follow_up_required and self.follow_up_date is None:
            raise DetailValidationError(
                "Follow-up date is required when a follow-up is required", field="follow_up_date"
            )
        if not self.follow_up_required and self.follow_up_date is not None:
            raise DetailValidationError(
                "Follow-up date given but no follow-up is required", field="follow_up_date"
            )
        if self.follow_up_date is not None and self.follow_up_date < self.diagnosed_at:
            raise DetailValidationError(
                "Invalid diagnosis: follow-up before diagnosis", field="follow_up_date"
            )

        blank = first_blank_index(self.symptoms)
        if blank is not None:
            raise DetailValidationError(f"Symptom #{blank + 1} must not be blank", field="symptoms")
        blank = first_blank_index(self.recommendations)
        if blank is not None:
            raise DetailValidationError(
                f"Recommendation #{blank + 1} must not be blank", field="recommendations"
            )

    def can_correct(self, previous: MedicalRecordDetailsBase) -> bool:
        """Any diagnosis may amend a diagnosis, including an identical one.

        Raises:
            IllegalCorrectionError: If ``previous`` is not a diagnosis
        """
        if not isinstance(previous, DiagnosisDetails):
            raise IllegalCorrectionError(
                f"Cannot correct a {previous.record_type.value} record with diagnosis details"
            )
        return True
