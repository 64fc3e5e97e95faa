"""MedicalRecord aggregate root.

A medical record owns exactly one detail variant plus record-level metadata.
Every mutation goes through the aggregate: the detail computes and validates
a candidate value, and only then does the aggregate swap it in, keep its
``record_type``/``status`` mirrors in sync and buffer a domain event. A
failed call therefore leaves the record exactly as it was.

Corrections never touch an existing record. ``create_correction_of`` builds a
new record that points back at the original through ``corrected_record_id``.

Architecture:
    - Pure domain model with zero infrastructure dependencies
    - Events are buffered here and published by the application layer
      through ``DomainEventPublisherPort`` after persistence
"""

import logging
import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import AwareDatetime, BaseModel, Field, PrivateAttr, model_validator

from vetrecords.domain.details import MedicalRecordDetails, MedicalRecordDetailsBase, SurgeryDetails, SurgeryMedication
from vetrecords.domain.enums import MedicalRecordType, RecordAction, SurgeryOutcome
from vetrecords.domain.events import (
    STATUS_CHANGED_EVENTS,
    DomainEvent,
    MedicalRecordCorrectedEvent,
    MedicalRecordCorrectionCreatedEvent,
    MedicalRecordCreatedEvent,
)
from vetrecords.domain.exceptions import DetailValidationError, IllegalCorrectionError
from vetrecords.domain.utils import is_blank, utcnow

logger = logging.getLogger(__name__)


def _status_of(details: MedicalRecordDetailsBase) -> Optional[str]:
    status = details.current_status()
    return status.value if status is not None else None


class MedicalRecord(BaseModel):
    """Aggregate root around one medical-record detail value.

    Parameters:
        id: Unique record identifier
        pet_id: Pet the record belongs to
        clinic_id: Clinic that owns the record
        corrected_record_id: Id of the record this one corrects, None for originals
        record_type: Mirror of ``details.record_type``
        status: Mirror of the detail's lifecycle status, None for stateless kinds
        veterinarian_id: Veterinarian responsible for the record
        notes: Free-text notes
        details: The detail variant
        recorded_at: Creation time
        updated_at: Last modification time
    """

    id: str = Field(..., description="Unique record identifier")
    pet_id: str = Field(..., description="Pet the record belongs to")
    clinic_id: str = Field(..., description="Clinic that owns the record")
    corrected_record_id: Optional[str] = Field(None, description="Id of the corrected record")
    record_type: MedicalRecordType = Field(..., description="Kind of detail carried by the record")
    status: Optional[str] = Field(None, description="Lifecycle status of the detail, if any")
    veterinarian_id: Optional[str] = Field(None, description="Responsible veterinarian")
    notes: Optional[str] = Field(None, description="Free-text notes")
    details: MedicalRecordDetails = Field(..., description="Type-specific detail value")
    recorded_at: AwareDatetime = Field(default_factory=utcnow, description="Creation time")
    updated_at: AwareDatetime = Field(default_factory=utcnow, description="Last modification time")

    _domain_events: List[DomainEvent] = PrivateAttr(default_factory=list)

    @model_validator(mode="after")
    def check_mirrors(self) -> "MedicalRecord":
        if self.record_type != self.details.record_type:
            raise DetailValidationError(
                f"Record type {self.record_type.value} does not match details of type "
                f"{self.details.record_type.value}",
                field="record_type",
            )
        if self.status != _status_of(self.details):
            raise DetailValidationError(
                f"Record status {self.status} does not match details status {_status_of(self.details)}",
                field="status",
            )
        return self

    @classmethod
    def create(
        cls,
        pet_id: str,
        clinic_id: str,
        veterinarian_id: Optional[str],
        details: Optional[MedicalRecordDetailsBase],
        notes: Optional[str] = None,
        record_type: Optional[MedicalRecordType] = None,
    ) -> "MedicalRecord":
        """Create a new record around a validated detail value.

        Parameters:
            pet_id: Pet the record belongs to
            clinic_id: Clinic that owns the record
            veterinarian_id: Responsible veterinarian
            details: Detail variant (required)
            notes: Optional free-text notes
            record_type: Expected kind; when given it must match ``details``

        Returns:
            The new record with a buffered MedicalRecordCreatedEvent

        Raises:
            DetailValidationError: If details are missing, mismatched or invalid
        """
        if details is None:
            raise DetailValidationError("Medical record details are required", field="details")
        if record_type is not None and MedicalRecordType(record_type) != details.record_type:
            raise DetailValidationError(
                f"Record type {MedicalRecordType(record_type).value} does not match details of type "
                f"{details.record_type.value}",
                field="record_type",
            )
        details.validate()

        now = utcnow()
        record = cls(
            id=str(uuid.uuid4()),
            pet_id=pet_id,
            clinic_id=clinic_id,
            record_type=details.record_type,
            status=_status_of(details),
            veterinarian_id=veterinarian_id,
            notes=notes,
            details=details,
            recorded_at=now,
            updated_at=now,
        )
        record._record_event(
            MedicalRecordCreatedEvent(
                record_id=record.id,
                pet_id=record.pet_id,
                clinic_id=record.clinic_id,
                record_type=record.record_type,
            )
        )
        logger.debug(f"Created {record.record_type.value} record {record.id} for pet {pet_id}")
        return record

    @classmethod
    def create_correction_of(
        cls,
        original: "MedicalRecord",
        details: Optional[MedicalRecordDetailsBase],
        veterinarian_id: Optional[str],
        reason: Optional[str],
        notes: Optional[str] = None,
    ) -> "MedicalRecord":
        """Create a new record amending ``original``; the original is not touched.

        Raises:
            IllegalCorrectionError: If the reason is blank or the correction is not permitted
            DetailValidationError: If the corrected details are missing or invalid
        """
        if is_blank(reason):
            raise IllegalCorrectionError("A correction requires a reason", original_record_id=original.id)
        if details is None:
            raise DetailValidationError("Medical record details are required", field="details")
        if details.record_type != original.record_type:
            raise IllegalCorrectionError(
                f"Cannot correct a {original.record_type.value} record with "
                f"{details.record_type.value} details",
                original_record_id=original.id,
            )
        if not details.can_correct(original.details):
            raise IllegalCorrectionError("correction not permitted", original_record_id=original.id)
        details.validate()

        now = utcnow()
        corrected = cls(
            id=str(uuid.uuid4()),
            pet_id=original.pet_id,
            clinic_id=original.clinic_id,
            corrected_record_id=original.id,
            record_type=original.record_type,
            status=_status_of(details),
            veterinarian_id=veterinarian_id,
            notes=notes if notes is not None else original.notes,
            details=details,
            recorded_at=now,
            updated_at=now,
        )
        corrected._record_event(
            MedicalRecordCorrectionCreatedEvent(
                corrected_record_id=corrected.id,
                original_record_id=original.id,
                reason=reason,
            )
        )
        corrected._record_event(
            MedicalRecordCorrectedEvent(
                original_record_id=original.id,
                corrected_record_id=corrected.id,
                reason=reason,
            )
        )
        logger.debug(f"Record {corrected.id} corrects record {original.id}")
        return corrected

    def update(self, details: Optional[MedicalRecordDetailsBase]) -> None:
        """Replace the detail value for an operational edit.

        Status changes go through ``apply_action``; an update must keep the
        record type and the current status. The detail variant may restrict
        further edits (a surgery never loses post-op medication).

        Raises:
            DetailValidationError: If details are missing, of another kind,
                change the status, break a variant edit rule, or are invalid
        """
        if details is None:
            raise DetailValidationError("Medical record details are required", field="details")
        if details.record_type != self.record_type:
            raise DetailValidationError(
                f"Cannot replace {self.record_type.value} details with {details.record_type.value} details",
                field="record_type",
            )
        if _status_of(details) != self.status:
            raise DetailValidationError(
                "Status changes must go through a lifecycle action", field="status"
            )
        details.validate()
        details.check_update(self.details)
        self._swap(details)

    def apply_action(self, action: RecordAction, veterinarian_id: Optional[str] = None) -> None:
        """Advance the detail lifecycle and buffer a status-changed event.

        Raises:
            UnsupportedActionError: If the record kind has no lifecycle
            InvalidTransitionError: If the action is not allowed from the current status
            DetailValidationError: If the resulting detail value would be invalid
        """
        result = self.details.apply_action(action)
        self._swap(result.details)
        self._record_event(
            STATUS_CHANGED_EVENTS[self.record_type](
                record_id=self.id,
                previous_status=result.previous_status.value,
                new_status=result.new_status.value,
                veterinarian_id=veterinarian_id,
            )
        )
        logger.debug(
            f"Record {self.id} moved {result.previous_status.value} -> {result.new_status.value}"
        )

    def change_surgery_outcome(self, outcome: Optional[SurgeryOutcome]) -> None:
        self._swap(self._surgery().change_outcome(outcome))

    def add_post_op_medication(self, medication: Optional[SurgeryMedication]) -> None:
        self._swap(self._surgery().add_post_op_medication(medication))

    def reschedule_surgery(self, new_date: Optional[datetime]) -> None:
        self._swap(self._surgery().reschedule(new_date))

    @property
    def domain_events(self) -> List[DomainEvent]:
        """Copy of the buffered, not yet published events."""
        return list(self._domain_events)

    def pull_domain_events(self) -> List[DomainEvent]:
        """Return the buffered events and empty the buffer."""
        events = self._domain_events
        self._domain_events = []
        return events

    def clear_domain_events(self) -> None:
        self._domain_events = []

    def _surgery(self) -> SurgeryDetails:
        if not isinstance(self.details, SurgeryDetails):
            raise DetailValidationError(
                f"Record {self.id} is a {self.record_type.value} record, not a surgery",
                field="record_type",
            )
        return self.details

    def _swap(self, details: MedicalRecordDetailsBase) -> None:
        self.details = details
        self.status = _status_of(details)
        self.updated_at = utcnow()

    def _record_event(self, event: DomainEvent) -> None:
        self._domain_events.append(event)
