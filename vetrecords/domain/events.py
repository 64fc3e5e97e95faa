"""Domain Events emitted by the MedicalRecord aggregate.

Events are immutable facts about a record: its creation, a lifecycle status
change of a stateful detail, and corrections. The aggregate buffers them; the
application layer hands them to a ``DomainEventPublisherPort`` after the
record has been persisted. The core never transports or stores events.

Security Impact:
    - Events carry identifiers and correction reasons only, never detail payloads
    - ``to_log_dict()`` is the only serialization used for structured logging

Architecture:
    - Pure domain models with zero infrastructure dependencies
    - Follows Hexagonal Architecture: publishing happens through a port
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from vetrecords.domain.enums import MedicalRecordType
from vetrecords.domain.utils import utcnow


class DomainEvent(BaseModel):
    """Base class of every domain event.

    Parameters:
        event_id: Unique event identifier
        occurred_on: When the event happened (aware UTC)
        event_version: Schema version of the event payload
    """

    model_config = ConfigDict(frozen=True)

    event_id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique event identifier")
    occurred_on: datetime = Field(default_factory=utcnow, description="When the event occurred")
    event_version: int = Field(1, description="Schema version of the event")

    @property
    def event_type(self) -> str:
        return type(self).__name__

    def to_log_dict(self) -> Dict[str, Any]:
        """Convert to a flat dictionary for structured logging.

        Returns:
            Dictionary with JSON-friendly values and an ``event_type`` key
        """
        payload = self.model_dump(mode="json")
        payload["event_type"] = self.event_type
        return payload


class MedicalRecordCreatedEvent(DomainEvent):
    """A new medical record was created (originals and corrections alike)."""

    record_id: str = Field(..., description="Id of the created record")
    pet_id: str = Field(..., description="Pet the record belongs to")
    clinic_id: str = Field(..., description="Clinic that created the record")
    record_type: MedicalRecordType = Field(..., description="Kind of detail carried by the record")


class StatusChangedEvent(DomainEvent):
    """A stateful detail moved from one lifecycle status to another."""

    record_id: str = Field(..., description="Id of the record whose status changed")
    previous_status: str = Field(..., description="Status before the action")
    new_status: str = Field(..., description="Status after the action")
    veterinarian_id: Optional[str] = Field(None, description="Veterinarian who applied the action")


class SurgeryStatusChangedEvent(StatusChangedEvent):
    pass


class HospitalizationStatusChangedEvent(StatusChangedEvent):
    pass


class TreatmentStatusChangedEvent(StatusChangedEvent):
    pass


class MedicalRecordCorrectionCreatedEvent(DomainEvent):
    """A correction record was created; emitted for the new record."""

    corrected_record_id: str = Field(..., description="Id of the new correcting record")
    original_record_id: str = Field(..., description="Id of the record being corrected")
    reason: str = Field(..., description="Why the correction was made")


class MedicalRecordCorrectedEvent(DomainEvent):
    """An existing record was amended by a correction; emitted for the original."""

    original_record_id: str = Field(..., description="Id of the record being corrected")
    corrected_record_id: str = Field(..., description="Id of the new correcting record")
    reason: str = Field(..., description="Why the correction was made")


STATUS_CHANGED_EVENTS = {
    MedicalRecordType.SURGERY: SurgeryStatusChangedEvent,
    MedicalRecordType.HOSPITALIZATION: HospitalizationStatusChangedEvent,
    MedicalRecordType.TREATMENT: TreatmentStatusChangedEvent,
}
