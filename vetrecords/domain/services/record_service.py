"""Medical Record Service.

Application-facing workflow around the MedicalRecord aggregate: each
operation loads the record through the repository port, delegates to the
aggregate, saves it and publishes the events it buffered. A failed
operation raises before anything is saved or published.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, Optional

from vetrecords.domain.details import MedicalRecordDetailsBase, SurgeryMedication
from vetrecords.domain.enums import MedicalRecordType, RecordAction, SurgeryOutcome
from vetrecords.domain.exceptions import MedicalRecordNotFoundError
from vetrecords.domain.medical_record import MedicalRecord
from vetrecords.domain.ports import DomainEventPublisherPort, MedicalRecordRepositoryPort

logger = logging.getLogger(__name__)


def _log_context(record: MedicalRecord, **extra: Optional[str]) -> Dict[str, Optional[str]]:
    return {"record_id": record.id, "record_type": record.record_type.value, **extra}


class MedicalRecordService:
    """Creates medical records and drives their lifecycle."""

    def __init__(self, repository: MedicalRecordRepositoryPort, publisher: DomainEventPublisherPort):
        self.repository = repository
        self.publisher = publisher

    def register_record(
        self,
        pet_id: str,
        clinic_id: str,
        veterinarian_id: Optional[str],
        details: MedicalRecordDetailsBase,
        notes: Optional[str] = None,
        record_type: Optional[MedicalRecordType] = None,
    ) -> MedicalRecord:
        """Create, persist and announce a new medical record.

        Raises:
            DetailValidationError: If the details are missing, mismatched or invalid
        """
        record = MedicalRecord.create(
            pet_id, clinic_id, veterinarian_id, details, notes=notes, record_type=record_type
        )
        self._commit(record)
        logger.info(
            f"Registered {record.record_type.value} record {record.id} for pet {pet_id}",
            extra=_log_context(record),
        )
        return record

    def apply_action(
        self, record_id: str, action: RecordAction, veterinarian_id: Optional[str] = None
    ) -> MedicalRecord:
        """Apply a lifecycle action to a stored record.

        Raises:
            MedicalRecordNotFoundError: If the record does not exist
            InvalidTransitionError: If the action is illegal in the current status
            DetailValidationError: If the resulting details would be invalid
        """
        record = self._modify(record_id, lambda r: r.apply_action(action, veterinarian_id))
        logger.info(
            f"Applied {RecordAction(action).value} to record {record_id}; status is now {record.status}",
            extra=_log_context(record, veterinarian_id=veterinarian_id),
        )
        return record

    def update_details(self, record_id: str, details: MedicalRecordDetailsBase) -> MedicalRecord:
        return self._modify(record_id, lambda r: r.update(details))

    def change_surgery_outcome(self, record_id: str, outcome: SurgeryOutcome) -> MedicalRecord:
        return self._modify(record_id, lambda r: r.change_surgery_outcome(outcome))

    def add_post_op_medication(self, record_id: str, medication: SurgeryMedication) -> MedicalRecord:
        return self._modify(record_id, lambda r: r.add_post_op_medication(medication))

    def reschedule_surgery(self, record_id: str, new_date: datetime) -> MedicalRecord:
        return self._modify(record_id, lambda r: r.reschedule_surgery(new_date))

    def _load(self, record_id: str) -> MedicalRecord:
        record = self.repository.find_by_id(record_id)
        if record is None:
            raise MedicalRecordNotFoundError(record_id)
        return record

    def _modify(self, record_id: str, operation: Callable[[MedicalRecord], None]) -> MedicalRecord:
        record = self._load(record_id)
        operation(record)
        self._commit(record)
        return record

    def _commit(self, record: MedicalRecord) -> None:
        events = record.pull_domain_events()
        self.repository.save(record)
        self.publisher.publish_all(events)
