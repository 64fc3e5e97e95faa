"""Medical Record Correction Service.

Implements the correction workflow: a correction never edits an existing
record. It loads the original, asks the new detail value whether it may
amend the original one, and persists a brand-new record that points back at
the original.

Architecture:
    - Pure domain service; persistence and publishing go through ports
    - Events are published only after the new record has been saved
"""

import logging
from typing import Optional

from vetrecords.domain.details import MedicalRecordDetailsBase
from vetrecords.domain.exceptions import MedicalRecordNotFoundError
from vetrecords.domain.medical_record import MedicalRecord
from vetrecords.domain.ports import DomainEventPublisherPort, MedicalRecordRepositoryPort

logger = logging.getLogger(__name__)


class MedicalRecordCorrectionService:
    """Creates correction records for existing medical records."""

    def __init__(self, repository: MedicalRecordRepositoryPort, publisher: DomainEventPublisherPort):
        """Initialize correction service.

        Parameters:
            repository: Port used to load originals and save corrections
            publisher: Port that receives the correction events
        """
        self.repository = repository
        self.publisher = publisher

    def correct(
        self,
        original_record_id: str,
        details: MedicalRecordDetailsBase,
        veterinarian_id: Optional[str],
        reason: str,
        notes: Optional[str] = None,
    ) -> MedicalRecord:
        """Correct an existing record by creating a new one.

        Parameters:
            original_record_id: Id of the record to correct
            details: Corrected detail value (same kind as the original)
            veterinarian_id: Veterinarian making the correction
            reason: Mandatory reason for the correction
            notes: Notes of the new record; defaults to the original's notes

        Returns:
            MedicalRecord: The persisted correction record

        Raises:
            MedicalRecordNotFoundError: If the original record does not exist
            IllegalCorrectionError: If the correction is not permitted
            DetailValidationError: If the corrected details are invalid
        """
        original = self.repository.find_by_id(original_record_id)
        if original is None:
            raise MedicalRecordNotFoundError(original_record_id)

        corrected = MedicalRecord.create_correction_of(
            original, details, veterinarian_id, reason, notes=notes
        )
        events = corrected.pull_domain_events()
        self.repository.save(corrected)
        self.publisher.publish_all(events)

        logger.info(
            f"Record {original_record_id} corrected by record {corrected.id} "
            f"({corrected.record_type.value})",
            extra={
                "record_id": corrected.id,
                "record_type": corrected.record_type.value,
                "original_record_id": original_record_id,
                "veterinarian_id": veterinarian_id,
            },
        )
        return corrected
