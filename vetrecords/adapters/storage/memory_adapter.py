"""In-Memory Storage Adapter.

This adapter implements the MedicalRecordRepositoryPort contract with a
process-local dictionary. It is used by the composition root when no
external store is wired in, and by the tests.

Architecture:
    - Implements MedicalRecordRepositoryPort (Hexagonal Architecture)
    - Isolated from domain core - only depends on ports and models
    - Stores and returns deep copies, so callers never share aggregate state
      with the store; a failed operation on a loaded record leaves the stored
      version untouched
"""

import logging
from typing import Dict, List, Optional

from vetrecords.domain.medical_record import MedicalRecord
from vetrecords.domain.ports import MedicalRecordRepositoryPort

logger = logging.getLogger(__name__)


class InMemoryMedicalRecordRepository(MedicalRecordRepositoryPort):
    """Dictionary-backed repository keyed by record id.

    Example Usage:
        ```python
        repository = InMemoryMedicalRecordRepository()
        repository.save(record)
        loaded = repository.find_by_id(record.id)
        ```
    """

    def __init__(self):
        self._records: Dict[str, MedicalRecord] = {}

    def save(self, record: MedicalRecord) -> None:
        stored = record.model_copy(deep=True)
        stored.clear_domain_events()
        self._records[record.id] = stored
        logger.debug(f"Saved {record.record_type.value} record {record.id}")

    def find_by_id(self, record_id: str) -> Optional[MedicalRecord]:
        record = self._records.get(record_id)
        return record.model_copy(deep=True) if record is not None else None

    def find_by_pet_id(self, pet_id: str) -> List[MedicalRecord]:
        """Return every record of a pet, oldest first."""
        records = [r for r in self._records.values() if r.pet_id == pet_id]
        records.sort(key=lambda r: r.recorded_at)
        return [r.model_copy(deep=True) for r in records]

    def find_corrections_of(self, record_id: str) -> List[MedicalRecord]:
        """Return the records that correct ``record_id``, oldest first."""
        records = [r for r in self._records.values() if r.corrected_record_id == record_id]
        records.sort(key=lambda r: r.recorded_at)
        return [r.model_copy(deep=True) for r in records]

    def count(self) -> int:
        return len(self._records)

    def clear(self) -> None:
        self._records.clear()
