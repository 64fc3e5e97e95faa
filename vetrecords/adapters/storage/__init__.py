"""Storage adapters for vetrecords.

This module contains storage adapters that implement the
MedicalRecordRepositoryPort interface for persisting medical records.
"""

from vetrecords.adapters.storage.memory_adapter import InMemoryMedicalRecordRepository

__all__ = ["InMemoryMedicalRecordRepository"]
