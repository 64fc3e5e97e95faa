"""Domain Services.

This package contains domain services that implement the medical-record
workflows on top of the aggregate, without infrastructure dependencies.
"""

from vetrecords.domain.services.correction_service import MedicalRecordCorrectionService
from vetrecords.domain.services.record_service import MedicalRecordService

__all__ = ["MedicalRecordCorrectionService", "MedicalRecordService"]
