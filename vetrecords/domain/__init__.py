"""Domain layer for vetrecords.

This module contains the clinical medical-record core: detail variants,
status state machines, the MedicalRecord aggregate and its domain events.
All domain models are pure Python with no external dependencies beyond Pydantic.
"""

from .details import (
    ConsultationDetails,
    DiagnosisDetails,
    HospitalizationDetails,
    MedicalRecordDetails,
    SurgeryDetails,
    SurgeryMedication,
    SurgeryProcedure,
    TreatmentDetails,
    TreatmentMedication,
    WeightDetails,
)
from .enums import MedicalRecordType, RecordAction
from .medical_record import MedicalRecord

__all__ = [
    "ConsultationDetails",
    "DiagnosisDetails",
    "HospitalizationDetails",
    "MedicalRecord",
    "MedicalRecordDetails",
    "MedicalRecordType",
    "RecordAction",
    "SurgeryDetails",
    "SurgeryMedication",
    "SurgeryProcedure",
    "TreatmentDetails",
    "TreatmentMedication",
    "WeightDetails",
]
