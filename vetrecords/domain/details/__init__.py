"""Medical-record detail variants.

``MedicalRecordDetails`` is the closed union of every variant, discriminated
on ``record_type``; pydantic resolves the concrete class when a record is
built from plain data.
"""

from typing import Annotated, Union

from pydantic import Field

from vetrecords.domain.details.base import (
    DomainValueModel,
    MedicalRecordDetailsBase,
    Medication,
    StatusChangeResult,
    SurgeryMedication,
    TreatmentMedication,
)
from vetrecords.domain.details.consultation import ConsultationDetails
from vetrecords.domain.details.diagnosis import DiagnosisDetails
from vetrecords.domain.details.hospitalization import HospitalizationDetails
from vetrecords.domain.details.surgery import SurgeryDetails, SurgeryProcedure
from vetrecords.domain.details.treatment import TreatmentDetails
from vetrecords.domain.details.weight import WeightDetails

MedicalRecordDetails = Annotated[
    Union[
        ConsultationDetails,
        DiagnosisDetails,
        SurgeryDetails,
        HospitalizationDetails,
        TreatmentDetails,
        WeightDetails,
    ],
    Field(discriminator="record_type"),
]

__all__ = [
    "ConsultationDetails",
    "DiagnosisDetails",
    "DomainValueModel",
    "HospitalizationDetails",
    "MedicalRecordDetails",
    "MedicalRecordDetailsBase",
    "Medication",
    "StatusChangeResult",
    "SurgeryDetails",
    "SurgeryMedication",
    "SurgeryProcedure",
    "TreatmentDetails",
    "TreatmentMedication",
    "WeightDetails",
]
