"""Enumerations for the clinical medical-record domain.

Status enumerations live in ``state_machines`` next to their transition
tables; this module holds the record kinds, the lifecycle commands, and the
clinical vocabularies used by the detail variants.
"""

from enum import Enum


class MedicalRecordType(str, Enum):
    """Kind of detail carried by a medical record."""
    CONSULTATION = "CONSULTATION"
    DIAGNOSIS = "DIAGNOSIS"
    SURGERY = "SURGERY"
    HOSPITALIZATION = "HOSPITALIZATION"
    TREATMENT = "TREATMENT"
    WEIGHT = "WEIGHT"


class RecordAction(str, Enum):
    """Lifecycle commands shared by the status state machines.

    Surgery and hospitalization use ADMIT, START, COMPLETE, CANCEL and
    DECLARE_DECEASED. Treatment uses ACTIVATE, SUSPEND and FINISH.
    """
    ADMIT = "ADMIT"
    START = "START"
    COMPLETE = "COMPLETE"
    CANCEL = "CANCEL"
    DECLARE_DECEASED = "DECLARE_DECEASED"
    ACTIVATE = "ACTIVATE"
    SUSPEND = "SUSPEND"
    FINISH = "FINISH"


class SurgeryType(str, Enum):
    PREVENTIVE = "PREVENTIVE"
    CORRECTIVE = "CORRECTIVE"
    EMERGENCY = "EMERGENCY"
    DIAGNOSTIC = "DIAGNOSTIC"
    RECONSTRUCTIVE = "RECONSTRUCTIVE"


class SurgeryOutcome(str, Enum):
    SUCCESS = "SUCCESS"
    SUCCESS_WITH_COMPLICATIONS = "SUCCESS_WITH_COMPLICATIONS"
    FAILED = "FAILED"


class AnesthesiaType(str, Enum):
    GENERAL = "GENERAL"
    LOCAL = "LOCAL"
    REGIONAL = "REGIONAL"
    SEDATION = "SEDATION"


class DiagnosisCategory(str, Enum):
    INFECTIOUS = "INFECTIOUS"
    PARASITIC = "PARASITIC"
    GENETIC = "GENETIC"
    METABOLIC = "METABOLIC"
    NEUROLOGICAL = "NEUROLOGICAL"
    DERMATOLOGICAL = "DERMATOLOGICAL"
    ORTHOPEDIC = "ORTHOPEDIC"
    CARDIOVASCULAR = "CARDIOVASCULAR"
    RESPIRATORY = "RESPIRATORY"
    DIGESTIVE = "DIGESTIVE"
    OTHER = "OTHER"


class DiagnosisSeverity(str, Enum):
    MILD = "MILD"
    MODERATE = "MODERATE"
    SEVERE = "SEVERE"
    CRITICAL = "CRITICAL"


class WeightUnit(str, Enum):
    KG = "KG"
    G = "G"
    LB = "LB"
