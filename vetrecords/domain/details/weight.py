from typing import Literal, Optional

from pydantic import Field

from vetrecords.domain.details.base import MedicalRecordDetailsBase
from vetrecords.domain.enums import MedicalRecordType, WeightUnit
from vetrecords.domain.exceptions import DetailValidationError


class WeightDetails(MedicalRecordDetailsBase):
    """A single weight observation."""

    record_type: Literal[MedicalRecordType.WEIGHT] = MedicalRecordType.WEIGHT
    value: Optional[float] = Field(None, allow_inf_nan=False)
    unit: Optional[WeightUnit] = None

    @classmethod
    def create(cls, value: Optional[float], unit: Optional[WeightUnit]) -> "WeightDetails":
        return cls._build(value=value, unit=unit)

    def validate(self) -> None:
        if self.value is None or not self.value > 0:
            raise DetailValidationError("Weight value must be greater than zero", field="value")
        if self.unit is None:
            raise DetailValidationError("Weight unit is required", field="unit")

    def can_correct(self, previous: MedicalRecordDetailsBase) -> bool:
        # any weight may replace a weight
        return isinstance(previous, WeightDetails)
