"""Medical-record detail capability shared by every variant.

A detail variant is the type-specific payload of a medical record. Variants
are immutable pydantic models: construction runs ``validate()`` through a
model validator, and every mutating operation builds a candidate copy,
validates it and returns it. The caller (normally the ``MedicalRecord``
aggregate) swaps the candidate in, so a rejected operation leaves the
receiver exactly as it was.

Architecture:
    - Pure domain models with zero infrastructure dependencies
    - ``record_type`` is the discriminator of the ``MedicalRecordDetails`` union
    - Stateless variants reject lifecycle actions with UnsupportedActionError
"""

import logging
from abc import abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Optional, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator, ValidationError as PydanticValidationError

from vetrecords.domain.enums import RecordAction
from vetrecords.domain.exceptions import DetailValidationError, UnsupportedActionError
from vetrecords.domain.utils import is_blank

logger = logging.getLogger(__name__)

D = TypeVar("D", bound="MedicalRecordDetailsBase")


@dataclass(frozen=True)
class StatusChangeResult:
    """Outcome of a successful ``apply_action`` call.

    Attributes:
        previous_status: Status before the action
        new_status: Status after the action
        details: The validated detail value in its new state
    """
    previous_status: Enum
    new_status: Enum
    details: "MedicalRecordDetailsBase"


class DomainValueModel(BaseModel):
    """Immutable pydantic model whose invariants are checked by ``validate()``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    @abstractmethod
    def validate(self) -> None:
        """Raise DetailValidationError if a business rule is violated."""

    @model_validator(mode="after")
    def enforce_invariants(self):
        self.validate()
        return self

    @classmethod
    def _build(cls, **fields: Any):
        """Construct and validate, reporting type errors as DetailValidationError."""
        try:
            return cls(**fields)
        except PydanticValidationError as exc:
            raise DetailValidationError.from_pydantic(exc) from exc

    def _revise(self: D, **changes: Any) -> D:
        """Return a validated copy with ``changes`` applied; self is never touched.

        The candidate is rebuilt through the model constructor so new values
        get the same type coercion as at creation.
        """
        return type(self)._build(**{**dict(self), **changes})


class MedicalRecordDetailsBase(DomainValueModel):
    """Capability implemented by every medical-record detail variant.

    Subclasses declare a ``record_type`` literal field and implement
    ``validate()`` and ``can_correct()``. Stateful subclasses also override
    ``apply_action()`` and ``current_status()``.
    """

    stateful: ClassVar[bool] = False

    @abstractmethod
    def can_correct(self, previous: "MedicalRecordDetailsBase") -> bool:
        """Whether this value may legally amend ``previous``."""

    def current_status(self) -> Optional[Enum]:
        """Lifecycle status of the variant, or None for stateless variants."""
        return None

    def check_update(self, previous: "MedicalRecordDetailsBase") -> None:
        """Raise DetailValidationError if this value may not replace ``previous`` in place.

        Variants without edit restrictions accept any valid value of their kind.
        """

    def apply_action(self, action: RecordAction) -> StatusChangeResult:
        """Advance the lifecycle; stateless variants have none."""
        raise UnsupportedActionError(self.record_type, action)

    def _differs_in(self, previous: "MedicalRecordDetailsBase", fields: Tuple[str, ...]) -> bool:
        return any(getattr(self, name) != getattr(previous, name) for name in fields)

    def _transition(self, action: RecordAction, **changes: Any) -> StatusChangeResult:
        """Build, validate and return the post-transition value.

        Parameters:
            action: Action that was applied (for logging)
            changes: Field updates including the new ``status``

        Returns:
            StatusChangeResult with the validated candidate
        """
        previous_status = self.current_status()
        candidate = self._revise(**changes)
        logger.debug(
            f"{self.record_type.value} details moved {previous_status.value} -> "
            f"{candidate.current_status().value} on {RecordAction(action).value}"
        )
        return StatusChangeResult(
            previous_status=previous_status,
            new_status=candidate.current_status(),
            details=candidate,
        )


class Medication(DomainValueModel):
    """Medication prescribed as part of a surgery or a treatment.

    Parameters:
        name: Medication name
        dosage: Dose per administration (free text, e.g. "5 mg/kg")
        frequency: Administration frequency (e.g. "every 12h")
        duration_in_days: Course length in days, strictly positive
        notes: Optional free-text notes
    """

    name: Optional[str] = None
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    duration_in_days: Optional[int] = None
    notes: Optional[str] = None

    def validate(self) -> None:
        label = type(self).__name__
        if is_blank(self.name):
            raise DetailValidationError(f"{label} name must not be blank", field="name")
        if is_blank(self.dosage):
            raise DetailValidationError(f"{label} dosage must not be blank", field="dosage")
        if is_blank(self.frequency):
            raise DetailValidationError(f"{label} frequency must not be blank", field="frequency")
        if self.duration_in_days is None or self.duration_in_days <= 0:
            raise DetailValidationError(
                f"{label} duration must be at least one day", field="duration_in_days"
            )

    @classmethod
    def create(
        cls,
        name: Optional[str],
        dosage: Optional[str],
        frequency: Optional[str],
        duration_in_days: Optional[int],
        notes: Optional[str] = None,
    ):
        return cls._build(
            name=name,
            dosage=dosage,
            frequency=frequency,
            duration_in_days=duration_in_days,
            notes=notes,
        )


class SurgeryMedication(Medication):
    """Post-operative medication attached to a surgery."""


class TreatmentMedication(Medication):
    """Medication that is part of a treatment plan."""
