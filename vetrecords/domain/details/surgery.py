"""Surgery details - the richest stateful medical-record variant.

A surgery moves SCHEDULED -> ADMITTED -> IN_PROGRESS -> {COMPLETED, DECEASED}
and can be CANCELLED while SCHEDULED or ADMITTED. Its invariants depend on the
current status:

    - SCHEDULED: surgery date set and not in the past, no post-op medication
    - ADMITTED / IN_PROGRESS: surgery date set
    - IN_PROGRESS: anesthesia type set
    - SCHEDULED / ADMITTED / CANCELLED: no outcome
    - COMPLETED / DECEASED: outcome set, completion time >= surgery date
    - COMPLETED: at least one post-op medication
    - CANCELLED: completion time >= surgery date

Post-op medications are an append-only tuple; the only way to grow it is
``add_post_op_medication`` and nothing can shrink it.
"""

import logging
from datetime import datetime
from typing import ClassVar, Literal, Optional, Sequence

from pydantic import AwareDatetime

from vetrecords.domain.details.base import (
    DomainValueModel,
    MedicalRecordDetailsBase,
    StatusChangeResult,
    SurgeryMedication,
)
from vetrecords.domain.enums import (
    AnesthesiaType,
    MedicalRecordType,
    RecordAction,
    SurgeryOutcome,
    SurgeryType,
)
from vetrecords.domain.exceptions import DetailValidationError, IllegalCorrectionError
from vetrecords.domain.state_machines import SurgeryStatus
from vetrecords.domain.utils import is_blank, utcnow

logger = logging.getLogger(__name__)

# Fields a correction may never touch.
_FROZEN_FIELDS = (
    "surgery_name",
    "surgery_type",
    "procedures",
    "anesthesia_type",
    "hospitalization_required",
    "status",
    "outcome",
    "completed_at",
)

_NO_OUTCOME_STATES = (SurgeryStatus.SCHEDULED, SurgeryStatus.ADMITTED, SurgeryStatus.CANCELLED)
_CLOSED_STATES = (SurgeryStatus.COMPLETED, SurgeryStatus.DECEASED)


class SurgeryProcedure(DomainValueModel):
    """A single procedure performed during a surgery.

    Parameters:
        name: Procedure name (required, non-blank)
        description: Optional description; when given it must not be blank
    """

    name: Optional[str] = None
    description: Optional[str] = None

    def validate(self) -> None:
        if is_blank(self.name):
            raise DetailValidationError("Procedure name must not be blank", field="name")
        if self.description is not None and is_blank(self.description):
            raise DetailValidationError("Procedure description must not be blank", field="description")

    @classmethod
    def create(cls, name: Optional[str], description: Optional[str] = None) -> "SurgeryProcedure":
        return cls._build(name=name, description=description)


class SurgeryDetails(MedicalRecordDetailsBase):
    """Surgery record payload with its lifecycle.

    Parameters:
        surgery_name: Name of the surgery
        surgery_type: Kind of surgery
        procedures: Procedures performed (at least one)
        anesthesia_type: Anesthesia used; required once IN_PROGRESS
        hospitalization_required: Whether the pet stays after surgery
        surgery_date: Scheduled (later: actual) surgery time
        status: Current lifecycle status
        outcome: Result; only while IN_PROGRESS or once closed
        post_op_medications: Append-only post-operative medications
        completed_at: When the surgery was closed or cancelled
    """

    stateful: ClassVar[bool] = True

    record_type: Literal[MedicalRecordType.SURGERY] = MedicalRecordType.SURGERY
    surgery_name: Optional[str] = None
    surgery_type: Optional[SurgeryType] = None
    procedures: tuple[SurgeryProcedure, ...] = ()
    anesthesia_type: Optional[AnesthesiaType] = None
    hospitalization_required: bool = False
    surgery_date: Optional[AwareDatetime] = None
    status: Optional[SurgeryStatus] = SurgeryStatus.SCHEDULED
    outcome: Optional[SurgeryOutcome] = None
    post_op_medications: tuple[SurgeryMedication, ...] = ()
    completed_at: Optional[AwareDatetime] = None

    @classmethod
    def create(
        cls,
        surgery_name: Optional[str],
        surgery_type: Optional[SurgeryType],
        procedures: Sequence[SurgeryProcedure],
        anesthesia_type: Optional[AnesthesiaType],
        hospitalization_required: bool,
        surgery_date: Optional[datetime],
    ) -> "SurgeryDetails":
        """Schedule a new surgery (status SCHEDULED, no medication, no outcome)."""
        return cls._build(
            surgery_name=surgery_name,
            surgery_type=surgery_type,
            procedures=tuple(procedures or ()),
            anesthesia_type=anesthesia_type,
            hospitalization_required=hospitalization_required,
            surgery_date=surgery_date,
            status=SurgeryStatus.SCHEDULED,
        )

    def current_status(self) -> Optional[SurgeryStatus]:
        return self.status

    def validate(self) -> None:
        status = self.status
        if status is None:
            raise DetailValidationError("Surgery status is required", field="status")
        if is_blank(self.surgery_name):
            raise DetailValidationError("Surgery name must not be blank", field="surgery_name")
        if self.surgery_type is None:
            raise DetailValidationError("Surgery type is required", field="surgery_type")
        if not self.procedures:
            raise DetailValidationError("Surgery requires at least one procedure", field="procedures")
        for procedure in self.procedures:
            procedure.validate()
        for medication in self.post_op_medications:
            medication.validate()

        if status is SurgeryStatus.SCHEDULED:
            if self.surgery_date is None:
                raise DetailValidationError(
                    f"Surgery in state {status.value} requires a surgery date", field="surgery_date"
                )
            if self.surgery_date < utcnow():
                raise DetailValidationError(
                    f"Surgery in state {status.value} cannot have a surgery date in the past",
                    field="surgery_date",
                )
            if self.post_op_medications:
                raise DetailValidationError(
                    f"Surgery in state {status.value} cannot have post-operative medications yet",
                    field="post_op_medications",
                )

        if status in (SurgeryStatus.ADMITTED, SurgeryStatus.IN_PROGRESS) and self.surgery_date is None:
            raise DetailValidationError(
                f"Surgery in state {status.value} requires a surgery date", field="surgery_date"
            )

        if status is SurgeryStatus.IN_PROGRESS and self.anesthesia_type is None:
            raise DetailValidationError(
                f"Surgery in state {status.value} requires an anesthesia type", field="anesthesia_type"
            )

        if status in _NO_OUTCOME_STATES and self.outcome is not None:
            raise DetailValidationError(
                f"Surgery in state {status.value} cannot have an outcome", field="outcome"
            )

        if status in _CLOSED_STATES:
            if self.outcome is None:
                raise DetailValidationError(
                    f"Surgery in state {status.value} requires an outcome", field="outcome"
                )
            self._check_closed_at(status)

        if status is SurgeryStatus.COMPLETED and not self.post_op_medications:
            raise DetailValidationError(
                f"Surgery in state {status.value} requires post-operative medication",
                field="post_op_medications",
            )

        if status is SurgeryStatus.CANCELLED:
            self._check_closed_at(status)

    def _check_closed_at(self, status: SurgeryStatus) -> None:
        if self.completed_at is None:
            raise DetailValidationError(
                f"Surgery in state {status.value} requires a completion date", field="completed_at"
            )
        if self.surgery_date is not None and self.completed_at < self.surgery_date:
            raise DetailValidationError(
                "Surgery completion date cannot be before the surgery date", field="completed_at"
            )

    def can_correct(self, previous: MedicalRecordDetailsBase) -> bool:
        """Whether this surgery value may amend ``previous``.

        A surgery in a terminal state is immutable history, so correcting it
        raises instead of answering False. Otherwise only the surgery date
        (while the prior value was still SCHEDULED) and the post-op
        medications (grow only) may differ.

        Raises:
            IllegalCorrectionError: If ``previous`` is in a terminal state
        """
        if not isinstance(previous, SurgeryDetails):
            return False

        if previous.status.is_terminal:
            raise IllegalCorrectionError(
                f"Cannot correct a surgery in terminal state {previous.status.value}"
            )

        if self._differs_in(previous, _FROZEN_FIELDS):
            return False

        if previous.status is not SurgeryStatus.SCHEDULED and self.surgery_date != previous.surgery_date:
            return False

        return all(medication in self.post_op_medications for medication in previous.post_op_medications)

    def check_update(self, previous: MedicalRecordDetailsBase) -> None:
        """Reject in-place edits that shrink post-op medications or move a booked date.

        Raises:
            DetailValidationError: If a post-op medication of ``previous`` is
                missing, or the surgery date changes outside SCHEDULED
        """
        if not isinstance(previous, SurgeryDetails):
            return
        if any(medication not in self.post_op_medications for medication in previous.post_op_medications):
            raise DetailValidationError(
                "Post-operative medications cannot be removed", field="post_op_medications"
            )
        if previous.status is not SurgeryStatus.SCHEDULED and self.surgery_date != previous.surgery_date:
            raise DetailValidationError(
                f"Surgery date cannot change in state {previous.status.value}", field="surgery_date"
            )

    def apply_action(self, action: RecordAction) -> StatusChangeResult:
        """Advance the surgery lifecycle.

        Closing the surgery (COMPLETE or DECLARE_DECEASED) requires an outcome
        and post-op medication and stamps ``completed_at``. Starting it
        records the actual start time when it happens ahead of schedule.
        Cancelling stamps the closing time, never earlier than the booked
        surgery date.

        Raises:
            InvalidTransitionError: If the action is not declared for the status
            DetailValidationError: If the resulting value would be invalid
        """
        target = self.status.next(action)
        now = utcnow()
        changes = {"status": target}

        if target in _CLOSED_STATES:
            if self.outcome is None:
                raise DetailValidationError("Surgery cannot complete without outcome", field="outcome")
            if not self.post_op_medications:
                raise DetailValidationError(
                    "Surgery cannot complete without post-operative medication",
                    field="post_op_medications",
                )
            changes["completed_at"] = now
        elif target is SurgeryStatus.IN_PROGRESS:
            if self.surgery_date is not None and self.surgery_date > now:
                changes["surgery_date"] = now
        elif target is SurgeryStatus.CANCELLED:
            if self.surgery_date is not None and self.surgery_date > now:
                changes["completed_at"] = self.surgery_date
            else:
                changes["completed_at"] = now

        return self._transition(action, **changes)

    def change_outcome(self, new_outcome: Optional[SurgeryOutcome]) -> "SurgeryDetails":
        """Return a copy with ``outcome`` set; only legal while IN_PROGRESS."""
        if self.status is not SurgeryStatus.IN_PROGRESS:
            raise DetailValidationError(
                "Surgery outcome can only be set while the surgery is in progress", field="status"
            )
        if new_outcome is None:
            raise DetailValidationError("Surgery outcome is required", field="outcome")
        return self._revise(outcome=new_outcome)

    def add_post_op_medication(self, medication: Optional[SurgeryMedication]) -> "SurgeryDetails":
        """Return a copy with ``medication`` appended; only legal while IN_PROGRESS."""
        if self.status is not SurgeryStatus.IN_PROGRESS:
            raise DetailValidationError(
                "Post-operative medication can only be added while the surgery is in progress",
                field="status",
            )
        if medication is None:
            raise DetailValidationError("Post-operative medication is required", field="post_op_medications")
        if not isinstance(medication, SurgeryMedication):
            raise DetailValidationError(
                f"Expected SurgeryMedication, got {type(medication).__name__}", field="post_op_medications"
            )
        logger.debug(f"Adding post-op medication {medication.name} to surgery {self.surgery_name}")
        return self._revise(post_op_medications=self.post_op_medications + (medication,))

    def reschedule(self, new_date: Optional[datetime]) -> "SurgeryDetails":
        """Return a copy with a new surgery date; only legal while SCHEDULED."""
        if self.status is not SurgeryStatus.SCHEDULED:
            raise DetailValidationError("Only a scheduled surgery can be rescheduled", field="status")
        if new_date is None:
            raise DetailValidationError("New surgery date is required", field="surgery_date")
        # a scheduled surgery date in the past is rejected by validate()
        return self._revise(surgery_date=new_date)
