"""Domain Exceptions - Error taxonomy for the medical-record core.

Every error raised by the core derives from ``MedicalRecordError`` and carries
the context a caller needs to report it (offending field, current state,
attempted action, record id). Errors are always raised synchronously to the
immediate caller; the core never retries or swallows them.

Note:
    ``DetailValidationError`` intentionally does not derive from ValueError.
    Pydantic wraps ValueError raised inside validators into its own
    ValidationError; any other exception propagates unchanged, which keeps
    the domain error type visible to callers constructing detail models.
"""

from typing import Any, Optional


class MedicalRecordError(Exception):
    """Base exception for all medical-record domain errors."""
    pass


class DetailValidationError(MedicalRecordError):
    """Raised when a detail variant or value object violates a business rule.

    Recoverable by the caller: fix the input and retry.

    Attributes:
        field: Name of the offending field (or rule) when known
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    @classmethod
    def from_pydantic(cls, exc: Any) -> "DetailValidationError":
        """Translate a pydantic ValidationError into a DetailValidationError.

        Parameters:
            exc: pydantic.ValidationError raised while building a model

        Returns:
            DetailValidationError describing the first reported error
        """
        errors = exc.errors()
        if not errors:
            return cls(str(exc))
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        return cls(f"Invalid value for {field}: {first.get('msg')}", field=field)


class InvalidTransitionError(MedicalRecordError):
    """Raised when a RecordAction is not declared for the current state.

    Never auto-retried.

    Attributes:
        current_state: State the machine was in
        action: The attempted action
    """

    def __init__(self, current_state: Any, action: Any, message: Optional[str] = None):
        state_name = getattr(current_state, "value", current_state)
        action_name = getattr(action, "value", action)
        super().__init__(message or f"Cannot apply {action_name} from state {state_name}")
        self.current_state = current_state
        self.action = action


class UnsupportedActionError(InvalidTransitionError):
    """Raised when a lifecycle action is sent to a record kind without a lifecycle.

    Attributes:
        record_type: The stateless record kind
    """

    def __init__(self, record_type: Any, action: Any):
        type_name = getattr(record_type, "value", record_type)
        action_name = getattr(action, "value", action)
        super().__init__(
            None,
            action,
            message=f"{type_name} records have no lifecycle; cannot apply {action_name}",
        )
        self.record_type = record_type


class IllegalCorrectionError(MedicalRecordError):
    """Raised when a correction of a medical record is rejected.

    Attributes:
        original_record_id: Id of the record that was to be corrected, if known
    """

    def __init__(self, message: str, original_record_id: Optional[str] = None):
        super().__init__(message)
        self.original_record_id = original_record_id


class MedicalRecordNotFoundError(MedicalRecordError):
    """Raised when a record id cannot be resolved through the repository port.

    Attributes:
        record_id: The id that was looked up
    """

    def __init__(self, record_id: str):
        super().__init__(f"Medical record not found with id: {record_id}")
        self.record_id = record_id
