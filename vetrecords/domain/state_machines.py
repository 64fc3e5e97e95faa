"""Status State Machines for stateful medical-record details.

Each lifecycle (surgery, hospitalization, treatment) is a closed set of
states plus a read-only transition table mapping ``(state, action)`` to the
next state. A single generic ``StatusMachine.next`` consults the table; any
pair that is not declared raises ``InvalidTransitionError``. Terminal states
are simply states with no outgoing entries.

Architecture:
    - Pure domain logic with no infrastructure dependencies
    - Tables are data, so totality can be tested by enumerating them
    - Status enums delegate ``next``/``is_terminal`` to their machine
"""

import logging
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Tuple

from vetrecords.domain.enums import RecordAction
from vetrecords.domain.exceptions import InvalidTransitionError

logger = logging.getLogger(__name__)


class StatusMachine:
    """Table-driven state machine over one status enumeration.

    Parameters:
        name: Human-readable lifecycle name used in error messages
        states: The status enumeration (closed set of states)
        transitions: Mapping of ``(state, action)`` to the resulting state
    """

    def __init__(self, name: str, states: type, transitions: Mapping[Tuple[Enum, RecordAction], Enum]):
        for (source, action), target in transitions.items():
            if not isinstance(source, states) or not isinstance(target, states):
                raise TypeError(f"{name} transition uses a foreign state: {source} -> {target}")
            if not isinstance(action, RecordAction):
                raise TypeError(f"{name} transition uses an unknown action: {action}")
        self.name = name
        self.states = states
        self._transitions = MappingProxyType(dict(transitions))

    @property
    def transitions(self) -> Mapping[Tuple[Enum, RecordAction], Enum]:
        """Read-only view of the transition table."""
        return self._transitions

    def next(self, current: Enum, action: RecordAction) -> Enum:
        """Return the state reached by applying ``action`` in ``current``.

        Parameters:
            current: Current state
            action: Lifecycle command (RecordAction or its name)

        Returns:
            The declared target state

        Raises:
            InvalidTransitionError: If the pair is not in the table
        """
        try:
            action = RecordAction(action)
        except ValueError:
            raise InvalidTransitionError(current, action) from None

        target = self._transitions.get((current, action))
        if target is None:
            raise InvalidTransitionError(
                current,
                action,
                message=f"{self.name}: cannot apply {action.value} from state {getattr(current, 'value', current)}",
            )

        logger.debug(f"{self.name} transition {current.value} --{action.value}--> {target.value}")
        return target

    def allowed_actions(self, current: Enum) -> FrozenSet[RecordAction]:
        """Return the actions declared from ``current``."""
        return frozenset(action for (source, action) in self._transitions if source == current)

    def is_terminal(self, current: Enum) -> bool:
        """A state is terminal when it accepts no action."""
        return not self.allowed_actions(current)


_MACHINES: Dict[type, StatusMachine] = {}


class MachineBackedStatus:
    """Mixin giving a status enum ``next``, ``is_terminal`` and ``allowed_actions``."""

    def next(self, action: RecordAction):
        return _MACHINES[type(self)].next(self, action)

    @property
    def is_terminal(self) -> bool:
        return _MACHINES[type(self)].is_terminal(self)

    def allowed_actions(self) -> FrozenSet[RecordAction]:
        return _MACHINES[type(self)].allowed_actions(self)


class SurgeryStatus(MachineBackedStatus, str, Enum):
    SCHEDULED = "SCHEDULED"
    ADMITTED = "ADMITTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    DECEASED = "DECEASED"


class HospitalizationStatus(MachineBackedStatus, str, Enum):
    SCHEDULED = "SCHEDULED"
    ADMITTED = "ADMITTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    DECEASED = "DECEASED"


class TreatmentStatus(MachineBackedStatus, str, Enum):
    PLANNED = "PLANNED"
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    FINISHED = "FINISHED"


SURGERY_MACHINE = StatusMachine(
    "Surgery",
    SurgeryStatus,
    {
        (SurgeryStatus.SCHEDULED, RecordAction.ADMIT): SurgeryStatus.ADMITTED,
        (SurgeryStatus.SCHEDULED, RecordAction.CANCEL): SurgeryStatus.CANCELLED,
        (SurgeryStatus.ADMITTED, RecordAction.START): SurgeryStatus.IN_PROGRESS,
        (SurgeryStatus.ADMITTED, RecordAction.CANCEL): SurgeryStatus.CANCELLED,
        (SurgeryStatus.IN_PROGRESS, RecordAction.COMPLETE): SurgeryStatus.COMPLETED,
        (SurgeryStatus.IN_PROGRESS, RecordAction.DECLARE_DECEASED): SurgeryStatus.DECEASED,
    },
)

HOSPITALIZATION_MACHINE = StatusMachine(
    "Hospitalization",
    HospitalizationStatus,
    {
        (HospitalizationStatus.SCHEDULED, RecordAction.ADMIT): HospitalizationStatus.ADMITTED,
        (HospitalizationStatus.SCHEDULED, RecordAction.CANCEL): HospitalizationStatus.CANCELLED,
        (HospitalizationStatus.ADMITTED, RecordAction.START): HospitalizationStatus.IN_PROGRESS,
        (HospitalizationStatus.IN_PROGRESS, RecordAction.COMPLETE): HospitalizationStatus.COMPLETED,
        (HospitalizationStatus.IN_PROGRESS, RecordAction.DECLARE_DECEASED): HospitalizationStatus.DECEASED,
    },
)

TREATMENT_MACHINE = StatusMachine(
    "Treatment",
    TreatmentStatus,
    {
        (TreatmentStatus.PLANNED, RecordAction.ACTIVATE): TreatmentStatus.ACTIVE,
        (TreatmentStatus.ACTIVE, RecordAction.SUSPEND): TreatmentStatus.SUSPENDED,
        (TreatmentStatus.ACTIVE, RecordAction.FINISH): TreatmentStatus.FINISHED,
        (TreatmentStatus.SUSPENDED, RecordAction.ACTIVATE): TreatmentStatus.ACTIVE,
    },
)

_MACHINES.update({
    SurgeryStatus: SURGERY_MACHINE,
    HospitalizationStatus: HOSPITALIZATION_MACHINE,
    TreatmentStatus: TREATMENT_MACHINE,
})
