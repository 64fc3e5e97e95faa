"""Domain Event Publishers.

Implementations of DomainEventPublisherPort. The logging publisher writes
every event as a structured log line; the in-memory publisher keeps an
append-only buffer, used by tests and by callers that forward events in
batches.

Architecture:
    - Infrastructure layer component
    - Implements DomainEventPublisherPort (Hexagonal Architecture)
"""

import logging
from typing import List, Optional, Type

from vetrecords.domain.events import DomainEvent
from vetrecords.domain.ports import DomainEventPublisherPort

logger = logging.getLogger(__name__)


class LoggingDomainEventPublisher(DomainEventPublisherPort):
    """Publishes events to the application log.

    Each event is logged at INFO with its ``to_log_dict()`` attached as
    ``extra_fields``, which ``RecordLogFormatter`` merges into the JSON line.

    Parameters:
        event_logger: Logger to write to (defaults to this module's logger)
    """

    def __init__(self, event_logger: Optional[logging.Logger] = None):
        self._logger = event_logger or logger

    def publish(self, event: DomainEvent) -> None:
        self._logger.info(
            f"Domain event {event.event_type} ({event.event_id})",
            extra={"extra_fields": event.to_log_dict()},
        )


class InMemoryDomainEventPublisher(DomainEventPublisherPort):
    """Keeps published events in an in-memory, append-only buffer.

    Example Usage:
        ```python
        publisher = InMemoryDomainEventPublisher()
        service = MedicalRecordService(repository, publisher)
        service.register_record(...)
        assert publisher.has_events()
        ```
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def publish(self, event: DomainEvent) -> None:
        self._events.append(event)
        logger.debug(f"Buffered domain event {event.event_type} ({event.event_id})")

    def get_events(self, event_type: Optional[Type[DomainEvent]] = None) -> List[DomainEvent]:
        """Return published events, optionally only those of ``event_type``.

        Parameters:
            event_type: Event class to filter on (subclasses included)

        Returns:
            List of events in publication order
        """
        if event_type is None:
            return list(self._events)
        return [event for event in self._events if isinstance(event, event_type)]

    def clear_events(self) -> None:
        self._events.clear()

    def get_event_count(self) -> int:
        return len(self._events)

    def has_events(self) -> bool:
        return len(self._events) > 0
