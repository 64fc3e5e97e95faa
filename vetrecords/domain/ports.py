"""Domain Ports - Abstract Contracts for Persistence and Event Publishing.

This module defines the Port interfaces (abstract contracts) that Adapters must implement.
Following Hexagonal Architecture, the Domain Core defines what it needs, not how it's provided.
The core never persists records or transports events itself; it calls out through these ports.

Architecture:
    - Pure abstract interfaces with zero infrastructure dependencies
    - Storage adapters (in-memory, SQL, document stores) implement MedicalRecordRepositoryPort
    - Publishers (logging, message brokers, in-memory) implement DomainEventPublisherPort
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from vetrecords.domain.events import DomainEvent
from vetrecords.domain.medical_record import MedicalRecord


# ============================================================================
# Persistence
# ============================================================================

class MedicalRecordRepositoryPort(ABC):
    """Abstract contract for medical-record persistence.

    Key Principles:
        - Callers persist an aggregate only after a successful operation
        - A record is saved as a whole; there are no partial writes
        - The caller serializes writes per record id

    Example Usage:
        ```python
        record = repository.find_by_id(record_id)
        if record is None:
            raise MedicalRecordNotFoundError(record_id)
        record.apply_action(RecordAction.ADMIT, veterinarian_id)
        repository.save(record)
        ```
    """

    @abstractmethod
    def save(self, record: MedicalRecord) -> None:
        """Insert or replace a record, keyed by its id.

        Parameters:
            record: The aggregate to persist
        """
        pass

    @abstractmethod
    def find_by_id(self, record_id: str) -> Optional[MedicalRecord]:
        """Load a record by id.

        Parameters:
            record_id: Record identifier

        Returns:
            Optional[MedicalRecord]: The record, or None if it does not exist
        """
        pass


# ============================================================================
# Event publishing
# ============================================================================

class DomainEventPublisherPort(ABC):
    """Abstract contract for handing domain events to the outside world.

    Transport and durability are the adapter's concern. Events are published
    after the aggregate that emitted them has been persisted.
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """Publish a single event.

        Parameters:
            event: The immutable domain event
        """
        pass

    def publish_all(self, events: Iterable[DomainEvent]) -> None:
        """Publish events in the order they were emitted.

        Parameters:
            events: Events drained from an aggregate
        """
        for event in events:
            self.publish(event)
