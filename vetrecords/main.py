"""Composition root for the vetrecords medical-record core.

Wires the repository adapter, the domain-event publisher and the domain
services from configuration. The surrounding application (REST layer,
message consumers) calls ``build_services()`` once at startup and then uses
the returned services.

Architecture:
    - Follows Hexagonal Architecture principles
    - Publisher is selected via configuration manager
    - Domain services only ever see the ports
"""

import logging
from dataclasses import dataclass
from typing import Optional

from vetrecords.adapters.storage import InMemoryMedicalRecordRepository
from vetrecords.domain.ports import DomainEventPublisherPort, MedicalRecordRepositoryPort
from vetrecords.domain.services import MedicalRecordCorrectionService, MedicalRecordService
from vetrecords.infrastructure.config_manager import RecordsConfig
from vetrecords.infrastructure.event_publisher import InMemoryDomainEventPublisher, LoggingDomainEventPublisher
from vetrecords.infrastructure.logging_config import setup_logging
from vetrecords.infrastructure.settings import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordServices:
    """Wired services and the adapters behind them."""
    repository: MedicalRecordRepositoryPort
    publisher: DomainEventPublisherPort
    records: MedicalRecordService
    corrections: MedicalRecordCorrectionService


def create_event_publisher(config: RecordsConfig) -> DomainEventPublisherPort:
    """Create the domain-event publisher named by configuration.

    Raises:
        ValueError: If the publisher type is unsupported
    """
    if config.event_publisher == "logging":
        logger.info("Using logging domain event publisher")
        return LoggingDomainEventPublisher()
    elif config.event_publisher == "memory":
        logger.info("Using in-memory domain event publisher")
        return InMemoryDomainEventPublisher()
    else:
        raise ValueError(f"Unsupported event publisher: {config.event_publisher}")


def create_repository() -> MedicalRecordRepositoryPort:
    return InMemoryMedicalRecordRepository()


def configure_logging(config: RecordsConfig) -> None:
    setup_logging(use_json=config.log_json, log_level=config.log_level, service_name=config.service_name)


def build_services(
    config: Optional[RecordsConfig] = None,
    repository: Optional[MedicalRecordRepositoryPort] = None,
    configure_logs: bool = False,
) -> RecordServices:
    """Build the medical-record services.

    Parameters:
        config: Configuration; defaults to the global settings
        repository: Repository adapter; defaults to the in-memory one
        configure_logs: Also configure root logging from ``config``

    Returns:
        RecordServices with every collaborator wired
    """
    if config is None:
        config = settings.records_config
    if configure_logs:
        configure_logging(config)

    repository = repository or create_repository()
    publisher = create_event_publisher(config)
    return RecordServices(
        repository=repository,
        publisher=publisher,
        records=MedicalRecordService(repository, publisher),
        corrections=MedicalRecordCorrectionService(repository, publisher),
    )
