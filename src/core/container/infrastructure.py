"""Infrastructure dependency factories.

Application-scoped singletons for infrastructure services:
- Logging (console, JSON in testing/ci)
- Record store (Dataverse Web API, or in-memory when no URL is configured)
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.config import settings

if TYPE_CHECKING:
    from src.domain.protocols.logger_protocol import LoggerProtocol
    from src.domain.protocols.record_store_protocol import RecordStoreProtocol


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Adapter selection is centralized here (composition root):
    - development/production: ConsoleAdapter (human-readable)
    - testing/ci: ConsoleAdapter (JSON)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from src.infrastructure.logging.console_adapter import ConsoleAdapter

    use_json = settings.is_testing or settings.is_ci
    level = "DEBUG" if settings.debug else settings.log_level
    return ConsoleAdapter(use_json=use_json, level=level)


@lru_cache()
def get_record_store() -> "RecordStoreProtocol":
    """Return the application-scoped record store.

    - dataverse_url set: DataverseRecordStore
    - otherwise: InMemoryRecordStore (local development only)

    Returns:
        RecordStoreProtocol: Record store implementing the protocol.
    """
    if settings.dataverse_url:
        from src.infrastructure.dataverse.record_store import DataverseRecordStore

        return DataverseRecordStore(
            base_url=settings.dataverse_url,
            api_version=settings.dataverse_api_version,
            access_token=settings.dataverse_access_token,
            timeout=settings.dataverse_timeout,
        )

    from src.infrastructure.persistence.in_memory_record_store import (
        InMemoryRecordStore,
    )

    get_logger().warning(
        "No dataverse_url configured, using in-memory record store",
        environment=settings.environment.value,
    )
    return InMemoryRecordStore()
