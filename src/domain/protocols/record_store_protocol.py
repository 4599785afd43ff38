"""RecordStoreProtocol for the host's record storage service.

Port (interface) for hexagonal architecture. The store handle is borrowed
from the host per invocation; the handler never owns or caches it.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol
from uuid import UUID

from src.domain.value_objects.query_expression import QueryExpression
from src.domain.value_objects.record import Record


class RecordStoreProtocol(Protocol):
    """Record store protocol (port).

    This is a Protocol (not ABC) for structural typing.
    Implementations don't need to inherit from this.

    Every method raises RecordStoreError when the store call fails.

    Methods:
        retrieve: Fetch one record by id with the requested columns
        query: Fetch every record matching a query expression
        update: Apply a partial update to one record
    """

    async def retrieve(
        self, entity_name: str, record_id: UUID, columns: Sequence[str]
    ) -> Record:
        """Retrieve a single record.

        Args:
            entity_name: Entity logical name.
            record_id: Record identifier.
            columns: Attributes to fetch. Unpopulated ones are absent.

        Returns:
            Record snapshot.

        Raises:
            RecordStoreError: Record not found or store unreachable.
        """
        ...

    async def query(self, query: QueryExpression) -> list[Record]:
        """Retrieve every record matching the query.

        Args:
            query: Entity, columns and filter.

        Returns:
            Matching records (empty if none), in no particular order.

        Raises:
            RecordStoreError: Store unreachable or query rejected.
        """
        ...

    async def update(
        self, entity_name: str, record_id: UUID, attributes: Mapping[str, Any]
    ) -> None:
        """Apply a partial update.

        Only the given attributes change; the values replace what is stored.

        Args:
            entity_name: Entity logical name.
            record_id: Record identifier.
            attributes: Attribute values to write.

        Raises:
            RecordStoreError: Record not found or update rejected.
        """
        ...
