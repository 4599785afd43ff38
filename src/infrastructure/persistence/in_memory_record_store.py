"""In-memory record store.

Dict-backed implementation of RecordStoreProtocol for local development
and tests. Each write replaces attribute values, matching the partial
update semantics of the real store. Every call is recorded so callers can
assert on how many reads and writes happened.

Usage:
    store = InMemoryRecordStore()
    store.add(Record("quote", quote_id, {"statuscode": 4, ...}))
    await store.update("opportunity", opp_id, {"new_qoutesamountcurrency": total})
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from src.core.enums import ErrorCode
from src.core.errors import RecordStoreError
from src.domain.value_objects.query_expression import QueryExpression
from src.domain.value_objects.record import Record


@dataclass(frozen=True)
class StoreCall:
    """One call made against the store.

    Attributes:
        operation: retrieve, query or update.
        entity_name: Entity logical name.
        record_id: Record id (None for query).
        payload: Columns, query or written attributes.
    """

    operation: str
    entity_name: str
    record_id: UUID | None = None
    payload: Any = None


@dataclass
class InMemoryRecordStore:
    """RecordStoreProtocol backed by a dict keyed by (entity, id)."""

    records: dict[tuple[str, UUID], dict[str, Any]] = field(default_factory=dict)
    calls: list[StoreCall] = field(default_factory=list)

    def add(self, *records: Record) -> None:
        """Seed records (replacing any with the same key)."""
        for record in records:
            self.records[(record.logical_name, record.id)] = dict(record.attributes)

    def extend(self, records: Iterable[Record]) -> None:
        self.add(*records)

    def snapshot(self, entity_name: str, record_id: UUID) -> Record:
        """Return the full stored record without recording a call."""
        return Record(entity_name, record_id, dict(self._get(entity_name, record_id, "snapshot")))

    def calls_for(self, operation: str) -> list[StoreCall]:
        return [call for call in self.calls if call.operation == operation]

    async def retrieve(
        self, entity_name: str, record_id: UUID, columns: Sequence[str]
    ) -> Record:
        self.calls.append(StoreCall("retrieve", entity_name, record_id, tuple(columns)))
        attributes = self._get(entity_name, record_id, "retrieve")
        return Record(entity_name, record_id, _select(attributes, columns))

    async def query(self, query: QueryExpression) -> list[Record]:
        self.calls.append(StoreCall("query", query.entity_name, None, query))
        matches = []
        for (entity_name, record_id), attributes in self.records.items():
            record = Record(entity_name, record_id, attributes)
            if query.matches(record):
                matches.append(
                    Record(entity_name, record_id, _select(attributes, query.columns))
                )
        return matches

    async def update(
        self, entity_name: str, record_id: UUID, attributes: Mapping[str, Any]
    ) -> None:
        self.calls.append(StoreCall("update", entity_name, record_id, dict(attributes)))
        self._get(entity_name, record_id, "update").update(attributes)

    def _get(self, entity_name: str, record_id: UUID, operation: str) -> dict[str, Any]:
        try:
            return self.records[(entity_name, record_id)]
        except KeyError:
            raise RecordStoreError(
                code=ErrorCode.RECORD_NOT_FOUND,
                message=f"{entity_name} with id {record_id} does not exist",
                operation=operation,
                entity_name=entity_name,
            ) from None


def _select(attributes: Mapping[str, Any], columns: Sequence[str]) -> dict[str, Any]:
    # Absent columns stay absent, mirroring a store that omits null values
    return {name: attributes[name] for name in columns if name in attributes}
