"""Record store failure raised by store adapters.

Store adapters sit on I/O boundaries (HTTP, host SDK calls) where failures
arrive as exceptions. They normalize every failure into RecordStoreError so
the recompute handler has one thing to catch, then the handler converts it
into a Failure value for its caller.

Usage:
    raise RecordStoreError(
        code=ErrorCode.RECORD_STORE_UNAVAILABLE,
        message="Dataverse request timed out",
        operation="retrieve",
        entity_name="quote",
    ) from exc
"""

from __future__ import annotations

from src.core.enums import ErrorCode


class RecordStoreError(Exception):
    """Failure talking to the record store (retrieve, query or update).

    Attributes:
        code: Machine-readable error code.
        message: Human-readable message.
        operation: Store operation that failed (retrieve/query/update).
        entity_name: Logical name of the entity involved.
        status_code: HTTP status when the store is a web API.
    """

    def __init__(
        self,
        *,
        code: ErrorCode,
        message: str,
        operation: str,
        entity_name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.operation = operation
        self.entity_name = entity_name
        self.status_code = status_code

    def __repr__(self) -> str:
        return (
            f"RecordStoreError(code={self.code.value!r}, operation={self.operation!r}, "
            f"entity_name={self.entity_name!r}, message={self.message!r})"
        )
