"""Raw record snapshot as returned by a record store.

A Record is the untyped attribute bag of the hosting platform. It only
lives at the store boundary: handlers convert it to a typed entity
(see src/domain/entities/quote.py) before applying business rules.

Presence matters. An attribute can be absent (not in the column set or
never populated) or present with a None value; the two are distinguished
by contains() versus get().
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Record:
    """Snapshot of one stored record.

    Attributes:
        logical_name: Entity logical name (e.g., "quote").
        id: Record's unique identifier.
        attributes: Attribute values keyed by logical attribute name.
    """

    logical_name: str
    id: UUID
    attributes: Mapping[str, Any] = field(default_factory=dict)

    @property
    def primary_key(self) -> str:
        """Primary key attribute name (``<logical_name>id``)."""
        return f"{self.logical_name}id"

    def contains(self, name: str) -> bool:
        """Return True when the attribute is present, even if None."""
        return name == self.primary_key or name in self.attributes

    def get(self, name: str, default: Any = None) -> Any:
        """Return an attribute value, the record id for the primary key."""
        if name == self.primary_key:
            return self.id
        return self.attributes.get(name, default)
