"""Reference to another record (lookup value)."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, slots=True)
class EntityReference:
    """Lookup value pointing at a record of another entity.

    Attributes:
        logical_name: Entity logical name of the referenced record.
        id: Referenced record's unique identifier.

    Example:
        >>> ref = EntityReference("opportunity", opportunity_id)
    """

    logical_name: str
    id: UUID

    def __str__(self) -> str:
        return f"{self.logical_name}({self.id})"
