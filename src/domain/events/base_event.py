"""Base domain event class.

Domain events represent "things that happened" and are named in past tense.
In this service the only event is the host's notification that a quote was
updated; it is created per invocation and never persisted.

Architecture:
    - Frozen dataclass (immutable after creation)
    - Auto-generated event_id (UUID v7, time-ordered) for correlation
    - occurred_at timestamp (UTC)
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from uuid_extensions import uuid7


@dataclass(frozen=True, kw_only=True, slots=True)
class DomainEvent:
    """Base class for all domain events.

    Attributes:
        event_id: Unique identifier for this event instance. Auto-generated
            when the host does not supply one.
        occurred_at: Timestamp when the event occurred (UTC).
    """

    event_id: UUID = field(default_factory=uuid7)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))
