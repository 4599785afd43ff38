"""Quote change notifications delivered by the host.

The host fires QuoteChangeEvent after an update on a quote has been applied
inside the transaction. The event carries which attributes were part of the
partial update; a quote always *has* a status, so the recompute keys off
whether the status was *in the payload*, not whether the record holds one.
"""

from dataclasses import dataclass, field
from uuid import UUID

from src.core.constants import POST_OPERATION_STAGE, QUOTE_ENTITY, UPDATE_MESSAGE
from src.domain.events.base_event import DomainEvent


@dataclass(frozen=True, kw_only=True, slots=True)
class QuoteChangeEvent(DomainEvent):
    """A record was changed and the host is asking for a reaction.

    Attributes:
        message_name: Host message (e.g., "Update", "Create").
        primary_entity_name: Logical name of the changed record's entity.
        primary_entity_id: Id of the changed record (the triggering quote).
        changed_attributes: Attribute names present in the partial update.
        correlation_id: Host correlation id shared by the whole transaction.
        initiating_user_id: User whose change fired the event.
        depth: Host re-entrancy depth (1 for a direct user change).
        stage: Pipeline stage the host invoked at.

    Example:
        >>> event = QuoteChangeEvent(
        ...     message_name="Update",
        ...     primary_entity_name="quote",
        ...     primary_entity_id=quote_id,
        ...     changed_attributes=frozenset({"statuscode"}),
        ... )
        >>> event.is_quote_update
        True
    """

    message_name: str
    primary_entity_name: str
    primary_entity_id: UUID
    changed_attributes: frozenset[str] = field(default_factory=frozenset)
    correlation_id: UUID | None = None
    initiating_user_id: UUID | None = None
    depth: int = 1
    stage: int = POST_OPERATION_STAGE

    @property
    def is_quote_update(self) -> bool:
        """True only for the Update message on the quote entity."""
        return (
            self.message_name == UPDATE_MESSAGE
            and self.primary_entity_name == QUOTE_ENTITY
        )

    def changed(self, attribute: str) -> bool:
        """Return True when the attribute was part of this update's payload."""
        return attribute in self.changed_attributes
