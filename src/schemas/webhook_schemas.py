"""Webhook request and response schemas.

Pydantic schemas for the Dataverse service endpoint (webhook) payload and the
recompute outcome returned to it.

The request body is the host's RemoteExecutionContext serialized as JSON:
PascalCase properties, and collections such as InputParameters and
Target.Attributes serialized as lists of ``{"key": ..., "value": ...}``.
Only the properties the recompute needs are modeled; everything else is
ignored.

Reference:
    - Dataverse "Use webhooks to create external handlers for server events"
"""

from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.application.dtos.recompute_dtos import (
    NoOp,
    Recomputed,
    RecomputeOutcome,
)
from src.core.constants import POST_OPERATION_STAGE, TARGET_PARAMETER
from src.domain.events.quote_events import QuoteChangeEvent


class KeyValuePair(BaseModel):
    """Serialized dictionary entry."""

    model_config = ConfigDict(extra="ignore")

    key: str
    value: Any = None


class TargetEntity(BaseModel):
    """Partial-update payload of the changed record.

    Attributes:
        logical_name: Entity logical name.
        id: Record id.
        attributes: Attributes included in the update.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    logical_name: str = Field(..., alias="LogicalName")
    id: UUID | None = Field(None, alias="Id")
    attributes: list[KeyValuePair] = Field(default_factory=list, alias="Attributes")


class RemoteExecutionContext(BaseModel):
    """Host execution context posted to the webhook.

    Attributes:
        message_name: Host message (e.g., "Update").
        primary_entity_name: Entity logical name.
        primary_entity_id: Changed record id.
        correlation_id: Transaction correlation id.
        initiating_user_id: User whose change fired the step.
        depth: Re-entrancy depth.
        stage: Pipeline stage.
        input_parameters: Message input parameters (Target among them).
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    message_name: str = Field(..., alias="MessageName")
    primary_entity_name: str = Field(..., alias="PrimaryEntityName")
    primary_entity_id: UUID = Field(..., alias="PrimaryEntityId")
    correlation_id: UUID | None = Field(None, alias="CorrelationId")
    initiating_user_id: UUID | None = Field(None, alias="InitiatingUserId")
    depth: int = Field(1, alias="Depth")
    stage: int = Field(POST_OPERATION_STAGE, alias="Stage")
    input_parameters: list[KeyValuePair] = Field(
        default_factory=list, alias="InputParameters"
    )

    def target(self) -> TargetEntity | None:
        """Return the Target input parameter when it is an entity."""
        for parameter in self.input_parameters:
            if parameter.key == TARGET_PARAMETER and isinstance(parameter.value, dict):
                if "LogicalName" in parameter.value:
                    return TargetEntity.model_validate(parameter.value)
        return None

    def to_change_event(self) -> QuoteChangeEvent:
        """Convert to the domain change event.

        The changed attributes are exactly the keys of Target.Attributes; a
        context without an entity Target changed nothing.
        """
        target = self.target()
        changed = (
            frozenset(pair.key for pair in target.attributes) if target else frozenset()
        )
        return QuoteChangeEvent(
            message_name=self.message_name,
            primary_entity_name=self.primary_entity_name,
            primary_entity_id=self.primary_entity_id,
            changed_attributes=changed,
            correlation_id=self.correlation_id,
            initiating_user_id=self.initiating_user_id,
            depth=self.depth,
            stage=self.stage,
        )


class RecomputeOutcomeResponse(BaseModel):
    """Response body for a handled webhook call.

    Attributes:
        outcome: "no_op" or "recomputed".
        reason: Skip reason (no_op only).
        detail: Human-readable skip explanation (no_op only).
        opportunity_id: Opportunity written (recomputed only).
        total: Written total as a decimal string (recomputed only).
        currency: Currency of the total (recomputed only).
        contributing_quote_ids: Quotes summed (recomputed only).
        sibling_count: Other Won quotes found (recomputed only).
    """

    outcome: Literal["no_op", "recomputed"]
    reason: str | None = None
    detail: str | None = None
    opportunity_id: UUID | None = None
    total: str | None = None
    currency: str | None = None
    contributing_quote_ids: list[UUID] = Field(default_factory=list)
    sibling_count: int | None = None

    @classmethod
    def from_outcome(cls, outcome: RecomputeOutcome) -> "RecomputeOutcomeResponse":
        """Build the response from a handler outcome."""
        match outcome:
            case NoOp(reason=reason, detail=detail):
                return cls(outcome="no_op", reason=reason.value, detail=detail)
            case Recomputed() as recomputed:
                return cls(
                    outcome="recomputed",
                    opportunity_id=recomputed.opportunity_id,
                    total=str(recomputed.total.amount),
                    currency=recomputed.total.currency,
                    contributing_quote_ids=list(recomputed.contributing_quote_ids),
                    sibling_count=recomputed.sibling_count,
                )
        raise TypeError(f"Unknown recompute outcome: {outcome!r}")
