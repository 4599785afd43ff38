"""Recompute DTOs (Data Transfer Objects).

Outcomes returned inside Success by the recompute handler. A failed
recompute is a Failure(ApplicationError), never an outcome.

DTOs:
    - SkipReason: Why an invocation did nothing
    - NoOp: Invocation ended without touching the store's data
    - Recomputed: Opportunity total was written exactly once
"""

from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID

from src.domain.value_objects.money import Money


class SkipReason(str, Enum):
    """Why the handler ended without a write.

    NOT_QUOTE_UPDATE and STATUS_NOT_CHANGED are guard skips (no store call
    at all). STATUS_MISSING and OPPORTUNITY_MISSING are missing-data skips
    (the quote was read, nothing was written).
    """

    NOT_QUOTE_UPDATE = "not_quote_update"
    STATUS_NOT_CHANGED = "status_not_changed"
    STATUS_MISSING = "status_missing"
    OPPORTUNITY_MISSING = "opportunity_missing"

    @property
    def is_guard_skip(self) -> bool:
        return self in (SkipReason.NOT_QUOTE_UPDATE, SkipReason.STATUS_NOT_CHANGED)


@dataclass(frozen=True)
class NoOp:
    """Invocation performed no store mutation.

    Attributes:
        reason: Machine-readable skip reason.
        detail: Human-readable explanation.
    """

    reason: SkipReason
    detail: str


@dataclass(frozen=True)
class Recomputed:
    """Opportunity total was recomputed and written.

    Attributes:
        opportunity_id: Opportunity that received the total.
        total: Value written to the aggregate field.
        contributing_quote_ids: Quotes whose amounts were summed.
        sibling_count: Won siblings returned by the query (before the
            positivity rule).
    """

    opportunity_id: UUID
    total: Money
    contributing_quote_ids: tuple[UUID, ...] = field(default_factory=tuple)
    sibling_count: int = 0


type RecomputeOutcome = NoOp | Recomputed
