"""Plugin step registration metadata.

Describes how the host must register the recompute so it fires only where it
is meaningful: synchronously, after the quote update is applied but before
the transaction commits, and only when the status attribute is in the update.
A failure then rolls back the status change along with everything else.
"""

from dataclasses import dataclass, field
from enum import Enum

from src.core.config import settings
from src.core.constants import (
    HANDLER_NAME,
    POST_OPERATION_STAGE,
    QUOTE_ENTITY,
    UPDATE_MESSAGE,
)


class ExecutionMode(int, Enum):
    """Host execution mode of a plugin step."""

    SYNCHRONOUS = 0
    ASYNCHRONOUS = 1


@dataclass(frozen=True, kw_only=True)
class PluginStepRegistration:
    """One plugin step registration.

    Attributes:
        name: Step display name.
        message: Host message the step listens to.
        primary_entity: Entity the message must target.
        stage: Pipeline stage number.
        mode: Synchronous or asynchronous execution.
        filtering_attributes: Attributes whose presence in the update
            fires the step. Empty means any update fires it.
        images: Pre/post entity images requested (none needed).
    """

    name: str
    message: str
    primary_entity: str
    stage: int
    mode: ExecutionMode
    filtering_attributes: frozenset[str] = field(default_factory=frozenset)
    images: tuple[str, ...] = ()


QUOTE_STATUS_REGISTRATION = PluginStepRegistration(
    name=f"{HANDLER_NAME}: {UPDATE_MESSAGE} of {QUOTE_ENTITY} status",
    message=UPDATE_MESSAGE,
    primary_entity=QUOTE_ENTITY,
    stage=POST_OPERATION_STAGE,
    mode=ExecutionMode.SYNCHRONOUS,
    filtering_attributes=frozenset({settings.quote_status_attribute}),
)
