"""Result types for railway-oriented programming.

Handlers return a Result instead of raising so that an expected no-op
(nothing to recompute) and a real failure (record store down) travel
through different, explicit channels.

Usage:
    result = await handler.handle(event)
    match result:
        case Success(value=NoOp(reason=reason)):
            logger.info("Skipped", reason=reason.value)
        case Success(value=Recomputed(total=total)):
            logger.info("Recomputed", total=str(total))
        case Failure(error=error):
            raise PluginExecutionError(error.message)
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Handler completed; ``value`` is the outcome (recomputed or no-op)."""

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Handler could not complete; ``error`` says why."""

    error: E


type Result[T, E] = Success[T] | Failure[E]
