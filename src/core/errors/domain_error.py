"""Domain error value.

A DomainError describes what went wrong (a failed store call, or quote
amounts in two currencies). It is returned inside Failure, never raised, so
it is a plain frozen dataclass rather than an Exception.

Usage:
    from src.core.errors import DomainError
    from src.core.enums import ErrorCode

    return Failure(error=DomainError(
        code=ErrorCode.CURRENCY_MISMATCH,
        message="Cannot add USD and EUR quote amounts",
    ))
"""

from dataclasses import dataclass

from src.core.enums import ErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError:
    """Failure description carried in a Result.

    Attributes:
        code: ErrorCode member.
        message: Text suitable for the host error log.
        details: String context such as the entity name and store operation.
    """

    code: ErrorCode
    message: str
    details: dict[str, str] | None = None

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"
