"""Application layer error types.

Application errors wrap whatever went wrong inside a handler (store failure,
malformed record, currency mismatch, anything unexpected) into one value the
entry points can turn into a host failure.

Exports:
    ApplicationErrorCode: Application-level error code enum
    ApplicationError: Application layer error dataclass
"""

from dataclasses import dataclass
from enum import Enum

from src.core.errors.domain_error import DomainError


class ApplicationErrorCode(Enum):
    """Application-level error codes.

    Examples:
        >>> error = ApplicationError(
        ...     code=ApplicationErrorCode.EXTERNAL_SERVICE_ERROR,
        ...     message="OpportunityQuoteSumPlugin failed: request timed out",
        ... )
    """

    COMMAND_EXECUTION_FAILED = "command_execution_failed"
    EXTERNAL_SERVICE_ERROR = "external_service_error"
    NOT_FOUND = "not_found"


@dataclass(frozen=True, slots=True, kw_only=True)
class ApplicationError:
    """Application layer error.

    Attributes:
        code: Application error code (from ApplicationErrorCode enum)
        message: Human-readable summary, prefixed with the handler name
        domain_error: Original domain error (if error originated from domain layer)
        details: Diagnostic context (error_type, stack_trace, inner_error_message)
        cause: Original exception, kept so entry points can chain it

    Examples:
        >>> error = ApplicationError(
        ...     code=ApplicationErrorCode.COMMAND_EXECUTION_FAILED,
        ...     message="OpportunityQuoteSumPlugin failed: boom",
        ...     details={"error_type": "RuntimeError"},
        ...     cause=exc,
        ... )
    """

    code: ApplicationErrorCode
    message: str
    domain_error: DomainError | None = None
    details: dict[str, str] | None = None
    cause: Exception | None = None

    def __str__(self) -> str:
        return self.message
