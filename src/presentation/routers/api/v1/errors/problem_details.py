"""RFC 7807 Problem Details for HTTP APIs.

Failed recomputes are reported to the webhook caller as Problem Details.
The host only looks at the status code (non-2xx aborts the operation); the
body is for whoever reads the host's error log.

RFC 7807: https://tools.ietf.org/html/rfc7807

Exports:
    ErrorDetail: Underlying domain error
    ProblemDetails: RFC 7807 compliant error response schema
"""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Underlying domain error behind a failure.

    Attributes:
        source: Where the error came from (store operation, "recompute").
        code: Machine-readable error code
        message: Human-readable error message

    Examples:
        >>> error = ErrorDetail(
        ...     source="update",
        ...     code="record_store_unavailable",
        ...     message="Dataverse update on opportunity timed out",
        ... )
    """

    source: str = Field(..., description="Operation or component that failed")
    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")


class ProblemDetails(BaseModel):
    """RFC 7807 Problem Details for HTTP APIs.

    Attributes:
        type: URI reference identifying the problem type
        title: Short, human-readable summary of the problem type
        status: HTTP status code for this occurrence
        detail: Human-readable explanation specific to this occurrence
        instance: URI reference identifying the specific occurrence
        errors: Optional underlying domain errors
        trace_id: Optional request trace ID for debugging
    """

    type: str = Field(..., description="URI reference identifying the problem type")
    title: str = Field(..., description="Short, human-readable summary")
    status: int = Field(..., description="HTTP status code")
    detail: str = Field(..., description="Human-readable explanation")
    instance: str = Field(..., description="URI reference identifying this occurrence")
    errors: list[ErrorDetail] | None = Field(None, description="Underlying errors")
    trace_id: str | None = Field(None, description="Request trace ID for debugging")
