"""Turns a failed recompute into an RFC 7807 response.

The host treats any non-2xx answer from the webhook as "abort the quote
update", so every failure code below maps to a 4xx or 5xx status.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from src.application.errors import ApplicationError, ApplicationErrorCode
from src.core.config import settings
from src.presentation.routers.api.v1.errors.problem_details import (
    ErrorDetail,
    ProblemDetails,
)

# (HTTP status, problem title) per application failure
_PROBLEMS: dict[ApplicationErrorCode, tuple[int, str]] = {
    ApplicationErrorCode.COMMAND_EXECUTION_FAILED: (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Recompute Failed",
    ),
    ApplicationErrorCode.EXTERNAL_SERVICE_ERROR: (
        status.HTTP_502_BAD_GATEWAY,
        "Record Store Error",
    ),
    ApplicationErrorCode.NOT_FOUND: (
        status.HTTP_404_NOT_FOUND,
        "Record Not Found",
    ),
}
_FALLBACK = (status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


class ErrorResponseBuilder:
    """Problem Details responses for handler failures.

    Example:
        >>> ErrorResponseBuilder.from_application_error(
        ...     error=result.error, request=request, trace_id=trace_id
        ... )
    """

    @staticmethod
    def from_application_error(
        error: ApplicationError,
        request: Request,
        trace_id: str,
    ) -> JSONResponse:
        """Build the response for one failed recompute.

        The domain error behind the failure, when there is one, is listed in
        ``errors`` with the store operation that raised it as its source.
        """
        status_code, title = _PROBLEMS.get(error.code, _FALLBACK)

        causes: list[ErrorDetail] | None = None
        if error.domain_error is not None:
            operation = (error.domain_error.details or {}).get("operation")
            causes = [
                ErrorDetail(
                    source=operation or "recompute",
                    code=error.domain_error.code.value,
                    message=error.domain_error.message,
                )
            ]

        problem = ProblemDetails(
            type=f"{settings.api_base_url}/errors/{error.code.value}",
            title=title,
            status=status_code,
            detail=error.message,
            instance=str(request.url.path),
            errors=causes,
            trace_id=trace_id,
        )
        return JSONResponse(
            status_code=status_code,
            content=problem.model_dump(mode="json", exclude_none=True),
        )
