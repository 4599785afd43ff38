"""Webhook resource handlers.

Endpoints the host platform calls as a registered service endpoint.

Handlers:
    quote_status_changed - Recompute the opportunity's Won quote total

Register the service endpoint step exactly like the plugin step
(Update of quote, post-operation, synchronous, filtered on the status
attribute). Any non-2xx response makes the host abort the update.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from src.application.commands.handlers.recompute_won_total_handler import (
    RecomputeOpportunityWonTotalHandler,
)
from src.core.container import get_recompute_handler
from src.core.result import Failure
from src.presentation.routers.api.middleware.trace_middleware import get_trace_id
from src.presentation.routers.api.v1.errors import ErrorResponseBuilder
from src.schemas.webhook_schemas import (
    RecomputeOutcomeResponse,
    RemoteExecutionContext,
)

webhooks_router = APIRouter(prefix="/webhooks", tags=["Webhooks"])


def recompute_handler() -> RecomputeOpportunityWonTotalHandler:
    """Provide a fresh handler per request."""
    return get_recompute_handler()


@webhooks_router.post(
    "/quote-status",
    response_model=RecomputeOutcomeResponse,
    status_code=status.HTTP_200_OK,
)
async def quote_status_changed(
    request: Request,
    context: RemoteExecutionContext,
    handler: RecomputeOpportunityWonTotalHandler = Depends(recompute_handler),
) -> RecomputeOutcomeResponse | JSONResponse:
    """Recompute the parent opportunity total after a quote update.

    POST /api/v1/webhooks/quote-status → 200 OK

    Args:
        request: FastAPI request object.
        context: Host execution context.
        handler: Recompute handler (injected).

    Returns:
        RecomputeOutcomeResponse (200) for no-op and recomputed outcomes.
        JSONResponse with RFC 7807 error on failure (non-2xx).
    """
    result = await handler.handle(context.to_change_event())

    if isinstance(result, Failure):
        return ErrorResponseBuilder.from_application_error(
            error=result.error,
            request=request,
            trace_id=get_trace_id() or "",
        )

    return RecomputeOutcomeResponse.from_outcome(result.value)
