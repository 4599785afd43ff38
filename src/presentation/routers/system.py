"""System router for non-versioned application endpoints.

Lightweight, side-effect free endpoints for health checks and registration
diagnostics.
"""

from fastapi import APIRouter

from src.core.config import settings
from src.presentation.plugin.registration import QUOTE_STATUS_REGISTRATION


system_router = APIRouter(tags=["System"])


@system_router.get("/")
async def root() -> dict[str, str]:
    """Root endpoint - basic status check."""
    return {
        "message": settings.app_name,
        "status": "operational",
        "version": settings.app_version,
    }


@system_router.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint for monitoring and load balancers."""
    return {"status": "healthy"}


@system_router.get("/registration")
async def registration() -> dict[str, object]:
    """Step registration the host must use for the webhook.

    Returns:
        dict: Message, entity, stage, mode and filtering attributes.
    """
    step = QUOTE_STATUS_REGISTRATION
    return {
        "name": step.name,
        "message": step.message,
        "primary_entity": step.primary_entity,
        "stage": step.stage,
        "mode": step.mode.name.lower(),
        "filtering_attributes": sorted(step.filtering_attributes),
        "images": list(step.images),
    }
