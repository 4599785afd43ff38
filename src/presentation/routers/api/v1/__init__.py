"""API v1 routers.

Resources:
    /api/v1/webhooks/quote-status  - Host service endpoint for quote updates
"""

from fastapi import APIRouter

from src.core.config import settings
from src.presentation.routers.api.v1.webhooks import webhooks_router

v1_router = APIRouter(prefix=settings.api_v1_prefix)
v1_router.include_router(webhooks_router)

__all__ = [
    "v1_router",
]
