"""
Main FastAPI application entry point.

Hosts the webhook the platform calls on quote status changes, plus system
endpoints. The recompute itself lives in the application layer and is
shared with the in-process plugin entry point.
"""

from fastapi import FastAPI

from src.core.config import settings
from src.presentation.routers.api.middleware.trace_middleware import TraceMiddleware
from src.presentation.routers.api.v1 import v1_router
from src.presentation.routers.api.v1.errors import register_exception_handlers
from src.presentation.routers.system import system_router


app = FastAPI(
    title=settings.app_name,
    description="Recomputes opportunity totals from Won quotes",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    debug=settings.debug,
)

# Wire trace middleware (request correlation)
app.add_middleware(TraceMiddleware)

# Register global exception handlers (RFC 7807 error responses)
register_exception_handlers(app)

app.include_router(system_router)
app.include_router(v1_router)
