"""Request/response schemas for API endpoints.

All Pydantic models for HTTP request validation and response serialization.
Schemas are kept separate from domain entities (HTTP-layer concerns only).

Usage:
    from src.schemas import RemoteExecutionContext, RecomputeOutcomeResponse
"""

from src.schemas.webhook_schemas import (
    KeyValuePair,
    RecomputeOutcomeResponse,
    RemoteExecutionContext,
    TargetEntity,
)

__all__ = [
    "KeyValuePair",
    "RecomputeOutcomeResponse",
    "RemoteExecutionContext",
    "TargetEntity",
]
