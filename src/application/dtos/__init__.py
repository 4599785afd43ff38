"""Data Transfer Objects (DTOs) for application layer.

Usage:
    from src.application.dtos import NoOp, Recomputed, SkipReason
"""

from src.application.dtos.recompute_dtos import (
    NoOp,
    Recomputed,
    RecomputeOutcome,
    SkipReason,
)

__all__ = [
    "NoOp",
    "Recomputed",
    "RecomputeOutcome",
    "SkipReason",
]
