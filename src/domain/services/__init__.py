"""Domain services (pure functions over entities)."""

from src.domain.services.won_total import (
    WonTotal,
    calculate_won_total,
    won_siblings_query,
)

__all__ = [
    "WonTotal",
    "calculate_won_total",
    "won_siblings_query",
]
