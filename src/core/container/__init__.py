"""Container module - Centralized dependency injection.

The container is organized into modules:
- infrastructure: Logger and record store
- handlers: Recompute handler factory

Usage:
    from src.core.container import get_logger, get_recompute_handler
"""

from src.core.container.handlers import get_recompute_handler
from src.core.container.infrastructure import get_logger, get_record_store

__all__ = [
    "get_logger",
    "get_recompute_handler",
    "get_record_store",
]
