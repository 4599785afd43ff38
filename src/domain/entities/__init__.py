"""Domain entities.

Usage:
    from src.domain.entities import Quote
"""

from src.domain.entities.quote import Quote

__all__ = ["Quote"]
