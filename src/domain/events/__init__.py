"""Domain events package.

Usage:
    from src.domain.events import QuoteChangeEvent
"""

from src.domain.events.base_event import DomainEvent
from src.domain.events.quote_events import QuoteChangeEvent

__all__ = [
    "DomainEvent",
    "QuoteChangeEvent",
]
