"""Domain enums for business logic.

Available Enums:
    - QuoteStatusCode: Quote status reason (WON drives the total)
    - QuoteStateCode: Quote state (diagnostics only)
"""

from src.domain.enums.quote_status import QuoteStateCode, QuoteStatusCode

__all__ = [
    "QuoteStateCode",
    "QuoteStatusCode",
]
