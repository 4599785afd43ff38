"""Centralized constants for internal implementation details.

This module contains constants that are fixed by the hosting platform's
schema or by this service's contract, NOT environment-specific
configuration. For configurable attribute names use `src/core/config.py`.

Categories:
- Entities: Logical names and primary keys
- Messages: Host message names and pipeline stages
- Timeouts: Default timeouts for external service calls
- Limits: Truncation and safety limits
"""

# =============================================================================
# Entities
# =============================================================================

QUOTE_ENTITY: str = "quote"
"""Logical name of the child entity whose status drives the recompute."""

QUOTE_PRIMARY_KEY: str = "quoteid"
"""Primary key attribute of the quote entity."""

QUOTE_NAME_ATTRIBUTE: str = "name"
"""Display name of a quote (diagnostics only)."""

QUOTE_STATE_ATTRIBUTE: str = "statecode"
"""State attribute of a quote (read, never filtered on)."""

OPPORTUNITY_ENTITY: str = "opportunity"
"""Logical name of the aggregation target entity."""


# =============================================================================
# Messages
# =============================================================================

UPDATE_MESSAGE: str = "Update"
"""Host message name for record updates."""

TARGET_PARAMETER: str = "Target"
"""Input parameter carrying the partial-update payload."""

POST_OPERATION_STAGE: int = 40
"""Pipeline stage after the core operation, inside the transaction."""

HANDLER_NAME: str = "OpportunityQuoteSumPlugin"
"""Name used as prefix of failure summaries surfaced to the host."""


# =============================================================================
# Timeouts and Limits
# =============================================================================

RECORD_STORE_TIMEOUT_DEFAULT: float = 30.0
"""Default HTTP timeout in seconds for record store calls."""

RESPONSE_BODY_MAX_LENGTH: int = 500
"""Maximum characters of an error response body kept in error messages."""
