"""Domain-level error codes (machine-readable).

Error codes follow ENTITY_ACTION_REASON naming convention.
Used with Result types and RecordStoreError.

Categories:
- Record store errors (RECORD_*)
- Arithmetic errors (CURRENCY_*)
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes (machine-readable).

    Error codes follow ENTITY_ACTION_REASON naming convention.
    """

    # Record store errors
    RECORD_NOT_FOUND = "record_not_found"
    RECORD_STORE_UNAVAILABLE = "record_store_unavailable"
    RECORD_STORE_REJECTED = "record_store_rejected"
    RECORD_MALFORMED = "record_malformed"

    # Arithmetic errors
    CURRENCY_MISMATCH = "currency_mismatch"
