"""Error values carried inside Failure results.

RecordStoreError subclasses DomainError so store failures travel through
the same Result channel as domain validation problems.
"""

from src.core.errors.domain_error import DomainError
from src.core.errors.record_store_error import RecordStoreError

__all__ = ["DomainError", "RecordStoreError"]
