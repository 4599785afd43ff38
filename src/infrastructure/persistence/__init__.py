"""Record persistence infrastructure.

This module provides the dict-backed record store used for local
development (no Dataverse URL configured) and by the test suite.
"""

from src.infrastructure.persistence.in_memory_record_store import (
    InMemoryRecordStore,
    StoreCall,
)

__all__ = [
    "InMemoryRecordStore",
    "StoreCall",
]
