"""Domain protocols (ports) package.

Infrastructure adapters implement these protocols without inheritance.

Usage:
    from src.domain.protocols import LoggerProtocol, RecordStoreProtocol
"""

from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.record_store_protocol import RecordStoreProtocol

__all__ = [
    "LoggerProtocol",
    "RecordStoreProtocol",
]
