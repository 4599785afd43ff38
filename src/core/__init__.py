"""Shared kernel for the quote total service.

Result types, the error values they carry, and the error codes. Nothing in
here imports from the domain, application or outer layers.
"""

from src.core.enums import ErrorCode
from src.core.errors import DomainError, RecordStoreError
from src.core.result import Failure, Result, Success

__all__ = [
    "DomainError",
    "ErrorCode",
    "Failure",
    "RecordStoreError",
    "Result",
    "Success",
]
