"""Enums shared by every layer: runtime environment and domain error codes."""

from src.core.enums.environment import Environment
from src.core.enums.error_code import ErrorCode

__all__ = ["Environment", "ErrorCode"]
