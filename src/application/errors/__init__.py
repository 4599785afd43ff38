"""Failures returned by the recompute handler.

A handler never raises to its caller; it returns ``Failure(ApplicationError)``
whose code tells the presentation layer how to report it.
"""

from src.application.errors.application_error import (
    ApplicationError,
    ApplicationErrorCode,
)

__all__ = ["ApplicationError", "ApplicationErrorCode"]
