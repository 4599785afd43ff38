"""structlog-backed LoggerProtocol for the webhook service.

The recompute handler logs skips, totals and failures through
LoggerProtocol. When it runs behind the FastAPI webhook those lines go to
stdout via structlog: colored key=value lines for a developer terminal, one
JSON object per line when a collector reads the stream (testing and CI).

Structural subtyping only; ConsoleAdapter does not inherit LoggerProtocol.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def error_fields(error: Exception | None) -> dict[str, str]:
    """Flatten an exception into log context fields.

    Shared by every adapter so a failed recompute is searchable by the same
    ``error_type`` / ``error_message`` keys whichever sink wrote it.
    """
    if error is None:
        return {}
    return {"error_type": type(error).__name__, "error_message": str(error)}


def _processors(use_json: bool) -> list[structlog.types.Processor]:
    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    return [
        # Request-scoped fields such as trace_id bound by the webhook middleware
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        renderer,
    ]


class ConsoleAdapter:
    """Recompute logger writing to stdout.

    Args:
        use_json: Render JSON lines instead of the colored console format.
        level: Lowest level name emitted, e.g. "DEBUG" to see every sibling
            amount the recompute considered.
    """

    def __init__(self, *, use_json: bool = False, level: str = "INFO") -> None:
        structlog.configure(
            processors=_processors(use_json),
            wrapper_class=structlog.make_filtering_bound_logger(
                logging.getLevelNamesMapping()[level.upper()]
            ),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
            cache_logger_on_first_use=True,
        )
        self._logger = structlog.get_logger()

    @classmethod
    def _wrapping(cls, logger: Any) -> ConsoleAdapter:
        # Bound loggers share the process-wide structlog configuration
        adapter = cls.__new__(cls)
        adapter._logger = logger
        return adapter

    def debug(self, message: str, /, **context: Any) -> None:
        self._logger.debug(message, **context)

    def info(self, message: str, /, **context: Any) -> None:
        self._logger.info(message, **context)

    def warning(self, message: str, /, **context: Any) -> None:
        self._logger.warning(message, **context)

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        self._logger.error(message, **context, **error_fields(error))

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        self._logger.critical(message, **context, **error_fields(error))

    def bind(self, **context: Any) -> ConsoleAdapter:
        """Adapter whose every line carries ``context``; self is unchanged."""
        return self._wrapping(self._logger.bind(**context))

    def with_context(self, **context: Any) -> ConsoleAdapter:
        return self.bind(**context)
