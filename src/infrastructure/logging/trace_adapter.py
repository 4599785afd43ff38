"""Host trace sink adapter.

Plugin hosts expose a single fire-and-forget ``trace(format, *args)`` sink
(the platform trace log) instead of a logging library. This adapter lets the
recompute handler log against LoggerProtocol while the host keeps its sink.

Lines are rendered as ``LEVEL message key=value ...`` with context keys
sorted, so the trace log reads the same run to run.

Usage:
    logger = TraceServiceAdapter(tracing_service.trace)
    logger.bind(quote_id=str(quote_id)).info("Recompute skipped")
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog

from src.infrastructure.logging.console_adapter import error_fields

TraceSink = Callable[..., Any]


class TraceServiceAdapter:
    """LoggerProtocol over a host ``trace(format, *args)`` callable.

    Sink failures are reported to the module's structlog logger and
    otherwise ignored: tracing must never change the handler's outcome.
    """

    def __init__(self, trace: TraceSink, *, context: dict[str, Any] | None = None) -> None:
        self._trace = trace
        self._context: dict[str, Any] = dict(context or {})

    def debug(self, message: str, /, **context: Any) -> None:
        self._emit("DEBUG", message, context)

    def info(self, message: str, /, **context: Any) -> None:
        self._emit("INFO", message, context)

    def warning(self, message: str, /, **context: Any) -> None:
        self._emit("WARNING", message, context)

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        self._emit("ERROR", message, context | error_fields(error))

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        self._emit("CRITICAL", message, context | error_fields(error))

    def bind(self, **context: Any) -> TraceServiceAdapter:
        return TraceServiceAdapter(self._trace, context=self._context | context)

    def with_context(self, **context: Any) -> TraceServiceAdapter:
        return self.bind(**context)

    def _emit(self, level: str, message: str, context: dict[str, Any]) -> None:
        merged = self._context | context
        fields = " ".join(f"{key}={merged[key]}" for key in sorted(merged))
        line = f"{level} {message}" + (f" {fields}" if fields else "")
        try:
            # Pass as an argument so braces in values are never parsed as format
            self._trace("{0}", line)
        except Exception as e:
            structlog.get_logger(__name__).warning(
                "trace_sink_failed", error=str(e), level=level
            )
