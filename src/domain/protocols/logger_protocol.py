"""Logging port used by the recompute handler.

Two sinks sit behind it: structlog on stdout for the webhook service, and
the host's trace callable when the handler runs as a registered plugin.
Whatever the sink, a line is a short constant message plus key/value
context, and a sink failure never alters the recompute outcome.

Levels as the handler uses them:
    - DEBUG: each sibling amount considered
    - INFO: skips and written totals
    - WARNING: a stale row for the triggering quote was dropped
    - ERROR: the recompute failed and the host rolls back
    - CRITICAL: configuration broken for every invocation

Usage:
    scoped = logger.bind(quote_id=str(quote_id), correlation_id=str(cid))
    scoped.info("Recomputed opportunity total", total="350.00 USD")
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Structured logger: constant message, variable data in ``context``."""

    def debug(self, message: str, /, **context: Any) -> None: ...

    def info(self, message: str, /, **context: Any) -> None: ...

    def warning(self, message: str, /, **context: Any) -> None: ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a failure.

        Args:
            message: Constant message, e.g. "Recompute failed".
            error: Exception behind the failure. Adapters add its type name
                and text to the context.
            **context: Identifiers of the quote and opportunity involved.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Same contract as error(), for failures no invocation can avoid."""
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return a logger that adds ``context`` to every line.

        The receiver is left as it was, so a handler can bind per-invocation
        ids without leaking them into the next invocation.
        """
        ...

    def with_context(self, **context: Any) -> LoggerProtocol:
        """Alias for bind()."""
        ...
