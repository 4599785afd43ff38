"""Opportunity quote sum plugin.

Host-facing entry point. The host hands over the change event together with
the collaborators it owns for this invocation (record store, trace sink);
the plugin wires a fresh handler, runs it, and turns a Failure into the one
exception type hosts understand as "abort the operation".

Usage:
    plugin = OpportunityQuoteSumPlugin.for_trace_sink(store, tracing.trace)
    outcome = await plugin.execute(event)  # NoOp | Recomputed
"""

from src.application.dtos.recompute_dtos import RecomputeOutcome
from src.application.errors import ApplicationError
from src.core.config import Settings
from src.core.container import get_recompute_handler
from src.core.result import Failure, Success
from src.domain.events.quote_events import QuoteChangeEvent
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.record_store_protocol import RecordStoreProtocol
from src.infrastructure.logging.trace_adapter import TraceServiceAdapter, TraceSink
from src.presentation.plugin.registration import QUOTE_STATUS_REGISTRATION


class PluginExecutionError(Exception):
    """Raised to the host when a recompute fails.

    The message is the human-readable summary; ``__cause__`` is the original
    exception and ``error`` keeps the full diagnostic details.
    """

    def __init__(self, error: ApplicationError) -> None:
        super().__init__(error.message)
        self.error = error


class OpportunityQuoteSumPlugin:
    """Recomputes an opportunity's Won quote total on quote status change."""

    registration = QUOTE_STATUS_REGISTRATION

    def __init__(
        self,
        record_store: RecordStoreProtocol,
        logger: LoggerProtocol,
        config: Settings | None = None,
    ) -> None:
        self._record_store = record_store
        self._logger = logger
        self._config = config

    @classmethod
    def for_trace_sink(
        cls,
        record_store: RecordStoreProtocol,
        trace: TraceSink,
        config: Settings | None = None,
    ) -> "OpportunityQuoteSumPlugin":
        """Build a plugin logging through the host's ``trace(format, *args)``."""
        return cls(record_store, TraceServiceAdapter(trace), config)

    async def execute(self, event: QuoteChangeEvent) -> RecomputeOutcome:
        """Run the recompute for one event.

        Args:
            event: Host change notification.

        Returns:
            NoOp or Recomputed outcome.

        Raises:
            PluginExecutionError: The recompute failed; the host should
                abort the triggering operation.
        """
        handler = get_recompute_handler(
            record_store=self._record_store,
            logger=self._logger,
            config=self._config,
        )
        result = await handler.handle(event)

        match result:
            case Success(value=outcome):
                return outcome
            case Failure(error=error):
                raise PluginExecutionError(error) from error.cause
