"""Handler factories.

Handlers are created per invocation: the record store is borrowed from the
host for one event and never shared through a handler instance.
"""

from typing import TYPE_CHECKING

from src.application.commands.handlers.recompute_won_total_handler import (
    RecomputeOpportunityWonTotalHandler,
)
from src.core.config import Settings, settings
from src.core.container.infrastructure import get_logger, get_record_store

if TYPE_CHECKING:
    from src.domain.protocols.logger_protocol import LoggerProtocol
    from src.domain.protocols.record_store_protocol import RecordStoreProtocol


def get_recompute_handler(
    record_store: "RecordStoreProtocol | None" = None,
    logger: "LoggerProtocol | None" = None,
    config: Settings | None = None,
) -> RecomputeOpportunityWonTotalHandler:
    """Build a recompute handler.

    Args:
        record_store: Store borrowed from the host (defaults to the
            application store).
        logger: Diagnostic sink (defaults to the application logger).
        config: Settings override (defaults to environment settings).

    Returns:
        RecomputeOpportunityWonTotalHandler ready for one event.
    """
    return RecomputeOpportunityWonTotalHandler(
        record_store=record_store if record_store is not None else get_record_store(),
        logger=logger if logger is not None else get_logger(),
        settings=config if config is not None else settings,
    )
