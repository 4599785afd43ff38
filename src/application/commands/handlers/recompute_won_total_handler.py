"""RecomputeOpportunityWonTotal handler.

Reacts to a quote status change by rewriting the parent opportunity's total
of Won quote amounts.

Flow:
1. Guard: Update on quote, with the status attribute in the payload
2. Retrieve the triggering quote (post-update state)
3. Query the other Won quotes of the same opportunity
4. Sum siblings plus the triggering quote when it is Won
5. Write the total to the opportunity (single partial update, last call)

Architecture:
- Application layer handler (orchestrates domain logic)
- Record store, logger and settings injected per instance; no module state
- Uses Result types: Success(NoOp | Recomputed) or Failure(ApplicationError)
- Nothing is retried; the host decides what a Failure means (it rolls back)

Concurrency:
    Two quotes of one opportunity changing at once both recompute from a
    fresh query and the last write wins. The total may be briefly wrong
    until the next status change recomputes it.
"""

import traceback

from src.application.dtos.recompute_dtos import (
    NoOp,
    Recomputed,
    RecomputeOutcome,
    SkipReason,
)
from src.application.errors import ApplicationError, ApplicationErrorCode
from src.core.config import Settings
from src.core.constants import HANDLER_NAME, OPPORTUNITY_ENTITY, QUOTE_ENTITY
from src.core.enums import ErrorCode
from src.core.errors import DomainError, RecordStoreError
from src.core.result import Failure, Result, Success
from src.domain.entities.quote import Quote
from src.domain.events.quote_events import QuoteChangeEvent
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.record_store_protocol import RecordStoreProtocol
from src.domain.services.won_total import calculate_won_total, won_siblings_query
from src.domain.value_objects.money import CurrencyMismatchError
from src.domain.value_objects.record import Record


class RecomputeOpportunityWonTotalHandler:
    """Handler for quote status change events.

    Dependencies (injected via constructor):
        - RecordStoreProtocol: Host record storage, borrowed per invocation
        - LoggerProtocol: Diagnostic sink
        - Settings: Attribute names and the Won status value
    """

    def __init__(
        self,
        record_store: RecordStoreProtocol,
        logger: LoggerProtocol,
        settings: Settings,
    ) -> None:
        """Initialize handler with dependencies.

        Args:
            record_store: Store used for retrieve/query/update.
            logger: Structured logger.
            settings: Schema configuration.
        """
        self._record_store = record_store
        self._logger = logger
        self._settings = settings

    async def handle(
        self, event: QuoteChangeEvent
    ) -> Result[RecomputeOutcome, ApplicationError]:
        """Handle one quote change event.

        Args:
            event: Host notification for the changed quote.

        Returns:
            Success(NoOp): Guard or missing data, no store mutation.
            Success(Recomputed): Opportunity total written once.
            Failure(ApplicationError): Store or data failure after the guard.
        """
        log = self._logger.bind(
            handler=HANDLER_NAME,
            quote_id=str(event.primary_entity_id),
            correlation_id=str(event.correlation_id or event.event_id),
        )
        log.debug(
            "Recompute started",
            message_name=event.message_name,
            entity_name=event.primary_entity_name,
            depth=event.depth,
        )

        # Step 1: Relevance guard (no store calls)
        if not event.is_quote_update:
            return self._skip(
                log,
                SkipReason.NOT_QUOTE_UPDATE,
                f"{event.message_name} on {event.primary_entity_name} is not a quote update",
            )

        status_attribute = self._settings.quote_status_attribute
        if not event.changed(status_attribute):
            return self._skip(
                log,
                SkipReason.STATUS_NOT_CHANGED,
                f"'{status_attribute}' was not part of this update",
            )

        try:
            return await self._recompute(event, log)
        except Exception as e:
            # Catch-all: store failures, malformed records, anything else
            return self._fail(log, e)

    async def _recompute(
        self, event: QuoteChangeEvent, log: LoggerProtocol
    ) -> Result[RecomputeOutcome, ApplicationError]:
        settings = self._settings

        # Step 2: Current quote, post-update
        record = await self._record_store.retrieve(
            QUOTE_ENTITY,
            event.primary_entity_id,
            (
                settings.quote_status_attribute,
                settings.quote_parent_attribute,
                settings.quote_amount_attribute,
            ),
        )
        current = self._to_quote(record)
        log.debug(
            "Retrieved current quote",
            status_code=current.status_code,
            amount=str(current.amount) if current.amount else None,
        )

        if not current.has_status:
            return self._skip(
                log,
                SkipReason.STATUS_MISSING,
                f"Quote has no '{settings.quote_status_attribute}' value",
            )

        opportunity = current.opportunity
        if opportunity is None:
            return self._skip(
                log,
                SkipReason.OPPORTUNITY_MISSING,
                f"Quote has no '{settings.quote_parent_attribute}' reference",
            )

        log = log.bind(opportunity_id=str(opportunity.id))

        # Step 3: Other Won quotes (triggering quote excluded)
        query = won_siblings_query(
            opportunity_id=opportunity.id,
            excluded_quote_id=current.id,
            parent_attribute=settings.quote_parent_attribute,
            status_attribute=settings.quote_status_attribute,
            amount_attribute=settings.quote_amount_attribute,
            won_status_code=settings.won_status_code,
        )
        siblings = [self._to_quote(r) for r in await self._record_store.query(query)]
        log.debug("Found other Won quotes", sibling_count=len(siblings))
        for sibling in siblings:
            if sibling.id == current.id:
                log.warning(
                    "Query returned the triggering quote, using in-hand snapshot",
                    stored_amount=str(sibling.amount) if sibling.amount else None,
                )
                continue
            log.debug(
                "Considering Won quote",
                sibling_id=str(sibling.id),
                amount=str(sibling.amount) if sibling.amount else None,
                state_code=sibling.state_code,
            )

        # Step 4: Aggregate (triggering quote merged from memory)
        won_total = calculate_won_total(
            siblings,
            current,
            default_currency=settings.default_currency,
            won_status_code=settings.won_status_code,
        )
        if not current.is_won(settings.won_status_code):
            log.debug(
                "Current quote not Won, excluded from total",
                status_code=current.status_code,
            )

        # Step 5: Write-back, always the last store call
        await self._record_store.update(
            OPPORTUNITY_ENTITY,
            opportunity.id,
            {settings.opportunity_total_attribute: won_total.total},
        )

        log.info(
            "Opportunity total recomputed",
            total=str(won_total.total),
            contributing_count=won_total.contributing_count,
            sibling_count=len(siblings),
        )
        return Success(
            value=Recomputed(
                opportunity_id=opportunity.id,
                total=won_total.total,
                contributing_quote_ids=won_total.contributing_quote_ids,
                sibling_count=len(siblings),
            )
        )

    def _to_quote(self, record: Record) -> Quote:
        return Quote.from_record(
            record,
            status_attribute=self._settings.quote_status_attribute,
            parent_attribute=self._settings.quote_parent_attribute,
            amount_attribute=self._settings.quote_amount_attribute,
            default_currency=self._settings.default_currency,
        )

    def _skip(
        self, log: LoggerProtocol, reason: SkipReason, detail: str
    ) -> Result[RecomputeOutcome, ApplicationError]:
        # Guard skips fire on every unrelated quote update
        emit = log.debug if reason.is_guard_skip else log.info
        emit("Recompute skipped", reason=reason.value, detail=detail)
        return Success(value=NoOp(reason=reason, detail=detail))

    def _fail(
        self, log: LoggerProtocol, error: Exception
    ) -> Result[RecomputeOutcome, ApplicationError]:
        inner = error.__cause__ or error.__context__
        details = {
            "error_type": type(error).__name__,
            "error_message": str(error),
            "stack_trace": "".join(traceback.format_exception(error)),
        }
        if inner is not None:
            details["inner_error_message"] = str(inner)

        log.error(
            "Recompute failed",
            error=error,
            stack_trace=details["stack_trace"],
            inner_error_message=details.get("inner_error_message"),
        )

        code, domain_error = _classify(error)
        return Failure(
            error=ApplicationError(
                code=code,
                message=f"{HANDLER_NAME} failed: {error}",
                domain_error=domain_error,
                details=details,
                cause=error,
            )
        )


def _classify(error: Exception) -> tuple[ApplicationErrorCode, DomainError | None]:
    """Map a caught exception to an application code and domain error."""
    if isinstance(error, RecordStoreError):
        domain_error = DomainError(
            code=error.code,
            message=error.message,
            details={"operation": error.operation, "entity_name": error.entity_name or ""},
        )
        if error.code is ErrorCode.RECORD_NOT_FOUND:
            return ApplicationErrorCode.NOT_FOUND, domain_error
        return ApplicationErrorCode.EXTERNAL_SERVICE_ERROR, domain_error

    if isinstance(error, CurrencyMismatchError):
        return ApplicationErrorCode.COMMAND_EXECUTION_FAILED, DomainError(
            code=ErrorCode.CURRENCY_MISMATCH,
            message=str(error),
            details={"currencies": f"{error.currency1},{error.currency2}"},
        )

    return ApplicationErrorCode.COMMAND_EXECUTION_FAILED, None
