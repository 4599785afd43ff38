"""Unit tests for RecomputeOpportunityWonTotalHandler.

Tests the recompute handler against the in-memory record store (for the
end-to-end arithmetic) and against mocked stores (for failure injection and
stale-read simulation).
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from uuid_extensions import uuid7

from src.application.commands.handlers.recompute_won_total_handler import (
    RecomputeOpportunityWonTotalHandler,
)
from src.application.dtos import NoOp, Recomputed, SkipReason
from src.application.errors import ApplicationErrorCode
from src.core.enums import ErrorCode
from src.core.errors import RecordStoreError
from src.core.result import Failure, Success
from src.domain.enums import QuoteStateCode, QuoteStatusCode
from src.domain.protocols.record_store_protocol import RecordStoreProtocol
from src.domain.value_objects.money import Money
from src.domain.value_objects.query_expression import ConditionOperator
from src.infrastructure.persistence.in_memory_record_store import InMemoryRecordStore
from tests.conftest import (
    AMOUNT,
    OMIT,
    TOTAL,
    change_event,
    make_settings,
    opportunity_record,
    quote_record,
    usd,
)


# =============================================================================
# Test Fixtures
# =============================================================================


def create_handler(store, logger, settings=None) -> RecomputeOpportunityWonTotalHandler:
    return RecomputeOpportunityWonTotalHandler(
        record_store=store,
        logger=logger,
        settings=settings or make_settings(),
    )


def seed_opportunity(store: InMemoryRecordStore, sibling_amounts, **current_kwargs):
    """Seed an opportunity, Won siblings and the triggering quote.

    Returns:
        (opportunity_id, current_quote_id)
    """
    opportunity_id = uuid7()
    store.add(opportunity_record(opportunity_id))
    for amount in sibling_amounts:
        store.add(quote_record(opportunity_id=opportunity_id, amount=amount))
    current = quote_record(opportunity_id=opportunity_id, **current_kwargs)
    store.add(current)
    return opportunity_id, current.id


def written_total(store: InMemoryRecordStore, opportunity_id) -> Money:
    return store.snapshot("opportunity", opportunity_id).get(TOTAL)


# =============================================================================
# Scenario Tests
# =============================================================================


@pytest.mark.unit
class TestRecomputeScenarios:
    """Status transitions into and out of Won."""

    async def test_quote_changed_to_won_adds_its_amount(self, store, logger):
        opportunity_id, quote_id = seed_opportunity(
            store, ["100", "200"], status=QuoteStatusCode.WON, amount="50"
        )
        handler = create_handler(store, logger)

        result = await handler.handle(change_event(quote_id))

        assert isinstance(result, Success)
        assert isinstance(result.value, Recomputed)
        assert result.value.total == usd("350")
        assert result.value.opportunity_id == opportunity_id
        assert result.value.sibling_count == 2
        assert written_total(store, opportunity_id) == usd("350")

    async def test_quote_changed_from_won_drops_its_amount(self, store, logger):
        opportunity_id, quote_id = seed_opportunity(
            store, ["100", "200"], status=QuoteStatusCode.IN_PROGRESS_DRAFT, amount="50"
        )
        handler = create_handler(store, logger)

        result = await handler.handle(change_event(quote_id))

        assert isinstance(result, Success)
        assert result.value.total == usd("300")
        assert quote_id not in result.value.contributing_quote_ids
        assert written_total(store, opportunity_id) == usd("300")

    async def test_null_sibling_amount_contributes_nothing(self, store, logger):
        opportunity_id, quote_id = seed_opportunity(
            store, [None, "75.25"], status=QuoteStatusCode.WON, amount="24.75"
        )
        handler = create_handler(store, logger)

        result = await handler.handle(change_event(quote_id))

        assert isinstance(result, Success)
        assert written_total(store, opportunity_id) == usd("100.00")

    async def test_zero_and_negative_amounts_are_not_subtracted(self, store, logger):
        opportunity_id, quote_id = seed_opportunity(
            store, ["0", "-40", "10"], status=QuoteStatusCode.WON, amount="-5"
        )
        handler = create_handler(store, logger)

        result = await handler.handle(change_event(quote_id))

        assert isinstance(result, Success)
        assert result.value.total == usd("10")
        assert result.value.sibling_count == 3
        assert len(result.value.contributing_quote_ids) == 1

    async def test_organization_currency_outside_majors(self, store, logger):
        """Bare amounts take the configured currency, whatever ISO code it is."""
        settings = make_settings(default_currency="IRR")
        opportunity_id, quote_id = seed_opportunity(
            store, [Decimal("100")], status=QuoteStatusCode.WON, amount=Decimal("50")
        )
        handler = create_handler(store, logger, settings)

        result = await handler.handle(change_event(quote_id))

        assert isinstance(result, Success)
        assert result.value.total == Money(Decimal("150"), "IRR")
        assert written_total(store, opportunity_id) == Money(Decimal("150"), "IRR")

    async def test_zero_total_in_organization_currency(self, store, logger):
        settings = make_settings(default_currency="AED")
        opportunity_id, quote_id = seed_opportunity(
            store, [], status=QuoteStatusCode.LOST, amount=Decimal("10")
        )
        handler = create_handler(store, logger, settings)

        result = await handler.handle(change_event(quote_id))

        assert isinstance(result, Success)
        assert written_total(store, opportunity_id) == Money.zero("AED")

    async def test_no_won_quotes_writes_zero(self, store, logger):
        opportunity_id, quote_id = seed_opportunity(
            store, [], status=QuoteStatusCode.LOST, amount="500"
        )
        handler = create_handler(store, logger)

        result = await handler.handle(change_event(quote_id))

        assert isinstance(result, Success)
        assert written_total(store, opportunity_id) == Money.zero("USD")

    async def test_non_won_and_foreign_quotes_are_ignored(self, store, logger):
        opportunity_id, quote_id = seed_opportunity(
            store, ["100"], status=QuoteStatusCode.WON, amount="1"
        )
        store.add(
            quote_record(
                opportunity_id=opportunity_id,
                status=QuoteStatusCode.LOST,
                amount="1000",
            ),
            quote_record(opportunity_id=uuid7(), amount="5000"),
        )
        handler = create_handler(store, logger)

        result = await handler.handle(change_event(quote_id))

        assert isinstance(result, Success)
        assert written_total(store, opportunity_id) == usd("101")

    async def test_won_quotes_count_regardless_of_state(self, store, logger):
        """Won quotes are summed whatever their state (draft/active/closed).

        Whether deactivated Won quotes should be excluded is an open product
        question; this pins the current inclusive behavior.
        """
        opportunity_id = uuid7()
        store.add(opportunity_record(opportunity_id))
        for state in QuoteStateCode:
            store.add(
                quote_record(opportunity_id=opportunity_id, amount="10", state=state)
            )
        current = quote_record(
            opportunity_id=opportunity_id, status=QuoteStatusCode.OPEN, amount="99"
        )
        store.add(current)
        handler = create_handler(store, logger)

        result = await handler.handle(change_event(current.id))

        assert isinstance(result, Success)
        assert written_total(store, opportunity_id) == usd("40")


# =============================================================================
# Guard and Missing Data Tests
# =============================================================================


@pytest.mark.unit
class TestNoOpPaths:
    """Invocations that end without a write."""

    async def test_status_not_in_payload_makes_no_store_calls(self, logger):
        store = AsyncMock(spec=RecordStoreProtocol)
        handler = create_handler(store, logger)

        result = await handler.handle(
            change_event(uuid7(), changed=frozenset({"name", AMOUNT}))
        )

        assert isinstance(result, Success)
        assert result.value == NoOp(
            reason=SkipReason.STATUS_NOT_CHANGED,
            detail="'statuscode' was not part of this update",
        )
        store.retrieve.assert_not_called()
        store.query.assert_not_called()
        store.update.assert_not_called()

    @pytest.mark.parametrize(
        ("message_name", "entity_name"),
        [("Create", "quote"), ("Update", "opportunity"), ("Delete", "quote")],
    )
    async def test_other_messages_are_ignored(self, logger, message_name, entity_name):
        store = AsyncMock(spec=RecordStoreProtocol)
        handler = create_handler(store, logger)

        result = await handler.handle(
            change_event(uuid7(), message_name=message_name, entity_name=entity_name)
        )

        assert isinstance(result, Success)
        assert result.value.reason is SkipReason.NOT_QUOTE_UPDATE
        assert store.mock_calls == []

    async def test_quote_without_opportunity_is_skipped(self, store, logger):
        current = quote_record(opportunity_id=None, amount="50")
        store.add(current)
        handler = create_handler(store, logger)

        result = await handler.handle(change_event(current.id))

        assert isinstance(result, Success)
        assert result.value.reason is SkipReason.OPPORTUNITY_MISSING
        assert store.calls_for("query") == []
        assert store.calls_for("update") == []

    async def test_quote_without_status_is_skipped(self, store, logger):
        current = quote_record(status=OMIT, amount="50")
        store.add(current)
        handler = create_handler(store, logger)

        result = await handler.handle(change_event(current.id))

        assert isinstance(result, Success)
        assert result.value.reason is SkipReason.STATUS_MISSING
        assert store.calls_for("update") == []

    async def test_guard_skip_is_logged_at_debug(self, store, logger):
        handler = create_handler(store, logger)

        await handler.handle(change_event(uuid7(), changed=frozenset()))

        logger.info.assert_not_called()
        assert logger.debug.call_args.kwargs["reason"] == "status_not_changed"

    async def test_missing_data_skip_is_logged_at_info(self, store, logger):
        current = quote_record(opportunity_id=None, amount="50")
        store.add(current)
        handler = create_handler(store, logger)

        await handler.handle(change_event(current.id))

        logger.info.assert_called_once()
        assert logger.info.call_args.kwargs["reason"] == "opportunity_missing"


# =============================================================================
# Correctness Properties
# =============================================================================


@pytest.mark.unit
class TestRecomputeProperties:
    """Idempotence, exclusion and write discipline."""

    async def test_running_twice_writes_same_total(self, store, logger):
        opportunity_id, quote_id = seed_opportunity(
            store, ["100", "200"], status=QuoteStatusCode.WON, amount="50"
        )
        handler = create_handler(store, logger)

        first = await handler.handle(change_event(quote_id))
        second = await handler.handle(change_event(quote_id))

        updates = store.calls_for("update")
        assert len(updates) == 2
        assert updates[0].payload == updates[1].payload == {TOTAL: usd("350")}
        assert first.value.total == second.value.total

    async def test_update_is_single_and_last(self, store, logger):
        opportunity_id, quote_id = seed_opportunity(
            store, ["100"], status=QuoteStatusCode.WON, amount="50"
        )
        handler = create_handler(store, logger)

        await handler.handle(change_event(quote_id))

        assert [call.operation for call in store.calls] == [
            "retrieve",
            "query",
            "update",
        ]
        assert store.calls[-1].entity_name == "opportunity"
        assert store.calls[-1].record_id == opportunity_id

    async def test_sibling_query_excludes_triggering_quote(self, store, logger):
        _, quote_id = seed_opportunity(
            store, ["100"], status=QuoteStatusCode.WON, amount="50"
        )
        handler = create_handler(store, logger)

        await handler.handle(change_event(quote_id))

        query = store.calls_for("query")[0].payload
        exclusions = [
            c
            for c in query.criteria.conditions
            if c.operator is ConditionOperator.NOT_EQUAL
        ]
        assert len(exclusions) == 1
        assert exclusions[0].attribute == "quoteid"
        assert exclusions[0].value == quote_id

    async def test_stale_stored_row_of_triggering_quote_is_not_double_counted(
        self, logger
    ):
        """A store echoing the pre-update row must not inflate the total."""
        opportunity_id = uuid7()
        current = quote_record(
            opportunity_id=opportunity_id, status=QuoteStatusCode.WON, amount="50"
        )
        stale_copy = quote_record(
            quote_id=current.id, opportunity_id=opportunity_id, amount="50"
        )
        sibling = quote_record(opportunity_id=opportunity_id, amount="100")
        store = AsyncMock(spec=RecordStoreProtocol)
        store.retrieve.return_value = current
        store.query.return_value = [sibling, stale_copy]
        handler = create_handler(store, logger)

        result = await handler.handle(change_event(current.id))

        assert isinstance(result, Success)
        store.update.assert_awaited_once_with(
            "opportunity", opportunity_id, {TOTAL: usd("150")}
        )
        logger.warning.assert_called_once()

    async def test_custom_schema_settings_are_honored(self, store, logger):
        settings = make_settings(
            quote_amount_attribute="totalamount",
            opportunity_total_attribute="wonquotestotal",
            won_status_code=int(QuoteStatusCode.OPEN),
        )
        opportunity_id = uuid7()
        store.add(opportunity_record(opportunity_id))
        sibling = quote_record(opportunity_id=opportunity_id, status=QuoteStatusCode.OPEN)
        current = quote_record(opportunity_id=opportunity_id, status=QuoteStatusCode.OPEN)
        for record, amount in ((sibling, "20"), (current, "30")):
            record.attributes["totalamount"] = Decimal(amount)
            store.add(record)
        handler = create_handler(store, logger, settings)

        result = await handler.handle(change_event(current.id))

        assert isinstance(result, Success)
        assert store.snapshot("opportunity", opportunity_id).get("wonquotestotal") == usd(
            "50"
        )


# =============================================================================
# Failure Tests
# =============================================================================


@pytest.mark.unit
class TestRecomputeFailures:
    """Failures after the guard become a single wrapped Failure."""

    async def test_update_failure_is_wrapped_without_retry(self, logger):
        opportunity_id = uuid7()
        current = quote_record(opportunity_id=opportunity_id, amount="50")
        store = AsyncMock(spec=RecordStoreProtocol)
        store.retrieve.return_value = current
        store.query.return_value = []
        store_error = RecordStoreError(
            code=ErrorCode.RECORD_STORE_UNAVAILABLE,
            message="Dataverse update on opportunity timed out",
            operation="update",
            entity_name="opportunity",
        )
        store.update.side_effect = store_error
        handler = create_handler(store, logger)

        result = await handler.handle(change_event(current.id))

        assert isinstance(result, Failure)
        assert "Dataverse update on opportunity timed out" in result.error.message
        assert result.error.message.startswith("OpportunityQuoteSumPlugin failed:")
        assert result.error.code is ApplicationErrorCode.EXTERNAL_SERVICE_ERROR
        assert result.error.cause is store_error
        assert result.error.domain_error.code is ErrorCode.RECORD_STORE_UNAVAILABLE
        assert store.update.await_count == 1

    async def test_retrieve_failure_leaves_opportunity_untouched(self, logger):
        store = AsyncMock(spec=RecordStoreProtocol)
        store.retrieve.side_effect = RecordStoreError(
            code=ErrorCode.RECORD_NOT_FOUND,
            message="quote not found",
            operation="retrieve",
            entity_name="quote",
        )
        handler = create_handler(store, logger)

        result = await handler.handle(change_event(uuid7()))

        assert isinstance(result, Failure)
        assert result.error.code is ApplicationErrorCode.NOT_FOUND
        store.query.assert_not_called()
        store.update.assert_not_called()

    async def test_query_failure_leaves_opportunity_untouched(self, logger):
        store = AsyncMock(spec=RecordStoreProtocol)
        store.retrieve.return_value = quote_record(amount="50")
        store.query.side_effect = ConnectionError("socket closed")
        handler = create_handler(store, logger)

        result = await handler.handle(change_event(uuid7()))

        assert isinstance(result, Failure)
        assert result.error.code is ApplicationErrorCode.COMMAND_EXECUTION_FAILED
        assert result.error.details["error_type"] == "ConnectionError"
        store.update.assert_not_called()

    async def test_malformed_status_is_a_failure(self, store, logger):
        current = quote_record(status="won", amount="50")
        store.add(current)
        handler = create_handler(store, logger)

        result = await handler.handle(change_event(current.id))

        assert isinstance(result, Failure)
        assert result.error.domain_error.code is ErrorCode.RECORD_MALFORMED
        assert store.calls_for("update") == []

    async def test_mixed_currencies_fail_before_write(self, store, logger):
        opportunity_id = uuid7()
        store.add(
            opportunity_record(opportunity_id),
            quote_record(opportunity_id=opportunity_id, amount=Money(Decimal("10"), "EUR")),
        )
        current = quote_record(opportunity_id=opportunity_id, amount="5")
        store.add(current)
        handler = create_handler(store, logger)

        result = await handler.handle(change_event(current.id))

        assert isinstance(result, Failure)
        assert result.error.domain_error.code is ErrorCode.CURRENCY_MISMATCH
        assert store.calls_for("update") == []

    async def test_failure_details_carry_trace_and_inner_cause(self, logger):
        store = AsyncMock(spec=RecordStoreProtocol)
        store.retrieve.return_value = quote_record(amount="50")

        async def failing_query(query):
            try:
                raise TimeoutError("read timed out")
            except TimeoutError as e:
                raise RuntimeError("query failed") from e

        store.query.side_effect = failing_query
        handler = create_handler(store, logger)

        result = await handler.handle(change_event(uuid7()))

        assert isinstance(result, Failure)
        assert result.error.details["inner_error_message"] == "read timed out"
        assert "failing_query" in result.error.details["stack_trace"]
        logger.error.assert_called_once()
        assert isinstance(logger.error.call_args.kwargs["error"], RuntimeError)

    async def test_logger_context_identifies_quote(self, logger):
        store = MagicMock()
        handler = create_handler(store, logger)
        quote_id = uuid7()

        await handler.handle(change_event(quote_id, changed=frozenset()))

        bound = logger.bind.call_args_list[0].kwargs
        assert bound["quote_id"] == str(quote_id)
        assert bound["handler"] == "OpportunityQuoteSumPlugin"
