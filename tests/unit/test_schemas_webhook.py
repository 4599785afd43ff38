"""Unit tests for webhook request/response schemas.

Tests cover:
- RemoteExecutionContext parsing (PascalCase aliases, key/value lists)
- Conversion to QuoteChangeEvent (changed attributes from Target)
- RecomputeOutcomeResponse.from_outcome()
"""

import pytest
from pydantic import ValidationError
from uuid_extensions import uuid7

from src.application.dtos import NoOp, Recomputed, SkipReason
from src.schemas.webhook_schemas import (
    RecomputeOutcomeResponse,
    RemoteExecutionContext,
)
from tests.conftest import STATUS, build_context_payload, usd


@pytest.mark.unit
class TestRemoteExecutionContext:
    """Test context parsing and event conversion."""

    def test_parses_host_payload(self):
        """Test PascalCase properties are read and unknown ones ignored."""
        quote_id = uuid7()

        context = RemoteExecutionContext.model_validate(build_context_payload(quote_id))

        assert context.message_name == "Update"
        assert context.primary_entity_id == quote_id
        assert context.depth == 1
        assert context.target() is not None
        assert context.target().logical_name == "quote"

    def test_to_change_event_uses_target_attribute_keys(self):
        """Test changed attributes are exactly the Target attribute keys."""
        quote_id = uuid7()
        payload = build_context_payload(
            quote_id, attributes={STATUS: {"Value": 4}, "modifiedon": "2026-01-01"}
        )

        event = RemoteExecutionContext.model_validate(payload).to_change_event()

        assert event.primary_entity_id == quote_id
        assert event.changed_attributes == frozenset({STATUS, "modifiedon"})
        assert event.is_quote_update
        assert event.changed(STATUS)

    def test_status_absent_from_target(self):
        """Test an update without the status attribute is not a status change."""
        payload = build_context_payload(uuid7(), attributes={"name": "Q-9"})

        event = RemoteExecutionContext.model_validate(payload).to_change_event()

        assert not event.changed(STATUS)

    def test_missing_target_changes_nothing(self):
        """Test a context without an entity Target yields no changed attributes."""
        payload = build_context_payload(uuid7())
        payload["InputParameters"] = [{"key": "Target", "value": "not-an-entity"}]

        context = RemoteExecutionContext.model_validate(payload)

        assert context.target() is None
        assert context.to_change_event().changed_attributes == frozenset()

    def test_snake_case_names_are_accepted(self):
        """Test populate_by_name allows field names."""
        quote_id = uuid7()

        context = RemoteExecutionContext(
            message_name="Update",
            primary_entity_name="quote",
            primary_entity_id=quote_id,
        )

        assert context.stage == 40
        assert context.to_change_event().correlation_id is None

    def test_missing_required_property_is_rejected(self):
        """Test a payload without PrimaryEntityId fails validation."""
        payload = build_context_payload(uuid7())
        del payload["PrimaryEntityId"]

        with pytest.raises(ValidationError):
            RemoteExecutionContext.model_validate(payload)


@pytest.mark.unit
class TestRecomputeOutcomeResponse:
    """Test response conversion."""

    def test_from_no_op(self):
        """Test NoOp maps to outcome no_op with reason and detail."""
        response = RecomputeOutcomeResponse.from_outcome(
            NoOp(reason=SkipReason.OPPORTUNITY_MISSING, detail="no parent")
        )

        assert response.outcome == "no_op"
        assert response.reason == "opportunity_missing"
        assert response.detail == "no parent"
        assert response.total is None

    def test_from_recomputed(self):
        """Test Recomputed maps total as a decimal string with currency."""
        opportunity_id, quote_id = uuid7(), uuid7()

        response = RecomputeOutcomeResponse.from_outcome(
            Recomputed(
                opportunity_id=opportunity_id,
                total=usd("350.50"),
                contributing_quote_ids=(quote_id,),
                sibling_count=2,
            )
        )

        assert response.outcome == "recomputed"
        assert response.opportunity_id == opportunity_id
        assert response.total == "350.50"
        assert response.currency == "USD"
        assert response.contributing_quote_ids == [quote_id]
        assert response.sibling_count == 2

    def test_unknown_outcome_raises(self):
        """Test anything else is a programming error."""
        with pytest.raises(TypeError):
            RecomputeOutcomeResponse.from_outcome("done")  # type: ignore[arg-type]
