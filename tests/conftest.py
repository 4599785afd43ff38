"""Pytest configuration and shared test factories.

Factories build records, quotes and change events with the default schema
attribute names so individual tests only spell out what they care about.
"""

import os

os.environ.setdefault("ENVIRONMENT", "testing")

from decimal import Decimal  # noqa: E402
from typing import Any  # noqa: E402
from unittest.mock import MagicMock  # noqa: E402
from uuid import UUID  # noqa: E402

import pytest  # noqa: E402
from uuid_extensions import uuid7  # noqa: E402

from src.core.config import Settings  # noqa: E402
from src.domain.events.quote_events import QuoteChangeEvent  # noqa: E402
from src.domain.protocols.logger_protocol import LoggerProtocol  # noqa: E402
from src.domain.value_objects.entity_reference import EntityReference  # noqa: E402
from src.domain.value_objects.money import Money  # noqa: E402
from src.domain.value_objects.record import Record  # noqa: E402
from src.infrastructure.persistence.in_memory_record_store import (  # noqa: E402
    InMemoryRecordStore,
)

STATUS = "statuscode"
PARENT = "opportunityid"
AMOUNT = "rhs_totalamountrhs"
TOTAL = "new_qoutesamountcurrency"
WON = 4

OMIT = object()


def make_settings(**overrides: Any) -> Settings:
    """Settings with defaults, independent of the process environment."""
    values: dict[str, Any] = {"environment": "testing"} | overrides
    return Settings(**values)


def usd(amount: str | int) -> Money:
    return Money(Decimal(str(amount)), "USD")


def quote_record(
    *,
    quote_id: UUID | None = None,
    opportunity_id: UUID | None | object = OMIT,
    status: int | None | object = WON,
    amount: Money | Decimal | str | int | None | object = OMIT,
    state: int | None = None,
    name: str | None = None,
) -> Record:
    """Build a quote record.

    Passing None stores an explicit null; leaving an argument unset omits the
    attribute entirely (opportunity defaults to a fresh id, amount is omitted).
    """
    attributes: dict[str, Any] = {}
    if status is not OMIT:
        attributes[STATUS] = status
    if opportunity_id is OMIT:
        opportunity_id = uuid7()
    attributes[PARENT] = (
        EntityReference("opportunity", opportunity_id)
        if isinstance(opportunity_id, UUID)
        else opportunity_id
    )
    if amount is not OMIT:
        attributes[AMOUNT] = usd(amount) if isinstance(amount, (str, int)) else amount
    if state is not None:
        attributes["statecode"] = state
    if name is not None:
        attributes["name"] = name
    return Record("quote", quote_id or uuid7(), attributes)


def opportunity_record(opportunity_id: UUID, total: Money | None = None) -> Record:
    return Record("opportunity", opportunity_id, {TOTAL: total})


def change_event(
    quote_id: UUID,
    *,
    changed: frozenset[str] = frozenset({STATUS}),
    message_name: str = "Update",
    entity_name: str = "quote",
) -> QuoteChangeEvent:
    return QuoteChangeEvent(
        message_name=message_name,
        primary_entity_name=entity_name,
        primary_entity_id=quote_id,
        changed_attributes=changed,
        correlation_id=uuid7(),
    )


def build_context_payload(
    quote_id: UUID,
    *,
    attributes: dict[str, Any] | None = None,
    message_name: str = "Update",
    entity_name: str = "quote",
) -> dict[str, Any]:
    """Build a RemoteExecutionContext JSON body as the host posts it."""
    attributes = {STATUS: {"Value": WON}} if attributes is None else attributes
    return {
        "MessageName": message_name,
        "PrimaryEntityName": entity_name,
        "PrimaryEntityId": str(quote_id),
        "CorrelationId": str(uuid7()),
        "InitiatingUserId": str(uuid7()),
        "Depth": 1,
        "Stage": 40,
        "Mode": 0,
        "OrganizationName": "contoso",
        "InputParameters": [
            {
                "key": "Target",
                "value": {
                    "__type": "Entity:http://schemas.microsoft.com/xrm/2011/Contracts",
                    "LogicalName": entity_name,
                    "Id": str(quote_id),
                    "Attributes": [
                        {"key": key, "value": value} for key, value in attributes.items()
                    ],
                },
            },
            {"key": "ConcurrencyBehavior", "value": 0},
        ],
    }


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def logger() -> MagicMock:
    """Logger mock whose bind() returns itself, so every call lands here."""
    mock = MagicMock(spec=LoggerProtocol)
    mock.bind.return_value = mock
    mock.with_context.return_value = mock
    return mock
