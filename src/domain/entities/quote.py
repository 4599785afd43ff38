"""Quote domain entity.

Typed view over a quote record. The store hands back loosely typed attribute
bags; Quote.from_record() is the single place where presence checks and
value coercion happen, so the recompute only deals with explicit optionals.

Architecture:
    - Pure domain entity (no infrastructure dependencies)
    - Read-only snapshot, fetched fresh per invocation, never cached
    - Malformed attribute values raise RecordStoreError(RECORD_MALFORMED)

Usage:
    quote = Quote.from_record(
        record,
        status_attribute="statuscode",
        parent_attribute="opportunityid",
        amount_attribute="rhs_totalamountrhs",
        default_currency="USD",
    )
    if quote.has_status and quote.has_opportunity:
        ...
"""

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Self
from uuid import UUID

from src.core.constants import (
    OPPORTUNITY_ENTITY,
    QUOTE_NAME_ATTRIBUTE,
    QUOTE_STATE_ATTRIBUTE,
)
from src.core.enums import ErrorCode
from src.core.errors import RecordStoreError
from src.domain.enums.quote_status import QuoteStatusCode
from src.domain.value_objects.entity_reference import EntityReference
from src.domain.value_objects.money import Money
from src.domain.value_objects.record import Record


@dataclass(frozen=True)
class Quote:
    """Snapshot of a quote after the triggering update was applied.

    Attributes:
        id: Quote identifier.
        status_code: Status reason option value, None when absent.
        opportunity: Parent opportunity reference, None when absent.
        amount: Summed currency amount, None when absent.
        name: Display name (diagnostics only).
        state_code: State option value (diagnostics only).
    """

    id: UUID
    status_code: int | None = None
    opportunity: EntityReference | None = None
    amount: Money | None = None
    name: str | None = None
    state_code: int | None = None

    @property
    def has_status(self) -> bool:
        return self.status_code is not None

    @property
    def has_opportunity(self) -> bool:
        return self.opportunity is not None

    def is_won(self, won_status_code: int = QuoteStatusCode.WON) -> bool:
        """Return True when the quote's status reason is Won."""
        return QuoteStatusCode.is_won(self.status_code, won_value=won_status_code)

    def contributing_amount(self) -> Money | None:
        """Amount this quote adds to a total.

        Null, zero and negative amounts contribute nothing; they are never
        subtracted.

        Returns:
            The amount when strictly positive, None otherwise.
        """
        if self.amount is None or not self.amount.is_positive():
            return None
        return self.amount

    @classmethod
    def from_record(
        cls,
        record: Record,
        *,
        status_attribute: str,
        parent_attribute: str,
        amount_attribute: str,
        default_currency: str,
    ) -> Self:
        """Build a Quote from a raw store record.

        Args:
            record: Raw quote record.
            status_attribute: Status reason attribute name.
            parent_attribute: Opportunity lookup attribute name.
            amount_attribute: Currency amount attribute name.
            default_currency: Currency for amounts stored as bare numbers.

        Returns:
            Typed Quote.

        Raises:
            RecordStoreError: If an attribute holds a value of the wrong shape.
        """
        return cls(
            id=record.id,
            status_code=_option_value(record, status_attribute),
            opportunity=_entity_reference(record, parent_attribute),
            amount=_money(record, amount_attribute, default_currency),
            name=record.get(QUOTE_NAME_ATTRIBUTE),
            state_code=_option_value(record, QUOTE_STATE_ATTRIBUTE),
        )


def _malformed(record: Record, attribute: str, value: Any) -> RecordStoreError:
    return RecordStoreError(
        code=ErrorCode.RECORD_MALFORMED,
        message=(
            f"Attribute '{attribute}' on {record.logical_name} {record.id} "
            f"has unexpected value {value!r}"
        ),
        operation="map",
        entity_name=record.logical_name,
    )


def _option_value(record: Record, attribute: str) -> int | None:
    value = record.get(attribute)
    if value is None:
        return None
    # OptionSetValue-like objects or {"Value": 4} payloads
    if isinstance(value, Mapping):
        value = value.get("Value", value.get("value"))
    elif hasattr(value, "value") and not isinstance(value, int):
        value = value.value
    if isinstance(value, bool):
        raise _malformed(record, attribute, value)
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise _malformed(record, attribute, value) from e


def _entity_reference(record: Record, attribute: str) -> EntityReference | None:
    value = record.get(attribute)
    if value is None or isinstance(value, EntityReference):
        return value
    if isinstance(value, Mapping):
        value = value.get("Id", value.get("id"))
    if isinstance(value, UUID):
        return EntityReference(OPPORTUNITY_ENTITY, value)
    try:
        return EntityReference(OPPORTUNITY_ENTITY, UUID(str(value)))
    except ValueError as e:
        raise _malformed(record, attribute, value) from e


def _money(record: Record, attribute: str, default_currency: str) -> Money | None:
    value = record.get(attribute)
    if value is None or isinstance(value, Money):
        return value
    if isinstance(value, Mapping):
        value = value.get("Value", value.get("value"))
        if value is None:
            return None
    if isinstance(value, bool):
        raise _malformed(record, attribute, value)
    try:
        return Money(Decimal(str(value)), default_currency)
    except (InvalidOperation, ValueError) as e:
        raise _malformed(record, attribute, value) from e
