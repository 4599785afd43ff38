"""Store-agnostic query expressions.

Queries are described as data so that each record store can translate them
to its own dialect (OData $filter for the Web API, Python predicates for the
in-memory store). Only what the recompute needs is supported: a conjunction
of equality and inequality conditions.

Usage:
    query = QueryExpression(
        entity_name="quote",
        columns=("rhs_totalamountrhs", "statuscode"),
        criteria=FilterExpression(
            conditions=(
                ConditionExpression("opportunityid", ConditionOperator.EQUAL, opp_id),
                ConditionExpression("quoteid", ConditionOperator.NOT_EQUAL, quote_id),
            )
        ),
    )
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

from src.domain.value_objects.entity_reference import EntityReference
from src.domain.value_objects.money import Money
from src.domain.value_objects.record import Record


class ConditionOperator(str, Enum):
    """Comparison operators supported in conditions."""

    EQUAL = "eq"
    NOT_EQUAL = "ne"


def comparable_value(value: Any) -> Any:
    """Reduce typed attribute values to the scalar they are compared by.

    Lookups compare by referenced id, money by amount, enums by their value.
    """
    if isinstance(value, EntityReference):
        return value.id
    if isinstance(value, Money):
        return value.amount
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, float):
        return Decimal(str(value))
    return value


@dataclass(frozen=True, slots=True)
class ConditionExpression:
    """Single attribute comparison.

    Attributes:
        attribute: Logical attribute name.
        operator: Comparison operator.
        value: Right-hand value.
    """

    attribute: str
    operator: ConditionOperator
    value: Any

    def matches(self, record: Record) -> bool:
        """Evaluate this condition against a record."""
        actual = comparable_value(record.get(self.attribute))
        expected = comparable_value(self.value)
        if self.operator is ConditionOperator.EQUAL:
            return actual == expected
        return actual != expected


@dataclass(frozen=True, slots=True)
class FilterExpression:
    """Conjunction of conditions.

    An empty filter matches every record.
    """

    conditions: tuple[ConditionExpression, ...] = ()

    def matches(self, record: Record) -> bool:
        """Evaluate every condition against a record."""
        return all(condition.matches(record) for condition in self.conditions)


@dataclass(frozen=True, slots=True)
class QueryExpression:
    """Query over one entity.

    Attributes:
        entity_name: Entity logical name to query.
        columns: Attributes to return.
        criteria: Filter the returned records must match.
    """

    entity_name: str
    columns: tuple[str, ...]
    criteria: FilterExpression = field(default_factory=FilterExpression)

    def matches(self, record: Record) -> bool:
        """Return True when the record belongs to this query's result set."""
        return record.logical_name == self.entity_name and self.criteria.matches(
            record
        )
