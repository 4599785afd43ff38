"""Domain value objects.

Usage:
    from src.domain.value_objects import Money, EntityReference, Record
"""

from src.domain.value_objects.entity_reference import EntityReference
from src.domain.value_objects.money import (
    CurrencyMismatchError,
    Money,
    validate_currency,
)
from src.domain.value_objects.query_expression import (
    ConditionExpression,
    ConditionOperator,
    FilterExpression,
    QueryExpression,
)
from src.domain.value_objects.record import Record

__all__ = [
    "ConditionExpression",
    "ConditionOperator",
    "CurrencyMismatchError",
    "EntityReference",
    "FilterExpression",
    "Money",
    "QueryExpression",
    "Record",
    "validate_currency",
]
