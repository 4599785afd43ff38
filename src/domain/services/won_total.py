"""Won-quote total calculation.

The opportunity total is recomputed from scratch on every status change,
never adjusted by a delta. Missed or reordered events therefore heal on the
next change.

The triggering quote is deliberately kept out of the sibling query and
merged from memory: inside the host transaction the store may still return
its pre-update row, while the in-hand snapshot already reflects the update.

Usage:
    query = won_siblings_query(
        opportunity_id=quote.opportunity.id,
        excluded_quote_id=quote.id,
        parent_attribute="opportunityid",
        status_attribute="statuscode",
        amount_attribute="rhs_totalamountrhs",
        won_status_code=4,
    )
    siblings = [Quote.from_record(r, ...) for r in await store.query(query)]
    won_total = calculate_won_total(siblings, quote, default_currency="USD")
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from uuid import UUID

from src.core.constants import (
    QUOTE_ENTITY,
    QUOTE_NAME_ATTRIBUTE,
    QUOTE_PRIMARY_KEY,
    QUOTE_STATE_ATTRIBUTE,
)
from src.domain.entities.quote import Quote
from src.domain.enums.quote_status import QuoteStatusCode
from src.domain.value_objects.money import Money
from src.domain.value_objects.query_expression import (
    ConditionExpression,
    ConditionOperator,
    FilterExpression,
    QueryExpression,
)


@dataclass(frozen=True)
class WonTotal:
    """Sum of Won quote amounts for one opportunity.

    Attributes:
        total: Sum of strictly positive Won amounts.
        contributing_quote_ids: Quotes whose amount was added, in order.
    """

    total: Money
    contributing_quote_ids: tuple[UUID, ...] = field(default_factory=tuple)

    @property
    def contributing_count(self) -> int:
        return len(self.contributing_quote_ids)


def won_siblings_query(
    *,
    opportunity_id: UUID,
    excluded_quote_id: UUID,
    parent_attribute: str,
    status_attribute: str,
    amount_attribute: str,
    won_status_code: int = QuoteStatusCode.WON,
) -> QueryExpression:
    """Build the query for the other Won quotes of an opportunity.

    No state filter is applied: a Won quote counts whatever its state.

    Args:
        opportunity_id: Parent opportunity of the triggering quote.
        excluded_quote_id: The triggering quote, merged separately.
        parent_attribute: Opportunity lookup attribute name.
        status_attribute: Status reason attribute name.
        amount_attribute: Currency amount attribute name.
        won_status_code: Status reason value meaning Won.

    Returns:
        QueryExpression over the quote entity.
    """
    return QueryExpression(
        entity_name=QUOTE_ENTITY,
        columns=(
            amount_attribute,
            status_attribute,
            QUOTE_STATE_ATTRIBUTE,
            QUOTE_PRIMARY_KEY,
            QUOTE_NAME_ATTRIBUTE,
        ),
        criteria=FilterExpression(
            conditions=(
                ConditionExpression(
                    parent_attribute, ConditionOperator.EQUAL, opportunity_id
                ),
                ConditionExpression(
                    status_attribute, ConditionOperator.EQUAL, won_status_code
                ),
                ConditionExpression(
                    QUOTE_PRIMARY_KEY, ConditionOperator.NOT_EQUAL, excluded_quote_id
                ),
            )
        ),
    )


def calculate_won_total(
    siblings: Iterable[Quote],
    current: Quote,
    *,
    default_currency: str,
    won_status_code: int = QuoteStatusCode.WON,
) -> WonTotal:
    """Sum the Won siblings plus the triggering quote when it is Won.

    Siblings are trusted to be Won already (the query filters them); a
    sibling with the triggering quote's id is skipped so the triggering
    quote is never counted twice.

    Args:
        siblings: Other Won quotes of the opportunity, any order.
        current: Post-update snapshot of the triggering quote.
        default_currency: Currency of the total when nothing contributes.
        won_status_code: Status reason value meaning Won.

    Returns:
        WonTotal with the sum and the ids that contributed.

    Raises:
        CurrencyMismatchError: If contributing amounts use different currencies.
    """
    contributions: list[tuple[UUID, Money]] = []

    for sibling in siblings:
        if sibling.id == current.id:
            continue
        amount = sibling.contributing_amount()
        if amount is not None:
            contributions.append((sibling.id, amount))

    if current.is_won(won_status_code):
        amount = current.contributing_amount()
        if amount is not None:
            contributions.append((current.id, amount))

    currency = contributions[0][1].currency if contributions else default_currency
    return WonTotal(
        total=Money.sum((amount for _, amount in contributions), currency=currency),
        contributing_quote_ids=tuple(quote_id for quote_id, _ in contributions),
    )
