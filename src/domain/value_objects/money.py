"""Currency amount value object.

Quote amounts and the opportunity total are currency fields. They are held
as Decimal from the moment they leave the store so that summing hundreds of
quotes never drifts by a fraction of a cent; they only become JSON numbers
again when the total is written back.

Error Handling:
    Adding amounts in different currencies raises CurrencyMismatchError (a
    ValueError). The recompute reports it as a Failure instead of writing a
    meaningless mixed-currency total.

Usage:
    from decimal import Decimal
    from src.domain.value_objects import Money

    total = Money.sum(
        [Money(Decimal("100.00"), "USD"), Money(Decimal("250"), "USD")],
        currency="USD",
    )
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Self


# Any ISO 4217 shaped code: organizations can enable any transaction currency
_CURRENCY_CODE = re.compile(r"[A-Z]{3}")


class CurrencyMismatchError(ValueError):
    """Two amounts in different currencies were combined."""

    def __init__(self, currency1: str, currency2: str) -> None:
        super().__init__(
            f"Cannot perform operation between {currency1} and {currency2}"
        )
        self.currency1 = currency1
        self.currency2 = currency2


def validate_currency(code: str) -> str:
    """Normalize a currency code and check it is ISO 4217 shaped.

    Args:
        code: Currency code, any case, surrounding whitespace allowed.

    Returns:
        Uppercase ISO 4217 code.

    Raises:
        ValueError: Empty or not three ASCII letters.

    Example:
        >>> validate_currency(" usd")
        'USD'
    """
    if not code or not isinstance(code, str):
        raise ValueError("Currency code cannot be empty")

    normalized = code.upper().strip()
    if not _CURRENCY_CODE.fullmatch(normalized):
        raise ValueError(f"Currency code must be 3 letters: {code}")
    return normalized


@dataclass(frozen=True)
class Money:
    """Immutable amount in one currency.

    Attributes:
        amount: Decimal value; negative and zero are valid (they simply do
            not contribute to a Won total).
        currency: ISO 4217 code.

    Example:
        >>> Money(Decimal("100.00"), "USD") + Money(Decimal("50"), "USD")
        Money(amount=Decimal('150.00'), currency='USD')
    """

    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            try:
                # str() first so floats keep their printed value
                object.__setattr__(self, "amount", Decimal(str(self.amount)))
            except (InvalidOperation, TypeError) as e:
                raise ValueError(f"Amount must be a valid number: {e}") from e

        if self.amount.is_nan() or self.amount.is_infinite():
            raise ValueError("Amount cannot be NaN or Infinite")

        object.__setattr__(self, "currency", validate_currency(self.currency))

    def __add__(self, other: "Money") -> "Money":
        """Add two amounts of the same currency.

        Raises:
            CurrencyMismatchError: If currencies differ.
        """
        if not isinstance(other, Money):
            return NotImplemented
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency, other.currency)
        return Money(self.amount + other.amount, self.currency)

    def is_positive(self) -> bool:
        """True when the amount is strictly greater than zero."""
        return self.amount > 0

    def is_zero(self) -> bool:
        return self.amount == 0

    @classmethod
    def zero(cls, currency: str = "USD") -> Self:
        return cls(Decimal("0"), currency)

    @classmethod
    def sum(cls, amounts: Iterable["Money"], *, currency: str) -> Self:
        """Add up amounts, starting from zero in ``currency``.

        Args:
            amounts: Amounts to add, all in ``currency``.
            currency: Currency of the result (and of an empty sum).

        Raises:
            CurrencyMismatchError: If any amount is in another currency.
        """
        total = cls.zero(currency)
        for amount in amounts:
            total = total + amount
        return total

    def __repr__(self) -> str:
        return f"Money(amount={self.amount!r}, currency={self.currency!r})"

    def __str__(self) -> str:
        """Human-readable form, e.g. "1,234.56 USD"."""
        return f"{self.amount:,.2f} {self.currency}"
