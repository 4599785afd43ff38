"""Quote status enumerations.

Status reason (statuscode) and state (statecode) option values of the
quote entity as shipped by the sales schema.
"""

from enum import IntEnum


class QuoteStatusCode(IntEnum):
    """Quote status reason.

    Only WON participates in the opportunity total. A quote moving in
    either direction across WON (to it or away from it) requires a
    recompute. The other members are the stock option values, kept so a
    status in a log line or payload can be read by name.
    """

    IN_PROGRESS_DRAFT = 1
    IN_PROGRESS = 2
    OPEN = 3
    WON = 4
    LOST = 5
    CANCELED = 6
    REVISED = 7

    @classmethod
    def is_won(cls, value: int | None, *, won_value: int = 4) -> bool:
        """Return True when a raw status value means Won.

        Args:
            value: Raw option value, possibly None.
            won_value: Option value configured as Won.

        Example:
            >>> QuoteStatusCode.is_won(4)
            True
            >>> QuoteStatusCode.is_won(None)
            False
        """
        return value is not None and int(value) == won_value


class QuoteStateCode(IntEnum):
    """Quote state.

    Read for diagnostics only. Won quotes are summed regardless of state.
    """

    DRAFT = 0
    ACTIVE = 1
    WON = 2
    CLOSED = 3
