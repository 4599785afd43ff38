"""Commands - Write operations that change state.

The host's change notification (QuoteChangeEvent) is the command input; the
handler turns it into at most one partial update of the parent opportunity.
"""
