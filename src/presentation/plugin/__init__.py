"""Host-facing plugin entry point and its registration metadata."""

from src.presentation.plugin.quote_sum_plugin import (
    OpportunityQuoteSumPlugin,
    PluginExecutionError,
)
from src.presentation.plugin.registration import (
    QUOTE_STATUS_REGISTRATION,
    ExecutionMode,
    PluginStepRegistration,
)

__all__ = [
    "ExecutionMode",
    "OpportunityQuoteSumPlugin",
    "PluginExecutionError",
    "PluginStepRegistration",
    "QUOTE_STATUS_REGISTRATION",
]
