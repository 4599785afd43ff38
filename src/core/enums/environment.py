"""Application environment types.

Used by Settings and the composition root to pick environment-specific
behavior (log renderer, record store backend).

Environments:
- DEVELOPMENT: Local development, human-readable logs, in-memory store
- TESTING: Automated test execution, JSON logs
- CI: Continuous integration environment
- PRODUCTION: Deployed against a live Dataverse organization
"""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
