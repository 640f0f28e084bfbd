"""Application environment types.

Used by Settings to select environment-specific behavior (log rendering,
error verbosity, documentation output).

Environments:
- DEVELOPMENT: Local development, human-readable logs, detailed errors
- TESTING: Automated test execution, JSON logs
- CI: Continuous integration runs, JSON logs
- PRODUCTION: Deployed service, generic error messages
"""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
