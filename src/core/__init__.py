"""Core shared kernel.

Foundational pieces used across all layers:
- Settings (pydantic-settings)
- Configuration and request error types
- Result types for expected failures

The core module has NO dependencies on other application layers.
"""

from src.core.errors import (
    ConfigurationError,
    ContractDefinitionError,
    DuplicateModuleError,
    FieldError,
    RequestValidationFailed,
)
from src.core.result import Failure, Result, Success

__all__ = [
    "ConfigurationError",
    "ContractDefinitionError",
    "DuplicateModuleError",
    "Failure",
    "FieldError",
    "RequestValidationFailed",
    "Result",
    "Success",
]
