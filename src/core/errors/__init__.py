"""Core errors package.

Usage:
    from src.core.errors import ConfigurationError, DuplicateModuleError
"""

from src.core.errors.configuration_error import (
    ConfigurationError,
    ContractDefinitionError,
    DuplicateModuleError,
)
from src.core.errors.request_errors import FieldError, RequestValidationFailed

__all__ = [
    "ConfigurationError",
    "ContractDefinitionError",
    "DuplicateModuleError",
    "FieldError",
    "RequestValidationFailed",
]
