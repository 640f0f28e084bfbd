"""Container module - Centralized dependency injection.

Re-exports the application-scoped factories so callers can write:

    from src.core.container import get_logger, get_module_registry

The container is organized into modules by concern:
- infrastructure: Core services (logging, token validation)
- registries: Module registry, schema registry and AsyncAPI generator
"""

from src.core.container.infrastructure import get_logger, get_token_service
from src.core.container.registries import (
    get_asyncapi_generator,
    get_module_registry,
    get_schema_registry,
)

__all__ = [
    "get_asyncapi_generator",
    "get_logger",
    "get_module_registry",
    "get_schema_registry",
    "get_token_service",
]
