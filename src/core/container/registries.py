"""Registry dependency factories.

Application-scoped registries shared by the composition root:
- Module registry (application modules by name)
- Schema registry (OpenAPI schemas, components, paths)
- AsyncAPI generator (WebSocket controllers)

Tests construct isolated instances instead of using these factories.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.presentation.documentation.asyncapi_generator import AsyncAPIGenerator
    from src.presentation.modules.module_registry import ModuleRegistry
    from src.presentation.openapi.schema_registry import SchemaRegistry


@lru_cache()
def get_module_registry() -> "ModuleRegistry":
    """Get the module registry singleton (app-scoped)."""
    from src.core.container.infrastructure import get_logger
    from src.presentation.modules.module_registry import ModuleRegistry

    return ModuleRegistry(logger=get_logger())


def get_schema_registry() -> "SchemaRegistry":
    """Get the process-wide schema registry.

    The registry manages its own lazily created instance, which
    ``SchemaRegistry.reset()`` replaces.
    """
    from src.presentation.openapi.schema_registry import get_shared_registry

    return get_shared_registry()


@lru_cache()
def get_asyncapi_generator() -> "AsyncAPIGenerator":
    """Get the AsyncAPI generator singleton (app-scoped)."""
    from src.presentation.documentation.asyncapi_generator import AsyncAPIGenerator

    return AsyncAPIGenerator()
