"""API v1 router assembly.

Mounts the router of every registered module exposing ``ROUTER`` and the
documentation endpoints:

    GET /api/v1/              Index (registered module names)
    GET /api/v1/openapi.json  OpenAPI document, rendered per request
    GET /api/v1/docs          Swagger UI for the document above
"""

from typing import Any

from fastapi import APIRouter
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import HTMLResponse

from src.core.config import settings
from src.presentation.modules.base_module import ExposesRouter
from src.presentation.modules.module_registry import ModuleRegistry
from src.presentation.openapi.openapi_aggregator import OpenAPISpecAggregator
from src.presentation.openapi.schema_registry import SchemaRegistry, get_shared_registry


def build_v1_router(
    module_registry: ModuleRegistry,
    aggregator: OpenAPISpecAggregator | None = None,
    registry: SchemaRegistry | None = None,
) -> APIRouter:
    """Create the ``/api/v1`` router from the modules registered so far.

    Args:
        module_registry: Registered application modules.
        aggregator: OpenAPI aggregator (defaults to one built from settings).
        registry: Schema registry (defaults to the shared registry, resolved
            per request).
    """
    aggregator = aggregator or OpenAPISpecAggregator(
        title=settings.app_name,
        version=settings.app_version,
        description=settings.app_description,
        servers=[{"url": settings.api_v1_prefix, "description": "API Version 1"}],
    )
    v1_router = APIRouter(prefix=settings.api_v1_prefix)

    @v1_router.get("/", tags=["System"], include_in_schema=False)
    async def index() -> dict[str, Any]:
        return {
            "message": f"{settings.app_name} v1",
            "version": settings.app_version,
            "modules": module_registry.get_module_names(),
        }

    @v1_router.get("/openapi.json", include_in_schema=False)
    async def openapi_document() -> dict[str, Any]:
        return aggregator.generate_spec(registry or get_shared_registry())

    @v1_router.get("/docs", include_in_schema=False)
    async def swagger_ui() -> HTMLResponse:
        return get_swagger_ui_html(
            openapi_url=f"{settings.api_v1_prefix}/openapi.json",
            title=f"{settings.app_name} - Swagger UI",
        )

    for module in module_registry.get_all_modules():
        if isinstance(module, ExposesRouter):
            v1_router.include_router(module.get_router(registry))

    return v1_router
