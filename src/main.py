"""
Main FastAPI application entry point.

``create_app`` is the composition root: it registers the application
modules, mounts their HTTP routers under ``/api/v1``, binds their WebSocket
controllers to the gateway and exposes the OpenAPI and AsyncAPI documents.

Run:
    uvicorn src.main:app --host 0.0.0.0 --port 5001
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.core.config import settings
from src.core.container import get_asyncapi_generator, get_logger, get_module_registry
from src.modules import register_modules
from src.presentation.documentation import AsyncAPIGenerator, create_asyncapi_router
from src.presentation.modules import ExposesEvents, ModuleRegistry
from src.presentation.openapi import OpenAPISpecAggregator
from src.presentation.routers.api.middleware.trace_middleware import TraceMiddleware
from src.presentation.routers.api.v1.errors import register_exception_handlers
from src.presentation.routers.api.v1.router import build_v1_router
from src.presentation.routers.system import system_router
from src.presentation.websocket import WebSocketGateway


def create_app(
    module_registry: ModuleRegistry | None = None,
    gateway: WebSocketGateway | None = None,
    asyncapi_generator: AsyncAPIGenerator | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        module_registry: Registry of modules to serve. When omitted, the
            application registry is used and populated with every module.
        gateway: WebSocket gateway (defaults to a new one).
        asyncapi_generator: AsyncAPI generator (defaults to the application one).
    """
    logger = get_logger()
    if module_registry is None:
        module_registry = get_module_registry()
        if not module_registry.get_module_count():
            register_modules(module_registry)
    gateway = gateway or WebSocketGateway()
    asyncapi_generator = asyncapi_generator or get_asyncapi_generator()

    aggregator = OpenAPISpecAggregator(
        title=settings.app_name,
        version=settings.app_version,
        description=settings.app_description,
        servers=[{"url": settings.api_v1_prefix, "description": "API Version 1"}],
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan context manager.

        Handles startup and shutdown events:
        - Startup: Initialize modules, optionally write the OpenAPI document
        - Shutdown: Destroy modules in reverse registration order
        """
        modules = module_registry.get_all_modules()
        for module in modules:
            await module.initialize()
        if settings.openapi_output_path:
            aggregator.write_spec(settings.openapi_output_path)
        logger.info("Application started", modules=module_registry.get_module_names())

        yield

        for module in reversed(modules):
            await module.destroy()
        logger.info("Application stopped")

    app = FastAPI(
        title=settings.app_name,
        description=settings.app_description,
        version=settings.app_version,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Wire trace middleware (request correlation)
    app.add_middleware(TraceMiddleware)

    # Register global exception handlers (RFC 7807 error responses)
    register_exception_handlers(app)

    app.include_router(system_router)
    app.include_router(build_v1_router(module_registry, aggregator))

    for module in module_registry.get_all_modules():
        if isinstance(module, ExposesEvents):
            module.register_events(gateway)
            for controller in module.get_event_controllers():
                asyncapi_generator.register_controller(controller)

    app.include_router(gateway.build_router())
    app.include_router(create_asyncapi_router(asyncapi_generator))

    app.state.module_registry = module_registry
    app.state.gateway = gateway
    return app


app = create_app()
