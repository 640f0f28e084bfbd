"""Module base classes.

A module bundles the controllers of one feature and exposes them to the
composition root through explicit capabilities:

    RestModule        ROUTER   get_router()
    WebSocketModule   EVENTS   register_events(gateway), get_asyncapi_spec()
    HybridModule      ROUTER + EVENTS

Lifecycle hooks ``initialize()`` and ``destroy()`` run from the application
lifespan.
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Protocol, runtime_checkable

from fastapi import APIRouter

from src.core.config import settings
from src.presentation.contracts.generator import DecoratorRouter
from src.presentation.documentation.asyncapi_generator import AsyncAPIGenerator
from src.presentation.openapi.schema_registry import SchemaRegistry
from src.presentation.websocket.controller import WebSocketController
from src.presentation.websocket.gateway import WebSocketGateway


class ModuleCapability(str, Enum):
    ROUTER = "router"
    EVENTS = "events"


@dataclass(frozen=True, slots=True, kw_only=True)
class ModuleMetadata:
    """Descriptive metadata of a module."""

    name: str
    version: str | None = None
    description: str | None = None


@runtime_checkable
class ExposesRouter(Protocol):
    """A module that contributes HTTP routes."""

    def get_router(self) -> APIRouter: ...


@runtime_checkable
class ExposesEvents(Protocol):
    """A module that contributes WebSocket event handlers."""

    def register_events(self, gateway: WebSocketGateway) -> None: ...

    def get_event_controllers(self) -> tuple[WebSocketController, ...]: ...


class BaseModule(ABC):
    """Common base of every module kind."""

    capabilities: ClassVar[frozenset[ModuleCapability]] = frozenset()

    def __init__(self, metadata: ModuleMetadata) -> None:
        self.metadata = metadata

    def get_metadata(self) -> ModuleMetadata:
        return self.metadata

    def exposes(self, capability: ModuleCapability) -> bool:
        return capability in self.capabilities

    async def initialize(self) -> None:
        """Run at application startup. Override in subclasses if needed."""

    async def destroy(self) -> None:
        """Run at application shutdown. Override in subclasses if needed."""


class RestModule(BaseModule):
    """Module exposing HTTP controllers.

    ``get_router()`` generates a fresh router on every call, re-registering
    the controllers' documentation in the schema registry.
    """

    capabilities = frozenset({ModuleCapability.ROUTER})

    def get_controllers(self) -> tuple[Any, ...]:
        """HTTP controller instances of this module. Override in subclasses."""
        return ()

    def get_router(self, registry: SchemaRegistry | None = None) -> APIRouter:
        decorator_router = DecoratorRouter(registry=registry)
        for controller in self.get_controllers():
            decorator_router.generate_router(controller)
        return decorator_router.router


class WebSocketModule(BaseModule):
    """Module exposing WebSocket event controllers."""

    capabilities = frozenset({ModuleCapability.EVENTS})

    def get_event_controllers(self) -> tuple[WebSocketController, ...]:
        """WebSocket controller instances of this module. Override in subclasses."""
        return ()

    def register_events(self, gateway: WebSocketGateway) -> None:
        for controller in self.get_event_controllers():
            controller.register_events(gateway)

    def get_asyncapi_spec(self) -> dict[str, Any] | None:
        """AsyncAPI document covering only this module's events.

        Returns:
            The document, or None when the module declares no controllers.
        """
        controllers = self.get_event_controllers()
        if not controllers:
            return None

        generator = AsyncAPIGenerator()
        for controller in controllers:
            generator.register_controller(controller)
        return generator.generate_spec(
            title=self.metadata.name,
            version=self.metadata.version or settings.app_version,
            description=self.metadata.description,
            server_url=settings.websocket_server_url,
        )


class HybridModule(RestModule, WebSocketModule):
    """Module exposing both HTTP and WebSocket controllers."""

    capabilities = frozenset({ModuleCapability.ROUTER, ModuleCapability.EVENTS})
