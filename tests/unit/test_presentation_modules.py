"""Unit tests for application modules and the module registry.

Tests cover:
- Registration, lookup and duplicate names
- Module capabilities (REST, WebSocket, hybrid)
- Router generation and per-module AsyncAPI documents
- Application module wiring
"""

from unittest.mock import MagicMock

import pytest
from fastapi import Response

from src.core.errors import DuplicateModuleError
from src.modules import CategoriesModule, ChatModule, register_modules
from src.presentation.contracts import ApiRequest, MetadataStore, controller, get
from src.presentation.modules import (
    BaseModule,
    ExposesEvents,
    ExposesRouter,
    HybridModule,
    ModuleCapability,
    ModuleMetadata,
    ModuleRegistry,
    RestModule,
    WebSocketModule,
)
from src.presentation.openapi import SchemaRegistry
from src.presentation.websocket import WebSocketGateway


class PlainModule(BaseModule):
    pass


@controller("Status", prefix="/status")
class StatusController:
    @get("/")
    async def status(self, request: ApiRequest, response: Response):
        return {"ok": True}


class StatusModule(HybridModule):
    def __init__(self):
        super().__init__(ModuleMetadata(name="status"))

    def get_controllers(self):
        return (StatusController(),)


@pytest.mark.unit
class TestModuleRegistry:
    """Test ModuleRegistry."""

    def test_register_and_lookup(self, module_registry: ModuleRegistry):
        module = PlainModule(ModuleMetadata(name="plain"))

        module_registry.register("plain", module)

        assert module_registry.get_module("plain") is module
        assert module_registry.has_module("plain")
        assert module_registry.get_module_count() == 1

    def test_duplicate_name_rejected_and_original_kept(self, module_registry):
        """Test a second registration under the same name raises."""
        first = PlainModule(ModuleMetadata(name="plain"))
        module_registry.register("plain", first)

        with pytest.raises(DuplicateModuleError) as exc_info:
            module_registry.register("plain", PlainModule(ModuleMetadata(name="plain")))

        assert exc_info.value.name == "plain"
        assert module_registry.get_module("plain") is first

    def test_registration_order_preserved(self, module_registry):
        for name in ("b", "a", "c"):
            module_registry.register(name, PlainModule(ModuleMetadata(name=name)))

        assert module_registry.get_module_names() == ["b", "a", "c"]
        assert [r.name for r in module_registry.get_records()] == ["b", "a", "c"]

    def test_miss_returns_none(self, module_registry):
        assert module_registry.get_module("missing") is None
        assert module_registry.get_all_modules() == []

    def test_clear(self, module_registry):
        module_registry.register("plain", PlainModule(ModuleMetadata(name="plain")))

        module_registry.clear()

        assert module_registry.get_module_count() == 0

    def test_logs_registration(self):
        logger = MagicMock()

        ModuleRegistry(logger).register("plain", PlainModule(ModuleMetadata(name="plain")))

        logger.info.assert_called_once_with("Module registered", module="plain")


@pytest.mark.unit
class TestModuleKinds:
    """Test capabilities of module kinds."""

    def test_capabilities(self):
        assert RestModule.capabilities == {ModuleCapability.ROUTER}
        assert WebSocketModule.capabilities == {ModuleCapability.EVENTS}
        assert HybridModule.capabilities == {
            ModuleCapability.ROUTER,
            ModuleCapability.EVENTS,
        }
        assert PlainModule.capabilities == frozenset()

    def test_protocol_checks(self):
        assert isinstance(CategoriesModule(), ExposesRouter)
        assert not isinstance(CategoriesModule(), ExposesEvents)
        assert isinstance(ChatModule(), ExposesEvents)
        assert isinstance(StatusModule(), ExposesRouter)
        assert isinstance(StatusModule(), ExposesEvents)

    def test_exposes(self):
        module = StatusModule()

        assert module.exposes(ModuleCapability.ROUTER)
        assert module.exposes(ModuleCapability.EVENTS)
        assert not PlainModule(ModuleMetadata(name="p")).exposes(ModuleCapability.ROUTER)

    async def test_lifecycle_hooks_default_to_noop(self):
        module = PlainModule(ModuleMetadata(name="plain"))

        await module.initialize()
        await module.destroy()


@pytest.mark.unit
class TestRestModule:
    """Test router generation."""

    def test_get_router_mounts_controller_routes(self):
        registry = SchemaRegistry()

        router = CategoriesModule().get_router(registry)

        paths = {(route.path, tuple(route.methods)) for route in router.routes}
        assert ("/categories", ("GET",)) in paths
        assert ("/categories/{id}", ("DELETE",)) in paths
        assert len(registry.paths) == 5

    def test_module_without_controllers(self):
        assert RestModule(ModuleMetadata(name="empty")).get_router(SchemaRegistry()).routes == []


@pytest.mark.unit
class TestWebSocketModule:
    """Test event registration and per-module AsyncAPI."""

    def test_register_events_binds_namespace(self):
        gateway = WebSocketGateway(logger=MagicMock())

        ChatModule().register_events(gateway)

        assert "chat:join" in gateway.of("/chat").event_names

    def test_module_asyncapi_spec(self):
        document = ChatModule().get_asyncapi_spec()

        assert document["info"]["title"] == "chat"
        assert document["info"]["version"] == "1.0.0"
        assert "receive_chat_join" in document["operations"]

    def test_module_without_controllers_has_no_spec(self):
        assert WebSocketModule(ModuleMetadata(name="empty")).get_asyncapi_spec() is None

    async def test_destroy_clears_presence(self):
        module = ChatModule()
        module.controller.room_users["1"] = {"u"}
        module.controller.connection_users["c"] = ("u", "name")

        await module.destroy()

        assert module.controller.room_users == {}
        assert module.controller.connection_users == {}


@pytest.mark.unit
class TestRegisterModules:
    """Test application module wiring."""

    def test_registers_every_module(self, module_registry):
        register_modules(module_registry)

        assert module_registry.get_module_names() == ["categories", "chat"]

    def test_twice_raises(self, module_registry):
        register_modules(module_registry)

        with pytest.raises(DuplicateModuleError):
            register_modules(module_registry)
