"""Unit tests for WebSocket event controllers.

Tests cover:
- Namespace registration on a gateway
- Event lifecycle (validation, auth, middlewares, rooms, ack)
- Emit helpers with payload validation
- Controller metadata snapshot
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from pydantic import BaseModel
from starlette.websockets import WebSocketState

from src.infrastructure.logging.console_adapter import ConsoleAdapter
from src.presentation.contracts.metadata import MetadataStore
from src.presentation.routers.api.middleware.auth_dependencies import CurrentUser
from src.presentation.websocket import (
    Connection,
    WebSocketAckValidationError,
    WebSocketAuthError,
    WebSocketController,
    WebSocketGateway,
    WebSocketHandlerNotFoundError,
    WebSocketMiddlewareError,
    WebSocketValidationError,
    join_room,
    leave_room,
    namespace,
    publish,
    run_event_middlewares,
    subscribe,
    use_event_middleware,
    validate_ack,
    validate_emit,
    validate_event,
)

store = MetadataStore()
calls: list[str] = []


class EchoEvent(BaseModel):
    room_id: str
    text: str


class EchoAck(BaseModel):
    success: bool
    text: str | None = None


class Shout(BaseModel):
    text: str


def reject_secret(connection, data, event):
    return data.text != "secret"


async def record_middleware(connection, data, event):
    calls.append(f"middleware:{event}")


@namespace("/echo", description="Echo events", store=store)
class EchoController(WebSocketController):
    @subscribe("echo:say", acknowledgment=True, store=store)
    @validate_event(EchoEvent, store=store)
    @validate_ack(EchoAck, store=store)
    @use_event_middleware(record_middleware, reject_secret, store=store)
    @join_room(lambda data: f"room:{data.room_id}", store=store)
    async def handle_say(self, connection, data):
        calls.append(f"handler:{sorted(connection.rooms)}")
        return {"success": True, "text": data.text}

    @subscribe("echo:leave", store=store)
    @leave_room("lobby", store=store)
    def handle_leave(self, connection, data):
        calls.append(f"handler:{sorted(connection.rooms)}")
        return {"ignored": True}

    @subscribe("echo:bad-ack", acknowledgment=True, store=store)
    @validate_ack(EchoAck, store=store)
    async def handle_bad_ack(self, connection, data):
        return {"text": 123}

    @subscribe("echo:raw", acknowledgment=True, store=store)
    async def handle_raw(self, connection, data):
        return {"echo": data}

    @publish("echo:shout", broadcast=True, store=store)
    @validate_emit(Shout, store=store)
    async def shout(self, text):
        return await self.broadcast("echo:shout", {"text": text})


@namespace("/secure", require_auth=True, store=store)
class SecureController(WebSocketController):
    @subscribe("secure:ping", acknowledgment=True, store=store)
    async def handle_ping(self, connection, data):
        return {"pong": True}


class NoNamespaceController(WebSocketController):
    pass


class FakeConnection:
    """In-memory stand-in for a gateway connection."""

    def __init__(self, user=None):
        self.id = str(uuid4())
        self.user = user
        self.rooms: set[str] = set()
        self.namespace_path = "/echo"
        self.emit = AsyncMock()

    def join(self, room):
        self.rooms.add(room)

    def leave(self, room):
        self.rooms.discard(room)


def live_connection(namespace) -> Connection:
    websocket = MagicMock()
    websocket.client_state = WebSocketState.CONNECTED
    websocket.application_state = WebSocketState.CONNECTED
    websocket.send_json = AsyncMock()
    connection = Connection(websocket, namespace)
    namespace._connections[connection.id] = connection
    return connection


@pytest.fixture(autouse=True)
def reset_calls():
    calls.clear()


@pytest.fixture
def controller() -> EchoController:
    return EchoController(MagicMock(), store=store)


def event(controller: WebSocketController, name: str):
    return next(e for e in controller.get_metadata().events if e.event_name == name)


@pytest.mark.unit
class TestRegistration:
    """Test register_events."""

    def test_binds_events_on_namespace(self, controller: EchoController):
        gateway = WebSocketGateway(logger=MagicMock())

        namespace_ = controller.register_events(gateway)

        assert namespace_ is gateway.of("/echo")
        assert namespace_.event_names == (
            "echo:say",
            "echo:leave",
            "echo:bad-ack",
            "echo:raw",
        )
        assert controller.namespace is namespace_

    def test_without_namespace_returns_none(self):
        controller = NoNamespaceController(MagicMock(), store=store)

        assert controller.register_events(WebSocketGateway(logger=MagicMock())) is None


@pytest.mark.unit
class TestEventLifecycle:
    """Test handle_event."""

    async def test_runs_middlewares_rooms_then_handler(self, controller):
        connection = FakeConnection()

        ack = await controller.handle_event(
            event(controller, "echo:say"), connection, {"room_id": "7", "text": "hi"}
        )

        assert ack == {"success": True, "text": "hi"}
        assert calls == ["middleware:echo:say", "handler:['room:7']"]
        assert connection.rooms == {"room:7"}

    async def test_invalid_data_raises_validation_error(self, controller):
        with pytest.raises(WebSocketValidationError) as exc_info:
            await controller.handle_event(
                event(controller, "echo:say"), FakeConnection(), {"room_id": "7"}
            )

        payload = exc_info.value.to_dict()
        assert payload["code"] == "WS_VALIDATION_ERROR"
        assert payload["event"] == "echo:say"
        assert payload["details"][0]["path"] == ["text"]
        assert calls == []

    async def test_middleware_returning_false_rejects(self, controller):
        with pytest.raises(WebSocketMiddlewareError):
            await controller.handle_event(
                event(controller, "echo:say"),
                FakeConnection(),
                {"room_id": "7", "text": "secret"},
            )

        assert calls == ["middleware:echo:say"]

    async def test_leave_room_after_handler(self, controller):
        connection = FakeConnection()
        connection.rooms.add("lobby")

        result = await controller.handle_event(
            event(controller, "echo:leave"), connection, None
        )

        assert result is None
        assert calls == ["handler:['lobby']"]
        assert connection.rooms == set()

    async def test_ack_failing_schema_raises(self, controller):
        with pytest.raises(WebSocketAckValidationError) as exc_info:
            await controller.handle_event(
                event(controller, "echo:bad-ack"), FakeConnection(), None
            )

        assert not exc_info.value.is_operational

    async def test_ack_without_schema_is_returned_unchanged(self, controller):
        ack = await controller.handle_event(
            event(controller, "echo:raw"), FakeConnection(), [1, 2]
        )

        assert ack == {"echo": [1, 2]}

    async def test_missing_handler(self, controller):
        controller.handle_raw = None

        with pytest.raises(WebSocketHandlerNotFoundError):
            await controller.handle_event(
                event(controller, "echo:raw"), FakeConnection(), None
            )

    async def test_auth_required_rejects_anonymous(self):
        controller = SecureController(MagicMock(), store=store)

        with pytest.raises(WebSocketAuthError):
            await controller.handle_event(
                event(controller, "secure:ping"),
                FakeConnection(),
                None,
                require_auth=True,
            )

    async def test_auth_required_accepts_user(self):
        controller = SecureController(MagicMock(), store=store)
        user = CurrentUser(user_id=uuid4(), email="a@example.com", roles=["user"])

        ack = await controller.handle_event(
            event(controller, "secure:ping"),
            FakeConnection(user=user),
            None,
            require_auth=True,
        )

        assert ack == {"pong": True}


@pytest.mark.unit
class TestEventMiddlewares:
    """Test run_event_middlewares."""

    async def test_exception_wrapped(self):
        def broken(connection, data, event):
            raise RuntimeError("boom")

        with pytest.raises(WebSocketMiddlewareError, match="boom"):
            await run_event_middlewares([broken], FakeConnection(), None, "x")

    async def test_websocket_error_propagates_unchanged(self):
        async def deny(connection, data, event):
            raise WebSocketAuthError(event=event)

        with pytest.raises(WebSocketAuthError):
            await run_event_middlewares([deny], FakeConnection(), None, "x")

    async def test_none_result_continues(self):
        seen = []

        def first(connection, data, event):
            seen.append("first")

        async def second(connection, data, event):
            seen.append("second")
            return True

        await run_event_middlewares([first, second], FakeConnection(), None, "x")

        assert seen == ["first", "second"]


@pytest.mark.unit
class TestEmitHelpers:
    """Test emitting through the namespace."""

    async def test_broadcast_without_namespace_returns_zero(self, controller):
        assert await controller.broadcast("echo:shout", {"text": "hi"}) == 0

    async def test_broadcast_reaches_live_connections(self, controller):
        namespace_ = controller.register_events(WebSocketGateway(logger=MagicMock()))
        first = live_connection(namespace_)
        second = live_connection(namespace_)

        delivered = await controller.shout("hello")

        assert delivered == 2
        first.websocket.send_json.assert_awaited_once_with(
            {"event": "echo:shout", "data": {"text": "hello"}}
        )
        second.websocket.send_json.assert_awaited_once()

    async def test_emit_to_room_only_reaches_members(self, controller):
        namespace_ = controller.register_events(WebSocketGateway(logger=MagicMock()))
        member = live_connection(namespace_)
        outsider = live_connection(namespace_)
        member.join("room:1")

        delivered = await controller.emit_to_room("room:1", "echo:shout", {"text": "x"})

        assert delivered == 1
        outsider.websocket.send_json.assert_not_awaited()

    async def test_invalid_emit_payload_raises(self, controller):
        connection = FakeConnection()

        with pytest.raises(WebSocketValidationError):
            await controller.emit(connection, "echo:shout", {"wrong": 1})

        connection.emit.assert_not_awaited()

    async def test_emit_without_schema_passes_data_through(self, controller):
        connection = FakeConnection()

        await controller.emit(connection, "echo:unknown", {"any": 1})

        connection.emit.assert_awaited_once_with("echo:unknown", {"any": 1})


@pytest.mark.unit
class TestMetadataSnapshot:
    """Test get_metadata."""

    def test_snapshot(self, controller):
        metadata = controller.get_metadata()

        assert metadata.controller == "EchoController"
        assert metadata.namespace.path == "/echo"
        assert [e.event_name for e in metadata.emits] == ["echo:shout"]
        assert metadata.validation["handle_say"].data is EchoEvent
        assert metadata.validation["handle_raw"].data is None


@pytest.mark.unit
class TestWithConsoleLogger:
    """Event handling logs through the real structlog adapter."""

    async def test_handled_event_is_logged(self, capsys):
        logger = ConsoleAdapter(use_json=True, level="DEBUG")
        controller = EchoController(logger, store=store)

        ack = await controller.handle_event(
            event(controller, "echo:say"), FakeConnection(), {"room_id": "1", "text": "hi"}
        )

        assert ack == {"success": True, "text": "hi"}
        assert '"event_name": "echo:say"' in capsys.readouterr().out

    async def test_broadcast_without_namespace_is_logged(self, capsys):
        controller = EchoController(ConsoleAdapter(use_json=True), store=store)

        assert await controller.broadcast("echo:shout", {"text": "hi"}) == 0
        assert "Cannot broadcast" in capsys.readouterr().out
