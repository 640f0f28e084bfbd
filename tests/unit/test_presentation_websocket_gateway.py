"""Unit tests for the WebSocket gateway.

Tests cover:
- Namespace lookup and URL building
- Rooms bookkeeping
- Frame dispatch through a TestClient (acks, errors, unknown events, binary frames)
- Connection middlewares rejecting clients with close code 1008
- Connection and disconnect hooks
"""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from src.presentation.websocket import (
    Namespace,
    WebSocketAuthError,
    WebSocketErrorHandler,
    WebSocketGateway,
)


@pytest.fixture
def gateway() -> WebSocketGateway:
    logger = MagicMock()
    return WebSocketGateway(
        "/ws",
        logger=logger,
        error_handler=WebSocketErrorHandler(logger, expose_internal_errors=False),
    )


def make_client(gateway: WebSocketGateway) -> TestClient:
    app = FastAPI()
    app.include_router(gateway.build_router())
    return TestClient(app)


@pytest.mark.unit
class TestNamespaces:
    """Test namespace registry."""

    def test_of_creates_once(self, gateway: WebSocketGateway):
        first = gateway.of("chat")

        assert isinstance(first, Namespace)
        assert first.path == "/chat"
        assert gateway.of("/chat") is first
        assert gateway.namespaces == (first,)

    def test_url_for(self, gateway: WebSocketGateway):
        assert gateway.url_for("/chat") == "/ws/chat"

    def test_prefix_from_settings(self):
        assert WebSocketGateway(logger=MagicMock()).path_prefix == "/ws"

    def test_router_has_one_route_per_namespace(self, gateway: WebSocketGateway):
        gateway.of("/chat")
        gateway.of("/games")

        paths = [route.path for route in gateway.build_router().routes]

        assert paths == ["/ws/chat", "/ws/games"]


@pytest.mark.unit
class TestDispatch:
    """Test serving frames."""

    def test_ack_reply(self, gateway: WebSocketGateway):
        async def echo(connection, data):
            return {"echo": data}

        gateway.of("/chat").on("echo", echo, acknowledgment=True)

        with make_client(gateway).websocket_connect("/ws/chat") as websocket:
            websocket.send_json({"event": "echo", "data": "hi", "id": 1})
            reply = websocket.receive_json()

        assert reply == {"event": "ack", "id": 1, "data": {"echo": "hi"}}

    def test_no_ack_without_id(self, gateway: WebSocketGateway):
        seen = []

        async def record(connection, data):
            seen.append(data)
            await connection.emit("recorded", data)

        gateway.of("/chat").on("record", record, acknowledgment=True)

        with make_client(gateway).websocket_connect("/ws/chat") as websocket:
            websocket.send_json({"event": "record", "data": 3})
            reply = websocket.receive_json()

        assert reply == {"event": "recorded", "data": 3}
        assert seen == [3]

    def test_unknown_event(self, gateway: WebSocketGateway):
        gateway.of("/chat")

        with make_client(gateway).websocket_connect("/ws/chat") as websocket:
            websocket.send_json({"event": "nope", "data": None})
            reply = websocket.receive_json()

        assert reply["event"] == "error"
        assert reply["data"]["code"] == "WS_UNKNOWN_EVENT"
        assert reply["data"]["event"] == "nope"

    def test_unknown_event_with_id_answers_ack(self, gateway: WebSocketGateway):
        gateway.of("/chat")

        with make_client(gateway).websocket_connect("/ws/chat") as websocket:
            websocket.send_json({"event": "nope", "id": "a1"})
            reply = websocket.receive_json()

        assert reply["event"] == "ack"
        assert reply["id"] == "a1"
        assert reply["data"]["success"] is False

    @pytest.mark.parametrize(
        "frame",
        ["not json", "[1, 2]", '{"data": 1}', '{"event": "x", "id": true}'],
    )
    def test_malformed_frames(self, gateway: WebSocketGateway, frame):
        gateway.of("/chat")

        with make_client(gateway).websocket_connect("/ws/chat") as websocket:
            websocket.send_text(frame)
            reply = websocket.receive_json()

        assert reply["event"] == "error"
        assert reply["data"]["code"] == "WS_VALIDATION_ERROR"

    def test_handler_exception_hidden(self, gateway: WebSocketGateway):
        async def broken(connection, data):
            raise KeyError("internal detail")

        gateway.of("/chat").on("broken", broken)

        with make_client(gateway).websocket_connect("/ws/chat") as websocket:
            websocket.send_json({"event": "broken"})
            reply = websocket.receive_json()

        assert reply["data"] == {
            "success": False,
            "error": "Internal server error",
            "code": "WS_INTERNAL_ERROR",
            "event": "broken",
        }

    def test_connection_survives_errors(self, gateway: WebSocketGateway):
        async def ping(connection, data):
            return "pong"

        gateway.of("/chat").on("ping", ping, acknowledgment=True)

        with make_client(gateway).websocket_connect("/ws/chat") as websocket:
            websocket.send_text("garbage")
            websocket.receive_json()
            websocket.send_json({"event": "ping", "id": 2})
            reply = websocket.receive_json()

        assert reply == {"event": "ack", "id": 2, "data": "pong"}

    def test_binary_frame_dispatched_like_text(self, gateway: WebSocketGateway):
        async def echo(connection, data):
            return {"echo": data}

        gateway.of("/chat").on("echo", echo, acknowledgment=True)

        with make_client(gateway).websocket_connect("/ws/chat") as websocket:
            websocket.send_bytes(b'{"event": "echo", "data": "hi", "id": 4}')
            reply = websocket.receive_json()

        assert reply == {"event": "ack", "id": 4, "data": {"echo": "hi"}}

    def test_undecodable_binary_frame_keeps_connection_open(
        self, gateway: WebSocketGateway
    ):
        async def ping(connection, data):
            return "pong"

        gateway.of("/chat").on("ping", ping, acknowledgment=True)

        with make_client(gateway).websocket_connect("/ws/chat") as websocket:
            websocket.send_bytes(b"\xff\xfe\x00")
            error = websocket.receive_json()
            websocket.send_json({"event": "ping", "id": 5})
            reply = websocket.receive_json()

        assert error["event"] == "error"
        assert error["data"]["code"] == "WS_VALIDATION_ERROR"
        assert reply == {"event": "ack", "id": 5, "data": "pong"}


@pytest.mark.unit
class TestConnectionLifecycle:
    """Test middlewares and hooks."""

    def test_middleware_rejection_closes_with_1008(self, gateway: WebSocketGateway):
        async def deny(connection):
            raise WebSocketAuthError("Authentication token missing")

        gateway.of("/chat").use(deny)

        with make_client(gateway).websocket_connect("/ws/chat") as websocket:
            reply = websocket.receive_json()
            with pytest.raises(WebSocketDisconnect) as exc_info:
                websocket.receive_json()

        assert reply["data"]["code"] == "WS_AUTH_ERROR"
        assert exc_info.value.code == 1008
        assert gateway.of("/chat").connections == ()

    def test_hooks_and_room_cleanup(self, gateway: WebSocketGateway):
        namespace = gateway.of("/chat")
        events = []

        async def on_connect(connection):
            connection.join("lobby")
            events.append("connected")

        async def on_disconnect(connection, reason):
            events.append(("disconnected", connection.rooms == set()))

        async def members(connection, data):
            return len(namespace.room_members("lobby"))

        namespace.on_connection(on_connect)
        namespace.on_disconnect(on_disconnect)
        namespace.on("members", members, acknowledgment=True)

        with make_client(gateway).websocket_connect("/ws/chat") as websocket:
            websocket.send_json({"event": "members", "id": 1})
            reply = websocket.receive_json()

        assert reply["data"] == 1
        assert events == ["connected", ("disconnected", True)]
        assert namespace.connections == ()
        assert namespace.room_members("lobby") == ()
