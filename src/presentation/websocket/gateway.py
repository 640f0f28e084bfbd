"""WebSocket transport on top of FastAPI WebSockets.

The gateway owns one ``Namespace`` per controller path. Each namespace
tracks its live connections and rooms, runs connection middlewares when a
client connects and dispatches JSON frames to the registered event handlers.

Frames:
    client -> server   {"event": "chat:join", "data": {...}, "id": 1}
    server -> client   {"event": "chat:user-joined", "data": {...}}
    ack reply          {"event": "ack", "id": 1, "data": {...}}
    error              {"event": "error", "data": {"success": false, ...}}

Usage:
    gateway = WebSocketGateway()
    chat = gateway.of("/chat")
    chat.on("chat:typing", handle_typing)
    app.include_router(gateway.build_router())   # serves /ws/chat
"""

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder
from starlette.websockets import WebSocketState
from uuid_extensions import uuid7

from src.core.config import settings
from src.core.container import get_logger
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.presentation.routers.api.middleware.auth_dependencies import CurrentUser
from src.presentation.websocket.error_handler import WebSocketErrorHandler
from src.presentation.websocket.errors import WebSocketError, WebSocketValidationError
from src.presentation.websocket.metadata import ConnectionMiddleware

ACK_EVENT = "ack"

type EventHandler = Callable[["Connection", Any], Awaitable[Any]]
type ConnectionHook = Callable[["Connection"], Awaitable[None]]
type DisconnectHook = Callable[["Connection", str], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class EventBinding:
    handler: EventHandler
    acknowledgment: bool = False


class Connection:
    """One connected client of a namespace."""

    def __init__(self, websocket: WebSocket, namespace: "Namespace") -> None:
        self.id = str(uuid7())
        self.websocket = websocket
        self.namespace = namespace
        self.user: CurrentUser | None = None
        self.rooms: set[str] = set()

    @property
    def namespace_path(self) -> str:
        return self.namespace.path

    @property
    def query_params(self) -> Any:
        return self.websocket.query_params

    @property
    def headers(self) -> Any:
        return self.websocket.headers

    @property
    def is_connected(self) -> bool:
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    async def send(self, frame: dict[str, Any]) -> None:
        await self.websocket.send_json(jsonable_encoder(frame))

    async def emit(self, event: str, data: Any = None) -> None:
        """Send ``event`` to this client only."""
        await self.send({"event": event, "data": data})

    async def send_ack(self, ack_id: str | int, data: Any) -> None:
        await self.send({"event": ACK_EVENT, "id": ack_id, "data": data})

    async def broadcast_to(self, room: str, event: str, data: Any = None) -> None:
        """Send ``event`` to every member of ``room`` except this client."""
        await self.namespace.emit(event, data, room=room, exclude=self.id)

    def join(self, room: str) -> None:
        self.namespace.add_to_room(self, room)

    def leave(self, room: str) -> None:
        self.namespace.remove_from_room(self, room)

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        if self.websocket.application_state != WebSocketState.DISCONNECTED:
            await self.websocket.close(code=code, reason=reason)


class Namespace:
    """Connections, rooms and event handlers of one namespace path."""

    def __init__(
        self,
        path: str,
        *,
        error_handler: WebSocketErrorHandler,
        logger: LoggerProtocol,
    ) -> None:
        self.path = path
        self._error_handler = error_handler
        self._logger = logger
        self._middlewares: list[ConnectionMiddleware] = []
        self._events: dict[str, EventBinding] = {}
        self._connection_hooks: list[ConnectionHook] = []
        self._disconnect_hooks: list[DisconnectHook] = []
        self._connections: dict[str, Connection] = {}
        self._rooms: dict[str, set[str]] = {}

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def use(self, middleware: ConnectionMiddleware) -> None:
        """Run ``middleware(connection)`` for every new connection, in order."""
        self._middlewares.append(middleware)

    def on(self, event: str, handler: EventHandler, *, acknowledgment: bool = False) -> None:
        """Bind ``handler(connection, data)``; re-binding an event replaces it."""
        self._events[event] = EventBinding(handler, acknowledgment)

    def on_connection(self, hook: ConnectionHook) -> None:
        self._connection_hooks.append(hook)

    def on_disconnect(self, hook: DisconnectHook) -> None:
        self._disconnect_hooks.append(hook)

    @property
    def event_names(self) -> tuple[str, ...]:
        return tuple(self._events)

    # -------------------------------------------------------------------------
    # Connections & rooms
    # -------------------------------------------------------------------------

    @property
    def connections(self) -> tuple[Connection, ...]:
        return tuple(self._connections.values())

    def get_connection(self, connection_id: str) -> Connection | None:
        return self._connections.get(connection_id)

    def room_members(self, room: str) -> tuple[Connection, ...]:
        return tuple(
            self._connections[connection_id]
            for connection_id in self._rooms.get(room, ())
            if connection_id in self._connections
        )

    def add_to_room(self, connection: Connection, room: str) -> None:
        self._rooms.setdefault(room, set()).add(connection.id)
        connection.rooms.add(room)

    def remove_from_room(self, connection: Connection, room: str) -> None:
        members = self._rooms.get(room)
        if members is not None:
            members.discard(connection.id)
            if not members:
                del self._rooms[room]
        connection.rooms.discard(room)

    async def emit(
        self,
        event: str,
        data: Any = None,
        *,
        room: str | None = None,
        exclude: str | None = None,
    ) -> int:
        """Send ``event`` to a room, or to every connection of the namespace.

        Returns:
            int: Number of clients the event was delivered to.
        """
        targets = self.room_members(room) if room is not None else self.connections
        delivered = 0
        for connection in targets:
            if connection.id == exclude or not connection.is_connected:
                continue
            try:
                await connection.emit(event, data)
            except (WebSocketDisconnect, RuntimeError) as exc:
                self._logger.debug(
                    "Dropping event for closed connection",
                    connection_id=connection.id,
                    event_name=event,
                    error_message=str(exc),
                )
                continue
            delivered += 1
        return delivered

    def _remove(self, connection: Connection) -> None:
        for room in list(connection.rooms):
            self.remove_from_room(connection, room)
        self._connections.pop(connection.id, None)

    # -------------------------------------------------------------------------
    # Serving
    # -------------------------------------------------------------------------

    async def serve(self, websocket: WebSocket) -> None:
        """WebSocket endpoint of the namespace."""
        await websocket.accept()
        connection = Connection(websocket, self)

        try:
            for middleware in self._middlewares:
                await middleware(connection)
        except Exception as exc:
            await self._error_handler.handle_fatal(exc, connection)
            return

        self._connections[connection.id] = connection
        self._logger.info(
            "WebSocket client connected",
            namespace=self.path,
            connection_id=connection.id,
        )

        reason = "client disconnect"
        try:
            for hook in self._connection_hooks:
                await hook(connection)
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(message.get("code", 1000))
                text = message.get("text")
                await self.dispatch(
                    connection, text if text is not None else message.get("bytes", b"")
                )
        except WebSocketDisconnect as exc:
            reason = f"client disconnect ({exc.code})"
        finally:
            self._remove(connection)
            for hook in self._disconnect_hooks:
                await hook(connection, reason)
            self._logger.info(
                "WebSocket client disconnected",
                namespace=self.path,
                connection_id=connection.id,
                reason=reason,
            )

    async def dispatch(self, connection: Connection, message: str | bytes) -> None:
        """Route one raw frame to its event handler and answer the ack.

        Binary frames carry the same JSON as text frames, UTF-8 encoded.
        """
        event: str | None = None
        ack_id: str | int | None = None
        try:
            frame = _parse_frame(message)
            event = frame["event"]
            ack_id = frame.get("id")

            binding = self._events.get(event)
            if binding is None:
                raise WebSocketError(
                    f"Unknown event '{event}'", code="WS_UNKNOWN_EVENT", event=event
                )

            result = await binding.handler(connection, frame.get("data"))
            if binding.acknowledgment and ack_id is not None:
                await connection.send_ack(ack_id, result)
        except WebSocketDisconnect:
            raise
        except Exception as exc:
            await self._error_handler.handle(exc, connection, event, ack_id)


def _parse_frame(message: str | bytes) -> dict[str, Any]:
    try:
        if isinstance(message, bytes):
            message = message.decode("utf-8")
        frame = json.loads(message)
    except UnicodeDecodeError as exc:
        raise WebSocketValidationError("Invalid frame: binary data is not UTF-8") from exc
    except json.JSONDecodeError as exc:
        raise WebSocketValidationError("Invalid JSON frame") from exc

    if not isinstance(frame, dict) or not isinstance(frame.get("event"), str):
        raise WebSocketValidationError(
            "Invalid frame: expected an object with a string 'event'"
        )
    ack_id = frame.get("id")
    if ack_id is not None and (isinstance(ack_id, bool) or not isinstance(ack_id, (str, int))):
        raise WebSocketValidationError("Invalid frame: 'id' must be a string or an integer")
    return frame


class WebSocketGateway:
    """Registry of namespaces served under ``path_prefix``.

    Args:
        path_prefix: URL prefix of every namespace (defaults to settings).
        error_handler: Error reporter shared by all namespaces.
        logger: Logger (defaults to the application logger).
    """

    def __init__(
        self,
        path_prefix: str | None = None,
        *,
        error_handler: WebSocketErrorHandler | None = None,
        logger: LoggerProtocol | None = None,
    ) -> None:
        prefix = settings.websocket_path_prefix if path_prefix is None else path_prefix
        self.path_prefix = prefix.rstrip("/")
        self._logger = logger or get_logger()
        self._error_handler = error_handler or WebSocketErrorHandler(self._logger)
        self._namespaces: dict[str, Namespace] = {}

    def of(self, path: str) -> Namespace:
        """Return the namespace for ``path``, creating it on first access."""
        if not path.startswith("/"):
            path = f"/{path}"
        namespace = self._namespaces.get(path)
        if namespace is None:
            namespace = Namespace(
                path, error_handler=self._error_handler, logger=self._logger
            )
            self._namespaces[path] = namespace
        return namespace

    @property
    def namespaces(self) -> tuple[Namespace, ...]:
        return tuple(self._namespaces.values())

    def url_for(self, namespace_path: str) -> str:
        return f"{self.path_prefix}{namespace_path}"

    def build_router(self) -> APIRouter:
        """One WebSocket route per namespace registered so far."""
        router = APIRouter()
        for namespace in self._namespaces.values():
            router.add_api_websocket_route(
                self.url_for(namespace.path),
                namespace.serve,
                name=f"ws:{namespace.path}",
            )
        self._logger.info(
            "WebSocket routes generated",
            namespaces=[namespace.path for namespace in self._namespaces.values()],
        )
        return router
