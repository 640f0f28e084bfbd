"""WebSocket contract metadata.

Records declared by the WebSocket decorators, kept in the same process-wide
``MetadataStore`` as the HTTP contracts under their own kinds.

Core types:
    NamespaceMetadata: Path, description, middlewares and auth of a controller
    EventListenerMetadata: A subscribed event (client -> server)
    EventEmitterMetadata: A published event (server -> client)
    RoomMetadata: Room joined/left/broadcast to by a handler
    WebSocketValidationMetadata: Data/ack schemas of a subscribed event
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel

from src.presentation.contracts.metadata import MetadataStore, metadata_store

if TYPE_CHECKING:
    from src.presentation.websocket.gateway import Connection

type ConnectionMiddleware = Callable[["Connection"], Awaitable[None]]
type EventMiddleware = Callable[["Connection", Any, str], Awaitable[bool | None] | bool | None]
type RoomName = str | Callable[[Any], str]


class WebSocketMetadataKind(str, Enum):
    NAMESPACE = "ws:namespace"
    EVENTS = "ws:events"
    EMITS = "ws:emits"
    EMIT_VALIDATION = "ws:emit_validation"
    ROOMS = "ws:rooms"
    VALIDATION = "ws:validation"
    MIDDLEWARES = "ws:middlewares"


@dataclass(frozen=True, slots=True, kw_only=True)
class NamespaceMetadata:
    """Namespace a WebSocket controller is mounted on.

    Attributes:
        path: Namespace path, e.g. ``/chat``.
        description: Namespace description.
        middlewares: Connection middlewares run before any event.
        require_auth: Reject connections without a valid access token.
    """

    path: str
    description: str | None = None
    middlewares: tuple[ConnectionMiddleware, ...] = ()
    require_auth: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class EventListenerMetadata:
    event_name: str
    method_name: str
    description: str | None = None
    acknowledgment: bool = False
    deprecated: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class EventEmitterMetadata:
    event_name: str
    method_name: str
    description: str | None = None
    room: str | None = None
    broadcast: bool = False
    validation: type[BaseModel] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class RoomMetadata:
    """Room action performed around a handler.

    ``room_name`` is ``"dynamic"`` when the room is computed from event data.
    """

    room_name: str
    method_name: str
    action: Literal["join", "leave", "broadcast"]
    resolver: RoomName
    description: str | None = None

    def resolve(self, data: Any) -> str:
        return self.resolver(data) if callable(self.resolver) else self.resolver


@dataclass(frozen=True, slots=True, kw_only=True)
class WebSocketValidationMetadata:
    data: type[BaseModel] | None = None
    ack: type[BaseModel] | None = None


class WebSocketMetadataStorage:
    """Typed access to WebSocket records of a ``MetadataStore``."""

    def __init__(self, store: MetadataStore | None = None) -> None:
        self._store = store if store is not None else metadata_store

    def set_namespace(self, target: Any, metadata: NamespaceMetadata) -> None:
        self._store.define(target, WebSocketMetadataKind.NAMESPACE, metadata)

    def get_namespace(self, target: Any) -> NamespaceMetadata | None:
        return self._store.get(target, WebSocketMetadataKind.NAMESPACE)

    def add_event(self, target: Any, event: EventListenerMetadata) -> None:
        self._store.append(target, WebSocketMetadataKind.EVENTS, event)

    def get_events(self, target: Any) -> tuple[EventListenerMetadata, ...]:
        return self._store.collect(target, WebSocketMetadataKind.EVENTS)

    def add_emit(self, target: Any, emit: EventEmitterMetadata) -> None:
        self._store.append(target, WebSocketMetadataKind.EMITS, emit)

    def set_emit_validation(
        self, target: Any, method_name: str, schema: type[BaseModel]
    ) -> None:
        self._store.define(
            target, WebSocketMetadataKind.EMIT_VALIDATION, schema, method_name
        )

    def get_emits(self, target: Any) -> tuple[EventEmitterMetadata, ...]:
        """Published events, with ``@validate_emit`` schemas merged in."""
        emits = []
        for emit in self._store.collect(target, WebSocketMetadataKind.EMITS):
            schema = self._store.get(
                target, WebSocketMetadataKind.EMIT_VALIDATION, emit.method_name
            )
            emits.append(replace(emit, validation=schema) if schema else emit)
        return tuple(emits)

    def get_emit(self, target: Any, event_name: str) -> EventEmitterMetadata | None:
        for emit in self.get_emits(target):
            if emit.event_name == event_name:
                return emit
        return None

    def add_room(self, target: Any, room: RoomMetadata) -> None:
        self._store.append(target, WebSocketMetadataKind.ROOMS, room)

    def get_rooms(self, target: Any) -> tuple[RoomMetadata, ...]:
        return self._store.collect(target, WebSocketMetadataKind.ROOMS)

    def get_method_rooms(self, target: Any, method_name: str) -> tuple[RoomMetadata, ...]:
        return tuple(room for room in self.get_rooms(target) if room.method_name == method_name)

    def merge_validation(
        self,
        target: Any,
        method_name: str,
        *,
        data: type[BaseModel] | None = None,
        ack: type[BaseModel] | None = None,
    ) -> None:
        current = self.get_validation(target, method_name)
        self._store.define(
            target,
            WebSocketMetadataKind.VALIDATION,
            WebSocketValidationMetadata(data=data or current.data, ack=ack or current.ack),
            method_name,
        )

    def get_validation(self, target: Any, method_name: str) -> WebSocketValidationMetadata:
        return self._store.get(
            target,
            WebSocketMetadataKind.VALIDATION,
            method_name,
            default=WebSocketValidationMetadata(),
        )

    def add_middlewares(
        self, target: Any, method_name: str, middlewares: tuple[EventMiddleware, ...]
    ) -> None:
        current = self.get_middlewares(target, method_name)
        self._store.define(
            target,
            WebSocketMetadataKind.MIDDLEWARES,
            current + middlewares,
            method_name,
        )

    def get_middlewares(self, target: Any, method_name: str) -> tuple[EventMiddleware, ...]:
        return self._store.get(
            target, WebSocketMetadataKind.MIDDLEWARES, method_name, default=()
        )


websocket_metadata = WebSocketMetadataStorage()
