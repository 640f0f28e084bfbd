"""Contract decorators for WebSocket event controllers.

Mirrors the HTTP contract decorators: each decorator records metadata through
``WebSocketMetadataStorage`` and method decorators are flushed in source
order once the class body completes.

Usage:
    @namespace("/chat", description="Real-time chat", require_auth=True)
    class ChatEventController(WebSocketController):
        @subscribe("chat:join", description="Join a chat room", acknowledgment=True)
        @validate_event(JoinRoomEvent)
        @validate_ack(JoinRoomAck)
        @join_room(lambda data: f"room:{data.room_id}")
        async def handle_join(self, connection: Connection, data: JoinRoomEvent):
            ...

        @publish("chat:user-joined", description="User joined", broadcast=True)
        @validate_emit(UserJoinedEvent)
        async def notify_user_joined(self, room: str, payload: dict): ...
"""

from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import Any, Literal, TypeVar

from pydantic import BaseModel

from src.core.errors import ContractDefinitionError
from src.presentation.contracts.declarations import ContractMember, declare
from src.presentation.contracts.decorators import MethodDecorator, resolve_store
from src.presentation.contracts.metadata import MetadataStore
from src.presentation.websocket.metadata import (
    ConnectionMiddleware,
    EventEmitterMetadata,
    EventListenerMetadata,
    EventMiddleware,
    NamespaceMetadata,
    RoomMetadata,
    RoomName,
    WebSocketMetadataStorage,
)

ClassT = TypeVar("ClassT", bound=type)


def _storage(store: MetadataStore | None) -> WebSocketMetadataStorage:
    return WebSocketMetadataStorage(resolve_store(store))


def _require_model(schema: Any, decorator: str) -> type[BaseModel]:
    if not (isinstance(schema, type) and issubclass(schema, BaseModel)):
        raise ContractDefinitionError(
            f"@{decorator} expects a pydantic model class, got {schema!r}"
        )
    return schema


def _require_class(cls: Any, decorator: str) -> None:
    if not isinstance(cls, type):
        raise ContractDefinitionError(
            f"@{decorator} can only decorate classes, got {type(cls).__name__}"
        )


# =============================================================================
# Namespace
# =============================================================================


def namespace(
    path: str,
    description: str | None = None,
    middlewares: Iterable[ConnectionMiddleware] = (),
    *,
    require_auth: bool = False,
    store: MetadataStore | None = None,
) -> Callable[[ClassT], ClassT]:
    """Declare a class as a WebSocket controller served on ``path``.

    Args:
        path: Namespace path (``/chat``); served at ``/ws/chat``.
        description: Namespace description (AsyncAPI channel description).
        middlewares: Connection middlewares run, in order, on every new
            connection before any event is dispatched.
        require_auth: Reject connections without a valid access token.
    """
    if not path.startswith("/"):
        path = f"/{path}"

    def decorator(cls: ClassT) -> ClassT:
        _require_class(cls, "namespace")
        _storage(store).set_namespace(
            cls,
            NamespaceMetadata(
                path=path,
                description=description,
                middlewares=tuple(middlewares),
                require_auth=require_auth,
            ),
        )
        return cls

    return decorator


def require_socket_auth(*, store: MetadataStore | None = None) -> Callable[[ClassT], ClassT]:
    """Require authentication on a namespace; must sit above ``@namespace``."""

    def decorator(cls: ClassT) -> ClassT:
        _require_class(cls, "require_socket_auth")
        storage = _storage(store)
        current = storage.get_namespace(cls)
        if current is None:
            raise ContractDefinitionError(
                f"@require_socket_auth must be applied above @namespace on {cls.__name__}"
            )
        storage.set_namespace(cls, replace(current, require_auth=True))
        return cls

    return decorator


# =============================================================================
# Events
# =============================================================================


def subscribe(
    event: str,
    *,
    description: str | None = None,
    acknowledgment: bool = False,
    deprecated: bool = False,
    store: MetadataStore | None = None,
) -> MethodDecorator:
    """Handle the client event ``event`` (client -> server).

    With ``acknowledgment=True`` the handler's return value is sent back to
    the client as the ack reply of frames carrying an ``id``.
    """

    def decorator(func: Any) -> ContractMember:
        def register(owner: type, name: str) -> None:
            _storage(store).add_event(
                owner,
                EventListenerMetadata(
                    event_name=event,
                    method_name=name,
                    description=description,
                    acknowledgment=acknowledgment,
                    deprecated=deprecated,
                ),
            )

        return declare(func, register, decorator="subscribe")

    return decorator


def publish(
    event: str,
    *,
    description: str | None = None,
    room: str | None = None,
    broadcast: bool = False,
    store: MetadataStore | None = None,
) -> MethodDecorator:
    """Document the server event ``event`` emitted by the decorated method."""

    def decorator(func: Any) -> ContractMember:
        def register(owner: type, name: str) -> None:
            _storage(store).add_emit(
                owner,
                EventEmitterMetadata(
                    event_name=event,
                    method_name=name,
                    description=description,
                    room=room,
                    broadcast=broadcast,
                ),
            )

        return declare(func, register, decorator="publish")

    return decorator


on_event = subscribe
emit_event = publish


# =============================================================================
# Validation
# =============================================================================


def validate_event(schema: type[BaseModel], *, store: MetadataStore | None = None) -> MethodDecorator:
    """Validate incoming event data; the handler receives the parsed model."""
    model = _require_model(schema, "validate_event")

    def decorator(func: Any) -> ContractMember:
        def register(owner: type, name: str) -> None:
            _storage(store).merge_validation(owner, name, data=model)

        return declare(func, register, decorator="validate_event")

    return decorator


def validate_ack(schema: type[BaseModel], *, store: MetadataStore | None = None) -> MethodDecorator:
    """Validate the handler's return value before it is sent as the ack reply."""
    model = _require_model(schema, "validate_ack")

    def decorator(func: Any) -> ContractMember:
        def register(owner: type, name: str) -> None:
            _storage(store).merge_validation(owner, name, ack=model)

        return declare(func, register, decorator="validate_ack")

    return decorator


def validate_emit(schema: type[BaseModel], *, store: MetadataStore | None = None) -> MethodDecorator:
    """Validate the payload of the event published by the decorated method."""
    model = _require_model(schema, "validate_emit")

    def decorator(func: Any) -> ContractMember:
        def register(owner: type, name: str) -> None:
            _storage(store).set_emit_validation(owner, name, model)

        return declare(func, register, decorator="validate_emit")

    return decorator


# =============================================================================
# Rooms & middlewares
# =============================================================================


def _room(action: Literal["join", "leave", "broadcast"]) -> Callable[..., MethodDecorator]:
    decorator_name = f"{action}_room" if action != "broadcast" else "broadcast_to"
    verb = {"join": "Joins", "leave": "Leaves", "broadcast": "Broadcasts to"}[action]

    def room(room: RoomName, *, store: MetadataStore | None = None) -> MethodDecorator:
        if not (isinstance(room, str) or callable(room)):
            raise ContractDefinitionError(
                f"@{decorator_name} expects a room name or a callable, got {room!r}"
            )
        dynamic = callable(room)

        def decorator(func: Any) -> ContractMember:
            def register(owner: type, name: str) -> None:
                _storage(store).add_room(
                    owner,
                    RoomMetadata(
                        room_name="dynamic" if dynamic else room,
                        method_name=name,
                        action=action,
                        resolver=room,
                        description=(
                            f"{verb} room: {'computed from data' if dynamic else room}"
                        ),
                    ),
                )

            return declare(func, register, decorator=decorator_name)

        return decorator

    room.__name__ = decorator_name
    room.__qualname__ = decorator_name
    return room


join_room = _room("join")
join_room.__doc__ = "Join the connection to a room before the handler runs."
leave_room = _room("leave")
leave_room.__doc__ = "Remove the connection from a room after the handler ran."
broadcast_to = _room("broadcast")
broadcast_to.__doc__ = "Document that the handler broadcasts to a room."


def use_event_middleware(
    *middlewares: EventMiddleware, store: MetadataStore | None = None
) -> MethodDecorator:
    """Run ``middleware(connection, data, event)`` before the handler.

    A middleware rejects the event by returning ``False`` or raising.
    """
    for middleware in middlewares:
        if not callable(middleware):
            raise ContractDefinitionError(
                f"@use_event_middleware expects callables, got {middleware!r}"
            )

    def decorator(func: Any) -> ContractMember:
        def register(owner: type, name: str) -> None:
            _storage(store).add_middlewares(owner, name, middlewares)

        return declare(func, register, decorator="use_event_middleware")

    return decorator
