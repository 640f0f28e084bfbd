"""WebSocket event controllers, transport and error handling."""

from src.presentation.websocket.auth import (
    authenticate_connection,
    extract_token,
    require_authenticated,
)
from src.presentation.websocket.controller import (
    WebSocketController,
    WebSocketControllerMetadata,
    run_event_middlewares,
)
from src.presentation.websocket.decorators import (
    broadcast_to,
    emit_event,
    join_room,
    leave_room,
    namespace,
    on_event,
    publish,
    require_socket_auth,
    subscribe,
    use_event_middleware,
    validate_ack,
    validate_emit,
    validate_event,
)
from src.presentation.websocket.error_handler import WebSocketErrorHandler
from src.presentation.websocket.errors import (
    WebSocketAckValidationError,
    WebSocketAuthError,
    WebSocketError,
    WebSocketHandlerNotFoundError,
    WebSocketInternalError,
    WebSocketMiddlewareError,
    WebSocketValidationError,
)
from src.presentation.websocket.gateway import Connection, Namespace, WebSocketGateway
from src.presentation.websocket.metadata import (
    EventEmitterMetadata,
    EventListenerMetadata,
    NamespaceMetadata,
    RoomMetadata,
    WebSocketMetadataStorage,
    WebSocketValidationMetadata,
    websocket_metadata,
)

__all__ = [
    "Connection",
    "EventEmitterMetadata",
    "EventListenerMetadata",
    "Namespace",
    "NamespaceMetadata",
    "RoomMetadata",
    "WebSocketAckValidationError",
    "WebSocketAuthError",
    "WebSocketController",
    "WebSocketControllerMetadata",
    "WebSocketError",
    "WebSocketErrorHandler",
    "WebSocketGateway",
    "WebSocketHandlerNotFoundError",
    "WebSocketInternalError",
    "WebSocketMetadataStorage",
    "WebSocketMiddlewareError",
    "WebSocketValidationError",
    "WebSocketValidationMetadata",
    "authenticate_connection",
    "broadcast_to",
    "emit_event",
    "extract_token",
    "join_room",
    "leave_room",
    "namespace",
    "on_event",
    "publish",
    "require_authenticated",
    "require_socket_auth",
    "run_event_middlewares",
    "subscribe",
    "use_event_middleware",
    "validate_ack",
    "validate_emit",
    "validate_event",
    "websocket_metadata",
]
