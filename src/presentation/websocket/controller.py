"""Base class for WebSocket event controllers.

A controller declares its namespace and events with the decorators of
``src.presentation.websocket.decorators``; ``register_events`` binds them to
a ``WebSocketGateway`` namespace. Every event then runs through:

    1. Data validation against ``@validate_event`` (handler gets the model)
    2. Namespace auth check (``require_auth``) and ``@use_event_middleware``
    3. ``@join_room`` rooms joined
    4. Handler ``(connection, data)``
    5. ``@leave_room`` rooms left
    6. Ack reply validated against ``@validate_ack`` (acknowledged events)

Errors raised at any step are reported by the gateway's error handler.
"""

import inspect
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from src.core.container import get_logger
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.presentation.contracts.metadata import MetadataStore
from src.presentation.websocket.auth import authenticate_connection, require_authenticated
from src.presentation.websocket.error_handler import validation_details
from src.presentation.websocket.errors import (
    WebSocketAckValidationError,
    WebSocketError,
    WebSocketHandlerNotFoundError,
    WebSocketMiddlewareError,
    WebSocketValidationError,
)
from src.presentation.websocket.gateway import Connection, Namespace, WebSocketGateway
from src.presentation.websocket.metadata import (
    EventEmitterMetadata,
    EventListenerMetadata,
    EventMiddleware,
    NamespaceMetadata,
    RoomMetadata,
    WebSocketMetadataStorage,
    WebSocketValidationMetadata,
)


@dataclass(frozen=True, slots=True, kw_only=True)
class WebSocketControllerMetadata:
    """Snapshot of everything a controller declares (used for AsyncAPI)."""

    controller: str
    namespace: NamespaceMetadata | None
    events: tuple[EventListenerMetadata, ...] = ()
    emits: tuple[EventEmitterMetadata, ...] = ()
    rooms: tuple[RoomMetadata, ...] = ()
    validation: dict[str, WebSocketValidationMetadata] = field(default_factory=dict)


async def run_event_middlewares(
    middlewares: Sequence[EventMiddleware],
    connection: Connection,
    data: Any,
    event: str,
) -> None:
    """Run event middlewares in order; the first rejection stops the event.

    Raises:
        WebSocketMiddlewareError: If a middleware returns ``False`` or fails.
        WebSocketError: Raised by a middleware, propagated unchanged.
    """
    for middleware in middlewares:
        try:
            result = middleware(connection, data, event)
            if inspect.isawaitable(result):
                result = await result
        except WebSocketError:
            raise
        except Exception as exc:
            raise WebSocketMiddlewareError(
                str(exc) or "Middleware execution failed", event
            ) from exc
        if result is False:
            raise WebSocketMiddlewareError(event=event)


class WebSocketController:
    """Base class for ``@namespace`` controllers.

    Args:
        logger: Logger (defaults to the application logger).
        store: Metadata store the contract was declared in.
    """

    def __init__(
        self,
        logger: LoggerProtocol | None = None,
        *,
        store: MetadataStore | None = None,
    ) -> None:
        self.logger = (logger or get_logger()).bind(controller=type(self).__name__)
        self._metadata = WebSocketMetadataStorage(store)
        self.namespace: Namespace | None = None

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register_events(self, gateway: WebSocketGateway) -> Namespace | None:
        """Bind the declared namespace and events to ``gateway``."""
        namespace_metadata = self._metadata.get_namespace(self)
        if namespace_metadata is None:
            self.logger.warning("No @namespace declared, skipping event registration")
            return None

        namespace = gateway.of(namespace_metadata.path)
        if namespace_metadata.require_auth:
            namespace.use(authenticate_connection)
        for middleware in namespace_metadata.middlewares:
            namespace.use(middleware)

        events = self._metadata.get_events(self)
        for event in events:
            namespace.on(
                event.event_name,
                self._bind(event, require_auth=namespace_metadata.require_auth),
                acknowledgment=event.acknowledgment,
            )

        namespace.on_connection(self.on_connection)
        namespace.on_disconnect(self.on_disconnect)
        self.namespace = namespace

        self.logger.info(
            "WebSocket namespace registered",
            namespace=namespace_metadata.path,
            events=[event.event_name for event in events],
        )
        return namespace

    def _bind(self, event: EventListenerMetadata, *, require_auth: bool) -> Any:
        async def handle(connection: Connection, data: Any) -> Any:
            return await self.handle_event(event, connection, data, require_auth=require_auth)

        handle.__name__ = event.method_name
        return handle

    # -------------------------------------------------------------------------
    # Event lifecycle
    # -------------------------------------------------------------------------

    async def handle_event(
        self,
        event: EventListenerMetadata,
        connection: Connection,
        data: Any,
        *,
        require_auth: bool = False,
    ) -> Any:
        """Run one event through validation, middlewares, rooms and handler.

        Returns:
            The (validated) ack reply for acknowledged events, else None.
        """
        event_name = event.event_name
        method_name = event.method_name
        validation = self._metadata.get_validation(self, method_name)

        payload = data
        if validation.data is not None:
            try:
                payload = validation.data.model_validate(data)
            except ValidationError as exc:
                raise WebSocketValidationError(
                    "Validation failed", validation_details(exc), event_name
                ) from exc

        middlewares = self._metadata.get_middlewares(self, method_name)
        if require_auth:
            middlewares = (require_authenticated, *middlewares)
        await run_event_middlewares(middlewares, connection, payload, event_name)

        handler = getattr(self, method_name, None)
        if not callable(handler):
            raise WebSocketHandlerNotFoundError(method_name, event_name)

        rooms = self._metadata.get_method_rooms(self, method_name)
        for room in rooms:
            if room.action == "join":
                connection.join(room.resolve(payload))

        result = handler(connection, payload)
        if inspect.isawaitable(result):
            result = await result

        for room in rooms:
            if room.action == "leave":
                connection.leave(room.resolve(payload))

        self.logger.debug(
            "WebSocket event handled", event_name=event_name, connection_id=connection.id
        )
        if not event.acknowledgment:
            return None
        return self._validate_ack(result, validation, event_name)

    def _validate_ack(
        self, result: Any, validation: WebSocketValidationMetadata, event_name: str
    ) -> Any:
        if validation.ack is None:
            return result
        try:
            return validation.ack.model_validate(result, from_attributes=True).model_dump(
                mode="json", exclude_none=True
            )
        except ValidationError as exc:
            raise WebSocketAckValidationError(
                f"Acknowledgment validation failed: {exc.error_count()} error(s)",
                event_name,
            ) from exc

    # -------------------------------------------------------------------------
    # Emit helpers
    # -------------------------------------------------------------------------

    def _validate_emit(self, event: str, data: Any) -> Any:
        emit = self._metadata.get_emit(self, event)
        if emit is None or emit.validation is None:
            return data
        try:
            return emit.validation.model_validate(data, from_attributes=True).model_dump(
                mode="json"
            )
        except ValidationError as exc:
            raise WebSocketValidationError(
                f"Invalid payload for emitted event '{event}'",
                validation_details(exc),
                event,
            ) from exc

    async def emit_to_room(self, room: str, event: str, data: Any = None) -> int:
        """Send ``event`` to every member of ``room``."""
        if self.namespace is None:
            self.logger.warning("Cannot emit to room: namespace not initialized", room=room)
            return 0
        return await self.namespace.emit(event, self._validate_emit(event, data), room=room)

    async def broadcast(self, event: str, data: Any = None) -> int:
        """Send ``event`` to every client of the namespace."""
        if self.namespace is None:
            self.logger.warning("Cannot broadcast: namespace not initialized", event_name=event)
            return 0
        return await self.namespace.emit(event, self._validate_emit(event, data))

    async def emit(self, connection: Connection, event: str, data: Any = None) -> None:
        """Send ``event`` to one client."""
        await connection.emit(event, self._validate_emit(event, data))

    # -------------------------------------------------------------------------
    # Lifecycle hooks
    # -------------------------------------------------------------------------

    async def on_connection(self, connection: Connection) -> None:
        """Called once a client passed the connection middlewares."""
        self.logger.debug("Client connected", connection_id=connection.id)

    async def on_disconnect(self, connection: Connection, reason: str) -> None:
        self.logger.debug("Client disconnected", connection_id=connection.id, reason=reason)

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def get_metadata(self) -> WebSocketControllerMetadata:
        events = self._metadata.get_events(self)
        return WebSocketControllerMetadata(
            controller=type(self).__name__,
            namespace=self._metadata.get_namespace(self),
            events=events,
            emits=self._metadata.get_emits(self),
            rooms=self._metadata.get_rooms(self),
            validation={
                event.method_name: self._metadata.get_validation(self, event.method_name)
                for event in events
            },
        )
