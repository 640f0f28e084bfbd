"""Centralized WebSocket error handling.

Normalizes any exception raised while serving a connection into a
``WebSocketError`` and reports it to the client:

- as the acknowledgment reply when the client asked for one
- otherwise as an ``error`` event
- fatal errors (connection middlewares, auth) close the socket with 1008
"""

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from src.core.config import settings
from src.core.container import get_logger
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.presentation.websocket.errors import (
    WebSocketError,
    WebSocketInternalError,
    WebSocketValidationError,
)

if TYPE_CHECKING:
    from src.presentation.websocket.gateway import Connection

ERROR_EVENT = "error"
POLICY_VIOLATION = 1008


def validation_details(exc: ValidationError) -> list[dict[str, Any]]:
    return [
        {"path": [str(part) for part in error["loc"]], "message": error["msg"]}
        for error in exc.errors()
    ]


class WebSocketErrorHandler:
    """Report errors to WebSocket clients.

    Args:
        logger: Logger (defaults to the application logger).
        expose_internal_errors: Send unexpected exception messages to clients
            (defaults to development mode).
    """

    def __init__(
        self,
        logger: LoggerProtocol | None = None,
        *,
        expose_internal_errors: bool | None = None,
    ) -> None:
        self._logger = logger or get_logger()
        self._expose = (
            settings.is_development
            if expose_internal_errors is None
            else expose_internal_errors
        )

    def normalize(self, error: Exception, event: str | None = None) -> WebSocketError:
        if isinstance(error, WebSocketError):
            if error.event is None:
                error.event = event
            return error
        if isinstance(error, ValidationError):
            return WebSocketValidationError(
                "Validation failed", validation_details(error), event
            )
        message = str(error) if self._expose else "Internal server error"
        return WebSocketInternalError(message, event)

    async def handle(
        self,
        error: Exception,
        connection: "Connection",
        event: str | None = None,
        ack_id: str | int | None = None,
    ) -> WebSocketError:
        """Report ``error`` as the ack reply, or as an ``error`` event."""
        ws_error = self.normalize(error, event)
        self._log(ws_error, connection, original=error)

        if ack_id is not None:
            await connection.send_ack(ack_id, ws_error.to_dict())
        else:
            await connection.emit(ERROR_EVENT, ws_error.to_dict())
        return ws_error

    async def handle_fatal(
        self,
        error: Exception,
        connection: "Connection",
        event: str | None = None,
    ) -> WebSocketError:
        """Report ``error`` and close the connection (policy violation)."""
        ws_error = self.normalize(error, event)
        self._logger.warning(
            "Fatal WebSocket error, closing connection",
            connection_id=connection.id,
            namespace=connection.namespace_path,
            event_name=event or "connection",
            code=ws_error.code,
            error_message=ws_error.message,
        )
        await connection.emit(ERROR_EVENT, ws_error.to_dict())
        await connection.close(code=POLICY_VIOLATION, reason=ws_error.message)
        return ws_error

    def _log(
        self, ws_error: WebSocketError, connection: "Connection", *, original: Exception
    ) -> None:
        context = {
            "connection_id": connection.id,
            "namespace": connection.namespace_path,
            "event_name": ws_error.event,
            "code": ws_error.code,
        }
        if ws_error.is_operational:
            self._logger.warning("WebSocket error", error_message=ws_error.message, **context)
        else:
            self._logger.error("WebSocket error", error=original, **context)
