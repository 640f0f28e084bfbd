"""WebSocket error hierarchy.

Every error carries a machine-readable ``code``, the event it occurred on
(if any) and whether it is operational (expected, logged as a warning) or a
programming error (logged as an error).
"""

from typing import Any


class WebSocketError(Exception):
    """Base class for errors reported to WebSocket clients."""

    default_code = "WS_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        event: str | None = None,
        *,
        is_operational: bool = True,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.event = event
        self.is_operational = is_operational

    def to_dict(self) -> dict[str, Any]:
        """Client-safe representation."""
        payload: dict[str, Any] = {
            "success": False,
            "error": self.message,
            "code": self.code,
        }
        if self.event is not None:
            payload["event"] = self.event
        return payload


class WebSocketValidationError(WebSocketError):
    """Event data failed its schema, or the frame was malformed."""

    default_code = "WS_VALIDATION_ERROR"

    def __init__(
        self,
        message: str = "Validation failed",
        details: list[dict[str, Any]] | None = None,
        event: str | None = None,
    ) -> None:
        super().__init__(message, event=event)
        self.details = details or []

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        if self.details:
            payload["details"] = self.details
        return payload


class WebSocketAckValidationError(WebSocketError):
    """Handler result failed the acknowledgment schema."""

    default_code = "WS_ACK_VALIDATION_ERROR"

    def __init__(
        self, message: str = "Acknowledgment validation failed", event: str | None = None
    ) -> None:
        super().__init__(message, event=event, is_operational=False)


class WebSocketAuthError(WebSocketError):
    default_code = "WS_AUTH_ERROR"

    def __init__(self, message: str = "Authentication required", event: str | None = None) -> None:
        super().__init__(message, event=event)


class WebSocketHandlerNotFoundError(WebSocketError):
    default_code = "WS_HANDLER_NOT_FOUND"

    def __init__(self, method_name: str, event: str | None = None) -> None:
        super().__init__(
            f"Handler '{method_name}' not found", event=event, is_operational=False
        )


class WebSocketInternalError(WebSocketError):
    default_code = "WS_INTERNAL_ERROR"

    def __init__(self, message: str = "Internal server error", event: str | None = None) -> None:
        super().__init__(message, event=event, is_operational=False)


class WebSocketMiddlewareError(WebSocketError):
    """An event middleware rejected the event."""

    default_code = "WS_MIDDLEWARE_ERROR"

    def __init__(
        self, message: str = "Middleware rejected the request", event: str | None = None
    ) -> None:
        super().__init__(message, event=event)
