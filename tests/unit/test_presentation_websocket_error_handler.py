"""Unit tests for WebSocket errors and the error handler.

Tests cover:
- Error codes and client payloads
- Normalization of arbitrary exceptions
- Ack replies versus ``error`` events
- Fatal errors closing the connection with 1008
- Operational versus programming error logging
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import BaseModel, ValidationError

from src.infrastructure.logging.console_adapter import ConsoleAdapter
from src.presentation.websocket import (
    WebSocketAckValidationError,
    WebSocketAuthError,
    WebSocketError,
    WebSocketErrorHandler,
    WebSocketHandlerNotFoundError,
    WebSocketInternalError,
    WebSocketMiddlewareError,
    WebSocketValidationError,
)


class Payload(BaseModel):
    count: int


def _validation_error() -> ValidationError:
    try:
        Payload.model_validate({"count": "many"})
    except ValidationError as exc:
        return exc
    raise AssertionError("expected a validation error")


@pytest.fixture
def logger() -> MagicMock:
    return MagicMock()


@pytest.fixture
def connection() -> MagicMock:
    connection = MagicMock()
    connection.id = "conn-1"
    connection.namespace_path = "/chat"
    connection.emit = AsyncMock()
    connection.send_ack = AsyncMock()
    connection.close = AsyncMock()
    return connection


@pytest.mark.unit
class TestErrorPayloads:
    """Test the error hierarchy."""

    @pytest.mark.parametrize(
        ("error", "code", "operational"),
        [
            (WebSocketValidationError(), "WS_VALIDATION_ERROR", True),
            (WebSocketAckValidationError(), "WS_ACK_VALIDATION_ERROR", False),
            (WebSocketAuthError(), "WS_AUTH_ERROR", True),
            (WebSocketHandlerNotFoundError("handle"), "WS_HANDLER_NOT_FOUND", False),
            (WebSocketInternalError(), "WS_INTERNAL_ERROR", False),
            (WebSocketMiddlewareError(), "WS_MIDDLEWARE_ERROR", True),
        ],
    )
    def test_codes(self, error, code, operational):
        assert error.code == code
        assert error.is_operational is operational

    def test_to_dict_omits_missing_event(self):
        assert WebSocketError("Nope").to_dict() == {
            "success": False,
            "error": "Nope",
            "code": "WS_ERROR",
        }

    def test_validation_details_included(self):
        error = WebSocketValidationError(
            details=[{"path": ["room_id"], "message": "Field required"}], event="chat:join"
        )

        assert error.to_dict() == {
            "success": False,
            "error": "Validation failed",
            "code": "WS_VALIDATION_ERROR",
            "event": "chat:join",
            "details": [{"path": ["room_id"], "message": "Field required"}],
        }


@pytest.mark.unit
class TestNormalize:
    """Test exception normalization."""

    def test_websocket_error_gets_event(self, logger):
        handler = WebSocketErrorHandler(logger)
        error = WebSocketAuthError()

        normalized = handler.normalize(error, "chat:join")

        assert normalized is error
        assert normalized.event == "chat:join"

    def test_existing_event_kept(self, logger):
        error = WebSocketAuthError(event="chat:leave")

        assert WebSocketErrorHandler(logger).normalize(error, "chat:join").event == "chat:leave"

    def test_pydantic_error_becomes_validation_error(self, logger):
        normalized = WebSocketErrorHandler(logger).normalize(_validation_error(), "x")

        assert isinstance(normalized, WebSocketValidationError)
        assert normalized.details[0]["path"] == ["count"]

    def test_unexpected_error_hidden_outside_development(self, logger):
        handler = WebSocketErrorHandler(logger, expose_internal_errors=False)

        normalized = handler.normalize(KeyError("secret"), "x")

        assert isinstance(normalized, WebSocketInternalError)
        assert normalized.message == "Internal server error"

    def test_unexpected_error_exposed_in_development(self, logger):
        handler = WebSocketErrorHandler(logger, expose_internal_errors=True)

        assert handler.normalize(RuntimeError("boom")).message == "boom"


@pytest.mark.unit
class TestHandle:
    """Test reporting to the client."""

    async def test_ack_reply_when_id_present(self, logger, connection):
        handler = WebSocketErrorHandler(logger)

        await handler.handle(WebSocketAuthError(), connection, "chat:join", 5)

        connection.send_ack.assert_awaited_once()
        ack_id, payload = connection.send_ack.await_args.args
        assert ack_id == 5
        assert payload["code"] == "WS_AUTH_ERROR"
        connection.emit.assert_not_awaited()

    async def test_error_event_without_id(self, logger, connection):
        handler = WebSocketErrorHandler(logger)

        await handler.handle(WebSocketAuthError(), connection, "chat:join")

        event, payload = connection.emit.await_args.args
        assert event == "error"
        assert payload["event"] == "chat:join"

    async def test_operational_errors_logged_as_warning(self, logger, connection):
        await WebSocketErrorHandler(logger).handle(WebSocketAuthError(), connection)

        logger.warning.assert_called_once()
        logger.error.assert_not_called()

    async def test_programming_errors_logged_as_error(self, logger, connection):
        await WebSocketErrorHandler(logger).handle(RuntimeError("boom"), connection)

        logger.error.assert_called_once()

    async def test_fatal_closes_with_policy_violation(self, logger, connection):
        handler = WebSocketErrorHandler(logger)

        result = await handler.handle_fatal(WebSocketAuthError("Token expired"), connection)

        assert result.code == "WS_AUTH_ERROR"
        connection.emit.assert_awaited_once()
        connection.close.assert_awaited_once_with(code=1008, reason="Token expired")


@pytest.mark.unit
class TestHandlerWithConsoleLogger:
    """Error reporting through the real structlog adapter."""

    @pytest.fixture
    def console_logger(self) -> ConsoleAdapter:
        return ConsoleAdapter(use_json=True, level="DEBUG")

    async def test_operational_error_reaches_client(self, console_logger, connection):
        handler = WebSocketErrorHandler(console_logger)

        await handler.handle(WebSocketAuthError(), connection, "chat:join", 4)

        ack_id, payload = connection.send_ack.await_args.args
        assert ack_id == 4
        assert payload["code"] == "WS_AUTH_ERROR"

    async def test_programming_error_reaches_client(self, console_logger, connection):
        handler = WebSocketErrorHandler(console_logger, expose_internal_errors=False)

        await handler.handle(RuntimeError("boom"), connection, "chat:join")

        event, payload = connection.emit.await_args.args
        assert event == "error"
        assert payload["error"] == "Internal server error"

    async def test_fatal_error_closes_connection(self, connection, capsys):
        handler = WebSocketErrorHandler(ConsoleAdapter(use_json=True))

        await handler.handle_fatal(WebSocketAuthError("Token expired"), connection)

        connection.close.assert_awaited_once_with(code=1008, reason="Token expired")
        assert '"event_name": "connection"' in capsys.readouterr().out
