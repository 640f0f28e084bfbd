"""Namespace authentication.

Connections to a namespace declared with ``require_auth=True`` must present
an access token, either as the ``token`` query parameter or as an
``Authorization: Bearer`` header. The verified user is stored on
``connection.user``; every event of the namespace then re-checks it.
"""

from typing import Any

from src.core.container import get_token_service
from src.core.result import Failure, Success
from src.presentation.routers.api.middleware.auth_dependencies import user_from_claims
from src.presentation.websocket.errors import WebSocketAuthError
from src.presentation.websocket.gateway import Connection

TOKEN_QUERY_PARAM = "token"


def extract_token(connection: Connection) -> str | None:
    token = connection.query_params.get(TOKEN_QUERY_PARAM)
    if token:
        return token

    scheme, _, credentials = connection.headers.get("authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


async def authenticate_connection(connection: Connection) -> None:
    """Connection middleware verifying the access token.

    Raises:
        WebSocketAuthError: If the token is missing, invalid or expired.
    """
    token = extract_token(connection)
    if token is None:
        raise WebSocketAuthError("Authentication token missing")

    match get_token_service().validate_access_token(token):
        case Success(value=payload):
            try:
                connection.user = user_from_claims(payload)
            except (KeyError, ValueError) as e:
                raise WebSocketAuthError("Invalid token payload") from e
        case Failure(error=error):
            raise WebSocketAuthError(error)


async def require_authenticated(connection: Connection, _data: Any, event: str) -> None:
    """Event middleware rejecting events of unauthenticated connections."""
    if connection.user is None:
        raise WebSocketAuthError("Authentication required for this event", event=event)
