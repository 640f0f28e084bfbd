"""JWT token service (adapter).

Implements TokenGenerationProtocol using PyJWT. Used by the bearer-auth
dependency that protected routes and authenticated WebSocket namespaces
rely on.

Security:
    - HMAC signing (HS256 by default)
    - 256-bit secret key minimum
    - Unique JWT ID (jti) per token
"""

from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError
from uuid_extensions import uuid7

from src.core.result import Failure, Result, Success

INVALID_TOKEN = "Invalid token"
EXPIRED_TOKEN = "Token expired"


class JWTService:
    """JWT access token generation and validation service.

    Usage:
        from src.core.container import get_token_service

        token_service = get_token_service()
        token = token_service.generate_access_token(
            user_id=user_id, email="a@b.c", roles=["user"]
        )
        result = token_service.validate_access_token(token)
    """

    def __init__(
        self,
        secret_key: str,
        expiration_minutes: int = 15,
        algorithm: str = "HS256",
    ) -> None:
        """Initialize JWT service.

        Args:
            secret_key: Secret key for HMAC signing, at least 32 bytes.
            expiration_minutes: Token lifetime in minutes.
            algorithm: PyJWT algorithm name.

        Raises:
            ValueError: If secret_key is shorter than 32 bytes.
        """
        if len(secret_key) < 32:
            msg = "JWT secret key must be at least 32 bytes (256 bits)"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._expiration_minutes = expiration_minutes
        self._algorithm = algorithm

    def generate_access_token(
        self,
        user_id: UUID,
        email: str,
        roles: list[str],
    ) -> str:
        """Generate a signed JWT access token.

        Args:
            user_id: Subject of the token.
            email: User's email address.
            roles: User roles.

        Returns:
            JWT string (header.payload.signature).
        """
        now = datetime.now(UTC)
        expires_at = now + timedelta(minutes=self._expiration_minutes)

        payload = {
            "sub": str(user_id),
            "email": email,
            "roles": roles,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": str(uuid7()),
        }

        token: str = jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
        return token

    def validate_access_token(
        self, token: str
    ) -> Result[dict[str, str | int | list[str]], str]:
        """Validate JWT access token and extract its claims.

        Args:
            token: JWT access token string.

        Returns:
            Success with the claims dict, or Failure with INVALID_TOKEN /
            EXPIRED_TOKEN.
        """
        try:
            payload: dict[str, str | int | list[str]] = jwt.decode(
                token, self._secret_key, algorithms=[self._algorithm]
            )
            return Success(value=payload)
        except ExpiredSignatureError:
            return Failure(error=EXPIRED_TOKEN)
        except InvalidTokenError:
            return Failure(error=INVALID_TOKEN)
