"""Token validation protocol used by bearer-auth dependencies.

Only the contract needed by the presentation layer lives here: issuing and
validating short-lived JWT access tokens. User management and password
handling are outside this service.
"""

from typing import Protocol
from uuid import UUID

from src.core.result import Result


class TokenGenerationProtocol(Protocol):
    """JWT access token generation and validation interface.

    Implementations:
        - JWTService: PyJWT, HMAC signing
    """

    def generate_access_token(
        self,
        user_id: UUID,
        email: str,
        roles: list[str],
    ) -> str:
        """Issue a signed access token for the given identity."""
        ...

    def validate_access_token(
        self, token: str
    ) -> Result[dict[str, str | int | list[str]], str]:
        """Validate a token.

        Returns:
            Success with the decoded claims, or Failure with an error message.
        """
        ...
