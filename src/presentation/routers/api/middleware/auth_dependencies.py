"""JWT authentication dependencies.

FastAPI dependencies for extracting and validating JWT access tokens.
Contract routes marked ``@protected()`` get ``authenticate_request`` spliced
in by the router generator; it stores the user on ``request.state.user`` so
handlers read it through ``ApiRequest.user``.

Usage:
    # Contract controller
    @get("/{id}")
    @protected()
    @middlewares(require_role("admin"))
    async def get_category(self, request: ApiRequest, response: Response):
        user = request.user

    # Plain FastAPI route
    @router.get("/me")
    async def me(current_user: AuthenticatedUser):
        return {"user_id": str(current_user.user_id)}
"""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.core.container import get_token_service
from src.core.result import Failure, Success
from src.domain.protocols.token_generation_protocol import TokenGenerationProtocol

# auto_error=False so a missing token answers 401 (not FastAPI's default)
bearer_scheme = HTTPBearer(auto_error=False)

_UNAUTHORIZED_HEADERS = {"WWW-Authenticate": "Bearer"}


@dataclass(frozen=True, slots=True, kw_only=True)
class CurrentUser:
    """Authenticated user information from JWT.

    Attributes:
        user_id: User's unique identifier (from JWT 'sub' claim).
        email: User's email address (from JWT 'email' claim).
        roles: User's roles (from JWT 'roles' claim).
        token_jti: JWT unique identifier.
    """

    user_id: UUID
    email: str
    roles: list[str]
    token_jti: str | None = None


def user_from_claims(payload: Mapping[str, Any]) -> CurrentUser:
    """Build a CurrentUser from validated token claims.

    Raises:
        KeyError: If a required claim is missing.
        ValueError: If 'sub' is not a UUID.
    """
    roles_raw = payload.get("roles", ["user"])
    jti_raw = payload.get("jti")
    return CurrentUser(
        user_id=UUID(str(payload["sub"])),
        email=str(payload["email"]),
        roles=roles_raw if isinstance(roles_raw, list) else ["user"],
        token_jti=str(jti_raw) if jti_raw else None,
    )


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers=_UNAUTHORIZED_HEADERS,
    )


async def get_current_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
    token_service: Annotated[TokenGenerationProtocol, Depends(get_token_service)],
) -> CurrentUser:
    """Get current authenticated user from the Authorization header.

    Raises:
        HTTPException 401: If token is missing, invalid, or expired.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    result = token_service.validate_access_token(credentials.credentials)

    match result:
        case Success(value=payload):
            try:
                return user_from_claims(payload)
            except (KeyError, ValueError) as e:
                raise _unauthorized("Invalid token payload") from e

        case Failure(error=error):
            raise _unauthorized(error)


async def authenticate_request(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Bearer-auth dependency used for ``@protected()`` contract routes."""
    request.state.user = current_user
    return current_user


def require_role(
    required_role: str,
) -> Callable[..., Awaitable[CurrentUser]]:
    """Create a dependency that requires a specific role.

    Raises:
        HTTPException 403: If user does not have required role.
    """

    async def role_checker(
        current_user: Annotated[CurrentUser, Depends(authenticate_request)],
    ) -> CurrentUser:
        if required_role not in current_user.roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{required_role}' required",
            )
        return current_user

    return role_checker


# Type alias for cleaner route signatures
AuthenticatedUser = Annotated[CurrentUser, Depends(get_current_user)]
