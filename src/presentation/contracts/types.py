"""Request object and base class for contract controllers."""

from dataclasses import dataclass, field
from typing import Any

from fastapi import Request

from src.core.container import get_logger
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.presentation.routers.api.middleware.auth_dependencies import CurrentUser


@dataclass(slots=True, kw_only=True)
class ApiRequest:
    """Request passed to contract handlers.

    ``params``, ``query`` and ``body`` hold the validated pydantic models when
    a schema is bound to the route, and the raw values otherwise.

    Attributes:
        raw: Underlying Starlette request.
        params: Path parameters.
        query: Query parameters.
        body: Parsed JSON body (None when the route declares no body schema).
    """

    raw: Request
    params: Any = field(default_factory=dict)
    query: Any = field(default_factory=dict)
    body: Any = None

    @property
    def user(self) -> CurrentUser | None:
        """User set by the bearer-auth dependency, if the route is protected."""
        return getattr(self.raw.state, "user", None)

    @property
    def headers(self) -> Any:
        return self.raw.headers

    @property
    def cookies(self) -> dict[str, str]:
        return self.raw.cookies


class BaseController:
    """Base class for decorated HTTP controllers.

    Args:
        logger: Logger bound with the controller name (defaults to the
            application logger).
    """

    def __init__(self, logger: LoggerProtocol | None = None) -> None:
        self.logger = (logger or get_logger()).bind(controller=type(self).__name__)
