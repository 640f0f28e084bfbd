"""Header and cookie contract decorators.

Required headers and cookies are enforced by FastAPI dependencies the router
generator splices in front of the handler; set headers are written onto the
response before the handler runs. All of them are documented in the OpenAPI
operation (header parameters, response headers, ``Set-Cookie``).
"""

from collections.abc import Iterable, Mapping
from typing import Any

from src.core.errors import ContractDefinitionError
from src.presentation.contracts.declarations import ContractMember, declare
from src.presentation.contracts.decorators import MethodDecorator, resolve_store
from src.presentation.contracts.metadata import (
    CookieMetadata,
    CookieOptions,
    HeaderValue,
    MetadataStore,
    RequiredHeadersMetadata,
    SetHeadersMetadata,
)

REFRESH_TOKEN_COOKIE = "refresh_token"


def required_headers(
    headers: Iterable[str], *, store: MetadataStore | None = None
) -> MethodDecorator:
    """Reject requests missing any of ``headers`` with 400.

    Header names are matched case-insensitively.
    """
    names = tuple(header.lower() for header in headers)
    if not names:
        raise ContractDefinitionError("@required_headers needs at least one header")

    def decorator(func: Any) -> ContractMember:
        def register(owner: type, name: str) -> None:
            resolve_store(store).set_required_headers(
                owner, name, RequiredHeadersMetadata(headers=names)
            )

        return declare(func, register, decorator="required_headers")

    return decorator


def set_headers(
    headers: Mapping[str, HeaderValue], *, store: MetadataStore | None = None
) -> MethodDecorator:
    """Write response headers before the handler runs.

    Values may be strings or callables receiving ``(request, response)``.
    """
    entries = tuple(headers.items())

    def decorator(func: Any) -> ContractMember:
        def register(owner: type, name: str) -> None:
            resolve_store(store).set_set_headers(
                owner, name, SetHeadersMetadata(headers=entries)
            )

        return declare(func, register, decorator="set_headers")

    return decorator


def required_cookie(
    cookie_name: str,
    options: CookieOptions | None = None,
    *,
    store: MetadataStore | None = None,
) -> MethodDecorator:
    """Reject requests without ``cookie_name`` with 401."""

    def decorator(func: Any) -> ContractMember:
        def register(owner: type, name: str) -> None:
            resolve_store(store).set_required_cookie(
                owner, name, CookieMetadata(name=cookie_name, options=options)
            )

        return declare(func, register, decorator="required_cookie")

    return decorator


def refresh_token_cookie(*, store: MetadataStore | None = None) -> MethodDecorator:
    """Shorthand for ``required_cookie("refresh_token")``."""
    return required_cookie(
        REFRESH_TOKEN_COOKIE,
        CookieOptions(max_age=7 * 24 * 60 * 60),
        store=store,
    )


def set_cookie(
    cookie_name: str,
    options: CookieOptions | None = None,
    *,
    store: MetadataStore | None = None,
) -> MethodDecorator:
    """Document a cookie set by the handler (``Set-Cookie`` response header)."""

    def decorator(func: Any) -> ContractMember:
        def register(owner: type, name: str) -> None:
            resolve_store(store).set_set_cookie(
                owner,
                name,
                CookieMetadata(name=cookie_name, options=options or CookieOptions()),
            )

        return declare(func, register, decorator="set_cookie")

    return decorator
