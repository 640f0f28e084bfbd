"""Contract metadata types and the process-wide metadata store.

Controllers declare their HTTP contract with decorators (see
``src.presentation.contracts.decorators``). Each decorator resolves to a call
on the ``MetadataStore`` defined here, which is the single source of truth the
router generator and the documentation aggregators read from.

Core types:
    HTTPMethod: HTTP method enum (GET, POST, PUT, PATCH, DELETE)
    ControllerMetadata: Tag, prefix and description of a controller class
    RouteMetadata: One HTTP route exposed by a controller method
    ResponseMetadata: One documented response of a controller method
    ValidationMetadata: Request schemas (body, params, query) of a method
    MiddlewaresMetadata: FastAPI dependencies run before a method
    RequiredHeadersMetadata / SetHeadersMetadata: Header contracts
    CookieMetadata / CookieOptions: Cookie contracts

Usage:
    from src.presentation.contracts.metadata import metadata_store

    metadata_store.add_route(
        CategoriesController,
        RouteMetadata(method=HTTPMethod.GET, path="/", method_name="list_categories"),
    )
    routes = metadata_store.get_routes(CategoriesController)

Records are keyed by ``(owner class, kind, member name)``. Lookups walk the
owner's MRO so subclasses see the contract declared on their bases: list
records concatenate base first, single records resolve to the nearest class.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Final, Literal

from fastapi import Request, Response
from pydantic import BaseModel

AUTH_MARKER: Final = "__AUTH__"
"""Placeholder spliced into a method's middlewares by ``@protected``.

The router generator replaces it with the bearer-auth dependency.
"""

type Dependency = Callable[..., Any]
type Middleware = Dependency | Literal["__AUTH__"]
type HeaderValue = str | Callable[[Request, Response], str]


# =============================================================================
# Metadata Types
# =============================================================================


class HTTPMethod(str, Enum):
    """HTTP methods supported by route decorators."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class MetadataKind(str, Enum):
    """Kinds of records kept by the metadata store."""

    CONTROLLER = "controller"
    ROUTES = "routes"
    RESPONSES = "responses"
    VALIDATION = "validation"
    MIDDLEWARES = "middlewares"
    REQUIRED_HEADERS = "required_headers"
    SET_HEADERS = "set_headers"
    REQUIRED_COOKIE = "required_cookie"
    SET_COOKIE = "set_cookie"
    SUMMARY = "summary"
    DESCRIPTION = "description"


@dataclass(frozen=True, slots=True, kw_only=True)
class ControllerMetadata:
    """Class-level contract of a controller.

    Attributes:
        tag: Documentation group shared by every route of the controller.
        prefix: Path prefix prepended to every route path.
        description: Human-readable tag description.
    """

    tag: str
    prefix: str | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class RouteMetadata:
    """One HTTP route declared on a controller method.

    Attributes:
        method: HTTP method.
        path: Route path relative to the controller prefix.
        method_name: Name of the handler method on the controller.
        summary: Short operation summary.
        description: Long operation description.
    """

    method: HTTPMethod
    path: str
    method_name: str
    summary: str | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ResponseMetadata:
    """One documented response of a route.

    Attributes:
        status_code: HTTP status code.
        description: Response description.
        schema: Optional pydantic model describing the response body.
    """

    status_code: int
    description: str
    schema: type[BaseModel] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationMetadata:
    """Request schemas bound to a route, validated before the handler runs."""

    body: type[BaseModel] | None = None
    params: type[BaseModel] | None = None
    query: type[BaseModel] | None = None

    @property
    def is_empty(self) -> bool:
        return self.body is None and self.params is None and self.query is None


@dataclass(frozen=True, slots=True, kw_only=True)
class MiddlewaresMetadata:
    """Ordered FastAPI dependencies (or the auth marker) run before a route."""

    middlewares: tuple[Middleware, ...] = ()

    @property
    def requires_auth(self) -> bool:
        return AUTH_MARKER in self.middlewares


@dataclass(frozen=True, slots=True, kw_only=True)
class RequiredHeadersMetadata:
    """Request headers that must be present (stored lower-cased)."""

    headers: tuple[str, ...]


@dataclass(frozen=True, slots=True, kw_only=True)
class SetHeadersMetadata:
    """Response headers written before the handler runs.

    Values are either literal strings or callables receiving
    ``(request, response)``.
    """

    headers: tuple[tuple[str, HeaderValue], ...]


@dataclass(frozen=True, slots=True, kw_only=True)
class CookieOptions:
    """Attributes documented for a cookie."""

    http_only: bool = True
    secure: bool = True
    same_site: Literal["strict", "lax", "none"] = "strict"
    max_age: int | None = None
    path: str = "/"
    domain: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class CookieMetadata:
    """A required request cookie or a cookie set by the response."""

    name: str
    options: CookieOptions | None = None


@dataclass(frozen=True, slots=True)
class MetadataRecord:
    """Raw entry of the metadata store (used by ``MetadataStore.records``)."""

    owner: type
    kind: str
    member: str | None
    payload: Any = field(compare=False)


# =============================================================================
# Metadata Store
# =============================================================================


def _owner_of(target: Any) -> type:
    return target if isinstance(target, type) else type(target)


class MetadataStore:
    """Side table mapping controller classes and members to contract records.

    Nothing is stored on the user's classes or functions. Single records
    (controller, validation, headers, cookies, summary, description) are
    last-write-wins or merged; list records (routes, responses, middlewares)
    are append-only and keep declaration order.

    ``target`` arguments accept either a controller class or an instance of
    one.
    """

    def __init__(self) -> None:
        self._records: dict[tuple[type, str, str | None], Any] = {}

    # -------------------------------------------------------------------------
    # Primitives
    # -------------------------------------------------------------------------

    def define(
        self,
        target: Any,
        kind: str,
        value: Any,
        member: str | None = None,
    ) -> None:
        """Store a single record, replacing any previous one."""
        self._records[(_owner_of(target), kind, member)] = value

    def append(
        self,
        target: Any,
        kind: str,
        value: Any,
        member: str | None = None,
    ) -> None:
        """Append to a list record on the exact owner class."""
        key = (_owner_of(target), kind, member)
        self._records.setdefault(key, []).append(value)

    def get(
        self,
        target: Any,
        kind: str,
        member: str | None = None,
        default: Any = None,
    ) -> Any:
        """Return the nearest record along the owner's MRO, or ``default``."""
        for klass in _owner_of(target).__mro__:
            key = (klass, kind, member)
            if key in self._records:
                return self._records[key]
        return default

    def collect(
        self,
        target: Any,
        kind: str,
        member: str | None = None,
    ) -> tuple[Any, ...]:
        """Concatenate list records along the owner's MRO, bases first."""
        collected: list[Any] = []
        for klass in reversed(_owner_of(target).__mro__):
            collected.extend(self._records.get((klass, kind, member), ()))
        return tuple(collected)

    def records(self) -> tuple[MetadataRecord, ...]:
        """Snapshot of every record, in insertion order."""
        return tuple(
            MetadataRecord(owner, kind, member, value)
            for (owner, kind, member), value in self._records.items()
        )

    def clear(self) -> None:
        """Drop every record."""
        self._records.clear()

    # -------------------------------------------------------------------------
    # Controller
    # -------------------------------------------------------------------------

    def set_controller_metadata(
        self, target: Any, metadata: ControllerMetadata
    ) -> None:
        self.define(target, MetadataKind.CONTROLLER, metadata)

    def get_controller_metadata(self, target: Any) -> ControllerMetadata | None:
        return self.get(target, MetadataKind.CONTROLLER)

    # -------------------------------------------------------------------------
    # Routes
    # -------------------------------------------------------------------------

    def add_route(self, target: Any, route: RouteMetadata) -> None:
        self.append(target, MetadataKind.ROUTES, route)

    def get_routes(self, target: Any) -> tuple[RouteMetadata, ...]:
        """Return routes in declaration order.

        ``@summary`` and ``@description`` records override the values passed
        to the route decorator, whichever order they were stacked in.
        """
        routes: tuple[RouteMetadata, ...] = self.collect(target, MetadataKind.ROUTES)
        resolved = []
        for route in routes:
            summary = self.get(target, MetadataKind.SUMMARY, route.method_name)
            description = self.get(target, MetadataKind.DESCRIPTION, route.method_name)
            if summary is not None:
                route = replace(route, summary=summary)
            if description is not None:
                route = replace(route, description=description)
            resolved.append(route)
        return tuple(resolved)

    def set_summary(self, target: Any, member: str, text: str) -> None:
        self.define(target, MetadataKind.SUMMARY, text, member)

    def set_description(self, target: Any, member: str, text: str) -> None:
        self.define(target, MetadataKind.DESCRIPTION, text, member)

    # -------------------------------------------------------------------------
    # Responses
    # -------------------------------------------------------------------------

    def add_response(
        self, target: Any, member: str, response: ResponseMetadata
    ) -> None:
        self.append(target, MetadataKind.RESPONSES, response, member)

    def get_responses(self, target: Any, member: str) -> tuple[ResponseMetadata, ...]:
        return self.collect(target, MetadataKind.RESPONSES, member)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def merge_validation(
        self,
        target: Any,
        member: str,
        *,
        body: type[BaseModel] | None = None,
        params: type[BaseModel] | None = None,
        query: type[BaseModel] | None = None,
    ) -> ValidationMetadata:
        """Merge request schemas into the method's validation record.

        Only the parts passed here are replaced; the others are kept.
        """
        current = self.get_validation(target, member)
        merged = ValidationMetadata(
            body=body or current.body,
            params=params or current.params,
            query=query or current.query,
        )
        self.define(target, MetadataKind.VALIDATION, merged, member)
        return merged

    def get_validation(self, target: Any, member: str) -> ValidationMetadata:
        return self.get(
            target, MetadataKind.VALIDATION, member, default=ValidationMetadata()
        )

    # -------------------------------------------------------------------------
    # Middlewares
    # -------------------------------------------------------------------------

    def add_middlewares(
        self, target: Any, member: str, middlewares: Iterable[Middleware]
    ) -> MiddlewaresMetadata:
        """Append middlewares after those already declared on the method."""
        current = self.get_middlewares(target, member)
        merged = MiddlewaresMetadata(
            middlewares=current.middlewares + tuple(middlewares)
        )
        self.define(target, MetadataKind.MIDDLEWARES, merged, member)
        return merged

    def get_middlewares(self, target: Any, member: str) -> MiddlewaresMetadata:
        return self.get(
            target, MetadataKind.MIDDLEWARES, member, default=MiddlewaresMetadata()
        )

    # -------------------------------------------------------------------------
    # Headers & cookies
    # -------------------------------------------------------------------------

    def set_required_headers(
        self, target: Any, member: str, metadata: RequiredHeadersMetadata
    ) -> None:
        self.define(target, MetadataKind.REQUIRED_HEADERS, metadata, member)

    def get_required_headers(
        self, target: Any, member: str
    ) -> RequiredHeadersMetadata | None:
        return self.get(target, MetadataKind.REQUIRED_HEADERS, member)

    def set_set_headers(
        self, target: Any, member: str, metadata: SetHeadersMetadata
    ) -> None:
        self.define(target, MetadataKind.SET_HEADERS, metadata, member)

    def get_set_headers(self, target: Any, member: str) -> SetHeadersMetadata | None:
        return self.get(target, MetadataKind.SET_HEADERS, member)

    def set_required_cookie(
        self, target: Any, member: str, metadata: CookieMetadata
    ) -> None:
        self.define(target, MetadataKind.REQUIRED_COOKIE, metadata, member)

    def get_required_cookie(self, target: Any, member: str) -> CookieMetadata | None:
        return self.get(target, MetadataKind.REQUIRED_COOKIE, member)

    def set_set_cookie(self, target: Any, member: str, metadata: CookieMetadata) -> None:
        self.define(target, MetadataKind.SET_COOKIE, metadata, member)

    def get_set_cookie(self, target: Any, member: str) -> CookieMetadata | None:
        return self.get(target, MetadataKind.SET_COOKIE, member)


metadata_store = MetadataStore()
