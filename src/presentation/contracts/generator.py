"""Router generator for contract controllers.

Turns the metadata declared on a controller into FastAPI routes and pushes
one ``PathDocument`` per route into the schema registry.

For every route, in declaration order:
    1. Full path = controller prefix + route path (``:id`` becomes ``{id}``)
    2. Route-level dependencies, in order:
        - required headers (400 when missing)
        - required cookie (401 when missing)
        - set headers
        - declared middlewares, with the auth marker replaced by bearer auth
    3. Endpoint: validates params, query and body, answers an RFC 7807 400
       on failure, then calls ``handler(request, response)``

Usage:
    router = DecoratorRouter().generate_router(CategoriesController(repository))
    app.include_router(router, prefix="/api/v1")
"""

import inspect
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from starlette.concurrency import run_in_threadpool

from src.core.container import get_logger
from src.core.errors import ContractDefinitionError, RequestValidationFailed
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.presentation.contracts.metadata import (
    AUTH_MARKER,
    ControllerMetadata,
    CookieMetadata,
    Dependency,
    HTTPMethod,
    MetadataStore,
    RequiredHeadersMetadata,
    RouteMetadata,
    SetHeadersMetadata,
    ValidationMetadata,
    metadata_store,
)
from src.presentation.contracts.validation import parse_request
from src.presentation.openapi.documents import (
    HeaderDocument,
    ParameterDocument,
    PathDocument,
    ResponseDocument,
)
from src.presentation.openapi.schema_registry import SchemaRegistry, get_shared_registry
from src.presentation.routers.api.middleware.auth_dependencies import (
    authenticate_request,
)
from src.presentation.routers.api.v1.errors.problem_details import (
    validation_problem_response,
)

_EXPRESS_PARAM = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")


@dataclass(frozen=True, slots=True, kw_only=True)
class RouteDescriptor:
    """Everything needed to mount one route."""

    http_method: HTTPMethod
    path: str
    dependencies: tuple[Dependency, ...]
    validation: ValidationMetadata
    handler: Callable[..., Any]
    method_name: str
    status_code: int | None = None


def normalize_path(prefix: str | None, path: str) -> str:
    """Join ``prefix`` and ``path`` into an OpenAPI-style path.

    Examples:
        >>> normalize_path("/categories", "/:id")
        '/categories/{id}'
        >>> normalize_path("/categories", "/")
        '/categories'
        >>> normalize_path(None, "")
        '/'
    """
    joined = f"{prefix or ''}/{path}"
    joined = "/" + "/".join(segment for segment in joined.split("/") if segment)
    return _EXPRESS_PARAM.sub(r"{\1}", joined)


def require_headers_dependency(metadata: RequiredHeadersMetadata) -> Dependency:
    async def check_required_headers(request: Request) -> None:
        missing = [name for name in metadata.headers if name not in request.headers]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Missing required headers: {', '.join(missing)}",
            )

    return check_required_headers


def require_cookie_dependency(metadata: CookieMetadata) -> Dependency:
    async def check_required_cookie(request: Request) -> None:
        if not request.cookies.get(metadata.name):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Missing required cookie: {metadata.name}",
            )

    return check_required_cookie


def set_headers_dependency(metadata: SetHeadersMetadata) -> Dependency:
    async def apply_headers(request: Request, response: Response) -> None:
        for name, value in metadata.headers:
            response.headers[name] = value(request, response) if callable(value) else value

    return apply_headers


class DecoratorRouter:
    """Generate a FastAPI router from a decorated controller instance.

    Args:
        registry: Schema registry receiving path documentation (defaults to
            the shared registry, resolved when the router is generated).
        store: Metadata store to read the contract from.
        auth_dependency: Dependency replacing the ``@protected()`` marker.
        logger: Logger (defaults to the application logger).
    """

    def __init__(
        self,
        *,
        registry: SchemaRegistry | None = None,
        store: MetadataStore | None = None,
        auth_dependency: Dependency | None = None,
        logger: LoggerProtocol | None = None,
    ) -> None:
        self._registry = registry
        self._store = store if store is not None else metadata_store
        self._auth_dependency = auth_dependency or authenticate_request
        self._logger = logger or get_logger()
        self._router = APIRouter()

    @property
    def router(self) -> APIRouter:
        return self._router

    def generate_router(self, controller: Any) -> APIRouter:
        """Mount every route declared on ``controller`` and document it.

        Raises:
            ContractDefinitionError: If a declared handler is not callable on
                the controller instance.
        """
        owner = type(controller)
        registry = self._registry or get_shared_registry()
        controller_metadata = self._store.get_controller_metadata(owner)
        prefix = controller_metadata.prefix if controller_metadata else None
        routes = self._store.get_routes(owner)

        if controller_metadata is not None:
            registry.register_tag(controller_metadata.tag, controller_metadata.description)

        for route in routes:
            descriptor = self.build_route(controller, route, prefix)
            self._mount(descriptor)
            registry.register_path(
                self._document(owner, route, descriptor, controller_metadata, registry)
            )

        self._logger.info(
            "Controller routes generated",
            controller=owner.__name__,
            route_count=len(routes),
        )
        return self._router

    def build_route(
        self, controller: Any, route: RouteMetadata, prefix: str | None
    ) -> RouteDescriptor:
        owner = type(controller)
        handler = getattr(controller, route.method_name, None)
        if not callable(handler):
            raise ContractDefinitionError(
                f"Handler {owner.__name__}.{route.method_name} is not callable"
            )

        success_codes = [
            response.status_code
            for response in self._store.get_responses(owner, route.method_name)
            if 200 <= response.status_code < 300
        ]

        return RouteDescriptor(
            http_method=route.method,
            path=normalize_path(prefix, route.path),
            dependencies=self._build_dependencies(owner, route.method_name),
            validation=self._store.get_validation(owner, route.method_name),
            handler=handler,
            method_name=route.method_name,
            status_code=min(success_codes) if success_codes else None,
        )

    def _build_dependencies(self, owner: type, method_name: str) -> tuple[Dependency, ...]:
        dependencies: list[Dependency] = []

        required_headers = self._store.get_required_headers(owner, method_name)
        if required_headers is not None:
            dependencies.append(require_headers_dependency(required_headers))

        required_cookie = self._store.get_required_cookie(owner, method_name)
        if required_cookie is not None:
            dependencies.append(require_cookie_dependency(required_cookie))

        set_headers = self._store.get_set_headers(owner, method_name)
        if set_headers is not None:
            dependencies.append(set_headers_dependency(set_headers))

        for middleware in self._store.get_middlewares(owner, method_name).middlewares:
            dependencies.append(
                self._auth_dependency if middleware == AUTH_MARKER else middleware
            )

        return tuple(dependencies)

    def _build_endpoint(self, descriptor: RouteDescriptor) -> Callable[..., Any]:
        handler = descriptor.handler
        validation = descriptor.validation
        logger = self._logger

        async def endpoint(request: Request, response: Response) -> Any:
            try:
                api_request = await parse_request(request, validation)
            except RequestValidationFailed as exc:
                logger.info(
                    "Request validation failed",
                    path=request.url.path,
                    method=request.method,
                    error_count=len(exc.errors),
                )
                return validation_problem_response(request, exc)

            if inspect.iscoroutinefunction(handler):
                return await handler(api_request, response)
            result = await run_in_threadpool(handler, api_request, response)
            if inspect.isawaitable(result):
                result = await result
            return result

        endpoint.__name__ = descriptor.method_name
        return endpoint

    def _mount(self, descriptor: RouteDescriptor) -> None:
        self._router.add_api_route(
            descriptor.path,
            self._build_endpoint(descriptor),
            methods=[descriptor.http_method.value],
            dependencies=[Depends(dependency) for dependency in descriptor.dependencies],
            response_model=None,
            status_code=descriptor.status_code,
            name=descriptor.method_name,
            include_in_schema=False,
        )

    # -------------------------------------------------------------------------
    # Documentation
    # -------------------------------------------------------------------------

    def _document(
        self,
        owner: type,
        route: RouteMetadata,
        descriptor: RouteDescriptor,
        controller_metadata: ControllerMetadata | None,
        registry: SchemaRegistry,
    ) -> PathDocument:
        method_name = route.method_name
        validation = descriptor.validation
        middlewares = self._store.get_middlewares(owner, method_name)

        responses = tuple(
            ResponseDocument(
                status_code=response.status_code,
                description=response.description,
                schema_name=(
                    registry.register_model(response.schema) if response.schema else None
                ),
            )
            for response in self._store.get_responses(owner, method_name)
        )

        return PathDocument(
            method=route.method.value.lower(),
            path=descriptor.path,
            operation_id=f"{route.method.value}{descriptor.path}",
            tags=(controller_metadata.tag,) if controller_metadata else (),
            summary=route.summary,
            description=route.description,
            body_schema=registry.register_model(validation.body) if validation.body else None,
            params_schema=(
                registry.register_model(validation.params) if validation.params else None
            ),
            query_schema=(
                registry.register_model(validation.query) if validation.query else None
            ),
            parameters=self._header_parameters(owner, method_name),
            responses=self._with_response_headers(owner, method_name, responses),
            secured=middlewares.requires_auth,
        )

    def _header_parameters(
        self, owner: type, method_name: str
    ) -> tuple[ParameterDocument, ...]:
        parameters: list[ParameterDocument] = []

        required_headers = self._store.get_required_headers(owner, method_name)
        if required_headers is not None:
            parameters.extend(
                ParameterDocument(name=name, location="header", required=True)
                for name in required_headers.headers
            )

        required_cookie = self._store.get_required_cookie(owner, method_name)
        if required_cookie is not None:
            parameters.append(
                ParameterDocument(
                    name=required_cookie.name,
                    location="cookie",
                    required=True,
                    description=f"{required_cookie.name} cookie",
                )
            )

        return tuple(parameters)

    def _with_response_headers(
        self,
        owner: type,
        method_name: str,
        responses: Sequence[ResponseDocument],
    ) -> tuple[ResponseDocument, ...]:
        headers: list[HeaderDocument] = []

        set_headers = self._store.get_set_headers(owner, method_name)
        if set_headers is not None:
            headers.extend(HeaderDocument(name=name) for name, _ in set_headers.headers)

        set_cookie = self._store.get_set_cookie(owner, method_name)
        if set_cookie is not None:
            headers.append(
                HeaderDocument(
                    name="Set-Cookie",
                    description=_describe_cookie(set_cookie),
                )
            )

        if not headers:
            return tuple(responses)

        return tuple(
            ResponseDocument(
                status_code=response.status_code,
                description=response.description,
                schema_name=response.schema_name,
                headers=tuple(headers) if 200 <= response.status_code < 300 else (),
            )
            for response in responses
        )


def _describe_cookie(cookie: CookieMetadata) -> str:
    attributes = [f"{cookie.name}=<value>"]
    options = cookie.options
    if options is not None:
        attributes.append(f"Path={options.path}")
        if options.domain:
            attributes.append(f"Domain={options.domain}")
        if options.max_age is not None:
            attributes.append(f"Max-Age={options.max_age}")
        if options.http_only:
            attributes.append("HttpOnly")
        if options.secure:
            attributes.append("Secure")
        attributes.append(f"SameSite={options.same_site.capitalize()}")
    return "; ".join(attributes)
