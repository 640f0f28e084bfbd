"""Contract decorators for HTTP controllers.

Each decorator is a thin wrapper over an explicit ``MetadataStore`` call and
can be stacked in any order. Method decorators are recorded when the class
body completes, in source order (top to bottom).

Usage:
    @controller("Categories", prefix="/categories", description="Category endpoints")
    class CategoriesController(BaseController):
        @post("/", summary="Create category")
        @protected()
        @validate_body(CreateCategoryRequest)
        @api_response(201, "Category created", SuccessResponse[CategoryResponse])
        @api_response(400, "Validation error", ErrorResponse)
        async def create_category(self, request: ApiRequest, response: Response):
            ...
"""

from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel

from src.core.errors import ContractDefinitionError
from src.presentation.contracts.declarations import ContractMember, declare
from src.presentation.contracts.metadata import (
    AUTH_MARKER,
    ControllerMetadata,
    HTTPMethod,
    MetadataStore,
    Middleware,
    ResponseMetadata,
    RouteMetadata,
    metadata_store,
)

ClassT = TypeVar("ClassT", bound=type)
type MethodDecorator = Callable[[Any], ContractMember]


def resolve_store(store: MetadataStore | None) -> MetadataStore:
    return store if store is not None else metadata_store


def _require_model(schema: Any, decorator: str) -> type[BaseModel]:
    if not (isinstance(schema, type) and issubclass(schema, BaseModel)):
        raise ContractDefinitionError(
            f"@{decorator} expects a pydantic model class, got {schema!r}"
        )
    return schema


# =============================================================================
# Controller
# =============================================================================


def controller(
    tag: str,
    prefix: str | None = None,
    description: str | None = None,
    *,
    store: MetadataStore | None = None,
) -> Callable[[ClassT], ClassT]:
    """Declare a class as an HTTP controller.

    Args:
        tag: Documentation tag for every route of the controller.
        prefix: Path prefix prepended to route paths.
        description: Tag description.
        store: Metadata store (defaults to the process-wide one).

    Raises:
        ContractDefinitionError: When applied to something that is not a class.
    """

    def decorator(cls: ClassT) -> ClassT:
        if not isinstance(cls, type):
            raise ContractDefinitionError(
                f"@controller can only decorate classes, got {type(cls).__name__}"
            )
        resolve_store(store).set_controller_metadata(
            cls, ControllerMetadata(tag=tag, prefix=prefix, description=description)
        )
        return cls

    return decorator


# =============================================================================
# Routes
# =============================================================================


def _route(method: HTTPMethod) -> Callable[..., MethodDecorator]:
    decorator_name = method.value.lower()

    def route(
        path: str = "",
        *,
        summary: str | None = None,
        description: str | None = None,
        store: MetadataStore | None = None,
    ) -> MethodDecorator:
        def decorator(func: Any) -> ContractMember:
            def register(owner: type, name: str) -> None:
                resolve_store(store).add_route(
                    owner,
                    RouteMetadata(
                        method=method,
                        path=path,
                        method_name=name,
                        summary=summary,
                        description=description,
                    ),
                )

            return declare(func, register, decorator=decorator_name)

        return decorator

    route.__name__ = decorator_name
    route.__qualname__ = decorator_name
    route.__doc__ = f"Expose the decorated method as a {method.value} route."
    return route


get = _route(HTTPMethod.GET)
post = _route(HTTPMethod.POST)
put = _route(HTTPMethod.PUT)
patch = _route(HTTPMethod.PATCH)
delete = _route(HTTPMethod.DELETE)


def summary(text: str, *, store: MetadataStore | None = None) -> MethodDecorator:
    """Set the operation summary, overriding the route decorator's value."""

    def decorator(func: Any) -> ContractMember:
        def register(owner: type, name: str) -> None:
            resolve_store(store).set_summary(owner, name, text)

        return declare(func, register, decorator="summary")

    return decorator


def description(text: str, *, store: MetadataStore | None = None) -> MethodDecorator:
    """Set the operation description, overriding the route decorator's value."""

    def decorator(func: Any) -> ContractMember:
        def register(owner: type, name: str) -> None:
            resolve_store(store).set_description(owner, name, text)

        return declare(func, register, decorator="description")

    return decorator


# =============================================================================
# Responses
# =============================================================================


def api_response(
    status_code: int,
    description: str,
    schema: type[BaseModel] | None = None,
    *,
    store: MetadataStore | None = None,
) -> MethodDecorator:
    """Document one response of the route; stacking appends, never replaces."""
    if schema is not None:
        _require_model(schema, "api_response")

    def decorator(func: Any) -> ContractMember:
        def register(owner: type, name: str) -> None:
            resolve_store(store).add_response(
                owner,
                name,
                ResponseMetadata(
                    status_code=status_code, description=description, schema=schema
                ),
            )

        return declare(func, register, decorator="api_response")

    return decorator


# =============================================================================
# Validation
# =============================================================================


def _validation(part: str) -> Callable[..., MethodDecorator]:
    decorator_name = f"validate_{part}"

    def validate(
        schema: type[BaseModel], *, store: MetadataStore | None = None
    ) -> MethodDecorator:
        model = _require_model(schema, decorator_name)

        def decorator(func: Any) -> ContractMember:
            def register(owner: type, name: str) -> None:
                resolve_store(store).merge_validation(owner, name, **{part: model})

            return declare(func, register, decorator=decorator_name)

        return decorator

    validate.__name__ = decorator_name
    validate.__qualname__ = decorator_name
    validate.__doc__ = f"Validate the request {part} against a pydantic model."
    return validate


validate_body = _validation("body")
validate_params = _validation("params")
validate_query = _validation("query")


# =============================================================================
# Middlewares & auth
# =============================================================================


def middlewares(
    *dependencies: Middleware, store: MetadataStore | None = None
) -> MethodDecorator:
    """Run FastAPI dependencies before the route handler, in the given order.

    Repeated applications accumulate in declaration order.
    """
    for dependency in dependencies:
        if dependency != AUTH_MARKER and not callable(dependency):
            raise ContractDefinitionError(
                f"@middlewares expects callables, got {dependency!r}"
            )

    def decorator(func: Any) -> ContractMember:
        def register(owner: type, name: str) -> None:
            resolve_store(store).add_middlewares(owner, name, dependencies)

        return declare(func, register, decorator="middlewares")

    return decorator


def protected(*, store: MetadataStore | None = None) -> MethodDecorator:
    """Require a valid bearer token for the route (401 otherwise)."""

    def decorator(func: Any) -> ContractMember:
        def register(owner: type, name: str) -> None:
            resolve_store(store).add_middlewares(owner, name, (AUTH_MARKER,))

        return declare(func, register, decorator="protected")

    return decorator
