"""Declarative HTTP contracts.

Controllers declare routes, schemas, responses and auth with decorators; the
``DecoratorRouter`` turns that metadata into FastAPI routes and OpenAPI path
documentation.

Usage:
    from src.presentation.contracts import (
        ApiRequest, BaseController, controller, get, post, protected,
        api_response, validate_body,
    )
"""

from src.presentation.contracts.decorators import (
    api_response,
    controller,
    delete,
    description,
    get,
    middlewares,
    patch,
    post,
    protected,
    put,
    summary,
    validate_body,
    validate_params,
    validate_query,
)
from src.presentation.contracts.generator import DecoratorRouter, RouteDescriptor
from src.presentation.contracts.headers import (
    refresh_token_cookie,
    required_cookie,
    required_headers,
    set_cookie,
    set_headers,
)
from src.presentation.contracts.metadata import (
    AUTH_MARKER,
    ControllerMetadata,
    CookieMetadata,
    CookieOptions,
    HTTPMethod,
    MetadataStore,
    MiddlewaresMetadata,
    ResponseMetadata,
    RouteMetadata,
    ValidationMetadata,
    metadata_store,
)
from src.presentation.contracts.types import ApiRequest, BaseController

__all__ = [
    "AUTH_MARKER",
    "ApiRequest",
    "BaseController",
    "ControllerMetadata",
    "CookieMetadata",
    "CookieOptions",
    "DecoratorRouter",
    "HTTPMethod",
    "MetadataStore",
    "MiddlewaresMetadata",
    "ResponseMetadata",
    "RouteDescriptor",
    "RouteMetadata",
    "ValidationMetadata",
    "api_response",
    "controller",
    "delete",
    "description",
    "get",
    "metadata_store",
    "middlewares",
    "patch",
    "post",
    "protected",
    "put",
    "refresh_token_cookie",
    "required_cookie",
    "required_headers",
    "set_cookie",
    "set_headers",
    "summary",
    "validate_body",
    "validate_params",
    "validate_query",
]
