"""Documentation records pushed into the schema registry.

A ``PathDocument`` describes one operation the router generator mounted. It
references request/response schemas by registry name only; the OpenAPI
aggregator resolves the names when it renders the document.
"""

from dataclasses import dataclass, field
from typing import Any, Literal

type ParameterLocation = Literal["path", "query", "header", "cookie"]


@dataclass(frozen=True, slots=True, kw_only=True)
class ParameterDocument:
    """An explicit operation parameter (headers and cookies)."""

    name: str
    location: ParameterLocation
    required: bool = True
    description: str | None = None
    schema: dict[str, Any] = field(default_factory=lambda: {"type": "string"})


@dataclass(frozen=True, slots=True, kw_only=True)
class HeaderDocument:
    """A response header."""

    name: str
    description: str | None = None
    schema: dict[str, Any] = field(default_factory=lambda: {"type": "string"})


@dataclass(frozen=True, slots=True, kw_only=True)
class ResponseDocument:
    status_code: int
    description: str
    schema_name: str | None = None
    headers: tuple[HeaderDocument, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class PathDocument:
    """One documented operation.

    Attributes:
        method: Lower-case HTTP method.
        path: Full OpenAPI path relative to the API server (``/categories/{id}``).
        operation_id: Unique operation identifier.
        tags: Documentation tags.
        summary: Short summary.
        description: Long description.
        body_schema: Registry name of the request body schema.
        params_schema: Registry name of the path parameters schema.
        query_schema: Registry name of the query parameters schema.
        parameters: Explicit header/cookie parameters.
        responses: Documented responses, in declaration order.
        secured: Whether the operation requires the BearerAuth scheme.
    """

    method: str
    path: str
    operation_id: str
    tags: tuple[str, ...] = ()
    summary: str | None = None
    description: str | None = None
    body_schema: str | None = None
    params_schema: str | None = None
    query_schema: str | None = None
    parameters: tuple[ParameterDocument, ...] = ()
    responses: tuple[ResponseDocument, ...] = ()
    secured: bool = False
