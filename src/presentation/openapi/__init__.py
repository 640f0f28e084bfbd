"""OpenAPI documentation: schema registry, path documents and aggregation."""

from src.presentation.openapi.documents import (
    HeaderDocument,
    ParameterDocument,
    PathDocument,
    ResponseDocument,
)
from src.presentation.openapi.json_schema import render_models
from src.presentation.openapi.openapi_aggregator import (
    OpenAPISpecAggregator,
    to_openapi_schema,
)
from src.presentation.openapi.schema_registry import (
    BEARER_AUTH,
    SchemaRegistry,
    get_shared_registry,
    reset_shared_registry,
    schema_name_for,
)

__all__ = [
    "BEARER_AUTH",
    "HeaderDocument",
    "OpenAPISpecAggregator",
    "ParameterDocument",
    "PathDocument",
    "ResponseDocument",
    "SchemaRegistry",
    "get_shared_registry",
    "render_models",
    "reset_shared_registry",
    "schema_name_for",
    "to_openapi_schema",
]
