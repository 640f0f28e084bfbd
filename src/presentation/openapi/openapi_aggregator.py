"""OpenAPI document aggregation.

Renders the schema registry into an OpenAPI 3.0 document. Rendering is a pure
function of the registry state: nothing is cached, so a document requested
after ``SchemaRegistry.reset()`` reflects the new registry.

Pydantic emits JSON Schema 2020-12; ``to_openapi_schema`` rewrites the few
constructs OpenAPI 3.0 expresses differently (nullable unions, ``const``,
numeric exclusive bounds, ``examples``).

Usage:
    aggregator = OpenAPISpecAggregator(
        title=settings.app_name,
        version=settings.app_version,
        description=settings.app_description,
    )
    document = aggregator.generate_spec(get_shared_registry())
"""

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from src.core.container import get_logger
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.presentation.openapi.documents import PathDocument
from src.presentation.openapi.json_schema import REF_TEMPLATE, render_models
from src.presentation.openapi.schema_registry import (
    BEARER_AUTH,
    SchemaRegistry,
    get_shared_registry,
)

OPENAPI_VERSION = "3.0.0"

_SCHEMA_MAPS = frozenset({"properties", "$defs", "definitions", "patternProperties"})
_NULL = {"type": "null"}


def schema_ref(name: str) -> dict[str, str]:
    return {"$ref": REF_TEMPLATE.format(model=name)}


def to_openapi_schema(node: Any) -> Any:
    """Convert a pydantic JSON Schema fragment to OpenAPI 3.0 form."""
    if isinstance(node, list):
        return [to_openapi_schema(item) for item in node]
    if not isinstance(node, dict):
        return node

    # Null variants are matched before conversion rewrites them to ``nullable``
    variants = node.get("anyOf")
    nullable_union = isinstance(variants, list) and _NULL in variants

    converted: dict[str, Any] = {}
    for key, value in node.items():
        if key in _SCHEMA_MAPS and isinstance(value, dict):
            converted[key] = {name: to_openapi_schema(item) for name, item in value.items()}
        elif key == "anyOf" and nullable_union:
            continue
        else:
            converted[key] = to_openapi_schema(value)

    if nullable_union:
        rest = [to_openapi_schema(variant) for variant in variants if variant != _NULL]
        if len(rest) == 1 and "$ref" not in rest[0]:
            converted = {**rest[0], **converted}
        elif len(rest) == 1:
            converted["allOf"] = rest
        elif rest:
            converted["anyOf"] = rest
        converted["nullable"] = True

    if converted.get("type") == "null":
        del converted["type"]
        converted["nullable"] = True

    if "const" in converted:
        converted["enum"] = [converted.pop("const")]

    for bound, plain in (("exclusiveMinimum", "minimum"), ("exclusiveMaximum", "maximum")):
        value = converted.get(bound)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            converted[plain] = value
            converted[bound] = True

    examples = converted.get("examples")
    if isinstance(examples, list):
        del converted["examples"]
        if examples:
            converted["example"] = examples[0]

    return converted


class OpenAPISpecAggregator:
    """Render a schema registry as an OpenAPI document.

    Args:
        title: ``info.title``.
        version: ``info.version``.
        description: ``info.description``.
        servers: ``servers`` entries (defaults to the ``/api/v1`` server).
        logger: Logger for unresolved schema references.
    """

    def __init__(
        self,
        *,
        title: str,
        version: str,
        description: str | None = None,
        servers: Sequence[dict[str, str]] | None = None,
        logger: LoggerProtocol | None = None,
    ) -> None:
        self.title = title
        self.version = version
        self.description = description
        self.servers = (
            list(servers)
            if servers is not None
            else [{"url": "/api/v1", "description": "API Version 1"}]
        )
        self._logger = logger or get_logger()

    def generate_spec(self, registry: SchemaRegistry | None = None) -> dict[str, Any]:
        """Build the OpenAPI document for ``registry``.

        Args:
            registry: Registry to render (defaults to the shared registry).

        Returns:
            dict: JSON-serializable OpenAPI document.
        """
        registry = registry or get_shared_registry()
        schemas = self._render_schemas(registry)

        paths: dict[str, dict[str, Any]] = {}
        for document in registry.paths:
            paths.setdefault(document.path, {})[document.method] = self._operation(
                document, schemas
            )

        components: dict[str, Any] = {"schemas": schemas}
        for kind, values in registry.components.items():
            components.setdefault(kind, {}).update(values)

        info: dict[str, Any] = {"title": self.title, "version": self.version}
        if self.description:
            info["description"] = self.description

        return {
            "openapi": OPENAPI_VERSION,
            "info": info,
            "servers": [dict(server) for server in self.servers],
            "tags": self._tags(registry),
            "paths": paths,
            "components": components,
        }

    def write_spec(self, path: str | Path, registry: SchemaRegistry | None = None) -> Path:
        """Write the rendered document to ``path`` as indented JSON."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(self.generate_spec(registry), indent=2), encoding="utf-8")
        self._logger.info("OpenAPI document written", path=str(target))
        return target

    # -------------------------------------------------------------------------
    # Rendering helpers
    # -------------------------------------------------------------------------

    def _render_schemas(self, registry: SchemaRegistry) -> dict[str, Any]:
        models = registry.schemas
        schemas, definitions = render_models(models.values(), self._logger)

        rendered: dict[str, Any] = {}
        for name, model in models.items():
            if model in schemas:
                rendered[name] = to_openapi_schema(schemas[model])
        for def_name, def_schema in definitions.items():
            rendered.setdefault(def_name, to_openapi_schema(def_schema))
        return rendered

    def _tags(self, registry: SchemaRegistry) -> list[dict[str, str]]:
        descriptions = registry.tags
        names = list(descriptions)
        for document in registry.paths:
            names.extend(tag for tag in document.tags if tag not in names)

        tags = []
        for name in names:
            tag = {"name": name}
            if descriptions.get(name):
                tag["description"] = descriptions[name]
            tags.append(tag)
        return tags

    def _resolve(
        self, name: str | None, schemas: dict[str, Any], document: PathDocument
    ) -> dict[str, Any] | None:
        if name is None:
            return None
        if name not in schemas:
            self._logger.warning(
                "Schema referenced by path is not registered, omitting",
                schema=name,
                path=document.path,
                method=document.method,
            )
            return None
        return schemas[name]

    def _parameters(
        self,
        name: str | None,
        location: str,
        schemas: dict[str, Any],
        document: PathDocument,
    ) -> list[dict[str, Any]]:
        schema = self._resolve(name, schemas, document)
        if schema is None:
            return []

        required = set(schema.get("required", ()))
        parameters = []
        for prop_name, prop_schema in schema.get("properties", {}).items():
            parameter: dict[str, Any] = {
                "name": prop_name,
                "in": location,
                "required": location == "path" or prop_name in required,
                "schema": {k: v for k, v in prop_schema.items() if k != "description"},
            }
            if prop_schema.get("description"):
                parameter["description"] = prop_schema["description"]
            parameters.append(parameter)
        return parameters

    def _operation(self, document: PathDocument, schemas: dict[str, Any]) -> dict[str, Any]:
        operation: dict[str, Any] = {"operationId": document.operation_id}
        if document.tags:
            operation["tags"] = list(document.tags)
        if document.summary:
            operation["summary"] = document.summary
        if document.description:
            operation["description"] = document.description

        parameters = [
            *self._parameters(document.params_schema, "path", schemas, document),
            *self._parameters(document.query_schema, "query", schemas, document),
        ]
        for parameter in document.parameters:
            entry: dict[str, Any] = {
                "name": parameter.name,
                "in": parameter.location,
                "required": parameter.required,
                "schema": dict(parameter.schema),
            }
            if parameter.description:
                entry["description"] = parameter.description
            parameters.append(entry)
        if parameters:
            operation["parameters"] = parameters

        if self._resolve(document.body_schema, schemas, document) is not None:
            operation["requestBody"] = {
                "required": True,
                "content": {"application/json": {"schema": schema_ref(document.body_schema)}},
            }

        responses: dict[str, Any] = {}
        for response in document.responses:
            entry = {"description": response.description}
            if self._resolve(response.schema_name, schemas, document) is not None:
                entry["content"] = {
                    "application/json": {"schema": schema_ref(response.schema_name)}
                }
            if response.headers:
                entry["headers"] = {
                    header.name: {
                        **({"description": header.description} if header.description else {}),
                        "schema": dict(header.schema),
                    }
                    for header in response.headers
                }
            responses.setdefault(str(response.status_code), entry)
        operation["responses"] = responses or {"default": {"description": "Default response"}}

        if document.secured:
            operation["security"] = [{BEARER_AUTH: []}]

        return operation
