"""Joint JSON Schema rendering of pydantic models.

All models of a document are rendered in one ``models_json_schema`` pass, so
nested models sharing a class name (``Item`` in two modules) get distinct
definition names instead of overwriting each other.
"""

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel
from pydantic.errors import PydanticUserError
from pydantic.json_schema import models_json_schema

from src.domain.protocols.logger_protocol import LoggerProtocol

REF_TEMPLATE = "#/components/schemas/{model}"


def ref_name(schema: dict[str, Any]) -> str | None:
    """Definition name a bare ``$ref`` schema points to."""
    ref = schema.get("$ref")
    return ref.rsplit("/", 1)[-1] if isinstance(ref, str) else None


def render_models(
    models: Iterable[type[BaseModel]], logger: LoggerProtocol
) -> tuple[dict[type[BaseModel], dict[str, Any]], dict[str, Any]]:
    """Render ``models`` against one shared set of definitions.

    Models pydantic cannot render are logged and left out.

    Returns:
        tuple: The full schema of each model, and the definitions its
            ``$ref``s point to (keyed by definition name).
    """
    renderable: list[type[BaseModel]] = []
    for model in dict.fromkeys(models):
        try:
            model.model_json_schema(ref_template=REF_TEMPLATE)
        except PydanticUserError as exc:
            logger.warning(
                "Schema could not be rendered, skipping",
                model=model.__name__,
                error_message=str(exc),
            )
            continue
        renderable.append(model)

    if not renderable:
        return {}, {}

    keyed, document = models_json_schema(
        [(model, "validation") for model in renderable], ref_template=REF_TEMPLATE
    )
    definitions: dict[str, Any] = document.get("$defs", {})

    schemas: dict[type[BaseModel], dict[str, Any]] = {}
    for model in renderable:
        schema = keyed[(model, "validation")]
        name = ref_name(schema)
        schemas[model] = dict(definitions[name]) if name in definitions else schema
    return schemas, definitions
