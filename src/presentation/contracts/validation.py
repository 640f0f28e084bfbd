"""Request parsing against the schemas bound to a route.

Params, query and body are validated in that order and every failure is
collected, so one 400 response lists all invalid fields.
"""

import json
from typing import Any

from fastapi import Request
from pydantic import BaseModel, ValidationError

from src.core.errors import FieldError, RequestValidationFailed
from src.presentation.contracts.metadata import ValidationMetadata
from src.presentation.contracts.types import ApiRequest


def _query_values(request: Request) -> dict[str, Any]:
    grouped: dict[str, list[str]] = {}
    for key, value in request.query_params.multi_items():
        grouped.setdefault(key, []).append(value)
    return {key: values[0] if len(values) == 1 else values for key, values in grouped.items()}


def _validate(
    schema: type[BaseModel], data: Any, part: str, errors: list[FieldError]
) -> BaseModel | None:
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        for error in exc.errors():
            location = [part, *(str(item) for item in error["loc"])]
            errors.append(
                FieldError(
                    field=".".join(location),
                    code=error["type"],
                    message=error["msg"],
                )
            )
        return None


async def _read_json(request: Request, errors: list[FieldError]) -> Any:
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        errors.append(FieldError(field="body", code="json_invalid", message=str(exc)))
        return None


async def parse_request(request: Request, validation: ValidationMetadata) -> ApiRequest:
    """Build the ApiRequest for a route, validating every bound schema.

    Raises:
        RequestValidationFailed: If any part fails its schema or the body is
            not valid JSON.
    """
    errors: list[FieldError] = []
    params: Any = dict(request.path_params)
    query: Any = _query_values(request)
    body: Any = None

    if validation.params is not None:
        params = _validate(validation.params, params, "params", errors)
    if validation.query is not None:
        query = _validate(validation.query, query, "query", errors)
    if validation.body is not None:
        json_errors = len(errors)
        data = await _read_json(request, errors)
        if len(errors) == json_errors:
            body = _validate(validation.body, data, "body", errors)

    if errors:
        raise RequestValidationFailed(errors=errors)

    return ApiRequest(raw=request, params=params, query=query, body=body)
