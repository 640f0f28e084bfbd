"""RFC 7807 Problem Details for HTTP APIs.

Pydantic models for structured error responses plus the helpers every error
path (exception handlers, generated endpoints) uses to render them.

RFC 7807: https://tools.ietf.org/html/rfc7807

Exports:
    ErrorDetail: Individual field-specific error
    ProblemDetails: RFC 7807 compliant error response schema
    build_problem: Build a ProblemDetails for a request and status code
    problem_response: Render a ProblemDetails as a JSONResponse
    validation_problem_response: 400 response for a RequestValidationFailed
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.core.config import settings
from src.core.errors import RequestValidationFailed
from src.presentation.routers.api.middleware.trace_middleware import get_trace_id

# HTTP status code to (title, slug) mapping for problem type URIs
_HTTP_STATUS_INFO: dict[int, tuple[str, str]] = {
    400: ("Bad Request", "bad-request"),
    401: ("Authentication Required", "unauthorized"),
    403: ("Access Denied", "forbidden"),
    404: ("Resource Not Found", "not-found"),
    405: ("Method Not Allowed", "method-not-allowed"),
    409: ("Resource Conflict", "conflict"),
    415: ("Unsupported Media Type", "unsupported-media-type"),
    422: ("Validation Failed", "validation-failed"),
    429: ("Too Many Requests", "rate-limit-exceeded"),
    500: ("Internal Server Error", "internal-server-error"),
    502: ("Bad Gateway", "bad-gateway"),
    503: ("Service Unavailable", "service-unavailable"),
}


class ErrorDetail(BaseModel):
    """Individual field-specific error.

    Attributes:
        field: Location of the invalid value, e.g. ``body.name``
        code: Machine-readable error code (pydantic error type)
        message: Human-readable error message

    Examples:
        >>> error = ErrorDetail(
        ...     field="body.name",
        ...     code="string_too_short",
        ...     message="String should have at least 1 character",
        ... )
    """

    field: str = Field(..., description="Field name")
    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")


class ProblemDetails(BaseModel):
    """RFC 7807 Problem Details for HTTP APIs.

    Attributes:
        type: URI reference identifying the problem type
        title: Short, human-readable summary of the problem type
        status: HTTP status code for this occurrence
        detail: Human-readable explanation specific to this occurrence
        instance: URI reference identifying the specific occurrence
        errors: Optional list of field-specific errors (for validation failures)
        trace_id: Optional request trace ID for debugging

    Examples:
        >>> problem = ProblemDetails(
        ...     type="http://localhost:5001/errors/validation-failed",
        ...     title="Validation Failed",
        ...     status=400,
        ...     detail="Request validation failed. Check 'errors' for details.",
        ...     instance="/api/v1/categories",
        ...     errors=[
        ...         ErrorDetail(
        ...             field="body.name",
        ...             code="missing",
        ...             message="Field required",
        ...         )
        ...     ],
        ... )
    """

    type: str = Field(
        ...,
        description="URI reference identifying the problem type",
        examples=["http://localhost:5001/errors/validation-failed"],
    )
    title: str = Field(
        ...,
        description="Short, human-readable summary",
        examples=["Validation Failed"],
    )
    status: int = Field(
        ...,
        description="HTTP status code",
        examples=[400],
    )
    detail: str = Field(
        ...,
        description="Human-readable explanation",
        examples=["Request validation failed. Check 'errors' for details."],
    )
    instance: str = Field(
        ...,
        description="URI reference identifying this occurrence",
        examples=["/api/v1/categories"],
    )
    errors: list[ErrorDetail] | None = Field(
        None,
        description="List of field-specific errors",
    )
    trace_id: str | None = Field(
        None,
        description="Request trace ID for debugging",
    )


def get_status_title(status_code: int) -> str:
    """Get human-readable title for HTTP status code."""
    return _HTTP_STATUS_INFO.get(status_code, ("Error", "error"))[0]


def get_error_slug(status_code: int) -> str:
    """Get kebab-case error slug for the problem type URI."""
    return _HTTP_STATUS_INFO.get(status_code, ("Error", "error"))[1]


def build_problem(
    request: Request,
    status_code: int,
    detail: str,
    *,
    title: str | None = None,
    slug: str | None = None,
    errors: list[ErrorDetail] | None = None,
) -> ProblemDetails:
    """Build a ProblemDetails for ``request``.

    The trace ID comes from ``request.state`` (set by TraceMiddleware), or
    from the trace context var when the state is missing.
    """
    trace_id = getattr(request.state, "trace_id", None) or get_trace_id()
    return ProblemDetails(
        type=f"{settings.api_base_url}/errors/{slug or get_error_slug(status_code)}",
        title=title or get_status_title(status_code),
        status=status_code,
        detail=detail,
        instance=str(request.url.path),
        errors=errors,
        trace_id=trace_id,
    )


def problem_response(
    problem: ProblemDetails, headers: dict[str, str] | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(exclude_none=True),
        headers=headers,
        media_type="application/problem+json",
    )


def validation_problem_response(
    request: Request, exc: RequestValidationFailed
) -> JSONResponse:
    """Render a request validation failure as a 400 ProblemDetails response."""
    problem = build_problem(
        request,
        status.HTTP_400_BAD_REQUEST,
        f"{exc.message}. Check 'errors' for details.",
        title="Validation Failed",
        slug="validation-failed",
        errors=[
            ErrorDetail(field=error.field, code=error.code, message=error.message)
            for error in exc.errors
        ],
    )
    return problem_response(problem)
