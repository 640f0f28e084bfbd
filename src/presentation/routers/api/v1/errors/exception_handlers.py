"""Global exception handlers for FastAPI application.

Convert exceptions escaping route handlers and dependencies into RFC 7807
Problem Details responses.

Handlers:
    http_exception_handler: HTTPException (auth, required headers/cookies, 404)
    request_validation_handler: RequestValidationFailed raised outside a
        generated endpoint
    validation_exception_handler: FastAPI's own RequestValidationError
    generic_exception_handler: Catches all unhandled exceptions

Exports:
    register_exception_handlers: Register all exception handlers with FastAPI app
"""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.container import get_logger
from src.core.errors import RequestValidationFailed
from src.presentation.routers.api.v1.errors.problem_details import (
    ErrorDetail,
    build_problem,
    problem_response,
    validation_problem_response,
)


async def http_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Convert HTTPException to a Problem Details response.

    Headers carried by the exception (e.g. WWW-Authenticate) are preserved.

    Example:
        >>> raise HTTPException(status_code=401, detail="Invalid token")
        >>> # {
        >>> #   "type": "http://localhost:5001/errors/unauthorized",
        >>> #   "title": "Authentication Required",
        >>> #   "status": 401,
        >>> #   "detail": "Invalid token",
        >>> #   "instance": "/api/v1/categories",
        >>> #   "trace_id": "..."
        >>> # }
    """
    assert isinstance(exc, StarletteHTTPException)

    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    problem = build_problem(request, exc.status_code, detail)
    return problem_response(problem, headers=getattr(exc, "headers", None))


async def request_validation_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    assert isinstance(exc, RequestValidationFailed)
    return validation_problem_response(request, exc)


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Convert FastAPI's RequestValidationError to a 422 Problem Details response.

    Generated contract routes validate inside the endpoint and answer 400;
    this handler only covers plain FastAPI routes with typed parameters.
    """
    assert isinstance(exc, RequestValidationError)

    field_errors: list[ErrorDetail] = []
    for error in exc.errors():
        field_parts = [str(part) for part in error.get("loc", ())]
        field_errors.append(
            ErrorDetail(
                field=".".join(field_parts) if field_parts else "unknown",
                code=error.get("type", "validation_error"),
                message=error.get("msg", "Validation failed"),
            )
        )

    problem = build_problem(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Request validation failed. Check 'errors' for details.",
        errors=field_errors or None,
    )
    return problem_response(problem)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected Python exceptions.

    Logs the exception and answers 500 without leaking internal details.
    """
    problem = build_problem(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred. Please contact support with the trace ID.",
    )

    get_logger().error(
        "Unhandled exception",
        error=exc,
        request_path=request.url.path,
        request_method=request.method,
    )

    return problem_response(problem)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI application.

    Example:
        >>> app = FastAPI()
        >>> register_exception_handlers(app)
    """
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationFailed, request_validation_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
