"""RFC 7807 error response schemas and exception handlers.

Exports:
    ErrorDetail: Individual field-specific error
    ProblemDetails: RFC 7807 compliant error response schema
    build_problem: Build a ProblemDetails for a request
    problem_response: Render a ProblemDetails as JSON
    validation_problem_response: 400 response for request validation failures
    register_exception_handlers: Register global exception handlers with FastAPI
"""

from src.presentation.routers.api.v1.errors.exception_handlers import (
    register_exception_handlers,
)
from src.presentation.routers.api.v1.errors.problem_details import (
    ErrorDetail,
    ProblemDetails,
    build_problem,
    problem_response,
    validation_problem_response,
)

__all__ = [
    "ErrorDetail",
    "ProblemDetails",
    "build_problem",
    "problem_response",
    "register_exception_handlers",
    "validation_problem_response",
]
