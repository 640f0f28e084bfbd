"""Request/response schemas shared by API modules.

Usage:
    from src.schemas import SuccessResponse, ErrorResponse
"""

from src.schemas.common_schemas import (
    ErrorResponse,
    ListResponse,
    PaginatedData,
    PaginatedMeta,
    PaginatedResponse,
    PaginationParams,
    SuccessResponse,
)

__all__ = [
    "ErrorResponse",
    "ListResponse",
    "PaginatedData",
    "PaginatedMeta",
    "PaginatedResponse",
    "PaginationParams",
    "SuccessResponse",
]
