"""Common schemas used across multiple API endpoints.

Provides reusable schema components for pagination and the standard response
envelopes every module wraps its payloads in:

    SuccessResponse[T]    {"success": true, "data": T, "message"?}
    ListResponse[T]       {"success": true, "data": [T]}
    PaginatedResponse[T]  {"success": true, "data": {"items": [T], "pagination": {...}}}
    ErrorResponse         {"success": false, "error": str, "details"?}
"""

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginationParams(BaseModel):
    """Pagination query parameters.

    Attributes:
        page: Page number (1-indexed).
        page_size: Number of items per page.
    """

    page: int = Field(1, ge=1, description="Page number (1-indexed)")
    page_size: int = Field(20, ge=1, le=100, description="Items per page")

    @property
    def offset(self) -> int:
        """Number of items to skip for this page."""
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


class PaginatedMeta(BaseModel):
    """Pagination metadata for list responses.

    Attributes:
        page: Current page number.
        page_size: Items per page.
        total: Total items available.
        total_pages: Total number of pages.
    """

    page: int = Field(..., ge=1, description="Current page number")
    page_size: int = Field(..., ge=1, description="Items per page")
    total: int = Field(..., ge=0, description="Total items available")
    total_pages: int = Field(..., ge=0, description="Total number of pages")

    @classmethod
    def from_pagination(cls, page: int, page_size: int, total: int) -> "PaginatedMeta":
        """Create pagination metadata from parameters.

        Args:
            page: Current page number.
            page_size: Items per page.
            total: Total items available.

        Returns:
            PaginatedMeta instance.
        """
        total_pages = (total + page_size - 1) // page_size if page_size > 0 else 0
        return cls(page=page, page_size=page_size, total=total, total_pages=total_pages)


class SuccessResponse(BaseModel, Generic[T]):
    """Success envelope carrying a single payload."""

    success: Literal[True] = True
    message: str | None = Field(None, description="Optional human-readable message")
    data: T


class ListResponse(BaseModel, Generic[T]):
    """Success envelope carrying an unpaginated list."""

    success: Literal[True] = True
    data: list[T]


class PaginatedData(BaseModel, Generic[T]):
    items: list[T]
    pagination: PaginatedMeta


class PaginatedResponse(BaseModel, Generic[T]):
    """Success envelope carrying one page of items."""

    success: Literal[True] = True
    data: PaginatedData[T]

    @classmethod
    def from_items(
        cls, items: list[Any], params: PaginationParams, total: int
    ) -> "PaginatedResponse[Any]":
        """Build a page from already-sliced items.

        Args:
            items: Items of the requested page.
            params: Requested page and page size.
            total: Total items available.
        """
        pagination = PaginatedMeta.from_pagination(params.page, params.page_size, total)
        return cls(data={"items": items, "pagination": pagination.model_dump()})


class ErrorResponse(BaseModel):
    """Error envelope documented for non-2xx responses.

    Attributes:
        success: Always false.
        error: Error message.
        details: Optional structured details.
    """

    success: Literal[False] = False
    error: str = Field(..., description="Error message")
    details: Any | None = Field(None, description="Optional error details")
