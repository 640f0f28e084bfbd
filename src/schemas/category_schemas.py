"""Category request and response schemas.

Pydantic schemas for category API endpoints. Includes:
- Request schemas (client → API): path params, query, bodies
- Response schemas (API → client)
- Entity-to-schema conversion
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, Field, StringConstraints

from src.domain.entities.category import Category
from src.schemas.common_schemas import PaginationParams

CategoryName = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)
]
CategorySlug = Annotated[
    str,
    StringConstraints(min_length=2, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$"),
]


# =============================================================================
# Request Schemas
# =============================================================================


class CategoryIdParams(BaseModel):
    """Path parameters of single-category endpoints."""

    id: UUID = Field(..., description="Category unique identifier")


class ListCategoriesQuery(PaginationParams):
    """Query parameters of the category list endpoint."""

    search: str | None = Field(
        None, max_length=100, description="Case-insensitive name filter"
    )


class CreateCategoryRequest(BaseModel):
    """Create category request.

    Attributes:
        name: Display name (2-100 characters).
        slug: URL-safe identifier; derived from the name when omitted.
        description: Optional description (max 500 characters).
    """

    name: CategoryName = Field(..., examples=["Science Fiction"])
    slug: CategorySlug | None = Field(None, examples=["science-fiction"])
    description: str | None = Field(None, max_length=500)


class UpdateCategoryRequest(BaseModel):
    """Partial category update; omitted fields are left unchanged."""

    name: CategoryName | None = None
    slug: CategorySlug | None = None
    description: str | None = Field(None, max_length=500)


# =============================================================================
# Response Schemas
# =============================================================================


class CategoryResponse(BaseModel):
    """Single category response."""

    id: UUID = Field(..., description="Category unique identifier")
    name: str = Field(..., description="Display name")
    slug: str = Field(..., description="URL-safe identifier")
    description: str | None = Field(None, description="Category description")
    created_at: datetime = Field(..., description="Creation timestamp")

    @classmethod
    def from_entity(cls, category: Category) -> "CategoryResponse":
        return cls(
            id=category.id,
            name=category.name,
            slug=category.slug,
            description=category.description,
            created_at=category.created_at,
        )
