"""Category repository protocol.

Defines the interface for category persistence operations.
"""

from typing import Protocol
from uuid import UUID

from src.domain.entities.category import Category


class CategoryRepository(Protocol):
    """Protocol for category persistence operations.

    Read methods return domain entities; ``list_page`` returns the requested
    slice together with the total number of matching categories.
    """

    async def find_by_id(self, category_id: UUID) -> Category | None: ...

    async def find_by_slug(self, slug: str) -> Category | None: ...

    async def list_page(
        self, *, offset: int, limit: int, search: str | None = None
    ) -> tuple[list[Category], int]:
        """List categories ordered by name.

        Args:
            offset: Number of categories to skip.
            limit: Maximum number of categories to return.
            search: Case-insensitive substring filter on name.

        Returns:
            Tuple of (categories of the page, total matching).
        """
        ...

    async def save(self, category: Category) -> None:
        """Create or replace a category."""
        ...

    async def delete(self, category_id: UUID) -> bool:
        """Delete a category.

        Returns:
            True if a category was deleted, False if it did not exist.
        """
        ...
