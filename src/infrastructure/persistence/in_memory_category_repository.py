"""In-memory implementation of CategoryRepository.

Data lives for the lifetime of the process. Satisfies the
``CategoryRepository`` protocol structurally (no inheritance).
"""

from collections.abc import Iterable
from dataclasses import replace
from uuid import UUID

from src.domain.entities.category import Category


class InMemoryCategoryRepository:
    """Dict-backed category store.

    Args:
        categories: Initial categories.
    """

    def __init__(self, categories: Iterable[Category] = ()) -> None:
        self._categories: dict[UUID, Category] = {
            category.id: category for category in categories
        }

    async def find_by_id(self, category_id: UUID) -> Category | None:
        category = self._categories.get(category_id)
        return replace(category) if category else None

    async def find_by_slug(self, slug: str) -> Category | None:
        for category in self._categories.values():
            if category.slug == slug:
                return replace(category)
        return None

    async def list_page(
        self, *, offset: int, limit: int, search: str | None = None
    ) -> tuple[list[Category], int]:
        matches = sorted(
            (
                category
                for category in self._categories.values()
                if not search or search.lower() in category.name.lower()
            ),
            key=lambda category: category.name.lower(),
        )
        return [replace(c) for c in matches[offset : offset + limit]], len(matches)

    async def save(self, category: Category) -> None:
        self._categories[category.id] = replace(category)

    async def delete(self, category_id: UUID) -> bool:
        return self._categories.pop(category_id, None) is not None
