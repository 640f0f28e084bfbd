"""In-memory persistence adapters."""

from src.infrastructure.persistence.in_memory_category_repository import (
    InMemoryCategoryRepository,
)

__all__ = ["InMemoryCategoryRepository"]
