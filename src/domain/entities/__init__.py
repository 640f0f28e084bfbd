"""Domain entities for business logic.

Pure business logic entities with no framework dependencies.
"""

from src.domain.entities.category import Category, slugify

__all__ = [
    "Category",
    "slugify",
]
