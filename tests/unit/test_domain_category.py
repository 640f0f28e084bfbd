"""Unit tests for the Category entity.

Tests cover:
- Slug derivation
- Validation on creation
- Renaming
"""

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from src.domain.entities.category import Category, slugify


@pytest.mark.unit
class TestSlugify:
    """Test slug derivation."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("Science Fiction & Fantasy", "science-fiction-fantasy"),
            ("  Horror  ", "horror"),
            ("Film-Noir", "film-noir"),
            ("80s Classics!", "80s-classics"),
        ],
    )
    def test_slugify(self, value, expected):
        assert slugify(value) == expected


@pytest.mark.unit
class TestCategoryCreation:
    """Test Category validation."""

    def test_valid_category(self):
        category = Category(id=uuid4(), name="Drama", slug="drama")

        assert category.description is None
        assert category.created_at.tzinfo is UTC

    def test_empty_name_rejected(self):
        """Test whitespace-only names are refused."""
        with pytest.raises(ValueError, match="name cannot be empty"):
            Category(id=uuid4(), name="   ", slug="blank")

    @pytest.mark.parametrize("slug", ["Drama", "drama genre", "-drama", "drama--x", ""])
    def test_invalid_slug_rejected(self, slug):
        with pytest.raises(ValueError, match="Invalid category slug"):
            Category(id=uuid4(), name="Drama", slug=slug)


@pytest.mark.unit
class TestCategoryRename:
    """Test Category.rename."""

    def test_rename_derives_slug(self):
        category = Category(
            id=uuid4(),
            name="Docs",
            slug="docs",
            updated_at=datetime(2020, 1, 1, tzinfo=UTC),
        )

        category.rename("Documentary Films")

        assert category.name == "Documentary Films"
        assert category.slug == "documentary-films"
        assert category.updated_at > datetime(2020, 1, 1, tzinfo=UTC)

    def test_rename_with_explicit_slug(self):
        category = Category(id=uuid4(), name="Docs", slug="docs")

        category.rename("Documentary", "docu")

        assert category.slug == "docu"
