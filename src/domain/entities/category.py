"""Category domain entity.

A category groups cinema content (genres, collections). Slugs are URL-safe,
unique and derived from the name when not given explicitly.
"""

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def slugify(value: str) -> str:
    """Derive a slug from free text.

    Example:
        >>> slugify("Science Fiction & Fantasy")
        'science-fiction-fantasy'
    """
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


@dataclass
class Category:
    """Content category entity.

    Attributes:
        id: Unique category identifier.
        name: Display name.
        slug: URL-safe unique identifier.
        description: Optional description.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.
    """

    id: UUID
    name: str
    slug: str
    description: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate category after initialization.

        Raises:
            ValueError: If name or slug is invalid.
        """
        if not self.name.strip():
            raise ValueError("Category name cannot be empty")
        if not SLUG_PATTERN.match(self.slug):
            raise ValueError(f"Invalid category slug: {self.slug!r}")

    def rename(self, name: str, slug: str | None = None) -> None:
        self.name = name
        self.slug = slug or slugify(name)
        self.updated_at = datetime.now(UTC)
