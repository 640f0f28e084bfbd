"""Categories module: category CRUD over HTTP."""

from src.domain.protocols.category_repository import CategoryRepository
from src.infrastructure.persistence import InMemoryCategoryRepository
from src.presentation.controllers import CategoriesController
from src.presentation.modules import ModuleMetadata, RestModule


class CategoriesModule(RestModule):
    """Wires the categories controller to its repository.

    Args:
        repository: Category store (defaults to an empty in-memory store).
    """

    def __init__(self, repository: CategoryRepository | None = None) -> None:
        super().__init__(
            ModuleMetadata(
                name="categories",
                version="1.0.0",
                description="Module for managing content categories",
            )
        )
        self.repository = repository or InMemoryCategoryRepository()
        self.controller = CategoriesController(self.repository)

    def get_controllers(self) -> tuple[CategoriesController, ...]:
        return (self.controller,)
