"""Categories HTTP controller.

Reads are public; writes require a bearer token.

Endpoints:
    GET    /categories        List categories (paginated, ?search=)
    GET    /categories/{id}   Get category
    POST   /categories        Create category
    PATCH  /categories/{id}   Update category
    DELETE /categories/{id}   Delete category
"""

from uuid import UUID

from fastapi import HTTPException, Response, status
from uuid_extensions import uuid7

from src.domain.entities.category import Category, slugify
from src.domain.protocols.category_repository import CategoryRepository
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.presentation.contracts import (
    ApiRequest,
    BaseController,
    api_response,
    controller,
    delete,
    get,
    patch,
    post,
    protected,
    set_headers,
    validate_body,
    validate_params,
    validate_query,
)
from src.schemas.category_schemas import (
    CategoryIdParams,
    CategoryResponse,
    CreateCategoryRequest,
    ListCategoriesQuery,
    UpdateCategoryRequest,
)
from src.schemas.common_schemas import ErrorResponse, PaginatedResponse, SuccessResponse


@controller("Categories", prefix="/categories", description="Category management endpoints")
class CategoriesController(BaseController):
    """Category CRUD over a ``CategoryRepository``."""

    def __init__(
        self, repository: CategoryRepository, logger: LoggerProtocol | None = None
    ) -> None:
        super().__init__(logger)
        self.repository = repository

    @get("/", summary="List all categories")
    @validate_query(ListCategoriesQuery)
    @set_headers({"Cache-Control": "public, max-age=60"})
    @api_response(
        200, "Categories retrieved successfully", PaginatedResponse[CategoryResponse]
    )
    @api_response(400, "Invalid query parameters", ErrorResponse)
    async def list_categories(
        self, request: ApiRequest, response: Response
    ) -> PaginatedResponse[CategoryResponse]:
        query: ListCategoriesQuery = request.query
        categories, total = await self.repository.list_page(
            offset=query.offset, limit=query.limit, search=query.search
        )
        return PaginatedResponse[CategoryResponse].from_items(
            [CategoryResponse.from_entity(category) for category in categories],
            query,
            total,
        )

    @get("/:id", summary="Get category by ID")
    @validate_params(CategoryIdParams)
    @api_response(200, "Category retrieved successfully", SuccessResponse[CategoryResponse])
    @api_response(400, "Invalid category ID", ErrorResponse)
    @api_response(404, "Category not found", ErrorResponse)
    async def get_category(
        self, request: ApiRequest, response: Response
    ) -> SuccessResponse[CategoryResponse]:
        category = await self._get_or_404(request.params.id)
        return SuccessResponse[CategoryResponse](data=CategoryResponse.from_entity(category))

    @post("/", summary="Create category", description="Create a new category")
    @protected()
    @validate_body(CreateCategoryRequest)
    @api_response(201, "Category created successfully", SuccessResponse[CategoryResponse])
    @api_response(400, "Invalid input data", ErrorResponse)
    @api_response(401, "Authentication required", ErrorResponse)
    @api_response(409, "Category with this slug already exists", ErrorResponse)
    async def create_category(
        self, request: ApiRequest, response: Response
    ) -> SuccessResponse[CategoryResponse]:
        body: CreateCategoryRequest = request.body
        slug = body.slug or slugify(body.name)
        await self._ensure_slug_available(slug)

        category = Category(
            id=uuid7(), name=body.name, slug=slug, description=body.description
        )
        await self.repository.save(category)
        self.logger.info(
            "Category created",
            category_id=str(category.id),
            user_id=str(request.user.user_id) if request.user else None,
        )
        return SuccessResponse[CategoryResponse](
            message="Category created", data=CategoryResponse.from_entity(category)
        )

    @patch("/:id", summary="Update category")
    @protected()
    @validate_params(CategoryIdParams)
    @validate_body(UpdateCategoryRequest)
    @api_response(200, "Category updated successfully", SuccessResponse[CategoryResponse])
    @api_response(400, "Invalid input data", ErrorResponse)
    @api_response(401, "Authentication required", ErrorResponse)
    @api_response(404, "Category not found", ErrorResponse)
    @api_response(409, "Category with this slug already exists", ErrorResponse)
    async def update_category(
        self, request: ApiRequest, response: Response
    ) -> SuccessResponse[CategoryResponse]:
        body: UpdateCategoryRequest = request.body
        category = await self._get_or_404(request.params.id)

        if body.slug and body.slug != category.slug:
            await self._ensure_slug_available(body.slug)
        if body.name is not None or body.slug is not None:
            category.rename(body.name or category.name, body.slug or category.slug)
        if "description" in body.model_fields_set:
            category.description = body.description

        await self.repository.save(category)
        return SuccessResponse[CategoryResponse](data=CategoryResponse.from_entity(category))

    @delete("/:id", summary="Delete category")
    @protected()
    @validate_params(CategoryIdParams)
    @api_response(204, "Category deleted")
    @api_response(401, "Authentication required", ErrorResponse)
    @api_response(404, "Category not found", ErrorResponse)
    async def delete_category(self, request: ApiRequest, response: Response) -> None:
        if not await self.repository.delete(request.params.id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Category not found"
            )
        self.logger.info("Category deleted", category_id=str(request.params.id))

    async def _get_or_404(self, category_id: UUID) -> Category:
        category = await self.repository.find_by_id(category_id)
        if category is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Category not found"
            )
        return category

    async def _ensure_slug_available(self, slug: str) -> None:
        if await self.repository.find_by_slug(slug) is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Category with slug '{slug}' already exists",
            )
