"""AsyncAPI document routes.

GET /asyncapi.json   AsyncAPI document (JSON)
GET /asyncapi.yaml   AsyncAPI document (YAML)

The server entry is built from the request ``Host`` header so the document
points at the server that served it.
"""

from fastapi import APIRouter, Request, Response

from src.core.config import settings
from src.presentation.documentation.asyncapi_generator import AsyncAPIGenerator


def _server_url(request: Request) -> str:
    host = request.headers.get("host")
    return f"ws://{host}" if host else settings.websocket_server_url


def create_asyncapi_router(generator: AsyncAPIGenerator) -> APIRouter:
    router = APIRouter(tags=["Documentation"])

    @router.get("/asyncapi.json", include_in_schema=False)
    async def asyncapi_json(request: Request) -> dict:
        return generator.generate_spec(
            title=settings.websocket_title,
            version=settings.app_version,
            description=settings.websocket_description,
            server_url=_server_url(request),
        )

    @router.get("/asyncapi.yaml", include_in_schema=False)
    async def asyncapi_yaml(request: Request) -> Response:
        document = generator.to_yaml(
            title=settings.websocket_title,
            version=settings.app_version,
            description=settings.websocket_description,
            server_url=_server_url(request),
        )
        return Response(content=document, media_type="application/yaml")

    return router
