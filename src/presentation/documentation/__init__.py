"""WebSocket API documentation (AsyncAPI)."""

from src.presentation.documentation.asyncapi_generator import (
    ASYNCAPI_VERSION,
    AsyncAPIGenerator,
    parse_server_url,
    sanitize_id,
)
from src.presentation.documentation.routes import create_asyncapi_router

__all__ = [
    "ASYNCAPI_VERSION",
    "AsyncAPIGenerator",
    "create_asyncapi_router",
    "parse_server_url",
    "sanitize_id",
]
