"""Fixtures for API tests.

Every test gets its own application built from fresh registries, so routes
and documents registered by one test never leak into another.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.main import create_app
from src.modules import register_modules
from src.presentation.documentation import AsyncAPIGenerator
from src.presentation.modules import ModuleRegistry
from src.presentation.websocket import WebSocketGateway


@pytest.fixture
def app() -> FastAPI:
    return create_app(
        module_registry=register_modules(ModuleRegistry()),
        gateway=WebSocketGateway(),
        asyncapi_generator=AsyncAPIGenerator(),
    )


@pytest.fixture
def client(app: FastAPI):
    """TestClient running the application lifespan."""
    with TestClient(app) as test_client:
        yield test_client
