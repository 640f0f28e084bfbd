"""Pytest configuration shared by unit and API tests.

This configuration ensures:
1. Every test starts with a fresh schema registry
2. Module registries are isolated per test
3. Async tests run without explicit markers
"""

from uuid import UUID

import pytest

from src.core.container import get_token_service
from src.presentation.contracts.metadata import MetadataStore
from src.presentation.modules import ModuleRegistry
from src.presentation.openapi import SchemaRegistry, reset_shared_registry

# Configure pytest-asyncio
pytest_plugins = ("pytest_asyncio",)

TEST_USER_ID = UUID("01890a5d-ac96-774b-bcce-b302099a8057")


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line("markers", "api: API tests through the FastAPI TestClient")
    config.addinivalue_line("markers", "asyncio: Async test that requires event loop")


# Test execution configuration
def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions."""
    import inspect

    for item in items:
        if inspect.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)


@pytest.fixture(autouse=True)
def fresh_schema_registry() -> SchemaRegistry:
    """Reset the process-wide schema registry before every test."""
    return reset_shared_registry()


@pytest.fixture
def store() -> MetadataStore:
    """Isolated metadata store for controllers declared inside a test."""
    return MetadataStore()


@pytest.fixture
def module_registry() -> ModuleRegistry:
    return ModuleRegistry()


@pytest.fixture
def access_token() -> str:
    """Valid access token for the test user."""
    return get_token_service().generate_access_token(
        user_id=TEST_USER_ID, email="tester@example.com", roles=["user"]
    )


@pytest.fixture
def auth_headers(access_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}
