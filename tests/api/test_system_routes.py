"""API tests for non-versioned system routes.

Validates behavior of root, health, and config endpoints exposed by the
system router.
"""

import pytest
from fastapi.testclient import TestClient

from src.core.config import settings

pytestmark = pytest.mark.api


def test_root_endpoint_returns_status_and_version(client: TestClient) -> None:
    """Root endpoint should return operational status and app version."""
    response = client.get("/")

    assert response.status_code == 200
    data = response.json()

    assert data["message"] == settings.app_name
    assert data["status"] == "operational"
    assert data["version"] == settings.app_version
    assert data["docs"] == f"{settings.api_v1_prefix}/docs"


def test_health_endpoint_returns_healthy_status(client: TestClient) -> None:
    """Health endpoint should return a healthy status indicator."""
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_responses_carry_trace_id(client: TestClient) -> None:
    response = client.get("/health", headers={"X-Trace-Id": "trace-abc"})

    assert response.headers["X-Trace-Id"] == "trace-abc"


def test_config_endpoint_behavior_depends_on_environment(client: TestClient) -> None:
    """Config endpoint should be dev-only and return 403 otherwise."""
    response = client.get("/config")

    if settings.is_development:
        assert response.status_code == 200
        data = response.json()

        assert data["environment"] == settings.environment.value
        assert data["api"]["name"] == settings.app_name
        assert data["security"]["secret_key"] == "<redacted>"
        assert settings.secret_key not in response.text
    else:
        assert response.status_code == 403
        assert (
            response.json()["detail"] == "Config endpoint only available in development"
        )


def test_v1_index_lists_modules(client: TestClient) -> None:
    response = client.get(f"{settings.api_v1_prefix}/")

    assert response.status_code == 200
    assert response.json()["modules"] == ["categories", "chat"]
