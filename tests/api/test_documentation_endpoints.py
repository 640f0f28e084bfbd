"""API tests for the generated OpenAPI and AsyncAPI documents."""

import pytest
import yaml
from fastapi.testclient import TestClient

from src.core.config import settings

pytestmark = pytest.mark.api


class TestOpenAPIDocument:
    """GET /api/v1/openapi.json and /api/v1/docs."""

    def test_document_lists_category_routes(self, client: TestClient):
        response = client.get(f"{settings.api_v1_prefix}/openapi.json")

        assert response.status_code == 200
        document = response.json()
        assert document["openapi"] == "3.0.0"
        assert document["info"]["title"] == settings.app_name
        assert document["servers"] == [
            {"url": settings.api_v1_prefix, "description": "API Version 1"}
        ]
        assert set(document["paths"]) == {"/categories", "/categories/{id}"}
        assert set(document["paths"]["/categories/{id}"]) == {"get", "patch", "delete"}

    def test_protected_operations_carry_security(self, client: TestClient):
        document = client.get(f"{settings.api_v1_prefix}/openapi.json").json()
        collection = document["paths"]["/categories"]

        assert collection["post"]["security"] == [{"BearerAuth": []}]
        assert "security" not in collection["get"]
        assert document["components"]["securitySchemes"]["BearerAuth"]["scheme"] == "bearer"

    def test_operations_reference_registered_schemas(self, client: TestClient):
        document = client.get(f"{settings.api_v1_prefix}/openapi.json").json()
        post = document["paths"]["/categories"]["post"]

        ref = post["requestBody"]["content"]["application/json"]["schema"]["$ref"]
        assert ref == "#/components/schemas/CreateCategoryRequest"
        assert "CreateCategoryRequest" in document["components"]["schemas"]
        assert post["tags"] == ["Categories"]

    def test_optional_fields_render_as_nullable(self, client: TestClient):
        document = client.get(f"{settings.api_v1_prefix}/openapi.json").json()
        schema = document["components"]["schemas"]["CreateCategoryRequest"]
        description = schema["properties"]["description"]

        assert "anyOf" not in description
        assert description["type"] == "string"
        assert description["maxLength"] == 500
        assert description["nullable"] is True

    def test_swagger_ui_points_at_document(self, client: TestClient):
        response = client.get(f"{settings.api_v1_prefix}/docs")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert f"{settings.api_v1_prefix}/openapi.json" in response.text


class TestAsyncAPIDocument:
    """GET /asyncapi.json and /asyncapi.yaml."""

    def test_json_document(self, client: TestClient):
        response = client.get("/asyncapi.json")

        assert response.status_code == 200
        document = response.json()
        assert document["asyncapi"] == "3.0.0"
        assert document["info"]["title"] == settings.websocket_title
        assert document["servers"]["production"]["host"] == "testserver"
        assert "_chat_chat_join" in document["channels"]
        assert "receive_chat_join" in document["operations"]

    def test_yaml_document_matches_json(self, client: TestClient):
        json_document = client.get("/asyncapi.json").json()
        response = client.get("/asyncapi.yaml")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/yaml")
        assert yaml.safe_load(response.text) == json_document
