"""Unit tests for the contract metadata store.

Tests cover:
- Primitives (define, append, get and collect along the MRO, records, clear)
- Route overrides (summary/description) merged on read
- Response lists, validation merging and middleware accumulation
- Header and cookie records
"""

import pytest
from pydantic import BaseModel

from src.presentation.contracts.metadata import (
    AUTH_MARKER,
    ControllerMetadata,
    CookieMetadata,
    HTTPMethod,
    MetadataKind,
    MetadataStore,
    ResponseMetadata,
    RouteMetadata,
)


class BodySchema(BaseModel):
    name: str


class ParamsSchema(BaseModel):
    id: int


class Controller:
    pass


class ChildController(Controller):
    pass


def dependency() -> None:
    return None


@pytest.mark.unit
class TestMetadataStorePrimitives:
    """Test define/append/get/records/clear."""

    def test_define_replaces_previous_value(self, store: MetadataStore):
        store.define(Controller, "custom", 1, "member")
        store.define(Controller, "custom", 2, "member")

        assert store.get(Controller, "custom", "member") == 2

    def test_append_keeps_order(self, store: MetadataStore):
        store.append(Controller, "items", "a")
        store.append(Controller, "items", "b")

        assert store.get(Controller, "items") == ["a", "b"]

    def test_get_returns_default_on_miss(self, store: MetadataStore):
        assert store.get(Controller, "missing") is None
        assert store.get(Controller, "missing", default=()) == ()

    def test_get_walks_mro(self, store: MetadataStore):
        store.define(Controller, "custom", "parent")

        assert store.get(ChildController, "custom") == "parent"

    def test_collect_concatenates_bases_first(self, store: MetadataStore):
        store.append(ChildController, "items", "child")
        store.append(Controller, "items", "parent")

        assert store.collect(ChildController, "items") == ("parent", "child")
        assert store.collect(Controller, "items") == ("parent",)

    def test_instances_resolve_to_their_class(self, store: MetadataStore):
        store.define(Controller(), "custom", "value")

        assert store.get(Controller, "custom") == "value"

    def test_records_snapshot_in_insertion_order(self, store: MetadataStore):
        store.define(Controller, "first", 1)
        store.define(Controller, "second", 2, "member")

        records = store.records()

        assert [(r.kind, r.member, r.payload) for r in records] == [
            ("first", None, 1),
            ("second", "member", 2),
        ]

    def test_clear_drops_everything(self, store: MetadataStore):
        store.define(Controller, "custom", 1)
        store.clear()

        assert store.records() == ()


@pytest.mark.unit
class TestControllerAndRoutes:
    """Test controller metadata and routes."""

    def test_controller_metadata_last_write_wins(self, store: MetadataStore):
        store.set_controller_metadata(Controller, ControllerMetadata(tag="A"))
        store.set_controller_metadata(
            Controller, ControllerMetadata(tag="B", prefix="/b")
        )

        metadata = store.get_controller_metadata(Controller)

        assert metadata.tag == "B"
        assert metadata.prefix == "/b"

    def test_routes_keep_declaration_order(self, store: MetadataStore):
        store.add_route(
            Controller, RouteMetadata(method=HTTPMethod.GET, path="/", method_name="list")
        )
        store.add_route(
            Controller, RouteMetadata(method=HTTPMethod.POST, path="/", method_name="create")
        )

        routes = store.get_routes(Controller)

        assert [route.method_name for route in routes] == ["list", "create"]

    def test_subclass_routes_extend_inherited_routes(self, store: MetadataStore):
        for name in ("one", "two"):
            store.add_route(
                Controller,
                RouteMetadata(method=HTTPMethod.GET, path=f"/{name}", method_name=name),
            )
        store.add_route(
            ChildController,
            RouteMetadata(method=HTTPMethod.GET, path="/three", method_name="three"),
        )

        routes = store.get_routes(ChildController)

        assert [route.method_name for route in routes] == ["one", "two", "three"]
        assert len(store.get_routes(Controller)) == 2

    def test_routes_empty_when_nothing_declared(self, store: MetadataStore):
        assert store.get_routes(Controller) == ()

    def test_summary_and_description_override_route_values(self, store: MetadataStore):
        store.add_route(
            Controller,
            RouteMetadata(
                method=HTTPMethod.GET,
                path="/",
                method_name="list",
                summary="Original",
                description="Original description",
            ),
        )
        store.set_summary(Controller, "list", "Overridden")

        route = store.get_routes(Controller)[0]

        assert route.summary == "Overridden"
        assert route.description == "Original description"


@pytest.mark.unit
class TestResponsesValidationMiddlewares:
    """Test per-method list and merged records."""

    def test_get_responses_empty_tuple_when_none_declared(self, store: MetadataStore):
        assert store.get_responses(Controller, "list") == ()

    def test_responses_append_never_replace(self, store: MetadataStore):
        store.add_response(Controller, "list", ResponseMetadata(status_code=200, description="OK"))
        store.add_response(Controller, "list", ResponseMetadata(status_code=200, description="Again"))

        responses = store.get_responses(Controller, "list")

        assert [r.description for r in responses] == ["OK", "Again"]

    def test_inherited_responses_come_first(self, store: MetadataStore):
        store.add_response(Controller, "list", ResponseMetadata(status_code=200, description="OK"))
        store.add_response(
            ChildController, "list", ResponseMetadata(status_code=404, description="Missing")
        )

        responses = store.get_responses(ChildController, "list")

        assert [r.status_code for r in responses] == [200, 404]

    def test_validation_merges_parts(self, store: MetadataStore):
        store.merge_validation(Controller, "update", body=BodySchema)
        store.merge_validation(Controller, "update", params=ParamsSchema)

        validation = store.get_validation(Controller, "update")

        assert validation.body is BodySchema
        assert validation.params is ParamsSchema
        assert validation.query is None

    def test_validation_empty_by_default(self, store: MetadataStore):
        assert store.get_validation(Controller, "list").is_empty

    def test_middlewares_accumulate(self, store: MetadataStore):
        store.add_middlewares(Controller, "create", (AUTH_MARKER,))
        store.add_middlewares(Controller, "create", (dependency,))

        middlewares = store.get_middlewares(Controller, "create")

        assert middlewares.middlewares == (AUTH_MARKER, dependency)
        assert middlewares.requires_auth

    def test_requires_auth_false_without_marker(self, store: MetadataStore):
        store.add_middlewares(Controller, "create", (dependency,))

        assert not store.get_middlewares(Controller, "create").requires_auth

    def test_cookie_records(self, store: MetadataStore):
        store.set_required_cookie(Controller, "refresh", CookieMetadata(name="refresh_token"))

        assert store.get_required_cookie(Controller, "refresh").name == "refresh_token"
        assert store.get_set_cookie(Controller, "refresh") is None

    def test_kinds_are_stored_separately(self, store: MetadataStore):
        store.merge_validation(Controller, "list", body=BodySchema)

        kinds = {record.kind for record in store.records()}

        assert kinds == {MetadataKind.VALIDATION}
