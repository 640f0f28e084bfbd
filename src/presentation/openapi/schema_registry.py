"""Process-wide registry of documented schemas, components and paths.

The router generator registers every schema bound to a route and one
``PathDocument`` per mounted operation; the OpenAPI aggregator reads the
registry when a document is requested.

Usage:
    registry = get_shared_registry()
    registry.register_schema("CategoryResponse", CategoryResponse)

    # Tests
    registry = reset_shared_registry()

The registry is created lazily on first access, under a lock, and is always
seeded with the ``BearerAuth`` security scheme. ``reset()`` swaps in a fresh
instance: callers must re-fetch the registry afterwards.
"""

import re
import threading
from typing import Any, ClassVar, Final

from pydantic import BaseModel

from src.presentation.openapi.documents import PathDocument

BEARER_AUTH: Final = "BearerAuth"
BEARER_AUTH_SCHEME: Final[dict[str, Any]] = {
    "type": "http",
    "scheme": "bearer",
    "bearerFormat": "JWT",
}

_INVALID_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def schema_name_for(model: type[BaseModel]) -> str:
    """Component name for a model (``SuccessResponse[Foo]`` -> ``SuccessResponse_Foo_``)."""
    return _INVALID_NAME_CHARS.sub("_", model.__name__)


class SchemaRegistry:
    """Named schemas, shared components and documented paths.

    Instances can be created directly for isolated use; the process-wide one
    is obtained with ``get_instance()``.
    """

    _instance: ClassVar["SchemaRegistry | None"] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self) -> None:
        self._schemas: dict[str, type[BaseModel]] = {}
        self._components: dict[str, dict[str, Any]] = {}
        self._paths: dict[tuple[str, str], PathDocument] = {}
        self._tags: dict[str, str | None] = {}
        self._seed()

    def _seed(self) -> None:
        self.register_component("securitySchemes", BEARER_AUTH, dict(BEARER_AUTH_SCHEME))

    # -------------------------------------------------------------------------
    # Singleton access
    # -------------------------------------------------------------------------

    @classmethod
    def get_instance(cls) -> "SchemaRegistry":
        """Return the process-wide registry, creating it on first access."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> "SchemaRegistry":
        """Replace the process-wide registry with a freshly seeded one."""
        with cls._lock:
            cls._instance = cls()
            return cls._instance

    def clear(self) -> None:
        """Empty this registry in place, keeping the BearerAuth scheme."""
        self._schemas.clear()
        self._components.clear()
        self._paths.clear()
        self._tags.clear()
        self._seed()

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register_schema(self, name: str, model: type[BaseModel]) -> str:
        """Register ``model`` under ``name``.

        When ``name`` is already taken by a different model, the model is
        registered under its module-qualified name instead.

        Returns:
            str: The name the model is registered under.
        """
        existing = self._schemas.get(name)
        if existing is None or existing is model:
            self._schemas[name] = model
            return name

        qualified = _INVALID_NAME_CHARS.sub(
            "_", f"{model.__module__}.{model.__qualname__}"
        )
        self._schemas[qualified] = model
        return qualified

    def register_model(self, model: type[BaseModel]) -> str:
        """Register ``model`` under its derived component name."""
        for name, registered in self._schemas.items():
            if registered is model:
                return name
        return self.register_schema(schema_name_for(model), model)

    def register_component(self, kind: str, name: str, value: dict[str, Any]) -> None:
        """Register a shared component (e.g. ``securitySchemes``)."""
        self._components.setdefault(kind, {})[name] = value

    def register_tag(self, name: str, description: str | None = None) -> None:
        if description is not None or name not in self._tags:
            self._tags[name] = description

    def register_path(self, document: PathDocument) -> None:
        """Register an operation; re-registering the same method and path replaces it."""
        self._paths[(document.path, document.method)] = document

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    def get_schema(self, name: str) -> type[BaseModel] | None:
        return self._schemas.get(name)

    @property
    def schemas(self) -> dict[str, type[BaseModel]]:
        return dict(self._schemas)

    @property
    def components(self) -> dict[str, dict[str, Any]]:
        return {kind: dict(values) for kind, values in self._components.items()}

    @property
    def paths(self) -> tuple[PathDocument, ...]:
        return tuple(self._paths.values())

    @property
    def tags(self) -> dict[str, str | None]:
        return dict(self._tags)


def get_shared_registry() -> SchemaRegistry:
    """Return the process-wide schema registry."""
    return SchemaRegistry.get_instance()


def reset_shared_registry() -> SchemaRegistry:
    """Reset the process-wide schema registry and return the new instance."""
    return SchemaRegistry.reset()
