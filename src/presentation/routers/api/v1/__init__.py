"""API v1 routers.

The v1 router is assembled at startup from the registered modules, see
``src.presentation.routers.api.v1.router.build_v1_router``.

Resources:
    /api/v1/                - Index with registered module names
    /api/v1/openapi.json    - OpenAPI document
    /api/v1/docs            - Swagger UI
    /api/v1/<module routes> - Routes generated from contract controllers
"""
