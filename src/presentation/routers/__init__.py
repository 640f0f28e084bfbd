"""HTTP routers.

- api/v1/: versioned API router (module routes, OpenAPI document, Swagger UI)
- api/middleware/: request tracing and bearer-auth dependencies
- documentation: non-versioned AsyncAPI document endpoints
"""
