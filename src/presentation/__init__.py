"""Presentation layer - HTTP and WebSocket concerns.

Structure:
- contracts/: declarative HTTP controller contracts and the router generator
- websocket/: WebSocket event controllers and the connection gateway
- modules/: module kinds and the module registry
- openapi/: schema registry and OpenAPI aggregation
- documentation/: AsyncAPI generation
- routers/: versioned API router, middleware and error handlers
"""
