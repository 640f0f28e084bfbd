"""API tests package.

End-to-end tests through TestClient against an application assembled from
fresh registries. Tests the complete request/response cycle including:
- Request validation and RFC 7807 errors
- Bearer authentication
- Generated OpenAPI and AsyncAPI documents
- WebSocket frames, acknowledgments and room broadcasts
"""
