"""Test suite for the Cinema API.

Test structure:
- unit/: Unit tests - contracts, registries, WebSocket layer and adapters in isolation
- api/: API tests - HTTP and WebSocket endpoints end-to-end through TestClient
"""
