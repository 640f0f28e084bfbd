"""Infrastructure layer - Adapters for domain protocols.

This layer contains implementations of domain protocols (ports):
- logging/: structlog console adapter (LoggerProtocol)
- security/: PyJWT access token service (TokenGenerationProtocol)
- persistence/: in-memory category repository (CategoryRepository)

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
