"""Security infrastructure adapters.

This package contains security-related infrastructure implementations:
- JWT access token generation/validation
"""

from src.infrastructure.security.jwt_service import JWTService

__all__ = [
    "JWTService",
]
