"""Unit tests for JWTService.

Tests cover:
- Token generation with expected claims
- Validation success, expiry and tampering
- Secret key length enforcement
"""

from uuid import UUID

import jwt
import pytest

from src.core.result import Failure, Success
from src.infrastructure.security import JWTService
from src.infrastructure.security.jwt_service import EXPIRED_TOKEN, INVALID_TOKEN

SECRET = "a" * 32
USER_ID = UUID("01890a5d-ac96-774b-bcce-b302099a8057")


@pytest.fixture
def service() -> JWTService:
    return JWTService(secret_key=SECRET, expiration_minutes=15)


@pytest.mark.unit
class TestJWTServiceGeneration:
    """Test token generation."""

    def test_token_carries_identity_claims(self, service: JWTService):
        """Test generated token contains sub, email, roles, jti and lifetime."""
        token = service.generate_access_token(
            user_id=USER_ID, email="user@example.com", roles=["user", "admin"]
        )

        payload = jwt.decode(token, SECRET, algorithms=["HS256"])

        assert payload["sub"] == str(USER_ID)
        assert payload["email"] == "user@example.com"
        assert payload["roles"] == ["user", "admin"]
        assert payload["exp"] - payload["iat"] == 15 * 60
        assert UUID(payload["jti"])

    def test_each_token_gets_unique_jti(self, service: JWTService):
        first = service.generate_access_token(USER_ID, "a@example.com", ["user"])
        second = service.generate_access_token(USER_ID, "a@example.com", ["user"])

        first_jti = jwt.decode(first, SECRET, algorithms=["HS256"])["jti"]
        second_jti = jwt.decode(second, SECRET, algorithms=["HS256"])["jti"]

        assert first_jti != second_jti

    def test_short_secret_rejected(self):
        """Test secrets shorter than 256 bits are refused."""
        with pytest.raises(ValueError, match="at least 32 bytes"):
            JWTService(secret_key="short")


@pytest.mark.unit
class TestJWTServiceValidation:
    """Test token validation."""

    def test_valid_token(self, service: JWTService):
        token = service.generate_access_token(USER_ID, "user@example.com", ["user"])

        result = service.validate_access_token(token)

        assert isinstance(result, Success)
        assert result.value["sub"] == str(USER_ID)

    def test_expired_token(self):
        """Test a token past its expiry fails with EXPIRED_TOKEN."""
        service = JWTService(secret_key=SECRET, expiration_minutes=-1)
        token = service.generate_access_token(USER_ID, "user@example.com", ["user"])

        result = service.validate_access_token(token)

        assert result == Failure(error=EXPIRED_TOKEN)

    def test_token_signed_with_other_secret(self, service: JWTService):
        other = JWTService(secret_key="b" * 32)
        token = other.generate_access_token(USER_ID, "user@example.com", ["user"])

        assert service.validate_access_token(token) == Failure(error=INVALID_TOKEN)

    def test_garbage_token(self, service: JWTService):
        assert service.validate_access_token("not.a.jwt") == Failure(error=INVALID_TOKEN)
