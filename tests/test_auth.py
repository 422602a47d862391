"""
Authentication Tests

Tests for bearer-token validation and the FastAPI auth dependencies.
"""

import pytest
from datetime import datetime, timedelta
from unittest.mock import patch

import jwt
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from src.auth.config import AuthConfig
from src.auth.dependencies import get_current_user, get_current_user_optional
from src.auth.jwt import JWTError, user_id_from_token, verify_token


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def auth_config():
    """Create test auth config."""
    return AuthConfig(
        jwt_secret="super-secret-jwt-key-for-testing",
        jwt_algorithm="HS256",
        jwt_audience="authenticated",
        auth_enabled=True,
    )


@pytest.fixture
def valid_jwt_payload():
    """Create valid JWT payload."""
    return {
        "sub": "user-123",
        "aud": "authenticated",
        "exp": int((datetime.utcnow() + timedelta(hours=1)).timestamp()),
        "iat": int(datetime.utcnow().timestamp()),
    }


@pytest.fixture
def create_test_token(auth_config):
    """Factory to create test JWT tokens."""
    def _create(payload: dict) -> str:
        return jwt.encode(payload, auth_config.jwt_secret, algorithm=auth_config.jwt_algorithm)
    return _create


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


# =============================================================================
# JWT VALIDATION TESTS
# =============================================================================

class TestJWTValidation:
    """Tests for JWT token validation."""

    def test_valid_token(self, auth_config, valid_jwt_payload, create_test_token):
        """Test that a valid token is accepted."""
        with patch("src.auth.jwt.get_auth_config", return_value=auth_config):
            payload = verify_token(create_test_token(valid_jwt_payload))
            assert payload["sub"] == "user-123"

    def test_user_id_is_sub(self, auth_config, valid_jwt_payload, create_test_token):
        valid_jwt_payload["sub"] = "abc-789"
        with patch("src.auth.jwt.get_auth_config", return_value=auth_config):
            assert user_id_from_token(create_test_token(valid_jwt_payload)) == "abc-789"

    def test_expired_token(self, auth_config, valid_jwt_payload, create_test_token):
        """Test that expired tokens are rejected."""
        valid_jwt_payload["exp"] = int((datetime.utcnow() - timedelta(hours=1)).timestamp())

        with patch("src.auth.jwt.get_auth_config", return_value=auth_config):
            with pytest.raises(JWTError, match="expired"):
                verify_token(create_test_token(valid_jwt_payload))

    def test_invalid_signature(self, auth_config, valid_jwt_payload):
        """Test that tokens with invalid signatures are rejected."""
        token = jwt.encode(valid_jwt_payload, "a-different-secret-of-enough-length", algorithm="HS256")

        with patch("src.auth.jwt.get_auth_config", return_value=auth_config):
            with pytest.raises(JWTError, match="signature"):
                verify_token(token)

    def test_missing_sub_claim(self, auth_config, valid_jwt_payload, create_test_token):
        """Test that tokens without 'sub' claim are rejected."""
        del valid_jwt_payload["sub"]

        with patch("src.auth.jwt.get_auth_config", return_value=auth_config):
            with pytest.raises(JWTError, match="sub"):
                verify_token(create_test_token(valid_jwt_payload))

    def test_invalid_audience(self, auth_config, valid_jwt_payload, create_test_token):
        """Test that tokens with wrong audience are rejected."""
        valid_jwt_payload["aud"] = "wrong-audience"

        with patch("src.auth.jwt.get_auth_config", return_value=auth_config):
            with pytest.raises(JWTError, match="audience"):
                verify_token(create_test_token(valid_jwt_payload))

    def test_garbage_token(self, auth_config):
        with patch("src.auth.jwt.get_auth_config", return_value=auth_config):
            with pytest.raises(JWTError, match="decode"):
                verify_token("not-a-jwt")

    def test_no_jwt_secret_configured(self):
        """Test error when JWT secret not configured."""
        with patch("src.auth.jwt.get_auth_config", return_value=AuthConfig(jwt_secret="")):
            with pytest.raises(JWTError, match="not configured"):
                verify_token("any-token")


# =============================================================================
# DEPENDENCY TESTS
# =============================================================================

class TestAuthDependencies:
    """Tests for get_current_user / get_current_user_optional."""

    @pytest.mark.asyncio
    async def test_required_without_credentials(self, auth_config):
        with patch("src.auth.dependencies.get_auth_config", return_value=auth_config):
            with pytest.raises(HTTPException) as exc:
                await get_current_user(None)
        assert exc.value.status_code == 401
        assert exc.value.detail == "Not authenticated"

    @pytest.mark.asyncio
    async def test_required_with_valid_token(self, auth_config, valid_jwt_payload, create_test_token):
        with patch("src.auth.dependencies.get_auth_config", return_value=auth_config), \
             patch("src.auth.jwt.get_auth_config", return_value=auth_config):
            user_id = await get_current_user(_bearer(create_test_token(valid_jwt_payload)))
        assert user_id == "user-123"

    @pytest.mark.asyncio
    async def test_required_with_invalid_token(self, auth_config):
        with patch("src.auth.dependencies.get_auth_config", return_value=auth_config), \
             patch("src.auth.jwt.get_auth_config", return_value=auth_config):
            with pytest.raises(HTTPException) as exc:
                await get_current_user(_bearer("not-a-jwt"))
        assert exc.value.status_code == 401

    @pytest.mark.asyncio
    async def test_optional_treats_invalid_token_as_anonymous(self, auth_config):
        with patch("src.auth.dependencies.get_auth_config", return_value=auth_config), \
             patch("src.auth.jwt.get_auth_config", return_value=auth_config):
            assert await get_current_user_optional(_bearer("not-a-jwt")) is None
            assert await get_current_user_optional(None) is None

    @pytest.mark.asyncio
    async def test_auth_disabled_uses_dev_user(self):
        config = AuthConfig(auth_enabled=False, dev_user_id="local-dev")
        with patch("src.auth.dependencies.get_auth_config", return_value=config):
            assert await get_current_user(None) == "local-dev"
            assert await get_current_user_optional(None) == "local-dev"


class TestAuthConfig:
    """Tests for auth configuration."""

    def test_is_configured(self, auth_config):
        assert auth_config.is_configured
        assert not AuthConfig(jwt_secret="").is_configured
