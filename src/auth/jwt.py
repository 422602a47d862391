"""
Bearer Token Verification

The caller's user id is the verified token's ``sub`` claim. Every failure
surfaces as JWTError with a short, client-safe message.
"""

import logging
from typing import Any, Dict, Optional

import jwt

from src.auth.config import AuthConfig, get_auth_config

logger = logging.getLogger(__name__)

# Checked in order; InvalidSignatureError is itself a DecodeError
_FAILURE_MESSAGES = (
    (jwt.ExpiredSignatureError, "Token has expired"),
    (jwt.InvalidAudienceError, "Invalid token audience"),
    (jwt.InvalidSignatureError, "Invalid token signature"),
)


class JWTError(Exception):
    """Bearer token rejected."""


def _failure_message(error: jwt.PyJWTError) -> str:
    for error_type, message in _FAILURE_MESSAGES:
        if isinstance(error, error_type):
            return message
    if isinstance(error, jwt.DecodeError):
        return f"Token decode error: {error}"
    return f"Token validation error: {error}"


def verify_token(token: str, config: Optional[AuthConfig] = None) -> Dict[str, Any]:
    """
    Decode ``token`` and check signature, expiry, audience and ``sub``.

    Raises:
        JWTError: if no secret is configured or the token is rejected
    """
    config = config or get_auth_config()
    if not config.is_configured:
        raise JWTError("JWT_SECRET not configured")

    try:
        claims = jwt.decode(
            token,
            config.jwt_secret,
            algorithms=[config.jwt_algorithm],
            audience=config.jwt_audience,
        )
    except jwt.PyJWTError as e:
        raise JWTError(_failure_message(e)) from e

    if not claims.get("sub"):
        raise JWTError("Token missing 'sub' claim (user ID)")
    return claims


def user_id_from_token(token: str, config: Optional[AuthConfig] = None) -> str:
    """Verified ``sub`` claim of ``token``."""
    return str(verify_token(token, config)["sub"])
