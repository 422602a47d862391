"""
FastAPI Authentication Dependencies

Both resolve to the caller's user id. History routes require it; the
analyze route accepts anonymous callers, and an unusable token there just
means "anonymous".
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.auth.config import get_auth_config
from src.auth.jwt import JWTError, user_id_from_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _resolve_user(credentials: Optional[HTTPAuthorizationCredentials], required: bool) -> Optional[str]:
    config = get_auth_config()
    if not config.auth_enabled:
        return config.dev_user_id

    if credentials is None:
        if required:
            raise _unauthorized("Not authenticated")
        return None

    try:
        return user_id_from_token(credentials.credentials, config)
    except JWTError as e:
        if required:
            logger.warning(f"Rejected bearer token: {e}")
            raise _unauthorized(str(e))
        logger.info(f"Ignoring invalid bearer token on optional-auth route: {e}")
        return None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """
    User id of an authenticated caller.

    Raises:
        HTTPException 401: no token, or the token was rejected
    """
    return _resolve_user(credentials, required=True)


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """User id, or None for anonymous callers."""
    return _resolve_user(credentials, required=False)
