"""
Authentication Module

Bearer-token (JWT) authentication for the HTTP surface.

Usage:
    # Required auth
    @router.get("/history")
    async def list_history(user_id: str = Depends(get_current_user)):
        ...

    # Optional auth (anonymous callers get None)
    @app.post("/api/analyze")
    async def analyze(user_id: Optional[str] = Depends(get_current_user_optional)):
        ...
"""

from .config import AuthConfig, get_auth_config
from .jwt import verify_token, user_id_from_token, JWTError
from .dependencies import get_current_user, get_current_user_optional

__all__ = [
    "AuthConfig",
    "get_auth_config",
    "verify_token",
    "user_id_from_token",
    "JWTError",
    "get_current_user",
    "get_current_user_optional",
]
