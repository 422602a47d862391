"""
Authentication Configuration

Bearer tokens are HS-signed JWTs sharing one secret with the identity
provider. Environment: JWT_SECRET, JWT_ALGORITHM, JWT_AUDIENCE,
AUTH_ENABLED (false maps every request to DEV_USER_ID).
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "authenticated"

    auth_enabled: bool = True
    dev_user_id: str = "dev-user"

    @property
    def is_configured(self) -> bool:
        return bool(self.jwt_secret)


@lru_cache()
def get_auth_config() -> AuthConfig:
    """Cached auth configuration; call ``cache_clear()`` after changing env."""
    return AuthConfig()
