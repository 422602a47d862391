"""
External API Configuration

Feature detection for the optional integrations and a lazy holder for their
clients. A missing key or a ``*_ENABLED=false`` flag switches the matching
pipeline step to its lookup-free path.

Environment variables:
- PERPLEXITY_API_KEY, PERPLEXITY_MODEL (default: sonar), PERPLEXITY_ENABLED
- TRACXN_API_KEY, TRACXN_ENABLED
"""

import logging
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .perplexity import PerplexityClient
from .tracxn import TracxnClient

logger = logging.getLogger(__name__)


class ExternalAPIConfig(BaseSettings):
    """Credentials and switches for the optional integrations."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    perplexity_api_key: Optional[str] = None
    perplexity_model: str = "sonar"
    perplexity_enabled: bool = True

    tracxn_api_key: Optional[str] = None
    tracxn_enabled: bool = True

    @property
    def has_perplexity(self) -> bool:
        """Live probe available."""
        return self.perplexity_enabled and bool(self.perplexity_api_key)

    @property
    def has_tracxn(self) -> bool:
        """Competitor lookup available."""
        return self.tracxn_enabled and bool(self.tracxn_api_key)

    def log_status(self):
        logger.info(
            f"Live probe (Perplexity): {'enabled' if self.has_perplexity else 'disabled'}, "
            f"competitor lookup (Tracxn): {'enabled' if self.has_tracxn else 'disabled'}"
        )


class ExternalAPIClients:
    """
    Creates each integration client on first use; None when unavailable.

    Usage:
        clients = ExternalAPIClients()
        analyzer = create_visibility_analyzer(clients=clients)
        ...
        await clients.close()
    """

    def __init__(self, config: Optional[ExternalAPIConfig] = None):
        self.config = config or ExternalAPIConfig()
        self._perplexity: Optional[PerplexityClient] = None
        self._tracxn: Optional[TracxnClient] = None

    @property
    def perplexity(self) -> Optional[PerplexityClient]:
        if not self.config.has_perplexity:
            return None
        if self._perplexity is None:
            self._perplexity = PerplexityClient(
                api_key=self.config.perplexity_api_key,
                model=self.config.perplexity_model,
            )
        return self._perplexity

    @property
    def tracxn(self) -> Optional[TracxnClient]:
        if not self.config.has_tracxn:
            return None
        if self._tracxn is None:
            self._tracxn = TracxnClient(api_key=self.config.tracxn_api_key)
        return self._tracxn

    async def close(self):
        """Close whichever clients were created."""
        if self._perplexity:
            await self._perplexity.close()
            self._perplexity = None
        if self._tracxn:
            await self._tracxn.close()
            self._tracxn = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
