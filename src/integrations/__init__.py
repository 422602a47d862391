"""
External API Integrations

Optional third-party services used by the visibility pipeline:
- Perplexity: live answer engine for brand-mention probing
- Tracxn: competitor candidates and company profiles
"""

from .perplexity import PerplexityClient, PerplexityError, PerplexityResult
from .tracxn import TracxnClient, TracxnError, TracxnCompany, TracxnCompetitor
from .config import ExternalAPIConfig, ExternalAPIClients

__all__ = [
    "PerplexityClient",
    "PerplexityError",
    "PerplexityResult",
    "TracxnClient",
    "TracxnError",
    "TracxnCompany",
    "TracxnCompetitor",
    "ExternalAPIConfig",
    "ExternalAPIClients",
]
