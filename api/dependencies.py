"""
Shared FastAPI dependencies and request helpers for the analysis and
history routes.

Tests replace these through ``app.dependency_overrides``.
"""

import logging
from datetime import timedelta
from functools import lru_cache
from typing import Any, Optional

from fastapi import Depends
from fastapi.responses import JSONResponse

from src.analyzer import VisibilityAnalyzer, create_visibility_analyzer
from src.persistence import AnalysisCache, AnalysisStorage, DatabaseStorage, InMemoryStorage
from src.utils.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache()
def get_storage() -> AnalysisStorage:
    """Process-wide storage backend selected by STORAGE_BACKEND."""
    backend = get_settings().STORAGE_BACKEND.lower()
    if backend == "memory":
        logger.warning("Using in-memory storage - history is lost on restart")
        return InMemoryStorage()
    return DatabaseStorage()


@lru_cache()
def get_analyzer() -> VisibilityAnalyzer:
    """Process-wide analyzer wired from environment configuration."""
    return create_visibility_analyzer()


def get_analysis_cache(
    storage: AnalysisStorage = Depends(get_storage),
    analyzer: VisibilityAnalyzer = Depends(get_analyzer),
) -> AnalysisCache:
    freshness = timedelta(hours=get_settings().CACHE_FRESHNESS_HOURS)
    return AnalysisCache(storage, analyzer, freshness=freshness)


# ============================================================================
# REQUEST HELPERS
# ============================================================================

def prepare_url(url: Any) -> Optional[str]:
    """Trimmed URL with https:// added when no scheme is given; None if unusable."""
    if not isinstance(url, str) or not url.strip():
        return None
    url = url.strip()
    if not url.lower().startswith(("http://", "https://")):
        url = f"https://{url}"
    return url


def error_response(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    body = {"error": error}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)
