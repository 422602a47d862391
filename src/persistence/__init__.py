"""
Persistence Layer

Provides storage for analysis history and the per-user freshness cache.
"""

from .storage import (
    AnalysisStorage,
    DatabaseStorage,
    InMemoryStorage,
    DomainHistoryEntry,
    load_analysis_blob,
)
from .cache import AnalysisCache, normalize_url, DEFAULT_FRESHNESS

__all__ = [
    "AnalysisStorage",
    "DatabaseStorage",
    "InMemoryStorage",
    "DomainHistoryEntry",
    "load_analysis_blob",
    "AnalysisCache",
    "normalize_url",
    "DEFAULT_FRESHNESS",
]
