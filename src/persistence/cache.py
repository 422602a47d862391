"""
Analysis Cache

Reuses a user's recent report for the same site instead of re-running the
pipeline.

Key: (user_id, normalized URL). A stored report younger than the freshness
window (24h by default) is returned unchanged. Anonymous requests always run
the pipeline and never touch storage.

The read-then-write is not transactional: two concurrent misses for the
same key both run and both persist.
"""

import logging
import re
from datetime import datetime, timedelta
from typing import Callable, Optional, Tuple, TYPE_CHECKING

from src.database.models import AnalysisStatus
from src.models import AnalysisResult

from .storage import AnalysisStorage

if TYPE_CHECKING:
    from src.analyzer.engine import VisibilityAnalyzer

logger = logging.getLogger(__name__)

DEFAULT_FRESHNESS = timedelta(hours=24)

_SCHEME = re.compile(r"^https?://", re.IGNORECASE)
_WWW = re.compile(r"^www\.", re.IGNORECASE)


def normalize_url(url: str) -> str:
    """
    Cache key form of a URL.

    Strips the http(s) scheme, a leading "www." and one trailing slash,
    then lower-cases.
    """
    normalized = _SCHEME.sub("", url.strip())
    normalized = _WWW.sub("", normalized)
    if normalized.endswith("/"):
        normalized = normalized[:-1]
    return normalized.lower()


class AnalysisCache:
    """
    Freshness-window cache in front of the analysis pipeline.

    Usage:
        cache = AnalysisCache(DatabaseStorage(), create_visibility_analyzer())
        result, cached = await cache.get_or_analyze("https://example.com", user_id)
    """

    def __init__(
        self,
        storage: AnalysisStorage,
        analyzer: "VisibilityAnalyzer",
        freshness: timedelta = DEFAULT_FRESHNESS,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.storage = storage
        self.analyzer = analyzer
        self.freshness = freshness
        self.clock = clock

    async def lookup(self, url: str, user_id: str) -> Optional[AnalysisResult]:
        """Fresh stored report for (user, url), or None."""
        normalized = normalize_url(url)
        since = self.clock() - self.freshness
        return await self.storage.get_recent_analysis(user_id, normalized, since)

    async def store(self, url: str, user_id: str, result: AnalysisResult) -> str:
        """Persist a history row plus its report; returns the history id."""
        normalized = normalize_url(url)
        entry = await self.storage.save_domain_history(
            user_id=user_id,
            domain=result.brand_info.domain or normalized,
            normalized_url=normalized,
            ai_visibility_score=result.overall_score,
            status=AnalysisStatus.COMPLETED.value,
            analyzed_at=self.clock(),
        )
        await self.storage.save_analysis_result(entry.id, result.to_dict())
        return entry.id

    async def get_or_analyze(self, url: str, user_id: Optional[str] = None) -> Tuple[AnalysisResult, bool]:
        """
        Return (result, cached).

        Raises whatever the analyzer raises on a miss; nothing is stored
        for a failed analysis.
        """
        if not user_id:
            return await self.analyzer.analyze(url), False

        cached = await self.lookup(url, user_id)
        if cached is not None:
            logger.info(f"Returning cached analysis (< {self.freshness}) for {normalize_url(url)}")
            return cached, True

        result = await self.analyzer.analyze(url)
        history_id = await self.store(url, user_id, result)
        logger.info(f"Stored analysis {history_id} for {normalize_url(url)}")
        return result, False
