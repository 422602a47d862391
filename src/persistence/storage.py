"""
Storage Backends

Persist analysis history rows and their report blobs.

- DatabaseStorage: SQLAlchemy tables from src.database
- InMemoryStorage: process-local dicts (tests, database-less runs)

Stored blobs are re-validated on read; a blob that no longer matches the
report schema is logged and treated as missing.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, ContextManager, Dict, List, Optional
from uuid import uuid4

from pydantic import ValidationError
from sqlalchemy.orm import Session

from src.database.models import AnalysisResultRecord, AnalysisStatus, DomainHistory
from src.models import AnalysisResult

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 20
SEARCH_LIMIT = 10


@dataclass
class DomainHistoryEntry:
    """One analysis in a user's history."""
    id: str
    user_id: str
    domain: str
    normalized_url: str
    ai_visibility_score: int
    status: str
    analyzed_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "domain": self.domain,
            "normalizedUrl": self.normalized_url,
            "aiVisibilityScore": self.ai_visibility_score,
            "status": self.status,
            "analyzedAt": self.analyzed_at.isoformat(),
        }

    @classmethod
    def from_row(cls, row: DomainHistory) -> "DomainHistoryEntry":
        return cls(
            id=row.id,
            user_id=row.user_id,
            domain=row.domain,
            normalized_url=row.normalized_url,
            ai_visibility_score=row.ai_visibility_score,
            status=row.status,
            analyzed_at=row.analyzed_at,
        )


def load_analysis_blob(blob: Any) -> Optional[AnalysisResult]:
    """Validate a stored report; None if it no longer matches the schema."""
    try:
        return AnalysisResult.model_validate(blob)
    except ValidationError as e:
        logger.error(f"Failed to parse stored analysis data: {e.error_count()} errors")
        return None


class AnalysisStorage(ABC):
    """Abstract base class for analysis storage."""

    @abstractmethod
    async def get_recent_analysis(
        self, user_id: str, normalized_url: str, since: datetime
    ) -> Optional[AnalysisResult]:
        """Newest stored result for (user, url) analyzed at or after ``since``."""
        pass

    @abstractmethod
    async def save_domain_history(
        self,
        user_id: str,
        domain: str,
        normalized_url: str,
        ai_visibility_score: int,
        status: str = AnalysisStatus.COMPLETED.value,
        analyzed_at: Optional[datetime] = None,
    ) -> DomainHistoryEntry:
        pass

    @abstractmethod
    async def save_analysis_result(self, domain_history_id: str, analysis_data: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    async def get_history_entry(self, history_id: str) -> Optional[DomainHistoryEntry]:
        pass

    @abstractmethod
    async def get_user_domain_history(
        self, user_id: str, limit: int = DEFAULT_HISTORY_LIMIT, offset: int = 0
    ) -> List[DomainHistoryEntry]:
        """User's history, newest first."""
        pass

    @abstractmethod
    async def search_domain_history(self, user_id: str, search_term: str) -> List[DomainHistoryEntry]:
        """Case-insensitive substring match on domain, newest first, at most 10."""
        pass

    @abstractmethod
    async def get_analysis_result_by_history_id(self, history_id: str) -> Optional[AnalysisResult]:
        pass


class InMemoryStorage(AnalysisStorage):
    """
    Dict-backed storage.

    Not shared between processes; contents are lost on restart.
    """

    def __init__(self):
        self.history: Dict[str, DomainHistoryEntry] = {}
        self.results: Dict[str, Dict[str, Any]] = {}

    def _user_entries(self, user_id: str) -> List[DomainHistoryEntry]:
        entries = [e for e in self.history.values() if e.user_id == user_id]
        return sorted(entries, key=lambda e: e.analyzed_at, reverse=True)

    async def get_recent_analysis(
        self, user_id: str, normalized_url: str, since: datetime
    ) -> Optional[AnalysisResult]:
        for entry in self._user_entries(user_id):
            if entry.normalized_url == normalized_url and entry.analyzed_at >= since:
                return await self.get_analysis_result_by_history_id(entry.id)
        return None

    async def save_domain_history(
        self,
        user_id: str,
        domain: str,
        normalized_url: str,
        ai_visibility_score: int,
        status: str = AnalysisStatus.COMPLETED.value,
        analyzed_at: Optional[datetime] = None,
    ) -> DomainHistoryEntry:
        entry = DomainHistoryEntry(
            id=str(uuid4()),
            user_id=user_id,
            domain=domain,
            normalized_url=normalized_url,
            ai_visibility_score=ai_visibility_score,
            status=status,
            analyzed_at=analyzed_at or datetime.utcnow(),
        )
        self.history[entry.id] = entry
        return entry

    async def save_analysis_result(self, domain_history_id: str, analysis_data: Dict[str, Any]) -> None:
        self.results[domain_history_id] = analysis_data

    async def get_history_entry(self, history_id: str) -> Optional[DomainHistoryEntry]:
        return self.history.get(history_id)

    async def get_user_domain_history(
        self, user_id: str, limit: int = DEFAULT_HISTORY_LIMIT, offset: int = 0
    ) -> List[DomainHistoryEntry]:
        return self._user_entries(user_id)[offset:offset + limit]

    async def search_domain_history(self, user_id: str, search_term: str) -> List[DomainHistoryEntry]:
        term = search_term.lower()
        matches = [e for e in self._user_entries(user_id) if term in e.domain.lower()]
        return matches[:SEARCH_LIMIT]

    async def get_analysis_result_by_history_id(self, history_id: str) -> Optional[AnalysisResult]:
        blob = self.results.get(history_id)
        if blob is None:
            return None
        return load_analysis_blob(blob)


class DatabaseStorage(AnalysisStorage):
    """
    SQLAlchemy-backed storage.

    Usage:
        storage = DatabaseStorage()
        entry = await storage.save_domain_history(user_id, "example.com", "example.com", 72)
    """

    def __init__(self, session_context: Optional[Callable[[], ContextManager[Session]]] = None):
        if session_context is None:
            from src.database.session import get_db_context
            session_context = get_db_context
        self.session_context = session_context

    async def get_recent_analysis(
        self, user_id: str, normalized_url: str, since: datetime
    ) -> Optional[AnalysisResult]:
        with self.session_context() as db:
            row = (
                db.query(DomainHistory)
                .filter(
                    DomainHistory.user_id == user_id,
                    DomainHistory.normalized_url == normalized_url,
                    DomainHistory.analyzed_at >= since,
                )
                .order_by(DomainHistory.analyzed_at.desc())
                .first()
            )
            history_id = row.id if row else None

        if history_id is None:
            return None
        return await self.get_analysis_result_by_history_id(history_id)

    async def save_domain_history(
        self,
        user_id: str,
        domain: str,
        normalized_url: str,
        ai_visibility_score: int,
        status: str = AnalysisStatus.COMPLETED.value,
        analyzed_at: Optional[datetime] = None,
    ) -> DomainHistoryEntry:
        with self.session_context() as db:
            row = DomainHistory(
                user_id=user_id,
                domain=domain,
                normalized_url=normalized_url,
                ai_visibility_score=ai_visibility_score,
                status=status,
                analyzed_at=analyzed_at or datetime.utcnow(),
            )
            db.add(row)
            db.flush()
            entry = DomainHistoryEntry.from_row(row)

        logger.info(f"Saved domain history {entry.id} for {normalized_url}")
        return entry

    async def save_analysis_result(self, domain_history_id: str, analysis_data: Dict[str, Any]) -> None:
        with self.session_context() as db:
            db.add(AnalysisResultRecord(
                domain_history_id=domain_history_id,
                analysis_data=analysis_data,
            ))

    async def get_history_entry(self, history_id: str) -> Optional[DomainHistoryEntry]:
        with self.session_context() as db:
            row = db.query(DomainHistory).filter(DomainHistory.id == history_id).first()
            return DomainHistoryEntry.from_row(row) if row else None

    async def get_user_domain_history(
        self, user_id: str, limit: int = DEFAULT_HISTORY_LIMIT, offset: int = 0
    ) -> List[DomainHistoryEntry]:
        with self.session_context() as db:
            rows = (
                db.query(DomainHistory)
                .filter(DomainHistory.user_id == user_id)
                .order_by(DomainHistory.analyzed_at.desc())
                .limit(limit)
                .offset(offset)
                .all()
            )
            return [DomainHistoryEntry.from_row(r) for r in rows]

    async def search_domain_history(self, user_id: str, search_term: str) -> List[DomainHistoryEntry]:
        with self.session_context() as db:
            rows = (
                db.query(DomainHistory)
                .filter(
                    DomainHistory.user_id == user_id,
                    DomainHistory.domain.ilike(f"%{search_term}%"),
                )
                .order_by(DomainHistory.analyzed_at.desc())
                .limit(SEARCH_LIMIT)
                .all()
            )
            return [DomainHistoryEntry.from_row(r) for r in rows]

    async def get_analysis_result_by_history_id(self, history_id: str) -> Optional[AnalysisResult]:
        with self.session_context() as db:
            record = (
                db.query(AnalysisResultRecord)
                .filter(AnalysisResultRecord.domain_history_id == history_id)
                .first()
            )
            blob = record.analysis_data if record else None

        if blob is None:
            return None
        return load_analysis_blob(blob)
