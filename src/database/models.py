"""
SQLAlchemy Models for the AI Visibility Analyzer

Two tables:
1. domain_history - one row per completed analysis (querying, listing)
2. analysis_results - the full report JSON for a history row (replay)

The report blob is stored as-is and re-validated on read.
"""

import enum
from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    Column, String, Integer, DateTime, ForeignKey, Index, JSON
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def _uuid_str() -> str:
    return str(uuid4())


# JSONB on PostgreSQL, plain JSON elsewhere (SQLite)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class AnalysisStatus(str, enum.Enum):
    """Status of a stored analysis"""
    COMPLETED = "completed"
    FAILED = "failed"


class DomainHistory(Base):
    """A user's analysis of one normalized URL at one point in time."""
    __tablename__ = "domain_history"

    id = Column(String(36), primary_key=True, default=_uuid_str)
    user_id = Column(String(255), nullable=False)
    domain = Column(String(255), nullable=False)
    normalized_url = Column(String(2048), nullable=False)
    ai_visibility_score = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=AnalysisStatus.COMPLETED.value)
    analyzed_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    results = relationship(
        "AnalysisResultRecord",
        back_populates="history",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_history_user_url_time", "user_id", "normalized_url", "analyzed_at"),
        Index("idx_history_user_time", "user_id", "analyzed_at"),
    )

    def __repr__(self):
        return f"<DomainHistory {self.domain} score={self.ai_visibility_score}>"


class AnalysisResultRecord(Base):
    """Full AnalysisResult JSON (camelCase keys) for a history row."""
    __tablename__ = "analysis_results"

    id = Column(String(36), primary_key=True, default=_uuid_str)
    domain_history_id = Column(
        String(36),
        ForeignKey("domain_history.id", ondelete="CASCADE"),
        nullable=False,
    )
    analysis_data = Column(JSONType, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    history = relationship("DomainHistory", back_populates="results")

    __table_args__ = (
        Index("idx_result_history", "domain_history_id"),
    )
