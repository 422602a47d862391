"""
Database Layer

Usage:
    from src.database import init_db, get_db_context, DomainHistory

    init_db()
    with get_db_context() as db:
        db.query(DomainHistory).filter(DomainHistory.user_id == user_id).all()
"""

from .models import Base, AnalysisStatus, DomainHistory, AnalysisResultRecord
from .session import (
    get_database_url,
    create_db_engine,
    create_session_factory,
    session_scope_for,
    get_db_context,
    init_db,
    check_db_connection,
)

__all__ = [
    "Base",
    "AnalysisStatus",
    "DomainHistory",
    "AnalysisResultRecord",
    "get_database_url",
    "create_db_engine",
    "create_session_factory",
    "session_scope_for",
    "get_db_context",
    "init_db",
    "check_db_connection",
]
