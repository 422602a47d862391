"""
Database Session Management

Engine and session scopes for the history tables. PostgreSQL in deployment
(DATABASE_URL / POSTGRES_URL), a local SQLite file otherwise.
"""

import os
import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import Callable, ContextManager, Iterator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .models import Base

logger = logging.getLogger(__name__)

SessionScope = Callable[[], ContextManager[Session]]


def get_database_url() -> str:
    """
    Resolve the database URL.

    DATABASE_URL, then POSTGRES_URL, then ``sqlite:///$SQLITE_PATH``
    (default visibility_dev.db). ``postgres://`` is rewritten to
    ``postgresql://`` for SQLAlchemy.
    """
    for var in ("DATABASE_URL", "POSTGRES_URL"):
        url = os.getenv(var)
        if url:
            logger.info(f"Using database from {var}")
            if url.startswith("postgres://"):
                url = "postgresql://" + url[len("postgres://"):]
            return url

    sqlite_path = os.getenv("SQLITE_PATH", "visibility_dev.db")
    logger.warning(f"No DATABASE_URL found, using SQLite: {sqlite_path}")
    return f"sqlite:///{sqlite_path}"


def _enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    # ON DELETE CASCADE from analysis_results to domain_history needs this
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(url: Optional[str] = None) -> Engine:
    """Engine for ``url`` (default: get_database_url())."""
    url = url or get_database_url()
    echo = os.getenv("SQL_DEBUG", "false").lower() == "true"

    if url.startswith("sqlite"):
        engine = create_engine(url, connect_args={"check_same_thread": False}, echo=echo)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    else:
        engine = create_engine(
            url,
            pool_size=5,
            max_overflow=10,
            pool_recycle=1800,
            pool_pre_ping=True,
            echo=echo,
        )

    logger.info(f"Created {engine.dialect.name} engine")
    return engine


@lru_cache()
def get_engine() -> Engine:
    """Process-wide engine."""
    return create_db_engine()


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@lru_cache()
def get_session_factory() -> sessionmaker:
    return create_session_factory(get_engine())


def session_scope_for(factory: sessionmaker) -> SessionScope:
    """
    Transactional scope bound to ``factory``: commit on success, roll back
    and re-raise on error, always close.
    """
    @contextmanager
    def scope() -> Iterator[Session]:
        db = factory()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    return scope


def get_db_context() -> ContextManager[Session]:
    """
    Transactional scope on the process-wide engine.

    Usage:
        with get_db_context() as db:
            db.query(DomainHistory).filter(DomainHistory.user_id == user_id).all()
    """
    return session_scope_for(get_session_factory())()


def init_db(drop_all: bool = False, engine: Optional[Engine] = None) -> None:
    """Create the history tables (drop them first if ``drop_all``)."""
    engine = engine or get_engine()

    if drop_all:
        logger.warning("Dropping all database tables!")
        Base.metadata.drop_all(bind=engine)

    Base.metadata.create_all(bind=engine)
    logger.info(f"Database tables ready: {', '.join(sorted(Base.metadata.tables))}")


def check_db_connection() -> bool:
    """True if ``SELECT 1`` succeeds on the process-wide engine."""
    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False
