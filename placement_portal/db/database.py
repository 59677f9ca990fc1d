from contextlib import contextmanager
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from placement_portal.db.tables import metadata
from placement_portal.utils.logging import get_logger

logger = get_logger(__name__)


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """
    Build an engine for the configured URL.

    PostgreSQL gets a connection pool (5 ready, 10 overflow).
    SQLite is shared across threads; in-memory SQLite keeps a single
    connection so every session sees the same database.
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)

    return create_engine(url, pool_size=5, max_overflow=10, echo=echo)


class Database:
    """Owns the engine and session factory for one application instance."""

    def __init__(self, url: str, echo: bool = False):
        self.engine = create_db_engine(url, echo=echo)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self) -> None:
        """Create any missing tables."""
        metadata.create_all(self.engine)

    @contextmanager
    def session(self):
        """
        Context manager for database sessions.
        Everything inside one block commits or rolls back together.
        Usage:
            with database.session() as db:
                db.execute(text("SELECT * FROM users"))
        """
        session: Session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def execute_raw_sql(self, sql: str, params: Optional[dict] = None) -> list:
        """Execute raw SQL and return results as list of dicts."""
        with self.session() as db:
            result = db.execute(text(sql), params or {})
            return [dict(row) for row in result.mappings().all()]

    def test_connection(self) -> bool:
        """Returns True if the database answers SELECT 1."""
        try:
            with self.session() as db:
                return db.execute(text("SELECT 1")).scalar() == 1
        except Exception as e:
            logger.warning("database_unreachable", error=str(e))
            return False

    def dispose(self) -> None:
        self.engine.dispose()
