"""Database handle: engine + session factory with an explicit lifecycle.

The handle is built by the application lifespan, stored on ``app.state.db``
and disposed on shutdown. Request handlers reach it through ``get_db``.
"""
import logging
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all TaskFlow ORM models."""
    pass


class Database:
    """Owns the engine and hands out sessions."""

    def __init__(self, database_url: str, **engine_kwargs):
        if database_url.startswith("sqlite"):
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
        else:
            engine_kwargs.setdefault("pool_pre_ping", True)
        self.url = database_url
        self.engine = create_engine(database_url, **engine_kwargs)
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self._session_factory()

    def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("DB health check failed: %s", e)
            return False

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    """FastAPI dependency yielding a session bound to the app's database handle."""
    db: Database | None = getattr(request.app.state, "db", None)
    if db is None:
        raise RuntimeError("Database not initialized")
    session = db.session()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
