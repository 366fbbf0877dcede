"""SQLAlchemy engine, session factory and declarative base."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from supportbot.config import Settings, get_settings

Base = declarative_base()

IN_MEMORY_SQLITE = (None, "", ":memory:")


def build_engine(settings: Optional[Settings] = None) -> Engine:
    """Create an engine for the configured database URL."""
    settings = settings or get_settings()
    url = settings.database_url_obj
    if url.get_backend_name() == "sqlite":
        if url.database in IN_MEMORY_SQLITE:
            # An in-memory database lives in one connection; share it across threads
            return create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@contextmanager
def db_session(session_factory: sessionmaker) -> Iterator[Session]:
    """Yield a session and always close it. Rolls back on error."""
    db = session_factory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
