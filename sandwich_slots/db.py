"""
Database connection management.

Request handlers use the get_db() FastAPI dependency. Background jobs (the
deadline sweep, CLI scripts) use session_scope(), which closes the session
when the block exits.

Environment variables:
    - DATABASE_URL: SQLAlchemy connection URL (see config.py)
"""

from contextlib import contextmanager
from typing import Generator, Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from . import config
from .models import Base


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # Request handlers run in a threadpool; writers wait instead of failing
        return {"connect_args": {"check_same_thread": False, "timeout": 30}}
    return {"pool_pre_ping": True}


engine = create_engine(
    config.DATABASE_URL,
    echo=False,
    **_engine_kwargs(config.DATABASE_URL),
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a SQLAlchemy Session.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Context manager yielding a session for work outside a request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(bind=engine)
