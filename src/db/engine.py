"""Database engine, session factories and the write transaction helper."""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from src.api_errors.exceptions import PersistenceError
from src.db.base import Base
from src.settings import get_settings

logger = logging.getLogger(__name__)

_sync_engine = None


def get_sync_engine():
    """Get or create the database engine."""
    global _sync_engine
    if _sync_engine is None:
        settings = get_settings()
        kwargs = {"pool_pre_ping": True, "echo": settings.database_echo}
        if settings.database_url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
        _sync_engine = create_engine(settings.database_url, **kwargs)
    return _sync_engine


def get_sync_session_factory():
    return sessionmaker(bind=get_sync_engine(), expire_on_commit=False)


def create_all(engine=None) -> None:
    """Create every table known to the ORM metadata (local/dev use)."""
    import src.db.models  # noqa: F401  register tables

    Base.metadata.create_all(engine or get_sync_engine())


def get_session() -> Session:
    return get_sync_session_factory()()


@contextmanager
def write_transaction(session: Session, action: str) -> Iterator[None]:
    """Commit on success; roll back and raise PersistenceError on backend failure."""
    try:
        yield
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Failed to %s", action)
        raise PersistenceError(f"Could not {action}", cause=e) from e


SyncSessionLocal = get_sync_session_factory
