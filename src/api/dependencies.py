"""FastAPI Dependencies.

Per-request database session, the caller's user id, and the services
built on top of them. Authentication is handled upstream; the user id
arrives in the X-User-ID header and falls back to the configured local
user for development.
"""

import logging
from typing import Iterator, Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from src.cache import QueryCache, get_query_cache
from src.db.engine import SyncSessionLocal
from src.discipline import ProfileService, RitualService, RuleService
from src.journal import JournalService
from src.logging_config.context import bind_user_id
from src.settings import get_settings

logger = logging.getLogger(__name__)


def get_db() -> Iterator[Session]:
    session = SyncSessionLocal()()
    try:
        yield session
    finally:
        session.close()


def get_cache() -> QueryCache:
    return get_query_cache()


async def get_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    user_id = (x_user_id or "").strip() or get_settings().default_user_id
    bind_user_id(user_id)
    return user_id


def get_journal_service(
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_cache),
) -> JournalService:
    return JournalService(db, cache)


def get_profile_service(
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_cache),
) -> ProfileService:
    return ProfileService(db, cache)


def get_rule_service(
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_cache),
) -> RuleService:
    return RuleService(db, cache)


def get_ritual_service(
    db: Session = Depends(get_db),
    cache: QueryCache = Depends(get_cache),
) -> RitualService:
    return RitualService(db, cache)
