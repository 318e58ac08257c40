"""Shared service wiring for the Streamlit pages.

Each browser session keeps one SQLAlchemy session in session state; the
query cache is a process-wide resource so reads survive reruns until a
write invalidates them.
"""

import streamlit as st

from src.cache import get_query_cache
from src.db.engine import create_all, get_sync_session_factory
from src.discipline import ProfileService, RitualService, RuleService
from src.journal import JournalService
from src.settings import get_settings


@st.cache_resource
def _session_factory():
    create_all()
    return get_sync_session_factory()


@st.cache_resource
def _cache():
    return get_query_cache()


def current_user_id() -> str:
    return st.session_state.get("user_id") or get_settings().default_user_id


def get_db():
    """The SQLAlchemy session bound to this browser session."""
    if st.session_state.get("db_session") is None:
        st.session_state.db_session = _session_factory()()
    return st.session_state.db_session


def journal_service() -> JournalService:
    return JournalService(get_db(), _cache(), get_settings().timezone)


def profile_service() -> ProfileService:
    return ProfileService(get_db(), _cache())


def rule_service() -> RuleService:
    return RuleService(get_db(), _cache())


def ritual_service() -> RitualService:
    return RitualService(get_db(), _cache(), get_settings().timezone)


def load_profile():
    """Profile for the current user, created with defaults and seeded rules on first visit."""
    user_id = current_user_id()
    profile = profile_service().get_profile(user_id)
    if profile is None:
        profile = profile_service().get_or_create(user_id)
        rule_service().initialize_default_rules(user_id)
        ritual_service().initialize_default_quotes()
    return profile


def show_error(error: Exception) -> None:
    """Render a domain error inline."""
    st.error(getattr(error, "message", str(error)))
