"""TradeMind - trading discipline journal (entrypoint).

Slim navigation router using st.navigation() + st.Page().
CSS lives in styles.py, page definitions in nav_config.py, service
wiring in services.py.
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import streamlit as st

from app.nav_config import build_navigation_pages
from app.page_state import track_page_visit
from app.services import current_user_id, load_profile, ritual_service
from app.styles import inject_global_styles
from src.journal.clock import greeting, is_market_open
from src.logging_config import configure_logging
from src.settings import get_settings

# ── Page config (must be first Streamlit call) ──────────────────────
st.set_page_config(
    page_title="TradeMind",
    page_icon="🛡️",
    layout="wide",
    initial_sidebar_state="expanded",
)

inject_global_styles()


@st.cache_resource
def _configure_logging():
    return configure_logging()


_configure_logging()


# ── Session state defaults ──────────────────────────────────────────
def init_session_state():
    defaults = {
        "user_id": get_settings().default_user_id,
        "guardian_wizard": None,
        "calendar_month": None,
        "db_session": None,
        "current_page": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


init_session_state()

# ── Navigation ──────────────────────────────────────────────────────
pg = st.navigation(build_navigation_pages(), position="sidebar")
track_page_visit(st.session_state, pg.title)

# ── Shared sidebar (visible on all pages) ───────────────────────────
with st.sidebar:
    profile = load_profile()
    name = profile.full_name or "Trader"

    st.markdown(f"""
    <div class="logo-area">
        <h1>TradeMind</h1>
        <div class="subtitle">{greeting(tz=get_settings().timezone)}, {name}</div>
    </div>
    """, unsafe_allow_html=True)

    st.divider()

    st.markdown('<div class="sidebar-section">Market</div>', unsafe_allow_html=True)
    if is_market_open():
        st.success("NSE open", icon="🟢")
    else:
        st.caption("NSE closed")

    st.markdown('<div class="sidebar-section">Today</div>', unsafe_allow_html=True)
    if ritual_service().is_ritual_done(current_user_id()):
        st.caption("Morning ritual complete")
    else:
        st.warning("Morning ritual pending")

# ── Run selected page ───────────────────────────────────────────────
pg.run()
