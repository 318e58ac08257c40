"""Navigation configuration for TradeMind.

Defines page groupings, display names, and icons for st.navigation().
"""

import streamlit as st


def build_navigation_pages() -> dict[str, list]:
    """Build the navigation pages dictionary.

    Must be called within a Streamlit execution context.
    """
    return {
        "": [
            st.Page("pages/dashboard.py", title="Dashboard", icon=":material/dashboard:", default=True),
            st.Page("pages/ritual.py", title="Morning Ritual", icon=":material/wb_sunny:"),
        ],
        "Trading": [
            st.Page("pages/trade_guardian.py", title="Trade Guardian", icon=":material/shield:"),
            st.Page("pages/new_trade.py", title="Log Trade", icon=":material/add_circle:"),
            st.Page("pages/journal.py", title="Journal", icon=":material/menu_book:"),
        ],
        "Review": [
            st.Page("pages/trade_calendar.py", title="Calendar", icon=":material/calendar_month:"),
            st.Page("pages/analytics.py", title="Analytics", icon=":material/insights:"),
        ],
        "Account": [
            st.Page("pages/settings.py", title="Settings", icon=":material/settings:"),
        ],
    }
