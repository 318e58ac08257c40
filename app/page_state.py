"""Session-state entries owned by a single page.

A page's drafts live only while the user stays on it; navigating to any
other page drops them so the next visit starts clean.
"""

from typing import MutableMapping, Optional

CURRENT_PAGE_KEY = "current_page"

PAGE_OWNED_STATE = {
    "Trade Guardian": ("guardian_wizard",),
}


def track_page_visit(state: MutableMapping, page: str) -> Optional[str]:
    """Record ``page`` as current and clear state owned by the page being left.

    Returns:
        The page the user came from, or None on the first visit or a rerun
        of the same page.
    """
    previous = state.get(CURRENT_PAGE_KEY)
    state[CURRENT_PAGE_KEY] = page
    if previous is None or previous == page:
        return None
    for key in PAGE_OWNED_STATE.get(previous, ()):
        if key in state:
            state[key] = None
    return previous
