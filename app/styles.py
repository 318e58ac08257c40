"""Shared CSS styles for TradeMind."""

import streamlit as st

PROFIT_COLOR = "#10b981"
LOSS_COLOR = "#ef4444"
NEUTRAL_COLOR = "#64748b"

# Heatmap shades by intensity 1..4 (0 means no trades)
PROFIT_SHADES = ["#d1fae5", "#6ee7b7", "#10b981", "#047857"]
LOSS_SHADES = ["#fee2e2", "#fca5a5", "#ef4444", "#b91c1c"]


def pnl_color(value: float) -> str:
    if value > 0:
        return PROFIT_COLOR
    if value < 0:
        return LOSS_COLOR
    return NEUTRAL_COLOR


def heatmap_color(pnl: float, intensity: int) -> str:
    if intensity <= 0:
        return "transparent"
    shades = PROFIT_SHADES if pnl >= 0 else LOSS_SHADES
    return shades[min(intensity, 4) - 1]


def inject_global_styles():
    """Inject the global TradeMind CSS into the current page."""
    st.markdown("""
<style>
    :root {
        --bg-card: rgba(17, 24, 39, 0.04);
        --border-subtle: rgba(100, 116, 139, 0.25);
        --accent-primary: #0ea5e9;
        --text-muted: #64748b;
        --success: #10b981;
        --warning: #f59e0b;
        --danger: #ef4444;
        --radius-md: 12px;
    }

    /* ===== SIDEBAR ===== */
    .logo-area h1 {
        font-size: 1.6rem;
        font-weight: 700;
        margin-bottom: 0;
        color: var(--accent-primary);
    }
    .logo-area .subtitle {
        font-size: 0.8rem;
        color: var(--text-muted);
        letter-spacing: 0.05em;
        text-transform: uppercase;
    }
    .sidebar-section {
        font-size: 0.75rem;
        font-weight: 600;
        color: var(--text-muted);
        text-transform: uppercase;
        margin: 0.5rem 0 0.25rem 0;
    }

    /* ===== CARDS ===== */
    .tm-card {
        background: var(--bg-card);
        border: 1px solid var(--border-subtle);
        border-radius: var(--radius-md);
        padding: 1rem 1.25rem;
        margin-bottom: 0.75rem;
    }
    .tm-quote {
        font-style: italic;
        border-left: 3px solid var(--accent-primary);
        padding-left: 0.75rem;
    }

    /* ===== CALENDAR ===== */
    .tm-day {
        border: 1px solid var(--border-subtle);
        border-radius: 8px;
        min-height: 72px;
        padding: 4px 6px;
        font-size: 0.8rem;
    }
    .tm-day .num { font-weight: 600; }
    .tm-day .pnl { font-family: 'JetBrains Mono', monospace; }

    /* ===== STEPPER ===== */
    .tm-step { color: var(--text-muted); font-size: 0.85rem; }
    .tm-step.active { color: var(--accent-primary); font-weight: 700; }
    .tm-step.done { color: var(--success); }
</style>
""", unsafe_allow_html=True)
