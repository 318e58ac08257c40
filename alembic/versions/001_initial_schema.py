"""Initial schema - profiles, sessions, trades, rules and quotes.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

EMOTIONS = ("CONFIDENT", "FEARFUL", "GREEDY", "CALM", "FOMO", "REVENGE")
MOODS = ("EXCELLENT", "GOOD", "NEUTRAL", "STRESSED", "ANXIOUS")


def upgrade() -> None:
    # --- profiles ---
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("trading_capital", sa.Float(), nullable=False, server_default="100000"),
        sa.Column("daily_loss_limit", sa.Float(), nullable=False, server_default="5000"),
        sa.Column("per_trade_risk", sa.Float(), nullable=False, server_default="1000"),
        sa.Column("max_trades_per_day", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("daily_target", sa.Float(), nullable=False, server_default="2000"),
        sa.Column("weekly_target", sa.Float(), nullable=False, server_default="8000"),
        sa.Column("monthly_target", sa.Float(), nullable=False, server_default="30000"),
        sa.Column("onboarding_completed", sa.Boolean(), server_default=sa.false()),
        sa.Column("theme", sa.Enum("LIGHT", "DARK", "SYSTEM", name="theme"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    # --- daily_sessions ---
    op.create_table(
        "daily_sessions",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("session_date", sa.Date(), nullable=False),
        sa.Column("pre_market_mood", sa.Enum(*MOODS, name="moodtype"), nullable=True),
        sa.Column("sleep_hours", sa.Float(), nullable=True),
        sa.Column("exercised", sa.Boolean(), nullable=True),
        sa.Column("market_bias", sa.String(20), nullable=True),
        sa.Column("key_levels", sa.Text(), nullable=True),
        sa.Column("rules_checked", sa.JSON(), nullable=True),
        sa.Column("pre_market_notes", sa.Text(), nullable=True),
        sa.Column("session_started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("session_ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_of_day_notes", sa.Text(), nullable=True),
        sa.Column("end_of_day_mood", sa.Enum(*MOODS, name="moodtype", create_type=False), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "session_date", name="uq_daily_session_user_date"),
    )
    op.create_index("ix_daily_sessions_user_id", "daily_sessions", ["user_id"])

    # --- trades ---
    op.create_table(
        "trades",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("session_id", sa.String(36), nullable=True),
        sa.Column("symbol", sa.String(40), nullable=False),
        sa.Column("trade_type", sa.Enum("EQUITY", "OPTIONS", "FUTURES", name="tradetype"), nullable=False),
        sa.Column("direction", sa.Enum("LONG", "SHORT", name="tradedirection"), nullable=False),
        sa.Column("option_type", sa.Enum("CE", "PE", name="optiontype"), nullable=True),
        sa.Column("strike_price", sa.Float(), nullable=True),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("entry_price", sa.Float(), nullable=False),
        sa.Column("exit_price", sa.Float(), nullable=True),
        sa.Column("stop_loss", sa.Float(), nullable=True),
        sa.Column("target_price", sa.Float(), nullable=True),
        sa.Column("entry_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("exit_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("pnl", sa.Float(), nullable=True),
        sa.Column("pnl_percent", sa.Float(), nullable=True),
        sa.Column("fees", sa.Float(), server_default="0"),
        sa.Column(
            "status",
            sa.Enum("OPEN", "CLOSED", "CANCELLED", name="tradestatus"),
            nullable=False,
            server_default="OPEN",
        ),
        sa.Column("setup_type", sa.String(50), nullable=True),
        sa.Column("emotion_entry", sa.Enum(*EMOTIONS, name="emotiontype"), nullable=True),
        sa.Column("emotion_exit", sa.Enum(*EMOTIONS, name="emotiontype", create_type=False), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("screenshot_url", sa.String(500), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["session_id"], ["daily_sessions.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_trades_user_id", "trades", ["user_id"])
    op.create_index("ix_trades_symbol", "trades", ["symbol"])
    op.create_index("ix_trades_entry_time", "trades", ["entry_time"])
    op.create_index("ix_trades_user_entry_time", "trades", ["user_id", "entry_time"])
    op.create_index("ix_trades_user_status", "trades", ["user_id", "status"])

    # --- trading_rules ---
    op.create_table(
        "trading_rules",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("rule_text", sa.Text(), nullable=False),
        sa.Column("category", sa.String(50), server_default="General"),
        sa.Column("is_default", sa.Boolean(), server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true()),
        sa.Column("sort_order", sa.Integer(), server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_trading_rules_user_id", "trading_rules", ["user_id"])

    # --- quotes ---
    op.create_table(
        "quotes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("quote_text", sa.Text(), nullable=False),
        sa.Column("author", sa.String(255), nullable=True),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true()),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("quotes")
    op.drop_index("ix_trading_rules_user_id", table_name="trading_rules")
    op.drop_table("trading_rules")
    op.drop_index("ix_trades_user_status", table_name="trades")
    op.drop_index("ix_trades_user_entry_time", table_name="trades")
    op.drop_index("ix_trades_entry_time", table_name="trades")
    op.drop_index("ix_trades_symbol", table_name="trades")
    op.drop_index("ix_trades_user_id", table_name="trades")
    op.drop_table("trades")
    op.drop_index("ix_daily_sessions_user_id", table_name="daily_sessions")
    op.drop_table("daily_sessions")
    op.drop_table("profiles")
    for enum_name in ("emotiontype", "tradestatus", "optiontype", "tradedirection", "tradetype", "moodtype", "theme"):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
