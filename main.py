"""CLI entry point: python main.py report --month 2026-10"""

import argparse
import sys
from datetime import datetime

from src.db.engine import create_all, get_session
from src.discipline import ProfileService, RitualService, RuleService
from src.journal import JournalService, format_inr, format_pnl, monthly_stats, summarize, top_symbols
from src.journal.clock import today_in_tz
from src.logging_config import configure_logging
from src.settings import get_settings


def cmd_init_db(args):
    create_all()
    print(f"Tables created on {get_settings().database_url}")


def cmd_seed(args):
    session = get_session()
    try:
        profile = ProfileService(session).get_or_create(args.user)
        rules = RuleService(session).initialize_default_rules(args.user)
        quotes = RitualService(session).initialize_default_quotes()
    finally:
        session.close()
    print(f"Profile:  {profile.id} (daily loss limit {format_inr(profile.daily_loss_limit)})")
    print(f"Rules:    {len(rules)}")
    print(f"Quotes:   {quotes} added")


def cmd_report(args):
    settings = get_settings()
    if args.month:
        try:
            month_start = datetime.strptime(args.month, "%Y-%m")
        except ValueError:
            print(f"Invalid month {args.month!r}, expected YYYY-MM", file=sys.stderr)
            return 2
        year, month = month_start.year, month_start.month
    else:
        today = today_in_tz(settings.timezone)
        year, month = today.year, today.month

    session = get_session()
    try:
        trades = JournalService(session).get_month_trades(args.user, year, month)
    finally:
        session.close()

    stats = monthly_stats(trades, settings.timezone)
    summary = summarize([t for t in trades if t.pnl is not None])

    print("=" * 60)
    print(f"TRADEMIND - MONTHLY REPORT {year:04d}-{month:02d}")
    print("=" * 60)
    print(f"  Total P&L:     {format_pnl(stats.total_pnl)}")
    print(f"  Trading days:  {stats.trading_days} ({stats.green_days} green / {stats.red_days} red)")
    print(f"  Closed trades: {stats.total_trades}")
    print(f"  Win rate:      {stats.win_rate:.1f}%")
    pf = "inf" if summary.profit_factor == float("inf") else f"{summary.profit_factor:.2f}"
    print(f"  Profit factor: {pf}")

    symbols = top_symbols(trades, settings.top_symbols)
    if symbols:
        print("\n  Top symbols:")
        for s in symbols:
            print(f"    {s.symbol:12s} {format_pnl(s.pnl):>16s}  ({s.trades} trades)")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="TradeMind - trading discipline journal"
    )
    parser.add_argument(
        "--user", default=None,
        help="User id (default: TRADEMIND_DEFAULT_USER_ID)"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create database tables").set_defaults(func=cmd_init_db)
    sub.add_parser("seed", help="Create the profile, default rules and quotes").set_defaults(func=cmd_seed)
    report = sub.add_parser("report", help="Print a monthly performance report")
    report.add_argument("--month", help="Month as YYYY-MM (default: current month)")
    report.set_defaults(func=cmd_report)

    args = parser.parse_args()
    args.user = args.user or get_settings().default_user_id

    configure_logging()
    return args.func(args) or 0


if __name__ == "__main__":
    sys.exit(main())
