"""Timezone-explicit date helpers.

Trades are stored with UTC timestamps; every calendar-day decision
(today's trades, day buckets, month ranges) converts through here with
an explicit zone rather than relying on process locale.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo

from src.settings import get_settings

TzLike = Union[str, ZoneInfo, timezone, None]

NSE_OPEN = time(9, 15)
NSE_CLOSE = time(15, 30)
NSE_TIMEZONE = "Asia/Kolkata"


def get_timezone(tz: TzLike = None):
    """Resolve a zone name or tzinfo; None means the configured timezone."""
    if tz is None:
        return ZoneInfo(get_settings().timezone)
    if isinstance(tz, str):
        return ZoneInfo(tz)
    return tz


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(ts: datetime) -> datetime:
    """Attach UTC to naive timestamps (as returned by SQLite) and normalize aware ones."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def to_local_date(ts: datetime, tz: TzLike = None) -> date:
    """Calendar date of a timestamp in the given zone."""
    return ensure_utc(ts).astimezone(get_timezone(tz)).date()


def today_in_tz(tz: TzLike = None, now: Optional[datetime] = None) -> date:
    return to_local_date(now or utc_now(), tz)


def local_day_bounds(day: date, tz: TzLike = None) -> tuple[datetime, datetime]:
    """Inclusive UTC bounds covering one local calendar day."""
    zone = get_timezone(tz)
    start = datetime.combine(day, time.min, tzinfo=zone)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=zone)
    return start.astimezone(timezone.utc), (end - timedelta(microseconds=1)).astimezone(timezone.utc)


def local_range_bounds(first: date, last: date, tz: TzLike = None) -> tuple[datetime, datetime]:
    """Inclusive UTC bounds from the start of ``first`` to the end of ``last``."""
    start, _ = local_day_bounds(first, tz)
    _, end = local_day_bounds(last, tz)
    return start, end


def week_start(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def is_market_open(now: Optional[datetime] = None) -> bool:
    """NSE cash session: 09:15 to 15:30 IST, Monday to Friday (holidays not modelled)."""
    local = ensure_utc(now or utc_now()).astimezone(ZoneInfo(NSE_TIMEZONE))
    if local.weekday() >= 5:
        return False
    return NSE_OPEN <= local.time().replace(second=0, microsecond=0) <= NSE_CLOSE


def greeting(now: Optional[datetime] = None, tz: TzLike = None) -> str:
    hour = ensure_utc(now or utc_now()).astimezone(get_timezone(tz)).hour
    if hour < 12:
        return "Good Morning"
    if hour < 17:
        return "Good Afternoon"
    return "Good Evening"
