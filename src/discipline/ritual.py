"""Ritual Service - the daily pre-market checklist.

One DailySession per user per local date. Starting the ritual upserts
that row and stamps ``session_started_at``; its presence is what marks
the ritual as done for the day.
"""

import logging
import random
from datetime import date, datetime
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from src.api_errors import ValidationError
from src.cache import QueryCache, get_query_cache, keys
from src.db.engine import write_transaction
from src.db.models import DailySession, MoodType, Quote
from src.journal.clock import TzLike, get_timezone, today_in_tz, utc_now

logger = logging.getLogger(__name__)


DEFAULT_QUOTES = [
    ("The goal of a successful trader is to make the best trades. Money is secondary.", "Alexander Elder"),
    ("Cut your losses short and let your winners run.", "David Ricardo"),
    ("The market can stay irrational longer than you can stay solvent.", "John Maynard Keynes"),
    ("Risk comes from not knowing what you're doing.", "Warren Buffett"),
    ("Plan the trade and trade the plan.", None),
    ("Amateurs think about how much money they can make. Professionals think about how much they could lose.", "Jack Schwager"),
]


def can_start_ritual(
    active_rule_ids: Iterable[str],
    checked_rule_ids: Iterable[str],
    mood: Optional[MoodType],
) -> bool:
    """At least one active rule, every active rule checked, and a mood chosen."""
    active = set(active_rule_ids)
    return bool(active) and active <= set(checked_rule_ids) and mood is not None


class RitualService:
    """Daily session upsert and motivational quotes."""

    def __init__(self, session: Session, cache: Optional[QueryCache] = None, tz: TzLike = None):
        self.session = session
        self.cache = cache if cache is not None else get_query_cache()
        self.tz = get_timezone(tz)

    def get_session_for(self, user_id: str, session_date: date) -> Optional[DailySession]:
        """The user's session for a date; None is a normal result."""
        return self.cache.get(
            keys.SESSION,
            user_id,
            lambda session=None: (session or self.session).query(DailySession).filter(
                DailySession.user_id == user_id,
                DailySession.session_date == session_date,
            ).first(),
            params={"date": session_date.isoformat()},
            uses_session=True,
        )

    def get_today_session(self, user_id: str, now: Optional[datetime] = None) -> Optional[DailySession]:
        return self.get_session_for(user_id, today_in_tz(self.tz, now))

    def is_ritual_done(self, user_id: str, now: Optional[datetime] = None) -> bool:
        session = self.get_today_session(user_id, now)
        return session is not None and session.session_started_at is not None

    def start_session(
        self,
        user_id: str,
        mood: MoodType,
        checked_rule_ids: Iterable[str],
        active_rule_ids: Iterable[str],
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> DailySession:
        """Complete today's ritual, creating or updating the day's session.

        Raises:
            ValidationError: No active rules, an unchecked rule, or no mood.
        """
        checked = list(dict.fromkeys(checked_rule_ids))
        active = list(active_rule_ids)
        if not active:
            raise ValidationError("Add at least one active trading rule first", field="rules_checked")
        if not can_start_ritual(active, checked, mood):
            if mood is None:
                raise ValidationError("Select your pre-market mood", field="pre_market_mood")
            raise ValidationError("Check every active rule before starting", field="rules_checked")

        now = now or utc_now()
        session_date = today_in_tz(self.tz, now)
        daily = self.session.query(DailySession).filter(
            DailySession.user_id == user_id,
            DailySession.session_date == session_date,
        ).first()

        with write_transaction(self.session, "start trading session"):
            if daily is None:
                daily = DailySession(user_id=user_id, session_date=session_date)
                self.session.add(daily)
            daily.pre_market_mood = MoodType(mood)
            daily.rules_checked = checked
            daily.pre_market_notes = notes.strip() if notes and notes.strip() else None
            daily.session_started_at = now
        self.cache.invalidate(keys.SESSION, user_id)

        logger.info("Ritual complete for %s on %s (mood %s)", user_id, session_date, daily.pre_market_mood.value)
        return daily

    def end_session(
        self,
        user_id: str,
        mood: Optional[MoodType] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Optional[DailySession]:
        """Record end-of-day mood and notes on today's session, if one exists."""
        now = now or utc_now()
        daily = self.session.query(DailySession).filter(
            DailySession.user_id == user_id,
            DailySession.session_date == today_in_tz(self.tz, now),
        ).first()
        if daily is None:
            return None
        with write_transaction(self.session, "end trading session"):
            daily.session_ended_at = now
            daily.end_of_day_mood = MoodType(mood) if mood else None
            daily.end_of_day_notes = notes
        self.cache.invalidate(keys.SESSION, user_id)
        return daily

    # =========================================================================
    # Quotes
    # =========================================================================

    def initialize_default_quotes(self) -> int:
        if self.session.query(Quote).count():
            return 0
        with write_transaction(self.session, "seed quotes"):
            for text, author in DEFAULT_QUOTES:
                self.session.add(Quote(quote_text=text, author=author, category="discipline", is_active=True))
        return len(DEFAULT_QUOTES)

    def random_quote(self, rng: Optional[random.Random] = None) -> Optional[Quote]:
        """A random active quote, or None when there are none."""
        quotes = self.session.query(Quote).filter(Quote.is_active.is_(True)).order_by(Quote.id).all()
        if not quotes:
            return None
        return (rng or random).choice(quotes)
