"""Profile Service - trader capital, limits and targets."""

import logging
from dataclasses import dataclass, fields
from typing import Optional

from sqlalchemy.orm import Session

from src.api_errors import ValidationError, validate_non_negative, validate_positive_limit
from src.cache import QueryCache, get_query_cache, keys
from src.db.models import Profile, Theme
from src.db.engine import write_transaction
from src.settings import get_settings

logger = logging.getLogger(__name__)


@dataclass
class ProfileUpdate:
    """Editable profile fields; None leaves a field unchanged."""
    full_name: Optional[str] = None
    trading_capital: Optional[float] = None
    daily_loss_limit: Optional[float] = None
    per_trade_risk: Optional[float] = None
    max_trades_per_day: Optional[int] = None
    daily_target: Optional[float] = None
    weekly_target: Optional[float] = None
    monthly_target: Optional[float] = None
    theme: Optional[Theme] = None
    onboarding_completed: Optional[bool] = None

    def validate(self) -> "ProfileUpdate":
        # Zero limits would leave the risk calculator without a denominator
        if self.daily_loss_limit is not None:
            validate_positive_limit(self.daily_loss_limit, "daily_loss_limit")
        if self.per_trade_risk is not None:
            validate_positive_limit(self.per_trade_risk, "per_trade_risk")
        for name in ("trading_capital", "daily_target", "weekly_target", "monthly_target"):
            value = getattr(self, name)
            if value is not None:
                validate_non_negative(value, name)
        if self.max_trades_per_day is not None and self.max_trades_per_day < 0:
            raise ValidationError("max_trades_per_day must not be negative", field="max_trades_per_day")
        if self.theme is not None:
            self.theme = Theme(self.theme)
        return self

    def changes(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


class ProfileService:
    """Read and update the user's profile."""

    def __init__(self, session: Session, cache: Optional[QueryCache] = None):
        self.session = session
        self.cache = cache if cache is not None else get_query_cache()

    def get_profile(self, user_id: str) -> Optional[Profile]:
        """The user's profile, or None if it has not been created."""
        return self.cache.get(
            keys.PROFILE,
            user_id,
            lambda session=None: (session or self.session).query(Profile).filter(Profile.id == user_id).first(),
            uses_session=True,
        )

    def get_or_create(self, user_id: str, email: Optional[str] = None, full_name: Optional[str] = None) -> Profile:
        """Fetch the profile, creating it with configured defaults on first use."""
        profile = self.session.query(Profile).filter(Profile.id == user_id).first()
        if profile is not None:
            return profile

        settings = get_settings()
        profile = Profile(
            id=user_id,
            email=email,
            full_name=full_name,
            trading_capital=settings.default_trading_capital,
            daily_loss_limit=settings.default_daily_loss_limit,
            per_trade_risk=settings.default_per_trade_risk,
            max_trades_per_day=settings.default_max_trades_per_day,
            daily_target=settings.default_daily_target,
            weekly_target=settings.default_weekly_target,
            monthly_target=settings.default_monthly_target,
            theme=Theme.SYSTEM,
            onboarding_completed=False,
        )
        with write_transaction(self.session, "create profile"):
            self.session.add(profile)
        self.cache.invalidate(keys.PROFILE, user_id)
        logger.info("Created profile for %s", user_id)
        return profile

    def update_profile(self, user_id: str, update: ProfileUpdate) -> Profile:
        """Apply the non-empty fields of ``update`` in a single commit."""
        changes = update.validate().changes()
        profile = self.get_or_create(user_id)
        with write_transaction(self.session, "update profile"):
            for key, value in changes.items():
                setattr(profile, key, value)
        self.cache.invalidate(keys.PROFILE, user_id)
        logger.info("Updated profile %s: %s", user_id, ", ".join(sorted(changes)) or "no changes")
        return profile
