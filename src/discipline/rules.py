"""Rule Service - the trader's personal rule book.

Default rules are seeded once per user and cannot be deleted, only
deactivated. User rules are appended after the current last sort order.
"""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from src.api_errors import ConflictError, ErrorCode, NotFoundError, ValidationError
from src.cache import QueryCache, get_query_cache, keys
from src.db.models import RuleCategory, TradingRule
from src.db.engine import write_transaction

logger = logging.getLogger(__name__)


DEFAULT_RULES = [
    ("Never risk more than my per-trade limit on a single trade", RuleCategory.RISK_MANAGEMENT),
    ("Always place a stop loss before entering", RuleCategory.RISK_MANAGEMENT),
    ("Stop trading for the day once the daily loss limit is hit", RuleCategory.RISK_MANAGEMENT),
    ("Book partial profits at the first target", RuleCategory.PROFIT_TAKING),
    ("Never move a stop loss further away", RuleCategory.DISCIPLINE),
    ("No revenge trades after a loss", RuleCategory.DISCIPLINE),
    ("Only take setups that are in my trading plan", RuleCategory.DISCIPLINE),
    ("Review every trade in the journal after the session", RuleCategory.GENERAL),
]

MAX_RULE_LENGTH = 500


def _clean_text(rule_text: Optional[str]) -> str:
    text = (rule_text or "").strip()
    if not text:
        raise ValidationError("Please enter a rule", field="rule_text")
    if len(text) > MAX_RULE_LENGTH:
        raise ValidationError(f"Rule must be at most {MAX_RULE_LENGTH} characters", field="rule_text")
    return text


def _category(category) -> str:
    return RuleCategory(category or RuleCategory.GENERAL).value


class RuleService:
    """CRUD for trading rules."""

    def __init__(self, session: Session, cache: Optional[QueryCache] = None):
        self.session = session
        self.cache = cache if cache is not None else get_query_cache()

    def initialize_default_rules(self, user_id: str) -> list[TradingRule]:
        """Seed the default rules for a user who has none.

        Returns:
            The user's rules after seeding, in sort order.
        """
        existing = self.session.query(TradingRule).filter(TradingRule.user_id == user_id).count()
        if existing:
            return self.get_rules(user_id)

        with write_transaction(self.session, "seed default rules"):
            for order, (text, category) in enumerate(DEFAULT_RULES, start=1):
                self.session.add(TradingRule(
                    user_id=user_id,
                    rule_text=text,
                    category=category.value,
                    is_default=True,
                    is_active=True,
                    sort_order=order,
                ))
        self.cache.invalidate(keys.RULES, user_id)
        logger.info("Seeded %d default rules for %s", len(DEFAULT_RULES), user_id)
        return self.get_rules(user_id)

    def get_rules(self, user_id: str, active_only: bool = False) -> list[TradingRule]:
        """Rules ordered by sort_order (cached)."""

        def fetch(session: Optional[Session] = None) -> list[TradingRule]:
            q = (session or self.session).query(TradingRule).filter(TradingRule.user_id == user_id)
            if active_only:
                q = q.filter(TradingRule.is_active.is_(True))
            return q.order_by(TradingRule.sort_order, TradingRule.created_at).all()

        return self.cache.get(
            keys.RULES, user_id, fetch, params={"active_only": active_only}, uses_session=True
        )

    def get_active_rules(self, user_id: str) -> list[TradingRule]:
        return self.get_rules(user_id, active_only=True)

    def add_rule(self, user_id: str, rule_text: str, category=RuleCategory.GENERAL) -> TradingRule:
        """Append a user rule after the current last one."""
        text = _clean_text(rule_text)
        max_order = self.session.query(func.max(TradingRule.sort_order)).filter(
            TradingRule.user_id == user_id
        ).scalar()

        rule = TradingRule(
            user_id=user_id,
            rule_text=text,
            category=_category(category),
            is_default=False,
            is_active=True,
            sort_order=(max_order or 0) + 1,
        )
        with write_transaction(self.session, "add rule"):
            self.session.add(rule)
        self.cache.invalidate(keys.RULES, user_id)
        logger.info("Added rule %s for %s", rule.id, user_id)
        return rule

    def update_rule(
        self,
        user_id: str,
        rule_id: str,
        rule_text: Optional[str] = None,
        category=None,
    ) -> TradingRule:
        rule = self._get_owned(user_id, rule_id)
        text = _clean_text(rule_text) if rule_text is not None else None
        with write_transaction(self.session, "update rule"):
            if text is not None:
                rule.rule_text = text
            if category is not None:
                rule.category = _category(category)
        self.cache.invalidate(keys.RULES, user_id)
        return rule

    def set_active(self, user_id: str, rule_id: str, is_active: bool) -> TradingRule:
        rule = self._get_owned(user_id, rule_id)
        with write_transaction(self.session, "update rule"):
            rule.is_active = is_active
        self.cache.invalidate(keys.RULES, user_id)
        logger.info("Rule %s %s", rule_id, "activated" if is_active else "deactivated")
        return rule

    def delete_rule(self, user_id: str, rule_id: str) -> None:
        """Delete a user rule.

        Raises:
            NotFoundError: No such rule for this user.
            ConflictError: The rule is a default rule.
        """
        rule = self._get_owned(user_id, rule_id)
        if rule.is_default:
            raise ConflictError(
                "Default rules cannot be deleted; deactivate them instead",
                ErrorCode.DEFAULT_RULE_PROTECTED,
            )
        with write_transaction(self.session, "delete rule"):
            self.session.delete(rule)
        self.cache.invalidate(keys.RULES, user_id)
        logger.info("Deleted rule %s", rule_id)

    def _get_owned(self, user_id: str, rule_id: str) -> TradingRule:
        rule = self.session.query(TradingRule).filter(
            TradingRule.id == rule_id,
            TradingRule.user_id == user_id,
        ).first()
        if rule is None:
            raise NotFoundError(
                f"Rule {rule_id} not found",
                ErrorCode.RULE_NOT_FOUND,
                resource_type="trading_rule",
                resource_id=rule_id,
            )
        return rule
