"""Ritual API Routes.

Today's pre-market session and a random quote.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from src.api.dependencies import get_ritual_service, get_rule_service, get_user_id
from src.api.models import DailySessionResponse, QuoteResponse, RitualRequest, RitualStatusResponse
from src.discipline import RitualService, RuleService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/ritual", tags=["Ritual"])


@router.get("/today", response_model=RitualStatusResponse)
def get_today(
    user_id: str = Depends(get_user_id),
    ritual: RitualService = Depends(get_ritual_service),
):
    session = ritual.get_today_session(user_id)
    return RitualStatusResponse(
        done=session is not None and session.session_started_at is not None,
        session=DailySessionResponse.model_validate(session) if session else None,
    )


@router.post("", response_model=DailySessionResponse)
def start_ritual(
    request: RitualRequest,
    user_id: str = Depends(get_user_id),
    ritual: RitualService = Depends(get_ritual_service),
    rules: RuleService = Depends(get_rule_service),
):
    """Complete today's ritual (every active rule must be checked)."""
    active_ids = [r.id for r in rules.get_active_rules(user_id)]
    return ritual.start_session(user_id, request.mood, request.rules_checked, active_ids, request.notes)


@router.get("/quote", response_model=Optional[QuoteResponse])
def get_quote(ritual: RitualService = Depends(get_ritual_service)):
    return ritual.random_quote()
