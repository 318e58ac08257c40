"""Settings API Routes.

Profile limits/targets and the trading rule book.
"""

import logging

from fastapi import APIRouter, Depends, Response

from src.api.dependencies import get_profile_service, get_rule_service, get_user_id
from src.api.models import (
    CreateRuleRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    RuleResponse,
    UpdateRuleRequest,
)
from src.discipline import ProfileService, ProfileUpdate, RuleService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Settings"])


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    user_id: str = Depends(get_user_id),
    profiles: ProfileService = Depends(get_profile_service),
):
    """The caller's profile, created with defaults on first access."""
    return profiles.get_profile(user_id) or profiles.get_or_create(user_id)


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    request: ProfileUpdateRequest,
    user_id: str = Depends(get_user_id),
    profiles: ProfileService = Depends(get_profile_service),
):
    return profiles.update_profile(user_id, ProfileUpdate(**request.model_dump()))


@router.get("/rules", response_model=list[RuleResponse])
def list_rules(
    active_only: bool = False,
    user_id: str = Depends(get_user_id),
    rules: RuleService = Depends(get_rule_service),
):
    return rules.get_rules(user_id, active_only=active_only)


@router.post("/rules", response_model=RuleResponse, status_code=201)
def add_rule(
    request: CreateRuleRequest,
    user_id: str = Depends(get_user_id),
    rules: RuleService = Depends(get_rule_service),
):
    return rules.add_rule(user_id, request.rule_text, request.category)


@router.post("/rules/defaults", response_model=list[RuleResponse])
def seed_default_rules(
    user_id: str = Depends(get_user_id),
    rules: RuleService = Depends(get_rule_service),
):
    return rules.initialize_default_rules(user_id)


@router.patch("/rules/{rule_id}", response_model=RuleResponse)
def update_rule(
    rule_id: str,
    request: UpdateRuleRequest,
    user_id: str = Depends(get_user_id),
    rules: RuleService = Depends(get_rule_service),
):
    rule = None
    if request.rule_text is not None or request.category is not None:
        rule = rules.update_rule(user_id, rule_id, request.rule_text, request.category)
    if request.is_active is not None:
        rule = rules.set_active(user_id, rule_id, request.is_active)
    if rule is None:
        rule = rules.update_rule(user_id, rule_id)
    return rule


@router.delete("/rules/{rule_id}", status_code=204)
def delete_rule(
    rule_id: str,
    user_id: str = Depends(get_user_id),
    rules: RuleService = Depends(get_rule_service),
):
    rules.delete_rule(user_id, rule_id)
    return Response(status_code=204)
