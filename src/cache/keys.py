"""Cache key naming conventions for TradeMind.

All keys are namespaced with the 'trademind:' prefix and scoped per user:
    trademind:{entity}:{user_id}:{params_hash}
"""

import hashlib
import json
from typing import Any, Mapping, Optional

PREFIX = "trademind"

# Entities
TRADES = "trades"
PROFILE = "profile"
RULES = "rules"
SESSION = "daily_session"
QUOTE = "quote"

# Mutating one entity invalidates the derived reads listed here as well.
DEPENDENTS = {
    TRADES: (TRADES,),
    PROFILE: (PROFILE,),
    RULES: (RULES,),
    SESSION: (SESSION,),
}


def params_hash(params: Optional[Mapping[str, Any]]) -> str:
    """Stable short hash of query parameters (order independent)."""
    if not params:
        return "-"
    raw = json.dumps(dict(params), sort_keys=True, default=str)
    return hashlib.sha1(raw.encode("utf-8")).hexdigest()[:16]


def make_key(entity: str, user_id: str, params: Optional[Mapping[str, Any]] = None) -> str:
    return f"{PREFIX}:{entity}:{user_id}:{params_hash(params)}"


def user_entity_prefix(entity: str, user_id: str) -> str:
    return f"{PREFIX}:{entity}:{user_id}:"
