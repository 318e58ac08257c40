"""Error Configuration.

Error codes, HTTP status mapping and severity levels used by the
TradeMind services and API.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class ErrorCode(Enum):
    """Standardized error codes."""

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_SYMBOL = "INVALID_SYMBOL"
    INVALID_PRICE = "INVALID_PRICE"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    INVALID_LIMIT = "INVALID_LIMIT"
    GATE_BLOCKED = "GATE_BLOCKED"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"

    # Not found errors (404)
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    TRADE_NOT_FOUND = "TRADE_NOT_FOUND"
    RULE_NOT_FOUND = "RULE_NOT_FOUND"

    # Conflict errors (409)
    RESOURCE_CONFLICT = "RESOURCE_CONFLICT"
    TRADE_NOT_OPEN = "TRADE_NOT_OPEN"
    DEFAULT_RULE_PROTECTED = "DEFAULT_RULE_PROTECTED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class ErrorSeverity(Enum):
    """Severity levels for error logging."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


ERROR_STATUS_MAP: Dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.INVALID_SYMBOL: 400,
    ErrorCode.INVALID_PRICE: 400,
    ErrorCode.INVALID_QUANTITY: 400,
    ErrorCode.INVALID_DATE_RANGE: 400,
    ErrorCode.INVALID_LIMIT: 400,
    ErrorCode.GATE_BLOCKED: 400,
    ErrorCode.MISSING_REQUIRED_FIELD: 400,
    ErrorCode.RESOURCE_NOT_FOUND: 404,
    ErrorCode.TRADE_NOT_FOUND: 404,
    ErrorCode.RULE_NOT_FOUND: 404,
    ErrorCode.RESOURCE_CONFLICT: 409,
    ErrorCode.TRADE_NOT_OPEN: 409,
    ErrorCode.DEFAULT_RULE_PROTECTED: 409,
    ErrorCode.INTERNAL_ERROR: 500,
    ErrorCode.DATABASE_ERROR: 500,
}

ERROR_SEVERITY_MAP: Dict[ErrorCode, ErrorSeverity] = {
    ErrorCode.VALIDATION_ERROR: ErrorSeverity.LOW,
    ErrorCode.INVALID_SYMBOL: ErrorSeverity.LOW,
    ErrorCode.INVALID_PRICE: ErrorSeverity.LOW,
    ErrorCode.INVALID_QUANTITY: ErrorSeverity.LOW,
    ErrorCode.INVALID_DATE_RANGE: ErrorSeverity.LOW,
    ErrorCode.INVALID_LIMIT: ErrorSeverity.LOW,
    ErrorCode.GATE_BLOCKED: ErrorSeverity.LOW,
    ErrorCode.MISSING_REQUIRED_FIELD: ErrorSeverity.LOW,
    ErrorCode.RESOURCE_NOT_FOUND: ErrorSeverity.LOW,
    ErrorCode.TRADE_NOT_FOUND: ErrorSeverity.LOW,
    ErrorCode.RULE_NOT_FOUND: ErrorSeverity.LOW,
    ErrorCode.RESOURCE_CONFLICT: ErrorSeverity.MEDIUM,
    ErrorCode.TRADE_NOT_OPEN: ErrorSeverity.MEDIUM,
    ErrorCode.DEFAULT_RULE_PROTECTED: ErrorSeverity.MEDIUM,
    ErrorCode.INTERNAL_ERROR: ErrorSeverity.CRITICAL,
    ErrorCode.DATABASE_ERROR: ErrorSeverity.CRITICAL,
}


@dataclass
class ErrorConfig:
    """Configuration for API error rendering."""

    include_request_id: bool = True
    log_all_errors: bool = True
    suppress_internal_details: bool = True
    max_error_detail_length: int = 500


DEFAULT_ERROR_CONFIG = ErrorConfig()
