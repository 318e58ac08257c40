"""Error Handling & Validation.

Typed exception hierarchy, JSON error envelopes for the API, and input
validators shared by the services and the Trade Guardian.
"""

from src.api_errors.config import (
    ErrorCode,
    ErrorConfig,
    ErrorSeverity,
)
from src.api_errors.exceptions import (
    ConflictError,
    GateBlockedError,
    NotFoundError,
    PersistenceError,
    TradeMindError,
    ValidationError,
)
from src.api_errors.handlers import (
    ErrorResponse,
    create_error_response,
    register_exception_handlers,
)
from src.api_errors.validators import (
    validate_date_range,
    validate_non_negative,
    validate_optional_price,
    validate_positive_limit,
    validate_price,
    validate_quantity,
    validate_query_limit,
    validate_symbol,
)

__all__ = [
    # Config
    "ErrorCode",
    "ErrorConfig",
    "ErrorSeverity",
    # Exceptions
    "ConflictError",
    "GateBlockedError",
    "NotFoundError",
    "PersistenceError",
    "TradeMindError",
    "ValidationError",
    # Handlers
    "ErrorResponse",
    "create_error_response",
    "register_exception_handlers",
    # Validators
    "validate_date_range",
    "validate_non_negative",
    "validate_optional_price",
    "validate_positive_limit",
    "validate_price",
    "validate_quantity",
    "validate_query_limit",
    "validate_symbol",
]
