"""Exception Hierarchy.

Typed exceptions raised by the services and the Trade Guardian.
Each carries an ErrorCode that maps to an HTTP status for the API.
"""

from typing import Any, Dict, List, Optional

from src.api_errors.config import ErrorCode, ERROR_STATUS_MAP


class TradeMindError(Exception):
    """Base exception for all TradeMind errors.

    A single API handler catches the whole hierarchy; views catch it to
    show a transient message without losing their state.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = ERROR_STATUS_MAP.get(error_code, 500)
        self.details = details or []


class ValidationError(TradeMindError):
    """Raised when input fails validation."""

    def __init__(
        self,
        message: str = "Validation failed",
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: Optional[List[Dict[str, Any]]] = None,
        field: Optional[str] = None,
    ):
        if field and not details:
            details = [{"field": field, "issue": message}]
        super().__init__(message, error_code, details)
        self.field = field


class GateBlockedError(ValidationError):
    """Raised when the Trade Guardian is asked to advance past a failing step."""

    def __init__(self, step: Any, message: Optional[str] = None):
        name = getattr(step, "name", str(step))
        super().__init__(
            message or f"Step {name} is not complete",
            error_code=ErrorCode.GATE_BLOCKED,
            details=[{"step": name}],
        )
        self.step = step


class NotFoundError(TradeMindError):
    """Raised when a mutation targets a row that does not exist."""

    def __init__(
        self,
        message: str = "Resource not found",
        error_code: ErrorCode = ErrorCode.RESOURCE_NOT_FOUND,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
    ):
        details = []
        if resource_type or resource_id:
            details = [{"resource_type": resource_type, "resource_id": resource_id}]
        super().__init__(message, error_code, details)


class ConflictError(TradeMindError):
    """Raised when an action conflicts with existing state."""

    def __init__(
        self,
        message: str = "Resource conflict",
        error_code: ErrorCode = ErrorCode.RESOURCE_CONFLICT,
    ):
        super().__init__(message, error_code)


class PersistenceError(TradeMindError):
    """Raised when the storage backend rejects or fails an operation."""

    def __init__(self, message: str = "Storage operation failed", cause: Optional[BaseException] = None):
        details = [{"cause": type(cause).__name__}] if cause is not None else None
        super().__init__(message, ErrorCode.DATABASE_ERROR, details)
        self.cause = cause
