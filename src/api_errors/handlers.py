"""Exception Handlers & Error Response Builder.

Renders TradeMindError (and anything unhandled) as a JSON error
envelope and registers the handlers on a FastAPI application.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.api_errors.config import (
    DEFAULT_ERROR_CONFIG,
    ERROR_SEVERITY_MAP,
    ERROR_STATUS_MAP,
    ErrorCode,
    ErrorConfig,
    ErrorSeverity,
)
from src.api_errors.exceptions import TradeMindError
from src.logging_config.context import get_request_id

logger = logging.getLogger(__name__)

_SEVERITY_LEVELS = {
    ErrorSeverity.CRITICAL: logging.CRITICAL,
    ErrorSeverity.HIGH: logging.ERROR,
    ErrorSeverity.MEDIUM: logging.WARNING,
    ErrorSeverity.LOW: logging.INFO,
}


@dataclass
class ErrorResponse:
    """Structured error response envelope."""

    code: str
    message: str
    status_code: int = 500
    details: List[Dict[str, Any]] = field(default_factory=list)
    request_id: Optional[str] = None
    timestamp: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "error": {
                "code": self.code,
                "message": self.message,
                "timestamp": self.timestamp,
            }
        }
        if self.details:
            body["error"]["details"] = self.details
        if self.request_id:
            body["error"]["request_id"] = self.request_id
        return body


def create_error_response(
    error_code: ErrorCode,
    message: str,
    details: Optional[List[Dict[str, Any]]] = None,
    request_id: Optional[str] = None,
) -> ErrorResponse:
    """Build an ErrorResponse with the status code looked up from the error code."""
    return ErrorResponse(
        code=error_code.value,
        message=message,
        status_code=ERROR_STATUS_MAP.get(error_code, 500),
        details=details or [],
        request_id=request_id,
    )


def handle_trademind_error(exc: TradeMindError, config: Optional[ErrorConfig] = None) -> ErrorResponse:
    config = config or DEFAULT_ERROR_CONFIG
    if config.log_all_errors:
        severity = ERROR_SEVERITY_MAP.get(exc.error_code, ErrorSeverity.MEDIUM)
        logger.log(
            _SEVERITY_LEVELS[severity],
            "API error [%s] (%d): %s",
            exc.error_code.value,
            exc.status_code,
            exc.message,
        )
    return create_error_response(
        exc.error_code,
        exc.message[: config.max_error_detail_length],
        details=exc.details,
        request_id=get_request_id() if config.include_request_id else None,
    )


def handle_unhandled_error(exc: Exception, config: Optional[ErrorConfig] = None) -> ErrorResponse:
    """Safe 500 response for anything outside the hierarchy."""
    config = config or DEFAULT_ERROR_CONFIG
    logger.exception("Unhandled exception: %s", type(exc).__name__)

    message = "An internal error occurred"
    if not config.suppress_internal_details:
        message = f"{type(exc).__name__}: {exc}"
    return create_error_response(
        ErrorCode.INTERNAL_ERROR,
        message,
        request_id=get_request_id() if config.include_request_id else None,
    )


def register_exception_handlers(app: Any, config: Optional[ErrorConfig] = None) -> None:
    """Register the TradeMind exception handlers on a FastAPI application.

    Args:
        app: FastAPI application instance.
        config: Error handling configuration.
    """
    config = config or DEFAULT_ERROR_CONFIG

    async def _domain_handler(request: Request, exc: TradeMindError) -> JSONResponse:
        response = handle_trademind_error(exc, config)
        return JSONResponse(status_code=response.status_code, content=response.to_dict())

    async def _fallback_handler(request: Request, exc: Exception) -> JSONResponse:
        response = handle_unhandled_error(exc, config)
        return JSONResponse(status_code=response.status_code, content=response.to_dict())

    async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = [
            {"field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"), "issue": err.get("msg", "")}
            for err in exc.errors()
        ]
        response = create_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            details=details,
            request_id=get_request_id() if config.include_request_id else None,
        )
        return JSONResponse(status_code=response.status_code, content=response.to_dict())

    app.add_exception_handler(TradeMindError, _domain_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _fallback_handler)
    logger.debug("Registered TradeMind exception handlers")
