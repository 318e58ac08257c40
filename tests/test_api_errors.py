"""Tests for the error hierarchy, response envelope and input validators."""

import math
from datetime import date

import pytest

from src.api_errors import (
    ConflictError,
    ErrorCode,
    ErrorConfig,
    ErrorResponse,
    GateBlockedError,
    NotFoundError,
    PersistenceError,
    TradeMindError,
    ValidationError,
    create_error_response,
    validate_date_range,
    validate_non_negative,
    validate_optional_price,
    validate_positive_limit,
    validate_price,
    validate_quantity,
    validate_query_limit,
    validate_symbol,
)
from src.api_errors.config import ERROR_SEVERITY_MAP, ERROR_STATUS_MAP, ErrorSeverity
from src.api_errors.handlers import handle_trademind_error, handle_unhandled_error
from src.logging_config import RequestContext
from src.trade_guardian import AssessmentStep


# =============================================================================
# Config
# =============================================================================


class TestErrorCodeMaps:
    def test_every_code_has_a_status(self):
        for code in ErrorCode:
            assert code in ERROR_STATUS_MAP

    def test_every_code_has_a_severity(self):
        for code in ErrorCode:
            assert code in ERROR_SEVERITY_MAP

    @pytest.mark.parametrize(
        "code,status",
        [
            (ErrorCode.VALIDATION_ERROR, 400),
            (ErrorCode.GATE_BLOCKED, 400),
            (ErrorCode.TRADE_NOT_FOUND, 404),
            (ErrorCode.TRADE_NOT_OPEN, 409),
            (ErrorCode.DEFAULT_RULE_PROTECTED, 409),
            (ErrorCode.DATABASE_ERROR, 500),
        ],
    )
    def test_status_codes(self, code, status):
        assert ERROR_STATUS_MAP[code] == status

    def test_database_errors_are_critical(self):
        assert ERROR_SEVERITY_MAP[ErrorCode.DATABASE_ERROR] == ErrorSeverity.CRITICAL

    def test_default_config(self):
        config = ErrorConfig()
        assert config.include_request_id is True
        assert config.suppress_internal_details is True
        assert config.max_error_detail_length == 500


# =============================================================================
# Exceptions
# =============================================================================


class TestExceptions:
    def test_base_defaults_to_internal_error(self):
        err = TradeMindError("boom")
        assert err.error_code == ErrorCode.INTERNAL_ERROR
        assert err.status_code == 500
        assert err.details == []
        assert str(err) == "boom"

    def test_validation_error_records_field(self):
        err = ValidationError("quantity must be greater than 0", field="quantity")
        assert err.status_code == 400
        assert err.field == "quantity"
        assert err.details == [{"field": "quantity", "issue": "quantity must be greater than 0"}]

    def test_validation_error_keeps_explicit_details(self):
        err = ValidationError("bad", details=[{"x": 1}], field="ignored")
        assert err.details == [{"x": 1}]

    def test_gate_blocked_names_step(self):
        err = GateBlockedError(AssessmentStep.RISK_ACK)
        assert isinstance(err, ValidationError)
        assert err.error_code == ErrorCode.GATE_BLOCKED
        assert err.details == [{"step": "RISK_ACK"}]
        assert "RISK_ACK" in err.message

    def test_not_found_details(self):
        err = NotFoundError("Trade not found", ErrorCode.TRADE_NOT_FOUND, "trade", "t-1")
        assert err.status_code == 404
        assert err.details == [{"resource_type": "trade", "resource_id": "t-1"}]

    def test_not_found_without_resource(self):
        assert NotFoundError().details == []

    def test_conflict(self):
        err = ConflictError("Trade is not open", ErrorCode.TRADE_NOT_OPEN)
        assert err.status_code == 409

    def test_persistence_error_records_cause_type(self):
        err = PersistenceError("Could not save trade", cause=RuntimeError("disk full"))
        assert err.error_code == ErrorCode.DATABASE_ERROR
        assert err.details == [{"cause": "RuntimeError"}]
        assert isinstance(err.cause, RuntimeError)


# =============================================================================
# Handlers
# =============================================================================


class TestErrorResponse:
    def test_to_dict_omits_empty_fields(self):
        body = ErrorResponse(code="VALIDATION_ERROR", message="bad", status_code=400).to_dict()
        assert set(body["error"]) == {"code", "message", "timestamp"}
        assert body["error"]["timestamp"]

    def test_to_dict_includes_details_and_request_id(self):
        body = ErrorResponse(
            code="TRADE_NOT_FOUND",
            message="missing",
            status_code=404,
            details=[{"resource_id": "t-1"}],
            request_id="req-1",
        ).to_dict()
        assert body["error"]["details"] == [{"resource_id": "t-1"}]
        assert body["error"]["request_id"] == "req-1"

    def test_create_error_response_looks_up_status(self):
        response = create_error_response(ErrorCode.TRADE_NOT_OPEN, "closed")
        assert response.status_code == 409
        assert response.code == "TRADE_NOT_OPEN"


class TestHandlers:
    def test_domain_error_carries_request_id(self):
        with RequestContext(request_id="req-42"):
            response = handle_trademind_error(ConflictError("nope"))
        assert response.request_id == "req-42"
        assert response.status_code == 409

    def test_domain_error_without_request_id(self):
        config = ErrorConfig(include_request_id=False, log_all_errors=False)
        with RequestContext(request_id="req-42"):
            response = handle_trademind_error(ConflictError("nope"), config)
        assert response.request_id is None

    def test_message_truncated(self):
        config = ErrorConfig(max_error_detail_length=10)
        response = handle_trademind_error(ValidationError("x" * 50), config)
        assert response.message == "x" * 10

    def test_unhandled_error_hides_internals(self):
        response = handle_unhandled_error(KeyError("secret"))
        assert response.status_code == 500
        assert response.message == "An internal error occurred"
        assert "secret" not in response.message

    def test_unhandled_error_can_show_internals(self):
        config = ErrorConfig(suppress_internal_details=False)
        response = handle_unhandled_error(ValueError("bad value"), config)
        assert response.message == "ValueError: bad value"


# =============================================================================
# Validators
# =============================================================================


class TestValidateSymbol:
    def test_normalizes(self):
        assert validate_symbol("  m&m ") == "M&M"
        assert validate_symbol("bajaj-auto") == "BAJAJ-AUTO"

    @pytest.mark.parametrize("raw", [None, "", "   ", "NIFTY 50", "$AAPL", "A" * 41])
    def test_rejects(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            validate_symbol(raw)
        assert exc_info.value.error_code == ErrorCode.INVALID_SYMBOL


class TestNumericValidators:
    def test_price(self):
        assert validate_price(101) == 101.0
        with pytest.raises(ValidationError) as exc_info:
            validate_price(0)
        assert exc_info.value.error_code == ErrorCode.INVALID_PRICE

    @pytest.mark.parametrize("value", [math.nan, math.inf, True, "100"])
    def test_price_rejects_non_finite(self, value):
        with pytest.raises(ValidationError):
            validate_price(value)

    def test_missing_value(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_price(None, "entry_price")
        assert exc_info.value.error_code == ErrorCode.MISSING_REQUIRED_FIELD
        assert exc_info.value.field == "entry_price"

    def test_optional_price(self):
        assert validate_optional_price(None, "stop_loss") is None
        assert validate_optional_price(95, "stop_loss") == 95.0
        with pytest.raises(ValidationError):
            validate_optional_price(-1, "stop_loss")

    def test_quantity(self):
        assert validate_quantity(25) == 25.0
        with pytest.raises(ValidationError) as exc_info:
            validate_quantity(-5)
        assert exc_info.value.error_code == ErrorCode.INVALID_QUANTITY

    def test_positive_limit(self):
        assert validate_positive_limit(5000, "per_trade_risk") == 5000.0
        with pytest.raises(ValidationError) as exc_info:
            validate_positive_limit(0, "per_trade_risk")
        assert exc_info.value.error_code == ErrorCode.INVALID_LIMIT

    def test_non_negative(self):
        assert validate_non_negative(0, "fees") == 0.0
        with pytest.raises(ValidationError):
            validate_non_negative(-0.01, "fees")


class TestRangeValidators:
    def test_date_range(self):
        validate_date_range(date(2024, 3, 1), date(2024, 3, 1))
        validate_date_range(None, date(2024, 3, 1))
        with pytest.raises(ValidationError) as exc_info:
            validate_date_range(date(2024, 3, 2), date(2024, 3, 1))
        assert exc_info.value.error_code == ErrorCode.INVALID_DATE_RANGE

    def test_query_limit(self):
        assert validate_query_limit(None) is None
        assert validate_query_limit(1000) == 1000
        for bad in (0, 1001):
            with pytest.raises(ValidationError):
                validate_query_limit(bad)
