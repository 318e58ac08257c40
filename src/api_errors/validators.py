"""Input Validation Utilities.

Reusable validators for journal inputs: NSE/BSE symbols, prices,
quantities, limits and date ranges.
"""

import math
import re
from datetime import date, datetime
from typing import Optional, Union

from src.api_errors.config import ErrorCode
from src.api_errors.exceptions import ValidationError

# NSE equity / F&O style symbols: letters, digits, '&' and '-', e.g. M&M, BAJAJ-AUTO, NIFTY24MAR22000CE
SYMBOL_PATTERN = re.compile(r"^[A-Z0-9][A-Z0-9&\-]{0,39}$")

MAX_QUERY_LIMIT = 1000

Number = Union[int, float]


def validate_symbol(symbol: Optional[str]) -> str:
    """Validate and normalize a trading symbol.

    Args:
        symbol: Raw symbol string as typed by the user.

    Returns:
        The stripped, upper-cased symbol.

    Raises:
        ValidationError: If the symbol is blank or malformed.
    """
    if not symbol or not isinstance(symbol, str) or not symbol.strip():
        raise ValidationError("Symbol is required", ErrorCode.INVALID_SYMBOL, field="symbol")

    symbol = symbol.strip().upper()
    if not SYMBOL_PATTERN.match(symbol):
        raise ValidationError(
            f"Invalid symbol format: '{symbol}'",
            ErrorCode.INVALID_SYMBOL,
            field="symbol",
        )
    return symbol


def _check_finite(value: Optional[Number], field: str, code: ErrorCode) -> float:
    if value is None:
        raise ValidationError(f"{field} is required", ErrorCode.MISSING_REQUIRED_FIELD, field=field)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValidationError(f"{field} must be a finite number", code, field=field)
    return float(value)


def validate_price(value: Optional[Number], field: str = "price") -> float:
    """Require a finite price strictly greater than zero."""
    price = _check_finite(value, field, ErrorCode.INVALID_PRICE)
    if price <= 0:
        raise ValidationError(f"{field} must be greater than 0", ErrorCode.INVALID_PRICE, field=field)
    return price


def validate_optional_price(value: Optional[Number], field: str) -> Optional[float]:
    if value is None:
        return None
    return validate_price(value, field)


def validate_quantity(value: Optional[Number], field: str = "quantity") -> float:
    """Require a finite quantity strictly greater than zero."""
    qty = _check_finite(value, field, ErrorCode.INVALID_QUANTITY)
    if qty <= 0:
        raise ValidationError(f"{field} must be greater than 0", ErrorCode.INVALID_QUANTITY, field=field)
    return qty


def validate_positive_limit(value: Optional[Number], field: str) -> float:
    """Risk limits must be strictly positive; zero would make usage ratios undefined."""
    limit = _check_finite(value, field, ErrorCode.INVALID_LIMIT)
    if limit <= 0:
        raise ValidationError(f"{field} must be greater than 0", ErrorCode.INVALID_LIMIT, field=field)
    return limit


def validate_non_negative(value: Optional[Number], field: str) -> float:
    amount = _check_finite(value, field, ErrorCode.VALIDATION_ERROR)
    if amount < 0:
        raise ValidationError(f"{field} must not be negative", field=field)
    return amount


def validate_date_range(
    start: Optional[Union[date, datetime]],
    end: Optional[Union[date, datetime]],
) -> None:
    """Reject ranges whose start falls after their end."""
    if start is not None and end is not None and start > end:
        raise ValidationError(
            "start must not be after end",
            ErrorCode.INVALID_DATE_RANGE,
            field="start",
        )


def validate_query_limit(limit: Optional[int]) -> Optional[int]:
    if limit is None:
        return None
    if limit < 1 or limit > MAX_QUERY_LIMIT:
        raise ValidationError(
            f"limit must be between 1 and {MAX_QUERY_LIMIT}",
            ErrorCode.VALIDATION_ERROR,
            field="limit",
        )
    return limit
