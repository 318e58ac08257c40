"""Structured logging and request tracing for TradeMind.

JSON logging for deployed services, readable console output for local
Streamlit sessions, and request/user id binding for API calls.
"""

from src.logging_config.config import LogFormat, LoggingConfig, LogLevel
from src.logging_config.context import RequestContext, generate_request_id
from src.logging_config.performance import PerformanceTimer, log_performance
from src.logging_config.setup import configure_logging, get_logger

__all__ = [
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "PerformanceTimer",
    "RequestContext",
    "configure_logging",
    "generate_request_id",
    "get_logger",
    "log_performance",
]
