"""Logging Configuration.

Log levels, output formats and thresholds for slow-operation warnings.
"""

from dataclasses import dataclass, field
from enum import Enum


class LogLevel(str, Enum):
    """Log level options."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output format."""
    JSON = "json"
    CONSOLE = "console"


@dataclass
class LoggingConfig:
    """Structured logging configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    include_caller: bool = True
    slow_threshold_ms: float = 500.0
    exclude_paths: list[str] = field(
        default_factory=lambda: ["/health", "/_stcore/health"]
    )
    service_name: str = "trademind"
    quiet_loggers: tuple[str, ...] = ("urllib3", "asyncio", "httpx", "sqlalchemy.engine")


DEFAULT_LOGGING_CONFIG = LoggingConfig()
