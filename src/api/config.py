"""API Configuration."""

from dataclasses import dataclass, field


@dataclass
class APIConfig:
    """Core API settings."""

    title: str = "TradeMind API"
    version: str = "1.0.0"
    description: str = "Trading journal, risk assessment and discipline tracking"
    prefix: str = "/api/v1"
    docs_url: str = "/docs"
    cors_origins: list[str] = field(default_factory=lambda: [
        "http://localhost:8501",   # Streamlit app
        "http://localhost:8000",
    ])
    cors_methods: list[str] = field(default_factory=lambda: ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
    cors_headers: list[str] = field(default_factory=lambda: ["*"])
    max_page_size: int = 500
    default_page_size: int = 100


DEFAULT_API_CONFIG = APIConfig()
