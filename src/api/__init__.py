"""TradeMind HTTP API.

Example:
    from src.api import create_app
    app = create_app()
"""

from src.api.app import create_app
from src.api.config import APIConfig, DEFAULT_API_CONFIG

__all__ = ["APIConfig", "DEFAULT_API_CONFIG", "create_app"]
