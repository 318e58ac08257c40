"""FastAPI Application Factory.

Creates the TradeMind API with its middleware stack: security headers,
request tracing, CORS, and the domain exception handlers.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.api.config import APIConfig, DEFAULT_API_CONFIG
from src.api.routes import analytics, assessment, ritual, settings, trades
from src.api_errors import register_exception_handlers
from src.cache import get_query_cache
from src.db.engine import get_sync_engine
from src.logging_config import configure_logging
from src.logging_config.middleware import RequestTracingMiddleware
from src.settings import get_settings

logger = logging.getLogger(__name__)


# ── Security Headers Middleware ───────────────────────────────────────


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds standard security headers to all HTTP responses."""

    async def dispatch(self, request: Request, call_next: Any) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


# ── Lifespan (startup / shutdown) ────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("TradeMind API starting up")
    yield
    logger.info("TradeMind API shutting down")


# ── App Factory ──────────────────────────────────────────────────────


def create_app(config: Optional[APIConfig] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Middleware stack (outermost → innermost):
        SecurityHeaders → RequestTracing → CORS → App

    Args:
        config: API configuration. Uses defaults if not provided.

    Returns:
        Configured FastAPI application.
    """
    config = config or DEFAULT_API_CONFIG

    app = FastAPI(
        title=config.title,
        version=config.version,
        description=config.description,
        docs_url=config.docs_url,
        lifespan=lifespan,
    )

    cors_origins = os.environ.get("TRADEMIND_CORS_ORIGINS", "").split(",")
    cors_origins = [o.strip() for o in cors_origins if o.strip()] or config.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=config.cors_methods,
        allow_headers=config.cors_headers,
    )
    app.add_middleware(RequestTracingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    register_exception_handlers(app)

    @app.get("/health")
    def health():
        components = {}
        try:
            with get_sync_engine().connect() as conn:
                conn.execute(text("SELECT 1"))
            components["database"] = "ok"
        except SQLAlchemyError as e:
            components["database"] = f"error: {e}"

        if get_settings().use_redis:
            try:
                get_query_cache().backend.get_client().ping()
                components["redis"] = "ok"
            except Exception as e:
                components["redis"] = f"error: {e}"

        overall = "ok" if all(v == "ok" for v in components.values()) else "degraded"
        return {"status": overall, "version": config.version, "components": components}

    app.include_router(trades.router, prefix=config.prefix)
    app.include_router(assessment.router, prefix=config.prefix)
    app.include_router(analytics.router, prefix=config.prefix)
    app.include_router(settings.router, prefix=config.prefix)
    app.include_router(ritual.router, prefix=config.prefix)

    logger.info("TradeMind API v%s initialized", config.version)
    return app
