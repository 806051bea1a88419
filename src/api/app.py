"""FastAPI application factory for the holder analytics API."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.middleware.cors import CORSMiddleware

from config.settings import Settings, settings as default_settings
from src.api.middleware import SecurityHeadersMiddleware
from src.parsers.helius.client import HeliusClient


def create_app(
    app_settings: Settings | None = None,
    helius: HeliusClient | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    The Helius client is created in the lifespan (unless one is passed in)
    and closed on shutdown. Without an API key it stays ``None`` and the
    holder endpoints answer 500.
    """
    cfg = app_settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = None
        if helius is not None:
            app.state.helius = helius
        elif cfg.helius_configured:
            owned = HeliusClient(
                cfg.helius_api_key, rpc_url=cfg.helius_rpc_url, max_rps=cfg.helius_max_rps
            )
            app.state.helius = owned
        else:
            logger.warning("[API] HELIUS_API_KEY not set, holder endpoints disabled")
            app.state.helius = None
        try:
            yield
        finally:
            if owned is not None:
                await owned.close()

    app = FastAPI(
        title="Token Holder Analytics API",
        version="0.1.0",
        docs_url="/api/docs" if cfg.dashboard_debug else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if cfg.dashboard_debug else None,
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.helius = helius

    # Rate limiting (per client IP)
    app.state.limiter = Limiter(key_func=get_remote_address, default_limits=["60/minute"])
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Security headers
    app.add_middleware(SecurityHeadersMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in cfg.cors_origins.split(",") if o.strip()],
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    from src.api.routers.health import router as health_router
    from src.api.routers.holders import router as holders_router

    app.include_router(health_router)
    app.include_router(holders_router)

    return app
