"""Holder API server: uvicorn on the current event loop."""

from __future__ import annotations

import uvicorn
from loguru import logger

from config.settings import Settings, settings as default_settings


def build_server(cfg: Settings | None = None) -> uvicorn.Server:
    """Build the uvicorn server for the holder report API.

    The app lifespan owns the HeliusClient, so stopping the server (uvicorn
    traps SIGINT/SIGTERM) also closes the upstream HTTP pool.
    """
    from src.api.app import create_app

    cfg = cfg or default_settings
    config = uvicorn.Config(
        app=create_app(cfg),
        host=cfg.dashboard_host,
        port=cfg.dashboard_port,
        log_level="warning",
        loop="none",  # use the existing event loop
    )
    return uvicorn.Server(config)


async def run_api_server(cfg: Settings | None = None) -> None:
    cfg = cfg or default_settings
    server = build_server(cfg)
    logger.info(
        f"Holder API starting on http://{cfg.dashboard_host}:{cfg.dashboard_port} "
        f"(helius {'configured' if cfg.helius_configured else 'NOT configured'})"
    )
    await server.serve()
