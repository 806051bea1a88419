"""FastAPI dependency injection — settings, Helius client."""

from __future__ import annotations

from fastapi import Request

from config.settings import Settings
from src.parsers.helius.client import HeliusClient


def get_settings(request: Request) -> Settings:
    """Return the settings the app was built with."""
    return request.app.state.settings


def get_helius(request: Request) -> HeliusClient | None:
    """Return the app-scoped Helius client, None when no API key is configured."""
    return getattr(request.app.state, "helius", None)
