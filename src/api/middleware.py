"""Security middleware — response hardening headers."""

from __future__ import annotations

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject security headers on every response."""

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        response: Response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # JSON API only, nothing to load
        response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"
        # Holder reports are point-in-time snapshots
        response.headers.setdefault("Cache-Control", "no-store")
        return response
