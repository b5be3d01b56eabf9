"""Security headers and request logging."""

from __future__ import annotations

import time

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject security headers and log slow or failed API requests."""

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        started = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        if request.url.path.startswith("/api/"):
            if response.status_code >= 500 or elapsed_ms > 5000:
                logger.warning(
                    f"[API] {request.method} {request.url.path} -> "
                    f"{response.status_code} in {elapsed_ms:.0f}ms"
                )
            else:
                logger.debug(
                    f"[API] {request.method} {request.url.path} -> "
                    f"{response.status_code} in {elapsed_ms:.0f}ms"
                )

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Frames embed the mint page, so no X-Frame-Options DENY here
        response.headers["X-XSS-Protection"] = "1; mode=block"
        return response
