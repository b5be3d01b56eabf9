"""FastAPI application factory for the mint API."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from config.settings import settings
from src.api.dependencies import get_registry
from src.api.limits import limiter
from src.api.middleware import SecurityHeadersMiddleware
from src.api.registry import Registry, build_registry, registry
from src.clients.http import UpstreamError
from src.minting.errors import MintError

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(MintError)
    async def mint_error_handler(request: Request, exc: MintError) -> JSONResponse:
        logger.info(f"[API] {request.url.path} rejected: {exc.code} ({exc.message})")
        return JSONResponse(
            status_code=exc.http_status,
            content={"error": exc.message, "code": exc.code},
        )

    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
        logger.error(f"[API] {request.url.path} upstream failure: {exc}")
        return JSONResponse(
            status_code=502,
            content={"error": f"Upstream service failed: {exc.service}", "code": "upstream_error"},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"[API] {request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(runtime: Registry | None = None) -> FastAPI:
    """Build and configure the FastAPI application.

    ``runtime`` replaces the global registry (tests inject mocked clients);
    without it the registry is wired from settings on startup.
    """

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if runtime is None:
            build_registry(registry)
            logger.info(
                f"[API] Neynar {'configured' if settings.neynar_api_key else 'MISSING'}, "
                f"image provider {settings.image_provider} "
                f"({'configured' if settings.together_api_key or settings.stability_api_key else 'MISSING'}), "
                f"Pinata {'configured' if settings.pinata_api_key else 'MISSING'}"
            )
        yield
        if runtime is None:
            await registry.close()

    app = FastAPI(
        title="CyberProfile Mint API",
        version="0.1.0",
        docs_url="/api/docs" if settings.api_debug else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if settings.api_debug else None,
        lifespan=lifespan,
    )

    if runtime is not None:
        app.dependency_overrides[get_registry] = lambda: runtime

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    _register_error_handlers(app)

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Oracle-Key"],
    )

    from src.api.routers.admin import router as admin_router
    from src.api.routers.auth_router import router as auth_router
    from src.api.routers.frame import router as frame_router
    from src.api.routers.health import router as health_router
    from src.api.routers.minting import router as minting_router

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(minting_router)
    app.include_router(admin_router)
    app.include_router(frame_router)

    # Mint and admin pages
    static_dir = PROJECT_ROOT / settings.static_dir
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")

    return app
