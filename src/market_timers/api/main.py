"""
FastAPI Application Factory

Assembles the countdown API: CORS, exception handlers, timer and system
routers, and the health check. Used by main_asyncio.py and by the tests,
which build the app against their own provider.

FastAPI serves OpenAPI docs at /docs and ReDoc at /redoc.
"""

from typing import List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from market_timers import __version__
from market_timers.api.middleware.error_handler import register_exception_handlers
from market_timers.api.routes import system, timers
from market_timers.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)


def create_app(
    title: str = "Market Timers",
    description: str = "Adaptive countdowns for a market participation cycle",
    version: str = __version__,
    docs_enabled: bool = True,
    cors_origins: Optional[List[str]] = None
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        title: API title (shown in docs)
        description: API description
        version: API version
        docs_enabled: Enable /docs and /redoc
        cors_origins: CORS allowed origins (default: local dashboard dev servers)

    Returns:
        Configured FastAPI application ready to run
    """
    app = FastAPI(
        title=title,
        description=description,
        version=version,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None
    )

    log.info(f"Creating FastAPI app: {title} v{version}")

    if not cors_origins:
        cors_origins = [
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    log.debug(f"CORS enabled for origins: {cors_origins}")

    register_exception_handlers(app)

    app.include_router(timers.router, prefix="/api/v1")
    app.include_router(system.router, prefix="/api/v1")
    log.debug("Routes registered: timers (/api/v1/timers), system (/api/v1/system)")

    @app.get(
        "/api/health",
        tags=["System"],
        summary="Health check",
        description="Check if API is running and responding"
    )
    async def health_check():
        return {
            "status": "healthy",
            "service": "market-timers-api",
            "version": version
        }

    return app
