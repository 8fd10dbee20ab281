"""
FastAPI application factory.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import settings
from app.core.auth import get_auth_config
from app.core.middleware import setup_cors
from app.core.exceptions import register_exception_handlers
from app.api.v1 import router as api_v1_router

log = logging.getLogger(__name__)


def setup_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown logic."""
    # ── Startup ──────────────────────────────────────────
    log.info("Starting %s v%s", settings.APP_NAME, settings.APP_VERSION)
    config = get_auth_config()
    if config.env_admin_enabled:
        log.info("Environment admin login enabled for %s", config.admin_email)
    else:
        log.warning("ADMIN_EMAIL / ADMIN_PASSWORD not set; only database admins can log in")
    yield
    # ── Shutdown ─────────────────────────────────────────
    log.info("Shutting down")


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    setup_logging()
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Field site registry with admin / supervisor access control",
        lifespan=lifespan,
    )

    # Middleware
    setup_cors(app)

    # Exception handlers
    register_exception_handlers(app)

    # Routers
    app.include_router(api_v1_router, prefix="/api/v1")

    # Health check
    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok", "version": settings.APP_VERSION}

    return app


app = create_app()
