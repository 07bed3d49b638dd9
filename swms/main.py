"""
SWMS — Application entry point.

This is the **only** file that assembles the app.  All business logic
lives in the `api/`, `services/`, `models/`, and `core/` packages.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from swms.api.api import api_router
from swms.api.endpoints.auth import limiter
from swms.core.config import Settings, get_settings
from swms.core.enums import Role
from swms.core.exceptions import register_exception_handlers
from swms.core.middleware import AuthGateMiddleware
from swms.core.password_reset import PasswordResetManager
from swms.core.security import TokenCodec, get_password_hash
from swms.db.base import Base
from swms.db.identity_store import IdentityStore
from swms.db.session import async_session_factory, engine

# Ensure all models are imported so metadata.create_all can see them
from swms.models.attendance import Attendance  # noqa: F401
from swms.models.task import Task  # noqa: F401
from swms.models.user import User

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    # Seed default admin user on first run
    async with async_session_factory() as session:
        store = IdentityStore(session)
        if await store.find_by_login_key(settings.FIRST_ADMIN_EMAIL) is None:
            await store.save(
                User(
                    email=settings.FIRST_ADMIN_EMAIL.lower(),
                    hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
                    name="System Administrator",
                    role=Role.ADMIN,
                )
            )
            logger.info(
                "Default admin created: %s (password: <redacted>)",
                settings.FIRST_ADMIN_EMAIL,
            )

    logger.info("🚀 SWMS v%s started", settings.VERSION)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Workforce identity, tasks and attendance",
        version=settings.VERSION,
        lifespan=lifespan,
    )

    codec = TokenCodec(
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        lifetime=settings.access_token_lifetime,
    )
    application.state.settings = settings
    application.state.token_codec = codec
    application.state.reset_manager = PasswordResetManager(ttl=settings.reset_token_lifetime)

    # Rate limiting
    limiter.enabled = settings.RATE_LIMIT_ENABLED
    application.state.limiter = limiter
    application.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

    # Authentication gate + route policy (runs before any handler)
    application.add_middleware(AuthGateMiddleware, codec=codec)

    # CORS wraps the gate so pre-flight requests are answered first
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    application.include_router(api_router)

    return application


app = create_app()
