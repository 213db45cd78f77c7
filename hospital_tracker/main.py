"""
Main FastAPI application entry point.
Configures the application, middleware, and includes routers.
"""
import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from . import models  # noqa: F401
from .auth.router import router as auth_router
from .auth.service import AuthService
from .clinics.router import router as clinics_router
from .config import Settings, get_settings
from .core.cache import ReferenceCache, build_redis_client
from .core.middleware import setup_middlewares
from .core.security import PasswordHasher, TokenCodec
from .database import Base, build_engine, build_session_factory
from .exceptions import register_exception_handlers
from .hospitals.router import router as hospitals_router
from .staff.router import router as staff_router
from .users.router import router as users_router

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application from explicit settings.

    Every shared collaborator (engine, session factory, password hasher, token
    codec, auth service and cache) is constructed here once and stored on
    app.state; nothing reads configuration from module globals.

    Args:
        settings: Application settings (loaded from the environment when omitted)

    Returns:
        FastAPI: The configured application
    """
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    engine = build_engine(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.app_name} {settings.app_version}")
        # Create database tables if they don't exist
        Base.metadata.create_all(bind=engine)
        yield
        logger.info(f"{settings.app_name} stopped")

    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant hospital, staff and clinic management API",
        version=settings.app_version,
        lifespan=lifespan,
    )

    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    token_codec = TokenCodec(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        default_ttl=timedelta(hours=settings.jwt_expire_hours),
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.auth_service = AuthService(token_codec, hasher)
    app.state.cache = ReferenceCache(build_redis_client(settings.redis_url), settings.cache_ttl_seconds)

    # Register exception handlers
    register_exception_handlers(app)

    # Configure CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Setup custom middleware
    setup_middlewares(app)

    # Include routers
    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(hospitals_router, prefix=API_PREFIX)
    app.include_router(users_router, prefix=API_PREFIX)
    app.include_router(clinics_router, prefix=API_PREFIX)
    app.include_router(staff_router, prefix=API_PREFIX)

    @app.get("/")
    def root():
        """
        Root endpoint.

        Returns:
            dict: Welcome message and API version
        """
        return {"message": f"Welcome to {settings.app_name}", "version": settings.app_version}

    @app.get("/health")
    def health_check():
        """
        Health check endpoint for monitoring.

        Returns:
            dict: Health status information
        """
        try:
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning(f"Health check: database unavailable: {type(e).__name__}")
            return {"status": "degraded", "database": "unavailable"}
        return {"status": "healthy", "database": "connected"}

    return app


def run() -> None:
    """Serve the API with uvicorn."""
    uvicorn.run("hospital_tracker.main:create_app", factory=True, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
