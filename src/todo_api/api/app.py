"""
todo_api.api.app

FastAPI app factory for the task tracking service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Create the process-wide, read-only components once (JWT config, hasher) and
  initialize/dispose shared infrastructure (DB engine/session factory).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from todo_api import __version__
from todo_api.api.errors import register_error_handlers
from todo_api.api.routers.accounts import router as accounts_router
from todo_api.api.routers.auth import router as auth_router
from todo_api.api.routers.health import router as health_router
from todo_api.api.routers.tasks import router as tasks_router
from todo_api.auth.hashing import PasswordHasher
from todo_api.auth.jwt import JwtConfig
from todo_api.auth.middleware import PrincipalMiddleware
from todo_api.db.init_db import init_db
from todo_api.db.session import create_engine, create_sessionmaker
from todo_api.observability.logging import configure_logging, get_logger
from todo_api.observability.middleware import RequestContextMiddleware
from todo_api.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    jwt_cfg = JwtConfig.from_settings(settings)
    hasher = PasswordHasher(rounds=settings.password_hash_rounds)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically.
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Task Tracking API",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.jwt_cfg = jwt_cfg
    app.state.hasher = hasher

    # Last added runs first: request context wraps principal resolution.
    app.add_middleware(PrincipalMiddleware, cfg=jwt_cfg)
    app.add_middleware(RequestContextMiddleware)
    register_error_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(accounts_router)
    app.include_router(tasks_router)

    return app


# --- Module Notes -----------------------------------------------------------
# This file is intentionally small: app composition stays here; access decisions stay
# in `auth.policy` and the services.
