"""Dependency wiring — engine, per-request session, and service lookup.

Nothing here is module-global: the engine, session factory, and
:class:`UserService` live on ``app.state`` and are set up by
:func:`userapi.api.create_app` and its lifespan.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

from fastapi import FastAPI, Request
from sqlalchemy import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from userapi.core.database import Base
from userapi.dao.user_dao import UserDAO
from userapi.services.user_service import UserService

DEFAULT_DATABASE_URL = "postgresql+asyncpg://localhost/userapi"


def database_url_from_env() -> str:
    return os.environ.get("USERAPI_DATABASE_URL", DEFAULT_DATABASE_URL)


def build_user_service() -> UserService:
    """Default service graph: one UserService over one UserDAO."""
    return UserService(UserDAO())


def make_engine(database_url: str) -> AsyncEngine:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        if url.database in (None, "", ":memory:"):
            # in-memory databases live per connection
            return create_async_engine(url, poolclass=StaticPool)
        return create_async_engine(url)
    return create_async_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        pool_recycle=1800,
    )


async def init_database(app: FastAPI) -> async_sessionmaker[AsyncSession]:
    """Create the engine and session factory, then the schema. Called once at startup."""
    engine = make_engine(app.state.database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    app.state.engine = engine
    app.state.session_factory = async_sessionmaker(engine, expire_on_commit=False)
    return app.state.session_factory


async def dispose_database(app: FastAPI) -> None:
    """Dispose the async engine, closing all pooled connections."""
    engine: AsyncEngine | None = getattr(app.state, "engine", None)
    if engine is not None:
        await engine.dispose()
        app.state.engine = None
        app.state.session_factory = None


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a per-request session with automatic commit/rollback."""
    factory: async_sessionmaker[AsyncSession] | None = getattr(
        request.app.state, "session_factory", None
    )
    if factory is None:
        raise RuntimeError("database not initialised; is the app lifespan running?")
    async with factory() as session:
        async with session.begin():
            yield session


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service
