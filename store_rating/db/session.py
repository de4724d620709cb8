"""Database engine lifecycle and the per-request session dependency.

The engine (and its bounded connection pool) is built once at application
startup, kept on ``app.state`` and disposed at shutdown. Handlers never touch
the engine directly; they receive an ``AsyncSession`` through ``get_db``.
"""
import logging
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from store_rating.core.config import settings
from store_rating.models import Base

logger = logging.getLogger(__name__)


def build_engine(url: Optional[str] = None) -> AsyncEngine:
    url = url or settings.DATABASE_URL
    options = {"echo": settings.DEBUG, "future": True}
    if not url.startswith("sqlite"):
        # sqlite drivers pick their own pool class and reject these arguments
        options.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_pre_ping=True,
        )
    return create_async_engine(url, **options)


def build_sessionmaker(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ping(engine: AsyncEngine) -> bool:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database ping failed: {e}")
        return False


async def init_db(app: FastAPI) -> AsyncEngine:
    engine = build_engine()
    app.state.engine = engine
    app.state.sessionmaker = build_sessionmaker(engine)
    if settings.DB_CREATE_TABLES:
        await create_tables(engine)
        logger.info("Database tables ensured")
    return engine


async def close_db(app: FastAPI) -> None:
    engine: Optional[AsyncEngine] = getattr(app.state, "engine", None)
    if engine is not None:
        await engine.dispose()
        app.state.engine = None
        app.state.sessionmaker = None


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    session_factory = getattr(request.app.state, "sessionmaker", None)
    if session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    async with session_factory() as session:
        yield session
