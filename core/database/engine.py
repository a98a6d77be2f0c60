"""
Async Database Engine for FastAPI

Async database connectivity using SQLAlchemy 2.0+ for SQLite (aiosqlite)
and PostgreSQL (asyncpg). The engine and session factory live on
``app.state`` so each application instance owns its own connections.
"""

import logging
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from config import get_settings

logger = logging.getLogger(__name__)

# Base class for SQLAlchemy models
Base = declarative_base()


def build_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Create an async engine for ``database_url``.

    Args:
        database_url: Overrides ``DATABASE_URL`` from settings when given
    """
    settings = get_settings()
    url = database_url or settings.DATABASE_URL

    if url.startswith("sqlite"):
        # One shared connection so in-memory databases survive across sessions
        return create_async_engine(
            url,
            echo=settings.DB_ECHO,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False, "timeout": 30},
        )
    return create_async_engine(
        url,
        echo=settings.DB_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
        pool_recycle=3600,  # Recycle connections after 1 hour
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=True,
    )


async def init_db(app: FastAPI, database_url: Optional[str] = None) -> None:
    """
    Initialize async database connections.
    Stores the engine and session factory on ``app.state``.
    """
    engine = build_engine(database_url)
    app.state.db_engine = engine
    app.state.session_factory = build_session_factory(engine)

    logger.info(f"✅ Database engine initialized: {engine.url.drivername}")


async def close_db(app: FastAPI) -> None:
    """Close database connections and cleanup."""
    engine = getattr(app.state, "db_engine", None)

    if engine is not None:
        await engine.dispose()
        logger.info("✅ Async database connections closed")

    app.state.db_engine = None
    app.state.session_factory = None


async def get_async_session(
    session_factory: Optional[async_sessionmaker],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Get async database session for dependency injection.

    Yields:
        AsyncSession: Database session for async operations
    """
    if session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def create_tables(engine: AsyncEngine) -> None:
    """Create database tables from SQLAlchemy models."""
    # Registers the models on Base.metadata
    from . import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("✅ Database tables created/updated")


async def health_check(engine: Optional[AsyncEngine]) -> bool:
    """
    Check database connectivity for health checks.

    Returns:
        bool: True if database is accessible, False otherwise
    """
    if engine is None:
        return False

    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False
