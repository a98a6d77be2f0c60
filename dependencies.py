"""
Dependency Injection for FastAPI

Common dependencies used across the application: database sessions,
repositories and configuration.
"""

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from config import Settings, get_settings
from core.database.engine import get_async_session
from core.database.repository import ComponentRepository, get_component_repository


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Database dependency that provides an async database session.
    Automatically handles session lifecycle.
    """
    factory = getattr(request.app.state, "session_factory", None)
    async for session in get_async_session(factory):
        yield session


def get_config() -> Settings:
    """Configuration dependency."""
    return get_settings()


async def get_component_repo(
    session: AsyncSession = Depends(get_db),
) -> ComponentRepository:
    return get_component_repository(session)

