"""
Async database module for the component store.
"""

from .engine import (
    Base,
    build_engine,
    build_session_factory,
    close_db,
    create_tables,
    get_async_session,
    init_db,
)
from .models import Component
from .repository import BaseRepository, ComponentRepository, get_component_repository

__all__ = [
    "Base",
    "BaseRepository",
    "build_engine",
    "build_session_factory",
    "Component",
    "ComponentRepository",
    "close_db",
    "create_tables",
    "get_async_session",
    "get_component_repository",
    "init_db",
]
