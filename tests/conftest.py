"""Pytest configuration helpers for the Stagecraft test suite."""

import os
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

# Settings are cached on first import, select the testing profile before that
os.environ.setdefault("FASTAPI_ENV", "testing")

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from core.database.engine import Base  # noqa: E402
from core.database import models  # noqa: E402,F401


COMPONENT_SOURCE = '''
def scale_features(df, factor=1.0):
    return df * factor


def train_test_split(df, target_column, test_size=0.25):
    return df, df, df[target_column], df[target_column]
'''


@pytest_asyncio.fixture()
async def db_session():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", future=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(engine, expire_on_commit=False)
    async with session_maker() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def client():
    """TestClient with a fresh in-memory database per test."""
    from fastapi.testclient import TestClient

    from main import app

    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def component_payload():
    return {
        "name": "Scale Features",
        "description": "Multiply every feature by a constant",
        "code": COMPONENT_SOURCE,
        "language": "python",
        "stage": "stage2",
        "tags": ["scaling"],
        "inputs": [
            {"name": "df", "type": "DataFrame", "required": True},
            {"name": "factor", "type": "float", "default_value": 1.0},
        ],
        "output": {"type": "DataFrame", "description": "Scaled features"},
    }
