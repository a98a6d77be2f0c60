import pytest
from fastapi import FastAPI
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from core.database.engine import (
    close_db,
    create_tables,
    get_async_session,
    health_check,
    init_db,
)

MEMORY_URL = "sqlite+aiosqlite:///:memory:"


@pytest.mark.asyncio
async def test_each_app_owns_its_engine():
    first, second = FastAPI(), FastAPI()
    await init_db(first, MEMORY_URL)
    await init_db(second, MEMORY_URL)
    try:
        assert first.state.db_engine is not second.state.db_engine
        await create_tables(first.state.db_engine)

        async for session in get_async_session(first.state.session_factory):
            result = await session.execute(text("SELECT count(*) FROM components"))
            assert result.scalar() == 0

        async for session in get_async_session(second.state.session_factory):
            with pytest.raises(OperationalError):
                await session.execute(text("SELECT id FROM components"))
    finally:
        await close_db(first)
        await close_db(second)


@pytest.mark.asyncio
async def test_close_db_clears_app_state():
    app = FastAPI()
    await init_db(app, MEMORY_URL)
    assert await health_check(app.state.db_engine)

    await close_db(app)

    assert app.state.db_engine is None
    assert app.state.session_factory is None
    assert not await health_check(app.state.db_engine)


@pytest.mark.asyncio
async def test_session_requires_initialised_app():
    with pytest.raises(RuntimeError):
        async for _ in get_async_session(None):
            pass


def test_client_app_holds_engine_on_state(client):
    from main import app

    assert app.state.db_engine is not None
    assert app.state.session_factory is not None
