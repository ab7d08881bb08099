"""Tests for engine lifecycle helpers."""

import pytest
from sqlalchemy import text

from ballot_api.core import database
from ballot_api.core.database import dispose_engine, get_engine, get_session_factory, init_engine


class TestEngineLifecycle:
    """Tests for init_engine / dispose_engine."""

    async def test_uninitialized_raises(self) -> None:
        await dispose_engine()
        with pytest.raises(RuntimeError):
            get_engine()
        with pytest.raises(RuntimeError):
            get_session_factory()

    async def test_init_and_dispose(self) -> None:
        engine = init_engine("sqlite+aiosqlite:///:memory:")
        try:
            assert get_engine() is engine
            async with get_session_factory()() as session:
                result = await session.execute(text("SELECT 1"))
                assert result.scalar_one() == 1
        finally:
            await dispose_engine()
        assert database._engine is None

    async def test_sqlite_foreign_keys_enabled(self) -> None:
        init_engine("sqlite+aiosqlite:///:memory:")
        try:
            async with get_engine().connect() as conn:
                result = await conn.execute(text("PRAGMA foreign_keys"))
                assert result.scalar_one() == 1
        finally:
            await dispose_engine()
