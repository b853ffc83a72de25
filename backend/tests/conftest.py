"""Shared fixtures: a fresh file-backed SQLite database per test."""

from collections.abc import AsyncIterator
from datetime import UTC, datetime
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlmodel import SQLModel

from frontdesk.db import build_engine, build_session_maker
from frontdesk.services.sequences import SequenceGenerator

# 12 Dec 2025, the day every fixed-date assertion in the suite refers to
DAY = datetime(2025, 12, 12, 9, 30, tzinfo=UTC)


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'frontdesk.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_maker(engine)


@pytest.fixture
async def session(session_maker: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    async with session_maker() as session:
        yield session


@pytest.fixture
def generator(session_maker: async_sessionmaker[AsyncSession]) -> SequenceGenerator:
    return SequenceGenerator(session_maker)
