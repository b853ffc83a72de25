"""Counter store primitives on SQLite."""

from datetime import date
from typing import Any
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from frontdesk.models import SequenceCounter
from frontdesk.models.enums import SequenceType
from frontdesk.services.sequences.counter_store import (
    LOCKED_INCREMENT_MAX_ATTEMPTS,
    get_counter,
    increment_counter,
    locked_increment,
    upsert_increment,
)

DAY = date(2025, 12, 12)


async def test_counter_absent_before_first_issue(session: AsyncSession) -> None:
    assert await get_counter(session, DAY, SequenceType.MEDICAL_RECORD) is None


async def test_upsert_increment_creates_then_advances(session: AsyncSession) -> None:
    values = [await upsert_increment(session, DAY, SequenceType.MEDICAL_RECORD) for _ in range(3)]
    await session.commit()

    assert values == [1, 2, 3]
    assert await get_counter(session, DAY, SequenceType.MEDICAL_RECORD) == 3


async def test_locked_increment_creates_then_advances(session: AsyncSession) -> None:
    values = [await locked_increment(session, DAY, SequenceType.REGISTRATION) for _ in range(3)]
    await session.commit()

    assert values == [1, 2, 3]
    assert await get_counter(session, DAY, SequenceType.REGISTRATION) == 3


async def test_strategies_share_the_same_row(session: AsyncSession) -> None:
    assert await upsert_increment(session, DAY, SequenceType.MEDICAL_RECORD) == 1
    assert await locked_increment(session, DAY, SequenceType.MEDICAL_RECORD) == 2
    assert await upsert_increment(session, DAY, SequenceType.MEDICAL_RECORD) == 3


async def test_keys_are_independent(session: AsyncSession) -> None:
    other_day = date(2025, 12, 13)

    assert await increment_counter(session, DAY, SequenceType.MEDICAL_RECORD) == 1
    assert await increment_counter(session, DAY, SequenceType.REGISTRATION) == 1
    assert await increment_counter(session, other_day, SequenceType.MEDICAL_RECORD) == 1
    assert await increment_counter(session, DAY, SequenceType.MEDICAL_RECORD) == 2

    assert await get_counter(session, other_day, SequenceType.REGISTRATION) is None


async def test_rollback_discards_increment(session_maker: async_sessionmaker[AsyncSession]) -> None:
    async with session_maker() as session:
        await upsert_increment(session, DAY, SequenceType.MEDICAL_RECORD)
        await session.commit()

    async with session_maker() as session:
        assert await upsert_increment(session, DAY, SequenceType.MEDICAL_RECORD) == 2
        await session.rollback()

    async with session_maker() as session:
        assert await get_counter(session, DAY, SequenceType.MEDICAL_RECORD) == 1


async def test_upsert_rejects_unsupported_dialect() -> None:
    session = MagicMock(spec=AsyncSession)
    session.get_bind.return_value.dialect.name = "oracle"

    with pytest.raises(ValueError, match="oracle"):
        await upsert_increment(session, DAY, SequenceType.MEDICAL_RECORD)
    session.execute.assert_not_awaited()


def _miss_lock_reads(session: AsyncSession, monkeypatch: pytest.MonkeyPatch, misses: int) -> list[Any]:
    """Make the first ``misses`` statements return no row, as if another transaction had not committed yet."""
    real_execute = session.execute
    calls: list[Any] = []

    async def execute(statement: Any, *args: Any, **kwargs: Any) -> Any:
        calls.append(statement)
        if len(calls) <= misses:
            empty = MagicMock()
            empty.scalars.return_value.first.return_value = None
            return empty
        return await real_execute(statement, *args, **kwargs)

    monkeypatch.setattr(session, "execute", execute)
    return calls


async def _commit_counter(session_maker: async_sessionmaker[AsyncSession], last_value: int) -> None:
    async with session_maker() as other:
        other.add(
            SequenceCounter(sequence_date=DAY, sequence_type=SequenceType.REGISTRATION.value, last_value=last_value)
        )
        await other.commit()


async def test_locked_increment_retries_after_losing_insert_race(
    session_maker: async_sessionmaker[AsyncSession], monkeypatch: pytest.MonkeyPatch
) -> None:
    # Another transaction created the row between our lock-read and our insert
    await _commit_counter(session_maker, 5)

    async with session_maker() as session:
        calls = _miss_lock_reads(session, monkeypatch, misses=1)
        assert await locked_increment(session, DAY, SequenceType.REGISTRATION) == 6
        await session.commit()

    assert len(calls) == 2
    async with session_maker() as session:
        assert await get_counter(session, DAY, SequenceType.REGISTRATION) == 6


async def test_locked_increment_gives_up_after_max_attempts(
    session_maker: async_sessionmaker[AsyncSession], monkeypatch: pytest.MonkeyPatch
) -> None:
    await _commit_counter(session_maker, 5)

    async with session_maker() as session:
        calls = _miss_lock_reads(session, monkeypatch, misses=LOCKED_INCREMENT_MAX_ATTEMPTS)
        with pytest.raises(IntegrityError):
            await locked_increment(session, DAY, SequenceType.REGISTRATION)
        await session.rollback()

    assert len(calls) == LOCKED_INCREMENT_MAX_ATTEMPTS
    async with session_maker() as session:
        assert await get_counter(session, DAY, SequenceType.REGISTRATION) == 5
